"""SQLite-backed KeyStore (persistent, file-based).

Keys are stored as PEM, one row per ``(ski, kind)`` where kind is ``priv`` or
``pub``. Storing a private key also stores its public half, so a later lookup
by SKI finds the public key even if the private row is removed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from ecsuite.crypto.keys import KeyMaterial
from ecsuite.crypto.pem import decode_pem
from ecsuite.observability import get_logger

logger = get_logger(__name__)

DEFAULT_DB_PATH = "ecsuite_keys.db"
KEYS_TABLE = "keys"

KIND_PRIVATE = "priv"
KIND_PUBLIC = "pub"


class SQLiteKeyStore:
    """SQLite-backed KeyStore; keys persist across process restarts."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    async def _ensure_table(self, conn: aiosqlite.Connection) -> None:
        await conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {KEYS_TABLE} (
                ski TEXT NOT NULL,
                kind TEXT NOT NULL,
                curve TEXT NOT NULL,
                pem TEXT NOT NULL,
                created_at TEXT NOT NULL,
                PRIMARY KEY (ski, kind)
            )
            """
        )
        await conn.commit()

    async def put_key(self, key: KeyMaterial) -> None:
        ski = key.ski
        created_at = datetime.now(timezone.utc).isoformat()
        public_pem = key.public_key().to_pem().decode("ascii")
        rows = [(ski, KIND_PUBLIC, key.curve_name, public_pem, created_at)]
        if key.is_private:
            private_pem = key.to_pem().decode("ascii")
            rows.append((ski, KIND_PRIVATE, key.curve_name, private_pem, created_at))
        async with aiosqlite.connect(self._db_path) as conn:
            await self._ensure_table(conn)
            await conn.executemany(
                f"""
                INSERT OR REPLACE INTO {KEYS_TABLE} (ski, kind, curve, pem, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                rows,
            )
            await conn.commit()
        logger.debug("ecsuite.keystore.sqlite.put", ski=ski, kinds=[row[1] for row in rows])

    async def get_key(self, ski: str) -> KeyMaterial | None:
        async with aiosqlite.connect(self._db_path) as conn:
            await self._ensure_table(conn)
            cursor = await conn.execute(
                f"""
                SELECT kind, pem FROM {KEYS_TABLE}
                WHERE ski = ?
                ORDER BY CASE kind WHEN '{KIND_PRIVATE}' THEN 0 ELSE 1 END
                LIMIT 1
                """,
                (ski,),
            )
            row = await cursor.fetchone()
        if row is None:
            return None
        kind, pem = row
        key = decode_pem(pem)
        logger.debug("ecsuite.keystore.sqlite.get", ski=ski, kind=kind)
        return key

    async def delete_key(self, ski: str) -> bool:
        async with aiosqlite.connect(self._db_path) as conn:
            await self._ensure_table(conn)
            cursor = await conn.execute(f"DELETE FROM {KEYS_TABLE} WHERE ski = ?", (ski,))
            await conn.commit()
            return (cursor.rowcount or 0) > 0

    async def list_skis(self) -> list[str]:
        async with aiosqlite.connect(self._db_path) as conn:
            await self._ensure_table(conn)
            cursor = await conn.execute(f"SELECT DISTINCT ski FROM {KEYS_TABLE} ORDER BY ski")
            rows = await cursor.fetchall()
        return [row[0] for row in rows]
