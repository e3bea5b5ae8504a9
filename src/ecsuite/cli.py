"""Command-line interface for ecsuite.

Example:
    >>> # From terminal:
    >>> # ecsuite --version
    >>> # ecsuite keys generate --out key.pem --key-size 384
    >>> # ecsuite keys inspect key.pem
    >>> # ecsuite keys import cert.pem --db keys.db
    >>> # ecsuite keys show <ski> --db keys.db
    >>> # ecsuite hash payload.bin
    >>> # ecsuite sign --key key.pem payload.bin
    >>> # ecsuite verify --key cert.pem --signature <base64> payload.bin
"""

import asyncio
import base64
import binascii
import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from ecsuite import __version__
from ecsuite.config import SuiteConfig
from ecsuite.crypto.keys import KeyMaterial
from ecsuite.crypto.suite import CryptoSuite
from ecsuite.errors import CryptoSuiteError
from ecsuite.keystore.sqlite import DEFAULT_DB_PATH, SQLiteKeyStore
from ecsuite.observability import configure_logging

app = typer.Typer(help="ecsuite CLI.")

keys_app = typer.Typer(help="EC key generation, inspection and storage.")
app.add_typer(keys_app, name="keys")

# Restrict private key file to owner read/write only
PRIVATE_KEY_FILE_MODE = 0o600

KEY_SIZE_OPTION = typer.Option(
    None,
    "--key-size",
    "-s",
    help="Key size in bits (256 or 384). Defaults to ECSUITE_KEY_SIZE or 256.",
)
HASH_ALGORITHM_OPTION = typer.Option(
    None,
    "--hash",
    help="Hash family (SHA2, SHA3, SM3). Defaults to ECSUITE_HASH_ALGORITHM or SHA2.",
)
DB_OPTION = typer.Option(
    Path(DEFAULT_DB_PATH),
    "--db",
    "-d",
    help="Path to the SQLite key store.",
)


def _build_suite(
    key_size: Optional[int],
    hash_algorithm: Optional[str],
    key_store: Optional[SQLiteKeyStore] = None,
) -> CryptoSuite:
    defaults = SuiteConfig.from_env()
    config = SuiteConfig(
        key_size=key_size if key_size is not None else defaults.key_size,
        hash_algorithm=hash_algorithm or defaults.hash_algorithm,
    )
    return CryptoSuite.from_config(config, key_store=key_store)


def _read_file(path: Path, what: str) -> bytes:
    if not path.exists():
        raise typer.BadParameter(f"{what} not found: {path}")
    return path.read_bytes()


def _key_summary(key: KeyMaterial) -> dict[str, object]:
    return {
        "ski": key.ski,
        "key_type": key.key_type.value,
        "curve": key.curve_name,
        "public_point": key.point.hex(),
    }


def _fail(error: CryptoSuiteError) -> typer.Exit:
    typer.echo(f"Error [{error.code}]: {error.message}", err=True)
    return typer.Exit(1)


@keys_app.command("generate")
def keys_generate(
    out: Annotated[
        Path,
        typer.Option(..., "--out", "-o", help="Output path for the private key PEM file."),
    ],
    key_size: Optional[int] = KEY_SIZE_OPTION,
) -> None:
    """Write a new EC key pair as PKCS#8 PEM (mode 0600) and print its SKI."""
    if out.exists() and out.is_dir():
        raise typer.BadParameter(f"Output path is a directory: {out}")
    try:
        suite = _build_suite(key_size, None)
    except CryptoSuiteError as e:
        raise _fail(e) from e
    out.parent.mkdir(parents=True, exist_ok=True)
    key = suite.generate_ephemeral_key()
    out.write_bytes(key.to_pem())
    try:
        out.chmod(PRIVATE_KEY_FILE_MODE)
    except OSError as exc:
        typer.echo(
            f"Warning: could not set file permissions to 0600: {exc}. "
            "Ensure the key file is not readable by others.",
            err=True,
        )
    typer.echo(f"Private key written to {out}")
    typer.echo(f"SKI: {key.ski}")


@keys_app.command("inspect")
def keys_inspect(
    pem_file: Annotated[Path, typer.Argument(help="PEM key or certificate file.")],
) -> None:
    """Show SKI, key type, curve and public point of a PEM key or certificate."""
    pem = _read_file(pem_file, "Key file")
    try:
        key = _build_suite(None, None).import_ephemeral_key(pem)
    except CryptoSuiteError as e:
        raise _fail(e) from e
    typer.echo(json.dumps(_key_summary(key), indent=2))


@keys_app.command("import")
def keys_import(
    pem_file: Annotated[Path, typer.Argument(help="PEM key or certificate file.")],
    db: Path = DB_OPTION,
) -> None:
    """Import a PEM key or certificate into the SQLite key store."""
    pem = _read_file(pem_file, "Key file")
    try:
        suite = _build_suite(None, None, key_store=SQLiteKeyStore(db))
        key = asyncio.run(suite.import_key(pem))
    except CryptoSuiteError as e:
        raise _fail(e) from e
    typer.echo(f"Imported {key.key_type.value} key {key.ski} into {db}")


@keys_app.command("show")
def keys_show(
    ski: Annotated[str, typer.Argument(help="Subject key identifier (hex).")],
    db: Path = DB_OPTION,
) -> None:
    """Look up a key in the SQLite key store by SKI."""
    try:
        suite = _build_suite(None, None, key_store=SQLiteKeyStore(db))
        key = asyncio.run(suite.get_key(ski))
    except CryptoSuiteError as e:
        raise _fail(e) from e
    if key is None:
        typer.echo(f"No key stored for {ski}", err=True)
        raise typer.Exit(1)
    typer.echo(json.dumps(_key_summary(key), indent=2))


@app.command("hash")
def hash_file(
    data_file: Annotated[Path, typer.Argument(help="File to hash.")],
    key_size: Optional[int] = KEY_SIZE_OPTION,
    hash_algorithm: Optional[str] = HASH_ALGORITHM_OPTION,
) -> None:
    """Print the hex digest of a file using the suite's hash function."""
    data = _read_file(data_file, "File")
    try:
        suite = _build_suite(key_size, hash_algorithm)
    except CryptoSuiteError as e:
        raise _fail(e) from e
    typer.echo(suite.hash(data).hex())


@app.command("sign")
def sign_file(
    key_file: Annotated[
        Path,
        typer.Option(..., "--key", "-k", help="Path to the private key PEM file."),
    ],
    data_file: Annotated[Path, typer.Argument(help="File to sign.")],
    hash_algorithm: Optional[str] = HASH_ALGORITHM_OPTION,
) -> None:
    """Hash a file and print a base64 DER low-S signature over the digest."""
    pem = _read_file(key_file, "Key file")
    data = _read_file(data_file, "File")
    try:
        key = _build_suite(None, None).import_ephemeral_key(pem)
        suite = _build_suite(key.curve.key_size, hash_algorithm)
        signature = suite.sign(key, suite.hash(data))
    except CryptoSuiteError as e:
        raise _fail(e) from e
    typer.echo(base64.b64encode(signature).decode("ascii"))


@app.command("verify")
def verify_file(
    key_file: Annotated[
        Path,
        typer.Option(..., "--key", "-k", help="Path to a PEM key or certificate."),
    ],
    signature_b64: Annotated[
        str,
        typer.Option(..., "--signature", help="Base64 DER signature."),
    ],
    data_file: Annotated[Path, typer.Argument(help="Signed file.")],
    hash_algorithm: Optional[str] = HASH_ALGORITHM_OPTION,
) -> None:
    """Verify a base64 DER signature over a file; exit code 1 if it is invalid."""
    pem = _read_file(key_file, "Key file")
    data = _read_file(data_file, "File")
    try:
        signature = base64.b64decode(signature_b64, validate=True)
    except binascii.Error as exc:
        raise typer.BadParameter(f"Invalid base64 signature: {exc}") from exc
    try:
        key = _build_suite(None, None).import_ephemeral_key(pem)
        suite = _build_suite(key.curve.key_size, hash_algorithm)
        valid = suite.verify(key, signature, data)
    except CryptoSuiteError as e:
        raise _fail(e) from e
    if not valid:
        typer.echo(f"Signature invalid: {data_file}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Signature valid: {data_file}")


def _version_callback(value: bool) -> None:
    """Print the version and exit when requested."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


VERSION_OPTION = typer.Option(
    False,
    "--version",
    help="Show ecsuite version and exit.",
    callback=_version_callback,
    is_eager=True,
)


@app.callback()
def cli(
    version: bool = VERSION_OPTION,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """ecsuite CLI entrypoint."""
    if verbose:
        configure_logging(log_level="DEBUG", force=True)


def main() -> None:
    """Run the ecsuite CLI."""
    app()


if __name__ == "__main__":
    main()
