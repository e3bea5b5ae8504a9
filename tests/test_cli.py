"""Tests for the ecsuite CLI."""

import base64
import json
import re
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ecsuite import __version__
from ecsuite.cli import app
from ecsuite.config import ENV_HASH_ALGORITHM, ENV_KEY_SIZE
from ecsuite.crypto.pem import decode_pem
from ecsuite.crypto.signatures import Signature

# ANSI escape sequence pattern for stripping colors from output
ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return ANSI_ESCAPE_PATTERN.sub("", text)


@pytest.fixture(autouse=True)
def _clean_suite_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ECSUITE_* settings from the outer environment out of CLI tests."""
    monkeypatch.delenv(ENV_KEY_SIZE, raising=False)
    monkeypatch.delenv(ENV_HASH_ALGORITHM, raising=False)


@pytest.fixture
def runner() -> CliRunner:
    """Typer CLI runner."""
    return CliRunner()


@pytest.fixture
def key_file(tmp_path: Path, runner: CliRunner) -> Path:
    """P-256 private key written by `keys generate`."""
    out = tmp_path / "key.pem"
    result = runner.invoke(app, ["keys", "generate", "--out", str(out)])
    assert result.exit_code == 0, result.output
    return out


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    """File to hash and sign."""
    path = tmp_path / "payload.bin"
    path.write_bytes(b"abc")
    return path


class TestCliVersion:
    """Tests for CLI version command."""

    def test_version_flag(self, runner: CliRunner) -> None:
        """Ensure --version prints the package version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert result.stdout.strip() == __version__


class TestCliHelp:
    """Tests for CLI help output."""

    def test_help_displays_commands(self, runner: CliRunner) -> None:
        """Ensure --help shows available commands."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        for command in ("keys", "hash", "sign", "verify"):
            assert command in output

    def test_keys_help(self, runner: CliRunner) -> None:
        """Ensure keys --help lists the key subcommands."""
        result = runner.invoke(app, ["keys", "--help"])

        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        for command in ("generate", "inspect", "import", "show"):
            assert command in output


class TestKeysGenerate:
    """Tests for keys generate."""

    def test_writes_private_key_with_owner_only_mode(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        """The key file is PKCS#8 PEM with mode 0600 and the SKI is printed."""
        out = tmp_path / "nested" / "key.pem"
        result = runner.invoke(app, ["keys", "generate", "--out", str(out)])

        assert result.exit_code == 0
        key = decode_pem(out.read_bytes())
        assert key.curve_name == "secp256r1"
        assert f"SKI: {key.ski}" in result.stdout
        assert out.stat().st_mode & 0o777 == 0o600

    def test_key_size_option(self, runner: CliRunner, tmp_path: Path) -> None:
        """--key-size 384 generates a P-384 key."""
        out = tmp_path / "key.pem"
        result = runner.invoke(app, ["keys", "generate", "--out", str(out), "--key-size", "384"])

        assert result.exit_code == 0
        assert decode_pem(out.read_bytes()).curve_name == "secp384r1"

    def test_key_size_from_environment(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """ECSUITE_KEY_SIZE supplies the default key size."""
        monkeypatch.setenv(ENV_KEY_SIZE, "384")
        out = tmp_path / "key.pem"
        result = runner.invoke(app, ["keys", "generate", "--out", str(out)])

        assert result.exit_code == 0
        assert decode_pem(out.read_bytes()).curve_name == "secp384r1"

    def test_invalid_key_size(self, runner: CliRunner, tmp_path: Path) -> None:
        """Unsupported key sizes exit with code 1 and the error code."""
        out = tmp_path / "key.pem"
        result = runner.invoke(app, ["keys", "generate", "--out", str(out), "--key-size", "521"])

        assert result.exit_code == 1
        assert "ecsuite:config/invalid_key_size" in result.output
        assert not out.exists()

    def test_out_is_directory(self, runner: CliRunner, tmp_path: Path) -> None:
        """A directory output path is a usage error."""
        result = runner.invoke(app, ["keys", "generate", "--out", str(tmp_path)])

        assert result.exit_code != 0


class TestKeysInspect:
    """Tests for keys inspect."""

    def test_inspect_private_key(self, runner: CliRunner, key_file: Path) -> None:
        """Inspect prints the SKI, key type and curve as JSON."""
        result = runner.invoke(app, ["keys", "inspect", str(key_file)])

        assert result.exit_code == 0
        summary = json.loads(result.stdout)
        key = decode_pem(key_file.read_bytes())
        assert summary["ski"] == key.ski
        assert summary["key_type"] == "ECKeyPair"
        assert summary["curve"] == "secp256r1"
        assert summary["public_point"] == key.point.hex()

    def test_inspect_certificate(
        self, runner: CliRunner, tmp_path: Path, certificate_pem: bytes
    ) -> None:
        """Certificates inspect as ECPublic keys."""
        path = tmp_path / "cert.pem"
        path.write_bytes(certificate_pem)
        result = runner.invoke(app, ["keys", "inspect", str(path)])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["key_type"] == "ECPublic"

    def test_inspect_rsa_key(
        self, runner: CliRunner, tmp_path: Path, rsa_private_pem: bytes
    ) -> None:
        """Non-EC keys are reported as unrecognized."""
        path = tmp_path / "rsa.pem"
        path.write_bytes(rsa_private_pem)
        result = runner.invoke(app, ["keys", "inspect", str(path)])

        assert result.exit_code == 1
        assert "ecsuite:key/unrecognized_format" in result.output

    def test_inspect_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Missing files are a usage error."""
        result = runner.invoke(app, ["keys", "inspect", str(tmp_path / "missing.pem")])

        assert result.exit_code != 0
        assert "not found" in strip_ansi(result.output)


class TestKeysImportAndShow:
    """Tests for keys import and keys show against a SQLite store."""

    def test_import_then_show(self, runner: CliRunner, tmp_path: Path, key_file: Path) -> None:
        """Imported keys can be looked up by SKI."""
        db = tmp_path / "keys.db"
        ski = decode_pem(key_file.read_bytes()).ski

        imported = runner.invoke(app, ["keys", "import", str(key_file), "--db", str(db)])
        assert imported.exit_code == 0
        assert ski in imported.stdout

        shown = runner.invoke(app, ["keys", "show", ski, "--db", str(db)])
        assert shown.exit_code == 0
        assert json.loads(shown.stdout)["ski"] == ski

    def test_show_unknown_ski(self, runner: CliRunner, tmp_path: Path) -> None:
        """Unknown SKIs exit with code 1."""
        result = runner.invoke(app, ["keys", "show", "00" * 32, "--db", str(tmp_path / "k.db")])

        assert result.exit_code == 1
        assert "No key stored" in result.output


class TestHashSignVerify:
    """Tests for hash, sign and verify."""

    def test_hash(self, runner: CliRunner, data_file: Path) -> None:
        """hash prints the SHA2-256 hex digest by default."""
        result = runner.invoke(app, ["hash", str(data_file)])

        assert result.exit_code == 0
        assert result.stdout.strip() == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_hash_options(self, runner: CliRunner, data_file: Path) -> None:
        """--hash and --key-size select the digest."""
        result = runner.invoke(
            app, ["hash", str(data_file), "--hash", "SHA3", "--key-size", "384"]
        )

        assert result.exit_code == 0
        assert len(result.stdout.strip()) == 96

    def test_hash_unsupported_pair(self, runner: CliRunner, data_file: Path) -> None:
        """Unsupported hash/size pairs exit with code 1."""
        result = runner.invoke(app, ["hash", str(data_file), "--hash", "SM3", "--key-size", "384"])

        assert result.exit_code == 1
        assert "unsupported_hash_key_size" in result.output

    def test_sign_then_verify(self, runner: CliRunner, key_file: Path, data_file: Path) -> None:
        """A signature produced by sign is accepted by verify."""
        signed = runner.invoke(app, ["sign", "--key", str(key_file), str(data_file)])
        assert signed.exit_code == 0
        signature_b64 = signed.stdout.strip()
        Signature.from_der(base64.b64decode(signature_b64))

        verified = runner.invoke(
            app,
            ["verify", "--key", str(key_file), "--signature", signature_b64, str(data_file)],
        )
        assert verified.exit_code == 0
        assert "Signature valid" in verified.stdout

    def test_verify_tampered_file(
        self, runner: CliRunner, key_file: Path, data_file: Path, tmp_path: Path
    ) -> None:
        """Signatures do not verify over different content."""
        signed = runner.invoke(app, ["sign", "-k", str(key_file), str(data_file)])
        other = tmp_path / "other.bin"
        other.write_bytes(b"abd")

        result = runner.invoke(
            app, ["verify", "-k", str(key_file), "--signature", signed.stdout.strip(), str(other)]
        )
        assert result.exit_code == 1
        assert "Signature invalid" in result.output

    def test_verify_high_s_signature(
        self, runner: CliRunner, key_file: Path, data_file: Path
    ) -> None:
        """High-S signatures are rejected by verify."""
        signed = runner.invoke(app, ["sign", "-k", str(key_file), str(data_file)])
        low = Signature.from_der(base64.b64decode(signed.stdout.strip()))
        order = decode_pem(key_file.read_bytes()).curve.order
        high = base64.b64encode(Signature(r=low.r, s=order - low.s).to_der()).decode("ascii")

        result = runner.invoke(
            app, ["verify", "-k", str(key_file), "--signature", high, str(data_file)]
        )
        assert result.exit_code == 1

    def test_verify_invalid_base64(
        self, runner: CliRunner, key_file: Path, data_file: Path
    ) -> None:
        """Signatures that are not base64 are a usage error."""
        result = runner.invoke(
            app, ["verify", "-k", str(key_file), "--signature", "@@@", str(data_file)]
        )
        assert result.exit_code != 0
        assert "Invalid base64 signature" in strip_ansi(result.output)

    def test_sign_with_p384_key(self, runner: CliRunner, tmp_path: Path, data_file: Path) -> None:
        """The signing suite follows the key's curve."""
        key_path = tmp_path / "p384.pem"
        runner.invoke(app, ["keys", "generate", "-o", str(key_path), "-s", "384"])

        signed = runner.invoke(app, ["sign", "-k", str(key_path), str(data_file)])
        assert signed.exit_code == 0
        verified = runner.invoke(
            app,
            ["verify", "-k", str(key_path), "--signature", signed.stdout.strip(), str(data_file)],
        )
        assert verified.exit_code == 0
