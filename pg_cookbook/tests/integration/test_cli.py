from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

pytest.importorskip("typer")


def _run_cli(*args: str, check: bool = True, cwd: Path | None = None) -> subprocess.CompletedProcess[bytes]:
    command = [sys.executable, "-m", "pg_cookbook.cli.main", *args]
    env = os.environ.copy()
    env.pop("PG_COOKBOOK_KEY_PASSWORD", None)
    module_root = Path(__file__).resolve().parents[2] / "src"
    env["PYTHONPATH"] = (
        f"{module_root}{os.pathsep}{env['PYTHONPATH']}"
        if env.get("PYTHONPATH")
        else str(module_root)
    )
    return subprocess.run(
        command,
        check=check,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env=env,
        cwd=cwd,
    )


def test_cli_reports_version() -> None:
    result = _run_cli("version")
    assert result.stdout.decode("utf-8").strip().startswith("pg-cookbook")


def test_cli_key_filename() -> None:
    result = _run_cli("key-filename", "/etc/postgresql/server.crt")
    assert result.stdout.decode("utf-8").strip() == f"/etc/postgresql{os.sep}server.key"


def test_cli_role_json() -> None:
    result = _run_cli("role", "--json")
    payload = json.loads(result.stdout.decode("utf-8"))
    assert payload["name"] == "postgresql"
    assert payload["run_list"][0] == "recipe[apt]"
    assert payload["run_list"][-1] == "recipe[postgresql::backup_dir]"


def test_cli_generate_and_check_ec_key(tmp_path: Path) -> None:
    key_file = tmp_path / "server.key"
    _run_cli("gen-ec", "--curve", "secp384r1", "-o", str(key_file), cwd=tmp_path)
    assert key_file.stat().st_mode & 0o777 == 0o600

    check = _run_cli("check-key", str(key_file))
    assert check.returncode == 0

    public = _run_cli("pubkey", str(key_file))
    assert public.stdout.decode("ascii").startswith("-----BEGIN PUBLIC KEY-----")


def test_cli_encrypted_rsa_key(tmp_path: Path) -> None:
    key_file = tmp_path / "server.key"
    _run_cli("gen-rsa", "--bits", "1024", "--password", "s3cret", "-o", str(key_file), cwd=tmp_path)
    assert _run_cli("check-key", str(key_file), "--password", "s3cret").returncode == 0
    assert _run_cli("check-key", str(key_file), "--password", "nope", check=False).returncode == 2


def test_cli_rejects_bad_curve(tmp_path: Path) -> None:
    result = _run_cli("gen-ec", "--curve", "secp256k1", check=False, cwd=tmp_path)
    assert result.returncode == 1
    assert b"curve" in result.stderr


def test_cli_check_dhparam_missing(tmp_path: Path) -> None:
    result = _run_cli("check-dhparam", str(tmp_path / "dhparam.pem"), check=False)
    assert result.returncode == 2


def test_cli_reports_malformed_config(tmp_path: Path) -> None:
    config = tmp_path / "bad.yaml"
    config.write_text("keys: [unclosed\n", encoding="utf-8")
    result = _run_cli("--config", str(config), "version", check=False, cwd=tmp_path)
    assert result.returncode == 1
    assert b"Invalid configuration" in result.stderr


@pytest.mark.parametrize("command", [["gen-rsa", "--bits", "0"], ["gen-dhparam", "--bits", "0"]])
def test_cli_rejects_explicit_zero_bits(tmp_path: Path, command: list[str]) -> None:
    result = _run_cli(*command, check=False, cwd=tmp_path)
    assert result.returncode == 1
    assert b"Key length" in result.stderr


def test_cli_tightens_existing_key_file(tmp_path: Path) -> None:
    key_file = tmp_path / "server.key"
    key_file.write_text("old\n", encoding="ascii")
    key_file.chmod(0o644)
    _run_cli("gen-ec", "-o", str(key_file), cwd=tmp_path)
    assert key_file.stat().st_mode & 0o777 == 0o600
    assert _run_cli("check-key", str(key_file)).returncode == 0
