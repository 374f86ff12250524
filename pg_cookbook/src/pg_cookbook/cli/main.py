"""Typer-based command line interface for the cookbook helpers."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

import click
import typer
from cryptography.hazmat.primitives.asymmetric import rsa

from ..config import AppConfig, dump_default_config, load_config
from ..crypto import (
    dhparam_pem,
    dhparam_pem_valid,
    encrypt_ec_key,
    encrypt_rsa_key,
    gen_dhparam,
    gen_ec_priv_key,
    gen_ec_pub_key,
    gen_rsa_priv_key,
    gen_rsa_pub_key,
    get_key_filename,
    load_private_key,
    priv_key_file_valid,
    private_pem,
)
from ..exceptions import CookbookError
from ..logging import configure_logging, get_logger
from ..paths import runtime_config_dir
from ..role import load_role

app = typer.Typer(help="PostgreSQL cookbook helpers")
log = get_logger("pg_cookbook.cli")

_PASSWORD_ENV = "PG_COOKBOOK_KEY_PASSWORD"


@app.callback()
def main(ctx: typer.Context, config: Optional[Path] = typer.Option(None, "--config", metavar="PATH")) -> None:
    try:
        ctx.obj = load_config(config)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    configure_logging(ctx.obj.logging.normalized_level(), json_output=ctx.obj.logging.json_output)


def _config() -> AppConfig:
    return click.get_current_context().obj


def _emit(text: str, output: Optional[Path], *, private: bool = False) -> None:
    if output is None:
        typer.echo(text, nl=not text.endswith("\n"))
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    mode = 0o600 if private else 0o644
    fd = os.open(output, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    # an existing file keeps its old mode through O_CREAT
    if private:
        os.fchmod(fd, mode)
    with os.fdopen(fd, "w", encoding="ascii") as handle:
        handle.write(text)
    log.info("material_written", path=str(output), private=private)
    typer.echo(f"Wrote {output}", err=True)


def _fail(exc: Exception) -> typer.Exit:
    typer.echo(f"Error: {exc}", err=True)
    return typer.Exit(code=1)


@app.command("key-filename")
def key_filename(cert: str = typer.Argument(..., help="Certificate file path")) -> None:
    """Print the key file path matching a certificate path"""
    typer.echo(get_key_filename(cert))


@app.command("gen-rsa")
def gen_rsa(
    bits: Optional[int] = typer.Option(None, "--bits", help="Key length (power of 2, >= 1024)"),
    password: Optional[str] = typer.Option(None, "--password", envvar=_PASSWORD_ENV, help="Protect the key"),
    cipher: Optional[str] = typer.Option(None, "--cipher", help="OpenSSL cipher used with --password"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write the private key here"),
) -> None:
    """Generate an RSA private key"""
    defaults = _config().keys
    try:
        key = gen_rsa_priv_key(defaults.rsa_key_length if bits is None else bits)
        if password is None:
            pem = private_pem(key)
        else:
            pem = encrypt_rsa_key(key, password, defaults.cipher if cipher is None else cipher)
    except (CookbookError, ValueError, TypeError) as exc:
        raise _fail(exc) from exc
    _emit(pem, output, private=True)


@app.command("gen-ec")
def gen_ec(
    curve: Optional[str] = typer.Option(None, "--curve", help="prime256v1|secp384r1|secp521r1"),
    password: Optional[str] = typer.Option(None, "--password", envvar=_PASSWORD_ENV, help="Protect the key"),
    cipher: Optional[str] = typer.Option(None, "--cipher", help="OpenSSL cipher used with --password"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write the private key here"),
) -> None:
    """Generate an EC private key"""
    defaults = _config().keys
    try:
        key = gen_ec_priv_key(defaults.curve if curve is None else curve)
        if password is None:
            pem = private_pem(key)
        else:
            pem = encrypt_ec_key(key, password, defaults.cipher if cipher is None else cipher)
    except (CookbookError, ValueError, TypeError) as exc:
        raise _fail(exc) from exc
    _emit(pem, output, private=True)


@app.command("gen-dhparam")
def gen_dhparam_cmd(
    bits: Optional[int] = typer.Option(None, "--bits", help="Prime length (power of 2, >= 1024)"),
    generator: Optional[int] = typer.Option(None, "--generator", help="2 or 5"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write dhparam.pem here"),
) -> None:
    """Generate Diffie-Hellman parameters (slow for large primes)"""
    defaults = _config().dhparam
    try:
        parameters = gen_dhparam(
            defaults.key_length if bits is None else bits,
            defaults.generator if generator is None else generator,
        )
    except (CookbookError, ValueError, TypeError) as exc:
        raise _fail(exc) from exc
    _emit(dhparam_pem(parameters), output)


@app.command("pubkey")
def pubkey(
    key: str = typer.Argument(..., help="Private key path or PEM content"),
    password: Optional[str] = typer.Option(None, "--password", envvar=_PASSWORD_ENV),
    output: Optional[Path] = typer.Option(None, "-o", "--output"),
) -> None:
    """Print the public key of an RSA or EC private key"""
    try:
        loaded = load_private_key(key, password)
        if isinstance(loaded, rsa.RSAPrivateKey):
            pem = gen_rsa_pub_key(key, password)
        else:
            pem = gen_ec_pub_key(key, password)
    except (CookbookError, ValueError, TypeError) as exc:
        raise _fail(exc) from exc
    _emit(pem, output)


@app.command("check-key")
def check_key(
    key: str = typer.Argument(..., help="Private key path or PEM content"),
    password: Optional[str] = typer.Option(None, "--password", envvar=_PASSWORD_ENV),
) -> None:
    """Exit 0 when KEY is a private key, 2 otherwise"""
    ok = priv_key_file_valid(key, password)
    typer.echo("Private key OK" if ok else "Not a private key")
    raise typer.Exit(code=0 if ok else 2)


@app.command("check-dhparam")
def check_dhparam(path: Path = typer.Argument(..., help="dhparam.pem path")) -> None:
    """Exit 0 when PATH holds valid DH parameters, 2 otherwise"""
    ok = dhparam_pem_valid(path)
    typer.echo("DH parameters OK" if ok else "Invalid DH parameters")
    raise typer.Exit(code=0 if ok else 2)


@app.command("role")
def role(
    path: Optional[Path] = typer.Option(None, "--path", exists=True, readable=True, help="Role document"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
) -> None:
    """Show the run_list declared by a role"""
    try:
        document = load_role(path)
    except CookbookError as exc:
        raise _fail(exc) from exc
    if as_json:
        payload = {"name": document.name, "description": document.description, "run_list": document.entries()}
        typer.echo(json.dumps(payload, indent=2))
        return
    typer.echo(f"{document.name}: {document.description}")
    for position, entry in enumerate(document.entries(), start=1):
        typer.echo(f"{position:>3} {entry}")


@app.command("config-init")
def config_init(
    target: Path = typer.Option(runtime_config_dir() / "config.yaml", "--target", help="Where to write the defaults"),
) -> None:
    dump_default_config(target)
    typer.echo(f"Default configuration written to {target}")


@app.command()
def version() -> None:
    from ..version import __version__

    typer.echo(f"pg-cookbook {__version__}")


if __name__ == "__main__":  # pragma: no cover
    app()
