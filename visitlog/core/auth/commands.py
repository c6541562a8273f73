"""CLI command for producing an ADMIN_PASSWORD_SECRET value.

Usage:
    visitlog-generate-secret                  # random 384-bit passphrase
    visitlog-generate-secret "my passphrase"  # reuse your own

Installed as a console script rather than a `flask` subcommand: the app
factory refuses to start until the secret exists.
"""

from __future__ import annotations

import secrets

import click

from visitlog.core.auth.constants import (
    DEFAULT_SCRYPT_N,
    DEFAULT_SCRYPT_P,
    DEFAULT_SCRYPT_R,
    MIN_PASSPHRASE_LENGTH,
)
from visitlog.core.auth.credential import derive_secret


@click.command("generate-secret")
@click.argument("passphrase", required=False)
@click.option("--n", "n", type=int, default=DEFAULT_SCRYPT_N, show_default=True, help="scrypt cost factor")
@click.option("--r", "r", type=int, default=DEFAULT_SCRYPT_R, show_default=True, help="scrypt block size")
@click.option("--p", "p", type=int, default=DEFAULT_SCRYPT_P, show_default=True, help="scrypt parallelism")
def generate_secret_command(passphrase: str | None, n: int, r: int, p: int):
    """Print a passphrase and the matching ADMIN_PASSWORD_SECRET."""
    if passphrase is None:
        passphrase = secrets.token_urlsafe(48)
        click.echo("Generated random 384-bit passphrase. Supply your own as an argument to reuse a secret.")
    elif len(passphrase) < MIN_PASSPHRASE_LENGTH:
        raise click.BadParameter(
            f"passphrase must be at least {MIN_PASSPHRASE_LENGTH} characters", param_hint="PASSPHRASE"
        )

    secret = derive_secret(passphrase, n=n, r=r, p=p)
    click.echo("Passphrase:")
    click.echo(passphrase)
    click.echo("\nExport this as ADMIN_PASSWORD_SECRET:")
    click.echo(secret)
