"""
Sponsio CLI

Command-line interface for building NEAR sponsorship proposals and
NEAR Catalog entries as unsigned transactions.

Sponsio never signs or broadcasts. It prints either a call payload
(--view-only) or a full unsigned transaction for a wallet to sign.

Commands:
  proposal  - Build an add_proposal payload / transaction for a portal
  project   - Build a NEAR Catalog entry payload / transaction
  view      - Call a read-only contract method
  status    - Show signer nonce and latest block
  whoami    - Show the configured signer
"""

from __future__ import annotations

import logging
import sys

import click

from .sigil.near import ConfigError, load_signer_identity


# ============ Constants ============

VERSION = "1.0.0"


# ============ Banner ============


def _print_banner() -> None:
    click.echo(
        click.style("  ◆ ", fg="cyan")
        + click.style("S P O N S I O", fg="bright_white", bold=True)
        + click.style(f"  v{VERSION}", dim=True)
    )
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="sponsio")
@click.option("--verbose", "-v", is_flag=True, help="Log RPC traffic to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Sponsio: NEAR proposal & project transaction builder."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .theurgy.proposal import proposal
from .theurgy.project import project
from .theurgy.view import view
from .theurgy.status import status

cli.add_command(proposal)
cli.add_command(project)
cli.add_command(view)
cli.add_command(status)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show the configured signer identity."""
    try:
        signer = load_signer_identity()
    except ConfigError as exc:
        click.echo(f"No signer configured: {exc}")
        click.echo("Set BITTE_KEY in ~/.sponsio/.env.")
        sys.exit(exc.exit_code)
    click.echo(f"Account:    {signer.account_id}")
    click.echo(f"Public Key: {signer.public_key}")


# ============ Entry Points ============


def main() -> None:
    """Sponsio CLI entry point."""
    # Ensure UTF-8 output on Windows
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass  # Fallback: non-tty
    cli()


if __name__ == "__main__":
    main()
