"""
Theurgy Status - Show what the next transaction would be anchored to.

Reads the configured signer's next nonce and the latest block reference,
the two values every built transaction depends on.
"""

from __future__ import annotations

import asyncio
import sys

import click

from ..pneuma.rpc import DEFAULT_RPC_URL, BlockReference, LedgerClient, LedgerError
from ..sigil.near import ConfigError, SignerIdentity, load_signer_identity


async def _lookup(client: LedgerClient, signer: SignerIdentity) -> tuple[int, BlockReference]:
    return await asyncio.gather(
        client.fetch_nonce(signer.account_id, signer.public_key),
        client.fetch_latest_block(),
    )


@click.command()
@click.option(
    "--rpc-url",
    envvar="NEAR_RPC_URL",
    default=DEFAULT_RPC_URL,
    help="NEAR RPC URL",
)
def status(rpc_url: str) -> None:
    """Show the signer's next nonce and the latest block."""
    try:
        signer = load_signer_identity()
        nonce, block = asyncio.run(_lookup(LedgerClient(rpc_url), signer))
    except (ConfigError, LedgerError) as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(exc.exit_code)

    click.echo(f"  Signer:       {signer.account_id}")
    click.echo(f"  Public Key:   {signer.public_key}")
    click.echo(f"  Next Nonce:   {nonce}")
    click.echo(f"  Latest Block: {block.hash} (#{block.height})")
    click.echo(f"  RPC:          {rpc_url}")
