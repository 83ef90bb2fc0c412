"""
Theurgy View - Call a read-only contract method.
"""

from __future__ import annotations

import asyncio
import json
import sys

import click

from ..pneuma.rpc import DEFAULT_RPC_URL, LedgerClient, LedgerError


@click.command()
@click.argument("account")
@click.argument("method")
@click.option("--args", "args_json", default="{}", help="Method args as JSON object")
@click.option(
    "--rpc-url",
    envvar="NEAR_RPC_URL",
    default=DEFAULT_RPC_URL,
    help="NEAR RPC URL",
)
def view(account: str, method: str, args_json: str, rpc_url: str) -> None:
    """Call view METHOD on contract ACCOUNT and print the JSON result."""
    try:
        args_json.encode("utf-8")
        args = json.loads(args_json)
        if not isinstance(args, dict):
            raise ValueError("Args must be a JSON object")
    except (json.JSONDecodeError, ValueError) as exc:
        click.secho(f"ERROR: Invalid args: {exc}", fg="red", err=True)
        sys.exit(1)

    client = LedgerClient(rpc_url)
    try:
        result = asyncio.run(client.call_view_json(account, method, args))
    except LedgerError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(exc.exit_code)

    click.echo(json.dumps(result, indent=2, ensure_ascii=False))
