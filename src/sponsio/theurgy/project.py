"""
Theurgy Project - Build a NEAR Catalog entry.

The entry is written under the signer's own SocialDB key, so the account
comes from the configured signer unless --account-id is given.
"""

from __future__ import annotations

import json
import sys
from typing import Optional

import click

from ..charta.project import ProjectFields, create_project_payload
from ..pneuma.actions import TRANSACTION_GAS, VIEW_GAS
from ..pneuma.rpc import DEFAULT_RPC_URL, LedgerClient, LedgerError
from ..pneuma.tx import build_transaction_sync
from ..sigil.near import ConfigError, load_signer_identity
from ..utils import MalformedParameter


@click.command()
@click.option("--title", required=True, help="Project name")
@click.option("--description", required=True, help="Project description")
@click.option("--categories", required=True, help="Comma separated categories")
@click.option("--oneliner", default="", help="One-line pitch")
@click.option("--logo", default="", help="Logo URL")
@click.option("--website", default="", help="Website URL")
@click.option("--twitter", default="", help="Twitter URL")
@click.option("--medium", default="", help="Medium URL")
@click.option("--discord", default="", help="Discord URL")
@click.option("--whitepaper", default="", help="Whitepaper URL")
@click.option("--account-id", default=None, help="Catalog owner (default: configured signer)")
@click.option("--view-only", is_flag=True, help="Print the call payload instead of a transaction")
@click.option("--deadline", type=float, default=None, help="Seconds allowed for nonce/block lookup")
@click.option(
    "--rpc-url",
    envvar="NEAR_RPC_URL",
    default=DEFAULT_RPC_URL,
    help="NEAR RPC URL",
)
def project(
    title: str,
    description: str,
    categories: str,
    oneliner: str,
    logo: str,
    website: str,
    twitter: str,
    medium: str,
    discord: str,
    whitepaper: str,
    account_id: Optional[str],
    view_only: bool,
    deadline: Optional[float],
    rpc_url: str,
) -> None:
    """Build a NEAR Catalog project entry (social.near set)."""
    fields = ProjectFields(
        title=title,
        description=description,
        categories=categories,
        oneliner=oneliner,
        logo=logo,
        website=website,
        twitter=twitter,
        medium=medium,
        discord=discord,
        whitepaper=whitepaper,
    )

    try:
        signer = None
        if account_id is None or not view_only:
            signer = load_signer_identity()
            account_id = account_id or signer.account_id

        payload = create_project_payload(
            account_id, fields, gas=VIEW_GAS if view_only else TRANSACTION_GAS
        )
        if view_only:
            result = payload.to_dict()
        else:
            envelope = build_transaction_sync(
                LedgerClient(rpc_url),
                signer,
                payload.contract_name,
                [payload.to_action()],
                deadline=deadline,
            )
            result = envelope.to_dict()
    except (MalformedParameter, ConfigError, LedgerError) as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(exc.exit_code)

    click.echo(json.dumps(result, indent=2, ensure_ascii=False))
