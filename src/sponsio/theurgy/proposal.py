"""
Theurgy Proposal - Build a sponsorship proposal for a portal.

With --view-only, prints the add_proposal call payload for a wallet to
turn into a transaction. Otherwise looks up the signer's nonce and the
latest block and prints a complete unsigned transaction.
"""

from __future__ import annotations

import json
import sys
from typing import Optional

import click

from ..charta.proposal import PORTALS, ProposalParams, create_proposal_payload, get_portal
from ..pneuma.actions import TRANSACTION_GAS, VIEW_GAS
from ..pneuma.rpc import DEFAULT_RPC_URL, LedgerClient, LedgerError
from ..pneuma.tx import build_transaction_sync
from ..sigil.near import ConfigError, load_signer_identity
from ..utils import MalformedParameter


@click.command()
@click.argument("portal_name", metavar="PORTAL", type=click.Choice(sorted(PORTALS)))
@click.option("--title", required=True, help="Proposal title")
@click.option("--description", required=True, help="Proposal description")
@click.option("--category", required=True, help="Proposal category")
@click.option("--summary", required=True, help="Short summary")
@click.option("--amount", required=True, help="Requested sponsorship amount (USD)")
@click.option("--token", required=True, help="Currency the sponsorship is paid in")
@click.option("--receiver", required=True, help="Account receiving the funds")
@click.option("--supervisor", default=None, help="Supervisor account")
@click.option("--linked-rfp", default=None, help="Linked RFP (infrastructure only)")
@click.option("--view-only", is_flag=True, help="Print the call payload instead of a transaction")
@click.option("--deadline", type=float, default=None, help="Seconds allowed for nonce/block lookup")
@click.option(
    "--rpc-url",
    envvar="NEAR_RPC_URL",
    default=DEFAULT_RPC_URL,
    help="NEAR RPC URL",
)
def proposal(
    portal_name: str,
    title: str,
    description: str,
    category: str,
    summary: str,
    amount: str,
    token: str,
    receiver: str,
    supervisor: Optional[str],
    linked_rfp: Optional[str],
    view_only: bool,
    deadline: Optional[float],
    rpc_url: str,
) -> None:
    """
    Build a sponsorship proposal for PORTAL.

    Field values may be percent-encoded.
    """
    portal = get_portal(portal_name)
    params = ProposalParams(
        title=title,
        description=description,
        summary=summary,
        requested_sponsorship_amount=amount,
        requested_sponsorship_token=token,
        receiver_account=receiver,
        category=category,
        supervisor=supervisor,
        linked_rfp=linked_rfp,
    )

    try:
        payload = create_proposal_payload(
            params, portal, gas=VIEW_GAS if view_only else TRANSACTION_GAS
        )
        if view_only:
            result = payload.to_dict()
        else:
            signer = load_signer_identity()
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
