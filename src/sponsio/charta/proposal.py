"""
Proposal payloads for the NEAR sponsorship portals.

DevHub and the Events committee take V0 proposal bodies; the
Infrastructure committee takes V1 bodies, which add a linked RFP and
carry the category as a label. The caller picks the variant explicitly.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..pneuma.actions import NO_DEPOSIT, VIEW_GAS, CallPayload
from ..spec.schemas import PROPOSAL_BODY_SCHEMAS, SchemaRegistry, SchemaValidationError
from ..utils import MalformedParameter, percent_decode

logger = logging.getLogger(__name__)

ADD_PROPOSAL_METHOD = "add_proposal"


class ProposalVariant(enum.Enum):
    STANDARD = "standard"
    INFRASTRUCTURE = "infrastructure"


@dataclass(frozen=True)
class Portal:
    name: str
    variant: ProposalVariant
    requested_sponsor: str
    contract: str


PORTALS = {
    "devhub": Portal("devhub", ProposalVariant.STANDARD, "neardevdao.near", "devhub.near"),
    "events": Portal(
        "events", ProposalVariant.STANDARD, "events-committee.near", "events-committee.near"
    ),
    "infrastructure": Portal(
        "infrastructure",
        ProposalVariant.INFRASTRUCTURE,
        "infrastructure-committee.near",
        "infrastructure-committee.near",
    ),
}


def get_portal(name: str) -> Portal:
    try:
        return PORTALS[name]
    except KeyError:
        raise MalformedParameter(f"Unknown portal: {name}", "portal") from None


@dataclass(frozen=True)
class ProposalParams:
    """Proposal fields as received (still percent-encoded)."""
    title: str
    description: str
    summary: str
    requested_sponsorship_amount: str
    requested_sponsorship_token: str
    receiver_account: str
    category: str
    supervisor: Optional[str] = None
    linked_rfp: Optional[str] = None

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any]) -> "ProposalParams":
        """Build from route-style camelCase keys (``requestedSponsorshipAmount`` ...)."""
        try:
            return cls(
                title=params["title"],
                description=params["description"],
                summary=params["summary"],
                requested_sponsorship_amount=params["requestedSponsorshipAmount"],
                requested_sponsorship_token=params["requestedSponsorshipToken"],
                receiver_account=params["receiverAccount"],
                category=params["category"],
                supervisor=params.get("supervisor"),
                linked_rfp=params.get("linkedRfp"),
            )
        except KeyError as exc:
            field = exc.args[0]
            raise MalformedParameter(f"Missing proposal parameter: {field}", field) from None


def _decode_optional(value: Optional[str], field: str) -> Optional[str]:
    if value is None:
        return None
    return percent_decode(value, field) or None


def build_proposal_args(
    params: ProposalParams,
    requested_sponsor: str,
    variant: ProposalVariant,
    registry: SchemaRegistry | None = None,
) -> dict[str, Any]:
    """
    Map proposal parameters to ``add_proposal`` arguments.

    Args:
        params: Percent-encoded proposal fields
        requested_sponsor: Account asked to sponsor the proposal
        variant: STANDARD (V0 body) or INFRASTRUCTURE (V1 body)
        registry: Schema registry used to check the body

    Returns:
        ``{"labels": [...], "body": {...}}``

    Raises:
        MalformedParameter: Bad percent-escape or missing required field
    """
    category = percent_decode(params.category, "category")
    body: dict[str, Any] = {
        "proposal_body_version": "V0",
        "name": percent_decode(params.title, "title"),
        "description": percent_decode(params.description, "description"),
        "summary": percent_decode(params.summary, "summary"),
        "linked_proposals": [],
        "requested_sponsorship_usd_amount": percent_decode(
            params.requested_sponsorship_amount, "requestedSponsorshipAmount"
        ),
        "requested_sponsorship_paid_in_currency": percent_decode(
            params.requested_sponsorship_token, "requestedSponsorshipToken"
        ),
        "receiver_account": percent_decode(params.receiver_account, "receiverAccount"),
        "supervisor": _decode_optional(params.supervisor, "supervisor"),
        "timeline": {"status": "DRAFT"},
        "category": category,
        "requested_sponsor": requested_sponsor,
    }

    if variant is ProposalVariant.INFRASTRUCTURE:
        body["proposal_body_version"] = "V1"
        body["linked_rfp"] = _decode_optional(params.linked_rfp, "linkedRfp")
        labels = [category]
    else:
        labels = []

    registry = registry or SchemaRegistry.default()
    try:
        registry.validate_instance(body, PROPOSAL_BODY_SCHEMAS[body["proposal_body_version"]])
    except SchemaValidationError as exc:
        raise MalformedParameter(f"Invalid proposal: {'; '.join(exc.errors)}") from exc

    return {"labels": labels, "body": body}


def create_proposal_payload(
    params: ProposalParams,
    portal: Portal,
    gas: str = VIEW_GAS,
) -> CallPayload:
    """
    Wrap proposal arguments as an ``add_proposal`` call on the portal contract.

    Use ``VIEW_GAS`` when the payload goes straight to a wallet and
    ``TRANSACTION_GAS`` when it becomes an action in a built transaction.
    """
    args = build_proposal_args(params, portal.requested_sponsor, portal.variant)
    logger.debug("Built %s proposal for %s", portal.variant.value, portal.contract)
    return CallPayload(
        method_name=ADD_PROPOSAL_METHOD,
        args=args,
        gas=gas,
        deposit=NO_DEPOSIT,
        contract_name=portal.contract,
    )
