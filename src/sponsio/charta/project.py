"""
NEAR Catalog project entries, written to SocialDB (social.near ``set``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any

from ..pneuma.actions import NO_DEPOSIT, VIEW_GAS, CallPayload
from ..spec.schemas import PROJECT_SCHEMA, SchemaRegistry, SchemaValidationError
from ..utils import MalformedParameter, percent_decode

logger = logging.getLogger(__name__)

SOCIAL_CONTRACT = "social.near"
SET_METHOD = "set"


@dataclass(frozen=True)
class ProjectFields:
    """Project fields as received (still percent-encoded)."""
    title: str
    description: str
    categories: str
    oneliner: str
    logo: str
    website: str
    twitter: str
    medium: str
    discord: str
    whitepaper: str

    def decoded(self) -> "ProjectFields":
        return ProjectFields(
            **{f.name: percent_decode(getattr(self, f.name), f.name) for f in fields(self)}
        )


def build_project_args(
    account_id: str,
    project: ProjectFields,
    registry: SchemaRegistry | None = None,
) -> dict[str, Any]:
    """
    Map project fields to ``set`` arguments under the account's nearcatalog key.

    ``dapp``, ``tokenAddress`` and ``cgcAddress`` are always empty; no
    on-chain lookup is made for them.
    """
    p = project.decoded()
    args = {
        account_id: {
            "nearcatalog": {
                "categories": p.categories,
                "title": p.title,
                "oneliner": p.oneliner,
                "logo": p.logo,
                "description": p.description,
                "website": p.website,
                "dapp": "",
                "twitter": p.twitter,
                "medium": p.medium,
                "discord": p.discord,
                "whitepaper": p.whitepaper,
                "tokenAddress": "",
                "cgcAddress": "",
                "uid": account_id,
            },
        },
    }

    registry = registry or SchemaRegistry.default()
    try:
        registry.validate_instance(args, PROJECT_SCHEMA)
    except SchemaValidationError as exc:
        raise MalformedParameter(f"Invalid project: {'; '.join(exc.errors)}") from exc

    return args


def create_project_payload(
    account_id: str,
    project: ProjectFields,
    gas: str = VIEW_GAS,
) -> CallPayload:
    args = build_project_args(account_id, project)
    logger.debug("Built nearcatalog entry for %s", account_id)
    return CallPayload(
        method_name=SET_METHOD,
        args=args,
        gas=gas,
        deposit=NO_DEPOSIT,
        contract_name=SOCIAL_CONTRACT,
    )
