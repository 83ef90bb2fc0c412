__all__ = [
    # Identity
    "ConfigError",
    "SignerIdentity",
    "load_signer_identity",
    # Ledger queries
    "BlockReference",
    "LedgerClient",
    "LedgerError",
    "RpcUnavailable",
    "AccountOrKeyNotFound",
    "InvalidViewResult",
    # Actions & transactions
    "CallPayload",
    "FunctionCallAction",
    "TransactionEnvelope",
    "TRANSACTION_GAS",
    "VIEW_GAS",
    "assemble",
    "build_transaction",
    "build_transaction_sync",
    "encode_function_call",
    # Payload builders
    "MalformedParameter",
    "PORTALS",
    "Portal",
    "ProjectFields",
    "ProposalParams",
    "ProposalVariant",
    "build_project_args",
    "build_proposal_args",
    "create_project_payload",
    "create_proposal_payload",
    # Schema
    "SchemaRegistry",
    "SchemaValidationError",
]

from .sigil.near import ConfigError, SignerIdentity, load_signer_identity
from .pneuma.rpc import (
    AccountOrKeyNotFound,
    BlockReference,
    InvalidViewResult,
    LedgerClient,
    LedgerError,
    RpcUnavailable,
)
from .pneuma.actions import (
    TRANSACTION_GAS,
    VIEW_GAS,
    CallPayload,
    FunctionCallAction,
    encode_function_call,
)
from .pneuma.tx import TransactionEnvelope, assemble, build_transaction, build_transaction_sync
from .charta.proposal import (
    PORTALS,
    Portal,
    ProposalParams,
    ProposalVariant,
    build_proposal_args,
    create_proposal_payload,
)
from .charta.project import ProjectFields, build_project_args, create_project_payload
from .spec.schemas import SchemaRegistry, SchemaValidationError
from .utils import MalformedParameter
