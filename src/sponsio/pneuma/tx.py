"""
Transaction Builder - Assemble unsigned NEAR transactions.

Fetches the signer's next nonce and a recent block hash, then combines them
with the receiver and the ordered actions into a TransactionEnvelope.
Signing and broadcasting are left to the wallet that receives the envelope.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import struct
from dataclasses import dataclass
from typing import Any, Iterable, Optional

import base58

from ..sigil.near import SignerIdentity, parse_public_key
from .actions import FunctionCallAction
from .rpc import BlockReference, LedgerClient, RpcUnavailable

logger = logging.getLogger(__name__)

# Borsh enum tag of Action::FunctionCall
FUNCTION_CALL_TAG = 2


def _borsh_string(value: str) -> bytes:
    return _borsh_bytes(value.encode("utf-8"))


def _borsh_bytes(value: bytes) -> bytes:
    return struct.pack("<I", len(value)) + value


def _borsh_u128(value: int) -> bytes:
    return value.to_bytes(16, "little")


def _serialize_action(action: FunctionCallAction) -> bytes:
    return b"".join(
        [
            struct.pack("<B", FUNCTION_CALL_TAG),
            _borsh_string(action.method_name),
            _borsh_bytes(action.args),
            struct.pack("<Q", action.gas),
            _borsh_u128(action.deposit),
        ]
    )


@dataclass(frozen=True)
class TransactionEnvelope:
    signer_id: str
    public_key: str
    nonce: int
    receiver_id: str
    actions: tuple[FunctionCallAction, ...]
    block_hash: bytes

    def to_dict(self) -> dict[str, Any]:
        """Wallet-facing JSON, as consumed by the generate-transaction tool."""
        return {
            "signerId": self.signer_id,
            "publicKey": self.public_key,
            "nonce": str(self.nonce),
            "receiverId": self.receiver_id,
            "actions": [action.to_dict() for action in self.actions],
            "blockHash": {str(i): b for i, b in enumerate(self.block_hash)},
        }

    def serialize(self) -> bytes:
        """Canonical Borsh encoding of the transaction."""
        key_type, key_data = parse_public_key(self.public_key)
        parts = [
            _borsh_string(self.signer_id),
            struct.pack("<B", key_type),
            key_data,
            struct.pack("<Q", self.nonce),
            _borsh_string(self.receiver_id),
            self.block_hash,
            struct.pack("<I", len(self.actions)),
        ]
        parts.extend(_serialize_action(action) for action in self.actions)
        return b"".join(parts)

    def hash(self) -> str:
        """Base58 SHA-256 of the serialized transaction (what gets signed)."""
        return base58.b58encode(hashlib.sha256(self.serialize()).digest()).decode("ascii")


def assemble(
    signer: SignerIdentity,
    receiver_id: str,
    actions: Iterable[FunctionCallAction],
    nonce: int,
    block_ref: BlockReference,
) -> TransactionEnvelope:
    """
    Combine signer, receiver, actions, nonce and block reference.

    Actions keep the order they were given in; the ledger executes them in
    sequence.
    """
    return TransactionEnvelope(
        signer_id=signer.account_id,
        public_key=signer.public_key,
        nonce=nonce,
        receiver_id=receiver_id,
        actions=tuple(actions),
        block_hash=block_ref.hash_bytes,
    )


async def build_transaction(
    client: LedgerClient,
    signer: SignerIdentity,
    receiver_id: str,
    actions: Iterable[FunctionCallAction],
    deadline: Optional[float] = None,
) -> TransactionEnvelope:
    """
    Fetch nonce and block reference, then assemble a transaction.

    The two queries are independent and run concurrently. If either fails,
    the build fails and no envelope is produced.

    Args:
        client: Ledger query client
        signer: Account + public key that will sign
        receiver_id: Contract receiving the actions
        actions: Ordered actions
        deadline: Seconds allowed for both queries together (None = wait
            on the transport timeout only)

    Raises:
        RpcUnavailable: Network failure or deadline exceeded
        AccountOrKeyNotFound: Signer has no such access key
    """
    actions = tuple(actions)
    queries = asyncio.gather(
        client.fetch_nonce(signer.account_id, signer.public_key),
        client.fetch_latest_block(),
    )
    try:
        nonce, block_ref = await asyncio.wait_for(queries, timeout=deadline)
    except asyncio.TimeoutError as exc:
        raise RpcUnavailable(f"Nonce / block lookup exceeded {deadline}s deadline") from exc

    envelope = assemble(signer, receiver_id, actions, nonce, block_ref)
    logger.info(
        "Built transaction %s -> %s (nonce=%d, block=%d, %d action(s))",
        signer.account_id,
        receiver_id,
        nonce,
        block_ref.height,
        len(actions),
    )
    return envelope


def build_transaction_sync(
    client: LedgerClient,
    signer: SignerIdentity,
    receiver_id: str,
    actions: Iterable[FunctionCallAction],
    deadline: Optional[float] = None,
) -> TransactionEnvelope:
    """Blocking wrapper around :func:`build_transaction`."""
    return asyncio.run(build_transaction(client, signer, receiver_id, actions, deadline=deadline))
