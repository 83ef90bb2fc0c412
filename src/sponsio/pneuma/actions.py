"""
Action encoding - function-call actions and their view-only payloads.

A FunctionCall action carries the method name, the UTF-8 JSON argument
bytes, attached gas (u64) and deposit in yoctoNEAR (u128). Argument
objects are serialized compactly with their key insertion order kept, so
the same object always yields the same bytes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Union

from ..utils import json_bytes

logger = logging.getLogger(__name__)

# Gas attached when the payload is only handed to a wallet (no transaction built)
VIEW_GAS = "50000000000000"
# Gas attached to actions inside a transaction built by Sponsio
TRANSACTION_GAS = "200000000000000"
NO_DEPOSIT = "0"

U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1

Amount = Union[int, str]


def _to_uint(value: Amount, limit: int, name: str) -> int:
    number = int(value)
    if number < 0 or number > limit:
        raise ValueError(f"{name} out of range: {value}")
    return number


@dataclass(frozen=True)
class FunctionCallAction:
    method_name: str
    args: bytes
    gas: int
    deposit: int

    def to_dict(self) -> dict[str, Any]:
        """Wallet-facing JSON (near-api-js ``Action`` shape)."""
        return {
            "enum": "functionCall",
            "functionCall": {
                "methodName": self.method_name,
                "args": {"type": "Buffer", "data": list(self.args)},
                "gas": str(self.gas),
                "deposit": str(self.deposit),
            },
        }


def encode_function_call(
    method_name: str,
    args: Any,
    gas: Amount,
    deposit: Amount,
) -> FunctionCallAction:
    """
    Build a FunctionCall action.

    Args:
        method_name: Contract method to call
        args: JSON-serializable argument object, or pre-encoded bytes
        gas: Gas limit (u64)
        deposit: Attached deposit in yoctoNEAR (u128)

    Returns:
        FunctionCallAction with serialized argument bytes
    """
    args_bytes = bytes(args) if isinstance(args, (bytes, bytearray)) else json_bytes(args)
    action = FunctionCallAction(
        method_name=method_name,
        args=args_bytes,
        gas=_to_uint(gas, U64_MAX, "gas"),
        deposit=_to_uint(deposit, U128_MAX, "deposit"),
    )
    logger.debug("Encoded %s call (%d arg bytes)", method_name, len(args_bytes))
    return action


@dataclass(frozen=True)
class CallPayload:
    """View-only payload: what to call, not yet a transaction."""
    method_name: str
    args: Any
    gas: str
    deposit: str
    contract_name: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "methodName": self.method_name,
            "args": self.args,
            "gas": self.gas,
            "deposit": self.deposit,
            "contractName": self.contract_name,
        }

    def to_action(self) -> FunctionCallAction:
        return encode_function_call(self.method_name, self.args, self.gas, self.deposit)
