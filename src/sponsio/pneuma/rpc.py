"""
JSON-RPC Client for NEAR.

Lightweight alternative to near-api-py: uses httpx for HTTP, nothing else.
Supports access-key nonce lookup, latest block reference and read-only
contract view calls. All queries use optimistic finality and are never
retried.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

import base58
import httpx

from ..utils import base64_json

logger = logging.getLogger(__name__)

# Default RPC endpoint (NEAR mainnet, FastNEAR free tier)
DEFAULT_RPC_URL = "https://free.rpc.fastnear.com/"
DEFAULT_FINALITY = "optimistic"

BLOCK_HASH_LENGTH = 32

_MISSING_KEY_CAUSES = {"UNKNOWN_ACCESS_KEY", "UNKNOWN_ACCOUNT"}


class LedgerError(RuntimeError):
    exit_code: int = 1


class RpcUnavailable(LedgerError):
    exit_code = 2


class AccountOrKeyNotFound(LedgerError):
    exit_code = 3


class InvalidViewResult(LedgerError):
    exit_code = 4


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get("NEAR_RPC_URL", DEFAULT_RPC_URL)


@dataclass(frozen=True)
class BlockReference:
    hash: str  # base58
    height: int

    @property
    def hash_bytes(self) -> bytes:
        return base58.b58decode(self.hash)


def _is_missing_key(message: str) -> bool:
    # Older nodes report a missing key as a plain string inside the result.
    lowered = message.lower()
    return "does not exist" in lowered and ("access key" in lowered or "account" in lowered)


class LedgerClient:
    """
    Read-only NEAR RPC client.

    fetch_nonce returns the next usable nonce (the access key's nonce + 1),
    not the raw value; fetch_access_key gives the raw view.

    Args:
        rpc_url: RPC endpoint URL (default: NEAR_RPC_URL or FastNEAR)
        timeout: Transport timeout in seconds
        transport: Optional httpx transport (tests plug a MockTransport here)
    """

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url or get_rpc_url()
        self.timeout = timeout
        self.transport = transport

    async def _rpc_call(self, method: str, params: Any) -> Any:
        """
        Make a JSON-RPC call.

        Returns:
            Result field from the RPC response

        Raises:
            RpcUnavailable: Transport failure, HTTP error, or a JSON-RPC error
                that is not a missing access key
            AccountOrKeyNotFound: The ledger reports no such account / key
        """
        payload = {
            "jsonrpc": "2.0",
            "id": "dontcare",
            "method": method,
            "params": params,
        }
        logger.debug("RPC %s %s -> %s", method, params, self.rpc_url)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.rpc_url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise RpcUnavailable(f"RPC {method} failed: {exc}") from exc
        except ValueError as exc:
            raise RpcUnavailable(f"RPC {method} returned a non-JSON body") from exc

        if not isinstance(data, dict):
            raise RpcUnavailable(f"RPC {method} returned {data!r}")

        if "error" in data:
            error = data["error"] or {}
            cause = (error.get("cause") or {}).get("name") if isinstance(error, dict) else None
            logger.warning("RPC %s error: %s", method, error)
            if cause in _MISSING_KEY_CAUSES:
                raise AccountOrKeyNotFound(f"{cause}: {error.get('data') or error.get('message')}")
            raise RpcUnavailable(f"RPC error: {error}")

        return data.get("result")

    async def _query(self, request: dict[str, Any]) -> dict[str, Any]:
        params = {**request, "finality": DEFAULT_FINALITY}
        result = await self._rpc_call("query", params)
        if not isinstance(result, dict):
            raise RpcUnavailable(f"Unexpected query result: {result!r}")
        if "error" in result:
            message = str(result["error"])
            logger.warning("Query %s error: %s", request.get("request_type"), message)
            if _is_missing_key(message):
                raise AccountOrKeyNotFound(message)
            if request.get("request_type") == "call_function":
                raise InvalidViewResult(message)
            raise RpcUnavailable(message)
        return result

    async def fetch_access_key(self, account_id: str, public_key: str) -> dict[str, Any]:
        """
        View the access key (nonce, permission) of an account.

        Raises:
            AccountOrKeyNotFound: If the account has no such key
        """
        return await self._query(
            {
                "request_type": "view_access_key",
                "account_id": account_id,
                "public_key": public_key,
            }
        )

    async def fetch_nonce(self, account_id: str, public_key: str) -> int:
        """
        Get the next usable transaction nonce for an access key.

        Returns:
            The access key's current nonce + 1
        """
        access_key = await self.fetch_access_key(account_id, public_key)
        try:
            current = int(access_key["nonce"])
        except (KeyError, TypeError, ValueError) as exc:
            raise RpcUnavailable(f"Access key view has no nonce: {access_key!r}") from exc
        logger.debug("Access key %s/%s nonce=%d", account_id, public_key, current)
        return current + 1

    async def fetch_latest_block(self) -> BlockReference:
        """Get the latest block hash and height from node status."""
        status = await self._rpc_call("status", [])
        try:
            sync_info = status["sync_info"]
            block = BlockReference(
                hash=sync_info["latest_block_hash"],
                height=int(sync_info["latest_block_height"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise RpcUnavailable(f"Status response has no sync_info: {status!r}") from exc
        try:
            hash_bytes = block.hash_bytes
        except (TypeError, ValueError) as exc:
            raise RpcUnavailable(f"Latest block hash is not base58: {block.hash!r}") from exc
        if len(hash_bytes) != BLOCK_HASH_LENGTH:
            raise RpcUnavailable(
                f"Latest block hash must be {BLOCK_HASH_LENGTH} bytes, got {len(hash_bytes)}"
            )
        logger.debug("Latest block %s at height %d", block.hash, block.height)
        return block

    async def call_view(self, account_id: str, method_name: str, args_base64: str) -> Any:
        """
        Call a read-only contract method.

        Args:
            account_id: Contract account
            method_name: View method to call
            args_base64: Base64 encoded JSON arguments

        Returns:
            Decoded JSON result

        Raises:
            InvalidViewResult: If the result bytes are not UTF-8 JSON
        """
        result = await self._query(
            {
                "request_type": "call_function",
                "account_id": account_id,
                "method_name": method_name,
                "args_base64": args_base64,
            }
        )
        try:
            raw = bytes(result["result"])
            return json.loads(raw.decode("utf-8"))
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidViewResult(
                f"{account_id}.{method_name} returned an undecodable result"
            ) from exc

    async def call_view_json(self, account_id: str, method_name: str, args: Any = None) -> Any:
        """Call a view method with a JSON argument object."""
        return await self.call_view(account_id, method_name, base64_json(args if args is not None else {}))

