"""Shared fixtures: a fake NEAR RPC node behind httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any

import base58
import httpx
import pytest

from sponsio.pneuma.rpc import LedgerClient
from sponsio.sigil.near import SignerIdentity

SIGNER_ACCOUNT = "alice.near"
SIGNER_PUBLIC_KEY = "ed25519:" + base58.b58encode(bytes(range(1, 33))).decode("ascii")
BLOCK_HASH = base58.b58encode(bytes(range(100, 132))).decode("ascii")
RPC_URL = "https://rpc.test/"


class FakeLedger:
    """Answers status / view_access_key / call_function like a NEAR node."""

    def __init__(self) -> None:
        self.nonce = 41
        self.block_hash = BLOCK_HASH
        self.block_height = 187_000_000
        self.missing_key = False
        self.views: dict[tuple[str, str], bytes] = {}
        self.requests: list[dict[str, Any]] = []
        self.transport = httpx.MockTransport(self.handle)

    def client(self) -> LedgerClient:
        return LedgerClient(RPC_URL, transport=self.transport)

    def methods(self) -> list[str]:
        return [req["method"] for req in self.requests]

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)

        if body["method"] == "status":
            return self._ok(
                body,
                {
                    "chain_id": "mainnet",
                    "sync_info": {
                        "latest_block_hash": self.block_hash,
                        "latest_block_height": self.block_height,
                        "syncing": False,
                    },
                },
            )

        params = body["params"]
        if params["request_type"] == "view_access_key":
            if self.missing_key:
                return self._error(body, "UNKNOWN_ACCESS_KEY")
            return self._ok(
                body,
                {
                    "nonce": self.nonce,
                    "permission": "FullAccess",
                    "block_height": self.block_height,
                    "block_hash": self.block_hash,
                },
            )

        if params["request_type"] == "call_function":
            raw = self.views[(params["account_id"], params["method_name"])]
            return self._ok(
                body,
                {
                    "result": list(raw),
                    "logs": [],
                    "block_height": self.block_height,
                    "block_hash": self.block_hash,
                },
            )

        return httpx.Response(400, json={"error": "unexpected request"})

    @staticmethod
    def _ok(body: dict[str, Any], result: dict[str, Any]) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    @staticmethod
    def _error(body: dict[str, Any], cause: str) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "jsonrpc": "2.0",
                "id": body["id"],
                "error": {
                    "name": "HANDLER_ERROR",
                    "cause": {"name": cause, "info": {}},
                    "code": -32000,
                    "message": "Server error",
                    "data": f"Access key for public key {SIGNER_PUBLIC_KEY} does not exist",
                },
            },
        )


@pytest.fixture()
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture()
def signer() -> SignerIdentity:
    return SignerIdentity(account_id=SIGNER_ACCOUNT, public_key=SIGNER_PUBLIC_KEY)
