"""Tests for transaction assembly, serialization and building."""

from __future__ import annotations

import asyncio
import hashlib
import struct

import base58
import httpx
import pytest

from sponsio.pneuma.actions import encode_function_call
from sponsio.pneuma.rpc import AccountOrKeyNotFound, BlockReference, LedgerClient, RpcUnavailable
from sponsio.pneuma.tx import (
    TransactionEnvelope,
    assemble,
    build_transaction,
    build_transaction_sync,
)
from sponsio.sigil.near import SignerIdentity

BLOCK = BlockReference(hash=base58.b58encode(bytes(range(32))).decode("ascii"), height=99)


def _actions():
    first = encode_function_call("add_proposal", {"labels": []}, "200000000000000", "0")
    second = encode_function_call("set", {"a": 1}, 30_000_000_000_000, 10**24)
    return first, second


class TestAssemble:
    def test_fields(self, signer) -> None:
        first, _ = _actions()
        envelope = assemble(signer, "devhub.near", [first], 42, BLOCK)

        assert envelope.signer_id == signer.account_id
        assert envelope.public_key == signer.public_key
        assert envelope.nonce == 42
        assert envelope.receiver_id == "devhub.near"
        assert envelope.actions == (first,)
        assert envelope.block_hash == bytes(range(32))

    def test_preserves_action_order(self, signer) -> None:
        first, second = _actions()
        assert assemble(signer, "r.near", [first, second], 1, BLOCK).actions == (first, second)
        assert assemble(signer, "r.near", [second, first], 1, BLOCK).actions == (second, first)

    def test_accepts_any_iterable(self, signer) -> None:
        first, second = _actions()
        envelope = assemble(signer, "r.near", iter([first, second]), 1, BLOCK)
        assert envelope.actions == (first, second)

    def test_envelope_is_immutable(self, signer) -> None:
        envelope = assemble(signer, "r.near", list(_actions()), 1, BLOCK)
        with pytest.raises(AttributeError):
            envelope.nonce = 2  # type: ignore[misc]


def test_wallet_json(signer) -> None:
    first, _ = _actions()
    data = assemble(signer, "devhub.near", [first], 42, BLOCK).to_dict()

    assert list(data) == ["signerId", "publicKey", "nonce", "receiverId", "actions", "blockHash"]
    assert data["signerId"] == signer.account_id
    assert data["publicKey"] == signer.public_key
    assert data["nonce"] == "42"
    assert data["receiverId"] == "devhub.near"
    assert data["actions"] == [first.to_dict()]
    assert data["blockHash"] == {str(i): i for i in range(32)}


class TestSerialize:
    def test_borsh_layout(self) -> None:
        public = bytes(range(1, 33))
        signer = SignerIdentity("a.near", "ed25519:" + base58.b58encode(public).decode("ascii"))
        action = encode_function_call("set", b"{}", 7, 5)

        raw = assemble(signer, "b.near", [action], 9, BLOCK).serialize()

        expected = (
            b"\x06\x00\x00\x00a.near"
            + b"\x00"
            + public
            + struct.pack("<Q", 9)
            + b"\x06\x00\x00\x00b.near"
            + bytes(range(32))
            + b"\x01\x00\x00\x00"
            + b"\x02"
            + b"\x03\x00\x00\x00set"
            + b"\x02\x00\x00\x00{}"
            + struct.pack("<Q", 7)
            + (5).to_bytes(16, "little")
        )
        assert raw == expected

    def test_action_order_in_bytes(self, signer) -> None:
        first, second = _actions()
        forward = assemble(signer, "r.near", [first, second], 1, BLOCK).serialize()
        backward = assemble(signer, "r.near", [second, first], 1, BLOCK).serialize()
        assert forward != backward
        assert forward.index(b"add_proposal") < forward.index(b"\x03\x00\x00\x00set")

    def test_hash_is_sha256_of_serialized(self, signer) -> None:
        envelope = assemble(signer, "r.near", list(_actions()), 1, BLOCK)
        digest = hashlib.sha256(envelope.serialize()).digest()
        assert envelope.hash() == base58.b58encode(digest).decode("ascii")


class TestBuildTransaction:
    def test_round_trips_nonce_and_block(self, ledger, signer) -> None:
        ledger.nonce = 1000
        first, _ = _actions()

        envelope = asyncio.run(build_transaction(ledger.client(), signer, "devhub.near", [first]))

        assert isinstance(envelope, TransactionEnvelope)
        assert envelope.nonce == 1001
        assert envelope.block_hash == base58.b58decode(ledger.block_hash)
        assert envelope.actions == (first,)
        assert sorted(ledger.methods()) == ["query", "status"]

    def test_nonce_matches_fetch_nonce(self, ledger, signer) -> None:
        client = ledger.client()
        fetched = asyncio.run(client.fetch_nonce(signer.account_id, signer.public_key))
        envelope = asyncio.run(build_transaction(client, signer, "r.near", list(_actions())))
        assert envelope.nonce == fetched

    def test_missing_key_produces_no_envelope(self, ledger, signer) -> None:
        ledger.missing_key = True
        with pytest.raises(AccountOrKeyNotFound):
            asyncio.run(build_transaction(ledger.client(), signer, "r.near", list(_actions())))

    def test_block_failure_fails_build(self, signer) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if b'"status"' in request.content:
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": "dontcare", "result": {"nonce": 1, "permission": "FullAccess"}},
            )

        client = LedgerClient("https://rpc.test/", transport=httpx.MockTransport(handler))
        with pytest.raises(RpcUnavailable):
            asyncio.run(build_transaction(client, signer, "r.near", list(_actions())))

    @pytest.mark.parametrize("block_hash", ["0OIl", "abc"])
    def test_bad_block_hash_fails_build(self, ledger, signer, block_hash: str) -> None:
        ledger.block_hash = block_hash
        with pytest.raises(RpcUnavailable):
            asyncio.run(build_transaction(ledger.client(), signer, "r.near", list(_actions())))

    def test_deadline(self, signer) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200, json={})

        client = LedgerClient("https://rpc.test/", transport=httpx.MockTransport(handler))
        with pytest.raises(RpcUnavailable, match="deadline"):
            asyncio.run(build_transaction(client, signer, "r.near", list(_actions()), deadline=0.05))

    def test_sync_wrapper(self, ledger, signer) -> None:
        envelope = build_transaction_sync(ledger.client(), signer, "r.near", list(_actions()))
        assert envelope.nonce == ledger.nonce + 1
