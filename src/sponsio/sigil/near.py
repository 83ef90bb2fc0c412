"""
NEAR signer identity for Sponsio.

The signer is the account that will later sign the transactions Sponsio
builds. Sponsio never signs; it only needs the account ID and the public
key of the access key that will be used, so it can look up the nonce and
put the key into the transaction.

Configuration lives in ~/.sponsio/.env (or the process environment):

    BITTE_KEY={"accountId": "alice.near", "privateKey": "ed25519:..."}

``publicKey`` may be given directly; otherwise it is derived from the
ed25519 private key. NEAR_ACCOUNT_ID / NEAR_PUBLIC_KEY override fields.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import base58
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from dotenv import load_dotenv


# Default config directory
SPONSIO_DIR = Path.home() / ".sponsio"
SPONSIO_ENV = SPONSIO_DIR / ".env"

# Borsh key type tags
KEY_TYPE_ED25519 = 0
KEY_TYPE_SECP256K1 = 1

_KEY_TYPES = {
    "ed25519": (KEY_TYPE_ED25519, 32),
    "secp256k1": (KEY_TYPE_SECP256K1, 64),
}


class ConfigError(ValueError):
    exit_code: int = 6


@dataclass(frozen=True)
class SignerIdentity:
    """Account + public key that will sign a transaction."""
    account_id: str
    public_key: str

    def key_bytes(self) -> tuple[int, bytes]:
        return parse_public_key(self.public_key)


def parse_public_key(public_key: str) -> tuple[int, bytes]:
    """
    Split a ``<curve>:<base58>`` public key into its Borsh key type and bytes.

    Keys without a curve prefix are treated as ed25519.

    Raises:
        ValueError: Unknown curve, bad base58 or wrong key length
    """
    curve, sep, encoded = public_key.partition(":")
    if not sep:
        curve, encoded = "ed25519", public_key
    if curve not in _KEY_TYPES:
        raise ValueError(f"Unsupported key type: {curve}")

    key_type, length = _KEY_TYPES[curve]
    try:
        raw = base58.b58decode(encoded)
    except ValueError as exc:
        raise ValueError(f"Public key is not valid base58: {public_key}") from exc
    if len(raw) != length:
        raise ValueError(f"{curve} public key must be {length} bytes, got {len(raw)}")
    return key_type, raw


def derive_public_key(private_key: str) -> str:
    """
    Derive the ``ed25519:<base58>`` public key for an ed25519 private key.

    Accepts the 64-byte NEAR secret key (seed + public key) or a bare
    32-byte seed, both base58 encoded with an optional ``ed25519:`` prefix.
    """
    curve, sep, encoded = private_key.partition(":")
    if not sep:
        curve, encoded = "ed25519", private_key
    if curve != "ed25519":
        raise ConfigError(f"Cannot derive public key for {curve} keys; set publicKey explicitly")

    try:
        raw = base58.b58decode(encoded)
    except ValueError as exc:
        raise ConfigError("privateKey is not valid base58") from exc
    if len(raw) not in (32, 64):
        raise ConfigError(f"ed25519 private key must be 32 or 64 bytes, got {len(raw)}")

    key = Ed25519PrivateKey.from_private_bytes(raw[:32])
    public = key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return "ed25519:" + base58.b58encode(public).decode("ascii")


def load_signer_identity(env_path: Optional[Path] = None) -> SignerIdentity:
    """
    Load the signer identity from .env file or environment.

    Args:
        env_path: Path to .env file (default: ~/.sponsio/.env)

    Returns:
        SignerIdentity with account ID and public key

    Raises:
        ConfigError: If the account or key cannot be resolved
    """
    env_path = env_path or SPONSIO_ENV

    if env_path.exists():
        load_dotenv(env_path, override=True)

    raw = os.environ.get("BITTE_KEY") or "{}"
    try:
        key = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"BITTE_KEY is not valid JSON: {exc}") from exc
    if not isinstance(key, dict):
        raise ConfigError("BITTE_KEY must be a JSON object")

    account_id = os.environ.get("NEAR_ACCOUNT_ID") or key.get("accountId")
    if not account_id:
        raise ConfigError(
            f"Signer account not found. Set accountId in BITTE_KEY or "
            f"NEAR_ACCOUNT_ID in {env_path}"
        )

    public_key = os.environ.get("NEAR_PUBLIC_KEY") or key.get("publicKey")
    if not public_key:
        private_key = key.get("privateKey")
        if not private_key:
            raise ConfigError("BITTE_KEY needs either publicKey or privateKey")
        public_key = derive_public_key(private_key)

    try:
        parse_public_key(public_key)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

    return SignerIdentity(account_id=account_id, public_key=public_key)
