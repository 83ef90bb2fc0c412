"""
Pneuma - On-chain interaction layer for Sponsio.

Provides the NEAR JSON-RPC client, function-call action encoding, and
unsigned transaction assembly (JSON + Borsh).

Uses httpx + base58 instead of the heavyweight near-api-py.
"""
