from __future__ import annotations

import base64
import json
import re
from typing import Any
from urllib.parse import unquote

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class MalformedParameter(ValueError):
    exit_code: int = 5

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


def percent_decode(value: str, field: str | None = None) -> str:
    """Decode a URL-path-encoded component.

    Mirrors ``decodeURIComponent``: ``+`` stays a plus sign, a stray ``%``
    or an escape sequence that does not decode to UTF-8 is an error. So
    is a lone surrogate left behind by undecodable command-line bytes.
    """
    if _BAD_ESCAPE.search(value):
        raise MalformedParameter(f"Malformed percent-escape in {field or 'parameter'}: {value!r}", field)
    try:
        decoded = unquote(value, encoding="utf-8", errors="strict")
        decoded.encode("utf-8")
    except UnicodeError as exc:
        raise MalformedParameter(
            f"{field or 'parameter'} is not valid UTF-8: {value!r}", field
        ) from exc
    return decoded


def json_bytes(payload: Any) -> bytes:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def base64_encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def base64_json(payload: Any) -> str:
    return base64_encode(json_bytes(payload))
