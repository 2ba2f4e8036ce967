# starledger/core/encoding.py
import base64
import json
from typing import Any, Protocol

from starledger.core.errors import DecodeError


def b64url_encode(data: bytes) -> str:
    """Encode bytes to base64url (no padding, URL-safe)."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(s: str) -> bytes:
    """Decode base64url string back to bytes."""
    # Restore padding
    padding = len(s) % 4
    if padding:
        s += "=" * (4 - padding)
    return base64.urlsafe_b64decode(s)


class PayloadCodec(Protocol):
    def encode(self, value: Any) -> str: ...

    def decode(self, text: str) -> Any: ...


class JsonB64Codec:
    """
    Block body codec: key-sorted compact JSON wrapped in base64url.
    encode() and decode() are exact inverses for any JSON-compatible value, including
    integers beyond 2**53 (which RFC 8785 would round to doubles).
    """

    def encode(self, value: Any) -> str:
        text = json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
        return b64url_encode(text.encode("utf-8"))

    def decode(self, text: str) -> Any:
        if not isinstance(text, str):
            raise DecodeError(f"Body is not encoded text: {type(text).__name__}")
        try:
            raw = b64url_decode(text)
            return json.loads(raw.decode("utf-8"))
        except ValueError as e:
            # binascii.Error, UnicodeDecodeError and JSONDecodeError all land here
            raise DecodeError(f"Cannot decode body: {e}") from e


DEFAULT_CODEC = JsonB64Codec()
