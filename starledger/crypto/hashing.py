# starledger/crypto/hashing.py
import hashlib
from typing import Any, Callable, Dict

from starledger.core.canon import canonical_json

# Any deterministic bytes -> hex fingerprint function can stand in for SHA-256.
Digest = Callable[[bytes], str]


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def block_digest(fields: Dict[str, Any], digest: Digest = sha256_hex) -> str:
    """Hash of a block's content fields. `fields` must not contain "hash"."""
    if "hash" in fields:
        raise ValueError("Digest input must exclude the block hash")
    return digest(canonical_json(fields))
