# starledger/crypto/keys.py
"""
Ed25519 identities for the ownership challenge.

An identity is the unpadded base64url encoding of a raw 32-byte public key, and a
signature is the unpadded base64url encoding of the raw 64-byte signature over the
UTF-8 challenge text. Neither alphabet contains ':', so identities embed safely in
"<identity>:<timestamp>:<suffix>" challenges.
"""

from typing import Optional, Protocol

from cryptography.exceptions import InvalidSignature as CryptoInvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey

from starledger.core.encoding import b64url_decode, b64url_encode


class SignatureVerifier(Protocol):
    def verify(self, message: str, identity: str, signature: str) -> bool: ...


class AgentKeyPair:
    """Ed25519 key pair. Holds only the public half when loaded for verification."""

    def __init__(self, public_key: Ed25519PublicKey, private_key: Optional[Ed25519PrivateKey] = None):
        self._public = public_key
        self._private = private_key

    @classmethod
    def generate(cls) -> "AgentKeyPair":
        private = Ed25519PrivateKey.generate()
        return cls(private.public_key(), private)

    @classmethod
    def from_private_b64url(cls, private_b64: str) -> "AgentKeyPair":
        private = Ed25519PrivateKey.from_private_bytes(b64url_decode(private_b64))
        return cls(private.public_key(), private)

    @classmethod
    def from_public_b64url(cls, public_b64: str) -> "AgentKeyPair":
        return cls(Ed25519PublicKey.from_public_bytes(b64url_decode(public_b64)))

    @property
    def can_sign(self) -> bool:
        return self._private is not None

    def public_key_b64url(self) -> str:
        """The ledger identity for this key."""
        return b64url_encode(self._public.public_bytes_raw())

    def private_key_b64url(self) -> str:
        if self._private is None:
            raise ValueError("Key pair has no private key")
        return b64url_encode(self._private.private_bytes_raw())

    def sign_bytes(self, data: bytes) -> bytes:
        if self._private is None:
            raise ValueError("Key pair has no private key")
        return self._private.sign(data)

    def sign_text(self, message: str) -> str:
        """Sign a challenge; returns the base64url signature expected by submit_record."""
        return b64url_encode(self.sign_bytes(message.encode("utf-8")))

    def verify_bytes(self, signature: bytes, data: bytes) -> bool:
        try:
            self._public.verify(signature, data)
        except CryptoInvalidSignature:
            return False
        return True


class Ed25519Verifier:
    """Default SignatureVerifier: checks `signature` over `message` against `identity`."""

    def verify(self, message: str, identity: str, signature: str) -> bool:
        try:
            key = AgentKeyPair.from_public_b64url(identity)
            sig = b64url_decode(signature)
        except (ValueError, TypeError):
            # not a 32-byte key / not base64url
            return False
        return key.verify_bytes(sig, message.encode("utf-8"))
