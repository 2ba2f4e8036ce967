# starledger/core/types.py
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Union

from starledger.core.encoding import DEFAULT_CODEC, PayloadCodec
from starledger.core.errors import DecodeError
from starledger.crypto.hashing import Digest, block_digest, sha256_hex


@dataclass(frozen=True)
class GenesisMarker:
    """Sentinel payload of the height-0 block."""
    data: Any


@dataclass(frozen=True)
class OwnedRecord:
    """A star claimed by `owner` (an identity)."""
    owner: str
    star: Any

    def to_dict(self) -> dict:
        return {"owner": self.owner, "star": self.star}


@dataclass(frozen=True)
class UnknownPayload:
    """Decodable body that is neither a genesis marker nor an owned record."""
    value: Any


Payload = Union[GenesisMarker, OwnedRecord, UnknownPayload]


def classify_payload(value: Any, height: int = -1) -> Payload:
    if height == 0:
        return GenesisMarker(value)
    if isinstance(value, dict) and set(value) == {"owner", "star"} and isinstance(value["owner"], str):
        return OwnedRecord(owner=value["owner"], star=value["star"])
    return UnknownPayload(value)


@dataclass
class Block:
    """
    One record in the chain. Fields stay mutable so that tampering is something
    validate() detects rather than something the type system hides.
    """
    hash: Optional[str] = None              # hex digest of the other fields; None until sealed
    height: int = 0
    body: str = ""                          # codec-encoded payload
    timestamp: int = 0                      # unix seconds, set at append time
    previous_hash: Optional[str] = None     # None only for the genesis block

    @classmethod
    def from_payload(cls, payload: Any, codec: PayloadCodec = DEFAULT_CODEC) -> "Block":
        return cls(body=codec.encode(payload))

    @property
    def is_sealed(self) -> bool:
        return self.hash is not None

    def content_fields(self) -> Dict[str, Any]:
        """Digest input: every field except the hash."""
        return {
            "height": self.height,
            "body": self.body,
            "timestamp": self.timestamp,
            "previous_hash": self.previous_hash,
        }

    def compute_hash(self, digest: Digest = sha256_hex) -> str:
        return block_digest(self.content_fields(), digest)

    def seal(self, digest: Digest = sha256_hex) -> str:
        self.hash = self.compute_hash(digest)
        return self.hash

    def validate(self, digest: Digest = sha256_hex) -> bool:
        """True iff the stored hash still matches the block's contents."""
        if self.hash is None:
            return False
        try:
            return self.compute_hash(digest) == self.hash
        except (TypeError, ValueError):
            # fields tampered into something that no longer serializes
            return False

    def decode_payload(self, codec: PayloadCodec = DEFAULT_CODEC) -> Any:
        """
        Original structured payload, or None for the sealed genesis block whose body
        is only a marker. Raises DecodeError if the body cannot be decoded.
        """
        if self.is_sealed and self.height == 0:
            return None
        return codec.decode(self.body)

    def record(self, codec: PayloadCodec = DEFAULT_CODEC) -> Payload:
        """Decode and classify the body. Raises DecodeError."""
        return classify_payload(codec.decode(self.body), self.height if self.is_sealed else -1)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "Block":
        try:
            return cls(
                hash=d["hash"],
                height=d["height"],
                body=d["body"],
                timestamp=d["timestamp"],
                previous_hash=d["previous_hash"],
            )
        except (KeyError, TypeError) as e:
            raise DecodeError(f"Not a block record: {e}") from e
