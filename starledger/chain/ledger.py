# starledger/chain/ledger.py
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from starledger.core.config import LedgerConfig
from starledger.core.encoding import DEFAULT_CODEC, PayloadCodec
from starledger.core.errors import (
    ChainInvalid,
    ChallengeExpired,
    CorruptedRecord,
    DecodeError,
    InvalidChallenge,
    InvalidSignature,
    NotFound,
)
from starledger.core.types import Block, OwnedRecord
from starledger.crypto.hashing import Digest, sha256_hex
from starledger.crypto.keys import Ed25519Verifier, SignatureVerifier
from starledger.verify.verifier import ChainFinding, scan_chain

logger = logging.getLogger(__name__)


def format_challenge(identity: str, issued_at: int, suffix: str) -> str:
    return f"{identity}:{issued_at}:{suffix}"


@dataclass
class OwnerScan:
    """Result of scanning the chain for one owner's records."""
    records: List[OwnedRecord] = field(default_factory=list)
    corrupted: List[CorruptedRecord] = field(default_factory=list)

    def __iter__(self):
        return iter(self.records)

    def __len__(self):
        return len(self.records)


class Ledger:
    """
    In-memory, single-writer chain of blocks.

    Appends are serialized end to end by one re-entrant lock (read height, link,
    seal, trial-validate, commit). Reads take the same lock, so no caller ever
    sees a half-applied append.
    """

    def __init__(
        self,
        config: Optional[LedgerConfig] = None,
        digest: Digest = sha256_hex,
        codec: PayloadCodec = DEFAULT_CODEC,
        verifier: Optional[SignatureVerifier] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or LedgerConfig.load()
        self.digest = digest
        self.codec = codec
        self.verifier = verifier or Ed25519Verifier()
        self._clock = clock
        self._chain: List[Block] = []
        self.height = -1
        self._lock = threading.RLock()
        self.initialize()

    def _now(self) -> int:
        return int(self._clock())

    def initialize(self) -> None:
        """Create the genesis block unless the chain already has one."""
        with self._lock:
            if self.height == -1:
                genesis = Block.from_payload(self.config.genesis_payload, self.codec)
                self.append(genesis)

    def current_height(self) -> int:
        return self.height

    @property
    def length(self) -> int:
        return len(self._chain)

    # ── write path

    def append(self, block: Block) -> Block:
        """
        Link, timestamp and seal `block`, then commit it only if the chain with the
        block added still validates. Raises ChainInvalid otherwise, leaving the
        chain untouched.
        """
        with self._lock:
            if block.is_sealed:
                raise ValueError("Cannot append an already-sealed block")
            height = self.height
            block.previous_hash = self._chain[height].hash if height > -1 else None
            block.timestamp = self._now()
            block.height = height + 1
            block.seal(self.digest)

            findings = scan_chain(self._chain + [block], self.digest)
            if findings:
                logger.warning("Rejected block at height %d: %d chain issues", block.height, len(findings))
                raise ChainInvalid(findings)

            self._chain.append(block)
            self.height += 1
            logger.info("Appended block %d (%s)", block.height, block.hash[:12])
            return block

    # ── ownership challenge

    def request_ownership_challenge(self, identity: str) -> str:
        return format_challenge(identity, self._now(), self.config.challenge_suffix)

    def _challenge_issued_at(self, identity: str, challenge: str) -> int:
        parts = challenge.split(":") if isinstance(challenge, str) else []
        if len(parts) != 3:
            raise InvalidChallenge(f"Malformed challenge: {challenge!r}")
        claimed, issued_at, suffix = parts
        if suffix != self.config.challenge_suffix:
            raise InvalidChallenge(f"Unexpected challenge suffix: {suffix!r}")
        if claimed != identity:
            raise InvalidChallenge("Challenge was issued to a different identity")
        try:
            return int(issued_at)
        except ValueError:
            raise InvalidChallenge(f"Bad challenge timestamp: {issued_at!r}") from None

    def submit_record(self, identity: str, challenge: str, signature: str, star: Any) -> Block:
        """
        Append `star` as a record owned by `identity`, provided `signature` is the
        identity's signature over a challenge issued no more than
        `config.challenge_window` seconds ago, and dated no more than
        `config.challenge_clock_skew` seconds ahead of the ledger clock.
        """
        issued_at = self._challenge_issued_at(identity, challenge)
        elapsed = self._now() - issued_at
        if -elapsed > self.config.challenge_clock_skew:
            logger.warning("Challenge from %s dated %ds in the future", identity, -elapsed)
            raise InvalidChallenge(f"Challenge timestamp is {-elapsed}s in the future")
        if elapsed > self.config.challenge_window:
            logger.warning("Expired challenge from %s (%ds old)", identity, elapsed)
            raise ChallengeExpired(elapsed, self.config.challenge_window)

        if not self.verifier.verify(challenge, identity, signature):
            logger.warning("Signature check failed for %s", identity)
            raise InvalidSignature(f"Signature does not match identity {identity}")

        block = Block.from_payload(OwnedRecord(owner=identity, star=star).to_dict(), self.codec)
        return self.append(block)

    # ── read path

    def blocks(self) -> List[Block]:
        """Copy of the chain in height order."""
        with self._lock:
            return list(self._chain)

    def to_dicts(self) -> List[dict]:
        return [b.to_dict() for b in self.blocks()]

    def lookup_by_hash(self, block_hash: str) -> Block:
        # Hashes are assumed unique; on a collision the lowest block wins.
        with self._lock:
            for block in self._chain:
                if block.hash == block_hash:
                    return block
        raise NotFound(f"No block with hash {block_hash}")

    def lookup_by_height(self, height: int) -> Block:
        with self._lock:
            if isinstance(height, int) and not isinstance(height, bool) and 0 <= height <= self.height:
                return self._chain[height]
        raise NotFound(f"No block at height {height}")

    def records_by_owner(self, identity: str) -> OwnerScan:
        """
        Records owned by `identity` in height order, plus one CorruptedRecord per
        non-genesis block whose body no longer decodes. Reported on every call.
        """
        result = OwnerScan()
        for position, block in enumerate(self.blocks()):
            if position == 0:
                continue  # genesis marker, not a record
            try:
                payload = block.record(self.codec)
            except DecodeError as e:
                logger.warning("Corrupted record at height %d: %s", block.height, e)
                result.corrupted.append(CorruptedRecord(block.height, str(e)))
                continue
            if isinstance(payload, OwnedRecord) and payload.owner == identity:
                result.records.append(payload)
        return result

    def validate_chain(self) -> List[ChainFinding]:
        with self._lock:
            return scan_chain(self._chain, self.digest)
