# starledger/verify/verifier.py
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from starledger.core.errors import DecodeError
from starledger.core.types import Block
from starledger.crypto.hashing import Digest, sha256_hex


@dataclass
class ChainFinding:
    height: int
    message: str
    category: str = "general"  # "genesis", "linkage", "tamper", "height"

    def __str__(self):
        return f"[{self.height}] {self.category}: {self.message}"


@dataclass
class ChainReport:
    findings: List[ChainFinding] = field(default_factory=list)
    length: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.findings

    @property
    def first_finding(self) -> Optional[ChainFinding]:
        return self.findings[0] if self.findings else None

    def __bool__(self):
        return self.is_valid

    def __str__(self):
        if self.is_valid:
            return f"Chain is valid ✓ ({self.length} blocks)"
        lines = [f"Verification FAILED ({len(self.findings)} issues):"]
        for f in self.findings:
            lines.append(f"  • {f}")
        return "\n".join(lines)


def scan_chain(blocks: Sequence[Block], digest: Digest = sha256_hex) -> List[ChainFinding]:
    """
    Check every block once, in position order. Linkage and tamper checks are
    independent: a block can contribute both findings.
    """
    findings: List[ChainFinding] = []
    for position, block in enumerate(blocks):
        if block.height != position:
            findings.append(ChainFinding(
                position, f"Height mismatch: expected {position}, got {block.height}", "height"))

        if position == 0:
            if not block.validate(digest):
                findings.append(ChainFinding(0, "genesis block invalid", "genesis"))
            continue

        expected_prev = blocks[position - 1].hash
        if block.previous_hash != expected_prev:
            findings.append(ChainFinding(
                position, "previous_hash does not match hash of block at height "
                f"{position - 1}", "linkage"))
        if not block.validate(digest):
            findings.append(ChainFinding(position, "block contents do not match its hash", "tamper"))
    return findings


def verify_blocks(blocks: Sequence[Block], digest: Digest = sha256_hex) -> ChainReport:
    return ChainReport(scan_chain(blocks, digest), len(blocks))


def load_blocks(lines: Iterable[str]) -> List[Block]:
    """Parse an exported chain (JSONL, one block per line). Raises DecodeError."""
    blocks = []
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            d = json.loads(line)
        except ValueError as e:
            raise DecodeError(f"Line {lineno}: invalid JSON ({e})") from e
        if not isinstance(d, dict):
            raise DecodeError(f"Line {lineno}: expected an object")
        blocks.append(Block.from_dict(d))
    return blocks


def verify_file(path: Union[str, Path], digest: Digest = sha256_hex) -> ChainReport:
    with open(path, "r", encoding="utf-8") as f:
        blocks = load_blocks(f)
    return verify_blocks(blocks, digest)
