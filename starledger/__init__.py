# starledger/__init__.py
"""
Starledger — an append-only, tamper-evident registry of owned records ("stars").
Every block is hash-chained to its predecessor; writes are gated by a signed
ownership challenge (Ed25519).
"""

from starledger.core.config import LedgerConfig
from starledger.core.errors import (
    ChainInvalid,
    ChallengeExpired,
    CorruptedRecord,
    DecodeError,
    InvalidChallenge,
    InvalidSignature,
    LedgerError,
    NotFound,
)
from starledger.core.types import Block, GenesisMarker, OwnedRecord, UnknownPayload
from starledger.crypto.keys import AgentKeyPair, Ed25519Verifier
from starledger.chain.ledger import Ledger, OwnerScan
from starledger.verify.verifier import ChainFinding, ChainReport, scan_chain, verify_blocks

__version__ = "0.1.0-dev"

__all__ = [
    "AgentKeyPair",
    "Block",
    "ChainFinding",
    "ChainInvalid",
    "ChainReport",
    "ChallengeExpired",
    "CorruptedRecord",
    "DecodeError",
    "Ed25519Verifier",
    "GenesisMarker",
    "InvalidChallenge",
    "InvalidSignature",
    "Ledger",
    "LedgerConfig",
    "LedgerError",
    "NotFound",
    "OwnedRecord",
    "OwnerScan",
    "UnknownPayload",
    "scan_chain",
    "verify_blocks",
]
