# starledger/integration/registry.py
"""
Caller-facing surface over a Ledger. Every call returns an Outcome instead of
raising, so a transport layer (HTTP handler, RPC method, ...) can map the error
kind to its own status codes.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from starledger.chain.ledger import Ledger
from starledger.core.errors import CorruptedRecord, LedgerError


@dataclass(frozen=True)
class Outcome:
    ok: bool
    value: Any = None
    error: Optional[LedgerError] = None
    corrupted: List[CorruptedRecord] = field(default_factory=list)

    @property
    def error_kind(self) -> Optional[str]:
        return self.error.kind if self.error is not None else None


class StarRegistry:
    def __init__(self, ledger: Optional[Ledger] = None):
        self.ledger = ledger or Ledger()

    @staticmethod
    def _run(fn: Callable[[], Any]) -> Outcome:
        try:
            return Outcome(True, fn())
        except LedgerError as e:
            return Outcome(False, error=e)

    def get_height(self) -> Outcome:
        return Outcome(True, self.ledger.current_height())

    def request_challenge(self, identity: str) -> Outcome:
        return Outcome(True, self.ledger.request_ownership_challenge(identity))

    def submit(self, identity: str, challenge: str, signature: str, star: Any) -> Outcome:
        return self._run(lambda: self.ledger.submit_record(identity, challenge, signature, star))

    def get_by_hash(self, block_hash: str) -> Outcome:
        return self._run(lambda: self.ledger.lookup_by_hash(block_hash))

    def get_by_height(self, height: int) -> Outcome:
        return self._run(lambda: self.ledger.lookup_by_height(height))

    def get_by_owner(self, identity: str) -> Outcome:
        """Owned records as dicts; undecodable blocks are listed in `corrupted`."""
        scan = self.ledger.records_by_owner(identity)
        return Outcome(True, [r.to_dict() for r in scan.records], corrupted=list(scan.corrupted))
