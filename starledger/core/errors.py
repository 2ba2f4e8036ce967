# starledger/core/errors.py
from typing import List


class LedgerError(Exception):
    """Base class for every error the ledger reports to its caller."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class DecodeError(LedgerError, ValueError):
    """Block body could not be turned back into a structured value."""


class InvalidChallenge(LedgerError, ValueError):
    """Challenge text is malformed or was issued to a different identity."""


class ChallengeExpired(LedgerError):
    def __init__(self, elapsed: int, window: int):
        super().__init__(f"Challenge expired: {elapsed}s elapsed, window is {window}s")
        self.elapsed = elapsed
        self.window = window


class InvalidSignature(LedgerError):
    """Signature over the challenge does not belong to the identity."""


class ChainInvalid(LedgerError):
    """Append refused: the chain would not validate with the new block."""

    def __init__(self, findings: List):
        summary = "; ".join(str(f) for f in findings)
        super().__init__(f"Chain invalid ({len(findings)} issues): {summary}")
        self.findings = list(findings)


class NotFound(LedgerError, LookupError):
    pass


class CorruptedRecord(UserWarning):
    """A non-genesis block whose body no longer decodes. Reported, never raised."""

    def __init__(self, height: int, reason: str):
        super().__init__(f"Corrupted record at height {height}: {reason}")
        self.height = height
        self.reason = reason
