# tests/conftest.py
import pytest

from starledger.chain.ledger import Ledger
from starledger.core.config import LedgerConfig
from starledger.crypto.keys import AgentKeyPair


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ledger(clock):
    return Ledger(config=LedgerConfig(), clock=clock)


@pytest.fixture
def alice():
    return AgentKeyPair.generate()


@pytest.fixture
def bob():
    return AgentKeyPair.generate()


def _submit(ledger: Ledger, keys: AgentKeyPair, star):
    identity = keys.public_key_b64url()
    challenge = ledger.request_ownership_challenge(identity)
    return ledger.submit_record(identity, challenge, keys.sign_text(challenge), star)


@pytest.fixture
def submit():
    """Full challenge → sign → submit round: submit(ledger, keys, star)."""
    return _submit
