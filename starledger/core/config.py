# starledger/core/config.py
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_CHALLENGE_WINDOW = 300
DEFAULT_CHALLENGE_SUFFIX = "starRegistry"
DEFAULT_CLOCK_SKEW = 30


def _default_genesis() -> Dict[str, Any]:
    return {"data": "Genesis Block"}


@dataclass(frozen=True)
class LedgerConfig:
    """Tunable constants of a ledger instance."""
    challenge_window: int = DEFAULT_CHALLENGE_WINDOW      # seconds a challenge stays signable
    challenge_suffix: str = DEFAULT_CHALLENGE_SUFFIX      # third field of every challenge
    challenge_clock_skew: int = DEFAULT_CLOCK_SKEW        # how far ahead a challenge may be dated
    genesis_payload: Dict[str, Any] = field(default_factory=_default_genesis)

    @classmethod
    def load(cls) -> "LedgerConfig":
        """Resolve from STARLEDGER_* environment variables, falling back to defaults."""
        window = DEFAULT_CHALLENGE_WINDOW
        raw_window = os.environ.get("STARLEDGER_CHALLENGE_WINDOW")
        if raw_window:
            try:
                window = int(raw_window)
            except ValueError:
                logger.warning(
                    "Ignoring STARLEDGER_CHALLENGE_WINDOW=%r (not an integer), using %ds",
                    raw_window, DEFAULT_CHALLENGE_WINDOW,
                )
        suffix = os.environ.get("STARLEDGER_CHALLENGE_SUFFIX") or DEFAULT_CHALLENGE_SUFFIX
        if ":" in suffix:
            logger.warning("Ignoring STARLEDGER_CHALLENGE_SUFFIX=%r (contains ':')", suffix)
            suffix = DEFAULT_CHALLENGE_SUFFIX

        config = cls(challenge_window=window, challenge_suffix=suffix)
        logger.debug("Ledger config: window=%ds suffix=%s", config.challenge_window, config.challenge_suffix)
        return config
