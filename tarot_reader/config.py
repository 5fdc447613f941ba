"""Runtime settings read from the environment (a .env file is loaded by tarot_reader.main)."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

from .catalog import DATA_PATH
from .errors import InvalidArgument

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_REVERSAL_PROBABILITY = 0.3


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    meanings_path: Path = DATA_PATH
    reversal_probability: float = DEFAULT_REVERSAL_PROBABILITY
    seed: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env

        meanings_path = Path(env.get("TAROT_MEANINGS_PATH") or DATA_PATH)
        if not meanings_path.is_absolute():
            meanings_path = REPO_ROOT / meanings_path

        raw_prob = env.get("TAROT_REVERSAL_PROBABILITY", str(DEFAULT_REVERSAL_PROBABILITY))
        try:
            probability = float(raw_prob)
        except ValueError:
            raise InvalidArgument(f"TAROT_REVERSAL_PROBABILITY must be a number, got {raw_prob!r}") from None
        if not 0.0 <= probability <= 1.0:
            raise InvalidArgument(f"TAROT_REVERSAL_PROBABILITY must be between 0.0 and 1.0, got {probability}")

        return cls(
            meanings_path=meanings_path,
            reversal_probability=probability,
            seed=env.get("TAROT_SEED") or None,
            log_level=(env.get("TAROT_LOG_LEVEL") or "INFO").upper(),
        )
