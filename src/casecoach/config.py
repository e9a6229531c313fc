"""
Runtime settings for CaseCoach, read from the environment.

    CASECOACH_LOG_LEVEL          — logging level for the casecoach loggers (INFO)
    CASECOACH_SEED               — integer seed for reply selection (unset = random)
    CASECOACH_HOST / PORT        — demo server bind address (0.0.0.0:8000)
    CASECOACH_SEED_CASES         — load the sample case templates at startup (true)
    CASECOACH_RATE_WINDOW        — rate-limit window in seconds (60)
    CASECOACH_API_RATE_LIMIT     — requests per window on any route (100)
    CASECOACH_MESSAGE_RATE_LIMIT — messages per window (30)

A .env file in the working directory (or any parent of this package) is
loaded first; variables already set in the environment win.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")


def _load_dotenv() -> None:
    """Load .env file into os.environ (only vars not already set)."""
    for parent in [Path.cwd()] + list(Path(__file__).resolve().parents):
        env_path = parent / ".env"
        if env_path.exists():
            for line in env_path.read_text().splitlines():
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" in line:
                    key, value = line.split("=", 1)
                    key, value = key.strip(), value.strip()
                    if key and key not in os.environ:
                        os.environ[key] = value
            break  # only load the first .env found


@dataclass
class Settings:
    log_level: str = "INFO"
    seed: Optional[int] = None
    host: str = "0.0.0.0"
    port: int = 8000
    seed_cases: bool = True
    rate_window: float = 60.0
    api_rate_limit: int = 100
    message_rate_limit: int = 30

    @classmethod
    def from_env(cls, load_dotenv: bool = True) -> "Settings":
        if load_dotenv:
            _load_dotenv()
        env = os.environ

        seed_raw = env.get("CASECOACH_SEED", "").strip()
        try:
            seed = int(seed_raw) if seed_raw else None
        except ValueError:
            raise ValueError(f"CASECOACH_SEED must be an integer, got {seed_raw!r}") from None

        return cls(
            log_level=env.get("CASECOACH_LOG_LEVEL", "INFO").strip().upper() or "INFO",
            seed=seed,
            host=env.get("CASECOACH_HOST", "0.0.0.0").strip(),
            port=int(env.get("CASECOACH_PORT", "8000")),
            seed_cases=env.get("CASECOACH_SEED_CASES", "true").strip().lower() in _TRUE_VALUES,
            rate_window=float(env.get("CASECOACH_RATE_WINDOW", "60")),
            api_rate_limit=int(env.get("CASECOACH_API_RATE_LIMIT", "100")),
            message_rate_limit=int(env.get("CASECOACH_MESSAGE_RATE_LIMIT", "30")),
        )
