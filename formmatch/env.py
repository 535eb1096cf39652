"""
Environment loading and runtime settings.

Settings are read from ``FORMMATCH_*`` environment variables, optionally
seeded from a ``.env`` file in the working directory.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from pipelines.matching.rules import DEFAULT_RULES, RuleSet
from pipelines.matching.scoring import FORM_SCORERS, FormScorer

_TRUE_VALUES = {"1", "true", "yes", "on"}


def load_env() -> None:
    """Load .env from the working directory if present."""
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    db_path: Path = Path("data/formmatch.db")
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    log_to_file: bool = True
    max_pool_size: int = 1000
    max_tokens: int = 50
    form_scorer: str = "structure"
    fill_passwords: bool = False
    request_timeout: int = 15

    def rules(self) -> RuleSet:
        """Default category tables with this run's token cap."""
        return DEFAULT_RULES.with_token_limit(self.max_tokens)

    def form_scorer_func(self) -> FormScorer:
        try:
            return FORM_SCORERS[self.form_scorer]
        except KeyError:
            choices = ", ".join(sorted(FORM_SCORERS))
            raise ValueError(f"Unknown form scorer {self.form_scorer!r} (choose from: {choices})")

    def pool_limit(self) -> Optional[int]:
        return self.max_pool_size or None


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    return Settings(
        db_path=Path(os.getenv("FORMMATCH_DB") or "data/formmatch.db"),
        log_level=(os.getenv("FORMMATCH_LOG_LEVEL") or "INFO").upper(),
        log_dir=Path(os.getenv("FORMMATCH_LOG_DIR") or "logs"),
        log_to_file=_env_flag("FORMMATCH_LOG_TO_FILE", True),
        max_pool_size=_env_int("FORMMATCH_MAX_POOL", 1000),
        max_tokens=_env_int("FORMMATCH_MAX_TOKENS", 50),
        form_scorer=(os.getenv("FORMMATCH_FORM_SCORER") or "structure").strip().lower(),
        fill_passwords=_env_flag("FORMMATCH_FILL_PASSWORDS", False),
        request_timeout=_env_int("FORMMATCH_REQUEST_TIMEOUT", 15),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def reset_settings() -> None:
    """Drop cached settings (useful for testing)."""
    get_settings.cache_clear()
