"""Runtime settings for the command-line tools.

Settings come from the process environment. An optional .env file is
loaded first; values already set in the environment take precedence.

    BITNAMES_LOG_LEVEL              logging level name (default: WARNING)
    BITNAMES_EXPECTED_COMMITMENT    hex commitment to pin records against
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from bitnames.errors import ConfigError, DecodeError
from bitnames.models.descriptor import decode_commitment


DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    log_level: str = DEFAULT_LOG_LEVEL
    expected_commitment: Optional[bytes] = None

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level, logging.WARNING)


_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def load_settings(env_file: Path | None = None) -> Settings:
    """Build Settings from the environment, loading env_file if it exists.

    Raises ConfigError if a setting is present but malformed.
    """
    path = env_file if env_file is not None else Path.cwd() / ".env"
    if path.exists():
        load_dotenv(path)

    log_level = (os.getenv("BITNAMES_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    if log_level not in _LEVELS:
        raise ConfigError(f"BITNAMES_LOG_LEVEL must be one of {', '.join(_LEVELS)}, got: {log_level}")

    raw_commitment = os.getenv("BITNAMES_EXPECTED_COMMITMENT")
    expected = None
    if raw_commitment:
        try:
            expected = decode_commitment(raw_commitment)
        except DecodeError as e:
            raise ConfigError(f"BITNAMES_EXPECTED_COMMITMENT: {e}") from e

    return Settings(log_level=log_level, expected_commitment=expected)
