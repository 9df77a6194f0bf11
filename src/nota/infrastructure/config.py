"""Configuration loaded from the environment.

A ``.env`` file in the working directory is read first (python-dotenv);
real environment variables take precedence over it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import find_dotenv, load_dotenv

from nota.domain.model.transaction_number import DEFAULT_COUNTER_SEED, DEFAULT_PREFIX

# When installed in editable mode the project root is the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]


class ConfigurationError(Exception):
    """An environment variable holds an unusable value."""


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    transaction_prefix: str = DEFAULT_PREFIX
    counter_seed: str = DEFAULT_COUNTER_SEED
    store_timeout: float = 5.0
    timezone: str = "Asia/Jakarta"
    log_level: str = "WARNING"

    @property
    def store_file(self) -> Path:
        return self.data_dir / "nota.json"

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def load_settings() -> Settings:
    load_dotenv(find_dotenv(usecwd=True))

    seed = os.getenv("NOTA_COUNTER_SEED", DEFAULT_COUNTER_SEED).strip()
    if not seed.isdigit():
        raise ConfigurationError(f"NOTA_COUNTER_SEED must be a non-negative integer, got {seed!r}")

    raw_timeout = os.getenv("NOTA_STORE_TIMEOUT", "5")
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise ConfigurationError(f"NOTA_STORE_TIMEOUT must be a number, got {raw_timeout!r}") from None
    if timeout <= 0:
        raise ConfigurationError(f"NOTA_STORE_TIMEOUT must be positive, got {raw_timeout!r}")

    timezone = os.getenv("NOTA_TIMEZONE", "Asia/Jakarta")
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigurationError(f"NOTA_TIMEZONE is not a known time zone: {timezone!r}") from None

    log_level = os.getenv("NOTA_LOG_LEVEL", "WARNING").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"NOTA_LOG_LEVEL is not a logging level: {log_level!r}")

    return Settings(
        data_dir=Path(os.getenv("NOTA_DATA_DIR", str(_PROJECT_ROOT / "data"))),
        transaction_prefix=os.getenv("NOTA_TRANSACTION_PREFIX", DEFAULT_PREFIX),
        counter_seed=seed,
        store_timeout=timeout,
        timezone=timezone,
        log_level=log_level,
    )
