"""Application settings resolved from defaults and environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from backend.domain.constraints import ConfigurationError


def _optional_int(variable: str) -> Optional[int]:
    raw_value = os.getenv(variable)
    if raw_value is None or not raw_value.strip():
        return None
    try:
        return int(raw_value)
    except ValueError as exc:
        raise ConfigurationError(
            f"Environment variable {variable} must be an integer, got '{raw_value}'"
        ) from exc


@dataclass(frozen=True)
class Settings:
    app_name: str = "Fixture Calendar Builder"
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    schedule_time_labels: tuple[str, ...] = ("12:00", "15:00", "18:00")
    schedule_slot_capacity: int = 2
    # datetime.weekday(): Monday == 0
    schedule_qualifying_weekdays: tuple[int, ...] = (4, 5, 6)

    date_format: str = "%d.%m.%Y"
    participant_separator: str = "—"
    participant_file_encoding: str = "utf-8"

    report_locale: str = "ru"
    shuffle_random_seed: Optional[int] = None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process; call ``cache_clear`` to reload."""
    defaults = Settings()
    slot_capacity = _optional_int("SLOT_CAPACITY")
    return Settings(
        log_level=os.getenv("LOG_LEVEL", defaults.log_level),
        schedule_slot_capacity=(
            defaults.schedule_slot_capacity if slot_capacity is None else slot_capacity
        ),
        report_locale=os.getenv("REPORT_LOCALE", defaults.report_locale),
        shuffle_random_seed=_optional_int("FIXTURE_RANDOM_SEED"),
    )
