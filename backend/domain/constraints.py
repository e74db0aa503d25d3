"""Domain-level validation rules for scheduling inputs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


class ConfigurationError(ValueError):
    """Raised before scheduling starts when an input or setting is malformed."""


class ParticipantFormatError(ConfigurationError):
    """Raised when a participant record is missing a required field."""

    def __init__(self, line_number: int, record: str, reason: str) -> None:
        super().__init__(
            f"Invalid participant record on line {line_number}: '{record}' ({reason})"
        )
        self.line_number = line_number
        self.record = record


class DateFormatError(ConfigurationError):
    """Raised when a date string does not match the configured format."""

    def __init__(self, value: str, date_format: str) -> None:
        super().__init__(f"Invalid date format: '{value}' (expected {date_format})")
        self.value = value


@dataclass(frozen=True)
class SchedulingConfig:
    time_labels: tuple[str, ...]
    slot_capacity: int
    qualifying_weekdays: frozenset[int]


def validate_scheduling_config(config: SchedulingConfig) -> None:
    if not config.time_labels:
        raise ConfigurationError("time_labels must contain at least one label")
    if len(set(config.time_labels)) != len(config.time_labels):
        raise ConfigurationError("time_labels must not contain duplicates")
    if config.slot_capacity < 1:
        raise ConfigurationError("slot_capacity must be >= 1")
    if not config.qualifying_weekdays:
        raise ConfigurationError("qualifying_weekdays must not be empty")
    if any(not 0 <= weekday <= 6 for weekday in config.qualifying_weekdays):
        raise ConfigurationError("qualifying_weekdays values must be between 0 and 6")


def parse_calendar_date(value: str, date_format: str) -> date:
    try:
        return datetime.strptime(value.strip(), date_format).date()
    except ValueError as exc:
        raise DateFormatError(value, date_format) from exc
