"""Domain models for fixture generation and weekend slot distribution."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class Participant:
    name: str
    location: str


@dataclass(frozen=True)
class Pairing:
    """One directed match-up; the host's home is the venue."""

    host: Participant
    guest: Participant

    def __post_init__(self) -> None:
        if self.host == self.guest:
            raise ValueError(f"Participant cannot be paired with itself: {self.host.name}")

    @property
    def location(self) -> str:
        return self.host.location


@dataclass(frozen=True)
class SlotUnit:
    date: date
    time_label: str


@dataclass(frozen=True)
class ScheduledFixture:
    date: date
    time_label: str
    pairing: Pairing


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    @property
    def is_empty(self) -> bool:
        return self.start > self.end


@dataclass(frozen=True)
class Schedule:
    """Fixtures grouped by date in ascending date order.

    Dates with no fixture are absent rather than mapped to an empty tuple.
    """

    days: dict[date, tuple[ScheduledFixture, ...]] = field(default_factory=dict)

    def fixtures(self) -> list[ScheduledFixture]:
        return [fixture for day in self.days.values() for fixture in day]

    @property
    def total_fixtures(self) -> int:
        return sum(len(day) for day in self.days.values())

    @property
    def is_empty(self) -> bool:
        return not self.days
