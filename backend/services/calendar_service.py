"""Pipeline orchestration: participants -> pairings -> slots -> schedule."""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from backend.domain.constraints import SchedulingConfig, parse_calendar_date
from backend.domain.models import DateRange, Participant, Schedule
from backend.repository.calendar_repository import CalendarRepository
from backend.services.distribution_service import distribute_pairings
from backend.services.pairing_service import generate_pairings
from backend.services.report_service import (
    get_vocabulary,
    render_calendar,
    schedule_to_frame,
)
from backend.services.slot_service import enumerate_slots
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class CalendarResult:
    schedule: Schedule
    date_range: DateRange
    pairing_count: int
    slot_count: int


def scheduling_config_from_settings(settings: Settings) -> SchedulingConfig:
    return SchedulingConfig(
        time_labels=tuple(settings.schedule_time_labels),
        slot_capacity=settings.schedule_slot_capacity,
        qualifying_weekdays=frozenset(settings.schedule_qualifying_weekdays),
    )


class FixtureCalendarService:
    """Business logic orchestration for building a weekend fixture calendar."""

    def __init__(
        self,
        repository: Optional[CalendarRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or CalendarRepository(self._settings)
        self._config = scheduling_config_from_settings(self._settings)

    @property
    def config(self) -> SchedulingConfig:
        return self._config

    @property
    def settings(self) -> Settings:
        return self._settings

    def parse_date_range(self, start_date: str, end_date: str) -> DateRange:
        date_format = self._settings.date_format
        return DateRange(
            start=parse_calendar_date(start_date, date_format),
            end=parse_calendar_date(end_date, date_format),
        )

    def _rng(self, seed: Optional[int]) -> random.Random:
        if seed is None:
            seed = self._settings.shuffle_random_seed
        return random.Random(seed)

    def build_schedule(
        self,
        *,
        participants: Sequence[Participant],
        date_range: DateRange,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> CalendarResult:
        pairings = generate_pairings(participants, rng or self._rng(seed))
        slots = enumerate_slots(date_range, self._config)
        schedule = distribute_pairings(pairings, slots, self._config.time_labels)

        logger.info(
            "Calendar built | participants=%s | pairings=%s | slots=%s | dates=%s",
            len(participants),
            len(pairings),
            len(slots),
            len(schedule.days),
        )
        return CalendarResult(
            schedule=schedule,
            date_range=date_range,
            pairing_count=len(pairings),
            slot_count=len(slots),
        )

    def render(self, result: CalendarResult, locale: Optional[str] = None) -> str:
        return render_calendar(
            result.schedule,
            result.date_range,
            date_format=self._settings.date_format,
            locale=locale or self._settings.report_locale,
        )

    def build_calendar_file(
        self,
        *,
        participants_path: Path | str,
        start_date: str,
        end_date: str,
        output_path: Path | str,
        seed: Optional[int] = None,
        locale: Optional[str] = None,
        table_path: Path | str | None = None,
    ) -> CalendarResult:
        """Run the whole file-to-file workflow.

        Dates and participants are validated before any scheduling work, so a
        malformed input never leaves a partial report behind.
        """
        resolved_locale = locale or self._settings.report_locale
        get_vocabulary(resolved_locale)
        date_range = self.parse_date_range(start_date, end_date)
        participants = self._repository.load_participants(participants_path)

        result = self.build_schedule(
            participants=participants,
            date_range=date_range,
            seed=seed,
        )
        self._repository.write_report(output_path, self.render(result, locale=resolved_locale))
        if table_path is not None:
            self._repository.write_table(
                table_path,
                schedule_to_frame(result.schedule, resolved_locale),
            )
        return result
