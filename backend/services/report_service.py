"""Plain-text and tabular rendering of a finished schedule."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pandas as pd

from backend.domain.constraints import ConfigurationError
from backend.domain.models import DateRange, Schedule


RULE = "=" * 60


@dataclass(frozen=True)
class ReportVocabulary:
    title: str
    period_label: str
    versus: str
    total_label: str
    # Indexed by datetime.weekday()
    weekday_abbreviations: tuple[str, str, str, str, str, str, str]


VOCABULARIES: dict[str, ReportVocabulary] = {
    "ru": ReportVocabulary(
        title="СПОРТИВНЫЙ КАЛЕНДАРЬ",
        period_label="Период",
        versus="против",
        total_label="Всего игр",
        weekday_abbreviations=("Пн", "Вт", "Ср", "Чт", "Пт", "Сб", "Вс"),
    ),
    "en": ReportVocabulary(
        title="SPORTS CALENDAR",
        period_label="Period",
        versus="vs",
        total_label="Total games",
        weekday_abbreviations=("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"),
    ),
}


def get_vocabulary(locale: str) -> ReportVocabulary:
    try:
        return VOCABULARIES[locale]
    except KeyError as exc:
        supported = ", ".join(sorted(VOCABULARIES))
        raise ConfigurationError(
            f"Unsupported report locale '{locale}' (supported: {supported})"
        ) from exc


def weekday_abbreviation(value: date, locale: str) -> str:
    return get_vocabulary(locale).weekday_abbreviations[value.weekday()]


def render_calendar(
    schedule: Schedule,
    date_range: DateRange,
    *,
    date_format: str,
    locale: str,
) -> str:
    vocabulary = get_vocabulary(locale)
    lines = [
        vocabulary.title,
        RULE,
        (
            f"{vocabulary.period_label}: "
            f"{date_range.start.strftime(date_format)} - {date_range.end.strftime(date_format)}"
        ),
        RULE,
        "",
    ]

    for day, fixtures in schedule.days.items():
        lines.append(
            f"{day.strftime(date_format)} ({vocabulary.weekday_abbreviations[day.weekday()]})"
        )
        for fixture in fixtures:
            pairing = fixture.pairing
            lines.append(
                f"{fixture.time_label} | {pairing.host.name} {vocabulary.versus} "
                f"{pairing.guest.name} ({pairing.location})"
            )
        lines.append("")

    lines.append(RULE)
    lines.append(f"{vocabulary.total_label}: {schedule.total_fixtures}")
    return "\n".join(lines) + "\n"


SCHEDULE_COLUMNS = ["date", "weekday", "time_label", "host", "guest", "location"]


def schedule_to_frame(schedule: Schedule, locale: str = "en") -> pd.DataFrame:
    """Flatten a schedule into one row per fixture, in schedule order."""
    rows = [
        {
            "date": fixture.date,
            "weekday": weekday_abbreviation(fixture.date, locale),
            "time_label": fixture.time_label,
            "host": fixture.pairing.host.name,
            "guest": fixture.pairing.guest.name,
            "location": fixture.pairing.location,
        }
        for fixture in schedule.fixtures()
    ]
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)
