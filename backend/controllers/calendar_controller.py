"""HTTP controller layer for fixture calendar generation."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field, field_validator

from backend.controllers.dependencies import get_calendar_repository, get_calendar_service
from backend.domain.constraints import ConfigurationError, ParticipantFormatError
from backend.domain.models import Participant
from backend.repository.calendar_repository import CalendarRepository
from backend.services.calendar_service import CalendarResult, FixtureCalendarService
from backend.services.distribution_service import CapacityExhaustedError
from backend.services.report_service import get_vocabulary, weekday_abbreviation
from backend.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(prefix="/calendar", tags=["calendar"])


class ParticipantPayload(BaseModel):
    name: str = Field(min_length=1)
    location: str = Field(min_length=1)

    @field_validator("name", "location")
    @classmethod
    def strip_and_require(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


class CalendarWindow(BaseModel):
    """Dates are kept as strings so the configured format is enforced by the service."""

    start_date: str = Field(min_length=1)
    end_date: str = Field(min_length=1)
    seed: int | None = Field(default=None, ge=0)
    locale: str | None = None


class CalendarRequest(CalendarWindow):
    participants: list[ParticipantPayload]


class CalendarTextRequest(CalendarWindow):
    participant_lines: list[str]


class FixtureResponse(BaseModel):
    time_label: str
    host: str
    guest: str
    location: str


class CalendarDayResponse(BaseModel):
    date: date
    weekday: str
    fixtures: list[FixtureResponse]


class CalendarResponse(BaseModel):
    start_date: date
    end_date: date
    pairing_count: int = Field(ge=0)
    slot_count: int = Field(ge=0)
    total_fixtures: int = Field(ge=0)
    days: list[CalendarDayResponse]


class CalendarConfigResponse(BaseModel):
    time_labels: list[str]
    slot_capacity: int = Field(ge=1)
    qualifying_weekdays: list[int]
    date_format: str
    report_locale: str


def _to_response(result: CalendarResult, locale: str) -> CalendarResponse:
    return CalendarResponse(
        start_date=result.date_range.start,
        end_date=result.date_range.end,
        pairing_count=result.pairing_count,
        slot_count=result.slot_count,
        total_fixtures=result.schedule.total_fixtures,
        days=[
            CalendarDayResponse(
                date=day,
                weekday=weekday_abbreviation(day, locale),
                fixtures=[
                    FixtureResponse(
                        time_label=fixture.time_label,
                        host=fixture.pairing.host.name,
                        guest=fixture.pairing.guest.name,
                        location=fixture.pairing.location,
                    )
                    for fixture in fixtures
                ],
            )
            for day, fixtures in result.schedule.days.items()
        ],
    )


def _participants_from_payload(items: list[ParticipantPayload]) -> list[Participant]:
    participants: list[Participant] = []
    seen: set[Participant] = set()
    for position, item in enumerate(items, start=1):
        participant = Participant(name=item.name, location=item.location)
        if participant in seen:
            raise ParticipantFormatError(
                position, f"{item.name}, {item.location}", "duplicate participant"
            )
        seen.add(participant)
        participants.append(participant)
    return participants


def _resolve_locale(service: FixtureCalendarService, window: CalendarWindow) -> str:
    locale = window.locale or service.settings.report_locale
    # Unknown locales fail here, even when the schedule has no days to label.
    get_vocabulary(locale)
    return locale


def _build(
    service: FixtureCalendarService,
    window: CalendarWindow,
    participants: list[Participant],
) -> CalendarResult:
    date_range = service.parse_date_range(window.start_date, window.end_date)
    return service.build_schedule(
        participants=participants,
        date_range=date_range,
        seed=window.seed,
    )


@router.get(
    "/config",
    response_model=CalendarConfigResponse,
    status_code=status.HTTP_200_OK,
)
async def calendar_config(
    service: FixtureCalendarService = Depends(get_calendar_service),
) -> CalendarConfigResponse:
    config = service.config
    return CalendarConfigResponse(
        time_labels=list(config.time_labels),
        slot_capacity=config.slot_capacity,
        qualifying_weekdays=sorted(config.qualifying_weekdays),
        date_format=service.settings.date_format,
        report_locale=service.settings.report_locale,
    )


@router.post(
    "",
    response_model=CalendarResponse,
    status_code=status.HTTP_200_OK,
)
async def build_calendar(
    payload: CalendarRequest,
    service: FixtureCalendarService = Depends(get_calendar_service),
) -> CalendarResponse:
    """Build a schedule from structured participant records."""
    try:
        participants = _participants_from_payload(payload.participants)
        locale = _resolve_locale(service, payload)
        result = _build(service, payload, participants)
        return _to_response(result, locale)
    except ConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except CapacityExhaustedError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected failure: build calendar")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build calendar",
        ) from exc


@router.post(
    "/from_text",
    response_model=CalendarResponse,
    status_code=status.HTTP_200_OK,
)
async def build_calendar_from_text(
    payload: CalendarTextRequest,
    service: FixtureCalendarService = Depends(get_calendar_service),
    repository: CalendarRepository = Depends(get_calendar_repository),
) -> CalendarResponse:
    """Build a schedule from raw participant source lines."""
    try:
        participants = repository.parse_participant_lines(payload.participant_lines)
        locale = _resolve_locale(service, payload)
        result = _build(service, payload, participants)
        return _to_response(result, locale)
    except ConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except CapacityExhaustedError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected failure: build calendar")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build calendar",
        ) from exc


@router.post(
    "/report",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
)
async def calendar_report(
    payload: CalendarRequest,
    service: FixtureCalendarService = Depends(get_calendar_service),
) -> PlainTextResponse:
    """Render the schedule as the plain-text calendar report."""
    try:
        participants = _participants_from_payload(payload.participants)
        locale = _resolve_locale(service, payload)
        result = _build(service, payload, participants)
        return PlainTextResponse(service.render(result, locale=locale))
    except ConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except CapacityExhaustedError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected failure: render calendar report")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to render calendar report",
        ) from exc
