"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from backend.repository.calendar_repository import CalendarRepository
from backend.services.calendar_service import FixtureCalendarService
from backend.utils.config import get_settings


def get_calendar_service(request: Request) -> FixtureCalendarService:
    service = getattr(request.app.state, "calendar_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Calendar service is not initialized",
        )
    return service


def get_calendar_repository(request: Request) -> CalendarRepository:
    repository = getattr(request.app.state, "repository", None)
    if repository is None:
        repository = CalendarRepository(get_settings())
        request.app.state.repository = repository
    return repository
