"""
app.py: FastAPI application factory.

This is the ASGI application object imported by uvicorn.
It wires the calendar repository and service and registers routers.

Usage (via launcher):
    python main.py serve

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from fastapi import FastAPI

from backend.controllers.calendar_controller import router as calendar_router
from backend.repository.calendar_repository import CalendarRepository
from backend.services.calendar_service import FixtureCalendarService
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Services are attached to app.state; controllers resolve them from there.
    """
    settings = settings or get_settings()

    # --- Repository (participant source and report sink) ---
    repository = CalendarRepository(settings)

    # --- Services ---
    calendar_service = FixtureCalendarService(
        repository=repository,
        settings=settings,
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
    )

    # --- Routers ---
    app.include_router(calendar_router)

    app.state.repository = repository
    app.state.calendar_service = calendar_service

    logger.info(
        "Application created | time_labels=%s | slot_capacity=%s | weekdays=%s",
        ",".join(settings.schedule_time_labels),
        settings.schedule_slot_capacity,
        ",".join(str(day) for day in settings.schedule_qualifying_weekdays),
    )
    return app


# Module-level app object for uvicorn
app = create_app()
