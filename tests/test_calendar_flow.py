from __future__ import annotations

import random
from dataclasses import replace
from datetime import date

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import main
from backend.controllers.calendar_controller import router
from backend.domain.constraints import DateFormatError, ParticipantFormatError
from backend.domain.models import DateRange, Participant
from backend.repository.calendar_repository import CalendarRepository
from backend.services.calendar_service import FixtureCalendarService
from backend.services.distribution_service import CapacityExhaustedError
from backend.utils.config import get_settings


TEAMS_TEXT = "1. Alpha — North\n2. Bravo — South\n3. Charlie — East\n"
PARTICIPANTS = [
    {"name": "Alpha", "location": "North"},
    {"name": "Bravo", "location": "South"},
    {"name": "Charlie", "location": "East"},
    {"name": "Delta", "location": "West"},
]


def _build_test_settings(**overrides):
    get_settings.cache_clear()
    return replace(get_settings(), **{"shuffle_random_seed": 11, "report_locale": "en", **overrides})


def _build_service(**overrides) -> FixtureCalendarService:
    settings = _build_test_settings(**overrides)
    return FixtureCalendarService(repository=CalendarRepository(settings), settings=settings)


def _build_test_app(**overrides) -> TestClient:
    service = _build_service(**overrides)
    app = FastAPI()
    app.include_router(router)
    app.state.calendar_service = service
    app.state.repository = CalendarRepository(service.settings)
    return TestClient(app)


# --- service ---

def test_build_schedule_three_participants_two_match_days() -> None:
    service = _build_service()
    participants = [Participant(**item) for item in PARTICIPANTS[:3]]

    result = service.build_schedule(
        participants=participants,
        date_range=DateRange(date(2025, 3, 8), date(2025, 3, 9)),
    )

    assert result.pairing_count == 6
    assert result.slot_count == 12
    assert result.schedule.total_fixtures == 6
    assert list(result.schedule.days) == [date(2025, 3, 8), date(2025, 3, 9)]


def test_build_schedule_seed_makes_run_reproducible() -> None:
    service = _build_service()
    participants = [Participant(**item) for item in PARTICIPANTS]
    date_range = DateRange(date(2025, 3, 1), date(2025, 3, 31))

    first = service.build_schedule(participants=participants, date_range=date_range, seed=3)
    second = service.build_schedule(participants=participants, date_range=date_range, seed=3)
    injected = service.build_schedule(
        participants=participants,
        date_range=date_range,
        rng=random.Random(3),
    )

    assert first == second == injected


def test_build_schedule_without_seed_uses_settings_seed() -> None:
    service = _build_service(shuffle_random_seed=5)
    participants = [Participant(**item) for item in PARTICIPANTS]
    date_range = DateRange(date(2025, 3, 1), date(2025, 3, 31))

    first = service.build_schedule(participants=participants, date_range=date_range)
    second = service.build_schedule(participants=participants, date_range=date_range)
    explicit = service.build_schedule(participants=participants, date_range=date_range, seed=5)

    assert first == second == explicit


def test_build_schedule_without_weekend_raises() -> None:
    service = _build_service()
    participants = [Participant(**item) for item in PARTICIPANTS[:2]]

    with pytest.raises(CapacityExhaustedError):
        service.build_schedule(
            participants=participants,
            date_range=DateRange(date(2025, 3, 10), date(2025, 3, 13)),
        )


def test_build_calendar_file_end_to_end(tmp_path) -> None:
    service = _build_service()
    teams = tmp_path / "teams.txt"
    teams.write_text(TEAMS_TEXT, encoding="utf-8")
    output = tmp_path / "calendar.txt"
    table = tmp_path / "calendar.csv"

    result = service.build_calendar_file(
        participants_path=teams,
        start_date="01.03.2025",
        end_date="31.03.2025",
        output_path=output,
        locale="ru",
        table_path=table,
    )

    text = output.read_text(encoding="utf-8")
    assert text.startswith("СПОРТИВНЫЙ КАЛЕНДАРЬ")
    assert "Период: 01.03.2025 - 31.03.2025" in text
    assert text.rstrip().endswith("Всего игр: 6")
    assert result.schedule.total_fixtures == 6
    assert len(table.read_text(encoding="utf-8").splitlines()) == 7


def test_build_calendar_file_bad_date_writes_nothing(tmp_path) -> None:
    service = _build_service()
    teams = tmp_path / "teams.txt"
    teams.write_text(TEAMS_TEXT, encoding="utf-8")
    output = tmp_path / "calendar.txt"

    with pytest.raises(DateFormatError):
        service.build_calendar_file(
            participants_path=teams,
            start_date="2025-03-01",
            end_date="31.03.2025",
            output_path=output,
        )
    assert not output.exists()


def test_build_calendar_file_bad_participant_writes_nothing(tmp_path) -> None:
    service = _build_service()
    teams = tmp_path / "teams.txt"
    teams.write_text("1. Alpha — North\n2. Bravo\n", encoding="utf-8")
    output = tmp_path / "calendar.txt"

    with pytest.raises(ParticipantFormatError):
        service.build_calendar_file(
            participants_path=teams,
            start_date="01.03.2025",
            end_date="31.03.2025",
            output_path=output,
        )
    assert not output.exists()


# --- HTTP API ---

def test_calendar_config_endpoint() -> None:
    client = _build_test_app()

    response = client.get("/calendar/config")

    assert response.status_code == 200
    body = response.json()
    assert body["time_labels"] == ["12:00", "15:00", "18:00"]
    assert body["slot_capacity"] == 2
    assert body["qualifying_weekdays"] == [4, 5, 6]


def test_build_calendar_endpoint_full_coverage() -> None:
    client = _build_test_app()

    response = client.post(
        "/calendar",
        json={
            "participants": PARTICIPANTS,
            "start_date": "08.03.2025",
            "end_date": "09.03.2025",
            "seed": 5,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["pairing_count"] == 12
    assert body["slot_count"] == 12
    assert body["total_fixtures"] == 12
    assert [day["date"] for day in body["days"]] == ["2025-03-08", "2025-03-09"]
    assert [day["weekday"] for day in body["days"]] == ["Sat", "Sun"]
    saturday_times = [fixture["time_label"] for fixture in body["days"][0]["fixtures"]]
    assert saturday_times == ["12:00", "12:00", "15:00", "15:00", "18:00", "18:00"]


def test_build_calendar_from_text_endpoint() -> None:
    client = _build_test_app()

    response = client.post(
        "/calendar/from_text",
        json={
            "participant_lines": TEAMS_TEXT.splitlines(),
            "start_date": "08.03.2025",
            "end_date": "09.03.2025",
            "locale": "ru",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["total_fixtures"] == 6
    assert [day["weekday"] for day in body["days"]] == ["Сб", "Вс"]


def test_build_calendar_from_text_reports_bad_line() -> None:
    client = _build_test_app()

    response = client.post(
        "/calendar/from_text",
        json={
            "participant_lines": ["1. Alpha — North", "Bravo"],
            "start_date": "08.03.2025",
            "end_date": "09.03.2025",
        },
    )

    assert response.status_code == 400
    assert "line 2" in response.json()["detail"]


def test_build_calendar_endpoint_rejects_bad_date() -> None:
    client = _build_test_app()

    response = client.post(
        "/calendar",
        json={"participants": PARTICIPANTS, "start_date": "2025-03-08", "end_date": "09.03.2025"},
    )

    assert response.status_code == 400
    assert "2025-03-08" in response.json()["detail"]


def test_build_calendar_endpoint_capacity_exhausted() -> None:
    client = _build_test_app()

    response = client.post(
        "/calendar",
        json={"participants": PARTICIPANTS, "start_date": "10.03.2025", "end_date": "13.03.2025"},
    )

    assert response.status_code == 422
    assert "No available slots" in response.json()["detail"]


def test_build_calendar_endpoint_rejects_duplicate_participants() -> None:
    client = _build_test_app()

    response = client.post(
        "/calendar",
        json={
            "participants": [PARTICIPANTS[0], PARTICIPANTS[0]],
            "start_date": "08.03.2025",
            "end_date": "09.03.2025",
        },
    )

    assert response.status_code == 400
    assert "duplicate participant" in response.json()["detail"]


def test_build_calendar_from_text_rejects_duplicate_participants_with_same_status() -> None:
    client = _build_test_app()

    response = client.post(
        "/calendar/from_text",
        json={
            "participant_lines": ["1. Alpha — North", "2. Alpha — North"],
            "start_date": "08.03.2025",
            "end_date": "09.03.2025",
        },
    )

    assert response.status_code == 400
    assert "duplicate participant" in response.json()["detail"]


@pytest.mark.parametrize("participants", [PARTICIPANTS[:1], PARTICIPANTS[:3]])
def test_unknown_locale_rejected_regardless_of_participant_count(participants) -> None:
    client = _build_test_app()

    response = client.post(
        "/calendar",
        json={
            "participants": participants,
            "start_date": "08.03.2025",
            "end_date": "09.03.2025",
            "locale": "de",
        },
    )

    assert response.status_code == 400
    assert "de" in response.json()["detail"]


def test_unknown_locale_rejected_by_text_endpoint_for_empty_schedule() -> None:
    client = _build_test_app()

    response = client.post(
        "/calendar/from_text",
        json={
            "participant_lines": ["1. Alpha — North"],
            "start_date": "08.03.2025",
            "end_date": "09.03.2025",
            "locale": "de",
        },
    )

    assert response.status_code == 400


def test_single_participant_gives_empty_calendar() -> None:
    client = _build_test_app()

    response = client.post(
        "/calendar",
        json={"participants": PARTICIPANTS[:1], "start_date": "10.03.2025", "end_date": "13.03.2025"},
    )

    assert response.status_code == 200
    assert response.json()["days"] == []


def test_calendar_report_endpoint_plain_text() -> None:
    client = _build_test_app()

    response = client.post(
        "/calendar/report",
        json={"participants": PARTICIPANTS[:3], "start_date": "08.03.2025", "end_date": "09.03.2025"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text.startswith("SPORTS CALENDAR")
    assert "Total games: 6" in response.text


def test_missing_service_returns_503() -> None:
    app = FastAPI()
    app.include_router(router)
    client = TestClient(app)

    assert client.get("/calendar/config").status_code == 503


# --- command line ---

def test_cli_build_writes_calendar(tmp_path, capsys) -> None:
    teams = tmp_path / "teams.txt"
    teams.write_text(TEAMS_TEXT, encoding="utf-8")
    output = tmp_path / "calendar.txt"

    exit_code = main.main(
        ["build", str(teams), "01.03.2025", "31.03.2025", str(output), "--seed", "1", "--locale", "en"]
    )

    assert exit_code == 0
    assert "Total games: 6" in output.read_text(encoding="utf-8")
    assert "Calendar created" in capsys.readouterr().out


def test_cli_build_reports_capacity_error(tmp_path, capsys) -> None:
    teams = tmp_path / "teams.txt"
    teams.write_text(TEAMS_TEXT, encoding="utf-8")

    exit_code = main.main(
        ["build", str(teams), "10.03.2025", "13.03.2025", str(tmp_path / "calendar.txt")]
    )

    assert exit_code == 1
    assert "Scheduling error" in capsys.readouterr().err


class _FakeDashboard:
    def __init__(self) -> None:
        self.terminated = False

    def terminate(self) -> None:
        self.terminated = True


def _patch_serve(monkeypatch) -> dict:
    calls: dict = {"uvicorn": [], "dashboards": []}

    def fake_start_dashboard() -> _FakeDashboard:
        dashboard = _FakeDashboard()
        calls["dashboards"].append(dashboard)
        return dashboard

    monkeypatch.setattr(main, "_start_dashboard", fake_start_dashboard)
    monkeypatch.setattr(main.uvicorn, "run", lambda *args, **kwargs: calls["uvicorn"].append(kwargs))
    return calls


def test_cli_serve_starts_dashboard_by_default(monkeypatch, capsys) -> None:
    calls = _patch_serve(monkeypatch)

    exit_code = main.main(["serve", "--no-browser", "--port", "8123"])

    assert exit_code == 0
    assert calls["uvicorn"][0]["port"] == 8123
    assert len(calls["dashboards"]) == 1
    assert calls["dashboards"][0].terminated
    assert "Dashboard" in capsys.readouterr().out


def test_cli_serve_without_dashboard(monkeypatch, capsys) -> None:
    calls = _patch_serve(monkeypatch)

    exit_code = main.main(["serve", "--no-browser", "--no-dashboard"])

    assert exit_code == 0
    assert len(calls["uvicorn"]) == 1
    assert calls["dashboards"] == []
    assert "Dashboard" not in capsys.readouterr().out
