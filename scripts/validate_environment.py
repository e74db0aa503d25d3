#!/usr/bin/env python3
"""Validate local fixture-calendar environment readiness."""

from __future__ import annotations

import importlib
import shutil
import sys
import tempfile
from dataclasses import replace
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.repository.calendar_repository import CalendarRepository
from backend.services.calendar_service import FixtureCalendarService
from backend.utils.config import get_settings

SEPARATOR_LINE = "=" * 44

SMOKE_PARTICIPANTS = "1. Alpha — North\n2. Bravo — South\n3. Charlie — East\n"
# Fri 07.03.2025 .. Sun 09.03.2025: three match days
SMOKE_START = "07.03.2025"
SMOKE_END = "09.03.2025"


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True
    temp_dir = tempfile.mkdtemp(prefix="fixture-calendar-env-")

    # CHECK 1: Python version >= 3.10
    if sys.version_info >= (3, 10):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.10",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2: Required packages importable
    package_specs = [
        ("fastapi", "fastapi"),
        ("uvicorn", "uvicorn"),
        ("pydantic", "pydantic"),
        ("pandas", "pandas"),
        ("streamlit", "streamlit"),
        ("requests", "requests"),
        ("httpx", "httpx"),
        ("pytest", "pytest"),
    ]
    import_errors: list[str] = []
    for module_name, dist_name in package_specs:
        try:
            importlib.import_module(module_name)
            version(dist_name)
        except (ImportError, PackageNotFoundError) as exc:
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    try:
        settings = replace(get_settings(), shuffle_random_seed=7, report_locale="en")
        repository = CalendarRepository(settings)
        service = FixtureCalendarService(repository=repository, settings=settings)
        participants_path = Path(temp_dir) / "teams.txt"
        output_path = Path(temp_dir) / "calendar.txt"
        participants_path.write_text(SMOKE_PARTICIPANTS, encoding="utf-8")

        # CHECK 3: Participant loading
        try:
            participants = repository.load_participants(participants_path)
            if len(participants) != 3:
                raise RuntimeError(f"expected 3 participants, got {len(participants)}")
            ok, line = _print_result("Participant loading", True)
        except Exception as exc:
            ok, line = _print_result("Participant loading", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 4: End-to-end calendar build (6 games over 18 slot units)
        try:
            result = service.build_calendar_file(
                participants_path=participants_path,
                start_date=SMOKE_START,
                end_date=SMOKE_END,
                output_path=output_path,
            )
            if result.schedule.total_fixtures != 6 or result.slot_count != 18:
                raise RuntimeError(
                    f"expected 6 games over 18 slots, got "
                    f"{result.schedule.total_fixtures} over {result.slot_count}"
                )
            if "Total games: 6" not in output_path.read_text(encoding="utf-8"):
                raise RuntimeError("report total line missing")
            ok, line = _print_result(
                "Calendar build",
                True,
                f": {result.schedule.total_fixtures} games on {len(result.schedule.days)} days",
            )
        except Exception as exc:
            ok, line = _print_result("Calendar build", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)

    print(SEPARATOR_LINE)
    print(" Fixture Calendar Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
