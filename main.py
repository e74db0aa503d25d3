"""
main.py: Command-line entry point.

Build a calendar file from a participants list:

    python main.py build teams.txt 01.03.2025 30.04.2025 calendar.txt

Start the API server together with the Streamlit dashboard:

    python main.py serve

This file does NOT contain scheduling logic. See backend/services for the
pipeline and app.py for the FastAPI application.
"""

from __future__ import annotations

import argparse
import subprocess
import sys
import threading
import time
import webbrowser
from pathlib import Path
from typing import Optional, Sequence

import uvicorn

from backend.domain.constraints import ConfigurationError
from backend.services.calendar_service import FixtureCalendarService
from backend.services.distribution_service import CapacityExhaustedError
from backend.utils.config import get_settings
from backend.utils.logger import configure_logging


HOST = "127.0.0.1"
PORT = 8000
DASHBOARD_PORT = 8501
DASHBOARD_SCRIPT = Path(__file__).resolve().parent / "dashboard" / "app.py"


def _open_browser_after_startup(url: str, delay_seconds: float = 2.0) -> None:
    """Open the browser once uvicorn has had time to bind."""
    time.sleep(delay_seconds)
    print(f"\n  Opening → {url}\n")
    webbrowser.open(url)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Weekend fixture calendar builder",
    )
    parser.add_argument("--log-level", help="Override LOG_LEVEL for this run")
    subcommands = parser.add_subparsers(dest="command", required=True)

    build = subcommands.add_parser("build", help="Build a calendar file from a participants list")
    build.add_argument("participants_file", help="Text file, one '<n>. <name> — <location>' per line")
    build.add_argument("start_date", help="First date of the range (DD.MM.YYYY)")
    build.add_argument("end_date", help="Last date of the range, inclusive (DD.MM.YYYY)")
    build.add_argument("output_file", help="Where to write the calendar report")
    build.add_argument("--seed", type=int, help="Seed for the pairing shuffle")
    build.add_argument("--locale", choices=["ru", "en"], help="Report language")
    build.add_argument("--csv", dest="table_file", help="Also write the schedule as CSV")

    serve = subcommands.add_parser("serve", help="Start the API server")
    serve.add_argument("--host", default=HOST)
    serve.add_argument("--port", type=int, default=PORT)
    serve.add_argument("--reload", action="store_true", help="Hot-reload on file changes")
    serve.add_argument("--no-dashboard", action="store_true", help="Start only the API server")
    serve.add_argument("--no-browser", action="store_true", help="Do not open a browser window")
    return parser


def run_build(args: argparse.Namespace) -> int:
    service = FixtureCalendarService()
    try:
        result = service.build_calendar_file(
            participants_path=args.participants_file,
            start_date=args.start_date,
            end_date=args.end_date,
            output_path=args.output_file,
            seed=args.seed,
            locale=args.locale,
            table_path=args.table_file,
        )
    except ConfigurationError as exc:
        print(f"Input error: {exc}", file=sys.stderr)
        return 1
    except CapacityExhaustedError as exc:
        print(f"Scheduling error: {exc}", file=sys.stderr)
        return 1

    print(f"Calendar created: {args.output_file} ({result.schedule.total_fixtures} games)")
    return 0


def _start_dashboard() -> subprocess.Popen:
    return subprocess.Popen(
        [
            sys.executable,
            "-m",
            "streamlit",
            "run",
            str(DASHBOARD_SCRIPT),
            "--server.port",
            str(DASHBOARD_PORT),
            "--server.headless",
            "true",
        ]
    )


def run_serve(args: argparse.Namespace) -> int:
    docs_url = f"http://{args.host}:{args.port}/docs"
    dashboard_url = f"http://127.0.0.1:{DASHBOARD_PORT}"

    print("=" * 60)
    print("  Fixture Calendar Builder")
    print("=" * 60)
    print(f"  Server   : http://{args.host}:{args.port}")
    print(f"  API docs : {docs_url}")
    if not args.no_dashboard:
        print(f"  Dashboard: {dashboard_url}")
    print("=" * 60)
    print("  Press CTRL+C to stop\n")

    dashboard_process = None if args.no_dashboard else _start_dashboard()
    if not args.no_browser:
        browser_thread = threading.Thread(
            target=_open_browser_after_startup,
            args=(docs_url if args.no_dashboard else dashboard_url,),
            daemon=True,
        )
        browser_thread.start()

    try:
        # Blocks until CTRL+C
        uvicorn.run(
            "app:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level="info",
        )
    finally:
        if dashboard_process is not None:
            dashboard_process.terminate()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        get_settings()
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    configure_logging(args.log_level)
    if args.command == "build":
        return run_build(args)
    return run_serve(args)


if __name__ == "__main__":
    sys.exit(main())
