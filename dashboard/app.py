"""Streamlit dashboard for the weekend fixture calendar builder."""

from __future__ import annotations

import datetime
from typing import Any, Dict, List, Optional

import pandas as pd
import requests
import streamlit as st

# ==========================================
# Configuration & Constants
# ==========================================
# Point this to your local FastAPI server
API_BASE_URL = "http://127.0.0.1:8000"
# datetime.weekday(): Monday == 0
WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

SAMPLE_PARTICIPANTS = "\n".join(
    [
        "1. Северные Волки — Мурманск",
        "2. Речные Щуки — Казань",
        "3. Горные Орлы — Екатеринбург",
        "4. Степные Ястребы — Оренбург",
    ]
)

st.set_page_config(
    page_title="Fixture Calendar",
    page_icon="📅",
    layout="wide",
)


# ==========================================
# API Helper Functions
# ==========================================
def _error_detail(response: requests.Response) -> str:
    try:
        return str(response.json().get("detail", response.text))
    except ValueError:
        return response.text


def fetch_config() -> Optional[Dict[str, Any]]:
    """Reads the fixed slot configuration from the backend."""
    try:
        response = requests.get(f"{API_BASE_URL}/calendar/config", timeout=5)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Backend connection failed: {e}")
        return None


def fetch_calendar(
    participant_lines: List[str],
    start_date: datetime.date,
    end_date: datetime.date,
    seed: Optional[int],
    locale: str,
    date_format: str,
) -> Optional[Dict[str, Any]]:
    """Calls the backend calendar builder with raw participant lines."""
    try:
        response = requests.post(
            f"{API_BASE_URL}/calendar/from_text",
            json={
                "participant_lines": participant_lines,
                "start_date": start_date.strftime(date_format),
                "end_date": end_date.strftime(date_format),
                "seed": seed,
                "locale": locale,
            },
            timeout=10,
        )
    except requests.exceptions.RequestException as e:
        st.error(f"Backend connection failed: {e}")
        return None

    if response.status_code != 200:
        st.error(f"Calendar build failed: {_error_detail(response)}")
        return None
    return response.json()


def parse_seed(raw_value: str) -> Optional[int]:
    """Empty input means an unseeded shuffle; 0 is a valid seed."""
    text = raw_value.strip()
    if not text:
        return None
    seed = int(text)
    if seed < 0:
        raise ValueError("seed must be >= 0")
    return seed


def calendar_frame(calendar: Dict[str, Any]) -> pd.DataFrame:
    rows = [
        {
            "date": day["date"],
            "weekday": day["weekday"],
            "time": fixture["time_label"],
            "host": fixture["host"],
            "guest": fixture["guest"],
            "location": fixture["location"],
        }
        for day in calendar.get("days", [])
        for fixture in day["fixtures"]
    ]
    return pd.DataFrame(rows, columns=["date", "weekday", "time", "host", "guest", "location"])


# ==========================================
# UI Page Functions
# ==========================================
def render_builder_page(config: Dict[str, Any]) -> None:
    st.header("📅 Weekend Fixture Calendar")
    st.markdown("Every team hosts every other team once; games are spread evenly over the weekends.")

    participants_text = st.text_area(
        "Participants (one '<n>. <name> — <location>' per line)",
        value=SAMPLE_PARTICIPANTS,
        height=200,
    )

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        start_date = st.date_input("Start Date", datetime.date(2025, 3, 1))
    with col2:
        end_date = st.date_input("End Date", datetime.date(2025, 4, 30))
    with col3:
        seed_text = st.text_input("Shuffle Seed (empty = random)", value="")
    with col4:
        locales = ["ru", "en"]
        locale = st.selectbox(
            "Report Language",
            locales,
            index=locales.index(config["report_locale"]) if config["report_locale"] in locales else 0,
        )

    if st.button("Build Calendar", type="primary"):
        try:
            seed = parse_seed(seed_text)
        except ValueError:
            st.error(f"Shuffle seed must be a non-negative integer, got '{seed_text}'")
            return

        with st.spinner("Pairing teams and filling weekend slots..."):
            calendar = fetch_calendar(
                participants_text.splitlines(),
                start_date,
                end_date,
                seed,
                locale,
                config["date_format"],
            )

            if calendar:
                st.subheader("Calendar Summary")
                metric_col1, metric_col2, metric_col3 = st.columns(3)
                metric_col1.metric("Games", calendar.get("total_fixtures", 0))
                metric_col2.metric("Slot Units", calendar.get("slot_count", 0))
                metric_col3.metric("Match Days", len(calendar.get("days", [])))

                frame = calendar_frame(calendar)
                if frame.empty:
                    st.info("No games to schedule for fewer than two participants.")
                else:
                    st.dataframe(frame, use_container_width=True)
                    st.download_button(
                        "Download CSV",
                        data=frame.to_csv(index=False).encode("utf-8"),
                        file_name="calendar.csv",
                        mime="text/csv",
                    )


# ==========================================
# Main App Router
# ==========================================
def main() -> None:
    st.sidebar.title("Fixture Calendar")
    st.sidebar.markdown("---")

    config = fetch_config()
    if not config:
        st.info("Start the API server with: python main.py serve")
        return

    st.sidebar.caption("Time slots: " + ", ".join(config["time_labels"]))
    st.sidebar.caption(f"Games per slot: {config['slot_capacity']}")
    st.sidebar.caption(
        "Match days: " + ", ".join(WEEKDAY_NAMES[day] for day in config["qualifying_weekdays"])
    )

    render_builder_page(config)


if __name__ == "__main__":
    main()
