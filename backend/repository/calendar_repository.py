"""Repository layer responsible for all file access."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from backend.domain.constraints import ConfigurationError, ParticipantFormatError
from backend.domain.models import Participant
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)

_ORDINAL_PREFIX = re.compile(r"^\s*\d+\s*[.)]\s*")


class CalendarRepository:
    """Reads participant lists and writes rendered calendars."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()

    def parse_participant_lines(self, lines: Iterable[str]) -> list[Participant]:
        """Parse ``"<n>. <name> — <location>"`` records in source order."""
        separator = self._settings.participant_separator
        participants: list[Participant] = []
        seen: set[Participant] = set()

        for line_number, raw_line in enumerate(lines, start=1):
            line = raw_line.strip()
            if not line:
                continue

            parts = line.split(separator)
            if len(parts) < 2:
                raise ParticipantFormatError(
                    line_number, line, f"expected '<name> {separator} <location>'"
                )

            name = _ORDINAL_PREFIX.sub("", parts[0]).strip()
            location = parts[1].strip()
            if not name:
                raise ParticipantFormatError(line_number, line, "name is empty")
            if not location:
                raise ParticipantFormatError(line_number, line, "location is empty")

            participant = Participant(name=name, location=location)
            if participant in seen:
                raise ParticipantFormatError(line_number, line, "duplicate participant")
            seen.add(participant)
            participants.append(participant)

        return participants

    def load_participants(self, path: Path | str) -> list[Participant]:
        source = Path(path)
        try:
            text = source.read_text(encoding=self._settings.participant_file_encoding)
        except FileNotFoundError as exc:
            raise ConfigurationError(f"Participants file not found: {source}") from exc
        except UnicodeDecodeError as exc:
            raise ConfigurationError(
                f"Participants file is not valid {self._settings.participant_file_encoding}: {source}"
            ) from exc

        participants = self.parse_participant_lines(text.splitlines())
        logger.info("Participants loaded | path=%s | count=%s", source, len(participants))
        return participants

    def write_report(self, path: Path | str, text: str) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        logger.info("Calendar written | path=%s | bytes=%s", target, len(text.encode("utf-8")))
        return target

    def write_table(self, path: Path | str, frame: pd.DataFrame) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(target, index=False, encoding="utf-8")
        logger.info("Schedule table written | path=%s | rows=%s", target, len(frame))
        return target
