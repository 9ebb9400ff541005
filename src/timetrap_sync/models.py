"""
Data models for the timetrap to Jira sync
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .timestamps import to_epoch_seconds

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "Work logged via timetrap sync"


@dataclass
class TimeEntry:
    """One recorded interval from tiempo"""
    id: Optional[int]
    note: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None      # None while the entry is still running

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "TimeEntry":
        """Build an entry from one object of `t display --format=json`"""
        return cls(
            id=_coerce_id(data.get("id")),
            note=data.get("note"),
            start=data.get("start"),
            end=data.get("end"),
        )

    @property
    def has_description(self) -> bool:
        if self.note is None:
            return False
        note = self.note.strip()
        return bool(note) and note != "null"

    @property
    def duration_seconds(self) -> int:
        """end - start in whole seconds; 0 when either side is missing or unparseable"""
        if not self.start or not self.end:
            return 0

        start = to_epoch_seconds(self.start)
        end = to_epoch_seconds(self.end)
        if start is None:
            logger.error("Failed to parse start time: %s", self.start)
        if end is None:
            logger.error("Failed to parse end time: %s", self.end)
        if start is None or end is None:
            return 0

        seconds = end - start
        if seconds < 0:
            logger.warning("Invalid duration value: %d, setting to 0", seconds)
            return 0
        return seconds

    def label(self) -> str:
        return f"entry {self.id}" if self.id is not None else "entry without id"


@dataclass
class ParsedReference:
    """Ticket key and worklog comment extracted from an entry note"""
    ticket_key: str
    description: str
    resolved: bool = False          # key came from a resolver, not the note


@dataclass
class SubmissionResult:
    """A worklog that jira accepted"""
    ticket_key: str
    duration: str
    started: str
    description: str
    output: str = ""


class EntryOutcome(Enum):
    SYNCED = "synced"
    ALREADY_SYNCED = "already_synced"
    UNCONFIRMED = "unconfirmed"
    IGNORED = "ignored"


@dataclass
class SyncSummary:
    """Counters for one batch run"""
    entry_count: int = 0
    processed: int = 0
    synced: int = 0
    skipped: int = 0
    failed: int = 0
    ignored: int = 0

    def record(self, outcome: EntryOutcome):
        if outcome is EntryOutcome.IGNORED:
            self.ignored += 1
            return
        self.processed += 1
        if outcome is EntryOutcome.SYNCED:
            self.synced += 1
        else:
            self.skipped += 1

    def record_failure(self):
        self.processed += 1
        self.failed += 1

    @property
    def is_complete(self) -> bool:
        return self.processed == self.entry_count


def _coerce_id(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text or text == "null":
        return None
    try:
        return int(text)
    except ValueError:
        logger.warning("Ignoring non-numeric entry id: %r", value)
        return None
