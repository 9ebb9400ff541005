"""
Reading time entries from tiempo-rs

Entries are read with `t display --format=json`, which prints a JSON array of
objects with `id`, `note`, `start` and `end`.
"""

import json
import logging
import re
import subprocess
from datetime import date
from typing import Any, Callable

from .errors import EmptyResult, MalformedResponse, NotFound, SourceUnavailable
from .models import TimeEntry
from .timestamps import day_window

logger = logging.getLogger(__name__)

# A JSON array of objects buried in otherwise noisy output
_ARRAY_PATTERN = re.compile(r"\[\s*\{.*\}\s*\]", re.DOTALL)
_INVALID = object()


class TiempoSource:
    """Entry source backed by the `t` executable"""

    def __init__(self, command: str = "t", runner: Callable[..., subprocess.CompletedProcess] = subprocess.run):
        self.command = command
        self.runner = runner

    def fetch_day(self, day: date) -> list[TimeEntry]:
        start, end = day_window(day)
        return self.fetch_range(start, end)

    def fetch_range(self, start_date: str, end_date: str) -> list[TimeEntry]:
        """Entries in [start_date, end_date)"""
        logger.debug("Querying tiempo from %s to %s", start_date, end_date)
        window = ["--start", start_date, "--end", end_date]

        output = self._run(["d", *window, "--format=json"])
        payload = _load_json(output)
        if payload is _INVALID:
            logger.debug("Invalid JSON from 't d', trying 't display'")
            output = self._run(["display", *window, "--format=json"])
            payload = _load_json(output)
        if payload is _INVALID:
            payload = _salvage_array(output)

        return _to_entries(payload, f"for {start_date}")

    def fetch_entry(self, entry_id: int) -> TimeEntry:
        """Look up one entry by id in the unfiltered entry list"""
        logger.debug("Fetching tiempo entry with ID: %s", entry_id)
        output = self._run(["d", "--format=json"])
        payload = _load_json(output)
        if payload is _INVALID:
            payload = _salvage_array(output)

        for entry in _to_entries(payload, "in tiempo"):
            if entry.id is not None and entry.id == int(entry_id):
                return entry
        raise NotFound(f"No entry found with ID: {entry_id}")

    def _run(self, args: list[str]) -> str:
        cmd = [self.command, *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = self.runner(cmd, capture_output=True, text=True)
        except OSError as e:
            raise SourceUnavailable(f"Cannot run {self.command}: {e}") from e

        if result.returncode != 0:
            output = (result.stdout or "") + (result.stderr or "")
            raise SourceUnavailable(
                f"Command failed with exit code {result.returncode}: {output.strip()}",
                returncode=result.returncode,
                output=output,
            )
        return (result.stdout or "").strip()


def _load_json(output: str) -> Any:
    """Parsed JSON, or _INVALID when the text is not valid JSON"""
    if not output:
        return []
    try:
        return json.loads(output)
    except ValueError:
        return _INVALID


def _salvage_array(output: str) -> Any:
    match = _ARRAY_PATTERN.search(output or "")
    if match:
        try:
            payload = json.loads(match.group(0))
        except ValueError:
            payload = _INVALID
        if payload is not _INVALID:
            logger.debug("Extracted JSON array from noisy output")
            return payload
    raise MalformedResponse(f"Invalid JSON response from tiempo: {_preview(output)}")


def _to_entries(payload: Any, context: str) -> list[TimeEntry]:
    if payload is None or payload == []:
        raise EmptyResult(f"No time entries found {context}")
    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        raise MalformedResponse(f"Expected a JSON array of entries, got: {_preview(json.dumps(payload))}")
    return [TimeEntry.from_json(item) for item in payload]


def _preview(text: str, limit: int = 200) -> str:
    text = (text or "").strip()
    return text if len(text) <= limit else text[:limit] + "..."
