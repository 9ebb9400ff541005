"""Pytest configuration and fixtures."""

import json
import subprocess

import pytest
from unittest.mock import MagicMock

from timetrap_sync.config import RunOptions
from timetrap_sync.console import Reporter
from timetrap_sync.ledger import SyncLedger


class FakeRunner:
    """Stands in for subprocess.run; replays queued results and records calls."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, BaseException):
            raise result
        return result


def completed(stdout="", returncode=0, stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def sample_entries():
    """tiempo `display --format=json` output for one day."""
    return [
        {
            "id": 101,
            "note": "@PROJ-123: Fixed login bug",
            "start": "2024-01-15T09:00:00Z",
            "end": "2024-01-15T10:30:00Z",
        },
        {
            "id": 102,
            "note": "@WEB-7",
            "start": "2024-01-15T11:00:00Z",
            "end": "2024-01-15T11:20:00Z",
        },
        {
            "id": 103,
            "note": "Team meeting",
            "start": "2024-01-15T14:00:00Z",
            "end": "2024-01-15T15:00:00Z",
        },
    ]


@pytest.fixture
def sample_output(sample_entries):
    return json.dumps(sample_entries)


@pytest.fixture
def ledger(tmp_path):
    """Initialized ledger in a temporary directory."""
    ledger = SyncLedger(tmp_path / "sync.db")
    ledger.initialize()
    return ledger


@pytest.fixture
def reporter():
    return MagicMock(spec=Reporter)


@pytest.fixture
def options():
    return RunOptions(non_interactive=True)
