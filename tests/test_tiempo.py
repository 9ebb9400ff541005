"""Tests for tiempo module."""

import json
from datetime import date

import pytest

from conftest import FakeRunner, completed
from timetrap_sync.errors import EmptyResult, MalformedResponse, NotFound, SourceUnavailable
from timetrap_sync.tiempo import TiempoSource


class TestFetchRange:
    """Tests for date-ranged retrieval."""

    def test_parses_entries(self, sample_output):
        """Test entries and command line."""
        runner = FakeRunner(completed(sample_output))
        entries = TiempoSource("t", runner=runner).fetch_range("2024-01-15", "2024-01-16")

        assert [e.id for e in entries] == [101, 102, 103]
        assert entries[0].note == "@PROJ-123: Fixed login bug"
        cmd, kwargs = runner.calls[0]
        assert cmd == ["t", "d", "--start", "2024-01-15", "--end", "2024-01-16", "--format=json"]
        assert kwargs["capture_output"] is True

    def test_fetch_day_uses_next_day_as_end(self, sample_output):
        """Test day window."""
        runner = FakeRunner(completed(sample_output))
        TiempoSource(runner=runner).fetch_day(date(2024, 1, 15))

        cmd, _ = runner.calls[0]
        assert cmd[2:6] == ["--start", "2024-01-15", "--end", "2024-01-16"]

    def test_nonzero_exit(self):
        """Test tiempo exit code."""
        runner = FakeRunner(completed("", returncode=2, stderr="no such sheet"))

        with pytest.raises(SourceUnavailable) as exc:
            TiempoSource(runner=runner).fetch_range("2024-01-15", "2024-01-16")

        assert exc.value.returncode == 2
        assert "no such sheet" in exc.value.output

    def test_command_not_found(self):
        """Test missing tiempo executable."""
        runner = FakeRunner(FileNotFoundError("t"))
        with pytest.raises(SourceUnavailable):
            TiempoSource(runner=runner).fetch_range("2024-01-15", "2024-01-16")

    @pytest.mark.parametrize("output", ["", "[]", "null"])
    def test_empty(self, output):
        """Test empty output."""
        runner = FakeRunner(completed(output))
        with pytest.raises(EmptyResult):
            TiempoSource(runner=runner).fetch_range("2024-01-15", "2024-01-16")

    def test_invalid_json_tries_display_verb(self, sample_output):
        """Test fallback to the display command."""
        runner = FakeRunner(completed("warning: bad config"), completed(sample_output))

        entries = TiempoSource(runner=runner).fetch_range("2024-01-15", "2024-01-16")

        assert len(entries) == 3
        assert runner.calls[1][0][1] == "display"

    def test_salvages_array_from_noise(self, sample_entries):
        """Test JSON array among other output."""
        noisy = "warning: something\n" + json.dumps(sample_entries) + "\ndone"
        runner = FakeRunner(completed("garbage"), completed(noisy))

        entries = TiempoSource(runner=runner).fetch_range("2024-01-15", "2024-01-16")

        assert [e.id for e in entries] == [101, 102, 103]

    def test_malformed(self):
        """Test output that is never JSON."""
        runner = FakeRunner(completed("garbage"), completed("still garbage"))
        with pytest.raises(MalformedResponse):
            TiempoSource(runner=runner).fetch_range("2024-01-15", "2024-01-16")

    def test_not_an_array(self):
        """Test JSON that is not a list."""
        runner = FakeRunner(completed('"just a string"'))
        with pytest.raises(MalformedResponse):
            TiempoSource(runner=runner).fetch_range("2024-01-15", "2024-01-16")

    def test_alternate_command_failure(self):
        """Test failing display fallback."""
        runner = FakeRunner(completed("garbage"), completed("", returncode=1))
        with pytest.raises(SourceUnavailable):
            TiempoSource(runner=runner).fetch_range("2024-01-15", "2024-01-16")


class TestFetchEntry:
    """Tests for single-entry lookup."""

    def test_finds_by_id(self, sample_output):
        """Test lookup by id."""
        runner = FakeRunner(completed(sample_output))

        entry = TiempoSource(runner=runner).fetch_entry(102)

        assert entry.id == 102
        assert runner.calls[0][0] == ["t", "d", "--format=json"]

    def test_string_ids_match_numerically(self):
        """Test string id."""
        output = json.dumps([{"id": "42", "note": "@A-1"}])
        entry = TiempoSource(runner=FakeRunner(completed(output))).fetch_entry(42)
        assert entry.id == 42

    def test_not_found(self, sample_output):
        """Test unknown id."""
        with pytest.raises(NotFound):
            TiempoSource(runner=FakeRunner(completed(sample_output))).fetch_entry(999)

    def test_empty(self):
        """Test empty output."""
        with pytest.raises(EmptyResult):
            TiempoSource(runner=FakeRunner(completed("[]"))).fetch_entry(1)
