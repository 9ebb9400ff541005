"""Tests for config module."""

import json
from pathlib import Path

import pytest

from timetrap_sync.config import Config, RunOptions, TicketMemory


class TestConfig:
    """Tests for Config class."""

    def test_default_values(self):
        """Test default configuration values."""
        config = Config()

        assert config.tiempo_cmd == "t"
        assert config.jira_cmd == "jira"
        assert config.worklog_timeout == 30.0
        assert config.ledger_path == Path.home() / ".timetrap_jira_sync.db"
        assert config.default_description == "Work logged via timetrap sync"

    def test_load_missing_file(self, tmp_path, monkeypatch):
        """Test loading without a config file."""
        monkeypatch.setattr("timetrap_sync.config.CONFIG_FILE", tmp_path / "config.json")
        assert Config.load() == Config()

    def test_save_and_load(self, tmp_path, monkeypatch):
        """Test config round trip."""
        monkeypatch.setattr("timetrap_sync.config.CONFIG_DIR", tmp_path)
        monkeypatch.setattr("timetrap_sync.config.CONFIG_FILE", tmp_path / "config.json")

        Config(jira_cmd="/opt/jira", worklog_timeout=10).save()
        loaded = Config.load()

        assert loaded.jira_cmd == "/opt/jira"
        assert loaded.worklog_timeout == 10

    def test_load_ignores_unknown_keys(self, tmp_path, monkeypatch):
        """Test unknown keys are dropped."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"tiempo_cmd": "tiempo", "legacy": True}))
        monkeypatch.setattr("timetrap_sync.config.CONFIG_FILE", config_file)

        assert Config.load().tiempo_cmd == "tiempo"

    def test_load_corrupt_file(self, tmp_path, monkeypatch):
        """Test corrupt config falls back to defaults."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{not json")
        monkeypatch.setattr("timetrap_sync.config.CONFIG_FILE", config_file)

        assert Config.load() == Config()

    def test_ledger_path_expands_user(self):
        """Test ~ expansion in db_path."""
        assert Config(db_path="~/sync.db").ledger_path == Path.home() / "sync.db"


class TestRunOptions:
    """Tests for RunOptions."""

    def test_immutable(self):
        """Test RunOptions cannot be changed."""
        options = RunOptions(verbose=True)
        with pytest.raises(AttributeError):
            options.force = True


class TestTicketMemory:
    """Tests for TicketMemory class."""

    def test_set_persists(self, tmp_path):
        """Test set writes to disk."""
        path = tmp_path / "mapping.json"
        TicketMemory(path).set("Team meeting", "MEET-1")

        assert TicketMemory(path).get("Team meeting") == "MEET-1"
        assert TicketMemory(path).get("  Team meeting  ") == "MEET-1"

    def test_suggestions(self, tmp_path):
        """Test suggestion ordering."""
        memory = TicketMemory(tmp_path / "mapping.json")
        memory.mappings = {
            "Team meeting": "MEET-1",
            "Weekly team meeting": "MEET-2",
            "Code review": "DEV-3",
        }

        suggestions = memory.get_suggestions("team meeting")

        assert suggestions[0] == "MEET-1"
        assert "MEET-2" in suggestions
        assert "DEV-3" not in suggestions

    def test_corrupt_file(self, tmp_path):
        """Test corrupt mapping file."""
        path = tmp_path / "mapping.json"
        path.write_text("[[[")
        assert TicketMemory(path).mappings == {}
