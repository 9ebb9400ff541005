"""
Configuration
"""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from .models import DEFAULT_DESCRIPTION


CONFIG_DIR = Path.home() / ".timetrap-jira-sync"
CONFIG_FILE = CONFIG_DIR / "config.json"
MAPPING_FILE = CONFIG_DIR / "ticket_mapping.json"
DEFAULT_DB_PATH = Path.home() / ".timetrap_jira_sync.db"


@dataclass
class Config:
    """Application configuration"""
    tiempo_cmd: str = "t"                       # tiempo-rs executable
    jira_cmd: str = "jira"                      # jira-cli executable
    db_path: str = str(DEFAULT_DB_PATH)         # sync ledger (SQLite)
    worklog_timeout: float = 30.0               # seconds per `jira issue worklog add`
    default_description: str = DEFAULT_DESCRIPTION

    @classmethod
    def load(cls) -> "Config":
        """Load the config file, falling back to defaults"""
        if CONFIG_FILE.exists():
            try:
                with open(CONFIG_FILE) as f:
                    data = json.load(f)
                    return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
            except (OSError, ValueError, TypeError):
                pass
        return cls()

    def save(self):
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, 'w') as f:
            json.dump(asdict(self), f, indent=2)

    @property
    def ledger_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class RunOptions:
    """Flags for a single run, passed explicitly to whoever needs them"""
    verbose: bool = False
    non_interactive: bool = False
    force: bool = False


class TicketMemory:
    """Remembers which ticket key was chosen for a note"""

    def __init__(self, path: Optional[Path] = None):
        self.path = path or MAPPING_FILE
        self.mappings: dict[str, str] = {}  # note -> ticket key
        self.load()

    def load(self):
        if self.path.exists():
            try:
                with open(self.path) as f:
                    self.mappings = json.load(f)
            except (OSError, ValueError):
                self.mappings = {}

    def save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(self.mappings, f, indent=2, ensure_ascii=False)

    def get(self, note: str) -> Optional[str]:
        return self.mappings.get(note.strip())

    def set(self, note: str, ticket_key: str):
        self.mappings[note.strip()] = ticket_key
        self.save()

    def get_suggestions(self, note: str) -> list[str]:
        """Keys used for this note or for notes that contain it"""
        note = note.strip().lower()
        suggestions = []
        for known, ticket_key in self.mappings.items():
            if note == known.lower() and ticket_key not in suggestions:
                suggestions.insert(0, ticket_key)
        for known, ticket_key in self.mappings.items():
            if note and (note in known.lower() or known.lower() in note):
                if ticket_key not in suggestions:
                    suggestions.append(ticket_key)
        return suggestions[:5]
