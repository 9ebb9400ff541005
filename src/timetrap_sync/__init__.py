"""timetrap-jira-sync - Sync tiempo (timetrap) time entries to Jira worklogs."""

__version__ = "1.0.0"

from .config import Config, RunOptions, TicketMemory
from .duration import format_duration
from .jira_cli import JiraWorklogSubmitter
from .ledger import SyncLedger
from .models import EntryOutcome, ParsedReference, SyncSummary, TimeEntry
from .parser import EntryParser, MappingResolver, PromptResolver, SkipResolver
from .sync import SyncEngine
from .tiempo import TiempoSource

__all__ = [
    "Config",
    "RunOptions",
    "TicketMemory",
    "format_duration",
    "JiraWorklogSubmitter",
    "SyncLedger",
    "EntryOutcome",
    "ParsedReference",
    "SyncSummary",
    "TimeEntry",
    "EntryParser",
    "MappingResolver",
    "PromptResolver",
    "SkipResolver",
    "SyncEngine",
    "TiempoSource",
]
