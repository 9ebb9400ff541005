"""
Extracting the Jira ticket from a tiempo note

Notes are expected to look like '@PROJ-123: What I did'. Notes without a
ticket token are handed to a resolver, which either supplies a key or
cancels (the entry is then skipped).
"""

import logging
import re
from typing import Optional, Protocol

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from .config import TicketMemory
from .console import Reporter, console as default_console
from .errors import EntrySkipped
from .models import DEFAULT_DESCRIPTION, ParsedReference

logger = logging.getLogger(__name__)

TICKET_TOKEN = re.compile(r"@([A-Za-z0-9]+-[0-9]+)")
TICKET_WITH_COMMENT = re.compile(r"@[A-Za-z0-9]+-[0-9]+:\s*(.*)", re.DOTALL)
ISSUE_KEY = re.compile(r"^[A-Za-z]+-[0-9]+$")

SKIP_ANSWERS = {"s", "skip"}


def is_valid_issue_key(value: str) -> bool:
    return bool(ISSUE_KEY.match(value or ""))


class ReferenceResolver(Protocol):
    """Supplies a ticket key for a note that does not contain one"""

    def resolve(self, raw_text: str) -> Optional[str]:
        """Return a ticket key, or None to skip the entry"""
        ...


class SkipResolver:
    """Non-interactive mode: every ambiguous entry is skipped"""

    def __init__(self, reporter: Optional[Reporter] = None):
        self.reporter = reporter

    def resolve(self, raw_text: str) -> Optional[str]:
        if self.reporter:
            self.reporter.warning(f"Skipping entry (non-interactive mode): {raw_text}")
        return None


class MappingResolver:
    """Looks the note up in a note -> ticket key mapping, then asks the fallback"""

    def __init__(self, mapping: dict[str, str], fallback: Optional[ReferenceResolver] = None):
        self.mapping = {note.strip(): key for note, key in mapping.items()}
        self.fallback = fallback

    def resolve(self, raw_text: str) -> Optional[str]:
        ticket_key = self.mapping.get(raw_text.strip())
        if ticket_key is None and self.fallback is not None:
            return self.fallback.resolve(raw_text)
        return ticket_key


class PromptResolver:
    """Asks on the terminal until a valid key or 's'/'skip' is entered"""

    def __init__(self, memory: Optional[TicketMemory] = None, reporter: Optional[Reporter] = None,
                 console: Optional[Console] = None):
        self.memory = memory
        self.reporter = reporter
        self.console = console or default_console

    def resolve(self, raw_text: str) -> Optional[str]:
        self.console.print()
        self.console.print("[yellow]Time entry doesn't match expected format "
                           "'@XXX-123: Description/notes'[/yellow]")
        self.console.print(f"Entry: {escape(raw_text)}")

        default = None
        if self.memory:
            suggestions = self.memory.get_suggestions(raw_text)
            if suggestions:
                default = self.memory.get(raw_text) or suggestions[0]
                self.console.print(f"[dim]Previously used: {', '.join(suggestions)}[/dim]")

        while True:
            answer = Prompt.ask(
                "Enter JIRA issue key (e.g., PROJ-123) or 's' to skip",
                default=default,
                console=self.console,
            )
            answer = (answer or "").strip()

            if answer.lower() in SKIP_ANSWERS:
                if self.reporter:
                    self.reporter.info(f"Skipping entry: {raw_text}")
                return None
            if not answer:
                self.console.print("[yellow]Please enter a valid issue key or 's' to skip[/yellow]")
                continue
            if not is_valid_issue_key(answer):
                self.console.print("[yellow]Invalid issue key format. Expected format: PROJ-123[/yellow]")
                continue

            if self.memory:
                self.memory.set(raw_text, answer)
            return answer


class EntryParser:
    """Turns a note into a ParsedReference"""

    def __init__(self, resolver: ReferenceResolver, default_description: str = DEFAULT_DESCRIPTION):
        self.resolver = resolver
        self.default_description = default_description

    def parse(self, note: Optional[str]) -> ParsedReference:
        if not note or not note.strip() or note.strip() == "null":
            raise EntrySkipped("Entry has empty description")

        token = TICKET_TOKEN.search(note)
        if token:
            ticket_key = token.group(1)
            comment = TICKET_WITH_COMMENT.search(note)
            description = comment.group(1).strip() if comment else ""
            return ParsedReference(
                ticket_key=ticket_key,
                description=description or self.default_description,
            )

        ticket_key = self.resolver.resolve(note)
        if not ticket_key:
            raise EntrySkipped(f"Skipped entry without ticket key: {note}")
        if not is_valid_issue_key(ticket_key):
            raise EntrySkipped(f"Invalid issue key {ticket_key!r} for entry: {note}")

        logger.debug("Resolved %r to %s", note, ticket_key)
        return ParsedReference(ticket_key=ticket_key, description=note, resolved=True)


def build_resolver(non_interactive: bool, reporter: Optional[Reporter] = None,
                   memory: Optional[TicketMemory] = None) -> ReferenceResolver:
    """
    Pick the resolver for a run

    Non-interactive runs reuse keys remembered from earlier prompts and skip
    anything else.
    """
    if non_interactive:
        if memory and memory.mappings:
            return MappingResolver(memory.mappings, fallback=SkipResolver(reporter))
        return SkipResolver(reporter)
    return PromptResolver(memory=memory, reporter=reporter)
