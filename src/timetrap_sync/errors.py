"""
Exception types raised by the sync engine
"""

from typing import Optional


class SyncError(Exception):
    """Base class for all sync failures"""


class DependencyMissing(SyncError):
    """A required external executable is not installed"""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing dependencies: {', '.join(missing)}")


class InvalidArgument(SyncError):
    """Bad command-line input"""


class SourceError(SyncError):
    """Failure while reading entries from tiempo"""


class SourceUnavailable(SourceError):
    """The tiempo command could not be run or exited non-zero"""

    def __init__(self, message: str, returncode: Optional[int] = None, output: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.output = output


class MalformedResponse(SourceError):
    """The tiempo output could not be parsed as a JSON array of entries"""


class EmptyResult(SourceError):
    """No entries were returned, nothing to do"""


class NotFound(SourceError):
    """No entry with the requested id exists"""


class LedgerUnavailable(SyncError):
    """The sync database could not be opened or written"""


class EntrySkipped(SyncError):
    """An entry was not synced because it has no usable ticket reference"""


class SubmissionError(SyncError):
    """The jira worklog command failed"""

    def __init__(self, message: str, ticket_key: str, output: str = ""):
        super().__init__(message)
        self.ticket_key = ticket_key
        self.output = output


class SubmissionRejected(SubmissionError):
    """jira exited with a non-zero status"""

    def __init__(self, ticket_key: str, returncode: Optional[int], output: str = ""):
        super().__init__(
            f"Failed to add worklog to {ticket_key} (exit code: {returncode})",
            ticket_key,
            output,
        )
        self.returncode = returncode


class SubmissionTimeout(SubmissionError):
    """jira did not finish in time; the worklog may or may not exist"""

    def __init__(self, ticket_key: str, timeout: float, output: str = ""):
        super().__init__(
            f"Command timed out after {timeout:g} seconds",
            ticket_key,
            output,
        )
        self.timeout = timeout
