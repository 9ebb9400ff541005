"""
Submitting worklogs through jira-cli

    jira issue worklog add PROJ-123 "1h 30m" --comment="..." \\
        --started="2024-01-15T09:30:00.000+0100" --no-input
"""

import logging
import subprocess
from datetime import datetime, tzinfo
from typing import Callable, Optional

from .errors import SubmissionRejected, SubmissionTimeout
from .models import SubmissionResult
from .timestamps import format_started

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class JiraWorklogSubmitter:
    """Adds one worklog per call; never retries and knows nothing about the ledger"""

    def __init__(self, command: str = "jira", timeout: float = DEFAULT_TIMEOUT,
                 tz: Optional[tzinfo] = None,
                 runner: Callable[..., subprocess.CompletedProcess] = subprocess.run):
        self.command = command
        self.timeout = timeout
        self.tz = tz
        self.runner = runner

    def build_command(self, ticket_key: str, duration: str, description: str, started: str) -> list[str]:
        return [
            self.command, "issue", "worklog", "add",
            ticket_key,
            duration,
            f"--comment={description}",
            f"--started={started}",
            "--no-input",
        ]

    def submit(self, ticket_key: str, duration: str, description: str,
               started_at: datetime) -> SubmissionResult:
        started = format_started(started_at, self.tz)
        cmd = self.build_command(ticket_key, duration, description, started)
        logger.debug("Executing Jira command: %s", cmd)

        try:
            result = self.runner(cmd, capture_output=True, text=True, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise SubmissionTimeout(ticket_key, self.timeout, _as_text(e.output)) from e
        except OSError as e:
            raise SubmissionRejected(ticket_key, None, str(e)) from e

        output = ((result.stdout or "") + (result.stderr or "")).strip()
        logger.debug("Jira command exit code: %s", result.returncode)
        if result.returncode != 0:
            raise SubmissionRejected(ticket_key, result.returncode, output)

        return SubmissionResult(
            ticket_key=ticket_key,
            duration=duration,
            started=started,
            description=description,
            output=output,
        )


def _as_text(output) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output
