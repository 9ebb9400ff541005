"""
Sync engine: tiempo entries -> Jira worklogs

Both the batch run (all entries of a day) and the single-entry run go through
`sync_entry`. Batch mode counts per-entry failures and carries on; single-entry
mode lets them propagate.
"""

import logging
from datetime import date
from typing import Optional

from .config import RunOptions
from .console import Reporter
from .duration import format_duration
from .errors import (
    EmptyResult,
    EntrySkipped,
    LedgerUnavailable,
    SubmissionError,
    SubmissionRejected,
    SubmissionTimeout,
)
from .jira_cli import JiraWorklogSubmitter
from .ledger import SyncLedger
from .models import EntryOutcome, SyncSummary, TimeEntry
from .parser import EntryParser
from .tiempo import TiempoSource
from .timestamps import day_window, parse_timestamp

logger = logging.getLogger(__name__)


class SyncEngine:
    """Drives fetch -> ledger check -> parse -> submit -> ledger write"""

    def __init__(self, source: TiempoSource, ledger: SyncLedger, parser: EntryParser,
                 submitter: JiraWorklogSubmitter, options: RunOptions = RunOptions(),
                 reporter: Optional[Reporter] = None):
        self.source = source
        self.ledger = ledger
        self.parser = parser
        self.submitter = submitter
        self.options = options
        self.reporter = reporter or Reporter(verbose=options.verbose)

    # -- batch -----------------------------------------------------------

    def sync_day(self, day: date) -> SyncSummary:
        start, end = day_window(day)
        return self.sync_range(start, end)

    def sync_range(self, start_date: str, end_date: str) -> SyncSummary:
        """
        Sync every entry in [start_date, end_date)

        Fetch errors other than EmptyResult propagate. Entry-level failures are
        counted in the summary; LedgerUnavailable aborts the run.
        """
        self.reporter.info(f"Querying timetrap from {start_date} to {end_date}")
        try:
            entries = self.source.fetch_range(start_date, end_date)
        except EmptyResult as e:
            self.reporter.warning(str(e))
            return SyncSummary()

        summary = SyncSummary(entry_count=len(entries))
        self.reporter.info(f"Found {summary.entry_count} entries to process")

        for index, entry in enumerate(entries, 1):
            self.reporter.info(f"Processing entry {index} of {summary.entry_count}")
            try:
                outcome = self.sync_entry(entry, fatal=False)
            except EntrySkipped as e:
                logger.debug("Entry skipped: %s", e)
                summary.record_failure()
            except SubmissionError:
                summary.record_failure()
            else:
                summary.record(outcome)

        self.report_summary(summary)
        return summary

    def report_summary(self, summary: SyncSummary):
        self.reporter.info("Sync Summary:")
        self.reporter.info(f"Total entries found: {summary.entry_count}")
        self.reporter.info(f"Total entries processed: {summary.processed}")
        self.reporter.success(f"Successfully synced: {summary.synced} entries")
        if summary.skipped:
            self.reporter.info(f"Skipped (already synced): {summary.skipped} entries")
        if summary.ignored:
            self.reporter.info(f"Skipped (no description): {summary.ignored} entries")
        if summary.failed:
            self.reporter.error(f"Failed to sync: {summary.failed} entries")
        if not summary.is_complete:
            self.reporter.warning(
                f"Not all entries were processed. Expected {summary.entry_count}, "
                f"but processed {summary.processed}."
            )

    # -- single entry ----------------------------------------------------

    def sync_single(self, entry_id: int) -> EntryOutcome:
        """Sync one entry by id; any failure propagates"""
        self.reporter.info(f"Fetching tiempo entry with ID: {entry_id}")
        entry = self.source.fetch_entry(entry_id)
        self.reporter.info(f"Found entry with ID: {entry_id}")
        return self.sync_entry(entry, fatal=True)

    # -- shared pipeline -------------------------------------------------

    def sync_entry(self, entry: TimeEntry, fatal: bool) -> EntryOutcome:
        """
        Run one entry through the pipeline

        Raises EntrySkipped, SubmissionRejected/SubmissionTimeout or
        LedgerUnavailable. With fatal=True an entry without a note is an
        error instead of being ignored.
        """
        entry_id = entry.id
        self.reporter.info(f"Extracted entry ID: {entry_id if entry_id is not None else ''}")

        if entry_id is not None and not self.options.force:
            if self.ledger.is_synced(entry_id):
                self.reporter.success(f"⚠ ✓ Entry {entry_id} has already been synced, skipping")
                return EntryOutcome.ALREADY_SYNCED
            if self.ledger.is_pending(entry_id):
                self.reporter.warning(
                    f"Entry {entry_id} was submitted before but never confirmed; "
                    "check Jira and use --force to resubmit"
                )
                return EntryOutcome.UNCONFIRMED

        duration_seconds = entry.duration_seconds
        self.reporter.info(f"Calculated duration: {duration_seconds} seconds")

        if not entry.has_description:
            if fatal:
                self.reporter.error("Entry has empty description, cannot sync")
                raise EntrySkipped("Entry has empty description, cannot sync")
            self.reporter.warning("Skipping entry with empty description")
            return EntryOutcome.IGNORED

        try:
            reference = self.parser.parse(entry.note)
        except EntrySkipped:
            if fatal:
                self.reporter.error("Failed to parse entry or entry was skipped")
            raise
        self.reporter.info(f"Parsed entry: {reference.ticket_key}|{reference.description}")
        if reference.resolved:
            self.reporter.info(f"No ticket in note, using {reference.ticket_key} from the resolver")

        started_at = parse_timestamp(entry.start)
        if started_at is None:
            self.reporter.error(f"Cannot determine start time of {entry.label()}: {entry.start!r}")
            raise EntrySkipped(f"Unparseable start time: {entry.start!r}")

        duration = format_duration(duration_seconds)
        self.reporter.info(
            f"Adding worklog: {reference.ticket_key} - {reference.description} "
            f"({duration}) starting at {started_at.isoformat()}"
        )

        if entry_id is not None:
            self.ledger.mark_pending(entry_id)

        try:
            self.submitter.submit(reference.ticket_key, duration, reference.description, started_at)
        except SubmissionTimeout as e:
            self.reporter.error(f"✗ Failed to add worklog to {e.ticket_key}")
            self.reporter.error(str(e))
            if e.output:
                self.reporter.error(f"Command output: {e.output}")
            # Outcome unknown, keep the pending mark
            if entry_id is not None:
                self.reporter.warning(f"Entry {entry_id} left unconfirmed")
            raise
        except SubmissionRejected as e:
            self.reporter.error(f"✗ {e}")
            if e.output:
                self.reporter.error(f"Command output: {e.output}")
            if entry_id is not None:
                self.ledger.clear_pending(entry_id)
            raise

        self.reporter.success(f"✓ Added worklog to {reference.ticket_key}")

        if entry_id is not None:
            try:
                self.ledger.mark_synced(entry_id)
            except LedgerUnavailable:
                self.reporter.error(
                    f"Worklog for entry {entry_id} was submitted but could not be recorded; "
                    "it stays flagged as unconfirmed and will not be resubmitted without --force"
                )
                raise
            self.reporter.info(f"Entry {entry_id} marked as synced")

        return EntryOutcome.SYNCED
