#!/usr/bin/env python3
"""
timetrap-jira-sync CLI

Syncs tiempo (timetrap) entries to Jira worklogs through jira-cli.
"""

from datetime import date
from typing import Optional

import typer
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from .config import Config, RunOptions, TicketMemory
from .console import Reporter, console, setup_logging
from .deps import INSTALL_HINTS, check_dependencies
from .errors import DependencyMissing, InvalidArgument, LedgerUnavailable, SyncError
from .jira_cli import JiraWorklogSubmitter
from .ledger import SyncLedger
from .parser import EntryParser, build_resolver
from .sync import SyncEngine
from .tiempo import TiempoSource
from .timestamps import parse_date

app = typer.Typer(
    name="timetrap-jira-sync",
    help="Sync tiempo (timetrap) time entries to Jira worklogs",
    no_args_is_help=False,
)


def build_engine(config: Config, options: RunOptions, reporter: Reporter) -> SyncEngine:
    """Wire the sync engine from configuration and run options"""
    resolver = build_resolver(options.non_interactive, reporter=reporter, memory=TicketMemory())
    return SyncEngine(
        source=TiempoSource(config.tiempo_cmd),
        ledger=SyncLedger(config.ledger_path),
        parser=EntryParser(resolver, default_description=config.default_description),
        submitter=JiraWorklogSubmitter(config.jira_cmd, timeout=config.worklog_timeout),
        options=options,
        reporter=reporter,
    )


def validate_arguments(sync_date: Optional[str], single_entry: bool, entry_id: Optional[int]) -> date:
    """Check flag combinations and return the day to sync"""
    if single_entry and entry_id is None:
        raise InvalidArgument("-s/--single-entry requires -i/--id <ENTRY_ID>")
    if entry_id is not None and not single_entry:
        raise InvalidArgument("-i/--id can only be used with -s/--single-entry")

    if not sync_date:
        return date.today()
    try:
        return parse_date(sync_date)
    except ValueError:
        raise InvalidArgument("Invalid date format. Use YYYY-MM-DD")


def report_missing_dependencies(reporter: Reporter, error: DependencyMissing):
    reporter.error(str(error))
    reporter.error("Please install the required tools:")
    for name in error.missing:
        reporter.error(f"- {name}: {INSTALL_HINTS[name]}")


def run_sync(sync_date: Optional[str], yes: bool, verbose: bool, single_entry: bool,
             entry_id: Optional[int], force: bool):
    options = RunOptions(verbose=verbose, non_interactive=yes, force=force)
    setup_logging(options.verbose)
    reporter = Reporter(verbose=options.verbose)

    try:
        day = validate_arguments(sync_date, single_entry, entry_id)
    except InvalidArgument as e:
        reporter.error(str(e))
        raise typer.Exit(1)

    config = Config.load()

    try:
        check_dependencies(config)
        engine = build_engine(config, options, reporter)
        engine.ledger.initialize()

        if single_entry:
            reporter.info(f"Starting single entry sync for entry ID: {entry_id}")
            engine.sync_single(entry_id)
            reporter.success("Single entry sync completed successfully!")
        else:
            reporter.info(f"Starting Timetrap to Jira worklog sync for {day.isoformat()}")
            engine.sync_day(day)
            reporter.success("Sync completed!")
    except DependencyMissing as e:
        report_missing_dependencies(reporter, e)
        raise typer.Exit(1)
    except SyncError as e:
        reporter.error(str(e))
        if single_entry:
            reporter.error("Single entry sync failed!")
        raise typer.Exit(1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    sync_date: Optional[str] = typer.Option(None, "--date", "-d", help="Sync entries for a specific date (YYYY-MM-DD), default today"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip prompts and auto-skip entries without a ticket (non-interactive)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed progress information"),
    single_entry: bool = typer.Option(False, "--single-entry", "-s", help="Process a single tiempo entry (requires --id)"),
    entry_id: Optional[int] = typer.Option(None, "--id", "-i", min=0, help="tiempo entry ID to process (with --single-entry)"),
    force: bool = typer.Option(False, "--force", "-f", help="Resync entries that were already synced"),
):
    """
    Sync tiempo entries to Jira worklogs

    Time entries must follow the format '@XXX-123: Description/notes'.

    Examples:
      timetrap-jira-sync                    # today's entries, interactive
      timetrap-jira-sync -d 2024-01-15 -y   # one day, skip invalid entries
      timetrap-jira-sync -s -i 123 -f       # resync entry 123
    """
    if ctx.invoked_subcommand is None:
        run_sync(sync_date, yes, verbose, single_entry, entry_id, force)


@app.command()
def init():
    """Initialize the sync database"""
    config = Config.load()
    reporter = Reporter(verbose=True)
    ledger = SyncLedger(config.ledger_path)
    try:
        ledger.initialize()
    except LedgerUnavailable as e:
        reporter.error(f"Failed to initialize sync database: {e}")
        raise typer.Exit(1)
    reporter.success(f"Sync database initialized at {ledger.db_path}")


@app.command()
def status():
    """Show the sync database and any unconfirmed submissions"""
    config = Config.load()
    reporter = Reporter(verbose=True)
    ledger = SyncLedger(config.ledger_path)
    try:
        ledger.initialize()
        synced = ledger.synced_count()
        pending = ledger.pending_entries()
    except LedgerUnavailable as e:
        reporter.error(str(e))
        raise typer.Exit(1)

    console.print(f"Database: [cyan]{ledger.db_path}[/cyan]")
    console.print(f"Synced entries: [green]{synced}[/green]")

    if not pending:
        console.print("[dim]No unconfirmed submissions[/dim]")
        return

    table = Table(title="Unconfirmed submissions")
    table.add_column("Entry ID", style="yellow")
    table.add_column("Submitted at", style="dim")
    for entry_id, started_at in pending:
        table.add_row(str(entry_id), str(started_at))
    console.print(table)
    console.print("[dim]Check these in Jira, then resync with --single-entry --id N --force if needed[/dim]")


@app.command()
def setup():
    """Configure executables, database path and timeout"""
    console.print(Panel.fit("[bold]timetrap-jira-sync configuration[/bold]", title="⚙️"))

    config = Config.load()
    config.tiempo_cmd = Prompt.ask("tiempo command", default=config.tiempo_cmd, console=console)
    config.jira_cmd = Prompt.ask("jira-cli command", default=config.jira_cmd, console=console)
    config.db_path = Prompt.ask("Sync database path", default=config.db_path, console=console)

    timeout = Prompt.ask("Worklog timeout (seconds)", default=f"{config.worklog_timeout:g}", console=console)
    try:
        config.worklog_timeout = float(timeout)
    except ValueError:
        console.print(f"[yellow]Invalid timeout {timeout!r}, keeping {config.worklog_timeout:g}[/yellow]")

    config.save()
    console.print("\n[green]✓ Configuration saved[/green]")

    try:
        check_dependencies(config)
        console.print("[green]✓ tiempo and jira-cli found[/green]")
    except DependencyMissing as e:
        console.print(f"[red]✗ {e}[/red]")


if __name__ == "__main__":
    app()
