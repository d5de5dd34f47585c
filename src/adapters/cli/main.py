"""
adapters.cli.main - CLI adapter for the Alivio migraine tracker.

Mirrors src/adapters/rest/ but for terminal use. Uses the same
ServiceFactory and services as the REST API so all behaviour (logging,
statistics, backups) is identical.

Commands
--------
  log        Log a crisis (pain, medication, period)
  rest       One-tap rest entry
  edit       Change fields of a logged crisis
  delete     Delete a crisis
  list       Most recent crises
  day        Entries of one day, optionally filtered
  calendar   Month view with day markers
  stats      Rolling 30-day statistics
  insights   Most frequent symptom, effective medication and location
  profile    Show the profile
  onboard    Create or replace the profile
  export     Write a backup file
  import     Replace all data with a backup file
  clear      Delete all data

Usage
-----
  python run_cli.py log --intensity 7 --symptom Nausea --location Temporal
  python run_cli.py stats
  python run_cli.py export -o backup.json
"""

from __future__ import annotations

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

# ── Ensure src/ is on the path ──
_SRC = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(_SRC))

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from application.dto import CrisisDraft
from application.services.calendar import CalendarFilter, DayMarker, month_grid
from domain.entities import Crisis, MedicationEntry
from domain.exceptions import BackupFormatError, RepositoryError
from domain.models import EntryType, FunctionalImpact, Relief
from factory import ServiceFactory
from infrastructure.config import Settings

__version__ = "1.0.0"

console = Console()
app = typer.Typer(
    help="Alivio migraine tracker CLI",
    add_completion=False,
    no_args_is_help=True,
)

_MARKER_ICONS = {
    DayMarker.PAIN: "[magenta]⚡[/magenta]",
    DayMarker.MEDICATION: "[green]💊[/green]",
    DayMarker.PERIOD: "[red]💧[/red]",
    DayMarker.REST: "[cyan]☾[/cyan]",
}


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _make_factory() -> ServiceFactory:
    """Create and initialize a ServiceFactory from the environment."""
    factory = ServiceFactory(Settings.from_env())
    factory.initialize()
    return factory


def _fail(message: str) -> None:
    console.print(Panel(f"[bold red]{message}[/bold red]", border_style="red"))
    raise typer.Exit(code=1)


def _parse_medication(value: str) -> MedicationEntry:
    """Parse ``name[:dose[:relief]]``."""
    parts = [p.strip() for p in value.split(":")]
    if not parts[0]:
        raise typer.BadParameter(f"Medication needs a name: {value!r}")
    dose = parts[1] if len(parts) > 1 else ""
    try:
        relief = Relief(parts[2].capitalize()) if len(parts) > 2 else Relief.MODERATE
    except ValueError:
        raise typer.BadParameter(
            f"Relief must be one of {[r.value for r in Relief]}, got {parts[2]!r}"
        )
    return MedicationEntry(name=parts[0], dose=dose, relief=relief)


def _crisis_table(crises: list[Crisis], title: str) -> Table:
    t = Table(title=title, box=box.SIMPLE, padding=(0, 1))
    t.add_column("Date", style="bold")
    t.add_column("Type")
    t.add_column("Time")
    t.add_column("Int.", justify="right")
    t.add_column("Symptoms")
    t.add_column("Medications")
    t.add_column("ID", style="dim")
    for c in crises:
        time = c.start_time + (f" • {c.duration}" if c.duration else "")
        meds = ", ".join(f"{m.name} ({m.relief.value})" for m in c.medications)
        kind = c.type.value + (" [red]♀[/red]" if c.is_period else "")
        t.add_row(c.date, kind, time, str(c.intensity), ", ".join(c.symptoms), meds, c.id[:8])
    return t


def _resolve_id(factory: ServiceFactory, prefix: str) -> str:
    """Accept a full id or the short prefix shown by ``list``."""
    matches = [c.id for c in factory.crisis_repository.get_all() if c.id.startswith(prefix)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        _fail(f"Id prefix '{prefix}' is ambiguous ({len(matches)} matches).")
    return prefix


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"alivio v{__version__}")
        raise typer.Exit()


# ---------------------------------------------------------------------------
# Commands: Logging
# ---------------------------------------------------------------------------

@app.command()
def log(
    day: Optional[str] = typer.Option(None, "--date", "-d", help="Day (YYYY-MM-DD), default today."),
    intensity: int = typer.Option(0, "--intensity", "-i", min=0, max=10, help="Pain 0-10."),
    start: str = typer.Option("", "--start", help="Start time HH:MM."),
    end: str = typer.Option("", "--end", help="End time HH:MM."),
    entry_type: EntryType = typer.Option(EntryType.PAIN, "--type", "-t", help="Entry type when nothing else decides it."),
    symptom: Optional[list[str]] = typer.Option(None, "--symptom", "-s", help="Symptom tag (repeatable)."),
    location: Optional[list[str]] = typer.Option(None, "--location", "-l", help="Pain location (repeatable)."),
    quality: Optional[list[str]] = typer.Option(None, "--quality", "-q", help="Pain quality (repeatable)."),
    med: Optional[list[str]] = typer.Option(None, "--med", "-m", help="Medication name[:dose[:relief]] (repeatable)."),
    impact: FunctionalImpact = typer.Option(FunctionalImpact.NONE, "--impact", help="Functional impact."),
    notes: str = typer.Option("", "--notes", "-n"),
    period: bool = typer.Option(False, "--period", help="Mark as a period day."),
) -> None:
    """Log a crisis. The entry type is derived from what was entered."""
    draft = CrisisDraft(
        date=day or date.today().isoformat(),
        type=entry_type,
        start_time=start,
        end_time=end,
        intensity=intensity,
        localization=location or [],
        pain_quality=quality or [],
        symptoms=symptom or [],
        medications=[_parse_medication(m) for m in med or []],
        functional_impact=impact,
        notes=notes,
        is_period=period,
    )
    factory = _make_factory()
    try:
        created = factory.create_crisis_log_service().log(draft)
    except ValueError as e:
        _fail(str(e))
    except RepositoryError as e:
        _fail(f"Save failed: {e}")
    console.print(
        f"[green]Logged[/green] {created.type.value} on [bold]{created.date}[/bold] "
        f"[dim]({created.id[:8]})[/dim]"
    )


@app.command()
def rest(
    day: Optional[str] = typer.Option(None, "--date", "-d", help="Day (YYYY-MM-DD), default today."),
) -> None:
    """Log a rest break."""
    factory = _make_factory()
    try:
        created = factory.create_crisis_log_service().log_rest(day)
    except ValueError as e:
        _fail(str(e))
    except RepositoryError as e:
        _fail(f"Save failed: {e}")
    console.print(f"[cyan]Rest logged[/cyan] on [bold]{created.date}[/bold]")


@app.command()
def edit(
    crisis_id: str = typer.Argument(..., help="Crisis id (or the short prefix from list)."),
    day: Optional[str] = typer.Option(None, "--date", "-d"),
    intensity: Optional[int] = typer.Option(None, "--intensity", "-i", min=0, max=10),
    notes: Optional[str] = typer.Option(None, "--notes", "-n"),
    impact: Optional[FunctionalImpact] = typer.Option(None, "--impact"),
    period: Optional[bool] = typer.Option(None, "--period/--no-period"),
) -> None:
    """Change the given fields of a crisis; everything else is kept."""
    changes = {
        name: value
        for name, value in {
            "date": day,
            "intensity": intensity,
            "notes": notes,
            "functional_impact": impact,
            "is_period": period,
        }.items()
        if value is not None
    }
    if not changes:
        _fail("Nothing to change.")
    factory = _make_factory()
    try:
        updated = factory.crisis_repository.update(_resolve_id(factory, crisis_id), changes)
    except ValueError as e:
        _fail(str(e))
    except RepositoryError as e:
        _fail(f"Save failed: {e}")
    if updated is None:
        console.print(f"[yellow]No crisis with id '{crisis_id}'.[/yellow]")
        return
    console.print(f"[green]Updated[/green] {updated.id[:8]} ({', '.join(sorted(changes))})")


@app.command()
def delete(
    crisis_id: str = typer.Argument(..., help="Crisis id (or the short prefix from list)."),
) -> None:
    """Delete a crisis."""
    factory = _make_factory()
    try:
        deleted = factory.crisis_repository.delete(_resolve_id(factory, crisis_id))
    except RepositoryError as e:
        _fail(f"Delete failed: {e}")
    if deleted:
        console.print("[green]Deleted.[/green]")
    else:
        console.print(f"[yellow]No crisis with id '{crisis_id}'.[/yellow]")


# ---------------------------------------------------------------------------
# Commands: Browsing
# ---------------------------------------------------------------------------

@app.command(name="list")
def list_crises(
    limit: int = typer.Option(10, "--limit", "-n", help="How many entries to show."),
) -> None:
    """Show the most recent crises."""
    factory = _make_factory()
    recent = factory.create_calendar_service().recent(limit)
    if not recent:
        console.print("[dim]Nothing logged yet.[/dim]")
        return
    console.print(_crisis_table(recent, f"Latest {len(recent)} entries"))


@app.command()
def day(
    which: str = typer.Argument(..., help="Day (YYYY-MM-DD)."),
    flt: CalendarFilter = typer.Option(CalendarFilter.ALL, "--filter", "-f"),
) -> None:
    """Show the entries of one day."""
    factory = _make_factory()
    try:
        entries = factory.create_calendar_service().entries_for_day(which, flt)
    except ValueError as e:
        _fail(str(e))
    if not entries:
        console.print(f"[dim]No entries on {which}.[/dim]")
        return
    console.print(_crisis_table(entries, which))


@app.command()
def calendar(
    year: int = typer.Argument(..., help="Year, e.g. 2024."),
    month: int = typer.Argument(..., min=1, max=12, help="Month 1-12."),
) -> None:
    """Month view with a marker per kind of entry."""
    factory = _make_factory()
    grid = month_grid(year, month)
    view = factory.create_calendar_service().month_view(year, month)

    t = Table(title=f"{year}-{month:02d}", box=box.SIMPLE_HEAVY, show_lines=True)
    for label in ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"):
        t.add_column(label, justify="center", min_width=6)

    cells = [""] * grid.start_offset
    for d in range(1, grid.days_in_month + 1):
        key = f"{year:04d}-{month:02d}-{d:02d}"
        icons = "".join(_MARKER_ICONS[m] for m in view.get(key, []))
        cells.append(f"{d}\n{icons}" if icons else str(d))
    while len(cells) % 7:
        cells.append("")
    for week in range(0, len(cells), 7):
        t.add_row(*cells[week:week + 7])
    console.print(t)


# ---------------------------------------------------------------------------
# Commands: Analytics
# ---------------------------------------------------------------------------

@app.command()
def stats() -> None:
    """Rolling statistics over the last 30 days."""
    factory = _make_factory()
    s = factory.create_analytics_service().get_stats()
    t = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    t.add_column("Metric", style="bold")
    t.add_column("Value")
    t.add_row(f"Crises (last {factory.config.recent_window_days} days)", str(s.total_recent))
    t.add_row("Average intensity", s.avg_intensity)
    t.add_row("Total logged", str(s.total_history))
    t.add_row("Days free", str(s.days_free))
    console.print(Panel(t, title="Statistics", border_style="blue"))


@app.command()
def insights() -> None:
    """Most frequent symptom, effective medication and location."""
    factory = _make_factory()
    result = factory.create_analytics_service().get_clinical_insights()
    if result is None:
        console.print("[dim]Log some crises first.[/dim]")
        return
    t = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    t.add_column("Field", style="bold")
    t.add_column("Value")
    t.add_row("Top symptom", result.top_symptom)
    t.add_row("Most effective medication", result.top_medication)
    t.add_row("Usual location", result.top_localization)
    console.print(Panel(t, title="Clinical Insights", border_style="yellow"))


# ---------------------------------------------------------------------------
# Commands: Profile
# ---------------------------------------------------------------------------

@app.command()
def profile() -> None:
    """Show the profile."""
    factory = _make_factory()
    p = factory.create_profile_service().get_profile()
    if p is None:
        console.print("[dim]No profile yet.[/dim] Run [bold]onboard[/bold] first.")
        return
    t = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    t.add_column("Field", style="bold")
    t.add_column("Value")
    t.add_row("Name", p.name)
    if p.age:
        t.add_row("Age", str(p.age))
    t.add_row("Migraine type", p.migraine_type or "[dim]-[/dim]")
    t.add_row("Joined", p.joined_date[:10])
    if p.avatar:
        t.add_row("Avatar", p.avatar if len(p.avatar) < 60 else p.avatar[:57] + "...")
    console.print(Panel(t, title="Your Profile", border_style="blue"))


@app.command()
def onboard() -> None:
    """Create (or replace) the profile."""
    console.print(Panel("[bold]Welcome to Alivio[/bold]", border_style="blue"))
    name = Prompt.ask("[bold]Name[/bold]")
    age_str = Prompt.ask("[bold]Age[/bold]", default="")
    migraine_type = Prompt.ask("[bold]Migraine type[/bold]", default="")

    factory = _make_factory()
    try:
        created = factory.create_profile_service().complete_onboarding(
            name=name,
            migraine_type=migraine_type,
            age=int(age_str) if age_str.isdigit() else None,
        )
    except RepositoryError as e:
        _fail(f"Save failed: {e}")
    console.print(f"[green]Profile saved.[/green] Hello, [bold]{created.name}[/bold]!")


# ---------------------------------------------------------------------------
# Commands: Backup
# ---------------------------------------------------------------------------

@app.command(name="export")
def export_data(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="File to write (default alivio-backup-<date>.json)."),
) -> None:
    """Write a full backup file."""
    factory = _make_factory()
    payload = factory.create_backup_service().export_all()
    target = output or Path(f"alivio-backup-{date.today().isoformat()}.json")
    target.write_text(payload, encoding="utf-8")
    console.print(f"[green]Backup written to[/green] {target}")


@app.command(name="import")
def import_data(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Backup file."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Replace ALL current data with a backup file."""
    if not yes and not Confirm.ask("This replaces all current data. Continue?"):
        raise typer.Exit()
    factory = _make_factory()
    try:
        summary = factory.create_backup_service().import_all(source.read_text(encoding="utf-8"))
    except (BackupFormatError, UnicodeDecodeError) as e:
        _fail(f"Import failed: {e}")
    except RepositoryError as e:
        _fail(f"Import could not be saved: {e}")
    console.print(
        f"[green]Imported[/green] {summary.crises_imported} crises"
        + (" and the profile." if summary.profile_imported else ".")
    )


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Delete every crisis and the profile."""
    if not yes and not Confirm.ask("[bold red]Delete ALL data?[/bold red]"):
        raise typer.Exit()
    factory = _make_factory()
    factory.create_backup_service().clear_all()
    console.print("[green]All data deleted.[/green]")


# ---------------------------------------------------------------------------
# Global options
# ---------------------------------------------------------------------------

@app.callback()
def _callback(
    version: bool = typer.Option(
        False, "--version", "-v",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging."),
) -> None:
    """Alivio migraine tracker CLI"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    app()
