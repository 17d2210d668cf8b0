"""Entry and project listings.

Durations come from the store (stop time, or store "now" for a running
entry, minus start time) and are truncated to whole seconds for display.
"""

from datetime import timedelta

from rich.markup import escape
from rich.table import Table

_SECOND = timedelta(seconds=1)


def whole_seconds(duration):
    """Whole seconds in a timedelta, truncated toward zero (90.7s -> 90, -0.5s -> 0)."""
    seconds = abs(duration) // _SECOND
    return -seconds if duration < timedelta(0) else seconds


def format_duration(seconds):
    """Format whole seconds as H:MM:SS."""
    sign = "-" if seconds < 0 else ""
    hours, rest = divmod(abs(seconds), 3600)
    minutes, secs = divmod(rest, 60)
    return f"{sign}{hours}:{minutes:02d}:{secs:02d}"


def list_entries(repository, user_id):
    """Return display views of the user's entries, in storage order."""
    return [
        {
            "id": e["id"],
            "start": e["start_at"],
            "stop": e["stop_at"],
            "duration": whole_seconds(e["duration"]),
            "project": e["project_name"],
        }
        for e in repository.list_entries(user_id)
    ]


def _timestamp(value):
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d %H:%M:%S")


def render_entries(console, entries):
    if not entries:
        console.print("[dim]No entries yet. Run `tte start`.[/dim]")
        return

    table = Table(title="Entries")
    table.add_column("Start", style="dim")
    table.add_column("Stop", style="dim")
    table.add_column("Duration", justify="right", style="bold")
    table.add_column("Project", style="cyan")

    for entry in entries:
        table.add_row(
            _timestamp(entry["start"]),
            _timestamp(entry["stop"]),
            format_duration(entry["duration"]),
            escape(entry["project"]),
        )

    console.print(table)


def render_projects(console, projects):
    if not projects:
        console.print("[dim]No projects. Run `tte project add <name>`.[/dim]")
        return

    table = Table(title="Projects")
    table.add_column("Name", style="bold cyan")
    table.add_column("Default")

    for project in projects:
        table.add_row(escape(project["name"]), "(*)" if project["is_default"] else "")

    console.print(table)
