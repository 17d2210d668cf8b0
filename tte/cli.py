import functools
from datetime import datetime

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from tte.config import load_config, save_config
from tte.credentials import STORE_KEYS, load_store_credentials, save_store_credential
from tte.entries import EntryLifecycle
from tte.errors import TrackerError
from tte.log import LOGS_FILE, read_logs, write_log
from tte.projects import ProjectResolver
from tte.report import list_entries, render_entries, render_projects
from tte.repository import create_repository
from tte.session import SessionManager


def _reports_errors(command):
    """Print tracker failures as a short red message and exit non-zero."""
    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        try:
            return command(*args, **kwargs)
        except TrackerError as e:
            Console().print(str(e), style="red", markup=False, highlight=False)
            raise SystemExit(1)
    return wrapper


def _open_session():
    """Load the session record and check it still names a live user.

    Returns (repository, user_id).
    """
    config = load_config()
    repository = create_repository(config)
    user_id = SessionManager(config, repository).authenticate()
    return repository, user_id


def _show_entries(repository, user_id):
    render_entries(Console(), list_entries(repository, user_id))


def _show_projects(repository, user_id):
    render_projects(Console(), ProjectResolver(repository).list(user_id))


@click.group()
@click.version_option(version="0.1.0")
def main():
    """tte: track time against projects, stored in EdgeDB."""
    load_store_credentials()


@main.command()
@click.argument("secret")
@_reports_errors
def login(secret):
    """Log in with a secret. An unknown secret creates a new account."""
    config = load_config()
    manager = SessionManager(config, create_repository(config))
    user_id = manager.login(secret)
    save_config(manager.config)
    write_log({"event": "login", "user": str(user_id)})
    click.echo("Successfully logged in.")


@main.command()
@_reports_errors
def logout():
    """Forget the logged-in user on this machine."""
    manager = SessionManager(load_config())
    user = manager.config.get("user_id")
    manager.logout()
    save_config(manager.config)
    write_log({"event": "logout", "user": user})
    click.echo("Logged out.")


@main.command()
@click.argument("project", required=False)
@_reports_errors
def start(project):
    """Start tracking time, stopping any running entry first.

    Without PROJECT the default project is used.
    """
    repository, user_id = _open_session()
    entry_id, resolved = EntryLifecycle(repository).start(user_id, project)
    write_log({"event": "start", "user": str(user_id), "project": resolved["name"], "entry": str(entry_id)})
    Console().print(f"Started [bold]{escape(resolved['name'])}[/bold]")
    _show_entries(repository, user_id)


@main.command()
@_reports_errors
def stop():
    """Stop the running entry."""
    repository, user_id = _open_session()
    stopped = EntryLifecycle(repository).stop_active(user_id)
    write_log({"event": "stop", "user": str(user_id), "stopped": stopped})
    _show_entries(repository, user_id)


@main.command("list")
@_reports_errors
def list_cmd():
    """List all entries."""
    repository, user_id = _open_session()
    _show_entries(repository, user_id)


@main.group()
def project():
    """Manage projects."""


@project.command("list")
@_reports_errors
def project_list():
    """List projects. The default one is marked (*)."""
    repository, user_id = _open_session()
    _show_projects(repository, user_id)


@project.command("add")
@click.argument("name")
@_reports_errors
def project_add(name):
    """Add a project."""
    repository, user_id = _open_session()
    ProjectResolver(repository).add(user_id, name)
    write_log({"event": "project_add", "user": str(user_id), "project": name})
    _show_projects(repository, user_id)


@project.command("remove")
@click.argument("name")
@_reports_errors
def project_remove(name):
    """Remove every project with this name."""
    repository, user_id = _open_session()
    deleted = ProjectResolver(repository).remove(user_id, name)
    write_log({"event": "project_remove", "user": str(user_id), "project": name, "deleted": deleted})
    click.echo(f"Deleted {deleted} projects.\n")
    _show_projects(repository, user_id)


@project.command("default")
@click.argument("name")
@_reports_errors
def project_default(name):
    """Set the default project used by `tte start`."""
    repository, user_id = _open_session()
    if ProjectResolver(repository).set_default(user_id, name):
        write_log({"event": "project_default", "user": str(user_id), "project": name})
    else:
        Console().print(f"[yellow]No project named {escape(name)}. Default unchanged.[/yellow]")
    _show_projects(repository, user_id)


@main.command()
@click.argument("key")
@click.argument("value")
@_reports_errors
def auth(key, value):
    """Save a store connection setting. Stored in ~/.tte/credentials.

    Examples:
        tte auth EDGEDB_INSTANCE my_org/time-tracker
        tte auth EDGEDB_SECRET_KEY nbwt1_...
    """
    if key not in STORE_KEYS:
        raise TrackerError(f"Unknown store setting: {key}. Use one of: {', '.join(STORE_KEYS)}")
    save_store_credential(key, value)
    click.echo(f"Saved {key} to ~/.tte/credentials")


@main.command()
@click.option("-n", "--limit", default=20, help="Number of log entries to show.")
def logs(limit):
    """Show the tracker audit log."""
    console = Console()

    if not LOGS_FILE.exists():
        console.print("[dim]No logs yet.[/dim]")
        return

    entries = read_logs(limit)
    if not entries:
        console.print("[dim]No logs found.[/dim]")
        return

    table = Table(title="Session Log")
    table.add_column("Time", style="dim")
    table.add_column("Event", style="bold")
    table.add_column("Project", style="cyan")
    table.add_column("User", style="dim")

    for entry in entries:
        ts = entry.get("timestamp", "")
        if ts:
            try:
                ts = datetime.fromisoformat(ts).strftime("%m-%d %H:%M")
            except ValueError:
                pass
        table.add_row(
            ts,
            entry.get("event", ""),
            escape(entry.get("project") or ""),
            (entry.get("user") or "")[:8],
        )

    console.print(table)
