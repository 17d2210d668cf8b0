"""Session audit logging.

Appends structured JSON entries to ~/.tte/logs.jsonl.
Each entry records a tracker event (login, start, stop, project changes)
with timestamp, user ID and the project it touched.
"""

import json
from datetime import datetime
from pathlib import Path

from tte.errors import ConfigIOError

LOGS_FILE = Path.home() / ".tte" / "logs.jsonl"


def write_log(entry):
    """Append a session log entry."""
    entry["timestamp"] = datetime.now().isoformat()
    try:
        LOGS_FILE.parent.mkdir(parents=True, exist_ok=True)
        with open(LOGS_FILE, "a") as f:
            f.write(json.dumps(entry) + "\n")
    except OSError as e:
        raise ConfigIOError(f"Cannot write audit log {LOGS_FILE}: {e}") from e


def read_logs(limit=None):
    """Return logged entries oldest-first. Malformed lines are skipped."""
    if not LOGS_FILE.exists():
        return []

    entries = []
    for line in LOGS_FILE.read_text().splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            entry = json.loads(line)
        except json.JSONDecodeError:
            continue
        entries.append(entry)

    if limit:
        return entries[-limit:]
    return entries
