import json
from pathlib import Path

from tte.errors import ConfigIOError

CONFIG_DIR = Path.home() / ".tte"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_CONFIG = {
    "user_id": None,
}


def load_config():
    """Load ~/.tte/config.json. A missing file is an empty session, not an error."""
    config = dict(DEFAULT_CONFIG)
    try:
        raw = CONFIG_FILE.read_text()
    except FileNotFoundError:
        return config
    except OSError as e:
        raise ConfigIOError(f"Cannot read {CONFIG_FILE}: {e}") from e

    try:
        stored = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigIOError(f"Invalid JSON in {CONFIG_FILE}: {e}") from e
    if not isinstance(stored, dict):
        raise ConfigIOError(f"Invalid config in {CONFIG_FILE}: expected an object")

    config.update(stored)
    return config


def save_config(config):
    """Merge config into ~/.tte/config.json."""
    existing = load_config()
    existing.update(config)
    try:
        CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_FILE.write_text(json.dumps(existing, indent=2) + "\n")
    except OSError as e:
        raise ConfigIOError(f"Cannot write {CONFIG_FILE}: {e}") from e
    return existing
