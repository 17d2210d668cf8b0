import os
from pathlib import Path
from dotenv import dotenv_values

TTE_CREDENTIALS_FILE = Path.home() / ".tte" / "credentials"

# Connection settings understood by the EdgeDB client.
STORE_KEYS = (
    "EDGEDB_DSN",
    "EDGEDB_INSTANCE",
    "EDGEDB_SECRET_KEY",
    "EDGEDB_HOST",
    "EDGEDB_PORT",
    "EDGEDB_USER",
    "EDGEDB_PASSWORD",
    "EDGEDB_DATABASE",
    "EDGEDB_BRANCH",
    "EDGEDB_CLIENT_TLS_SECURITY",
)


def load_store_credentials():
    """Load store connection settings from ~/.tte/credentials into os.environ.

    The EdgeDB client reads its DSN or instance name from the environment,
    so users don't have to export them every session.
    Format: KEY=VALUE, one per line. Lines starting with # are comments.
    Variables already set in the environment win.
    """
    if not TTE_CREDENTIALS_FILE.exists():
        return {}

    creds = {}
    for key, value in dotenv_values(TTE_CREDENTIALS_FILE).items():
        if not value:
            continue
        creds[key] = value
        if key not in os.environ:
            os.environ[key] = value

    return creds


def save_store_credential(key, value):
    """Save or update a single credential in ~/.tte/credentials."""
    TTE_CREDENTIALS_FILE.parent.mkdir(parents=True, exist_ok=True)
    TTE_CREDENTIALS_FILE.parent.chmod(0o700)

    lines = []
    found = False
    if TTE_CREDENTIALS_FILE.exists():
        for line in TTE_CREDENTIALS_FILE.read_text().splitlines():
            stripped = line.strip()
            if stripped and not stripped.startswith("#") and "=" in stripped:
                k = stripped.split("=", 1)[0].strip()
                if k == key:
                    lines.append(f"{key}={value}")
                    found = True
                    continue
            lines.append(line)

    if not found:
        lines.append(f"{key}={value}")

    TTE_CREDENTIALS_FILE.write_text("\n".join(lines) + "\n")
    TTE_CREDENTIALS_FILE.chmod(0o600)
    os.environ[key] = value
