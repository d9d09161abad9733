"""Summary: Application configuration for TaskPilot.

Importance: Centralizes environment, .env, and config defaults for consistent behavior.
Alternatives: Use a dedicated settings library like Pydantic Settings.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True)
class AppConfig:
    """Summary: Holds configuration values for storage, API, and logging.

    Importance: Ensures all services derive settings from a single source of truth.
    Alternatives: Store settings in a shared config file and parse at startup.
    """

    db_path: str
    api_host: str
    api_port: int
    api_key: str
    page_size: int
    max_page_size: int
    log_level: str

    @staticmethod
    def from_env(defaults_path: Path | None = None) -> "AppConfig":
        """Summary: Build configuration from defaults, .env, and environment.

        Importance: Keeps all variables defined in config defaults while allowing overrides.
        Alternatives: Parse only environment variables without a defaults file.
        """

        defaults = load_defaults(defaults_path or Path("config") / "defaults.json")
        load_dotenv(Path(".env"))
        return AppConfig(
            db_path=os.getenv("TASKPILOT_DB_PATH", defaults["db_path"]),
            api_host=os.getenv("TASKPILOT_API_HOST", defaults["api_host"]),
            api_port=int(os.getenv("TASKPILOT_API_PORT", defaults["api_port"])),
            api_key=os.getenv("TASKPILOT_API_KEY", defaults["api_key"]),
            page_size=int(os.getenv("TASKPILOT_PAGE_SIZE", defaults["page_size"])),
            max_page_size=int(os.getenv("TASKPILOT_MAX_PAGE_SIZE", defaults["max_page_size"])),
            log_level=os.getenv("TASKPILOT_LOG_LEVEL", defaults["log_level"]).upper(),
        )


def load_defaults(path: Path) -> dict[str, str]:
    """Summary: Load configuration defaults from JSON.

    Importance: Ensures all variables exist in a single config file.
    Alternatives: Inline defaults in the AppConfig initializer.
    """

    if not path.exists():
        raise FileNotFoundError(f"Defaults file not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def load_dotenv(path: Path) -> None:
    """Summary: Load key-value pairs from a .env file into the environment.

    Importance: Keeps secrets out of code while supporting local workflows.
    Alternatives: Use python-dotenv or OS-specific secret stores.
    """

    if not path.exists():
        return
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip().strip('"').strip("'"))
