"""Summary: Tests for configuration loading.

Importance: Ensures defaults, .env, and environment overrides behave correctly.
Alternatives: Validate configuration manually during runtime.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from taskpilot.config import AppConfig, load_defaults, load_dotenv

ENV_KEYS = (
    "TASKPILOT_DB_PATH",
    "TASKPILOT_API_HOST",
    "TASKPILOT_API_PORT",
    "TASKPILOT_API_KEY",
    "TASKPILOT_PAGE_SIZE",
    "TASKPILOT_MAX_PAGE_SIZE",
    "TASKPILOT_LOG_LEVEL",
)

DEFAULTS = {
    "db_path": "test.db",
    "api_host": "127.0.0.1",
    "api_port": "3000",
    "api_key": "",
    "page_size": "50",
    "max_page_size": "500",
    "log_level": "info",
}


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so teardown removes values written by load_dotenv
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "defaults.json").write_text(json.dumps(DEFAULTS), encoding="utf-8")
    return tmp_path


def test_load_defaults_reads_json(tmp_path: Path) -> None:
    """Summary: Verify defaults are parsed from JSON.

    Importance: Confirms config file is the source of truth for variables.
    Alternatives: Hardcode defaults in the test.
    """

    defaults_path = tmp_path / "defaults.json"
    defaults_path.write_text("{\"db_path\": \"test.db\"}", encoding="utf-8")
    defaults = load_defaults(defaults_path)
    assert defaults["db_path"] == "test.db"


def test_load_defaults_requires_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_defaults(tmp_path / "missing.json")


def test_load_dotenv_sets_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Summary: Ensure .env values populate environment variables.

    Importance: Validates local secret loading without external tools.
    Alternatives: Assume OS environment is always set.
    """

    env_path = tmp_path / ".env"
    env_path.write_text("# local\nTASKPILOT_API_KEY=\"abc\"\nnot a pair\n", encoding="utf-8")
    monkeypatch.delenv("TASKPILOT_API_KEY", raising=False)
    load_dotenv(env_path)
    assert os.getenv("TASKPILOT_API_KEY") == "abc"


def test_load_dotenv_keeps_existing_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text("TASKPILOT_API_KEY=from-file\n", encoding="utf-8")
    monkeypatch.setenv("TASKPILOT_API_KEY", "from-env")
    load_dotenv(env_path)
    assert os.getenv("TASKPILOT_API_KEY") == "from-env"


def test_app_config_uses_defaults(clean_env: Path) -> None:
    """Summary: Verify AppConfig honors defaults when env is absent.

    Importance: Confirms config file remains the baseline for variables.
    Alternatives: Inline defaults directly in the AppConfig class.
    """

    config = AppConfig.from_env()
    assert config.db_path == "test.db"
    assert config.api_port == 3000
    assert config.api_key == ""
    assert config.page_size == 50
    assert config.max_page_size == 500
    assert config.log_level == "INFO"


def test_app_config_env_overrides(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKPILOT_DB_PATH", "other.db")
    monkeypatch.setenv("TASKPILOT_API_PORT", "9000")
    (clean_env / ".env").write_text("TASKPILOT_PAGE_SIZE=10\n", encoding="utf-8")
    config = AppConfig.from_env()
    assert config.db_path == "other.db"
    assert config.api_port == 9000
    assert config.page_size == 10
