"""Summary: Application factory wiring core services.

Importance: Centralizes dependency creation for the CLI and API layers.
Alternatives: Instantiate services manually in each entrypoint.
"""

from __future__ import annotations

from dataclasses import dataclass

from taskpilot.classifier import RuleBasedClassifier
from taskpilot.config import AppConfig
from taskpilot.services import TaskService
from taskpilot.storage.sqlite_store import SqliteStore


@dataclass(frozen=True)
class AppServices:
    """Summary: Bundle of core services for TaskPilot.

    Importance: Simplifies passing dependencies to UI or API layers.
    Alternatives: Use a dependency injection container.
    """

    tasks: TaskService
    store: SqliteStore
    config: AppConfig


def build_services(config: AppConfig) -> AppServices:
    """Summary: Build core services from configuration.

    Importance: Provides a single construction path for the application.
    Alternatives: Instantiate services directly within each entrypoint.
    """

    store = SqliteStore(config.db_path)
    store.initialize()
    tasks = TaskService(store=store, classifier=RuleBasedClassifier())
    return AppServices(tasks=tasks, store=store, config=config)
