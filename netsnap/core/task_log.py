"""Task-visible log attached to the result of a snapshot run.

Unlike the module loggers, which feed the operator's log files, a ``TaskLog``
collects the messages an end user sees next to a task: driver debug output,
rejected mutations and failed lookups.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

logger = logging.getLogger(__name__)


class TaskLogLevel(StrEnum):
    """Severity of a task log entry."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True)
class TaskLogEntry:
    """Single line of a task log."""

    level: TaskLogLevel
    message: str
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    def __str__(self) -> str:
        return f"[{self.level.value.upper()}] {self.message}"


class TaskLog:
    """Ordered, append-only collection of task log entries.

    Args:
        task: Label of the task, used in operator-side debug output.

    """

    def __init__(self, task: str = "") -> None:
        """Initialize an empty log for *task*."""
        self._task = task
        self._entries: list[TaskLogEntry] = []

    def debug(self, message: str) -> None:
        self._append(TaskLogLevel.DEBUG, message)

    def info(self, message: str) -> None:
        self._append(TaskLogLevel.INFO, message)

    def warn(self, message: str) -> None:
        self._append(TaskLogLevel.WARN, message)

    def error(self, message: str) -> None:
        self._append(TaskLogLevel.ERROR, message)

    @property
    def entries(self) -> list[TaskLogEntry]:
        """Return a copy of all entries."""
        return list(self._entries)

    def filter(self, level: TaskLogLevel) -> list[TaskLogEntry]:
        """Return the entries of a given level."""
        return [e for e in self._entries if e.level == level]

    @property
    def warnings(self) -> list[TaskLogEntry]:
        return self.filter(TaskLogLevel.WARN)

    @property
    def errors(self) -> list[TaskLogEntry]:
        return self.filter(TaskLogLevel.ERROR)

    def __len__(self) -> int:
        return len(self._entries)

    def __str__(self) -> str:
        return "\n".join(str(e) for e in self._entries)

    def _append(self, level: TaskLogLevel, message: str) -> None:
        self._entries.append(TaskLogEntry(level=level, message=str(message)))
        logger.debug("Task %s: [%s] %s", self._task, level.value, message)
