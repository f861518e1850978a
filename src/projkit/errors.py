"""Exceptions raised while declaring, synthesizing, and running projects."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a project or component is configured with invalid options."""


class TaskNotFoundError(KeyError):
    """Raised when a task name is not registered on the project."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(name)

    def __str__(self) -> str:
        listing = ", ".join(sorted(self.available)) or "none"
        return f"Unknown task '{self.name}' (available: {listing})"


class TaskFailedError(RuntimeError):
    """Raised when a task step exits with a non-zero status."""

    def __init__(self, task_name: str, command: str, exit_code: int):
        self.task_name = task_name
        self.command = command
        self.exit_code = exit_code
        super().__init__(f"Task '{task_name}' failed: `{command}` exited with code {exit_code}")
