"""Provide the public `projkit` package exports."""

from __future__ import annotations

from .errors import ConfigurationError, TaskFailedError, TaskNotFoundError
from .license_checker import (
    LicenseCheckOptions,
    build_license_check_command,
    register_license_check,
    validate_license_check_options,
)
from .project import NodeProject
from .tasks import Task, TaskRegistry, TaskStep

__all__ = [
    "ConfigurationError",
    "LicenseCheckOptions",
    "NodeProject",
    "Task",
    "TaskFailedError",
    "TaskNotFoundError",
    "TaskRegistry",
    "TaskStep",
    "build_license_check_command",
    "register_license_check",
    "validate_license_check_options",
]
