"""Enforce the licenses used by a project's npm dependencies.

The check is delegated to the `license-checker` npm package. This module only
validates the options, assembles the command line, and wires it into the
project as a ``check-licenses`` task that ``pre-compile`` spawns, so every build
audits dependency licenses before compiling.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Protocol

from loguru import logger

from .constants import LICENSE_CHECK_TASK, LICENSE_CHECKER_PACKAGE
from .errors import ConfigurationError
from .tasks import Task
from .utils import _first_present, _validate_bool, _validate_string_list


class _SpawnsTasks(Protocol):
    def spawn(self, task: Task) -> None: ...


class LicenseCheckProject(Protocol):
    """The parts of a project that :func:`register_license_check` touches."""

    @property
    def pre_compile_task(self) -> _SpawnsTasks: ...

    def add_dev_deps(self, *specs: str) -> None: ...

    def add_task(self, name: str, *, exec: str, receive_args: bool) -> Task: ...

    def try_find_task(self, name: str) -> Optional[Task]: ...


@dataclass(frozen=True)
class LicenseCheckOptions:
    """Options for the license check.

    Attributes:
        production: Check production dependencies.
        development: Check development dependencies.
        allowed_licenses: SPDX identifiers that are allowed. When set, every
            detected license must be in this list.
        prohibited_licenses: SPDX identifiers that are prohibited. When set, no
            detected license may be in this list.

    Exactly one of ``allowed_licenses`` and ``prohibited_licenses`` must be
    provided and non-empty.
    """
    production: bool = True
    development: bool = False
    allowed_licenses: tuple[str, ...] = ()
    prohibited_licenses: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from callers but store immutable tuples; a bare string is rejected.
        object.__setattr__(
            self, "allowed_licenses", _validate_string_list(self.allowed_licenses, "allowed_licenses")
        )
        object.__setattr__(
            self, "prohibited_licenses", _validate_string_list(self.prohibited_licenses, "prohibited_licenses")
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LicenseCheckOptions":
        """Build options from a config mapping (snake_case or camelCase keys).

        Raises:
            ConfigurationError: If a value has the wrong type.
        """
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"license checker options must be a mapping, got {type(data).__name__}"
            )
        return cls(
            production=_validate_bool(data.get("production"), "production", True),
            development=_validate_bool(data.get("development"), "development", False),
            allowed_licenses=_validate_string_list(
                _first_present(data, "allowed_licenses", "allowedLicenses"),
                "allowed_licenses",
            ),
            prohibited_licenses=_validate_string_list(
                _first_present(data, "prohibited_licenses", "prohibitedLicenses"),
                "prohibited_licenses",
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "production": self.production,
            "development": self.development,
            "allowed_licenses": list(self.allowed_licenses),
            "prohibited_licenses": list(self.prohibited_licenses),
        }


def validate_license_check_options(options: LicenseCheckOptions) -> None:
    """Raise ``ConfigurationError`` for the first invalid combination of options."""
    if not options.production and not options.development:
        raise ConfigurationError(
            "LicenseChecker: At least one of `production` or `development` must be enabled."
        )
    if not options.allowed_licenses and not options.prohibited_licenses:
        raise ConfigurationError(
            "LicenseChecker: Neither `allowed_licenses` nor `prohibited_licenses` found. "
            "Exactly one must be provided and not empty."
        )
    if options.allowed_licenses and options.prohibited_licenses:
        raise ConfigurationError(
            "LicenseChecker: `allowed_licenses` and `prohibited_licenses` can not be used "
            "at the same time. Choose one or the other."
        )


def _quoted_license_list(licenses: Iterable[str]) -> str:
    return '"' + ";".join(licenses) + '"'


def build_license_check_command(options: LicenseCheckOptions) -> str:
    """Return the ``license-checker`` command line for ``options``.

    The scope flag (if any) always comes before the allow/deny flag. With both
    scopes enabled no scope flag is emitted and license-checker scans both.
    """
    validate_license_check_options(options)

    cmd = [LICENSE_CHECKER_PACKAGE, "--summary"]

    if options.production and not options.development:
        cmd.append("--production")
    if options.development and not options.production:
        cmd.append("--development")
    if options.allowed_licenses:
        cmd.append("--onlyAllow")
        cmd.append(_quoted_license_list(options.allowed_licenses))
    if options.prohibited_licenses:
        cmd.append("--failOn")
        cmd.append(_quoted_license_list(options.prohibited_licenses))

    return " ".join(cmd)


def register_license_check(project: LicenseCheckProject, options: LicenseCheckOptions) -> Task:
    """Add a ``check-licenses`` task to ``project`` and run it before compiling.

    Options are validated before the project is touched, so an invalid
    configuration leaves the project unchanged.

    Args:
        project: Project receiving the dev dependency and the task.
        options: License check options.

    Returns:
        The registered task.

    Raises:
        ConfigurationError: If the options are invalid or the project already has
            a `check-licenses` task.
    """
    command = build_license_check_command(options)
    if project.try_find_task(LICENSE_CHECK_TASK) is not None:
        raise ConfigurationError(f"LicenseChecker: the project already has a `{LICENSE_CHECK_TASK}` task.")

    project.add_dev_deps(LICENSE_CHECKER_PACKAGE)
    task = project.add_task(LICENSE_CHECK_TASK, exec=command, receive_args=True)
    project.pre_compile_task.spawn(task)

    logger.info("Registered {} task: {}", LICENSE_CHECK_TASK, command)
    return task
