"""Load the optional project configuration from `.projkit/config.yaml`."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from loguru import logger

from .constants import CONFIG_FILE, STATE_DIR_NAME
from .errors import ConfigurationError
from .io_utils import _load_data_with_error
from .license_checker import LicenseCheckOptions, register_license_check
from .project import NodeProject
from .utils import _first_present, _optional_str, _validate_string_list


def load_project_config(project_dir: Path) -> tuple[dict[str, Any], str | None]:
    """Load the optional project config file.

    Args:
        project_dir: Project root directory.

    Returns:
        A tuple of `(config, error_message)`. If the file is missing, returns `({}, None)`.
    """
    project_dir = project_dir.resolve()
    path = project_dir / STATE_DIR_NAME / CONFIG_FILE
    data, err = _load_data_with_error(path, {})
    if err:
        logger.warning("Ignoring unreadable config {}: {}", path, err)
        return {}, err
    return data, None


def get_license_check_config(config: dict[str, Any]) -> Optional[dict[str, Any]]:
    """Extract the license checker block from the project config.

    Args:
        config: Project configuration dictionary.

    Returns:
        The `license_checker` mapping, or None if the block is absent.

    Raises:
        ConfigurationError: If the block is present but is not a mapping.
    """
    raw = _first_present(config, "license_checker", "licenseChecker")
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"`license_checker` must be a mapping, got {type(raw).__name__}"
        )
    return raw


def license_check_options_from_config(config: dict[str, Any]) -> Optional[LicenseCheckOptions]:
    raw = get_license_check_config(config)
    if raw is None:
        return None
    return LicenseCheckOptions.from_dict(raw)


def build_project(project_dir: Path) -> NodeProject:
    """Build a ``NodeProject`` from `.projkit/config.yaml`.

    The project name defaults to the directory name. When the config has a
    ``license_checker`` block the ``check-licenses`` task is registered.

    Raises:
        ConfigurationError: If the config file cannot be parsed or holds invalid values.
    """
    project_dir = project_dir.resolve()
    config, err = load_project_config(project_dir)
    if err:
        raise ConfigurationError(f"config.yaml parse error: {err}")

    name = _optional_str(config.get("name")) or project_dir.name
    package_manager = _optional_str(config.get("package_manager")) or "npm"
    project = NodeProject(name, project_dir, package_manager=package_manager)

    project.add_deps(*_validate_string_list(config.get("deps"), "deps"))
    project.add_dev_deps(*_validate_string_list(config.get("dev_deps"), "dev_deps"))
    project.add_peer_deps(*_validate_string_list(config.get("peer_deps"), "peer_deps"))
    project.add_bundled_deps(*_validate_string_list(config.get("bundled_deps"), "bundled_deps"))

    options = license_check_options_from_config(config)
    if options is not None:
        register_license_check(project, options)

    return project
