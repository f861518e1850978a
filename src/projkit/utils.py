"""Provide small helpers shared across projkit modules."""

from __future__ import annotations

from typing import Any, Optional

from .errors import ConfigurationError


def _first_present(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _validate_string_list(value: Any, field_name: str) -> tuple[str, ...]:
    """Normalize a config value into a tuple of non-empty strings.

    Args:
        value: Raw value from the caller or a config file. ``None`` is treated as empty.
        field_name: Name used in the error message.

    Returns:
        The stripped strings, in their original order.

    Raises:
        ConfigurationError: If the value is not a list/tuple of non-empty strings.
    """
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"`{field_name}` must be a list of strings, got {type(value).__name__}")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ConfigurationError(f"`{field_name}` entries must be non-empty strings, got {item!r}")
        items.append(item.strip())
    return tuple(items)


def _validate_bool(value: Any, field_name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigurationError(f"`{field_name}` must be a boolean, got {type(value).__name__}")
    return value


def _optional_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
