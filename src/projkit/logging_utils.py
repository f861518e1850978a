"""Configure logging and summarize license-checker output."""

from __future__ import annotations

import json
import re
import sys
from typing import Any

from loguru import logger

# license-checker --summary prints one line per license, e.g. "├─ MIT: 120".
# Custom licenses contain colons ("Custom: <url>: 1"), so anchor on the trailing count.
_SUMMARY_LINE_RE = re.compile(r"^[\s│├└─]*(?P<license>.+?):\s*(?P<count>\d+)\s*$", re.M)


def _configure_logging(level: str = "INFO") -> None:
    """Configure loguru logger with the specified level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{module}</cyan>:<cyan>{line}</cyan>\n"
            "{message}"
        ),
    )


def summarize_license_summary(log_text: str) -> dict[str, Any]:
    """Summarize the ``--summary`` output of license-checker.

    Args:
        log_text: Raw stdout of ``license-checker --summary``.

    Returns:
        A dictionary with keys `licenses` (license -> package count, in output
        order) and `total`.
    """
    licenses: dict[str, int] = {}
    for match in _SUMMARY_LINE_RE.finditer(log_text or ""):
        name = match.group("license").strip()
        if not name:
            continue
        licenses[name] = licenses.get(name, 0) + int(match.group("count"))
    return {"licenses": licenses, "total": sum(licenses.values())}


def pretty(obj: Any, *, indent: int = 2) -> str:
    """Serialize an object as JSON for readable logs.

    Args:
        obj: Object to serialize.
        indent: Indentation level for JSON output.

    Returns:
        A JSON string when possible; otherwise `str(obj)`.
    """
    try:
        return json.dumps(obj, indent=indent, default=str)
    except (TypeError, ValueError):
        return str(obj)
