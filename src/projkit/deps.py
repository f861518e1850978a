"""Track the npm dependencies declared on a project."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger

from .errors import ConfigurationError


class DependencyType(str, Enum):
    """Which ``package.json`` section a dependency lands in."""

    RUNTIME = "runtime"
    PEER = "peer"
    BUNDLED = "bundled"
    BUILD = "build"  # devDependencies

    @property
    def package_json_key(self) -> str:
        return {
            "runtime": "dependencies",
            "peer": "peerDependencies",
            "bundled": "bundledDependencies",
            "build": "devDependencies",
        }[self.value]


@dataclass(frozen=True)
class Dependency:
    name: str
    type: DependencyType
    version: Optional[str] = None


def parse_dependency_spec(spec: str) -> tuple[str, Optional[str]]:
    """Split ``name@version`` into its parts.

    Scoped packages keep their leading ``@``: ``@types/node@^20`` parses to
    ``("@types/node", "^20")``.

    Raises:
        ConfigurationError: If the spec is empty or has an empty name.
    """
    raw = (spec or "").strip()
    if not raw:
        raise ConfigurationError("Dependency spec must be a non-empty string")

    scoped = raw.startswith("@")
    body = raw[1:] if scoped else raw
    name, sep, version = body.partition("@")
    if scoped:
        name = "@" + name
    if not name.strip("@/") or (scoped and "/" not in name):
        raise ConfigurationError(f"Invalid dependency spec '{spec}'")
    return name, (version.strip() or None) if sep else None


class Dependencies:
    """Dependency manifest of a project, keyed by ``(name, type)``."""

    def __init__(self) -> None:
        self._deps: dict[tuple[str, DependencyType], Dependency] = {}

    def add(self, spec: str, type: DependencyType) -> Dependency:
        name, version = parse_dependency_spec(spec)
        key = (name, type)
        existing = self._deps.get(key)
        if existing is not None and version is None:
            return existing
        if existing is not None and existing.version and version != existing.version:
            logger.debug("Overriding {} {} version {} -> {}", type.value, name, existing.version, version)
        dep = Dependency(name=name, type=type, version=version)
        self._deps[key] = dep
        return dep

    def remove(self, name: str, type: Optional[DependencyType] = None) -> None:
        for key in list(self._deps.keys()):
            if key[0] == name and (type is None or key[1] == type):
                del self._deps[key]

    def try_get(self, name: str, type: Optional[DependencyType] = None) -> Optional[Dependency]:
        for (dep_name, dep_type), dep in self._deps.items():
            if dep_name == name and (type is None or dep_type == type):
                return dep
        return None

    def get(self, name: str, type: Optional[DependencyType] = None) -> Dependency:
        dep = self.try_get(name, type)
        if dep is None:
            raise KeyError(f"Dependency '{name}' not found")
        return dep

    def all(self) -> list[Dependency]:
        return sorted(self._deps.values(), key=lambda d: (d.name, d.type.value))

    def to_package_json(self) -> dict[str, object]:
        sections: dict[str, object] = {}
        for dep_type in DependencyType:
            deps = [d for d in self.all() if d.type == dep_type]
            if not deps:
                continue
            if dep_type == DependencyType.BUNDLED:
                # bundledDependencies is a plain list of names
                sections[dep_type.package_json_key] = [d.name for d in deps]
            else:
                sections[dep_type.package_json_key] = {d.name: d.version or "*" for d in deps}
        return sections
