"""Node.js project model: dependencies, the standard task graph, and synthesis."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Optional

from loguru import logger

from .constants import (
    BUILD_PHASES,
    BUILD_TASK,
    COMPILE_TASK,
    DEFAULT_TASK,
    PACKAGE_JSON_FILE,
    PACKAGE_MANAGERS,
    PACKAGE_TASK,
    POST_COMPILE_TASK,
    PRE_COMPILE_TASK,
    PROJKIT_RUN_COMMAND,
    PROJKIT_SYNTH_COMMAND,
    STATE_DIR_NAME,
    TASKS_FILE,
    TEST_TASK,
)
from .deps import Dependencies, DependencyType
from .errors import ConfigurationError
from .io_utils import _atomic_write_json
from .logging_utils import pretty
from .tasks import Task, TaskRegistry, TaskStep


_PHASE_DESCRIPTIONS = {
    PRE_COMPILE_TASK: "Prepare the project for compilation",
    COMPILE_TASK: "Only compile",
    POST_COMPILE_TASK: "Runs after successful compilation",
    TEST_TASK: "Run tests",
    PACKAGE_TASK: "Creates the distribution package",
}


class NodeProject:
    """A Node.js project whose manifests are generated by projkit."""

    def __init__(
        self,
        name: str,
        outdir: Path | str = ".",
        *,
        package_manager: str = "npm",
    ) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError("Project name must be a non-empty string")
        if package_manager not in PACKAGE_MANAGERS:
            available = ", ".join(sorted(PACKAGE_MANAGERS))
            raise ConfigurationError(f"Unknown package manager '{package_manager}' (available: {available})")

        self.name = name.strip()
        self.outdir = Path(outdir).resolve()
        self.package_manager = package_manager
        self.deps = Dependencies()
        self.tasks = TaskRegistry()

        self.tasks.add_task(DEFAULT_TASK, description="Synthesize project files", exec=PROJKIT_SYNTH_COMMAND)
        for phase in BUILD_PHASES:
            self.tasks.add_task(phase, description=_PHASE_DESCRIPTIONS[phase])
        build = self.tasks.add_task(BUILD_TASK, description="Full release build")
        for phase in BUILD_PHASES:
            build.spawn(self.tasks.get(phase))

    def __repr__(self) -> str:
        return f"NodeProject(name={self.name!r}, outdir={str(self.outdir)!r})"

    # -- dependencies --------------------------------------------------------

    def add_deps(self, *specs: str) -> None:
        for spec in specs:
            self.deps.add(spec, DependencyType.RUNTIME)

    def add_dev_deps(self, *specs: str) -> None:
        for spec in specs:
            self.deps.add(spec, DependencyType.BUILD)

    def add_peer_deps(self, *specs: str) -> None:
        for spec in specs:
            self.deps.add(spec, DependencyType.PEER)

    def add_bundled_deps(self, *specs: str) -> None:
        for spec in specs:
            self.deps.add(spec, DependencyType.BUNDLED)

    # -- tasks ---------------------------------------------------------------

    def add_task(
        self,
        name: str,
        *,
        description: str = "",
        exec: Optional[str] = None,
        receive_args: bool = False,
        env: Optional[dict[str, str]] = None,
        condition: Optional[str] = None,
        cwd: Optional[str] = None,
        steps: Optional[Iterable[TaskStep]] = None,
    ) -> Task:
        return self.tasks.add_task(
            name,
            description=description,
            exec=exec,
            receive_args=receive_args,
            env=env,
            condition=condition,
            cwd=cwd,
            steps=steps,
        )

    def try_find_task(self, name: str) -> Optional[Task]:
        return self.tasks.try_find(name)

    @property
    def pre_compile_task(self) -> Task:
        return self.tasks.get(PRE_COMPILE_TASK)

    @property
    def compile_task(self) -> Task:
        return self.tasks.get(COMPILE_TASK)

    @property
    def post_compile_task(self) -> Task:
        return self.tasks.get(POST_COMPILE_TASK)

    @property
    def test_task(self) -> Task:
        return self.tasks.get(TEST_TASK)

    @property
    def package_task(self) -> Task:
        return self.tasks.get(PACKAGE_TASK)

    @property
    def build_task(self) -> Task:
        return self.tasks.get(BUILD_TASK)

    # -- synthesis -----------------------------------------------------------

    def render_package_json(self) -> dict[str, Any]:
        scripts = {
            task.name: f"{PROJKIT_RUN_COMMAND} {task.name}"
            for task in self.tasks.all()
            if task.name != DEFAULT_TASK
        }
        package: dict[str, Any] = {"name": self.name, "scripts": scripts}
        package.update(self.deps.to_package_json())
        return package

    def synth(self) -> list[Path]:
        """Write ``package.json`` and the task manifest into ``outdir``.

        Returns:
            The paths written, manifest first.
        """
        manifest = self.tasks.to_manifest()
        package = self.render_package_json()

        tasks_path = self.outdir / STATE_DIR_NAME / TASKS_FILE
        package_path = self.outdir / PACKAGE_JSON_FILE
        _atomic_write_json(tasks_path, manifest)
        _atomic_write_json(package_path, package)
        logger.debug("Task manifest for {}:\n{}", self.name, pretty(manifest))

        logger.info("Synthesized {} ({} tasks)", self.name, len(manifest["tasks"]))
        return [tasks_path, package_path]
