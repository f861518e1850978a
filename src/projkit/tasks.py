"""Task registry for generated projects.

A *Task* is a named, ordered list of steps. Each step either executes a shell
command, spawns another task, or prints a message. The registry is serialized to
``.projkit/tasks.json`` and replayed later by :mod:`projkit.runtime`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from loguru import logger

from .errors import ConfigurationError, TaskNotFoundError


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaskStep:
    """One step of a task. Exactly one of ``exec``, ``spawn`` or ``say`` is set."""
    exec: Optional[str] = None
    spawn: Optional[str] = None
    say: Optional[str] = None
    receive_args: bool = False        # forward caller-supplied args to ``exec``
    name: Optional[str] = None        # display label
    cwd: Optional[str] = None         # relative to the project directory

    def __post_init__(self) -> None:
        actions = [v for v in (self.exec, self.spawn, self.say) if v is not None]
        if len(actions) != 1:
            raise ConfigurationError("A task step needs exactly one of `exec`, `spawn` or `say`")
        if self.receive_args and self.exec is None:
            raise ConfigurationError("`receive_args` only applies to `exec` steps")

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        if self.name:
            d["name"] = self.name
        if self.exec is not None:
            d["exec"] = self.exec
        if self.spawn is not None:
            d["spawn"] = self.spawn
        if self.say is not None:
            d["say"] = self.say
        if self.receive_args:
            d["receiveArgs"] = True
        if self.cwd:
            d["cwd"] = self.cwd
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskStep":
        return cls(
            exec=data.get("exec"),
            spawn=data.get("spawn"),
            say=data.get("say"),
            receive_args=bool(data.get("receiveArgs", data.get("receive_args", False))),
            name=data.get("name"),
            cwd=data.get("cwd"),
        )


# ---------------------------------------------------------------------------
# Task
# ---------------------------------------------------------------------------

class Task:
    """A named sequence of steps."""

    def __init__(
        self,
        name: str,
        *,
        description: str = "",
        env: Optional[dict[str, str]] = None,
        condition: Optional[str] = None,
        cwd: Optional[str] = None,
    ) -> None:
        if not name or not name.strip():
            raise ConfigurationError("Task name must be a non-empty string")
        self.name = name
        self.description = description
        self.condition = condition
        self.cwd = cwd
        self._env: dict[str, str] = dict(env or {})
        self._steps: list[TaskStep] = []

    def __repr__(self) -> str:
        return f"Task(name={self.name!r}, steps={len(self._steps)})"

    @property
    def steps(self) -> list[TaskStep]:
        return list(self._steps)

    # -- mutation ------------------------------------------------------------

    def exec(
        self,
        command: str,
        *,
        receive_args: bool = False,
        name: Optional[str] = None,
        cwd: Optional[str] = None,
    ) -> None:
        """Append a shell command step."""
        self._steps.append(TaskStep(exec=command, receive_args=receive_args, name=name, cwd=cwd))

    def prepend_exec(
        self,
        command: str,
        *,
        receive_args: bool = False,
        name: Optional[str] = None,
        cwd: Optional[str] = None,
    ) -> None:
        self._steps.insert(0, TaskStep(exec=command, receive_args=receive_args, name=name, cwd=cwd))

    def spawn(self, task: "Task", *, name: Optional[str] = None) -> None:
        """Append a step that runs ``task`` to completion."""
        self._steps.append(TaskStep(spawn=task.name, name=name))

    def prepend_spawn(self, task: "Task", *, name: Optional[str] = None) -> None:
        self._steps.insert(0, TaskStep(spawn=task.name, name=name))

    def add_step(self, step: TaskStep) -> None:
        self._steps.append(step)

    def say(self, message: str) -> None:
        self._steps.append(TaskStep(say=message))

    def reset(self, command: Optional[str] = None, *, receive_args: bool = False) -> None:
        """Drop all steps, optionally replacing them with a single command."""
        self._steps.clear()
        if command is not None:
            self.exec(command, receive_args=receive_args)

    def env(self, name: str, value: str) -> None:
        self._env[name] = value

    # -- serialization -------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"name": self.name}
        if self.description:
            d["description"] = self.description
        if self._env:
            d["env"] = dict(self._env)
        if self.condition:
            d["condition"] = self.condition
        if self.cwd:
            d["cwd"] = self.cwd
        if self._steps:
            d["steps"] = [step.to_dict() for step in self._steps]
        return d


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TaskRegistry:
    """All tasks declared on a project, in registration order."""

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._env: dict[str, str] = {}

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
        """Create and register a task.

        Args:
            name: Unique task name.
            description: Human-readable summary shown by ``projkit tasks``.
            exec: Optional first command of the task.
            receive_args: Forward extra CLI arguments to ``exec``.
            env: Environment variables set while the task runs.
            condition: Shell command; a non-zero exit skips the task.
            cwd: Working directory relative to the project.
            steps: Additional steps appended after ``exec``.

        Returns:
            The new task.

        Raises:
            ConfigurationError: If a task with the same name already exists.
        """
        if name in self._tasks:
            raise ConfigurationError(f"Duplicate task '{name}'")
        if receive_args and exec is None:
            raise ConfigurationError(f"Task '{name}': `receive_args` requires `exec`")

        task = Task(name, description=description, env=env, condition=condition, cwd=cwd)
        if exec is not None:
            task.exec(exec, receive_args=receive_args)
        for step in steps or ():
            task.add_step(step)

        self._tasks[name] = task
        logger.debug("Registered task {}", name)
        return task

    def remove(self, name: str) -> Optional[Task]:
        return self._tasks.pop(name, None)

    def try_find(self, name: str) -> Optional[Task]:
        return self._tasks.get(name)

    def get(self, name: str) -> Task:
        task = self._tasks.get(name)
        if task is None:
            raise TaskNotFoundError(name, list(self._tasks.keys()))
        return task

    def all(self) -> list[Task]:
        return list(self._tasks.values())

    def add_env(self, name: str, value: str) -> None:
        self._env[name] = value

    @property
    def env(self) -> dict[str, str]:
        return dict(self._env)

    def to_manifest(self) -> dict[str, Any]:
        """Serialize the registry, checking that every spawn target exists."""
        for task in self._tasks.values():
            for step in task.steps:
                if step.spawn is not None and step.spawn not in self._tasks:
                    raise ConfigurationError(
                        f"Task '{task.name}' spawns unknown task '{step.spawn}'"
                    )
        manifest: dict[str, Any] = {
            "tasks": {name: task.to_dict() for name, task in self._tasks.items()},
        }
        if self._env:
            manifest["env"] = dict(self._env)
        return manifest
