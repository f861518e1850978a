"""Run tasks from a synthesized `.projkit/tasks.json` manifest."""

from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path
from typing import Any, Optional, Sequence

from loguru import logger

from .constants import STATE_DIR_NAME, TASKS_FILE
from .errors import ConfigurationError, TaskFailedError, TaskNotFoundError
from .io_utils import _load_data_with_error
from .tasks import TaskStep


def _run_command(command: str, cwd: Path, env: dict[str, str]) -> int:
    result = subprocess.run(command, cwd=cwd, env=env, shell=True)
    return result.returncode


class TaskRuntime:
    """Execute tasks described by a task manifest."""

    def __init__(self, project_dir: Path, manifest: dict[str, Any]) -> None:
        self.project_dir = Path(project_dir).resolve()
        tasks = manifest.get("tasks")
        self._tasks: dict[str, dict[str, Any]] = tasks if isinstance(tasks, dict) else {}
        env = manifest.get("env")
        self._env: dict[str, str] = env if isinstance(env, dict) else {}

    @classmethod
    def from_project_dir(cls, project_dir: Path) -> "TaskRuntime":
        path = Path(project_dir).resolve() / STATE_DIR_NAME / TASKS_FILE
        if not path.exists():
            raise ConfigurationError(f"{path} not found; run `projkit synth` first")
        manifest, err = _load_data_with_error(path, {})
        if err:
            raise ConfigurationError(f"Cannot read task manifest: {err}")
        return cls(project_dir, manifest)

    @property
    def task_names(self) -> list[str]:
        return list(self._tasks.keys())

    def get(self, name: str) -> dict[str, Any]:
        task = self._tasks.get(name)
        if task is None:
            raise TaskNotFoundError(name, self.task_names)
        return task

    def run(self, name: str, args: Sequence[str] = (), *, parents: Sequence[str] = ()) -> None:
        """Run a task and everything it spawns.

        Args:
            name: Task to run.
            args: Extra arguments appended to ``exec`` steps that receive args.
                Spawned tasks never receive them.
            parents: Names of the spawning tasks, used for cycle detection and logs.

        Raises:
            TaskNotFoundError: If the task (or a spawned one) is unknown.
            TaskFailedError: If any step exits with a non-zero code.
            ConfigurationError: If tasks spawn each other in a cycle.
        """
        if name in parents:
            chain = " -> ".join([*parents, name])
            raise ConfigurationError(f"Task cycle detected: {chain}")
        task = self.get(name)
        label = " » ".join([*parents, name])

        cwd = self._resolve_cwd(task.get("cwd"))
        env = self._build_env(task)

        condition = task.get("condition")
        if condition:
            code = _run_command(condition, cwd, env)
            if code != 0:
                logger.info("{} | condition `{}` exited with {}, skipping", label, condition, code)
                return

        for raw_step in task.get("steps") or []:
            step = TaskStep.from_dict(raw_step)
            if step.spawn is not None:
                self.run(step.spawn, parents=[*parents, name])
                continue
            if step.say is not None:
                logger.info("{} | {}", label, step.say)
                continue

            command = step.exec or ""
            if step.receive_args and args:
                command = " ".join([command, *(shlex.quote(a) for a in args)])
            step_cwd = self._resolve_cwd(step.cwd) if step.cwd else cwd
            logger.info("{} | {}", label, command)
            code = _run_command(command, step_cwd, env)
            if code != 0:
                logger.error("{} | `{}` exited with {}", label, command, code)
                raise TaskFailedError(name, command, code)

    def _resolve_cwd(self, cwd: Optional[str]) -> Path:
        if not cwd:
            return self.project_dir
        path = Path(cwd)
        return path if path.is_absolute() else self.project_dir / path

    def _build_env(self, task: dict[str, Any]) -> dict[str, str]:
        env = dict(os.environ)
        env.update({str(k): str(v) for k, v in self._env.items()})
        task_env = task.get("env")
        if isinstance(task_env, dict):
            env.update({str(k): str(v) for k, v in task_env.items()})
        return env
