from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from .config import build_project, license_check_options_from_config, load_project_config
from .errors import ConfigurationError, TaskFailedError, TaskNotFoundError
from .license_checker import build_license_check_command
from .logging_utils import _configure_logging, summarize_license_summary
from .runtime import TaskRuntime


def _resolve_project_dir(project_dir: Optional[str]) -> Path:
    return Path(project_dir).expanduser().resolve() if project_dir else Path.cwd().resolve()


def _synth(args: argparse.Namespace) -> int:
    try:
        project = build_project(_resolve_project_dir(args.project_dir))
        written = project.synth()
    except ConfigurationError as exc:
        sys.stderr.write(str(exc) + '\n')
        return 1
    sys.stdout.write(json.dumps({'project': project.name, 'written': [str(p) for p in written]}, indent=2) + '\n')
    return 0


def _tasks(args: argparse.Namespace) -> int:
    try:
        runtime = TaskRuntime.from_project_dir(_resolve_project_dir(args.project_dir))
    except ConfigurationError as exc:
        sys.stderr.write(str(exc) + '\n')
        return 1
    entries = [
        {'name': name, 'description': runtime.get(name).get('description', '')}
        for name in runtime.task_names
    ]
    if not args.table:
        sys.stdout.write(json.dumps({'tasks': entries}, indent=2) + '\n')
        return 0

    table = Table(title='Tasks', show_header=True)
    table.add_column('Name', style='cyan')
    table.add_column('Description')
    for entry in entries:
        table.add_row(entry['name'], entry['description'])
    Console().print(table)
    return 0


def _show(args: argparse.Namespace) -> int:
    try:
        runtime = TaskRuntime.from_project_dir(_resolve_project_dir(args.project_dir))
        task = runtime.get(args.task)
    except (ConfigurationError, TaskNotFoundError) as exc:
        sys.stderr.write(str(exc) + '\n')
        return 1
    sys.stdout.write(json.dumps({'task': task}, indent=2) + '\n')
    return 0


def _run(args: argparse.Namespace) -> int:
    try:
        runtime = TaskRuntime.from_project_dir(_resolve_project_dir(args.project_dir))
        runtime.run(args.task, args.args)
    except TaskFailedError as exc:
        sys.stderr.write(str(exc) + '\n')
        return exc.exit_code or 1
    except (ConfigurationError, TaskNotFoundError) as exc:
        sys.stderr.write(str(exc) + '\n')
        return 1
    return 0


def _license_command(args: argparse.Namespace) -> int:
    config, err = load_project_config(_resolve_project_dir(args.project_dir))
    if err:
        sys.stderr.write(f"config.yaml parse error: {err}\n")
        return 1
    try:
        options = license_check_options_from_config(config)
        if options is None:
            sys.stderr.write("No `license_checker` block in config.yaml\n")
            return 1
        command = build_license_check_command(options)
    except ConfigurationError as exc:
        sys.stderr.write(str(exc) + '\n')
        return 1
    sys.stdout.write(command + '\n')
    return 0


def _license_summary(args: argparse.Namespace) -> int:
    if args.path == '-':
        text = sys.stdin.read()
    else:
        path = Path(args.path).expanduser()
        if not path.is_file():
            sys.stderr.write(f"Invalid path: {path}\n")
            return 1
        text = path.read_text(encoding='utf-8')
    sys.stdout.write(json.dumps(summarize_license_summary(text), indent=2) + '\n')
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='projkit - generate and run Node.js project tasks')
    parser.add_argument('--project-dir', default=None, help='Target project directory (default: current working directory)')
    parser.add_argument('--log-level', default='INFO', help='Log level (default: INFO)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    synth = subparsers.add_parser('synth', help='Write package.json and the task manifest')
    synth.set_defaults(func=_synth)

    tasks = subparsers.add_parser('tasks', help='List synthesized tasks')
    tasks.add_argument('--table', action='store_true', help='Render a table instead of JSON')
    tasks.set_defaults(func=_tasks)

    show = subparsers.add_parser('show', help='Show one synthesized task')
    show.add_argument('task')
    show.set_defaults(func=_show)

    run = subparsers.add_parser('run', help='Run a task; extra args go to steps that receive args')
    run.add_argument('task')
    run.add_argument('args', nargs=argparse.REMAINDER)
    run.set_defaults(func=_run)

    license_command = subparsers.add_parser('license-command', help='Print the license-checker command from config')
    license_command.set_defaults(func=_license_command)

    license_summary = subparsers.add_parser('license-summary', help='Summarize saved license-checker --summary output')
    license_summary.add_argument('path', help="Output file, or '-' for stdin")
    license_summary.set_defaults(func=_license_summary)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    handler = getattr(args, 'func', None)
    if handler is None:
        parser.print_help()
        return 1
    return int(handler(args) or 0)
