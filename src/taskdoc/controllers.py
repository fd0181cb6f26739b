"""Controllers for taskdoc CLI commands."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from taskdoc.annotations import AnnotationError
from taskdoc.config import Settings
from taskdoc.console import Console
from taskdoc.documentation import TaskDoc
from taskdoc.trigger import HELP_TOKENS


@dataclass(slots=True)
class ShowHelpCommand:
    """CLI inputs for help rendering command."""

    tasks_dir: Path | None
    namespace: str | None
    annotations_adapter: str | None
    annotations_dir: Path | None
    app_name: str | None
    app_version: str | None
    task: str | None


@dataclass(slots=True)
class CheckCommand:
    """CLI inputs for documentation coverage check."""

    tasks_dir: Path | None
    namespace: str | None
    annotations_adapter: str | None
    annotations_dir: Path | None
    strict: bool


@dataclass(slots=True)
class CheckResult:
    """Printable outcome of a documentation coverage check."""

    lines: list[str]
    success: bool


class HelpCliController:
    """Coordinates help command execution."""

    def show(self, command: ShowHelpCommand) -> list[str]:
        settings = _settings(
            Settings.from_env(),
            tasks_dir=command.tasks_dir,
            annotations_adapter=command.annotations_adapter,
            annotations_dir=command.annotations_dir,
            app_name=command.app_name,
            version=command.app_version,
        )
        task = command.task or "help"
        return Console(settings).help_lines(
            {"task": task, "action": "help", "namespace": command.namespace},
        )

    def check(self, command: CheckCommand) -> CheckResult:
        settings = _settings(
            Settings.from_env(),
            tasks_dir=command.tasks_dir,
            annotations_adapter=command.annotations_adapter,
            annotations_dir=command.annotations_dir,
        )
        failures: dict[str, AnnotationError] = {}
        documentation = Console(settings).build_documentation(
            namespace_override=command.namespace,
            failures=failures,
        )

        problems = [
            f"  {task_name}: unreadable annotations: {error}"
            for task_name, error in failures.items()
        ]
        for task_name, task_doc in documentation.items():
            if task_name in failures:
                continue
            problems.extend(_task_problems(task_name, task_doc))

        actions_count = sum(len(task_doc.actions) for task_doc in documentation.values())
        lines = [f"Tasks: {len(documentation)} (actions={actions_count})"]
        if problems:
            lines.append(f"Problems: {len(problems)}")
            lines.extend(problems)
        else:
            lines.append("All tasks and actions are documented.")
        return CheckResult(lines=lines, success=not (problems and command.strict))


def _task_problems(task_name: str, task_doc: TaskDoc) -> list[str]:
    problems = []
    if task_name in HELP_TOKENS:
        problems.append(f"  {task_name}: task name shadows a help token")
    if not any(line.strip() for line in task_doc.description):
        problems.append(f"  {task_name}: missing task description")
    for action_name, action_doc in task_doc.actions.items():
        if action_name in HELP_TOKENS:
            problems.append(f"  {task_name} {action_name}: action name shadows a help token")
        if action_doc.description is None:
            problems.append(f"  {task_name} {action_name}: missing action description")
    return problems


def _settings(base: Settings, **overrides: object) -> Settings:
    return replace(base, **{key: value for key, value in overrides.items() if value is not None})
