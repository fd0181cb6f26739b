"""Documentation tree built from annotated task definition files."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from taskdoc.annotations import Annotation, AnnotationError, AnnotationSource, Reflection
from taskdoc.config import ConfigurationError

logger = logging.getLogger(__name__)

TASK_SUFFIXES = ("_task", "Task")
ACTION_SUFFIXES = ("_action", "Action")
TASK_FILE_SUFFIX = ".py"

DESCRIPTION = "description"
PARAM = "param"
DO_NOT_COVER = "DoNotCover"

_PARAM_FIELDS = ("name", "type", "description")


@dataclass(slots=True)
class ParamDoc:
    """One documented action parameter; every field is optional."""

    name: str | None = None
    type: str | None = None
    description: str | None = None

    @classmethod
    def from_annotation(cls, annotation: Annotation) -> ParamDoc:
        """Build from ``@param({...})``, ``@param(name=...)`` or ``@param("x", "int", "...")``."""

        values: dict[str, object] = {}
        if annotation.arguments and isinstance(annotation.arguments[0], Mapping):
            values.update(annotation.arguments[0])
        else:
            values.update(zip(_PARAM_FIELDS, annotation.arguments, strict=False))
        values.update(annotation.named_arguments)
        return cls(
            name=_optional_text(values.get("name")),
            type=_optional_text(values.get("type")),
            description=_optional_text(values.get("description")),
        )


@dataclass(slots=True)
class ActionDoc:
    """Documentation of one task action."""

    description: list[str] | None = None
    params: list[ParamDoc] = field(default_factory=list)


@dataclass(slots=True)
class TaskDoc:
    """Documentation of one task and its actions, in discovery order."""

    description: list[str] = field(default_factory=lambda: [""])
    actions: dict[str, ActionDoc] = field(default_factory=dict)


Documentation = dict[str, TaskDoc]


def task_display_name(file_stem: str) -> str:
    return _strip_suffix(file_stem, TASK_SUFFIXES).lower()


def action_display_name(method_name: str) -> str:
    return _strip_suffix(method_name, ACTION_SUFFIXES).lower()


def task_identifier(file_stem: str, namespace: str | None) -> str:
    return f"{namespace}.{file_stem}" if namespace else file_stem


def scan_task_files(tasks_dir: Path) -> list[Path]:
    """List task definition modules, sorted by file name."""

    return sorted(
        (
            entry
            for entry in tasks_dir.iterdir()
            if entry.is_file()
            and entry.suffix == TASK_FILE_SUFFIX
            and not entry.name.startswith("_")
        ),
        key=lambda entry: entry.name,
    )


def build_documentation(
    tasks_dir: Path | None,
    namespace: str | None,
    annotations: AnnotationSource,
    *,
    failures: dict[str, AnnotationError] | None = None,
) -> Documentation:
    """Scan ``tasks_dir`` and assemble documentation for every task file.

    Every scanned file gets an entry, even when its annotations are missing
    or unreadable. Unreadable annotations are logged and, when ``failures``
    is given, recorded in it by task name. Two files mapping to the same task
    name keep the one scanned last.
    """

    if tasks_dir is None or not tasks_dir.is_dir():
        raise ConfigurationError("Invalid provided tasks Dir")

    documentation: Documentation = {}
    for task_file in scan_task_files(tasks_dir):
        task_name = task_display_name(task_file.stem)
        identifier = task_identifier(task_file.stem, namespace)
        task_doc = TaskDoc()
        documentation[task_name] = task_doc
        logger.debug("Reading annotations of %s from %s", identifier, task_file)

        try:
            reflection = annotations.get(identifier, task_file)
        except AnnotationError as error:
            logger.warning("Skipping annotations of task %s: %s", task_name, error)
            if failures is not None:
                failures[task_name] = error
            continue
        _apply_reflection(task_doc, reflection)

    return documentation


def _apply_reflection(task_doc: TaskDoc, reflection: Reflection) -> None:
    # Without class annotations the methods are not inspected either.
    if not reflection.class_annotations:
        return

    description = reflection.class_annotations.get(DESCRIPTION)
    if description is not None:
        task_doc.description = _annotation_lines(description)

    for method_name, collection in reflection.methods_annotations.items():
        if collection.has(DO_NOT_COVER):
            continue
        action_doc = ActionDoc()
        task_doc.actions[action_display_name(method_name)] = action_doc
        for annotation in collection:
            if annotation.name == DESCRIPTION:
                action_doc.description = _annotation_lines(annotation)
            elif annotation.name == PARAM:
                action_doc.params.append(ParamDoc.from_annotation(annotation))


def _annotation_lines(annotation: Annotation) -> list[str]:
    values = [*annotation.arguments, *annotation.named_arguments.values()]
    return [str(value) for value in values]


def _optional_text(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


def _strip_suffix(name: str, suffixes: tuple[str, ...]) -> str:
    for suffix in suffixes:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return name
