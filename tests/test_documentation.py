from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import allure
import pytest

from taskdoc.annotations import AnnotationError, MemoryAdapter, Reflection
from taskdoc.config import ConfigurationError
from taskdoc.documentation import (
    ActionDoc,
    ParamDoc,
    TaskDoc,
    action_display_name,
    build_documentation,
    task_display_name,
)

pytestmark = [
    allure.epic("Task Help"),
    allure.feature("Documentation Builder"),
]


class _RecordingSource:
    def __init__(self) -> None:
        self.requests: list[tuple[str, str]] = []

    def get(self, identifier: str, source: Path) -> Reflection:
        self.requests.append((identifier, source.name))
        return Reflection()


@pytest.mark.parametrize(
    ("file_stem", "expected"),
    [
        ("FooTask", "foo"),
        ("report_task", "report"),
        ("Maintenance", "maintenance"),
        ("Task", "task"),
    ],
)
def test_task_display_name(file_stem: str, expected: str) -> None:
    assert task_display_name(file_stem) == expected


@pytest.mark.parametrize(
    ("method_name", "expected"),
    [
        ("barAction", "bar"),
        ("list_action", "list"),
        ("ImportAction", "import"),
        ("main", "main"),
    ],
)
def test_action_display_name(method_name: str, expected: str) -> None:
    assert action_display_name(method_name) == expected


def test_build_documentation_reads_foo_task(foo_task: Path) -> None:
    documentation = build_documentation(foo_task.parent, None, MemoryAdapter())

    assert documentation == {
        "foo": TaskDoc(
            description=["Does foo"],
            actions={
                "bar": ActionDoc(
                    description=["Bars"],
                    params=[
                        ParamDoc(name="x", type="int"),
                        ParamDoc(name="y", type="string", description="the y"),
                    ],
                ),
            },
        ),
    }


def test_build_documentation_has_one_entry_per_task_file(
    tasks_dir: Path,
    write_task: Callable[[str, str], Path],
) -> None:
    write_task("AlphaTask.py", "class AlphaTask:\n    pass\n")
    write_task("beta_task.py", "")
    write_task("GammaTask.py", 'class GammaTask:\n    """@description("Gamma")"""\n')
    write_task("__init__.py", "")
    write_task("notes.txt", "not a task")
    (tasks_dir / "__pycache__").mkdir()
    (tasks_dir / "nested").mkdir()

    documentation = build_documentation(tasks_dir, None, MemoryAdapter())

    assert list(documentation) == ["alpha", "gamma", "beta"]
    assert documentation["alpha"] == TaskDoc()
    assert documentation["alpha"].description == [""]
    assert documentation["gamma"].description == ["Gamma"]


def test_build_documentation_of_empty_directory_is_empty(tasks_dir: Path) -> None:
    assert build_documentation(tasks_dir, None, MemoryAdapter()) == {}


def test_build_documentation_skips_do_not_cover_actions(
    tasks_dir: Path,
    write_task: Callable[[str, str], Path],
) -> None:
    write_task(
        "DeployTask.py",
        '''
        class DeployTask:
            """@description("Deploys")"""

            def run_action(self):
                """@description("Runs")"""

            def internal_action(self):
                """
                @description("Internal")
                @param(name="secret")
                @DoNotCover
                """
        ''',
    )

    documentation = build_documentation(tasks_dir, None, MemoryAdapter())

    assert list(documentation["deploy"].actions) == ["run"]


def test_build_documentation_keeps_params_in_source_order(
    tasks_dir: Path,
    write_task: Callable[[str, str], Path],
) -> None:
    write_task(
        "CopyTask.py",
        '''
        class CopyTask:
            """@description("Copies")"""

            def files_action(self):
                """
                @param({"name": "source", "type": "path"})
                @description("First description")
                @param(name="target", type="path")
                @param("mode", "str", "copy mode")
                @description("Copies files")
                """
        ''',
    )

    action = build_documentation(tasks_dir, None, MemoryAdapter())["copy"].actions["files"]

    assert action.description == ["Copies files"]
    assert action.params == [
        ParamDoc(name="source", type="path"),
        ParamDoc(name="target", type="path"),
        ParamDoc(name="mode", type="str", description="copy mode"),
    ]


def test_build_documentation_ignores_methods_without_class_annotations(
    tasks_dir: Path,
    write_task: Callable[[str, str], Path],
) -> None:
    write_task(
        "QuietTask.py",
        '''
        class QuietTask:
            def run_action(self):
                """@description("Runs")"""
        ''',
    )

    assert build_documentation(tasks_dir, None, MemoryAdapter()) == {"quiet": TaskDoc()}


def test_build_documentation_action_without_description(
    tasks_dir: Path,
    write_task: Callable[[str, str], Path],
) -> None:
    write_task(
        "SyncTask.py",
        '''
        class SyncTask:
            """@description("Syncs", "Second line")"""

            def pull_action(self):
                """@param(name="remote")"""
        ''',
    )

    task = build_documentation(tasks_dir, None, MemoryAdapter())["sync"]

    assert task.description == ["Syncs", "Second line"]
    assert task.actions["pull"] == ActionDoc(description=None, params=[ParamDoc(name="remote")])


def test_build_documentation_last_scanned_file_wins(
    tasks_dir: Path,
    write_task: Callable[[str, str], Path],
) -> None:
    write_task("FooTask.py", 'class FooTask:\n    """@description("Camel")"""\n')
    write_task("foo_task.py", 'class FooTask:\n    """@description("Snake")"""\n')

    documentation = build_documentation(tasks_dir, None, MemoryAdapter())

    assert list(documentation) == ["foo"]
    assert documentation["foo"].description == ["Snake"]


def test_build_documentation_prefixes_namespace(foo_task: Path) -> None:
    source = _RecordingSource()

    build_documentation(foo_task.parent, "app.tasks", source)
    build_documentation(foo_task.parent, None, source)

    assert source.requests == [("app.tasks.FooTask", "FooTask.py"), ("FooTask", "FooTask.py")]


def test_build_documentation_continues_after_unreadable_file(
    tasks_dir: Path,
    write_task: Callable[[str, str], Path],
    foo_task: Path,
) -> None:
    write_task("BrokenTask.py", "class BrokenTask(:\n")
    failures: dict[str, AnnotationError] = {}

    documentation = build_documentation(tasks_dir, None, MemoryAdapter(), failures=failures)

    assert documentation["broken"] == TaskDoc()
    assert documentation["foo"].description == ["Does foo"]
    assert list(failures) == ["broken"]
    assert failures["broken"].identifier == "BrokenTask"


def test_build_documentation_rejects_invalid_tasks_dir(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Invalid provided tasks Dir"):
        build_documentation(None, None, MemoryAdapter())
    with pytest.raises(ConfigurationError, match="Invalid provided tasks Dir"):
        build_documentation(tmp_path / "missing", None, MemoryAdapter())


def test_build_documentation_continues_after_unhashable_literal(
    tasks_dir: Path,
    write_task: Callable[[str, str], Path],
    foo_task: Path,
) -> None:
    write_task("OddTask.py", 'class OddTask:\n    """@description({[1]: "x"})"""\n')
    failures: dict[str, AnnotationError] = {}

    documentation = build_documentation(tasks_dir, None, MemoryAdapter(), failures=failures)

    assert documentation["odd"] == TaskDoc()
    assert documentation["foo"].description == ["Does foo"]
    assert list(failures) == ["odd"]
