"""Shared test fixtures."""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

FOO_TASK_SOURCE = '''
class FooTask:
    """
    @description("Does foo")
    """

    def bar_action(self, x, y):
        """
        @description("Bars")
        @param({"name": "x", "type": "int"})
        @param({"name": "y", "type": "string", "description": "the y"})
        """
'''

_TASKDOC_ENV = (
    "TASKDOC_TASKS_DIR",
    "TASKDOC_ANNOTATIONS_ADAPTER",
    "TASKDOC_ANNOTATIONS_DIR",
    "TASKDOC_APP_NAME",
    "TASKDOC_VERSION",
    "TASKDOC_NAMESPACE",
)


@pytest.fixture(autouse=True)
def _clean_taskdoc_env(monkeypatch):
    for name in _TASKDOC_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def tasks_dir(tmp_path: Path) -> Path:
    path = tmp_path / "tasks"
    path.mkdir()
    return path


@pytest.fixture()
def write_task(tasks_dir: Path) -> Callable[[str, str], Path]:
    """Write a dedented task module into the tasks directory."""

    def _write(file_name: str, source: str) -> Path:
        path = tasks_dir / file_name
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def foo_task(write_task: Callable[[str, str], Path]) -> Path:
    """Task module with one documented action taking two parameters."""

    return write_task("FooTask.py", FOO_TASK_SOURCE)
