"""Help flag detection over raw invocation arguments."""

from __future__ import annotations

from collections.abc import Mapping

HELP_TOKENS = frozenset({"-h", "--help", "help"})


def is_help(argument: object) -> bool:
    return isinstance(argument, str) and argument in HELP_TOKENS


def should_show_help(arguments: Mapping[str, object]) -> bool:
    """Return True when ``task`` or ``action`` carries a help token."""

    return is_help(arguments.get("task")) or is_help(arguments.get("action"))


def help_target(arguments: Mapping[str, object]) -> str | None:
    """Return the task whose help should be shown, or None for the task list.

    A help token in ``action`` still targets the task itself.
    """

    task = arguments.get("task")
    if task is None or is_help(task):
        return None
    return str(task)
