"""Console application front that answers help requests from annotations."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Protocol

import click

from taskdoc.annotations import AnnotationError, AnnotationSource, create_annotation_source
from taskdoc.config import Settings
from taskdoc.documentation import Documentation, build_documentation
from taskdoc.renderer import render_help
from taskdoc.trigger import help_target, should_show_help

logger = logging.getLogger(__name__)


class TaskDispatcher(Protocol):
    """Routes task, action and parameters to executable code."""

    namespace: str | None

    def dispatch(self, arguments: Mapping[str, object]) -> object:
        """Run the task action selected by ``arguments``."""
        raise NotImplementedError


class DispatchError(RuntimeError):
    """Raised when a non-help invocation has no dispatcher to go to."""


class Console:
    """Intercept help invocations and hand everything else to the dispatcher.

    Documentation is rebuilt on every help invocation. When no annotation
    source is injected, a fresh one is created from settings each time, so
    edited task files show up on the next invocation. An injected source is
    owned by the caller: whatever it caches lives as long as the caller keeps
    it, across invocations.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        dispatcher: TaskDispatcher | None = None,
        annotations: AnnotationSource | None = None,
        echo: Callable[[str], None] = click.echo,
    ) -> None:
        self._settings = settings
        self._dispatcher = dispatcher
        self._annotations = annotations
        self._echo = echo

    @property
    def settings(self) -> Settings:
        return self._settings

    def handle(self, arguments: Mapping[str, object]) -> object | None:
        if should_show_help(arguments):
            for line in self.help_lines(arguments):
                self._echo(line)
            return None

        if self._dispatcher is None:
            raise DispatchError("No task dispatcher configured for non-help invocation.")
        return self._dispatcher.dispatch(arguments)

    def help_lines(self, arguments: Mapping[str, object]) -> list[str]:
        documentation = self.build_documentation(
            namespace_override=_optional_str(arguments.get("namespace")),
        )
        return render_help(
            documentation,
            app_name=self._settings.app_name,
            version=self._settings.version,
            target=help_target(arguments),
        )

    def build_documentation(
        self,
        *,
        namespace_override: str | None = None,
        failures: dict[str, AnnotationError] | None = None,
    ) -> Documentation:
        tasks_dir = self._settings.require_tasks_dir()
        namespace = self.resolve_namespace(namespace_override)
        logger.debug("Building task documentation from %s (namespace=%s)", tasks_dir, namespace)
        return build_documentation(
            tasks_dir,
            namespace,
            self._annotation_source(),
            failures=failures,
        )

    def resolve_namespace(self, override: str | None = None) -> str | None:
        """Pick the override, then the dispatcher namespace, then the configured default."""

        if override:
            return override
        if self._dispatcher is not None and self._dispatcher.namespace:
            return self._dispatcher.namespace
        return self._settings.default_namespace

    def _annotation_source(self) -> AnnotationSource:
        if self._annotations is not None:
            return self._annotations
        return create_annotation_source(
            self._settings.annotations_adapter,
            annotations_dir=self._settings.annotations_dir,
        )


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value) or None
