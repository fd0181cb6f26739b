"""Runtime configuration for help generation."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path


class ConfigurationError(ValueError):
    """Raised when configuration required for help generation is invalid."""


@dataclass(frozen=True, slots=True)
class Settings:
    """Console settings consumed by the help generator."""

    tasks_dir: Path | None = None
    annotations_adapter: str | None = None
    annotations_dir: Path | None = None
    app_name: str | None = None
    version: str | None = None
    default_namespace: str | None = None

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from TASKDOC_* environment variables."""

        return cls(
            tasks_dir=_env_path("TASKDOC_TASKS_DIR"),
            annotations_adapter=_env_str("TASKDOC_ANNOTATIONS_ADAPTER"),
            annotations_dir=_env_path("TASKDOC_ANNOTATIONS_DIR"),
            app_name=_env_str("TASKDOC_APP_NAME"),
            version=_env_str("TASKDOC_VERSION"),
            default_namespace=_env_str("TASKDOC_NAMESPACE"),
        )

    @classmethod
    def from_mapping(cls, config: Mapping[str, object]) -> Settings:
        """Build settings from a host application config mapping.

        Keys follow the host application convention (``tasksDir``,
        ``annotationsAdapter``, ``annotationsDir``, ``appName``, ``version``,
        ``defaultNamespace``). Unknown keys are ignored.
        """

        return cls(
            tasks_dir=_as_path(config.get("tasksDir")),
            annotations_adapter=_as_str(config.get("annotationsAdapter")),
            annotations_dir=_as_path(config.get("annotationsDir")),
            app_name=_as_str(config.get("appName")),
            version=_as_str(config.get("version")),
            default_namespace=_as_str(config.get("defaultNamespace")),
        )

    def require_tasks_dir(self) -> Path:
        """Return the tasks directory or raise if it is unset or not a directory."""

        if self.tasks_dir is None or not self.tasks_dir.is_dir():
            raise ConfigurationError("Invalid provided tasks Dir")
        return self.tasks_dir


def _env_str(name: str) -> str | None:
    return _as_str(os.getenv(name))


def _env_path(name: str) -> Path | None:
    return _as_path(os.getenv(name))


def _as_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_path(value: object) -> Path | None:
    if isinstance(value, Path):
        return value
    text = _as_str(value)
    return Path(text) if text is not None else None
