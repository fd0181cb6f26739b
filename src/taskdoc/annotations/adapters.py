"""Annotation storage strategies and their configuration-driven factory."""

from __future__ import annotations

import hashlib
import json
import logging
import re
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from taskdoc.annotations.models import Reflection
from taskdoc.annotations.reader import read_reflection

logger = logging.getLogger(__name__)

DEFAULT_ANNOTATIONS_DIR = Path(".taskdoc-annotations")


class AnnotationSource(Protocol):
    """Interface for annotation storage adapters."""

    def get(self, identifier: str, source: Path) -> Reflection:
        """Return annotations of the task class ``identifier`` defined in ``source``."""
        raise NotImplementedError


class MemoryAdapter:
    """Keep parsed annotations in memory for the lifetime of the adapter."""

    def __init__(self) -> None:
        self._reflections: dict[str, Reflection] = {}

    def get(self, identifier: str, source: Path) -> Reflection:
        reflection = self._reflections.get(identifier)
        if reflection is None:
            reflection = read_reflection(source, identifier)
            self._reflections[identifier] = reflection
        return reflection


class StreamAdapter:
    """Persist parsed annotations as JSON files in a cache directory.

    A cached entry is reused while it is at least as new as the task source
    file; otherwise the source is parsed again and the entry rewritten.
    """

    def __init__(self, annotations_dir: Path | None = None) -> None:
        self._annotations_dir = annotations_dir or DEFAULT_ANNOTATIONS_DIR

    @property
    def annotations_dir(self) -> Path:
        return self._annotations_dir

    def cache_path(self, identifier: str, source: Path) -> Path:
        """Cache file of ``identifier``, distinct per identifier and source path."""

        digest = hashlib.sha1(
            f"{identifier}\0{source.resolve()}".encode(),
            usedforsecurity=False,
        ).hexdigest()[:12]
        return self._annotations_dir / f"{_virtual_name(identifier)}-{digest}.json"

    def get(self, identifier: str, source: Path) -> Reflection:
        cache_path = self.cache_path(identifier, source)
        cached = self._read_cached(cache_path, source)
        if cached is not None:
            return cached

        reflection = read_reflection(source, identifier)
        try:
            self._annotations_dir.mkdir(parents=True, exist_ok=True)
            cache_path.write_text(
                json.dumps(reflection.to_dict(), ensure_ascii=False, indent=2, default=str),
                encoding="utf-8",
            )
        except OSError as exc:
            logger.warning("Cannot store annotations of %s in %s: %s", identifier, cache_path, exc)
            return reflection
        logger.debug("Stored annotations of %s in %s", identifier, cache_path)
        return reflection

    def _read_cached(self, cache_path: Path, source: Path) -> Reflection | None:
        try:
            if cache_path.stat().st_mtime < source.stat().st_mtime:
                return None
            return Reflection.from_dict(json.loads(cache_path.read_text(encoding="utf-8")))
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.debug("Ignoring unreadable annotations cache %s: %s", cache_path, exc)
            return None


ADAPTER_FACTORIES: dict[str, Callable[[Path | None], AnnotationSource]] = {
    "memory": lambda annotations_dir: MemoryAdapter(),
    "stream": StreamAdapter,
}


def create_annotation_source(
    adapter_name: str | None,
    *,
    annotations_dir: Path | None = None,
) -> AnnotationSource:
    """Instantiate the named adapter, falling back to :class:`MemoryAdapter`."""

    if not adapter_name:
        return MemoryAdapter()
    factory = ADAPTER_FACTORIES.get(adapter_name.strip().lower())
    if factory is None:
        logger.warning(
            "Unknown annotations adapter %r, using memory adapter (known: %s)",
            adapter_name,
            ", ".join(sorted(ADAPTER_FACTORIES)),
        )
        return MemoryAdapter()
    return factory(annotations_dir)


def _virtual_name(identifier: str) -> str:
    return re.sub(r"[^A-Za-z0-9_]", "_", identifier)
