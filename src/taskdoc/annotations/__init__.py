"""Annotation reading for task classes."""

from taskdoc.annotations.adapters import (
    AnnotationSource,
    MemoryAdapter,
    StreamAdapter,
    create_annotation_source,
)
from taskdoc.annotations.models import Annotation, Collection, Reflection
from taskdoc.annotations.reader import AnnotationError, parse_docstring, read_reflection

__all__ = [
    "Annotation",
    "AnnotationError",
    "AnnotationSource",
    "Collection",
    "MemoryAdapter",
    "Reflection",
    "StreamAdapter",
    "create_annotation_source",
    "parse_docstring",
    "read_reflection",
]
