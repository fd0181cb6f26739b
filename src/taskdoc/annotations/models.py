"""Annotation data read from task classes and their methods."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Annotation:
    """One ``@Name(...)`` entry attached to a class or method."""

    name: str
    arguments: tuple[Any, ...] = ()
    named_arguments: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "arguments": list(self.arguments),
            "named_arguments": dict(self.named_arguments),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Annotation:
        return cls(
            name=str(payload["name"]),
            arguments=tuple(payload.get("arguments", ())),
            named_arguments=dict(payload.get("named_arguments", {})),
        )


@dataclass(frozen=True, slots=True)
class Collection:
    """Ordered annotations of a single class or method."""

    annotations: tuple[Annotation, ...] = ()

    def __iter__(self) -> Iterator[Annotation]:
        return iter(self.annotations)

    def __len__(self) -> int:
        return len(self.annotations)

    def has(self, name: str) -> bool:
        return any(annotation.name == name for annotation in self.annotations)

    def get(self, name: str) -> Annotation | None:
        """Return the last annotation with ``name``, if any."""

        found = None
        for annotation in self.annotations:
            if annotation.name == name:
                found = annotation
        return found

    def get_all(self, name: str) -> list[Annotation]:
        return [annotation for annotation in self.annotations if annotation.name == name]


@dataclass(frozen=True, slots=True)
class Reflection:
    """Class-level and method-level annotations of one task class."""

    class_annotations: Collection = field(default_factory=Collection)
    methods_annotations: dict[str, Collection] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "class": [annotation.to_dict() for annotation in self.class_annotations],
            "methods": {
                method: [annotation.to_dict() for annotation in collection]
                for method, collection in self.methods_annotations.items()
            },
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Reflection:
        return cls(
            class_annotations=Collection(
                tuple(Annotation.from_dict(item) for item in payload.get("class", ())),
            ),
            methods_annotations={
                method: Collection(tuple(Annotation.from_dict(item) for item in items))
                for method, items in payload.get("methods", {}).items()
            },
        )
