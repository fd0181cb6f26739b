"""Static reader for docstring annotations of task classes.

Task modules are parsed with :mod:`ast` and never imported. Annotations are
docstring lines starting with ``@Name``, optionally followed by a
parenthesised list of Python literals::

    class FooTask:
        \"\"\"
        @description("Does foo")
        \"\"\"

        def bar_action(self, x, y):
            \"\"\"
            @description("Bars")
            @param({"name": "x", "type": "int"})
            @param(name="y", type="string", description="the y")
            \"\"\"

An argument list may span several lines; it ends when the parentheses
balance, and text after the closing parenthesis is ignored. Lines that do
not start with ``@`` are ignored too.
"""

from __future__ import annotations

import ast
import re
from dataclasses import dataclass
from pathlib import Path

from taskdoc.annotations.models import Annotation, Collection, Reflection

_ANNOTATION_START = re.compile(r"^\s*@([A-Za-z_][A-Za-z0-9_]*)")


@dataclass(slots=True)
class AnnotationError(Exception):
    """Annotations of a class or method could not be read."""

    message: str
    identifier: str | None = None

    def __str__(self) -> str:
        return self.message


def parse_docstring(docstring: str | None, *, identifier: str = "<unknown>") -> Collection:
    """Parse all annotations of one docstring, in source order."""

    if not docstring:
        return Collection()
    return Collection(
        tuple(
            _build_annotation(name, arguments_source, identifier)
            for name, arguments_source in _iter_entries(docstring, identifier)
        ),
    )


def read_reflection(source: Path, identifier: str) -> Reflection:
    """Read class and method annotations of ``identifier`` from ``source``.

    The class is looked up by the last dotted segment of the identifier,
    either verbatim or camel-cased (``foo_task`` -> ``FooTask``). A module
    without that class yields an empty reflection.
    """

    try:
        tree = ast.parse(source.read_text(encoding="utf-8"), filename=str(source))
    except (OSError, SyntaxError, ValueError, RecursionError) as error:
        raise AnnotationError(
            f"Cannot read annotations of {identifier} from {source}: {error}",
            identifier,
        ) from error

    class_node = _find_class(tree, identifier.rsplit(".", 1)[-1])
    if class_node is None:
        return Reflection()

    methods: dict[str, Collection] = {}
    for node in class_node.body:
        if not isinstance(node, ast.FunctionDef | ast.AsyncFunctionDef):
            continue
        collection = parse_docstring(
            ast.get_docstring(node),
            identifier=f"{identifier}.{node.name}",
        )
        if collection:
            methods[node.name] = collection

    return Reflection(
        class_annotations=parse_docstring(ast.get_docstring(class_node), identifier=identifier),
        methods_annotations=methods,
    )


def _iter_entries(docstring: str, identifier: str):
    lines = docstring.splitlines()
    index = 0
    while index < len(lines):
        line = lines[index]
        index += 1
        match = _ANNOTATION_START.match(line)
        if match is None:
            continue
        name = match.group(1)
        rest = line[match.end() :].strip()
        if not rest.startswith("("):
            yield name, None
            continue
        arguments_source = rest
        call_source = _call_prefix(arguments_source)
        while call_source is None:
            if index >= len(lines):
                raise AnnotationError(
                    f"Unterminated annotation @{name} in {identifier}: {arguments_source!r}",
                    identifier,
                )
            arguments_source += "\n" + lines[index]
            index += 1
            call_source = _call_prefix(arguments_source)
        yield name, call_source


def _call_prefix(arguments_source: str) -> str | None:
    """Return the shortest ``(...)`` prefix that parses; trailing text is dropped."""

    for position, char in enumerate(arguments_source):
        if char != ")":
            continue
        candidate = arguments_source[: position + 1]
        try:
            ast.parse(f"_{candidate}", mode="eval")
        except (SyntaxError, ValueError, RecursionError):
            continue
        return candidate
    return None


def _build_annotation(name: str, arguments_source: str | None, identifier: str) -> Annotation:
    if arguments_source is None:
        return Annotation(name=name)

    try:
        call = ast.parse(f"_{arguments_source}", mode="eval").body
        if not isinstance(call, ast.Call):
            raise ValueError(f"not an argument list: {arguments_source!r}")
        arguments = tuple(ast.literal_eval(argument) for argument in call.args)
        named_arguments = {}
        for keyword in call.keywords:
            if keyword.arg is None:
                raise ValueError("keyword unpacking is not supported")
            named_arguments[keyword.arg] = ast.literal_eval(keyword.value)
    except (ValueError, TypeError, SyntaxError, RecursionError) as error:
        raise AnnotationError(
            f"Invalid arguments for @{name} in {identifier}: {error}",
            identifier,
        ) from error
    return Annotation(name=name, arguments=arguments, named_arguments=named_arguments)


def _find_class(tree: ast.Module, class_name: str) -> ast.ClassDef | None:
    candidates = {class_name, _camelize(class_name)}
    for node in tree.body:
        if isinstance(node, ast.ClassDef) and node.name in candidates:
            return node
    return None


def _camelize(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)
