#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from dataclasses import fields
from typing import Any, Iterator, List, Tuple

from ut_ast import Node, SourceUnit

# Never shown inline: the span becomes an `@offset+length` suffix and the
# source text of a unit would drown the dump.
_HIDDEN_FIELDS = frozenset(("span", "source"))

INDENT = "  "


def _split_fields(node: Node) -> Tuple[List[Tuple[str, Any]], List[Tuple[str, Any]]]:
    scalars = []
    children = []
    for f in fields(node):
        if f.name in _HIDDEN_FIELDS:
            continue
        value = getattr(node, f.name)
        if isinstance(value, (Node, list)):
            children.append((f.name, value))
        elif value is not None:
            scalars.append((f.name, value))
    return scalars, children


def _header(node: Node, scalars: List[Tuple[str, Any]]) -> str:
    text = type(node).__name__
    if scalars:
        text += "(" + ", ".join(f"{name}={value!r}" for name, value in scalars) + ")"
    if node.span is not None:
        text += f" @{node.span.offset}+{node.span.length}"
    return text


def _render(node: Any, depth: int) -> Iterator[str]:
    pad = INDENT * depth
    if isinstance(node, list):
        for elem in node:
            yield from _render(elem, depth)
        return
    if not isinstance(node, Node):
        yield pad + repr(node)
        return

    scalars, children = _split_fields(node)
    yield pad + _header(node, scalars)
    for name, value in children:
        if value == []:
            continue
        yield pad + INDENT + f"{name}:"
        yield from _render(value, depth + 2)


def format_node(node: Any, indent: int = 0) -> List[str]:
    """
    Reflection-based dump of a syntax tree, one line per node.

    Scalar fields go inline in the header; node and list fields are printed
    as labelled, indented blocks. Nodes with a span end in `@offset+length`.
    """
    return list(_render(node, indent))


def format_unit(unit: SourceUnit) -> str:
    return "\n".join(format_node(unit))
