#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from typing import Optional, Sequence

from ut_ast import ClassDecl
from ut_registry import UnionTypeRegistry
from ut_types import ANY_TYPE, FunctionShape

# Structural matching of supplied values against union alternatives.
#
# Both matchers walk the alternatives in declared order and return the name
# of the first one that matches, or None. They never report anything
# themselves.


def types_compatible(actual: str, expected: str, registry: UnionTypeRegistry) -> bool:
    """
    Compatibility of one parameter position:

      - identical names
      - expected is the `any` wildcard
      - expected is a function-shape alias with exactly one parameter whose
        type is the actual type (one level of unwrapping, not recursive)
    """
    if actual == expected:
        return True
    if expected == ANY_TYPE:
        return True
    shape = registry.resolve_function_shape(expected)
    if shape is not None:
        return shape.arity == 1 and shape.params[0] == actual
    return False


def shapes_compatible(actual: FunctionShape, expected: FunctionShape, registry: UnionTypeRegistry) -> bool:
    if actual.arity != expected.arity:
        return False
    return all(
        types_compatible(a, e, registry)
        for a, e in zip(actual.params, expected.params)
    )


def match_function_shape(
        shape: FunctionShape,
        alternatives: Sequence[str],
        registry: UnionTypeRegistry,
) -> Optional[str]:
    for alternative in alternatives:
        expected = registry.resolve_function_shape(alternative)
        if expected is None:
            # Capability or unknown name: an opaque type a literal never matches.
            continue
        if shapes_compatible(shape, expected, registry):
            return alternative
    return None


def implements_capability(class_decl: ClassDecl, capability: str) -> bool:
    """Nominal check against the explicit `implements` list only."""
    return any(iface.name == capability for iface in class_decl.implements)


def match_class(
        class_decl: ClassDecl,
        alternatives: Sequence[str],
        registry: UnionTypeRegistry,
) -> Optional[str]:
    for alternative in alternatives:
        if registry.resolve_function_shape(alternative) is not None:
            continue
        if implements_capability(class_decl, alternative):
            return alternative
    return None
