#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

from ut_types import FunctionShape


@dataclass(frozen=True)
class UnionTypeEntry:
    name: str
    alternatives: Tuple[str, ...]  # declared order, duplicates kept


@dataclass
class UnionTypeRegistry:
    """
    Declared union types and function-shape aliases of one checker run.

    The two tables are independent: an alias can be a union type, a function
    shape, both, or neither. Later registrations overwrite earlier ones.
    """
    union_types: Dict[str, UnionTypeEntry] = field(default_factory=dict)
    function_shapes: Dict[str, FunctionShape] = field(default_factory=dict)

    def register(self, name: str, alternatives: Iterable[str]) -> UnionTypeEntry:
        entry = UnionTypeEntry(name, tuple(alternatives))
        self.union_types[name] = entry
        return entry

    def is_union_type(self, name: Optional[str]) -> bool:
        return name is not None and name in self.union_types

    def allowed_alternatives(self, name: str) -> Tuple[str, ...]:
        entry = self.union_types.get(name)
        return entry.alternatives if entry is not None else ()

    def register_function_shape(self, name: str, shape: FunctionShape) -> None:
        self.function_shapes[name] = shape

    def resolve_function_shape(self, name: str) -> Optional[FunctionShape]:
        return self.function_shapes.get(name)
