#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ut_ast import FunctionTypeRef, Param, TypeAnnotation, TypeRef

# ========================================
# Structural shapes compared by the matchers.
# ========================================

# Wildcard parameter type: stands for unannotated parameters and, on the
# expected side, accepts any actual type.
ANY_TYPE = "any"


@dataclass(frozen=True)
class FunctionShape:
    """
    Ordered parameter types of a function literal or function-type alias.

    The return type is not modeled; rendering always uses `void`.
    """
    params: Tuple[str, ...]

    @property
    def arity(self) -> int:
        return len(self.params)

    def format(self) -> str:
        return f"void Function({', '.join(self.params)})"


def type_name(annotation: Optional[TypeAnnotation]) -> Optional[str]:
    """Plain name of a simple type annotation, ignoring nullability."""
    if isinstance(annotation, TypeRef):
        return annotation.name
    return None


def param_type_name(param: Param) -> str:
    if isinstance(param.type, TypeRef):
        return param.type.name
    return ANY_TYPE


def shape_of_params(params: Iterable[Param]) -> FunctionShape:
    return FunctionShape(tuple(param_type_name(p) for p in params))


def shape_of_function_type(ftype: FunctionTypeRef) -> FunctionShape:
    return shape_of_params(ftype.params)
