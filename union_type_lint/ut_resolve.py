#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from dataclasses import dataclass
from typing import List, Optional, Union

from ut_ast import ClassDecl, ConstructorDecl, FuncDecl, Param, SourceUnit
from ut_types import type_name

# Same-unit declaration lookups. There is no cross-unit resolution: a name
# that is not declared in the unit resolves to None and the caller skips it.


@dataclass(frozen=True)
class CalleeResolution:
    """A function or constructor whose parameters give binding-site types."""
    decl: Union[FuncDecl, ConstructorDecl]
    owner: Optional[ClassDecl] = None  # class owning a constructor

    @property
    def params(self) -> List[Param]:
        return self.decl.params


def find_class(unit: SourceUnit, name: str) -> Optional[ClassDecl]:
    for decl in unit.decls:
        if isinstance(decl, ClassDecl) and decl.name == name:
            return decl
    return None


def first_constructor(class_decl: ClassDecl) -> Optional[ConstructorDecl]:
    """Only the first declared constructor is consulted."""
    for member in class_decl.members:
        if isinstance(member, ConstructorDecl):
            return member
    return None


def find_constructor_of(unit: SourceUnit, class_name: str) -> Optional[CalleeResolution]:
    class_decl = find_class(unit, class_name)
    if class_decl is None:
        return None
    ctor = first_constructor(class_decl)
    if ctor is None:
        return None
    return CalleeResolution(ctor, class_decl)


def find_callee(unit: SourceUnit, name: str) -> Optional[CalleeResolution]:
    """
    Find the first top-level function named `name`, or the first constructor
    reachable by that name: a named constructor, or any constructor of the
    class called `name`. Declarations are scanned in unit order.
    """
    for decl in unit.decls:
        if isinstance(decl, FuncDecl) and decl.name == name:
            return CalleeResolution(decl)
        if isinstance(decl, ClassDecl):
            for ctor in decl.constructors():
                ctor_name = ctor.name or decl.name
                if ctor_name == name or decl.name == name:
                    return CalleeResolution(ctor, decl)
    return None


def find_field_type(class_decl: ClassDecl, field_name: str) -> Optional[str]:
    for fdecl in class_decl.fields():
        if fdecl.name == field_name:
            return type_name(fdecl.type)
    return None


def param_slot_type(param: Param, owner: Optional[ClassDecl]) -> Optional[str]:
    """
    Declared type name of a parameter slot. A field-forwarding parameter
    without its own annotation takes the type of the same-named field.
    """
    if param.type is not None:
        return type_name(param.type)
    if param.is_field and owner is not None and param.name is not None:
        return find_field_type(owner, param.name)
    return None


def positional_slot_type(callee: CalleeResolution, index: int) -> Optional[str]:
    positional = [p for p in callee.params if not p.is_named]
    if 0 <= index < len(positional):
        return param_slot_type(positional[index], callee.owner)
    return None


def named_slot_type(callee: CalleeResolution, name: str) -> Optional[str]:
    for param in callee.params:
        if param.name == name:
            return param_slot_type(param, callee.owner)
    return None
