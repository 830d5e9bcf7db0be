#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union


# ==========================
# Syntax model consumed by the checker
# ==========================


@dataclass(frozen=True)
class Span:
    """Byte offset and byte length into the UTF-8 encoded source."""
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass
class Node:
    span: Optional[Span] = field(default=None, repr=False, compare=False, kw_only=True)

    @property
    def offset(self) -> Optional[int]:
        return self.span.offset if self.span is not None else None


# --- types ---

@dataclass
class TypeRef(Node):
    name: str  # e.g. "int", "BuildContext", "OnTap"
    is_nullable: bool = False  # trailing ?


@dataclass
class FunctionTypeRef(Node):
    """A function type such as `void Function(BuildContext, dynamic)`."""
    params: List["Param"]
    return_type: Optional[TypeRef] = None


TypeAnnotation = Union[TypeRef, FunctionTypeRef]


# --- declarations ---

class TopLevelDecl(Node):
    pass


@dataclass
class Param(Node):
    """
    A formal parameter.

    is_field marks a parameter that forwards to a same-named field
    (`this.onTap`); such a parameter usually has no annotation of its own.
    """
    name: Optional[str]
    type: Optional[TypeAnnotation] = None
    is_field: bool = False
    is_named: bool = False
    default: Optional["Expr"] = None


@dataclass
class Annotation(Node):
    name: str
    args: List["Expr"] = field(default_factory=list)


@dataclass
class TypeAliasDecl(TopLevelDecl):
    name: str
    target: TypeAnnotation
    annotations: List[Annotation] = field(default_factory=list)


@dataclass
class FieldDecl(Node):
    name: str
    type: Optional[TypeAnnotation]
    initializer: Optional["Expr"] = None


@dataclass
class ConstructorDecl(Node):
    name: Optional[str]  # None for the unnamed constructor
    params: List[Param]
    body: List["Stmt"] = field(default_factory=list)


@dataclass
class MethodDecl(Node):
    name: str
    params: List[Param]
    return_type: Optional[TypeAnnotation] = None
    body: List["Stmt"] = field(default_factory=list)


ClassMember = Union[FieldDecl, ConstructorDecl, MethodDecl]


@dataclass
class ClassDecl(TopLevelDecl):
    name: str
    members: List[ClassMember] = field(default_factory=list)
    implements: List[TypeRef] = field(default_factory=list)
    extends: Optional[TypeRef] = None
    is_abstract: bool = False

    def constructors(self) -> List[ConstructorDecl]:
        return [m for m in self.members if isinstance(m, ConstructorDecl)]

    def fields(self) -> List[FieldDecl]:
        return [m for m in self.members if isinstance(m, FieldDecl)]


@dataclass
class FuncDecl(TopLevelDecl):
    name: str
    params: List[Param]
    return_type: Optional[TypeAnnotation] = None
    body: List["Stmt"] = field(default_factory=list)


@dataclass
class VarDecl(TopLevelDecl):
    """Variable declaration; appears both at top level and as a statement."""
    name: str
    type: Optional[TypeAnnotation]
    initializer: Optional["Expr"] = None


# --- statements ---

class Stmt(Node):
    pass


@dataclass
class Block(Stmt):
    stmts: List[Node]


@dataclass
class ExprStmt(Stmt):
    expr: "Expr"


@dataclass
class ReturnStmt(Stmt):
    value: Optional["Expr"]


# --- expressions ---

class Expr(Node):
    pass


@dataclass
class Identifier(Expr):
    name: str


@dataclass
class TypeLiteral(Expr):
    """A type used in expression position, e.g. inside an annotation list."""
    type_ref: TypeRef


@dataclass
class ListLiteral(Expr):
    elements: List[Expr]


@dataclass
class Literal(Expr):
    value: object


@dataclass
class FunctionLiteral(Expr):
    params: List[Param]
    body: Union[List[Node], Expr] = field(default_factory=list)


@dataclass
class NewExpr(Expr):
    """
    Object construction. static_type is the constructed class name when the
    front-end resolved it; otherwise only type_ref is known.
    """
    type_ref: TypeRef
    args: List[Expr]
    constructor_name: Optional[str] = None
    static_type: Optional[str] = None
    is_const: bool = False

    @property
    def class_name(self) -> str:
        return self.static_type or self.type_ref.name


@dataclass
class CallExpr(Expr):
    name: str
    args: List[Expr]
    target: Optional[Expr] = None


@dataclass
class NamedArg(Expr):
    name: str
    value: Expr


# --- compilation unit ---

class LineInfo:
    """
    Maps byte offsets into the UTF-8 encoded source to 1-based (line, column)
    positions. Columns count bytes as well.
    """

    def __init__(self, source: str):
        data = source.encode("utf-8")
        self.line_starts: Tuple[int, ...] = (0,) + tuple(
            i + 1 for i, byte in enumerate(data) if byte == 0x0A
        )

    def line_of(self, offset: int) -> int:
        return bisect_right(self.line_starts, offset)

    def location(self, offset: int) -> Tuple[int, int]:
        line = self.line_of(offset)
        return line, offset - self.line_starts[line - 1] + 1


@dataclass
class SourceUnit(Node):
    decls: List[TopLevelDecl]
    source: str = ""
    filename: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        self.line_info = LineInfo(self.source)
