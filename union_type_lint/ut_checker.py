#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, NoReturn, Optional, Sequence, Set

from ut_ast import (
    Node, SourceUnit, TypeRef, FunctionTypeRef, Param, Annotation, TypeAliasDecl, ClassDecl, FieldDecl,
    ConstructorDecl, MethodDecl, FuncDecl, VarDecl, Block, ExprStmt, ReturnStmt, Identifier, TypeLiteral,
    ListLiteral, Literal, FunctionLiteral, NewExpr, CallExpr, NamedArg, Expr, TypeAnnotation)
from ut_context import CheckerContext
from ut_diagnostics import ViolationLog, Violation, SourceRange, FUNCTION_MISMATCH, OBJECT_MISMATCH
from ut_internal_error import ICELocation, InternalCheckerError
from ut_logger import log_debug, trace
from ut_matcher import match_function_shape, match_class
from ut_registry import UnionTypeRegistry
from ut_resolve import (
    CalleeResolution, find_callee, find_class, find_constructor_of, named_slot_type, positional_slot_type)
from ut_types import shape_of_params, shape_of_function_type, type_name

UNION_TYPE_ANNOTATION = "UnionType"


@dataclass
class CheckRun:
    """
    Mutable state of one traversal: the registry, the set of binding sites
    already checked, and the reporter. Owned by a single run, never shared.
    """
    unit: SourceUnit
    registry: UnionTypeRegistry = field(default_factory=UnionTypeRegistry)
    reporter: ViolationLog = field(default_factory=ViolationLog)
    checked: Set[object] = field(default_factory=set)

    @property
    def violations(self) -> List[Violation]:
        return self.reporter.violations

    @staticmethod
    def _site_key(expr: Expr) -> object:
        # Source offsets are stable across runs; identity is the fallback for
        # synthesized nodes without a span.
        return expr.offset if expr.span is not None else ("id", id(expr))

    def is_checked(self, expr: Expr) -> bool:
        return self._site_key(expr) in self.checked

    def mark_checked(self, expr: Expr) -> None:
        self.checked.add(self._site_key(expr))


def extract_alternatives(annotation: Annotation) -> List[str]:
    """
    Alternative names from `@UnionType([A, B, ...])`.

    Only a list literal in first position counts; its elements may be plain
    identifiers or type literals. Anything else yields no alternatives.
    """
    if not annotation.args:
        return []
    first = annotation.args[0]
    if not isinstance(first, ListLiteral):
        return []
    names: List[str] = []
    for element in first.elements:
        name: Optional[str] = None
        if isinstance(element, TypeLiteral):
            name = element.type_ref.name
        elif isinstance(element, Identifier):
            name = element.name
        if name:
            names.append(name)
    return names


class UnionTypeChecker:
    """
    Single-pass union-type checker for one SourceUnit.

    The walk is depth-first in tree order. Type-alias declarations populate
    the registry; variable initializers, constructor arguments and call
    arguments are checked against it. A union type is only known to sites
    that come after its declaration.

    Usage:

        checker = UnionTypeChecker(unit)
        run = checker.check()
        run.violations
    """

    def __init__(
            self,
            unit: SourceUnit,
            context: Optional[CheckerContext] = None,
            reporter: Optional[ViolationLog] = None,
    ):
        self.unit = unit
        self.context = context or CheckerContext.default()
        self.reporter = reporter

    def check(self) -> CheckRun:
        run = CheckRun(self.unit, reporter=self.reporter if self.reporter is not None else ViolationLog())
        for decl in self.unit.decls:
            self._visit(decl, run)
        log_debug(self.context, f"check: {run.reporter.violations_found} violation(s) found")
        return run

    # --- dispatch ---

    def _visit_all(self, nodes: Sequence[Node], run: CheckRun) -> None:
        for node in nodes:
            self._visit(node, run)

    def _visit(self, node: Node, run: CheckRun) -> None:
        match node:
            case TypeAliasDecl():
                self._visit_type_alias(node, run)
            case ClassDecl(members=members):
                self._visit_all(members, run)
            case FieldDecl(type=annotation, initializer=init):
                self._visit_variable(node.name, annotation, init, run)
            case VarDecl(type=annotation, initializer=init):
                self._visit_variable(node.name, annotation, init, run)
            case ConstructorDecl(params=params, body=body):
                self._visit_all(params, run)
                self._visit_all(body, run)
            case MethodDecl(params=params, body=body) | FuncDecl(params=params, body=body):
                self._visit_all(params, run)
                self._visit_all(body, run)
            case Param(default=default):
                if default is not None:
                    self._visit(default, run)
            case Block(stmts=stmts):
                self._visit_all(stmts, run)
            case ExprStmt(expr=expr):
                self._visit(expr, run)
            case ReturnStmt(value=value):
                if value is not None:
                    self._visit(value, run)
            case FunctionLiteral(params=params, body=body):
                self._visit_all(params, run)
                if isinstance(body, list):
                    self._visit_all(body, run)
                else:
                    self._visit(body, run)
            case NewExpr(args=args):
                self._visit_new(node, run)
                self._visit_all(args, run)
            case CallExpr(target=target, args=args):
                self._visit_call(node, run)
                if target is not None:
                    self._visit(target, run)
                self._visit_all(args, run)
            case NamedArg(value=value):
                self._visit(value, run)
            case ListLiteral(elements=elements):
                self._visit_all(elements, run)
            case Annotation() | Identifier() | TypeLiteral() | Literal() | TypeRef() | FunctionTypeRef():
                pass
            case _:
                self.ice(f"[ICE-0100] unhandled node kind '{type(node).__name__}'", node=node)

    # --- declarations ---

    def _visit_type_alias(self, node: TypeAliasDecl, run: CheckRun) -> None:
        log_debug(self.context, f"visit_type_alias: found alias '{node.name}'")
        for annotation in node.annotations:
            if annotation.name == UNION_TYPE_ANNOTATION:
                alternatives = extract_alternatives(annotation)
                log_debug(self.context, f"visit_type_alias: '{node.name}' allows {alternatives}")
                run.registry.register(node.name, alternatives)

        if isinstance(node.target, FunctionTypeRef):
            shape = shape_of_function_type(node.target)
            log_debug(self.context, f"visit_type_alias: '{node.name}' is function shape '{shape.format()}'")
            run.registry.register_function_shape(node.name, shape)

    def _visit_variable(
            self,
            name: str,
            annotation: Optional[TypeAnnotation],
            initializer: Optional[Expr],
            run: CheckRun,
    ) -> None:
        if initializer is None:
            return
        declared = type_name(annotation)
        if run.registry.is_union_type(declared) and isinstance(initializer, FunctionLiteral):
            log_debug(self.context, f"visit_variable: '{name}' has union type '{declared}'")
            if not run.is_checked(initializer):
                run.mark_checked(initializer)
                self._check_function_literal(initializer, declared, initializer, run)
        self._visit(initializer, run)

    # --- binding sites ---

    def _visit_new(self, node: NewExpr, run: CheckRun) -> None:
        callee = find_constructor_of(run.unit, node.class_name)
        if callee is None:
            log_debug(self.context, f"visit_new: no constructor found for '{node.class_name}'")
            return
        self._check_arguments(node.args, callee, run)

    def _visit_call(self, node: CallExpr, run: CheckRun) -> None:
        callee = find_callee(run.unit, node.name)
        if callee is None:
            log_debug(self.context, f"visit_call: declaration not found for '{node.name}'")
            return
        self._check_arguments(node.args, callee, run)

    def _check_arguments(self, args: Sequence[Expr], callee: CalleeResolution, run: CheckRun) -> None:
        positional_index = 0
        for arg in args:
            if isinstance(arg, NamedArg):
                slot_type = named_slot_type(callee, arg.name)
                value = arg.value
            else:
                slot_type = positional_slot_type(callee, positional_index)
                positional_index += 1
                value = arg

            if not run.registry.is_union_type(slot_type):
                continue
            if not isinstance(value, (FunctionLiteral, NewExpr)):
                continue
            if run.is_checked(value):
                log_debug(self.context, "check_arguments: binding site already checked, skipping")
                continue
            run.mark_checked(value)

            if isinstance(value, FunctionLiteral):
                self._check_function_literal(value, slot_type, arg, run)
            else:
                self._check_object(value, slot_type, arg, run)

    def _check_function_literal(
            self,
            literal: FunctionLiteral,
            union_type_name: str,
            site: Expr,
            run: CheckRun,
    ) -> None:
        alternatives = run.registry.allowed_alternatives(union_type_name)
        if not alternatives:
            return
        shape = shape_of_params(literal.params)
        matched = match_function_shape(shape, alternatives, run.registry)
        if matched is not None:
            log_debug(self.context, f"check_function_literal: '{shape.format()}' matches '{matched}'")
            return
        self._report(shape.format(), union_type_name, alternatives, site, literal, run, FUNCTION_MISMATCH)

    def _check_object(self, new_expr: NewExpr, union_type_name: str, site: Expr, run: CheckRun) -> None:
        alternatives = run.registry.allowed_alternatives(union_type_name)
        if not alternatives:
            return
        class_name = new_expr.class_name
        class_decl = find_class(run.unit, class_name)
        if class_decl is None:
            log_debug(self.context, f"check_object: class '{class_name}' not declared in unit, skipping")
            return
        matched = match_class(class_decl, alternatives, run.registry)
        if matched is not None:
            log_debug(self.context, f"check_object: '{class_name}' implements '{matched}'")
            return
        self._report(class_name, union_type_name, alternatives, site, new_expr, run, OBJECT_MISMATCH)

    # --- reporting ---

    def _source_range(self, site: Expr, value: Expr) -> SourceRange:
        """Range from the start of the binding site to the end of the supplied value."""
        if site.span is None or value.span is None:
            return SourceRange(offset=None, length=None)
        offset = site.span.offset
        line, column = self.unit.line_info.location(offset)
        return SourceRange(offset=offset, length=value.span.end - offset, line=line, column=column)

    def _report(
            self,
            target: str,
            union_type_name: str,
            alternatives: Sequence[str],
            site: Expr,
            value: Expr,
            run: CheckRun,
            code: str,
    ) -> None:
        violation = run.reporter.report(
            target, union_type_name, alternatives, self._source_range(site, value), code=code,
        )
        log_debug(self.context, f"report: {violation.format_with_line()}")
        trace(self.context, violation.format_with_line())

    def ice(self, message: str, *, node: Optional[Node] = None) -> NoReturn:
        position = None
        if node is not None and node.span is not None:
            position = self.unit.line_info.location(node.span.offset)
        raise InternalCheckerError(message, ICELocation(filename=self.unit.filename, position=position))
