#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from ut_ast import (
    Annotation, CallExpr, ClassDecl, ConstructorDecl, ExprStmt, FieldDecl, FuncDecl, FunctionLiteral,
    FunctionTypeRef, Identifier, ListLiteral, Literal, MethodDecl, NamedArg, NewExpr, Param, SourceUnit, Span,
    TypeAliasDecl, TypeRef, VarDecl,
)
from ut_context import CheckerContext, LogLevel


ON_TAP_ALTERNATIVES = "[VoidCallback, OnTapCtx, OnTapCtxData, IOnTap]"
SURFACE_ON_TAP_ALTERNATIVES = "[SurfaceOnTapVoid, SurfaceOnTapCtx, ISurfaceOnTapVoid]"

SCENARIO_SOURCE = """\
class BuildContext {}

abstract class IOnTap {
  void onTap(BuildContext context, dynamic data);
}

class MyOnTap implements IOnTap {
  const MyOnTap();
  void onTap(BuildContext context, data) {}
}

class MyInvalidOnTap {
  const MyInvalidOnTap();
  void onTap(BuildContext context, data) {}
}

typedef VoidCallback = void Function();
typedef OnTapCtx = void Function(BuildContext);
typedef OnTapCtxData = void Function(BuildContext, any);

@UnionType([VoidCallback, OnTapCtx, OnTapCtxData, IOnTap])
typedef OnTap = Object?;

class TestClass {
  final OnTap? onTap;
  const TestClass(this.onTap);
}

void notify(OnTap fn) {}

final valid = TestClass((BuildContext ctx) => print('valid'));
final invalid = TestClass((int value) => print('invalid'));

final validIOnTap = TestClass(const MyOnTap());
final invalidIOnTap = TestClass(const MyInvalidOnTap());

void main() {
  notify(() => print('valid'));
  notify((double v) => print('invalid'));
}

abstract class ISurfaceOnTapVoid {
  void onTap();
}

typedef SurfaceOnTapVoid = void Function();
typedef SurfaceOnTapCtx = void Function(BuildContext);

@UnionType([SurfaceOnTapVoid, SurfaceOnTapCtx, ISurfaceOnTapVoid])
typedef SurfaceOnTap = Object?;

final invalidSurface = new USurface(onTap: (int i) {}, child: "invalid");
final validSurface = new USurface(onTap: () {}, child: "valid");

class USurface implements ISurfaceOnTapVoid {
  final SurfaceOnTap onTap;
  final Object child;
  const USurface({required this.child, this.onTap});
  const USurface.decorator({required this.child}) : onTap = null;
}
"""


class SpanFinder:
    """Spans of source snippets, so tests can place nodes at real offsets."""

    def __init__(self, source: str):
        self.data = source.encode("utf-8")

    def __call__(self, needle: str, occurrence: int = 0) -> Span:
        raw = needle.encode("utf-8")
        start = -1
        for _ in range(occurrence + 1):
            start = self.data.index(raw, start + 1)
        return Span(start, len(raw))


def tref(name: str, nullable: bool = False) -> TypeRef:
    return TypeRef(name, is_nullable=nullable)


def param(name: Optional[str], type_name: Optional[str] = None, **kwargs) -> Param:
    return Param(name, tref(type_name) if type_name else None, **kwargs)


def fn_alias(name: str, *param_types: str) -> TypeAliasDecl:
    """`typedef name = void Function(T1, T2, ...)`"""
    return TypeAliasDecl(name, FunctionTypeRef([param(None, t) for t in param_types], tref("void")))


def union_alias(name: str, *alternatives: str) -> TypeAliasDecl:
    """`@UnionType([A, B, ...]) typedef name = Object?`"""
    annotation = Annotation("UnionType", [ListLiteral([Identifier(a) for a in alternatives])])
    return TypeAliasDecl(name, tref("Object", nullable=True), [annotation])


def literal(*param_types: Optional[str], span: Optional[Span] = None) -> FunctionLiteral:
    """A function literal; None stands for an unannotated parameter."""
    params = [param(f"p{i}", t) for i, t in enumerate(param_types)]
    return FunctionLiteral(params, [], span=span)


def holder_class(name: str, field_type: str, field_name: str = "onTap") -> ClassDecl:
    """`class name { final field_type field_name; const name(this.field_name); }`"""
    return ClassDecl(
        name,
        members=[
            FieldDecl(field_name, tref(field_type)),
            ConstructorDecl(None, [Param(field_name, is_field=True)]),
        ],
    )


def capability_class(name: str, *implements: str) -> ClassDecl:
    return ClassDecl(
        name,
        members=[ConstructorDecl(None, [])],
        implements=[tref(i) for i in implements],
    )


def build_scenario_unit(filename: Optional[str] = "lib/example.dart") -> SourceUnit:
    src = SCENARIO_SOURCE
    sp = SpanFinder(src)

    decls: List = [
        ClassDecl("BuildContext"),
        ClassDecl(
            "IOnTap",
            members=[MethodDecl("onTap", [param("context", "BuildContext"), param("data", "dynamic")])],
            is_abstract=True,
        ),
        ClassDecl(
            "MyOnTap",
            members=[
                ConstructorDecl(None, []),
                MethodDecl("onTap", [param("context", "BuildContext"), param("data")]),
            ],
            implements=[tref("IOnTap")],
        ),
        ClassDecl(
            "MyInvalidOnTap",
            members=[
                ConstructorDecl(None, []),
                MethodDecl("onTap", [param("context", "BuildContext"), param("data")]),
            ],
        ),
        fn_alias("VoidCallback"),
        fn_alias("OnTapCtx", "BuildContext"),
        fn_alias("OnTapCtxData", "BuildContext", "any"),
        union_alias("OnTap", "VoidCallback", "OnTapCtx", "OnTapCtxData", "IOnTap"),
        ClassDecl(
            "TestClass",
            members=[
                FieldDecl("onTap", tref("OnTap", nullable=True)),
                ConstructorDecl(None, [Param("onTap", is_field=True)]),
            ],
        ),
        FuncDecl("notify", [param("fn", "OnTap")], tref("void")),
        VarDecl("valid", None, CallExpr("TestClass", [
            literal("BuildContext", span=sp("(BuildContext ctx) => print('valid')")),
        ], span=sp("TestClass((BuildContext ctx)"))),
        VarDecl("invalid", None, CallExpr("TestClass", [
            literal("int", span=sp("(int value) => print('invalid')")),
        ], span=sp("TestClass((int value)"))),
        VarDecl("validIOnTap", None, CallExpr("TestClass", [
            NewExpr(tref("MyOnTap"), [], is_const=True, span=sp("const MyOnTap()", 1)),
        ], span=sp("TestClass(const MyOnTap())"))),
        VarDecl("invalidIOnTap", None, CallExpr("TestClass", [
            NewExpr(tref("MyInvalidOnTap"), [], is_const=True, span=sp("const MyInvalidOnTap()", 1)),
        ], span=sp("TestClass(const MyInvalidOnTap())"))),
        FuncDecl("main", [], tref("void"), [
            ExprStmt(CallExpr("notify", [
                literal(span=sp("() => print('valid')")),
            ], span=sp("notify(() =>"))),
            ExprStmt(CallExpr("notify", [
                literal("double", span=sp("(double v) => print('invalid')")),
            ], span=sp("notify((double v)"))),
        ]),
        ClassDecl(
            "ISurfaceOnTapVoid",
            members=[MethodDecl("onTap", [], tref("void"))],
            is_abstract=True,
        ),
        fn_alias("SurfaceOnTapVoid"),
        fn_alias("SurfaceOnTapCtx", "BuildContext"),
        union_alias("SurfaceOnTap", "SurfaceOnTapVoid", "SurfaceOnTapCtx", "ISurfaceOnTapVoid"),
        VarDecl("invalidSurface", None, NewExpr(tref("USurface"), [
            NamedArg("onTap", literal("int", span=sp("(int i) {}")), span=sp("onTap: (int i) {}")),
            NamedArg("child", Literal("invalid"), span=sp('child: "invalid"')),
        ], span=sp('new USurface(onTap: (int i) {}, child: "invalid")'))),
        VarDecl("validSurface", None, NewExpr(tref("USurface"), [
            NamedArg("onTap", literal(span=sp("() {}")), span=sp("onTap: () {}")),
            NamedArg("child", Literal("valid"), span=sp('child: "valid"')),
        ], span=sp('new USurface(onTap: () {}, child: "valid")'))),
        ClassDecl(
            "USurface",
            members=[
                FieldDecl("onTap", tref("SurfaceOnTap")),
                FieldDecl("child", tref("Object")),
                ConstructorDecl(None, [
                    Param("child", is_field=True, is_named=True),
                    Param("onTap", is_field=True, is_named=True),
                ]),
                ConstructorDecl("decorator", [Param("child", is_field=True, is_named=True)]),
            ],
            implements=[tref("ISurfaceOnTapVoid")],
        ),
    ]
    return SourceUnit(decls, source=src, filename=filename)


@pytest.fixture
def scenario_unit() -> SourceUnit:
    return build_scenario_unit()


@pytest.fixture
def quiet_context() -> CheckerContext:
    return CheckerContext(log_level=LogLevel.SILENT)
