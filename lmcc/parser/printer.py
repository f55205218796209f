# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Debug pretty-printer for the AST (used by `lmcc --debug`)."""

from __future__ import annotations

from typing import Iterable

from lmcc.core.types import Type

from . import ast as A

_INDENT = "    "


def format_expr(expr: A.Expr) -> str:
	if isinstance(expr, A.IntLiteral):
		return str(expr.value)
	if isinstance(expr, A.BoolLiteral):
		return "true" if expr.value else "false"
	if isinstance(expr, A.Input):
		return "in"
	if isinstance(expr, A.Ident):
		return expr.name
	if isinstance(expr, A.Binary):
		return f"({format_expr(expr.left)} {expr.op} {format_expr(expr.right)})"
	if isinstance(expr, A.Unary):
		return f"({expr.op} {format_expr(expr.operand)})"
	raise NotImplementedError(f"No printer for expr {type(expr).__name__}")


def format_stmt(stmt: A.Stmt, indent: str = "") -> str:
	"""Render one statement (and its nested bodies) as indented lines."""
	if isinstance(stmt, A.Declare):
		text = f"{stmt.name} :"
		if stmt.type is not Type.UNDEFINED:
			text += f" {stmt.type}"
		if stmt.value is not None:
			text += f" = {format_expr(stmt.value)}"
		return f"{indent}{text}\n"
	if isinstance(stmt, A.Assign):
		return f"{indent}{stmt.name} = {format_expr(stmt.value)}\n"
	if isinstance(stmt, A.Output):
		return f"{indent}out {format_expr(stmt.value)}\n"
	if isinstance(stmt, A.BlockScope):
		inner = "".join(format_stmt(s, indent + _INDENT) for s in stmt.statements)
		return f"{indent}{{\n{inner}{indent}}}\n"
	if isinstance(stmt, A.If):
		text = f"{indent}if {format_expr(stmt.cond)}\n"
		text += format_stmt(stmt.then_branch, indent + _INDENT)
		if stmt.else_branch is not None:
			text += f"{indent}else\n"
			text += format_stmt(stmt.else_branch, indent + _INDENT)
		return text
	if isinstance(stmt, A.While):
		text = f"{indent}while {format_expr(stmt.cond)}\n"
		return text + format_stmt(stmt.body, indent + _INDENT)
	raise NotImplementedError(f"No printer for stmt {type(stmt).__name__}")


def pretty_print(statements: Iterable[A.Stmt]) -> str:
	return "".join(format_stmt(stmt) for stmt in statements)


__all__ = ["format_expr", "format_stmt", "pretty_print"]
