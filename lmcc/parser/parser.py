# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lark front end: source text → AST (lmcc/parser/ast.py).

The grammar lives next to this module in grammar.lark. Syntax errors are not
raised to callers; they are collected as Diagnostics through Lark's `on_error`
recovery hook (the offending token is skipped and parsing resumes), so one run
can report several of them.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from lmcc.core.diagnostics import Diagnostic
from lmcc.core.span import Position
from lmcc.core.types import Type

from .ast import (
	Assign,
	Binary,
	BlockScope,
	BoolLiteral,
	Declare,
	Expr,
	Ident,
	If,
	Input,
	IntLiteral,
	Output,
	Stmt,
	Unary,
	While,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()


_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="contextual",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)


class _InvalidProgram(Exception):
	"""Raised while building the AST once a node-level diagnostic was recorded."""
	pass


def parse_source(source: str) -> Tuple[List[Stmt], List[Diagnostic]]:
	"""
	Parse a whole program.

	Returns the top-level statements and the parser diagnostics. When any
	diagnostic is reported the statement list is empty.
	"""
	diagnostics: List[Diagnostic] = []

	def _on_error(err: UnexpectedInput) -> bool:
		diag = _syntax_diagnostic(err)
		if not _is_repeat(diag, err, diagnostics):
			diagnostics.append(diag)
		return True

	try:
		tree = _PARSER.parse(source, on_error=_on_error)
	except UnexpectedInput as err:
		# Lark re-raises a repeated end-of-input error instead of looping; the
		# first occurrence has already gone through _on_error.
		if not diagnostics:
			diagnostics.append(_syntax_diagnostic(err))
		return [], diagnostics
	if diagnostics:
		return [], diagnostics
	try:
		statements = [_build_stmt(child, diagnostics) for child in tree.children if isinstance(child, Tree)]
	except _InvalidProgram:
		return [], diagnostics
	return statements, diagnostics


def parse_file(path: Path) -> Tuple[List[Stmt], List[Diagnostic]]:
	return parse_source(Path(path).read_text(encoding="utf-8"))


def _is_repeat(diag: Diagnostic, err: UnexpectedInput, seen: List[Diagnostic]) -> bool:
	"""
	Recovery can report one problem twice: the same token again, or end of
	input after the offending text was skipped.
	"""
	if any(prev.message == diag.message for prev in seen):
		return True
	token = getattr(err, "token", None)
	if token is None or token.type != "$END":
		return False
	prefix = _describe(err) + " at "
	return any(prev.message.startswith(prefix) for prev in seen)


def _syntax_diagnostic(err: UnexpectedInput) -> Diagnostic:
	pos = _error_position(err)
	return Diagnostic(message=f"{_describe(err)} at {pos}", phase="parser", severity="error", pos=pos)


def _describe(err: UnexpectedInput) -> str:
	"""Map a Lark error to one of the front end's messages."""
	expected = set(getattr(err, "expected", None) or getattr(err, "allowed", None) or ())
	if "INT" in expected:
		return "expected a value"
	token = getattr(err, "token", None)
	if "RBRACE" in expected and token is not None and token.type == "$END":
		return "expected a '}'"
	return "was expecting a statement"


def _error_position(err: UnexpectedInput) -> Position:
	line = getattr(err, "line", None)
	column = getattr(err, "column", None)
	index = getattr(err, "pos_in_stream", None)
	return Position(
		line=line if isinstance(line, int) and line > 0 else 1,
		column=column if isinstance(column, int) and column > 0 else 1,
		index=index if isinstance(index, int) and index >= 0 else 0,
	)


def _loc(node: Tree | Token) -> Tuple[Position, int]:
	"""Start position and length of a tree or token."""
	if isinstance(node, Token):
		start, end = node.start_pos or 0, node.end_pos or 0
		return Position(line=node.line or 1, column=node.column or 1, index=start), end - start
	meta = node.meta
	if getattr(meta, "empty", True):
		return Position(), 0
	return Position.from_loc(meta), meta.end_pos - meta.start_pos


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		return str(node.data)
	return node.type


def _build_stmt(tree: Tree, diagnostics: List[Diagnostic]) -> Stmt:
	kind = _name(tree)
	pos, length = _loc(tree)
	children = [child for child in tree.children if isinstance(child, (Tree, Token))]
	if kind == "if_stmt":
		else_branch = _build_stmt(children[2], diagnostics) if len(children) > 2 else None
		return If(
			cond=_build_expr(children[0]),
			then_branch=_build_stmt(children[1], diagnostics),
			else_branch=else_branch,
			pos=pos,
			length=length,
		)
	if kind == "while_stmt":
		return While(
			cond=_build_expr(children[0]),
			body=_build_stmt(children[1], diagnostics),
			pos=pos,
			length=length,
		)
	if kind == "out_stmt":
		return Output(value=_build_expr(children[0]), pos=pos, length=length)
	if kind == "block":
		return BlockScope(
			statements=[_build_stmt(child, diagnostics) for child in children],
			pos=pos,
			length=length,
		)
	if kind == "declare":
		return _build_declare(tree, diagnostics)
	if kind == "assign":
		return Assign(name=str(children[0]), value=_build_expr(children[1]), pos=pos, length=length)
	raise ValueError(f"Unsupported statement node: {kind}")


def _build_declare(tree: Tree, diagnostics: List[Diagnostic]) -> Declare:
	pos, length = _loc(tree)
	name_token = tree.children[0]
	decl_type = Type.UNDEFINED
	value: Expr | None = None
	for child in tree.children[1:]:
		if isinstance(child, Tree) and _name(child) == "type_name":
			type_token = child.children[0]
			resolved = Type.from_name(str(type_token))
			if resolved is None:
				type_pos, _ = _loc(type_token)
				diagnostics.append(
					Diagnostic(message=f"invalid type name at {type_pos}", phase="parser", severity="error", pos=type_pos)
				)
				raise _InvalidProgram()
			decl_type = resolved
		elif isinstance(child, Tree):
			value = _build_expr(child)
	return Declare(name=str(name_token), type=decl_type, value=value, pos=pos, length=length)


def _build_expr(node: Tree) -> Expr:
	if not isinstance(node, Tree):
		raise TypeError(f"Unexpected node type: {type(node)}")
	kind = _name(node)
	pos, length = _loc(node)
	children = node.children
	if kind == "int_lit":
		return IntLiteral(value=int(children[0]), pos=pos, length=length)
	if kind == "true_lit":
		return BoolLiteral(value=True, pos=pos, length=length)
	if kind == "false_lit":
		return BoolLiteral(value=False, pos=pos, length=length)
	if kind == "input":
		return Input(pos=pos, length=length)
	if kind == "ident":
		return Ident(name=str(children[0]), pos=pos, length=length)
	if kind == "binary":
		left, op_token, right = children
		return Binary(op=str(op_token), left=_build_expr(left), right=_build_expr(right), pos=pos, length=length)
	if kind == "unary_op":
		op_token, operand = children
		return Unary(op=str(op_token), operand=_build_expr(operand), pos=pos, length=length)
	raise ValueError(f"Unsupported expression node: {kind}")


__all__ = ["parse_source", "parse_file"]
