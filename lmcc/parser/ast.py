# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
AST for the source language.

Pipeline placement:
  Surface syntax (this file) → LMC basic blocks (lmcc/lower) → assembly text

Every node carries its start Position and its length in characters.
Operator symbols are kept as their source spelling (`+`, `<=`, `and`, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from lmcc.core.span import Position
from lmcc.core.types import Type


ARITHMETIC_OPS = frozenset({"+", "-"})
COMPARISON_OPS = frozenset({"==", "!=", "<", "<=", ">", ">="})
LOGICAL_OPS = frozenset({"and", "or"})
UNARY_OPS = frozenset({"-", "not"})


# Base classes

class Node:
	"""Base class for all AST nodes (minimal)."""
	pass


class Expr(Node):
	"""Base class for expressions."""
	pass


class Stmt(Node):
	"""Base class for statements."""
	pass


# Expressions

@dataclass
class IntLiteral(Expr):
	value: int
	pos: Position = field(default_factory=Position)
	length: int = 0


@dataclass
class BoolLiteral(Expr):
	value: bool
	pos: Position = field(default_factory=Position)
	length: int = 0


@dataclass
class Input(Expr):
	"""`in`: read one integer from the host."""
	pos: Position = field(default_factory=Position)
	length: int = 0


@dataclass
class Ident(Expr):
	name: str
	pos: Position = field(default_factory=Position)
	length: int = 0


@dataclass
class Binary(Expr):
	"""Binary operator expression; `op` is one of the *_OPS symbols above."""
	op: str
	left: Expr
	right: Expr
	pos: Position = field(default_factory=Position)
	length: int = 0


@dataclass
class Unary(Expr):
	"""Prefix `-` or `not`."""
	op: str
	operand: Expr
	pos: Position = field(default_factory=Position)
	length: int = 0


# Statements

@dataclass
class Declare(Stmt):
	"""
	`name : type? (= value)?`

	`type` is Type.UNDEFINED when no annotation was written.
	"""
	name: str
	type: Type = Type.UNDEFINED
	value: Optional[Expr] = None
	pos: Position = field(default_factory=Position)
	length: int = 0


@dataclass
class Assign(Stmt):
	name: str
	value: Expr
	pos: Position = field(default_factory=Position)
	length: int = 0


@dataclass
class BlockScope(Stmt):
	"""`{ ... }`: a nested lexical scope."""
	statements: List[Stmt]
	pos: Position = field(default_factory=Position)
	length: int = 0


@dataclass
class If(Stmt):
	cond: Expr
	then_branch: Stmt
	else_branch: Optional[Stmt] = None
	pos: Position = field(default_factory=Position)
	length: int = 0


@dataclass
class While(Stmt):
	cond: Expr
	body: Stmt
	pos: Position = field(default_factory=Position)
	length: int = 0


@dataclass
class Output(Stmt):
	"""`out expr`: write an Int to the host."""
	value: Expr
	pos: Position = field(default_factory=Position)
	length: int = 0


__all__ = [
	"ARITHMETIC_OPS",
	"COMPARISON_OPS",
	"LOGICAL_OPS",
	"UNARY_OPS",
	"Node",
	"Expr",
	"Stmt",
	"IntLiteral",
	"BoolLiteral",
	"Input",
	"Ident",
	"Binary",
	"Unary",
	"Declare",
	"Assign",
	"BlockScope",
	"If",
	"While",
	"Output",
]
