# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
AST statement → LMC lowering.

Walks declarations, assignments, `if`/`else`, `while`, block scopes and `out`,
advancing the builder's current block whenever control flow splits and
rejoins. Errors are collected per statement: a failing statement records a
Diagnostic and lowering continues with its next sibling.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from lmcc.core.diagnostics import Diagnostic
from lmcc.core.types import Type
from lmcc.lmc.builder import AsmBuilder
from lmcc.parser import ast as A

from .expr import ExprLowerer, LoweringError, Value
from .scope import Scope

# Labels the builder generates itself; a variable may not take one.
_GENERATED_LABEL = re.compile(r"start|b\d+|c\d+|temp\d+")


class StmtLowerer(ExprLowerer):
	"""
	Lower statements on top of ExprLowerer.

	Entry points:
	  - lower_program: lower a whole program starting at the `start` block
	  - lower_stmt / lower_statements: lower into the current block
	"""

	def __init__(self, builder: Optional[AsmBuilder] = None, scope: Optional[Scope] = None) -> None:
		super().__init__(builder if builder is not None else AsmBuilder(), scope if scope is not None else Scope())
		self.diagnostics: List[Diagnostic] = []

	def lower_program(self, statements: Sequence[A.Stmt]) -> None:
		start = self.b.new_block("start")
		self.b.set_block(start)
		self.lower_statements(statements)
		self.b.emit("HLT")

	def lower_statements(self, statements: Iterable[A.Stmt]) -> None:
		for stmt in statements:
			self.lower_stmt(stmt)

	def lower_stmt(self, stmt: A.Stmt) -> None:
		method = getattr(self, f"_visit_stmt_{type(stmt).__name__}", None)
		if method is None:
			raise NotImplementedError(f"No LMC lowering for stmt {type(stmt).__name__}")
		try:
			method(stmt)
		except LoweringError as err:
			self.diagnostics.append(Diagnostic(message=err.message, phase="lower", severity="error", pos=err.pos))

	def _visit_stmt_Declare(self, stmt: A.Declare) -> None:
		if _GENERATED_LABEL.fullmatch(stmt.name):
			raise LoweringError(f"variable name '{stmt.name}' at {stmt.pos} is reserved for generated labels", stmt.pos)
		value: Value | None = None
		if stmt.value is not None:
			value = self.lower_value(stmt.value)
			if stmt.type is not Type.UNDEFINED and stmt.type is not value.type:
				raise LoweringError(
					f"expression at {stmt.value.pos} has type {value.type} but declaration at {stmt.pos} has type {stmt.type}",
					stmt.value.pos,
				)
			ty = value.type
		else:
			ty = stmt.type

		label = self.scope.declare(stmt.name, ty)
		# The cell always starts at 0; an initialiser is stored into it below.
		self.b.create_variable(label, 0)

		if value is not None:
			self.load(value)
			self.b.emit("STA", label)

	def _visit_stmt_Assign(self, stmt: A.Assign) -> None:
		variable = self.scope.get(stmt.name)
		if variable is None:
			raise LoweringError(f"cannot assign to undefined variable '{stmt.name}' at {stmt.pos}", stmt.pos)
		value = self.lower_expect(stmt.value, variable.type)
		self.load(value)
		self.b.emit("STA", variable.label)

	def _visit_stmt_BlockScope(self, stmt: A.BlockScope) -> None:
		self.scope.push_scope()
		self.lower_statements(stmt.statements)
		self.scope.pop_scope()

	def _visit_stmt_If(self, stmt: A.If) -> None:
		if_true = self.b.new_unique_block()
		if_false = self.b.new_unique_block()
		self.lower_condition(stmt.cond, if_true, if_false)

		errors_before = len(self.diagnostics)
		self.b.set_block(if_true)
		self.lower_stmt(stmt.then_branch)
		then_tail = self.b.block
		if len(self.diagnostics) > errors_before:
			return

		if stmt.else_branch is None:
			self.b.emit("BRA", if_false.label, block=then_tail)
			self.b.set_block(if_false)
			return

		exit_block = self.b.new_unique_block()
		self.b.set_block(if_false)
		self.lower_stmt(stmt.else_branch)
		else_tail = self.b.block
		if len(self.diagnostics) > errors_before:
			return
		self.b.emit("BRA", exit_block.label, block=then_tail)
		self.b.emit("BRA", exit_block.label, block=else_tail)
		self.b.set_block(exit_block)

	def _visit_stmt_While(self, stmt: A.While) -> None:
		cond_block = self.b.new_unique_block()
		loop_block = self.b.new_unique_block()
		exit_block = self.b.new_unique_block()

		self.b.emit("BRA", cond_block.label)
		self.b.set_block(cond_block)
		self.lower_condition(stmt.cond, loop_block, exit_block)

		self.b.set_block(loop_block)
		self.lower_stmt(stmt.body)
		# Back edge from wherever the body ended.
		self.b.emit("BRA", cond_block.label)

		self.b.set_block(exit_block)

	def _visit_stmt_Output(self, stmt: A.Output) -> None:
		value = self.lower_expect(stmt.value, Type.INT)
		self.load(value)
		self.b.emit("OUT")


def lower_program(statements: Sequence[A.Stmt]) -> Tuple[AsmBuilder, List[Diagnostic]]:
	"""Lower a parsed program; the builder is only meaningful without diagnostics."""
	lowerer = StmtLowerer()
	lowerer.lower_program(statements)
	return lowerer.b, lowerer.diagnostics


__all__ = ["StmtLowerer", "lower_program"]
