# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
AST expression → LMC lowering.

Two mutually recursive modes:
  - value mode (`lower_value`): leaves the result either in the accumulator
	(`Value.acc`) or in a named cell (`Value.label`);
  - condition mode (`lower_condition`): ends the current path with branches to
	one of two target blocks.

Booleans, comparisons and `not` are lowered in condition mode; value mode
materialises 0/1 by routing a condition into a pair of LDA blocks that rejoin.

Register allocation is the one-accumulator spill rule: binary operands are
lowered right first; if the right value sits in the accumulator it is stored
to a spill temp before the left side is lowered, and the temp is released on
the way out.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

from lmcc.core.span import Position
from lmcc.core.types import Type
from lmcc.lmc.asm_nodes import Block
from lmcc.lmc.builder import AsmBuilder
from lmcc.parser import ast as A

from .scope import Scope


@dataclass(frozen=True)
class Value:
	"""Where a lowered value lives: the accumulator, or the cell `label`."""
	type: Type
	acc: bool
	label: str = ""


class LoweringError(Exception):
	"""A user-facing error found while lowering; the message names the position."""

	def __init__(self, message: str, pos: Position | None = None) -> None:
		super().__init__(message)
		self.message = message
		self.pos = pos


class ExprLowerer:
	"""
	Lower expressions into the builder's current block.

	Entry points:
	  - lower_value: value mode
	  - lower_expect: value mode plus a type check
	  - lower_condition: condition mode
	Helpers are dispatched by node class name (`_value_<Node>` / `_cond_<Node>`).
	"""

	def __init__(self, builder: AsmBuilder, scope: Scope) -> None:
		self.b = builder
		self.scope = scope

	# --- Value mode ---

	def lower_value(self, expr: A.Expr) -> Value:
		method = getattr(self, f"_value_{type(expr).__name__}", None)
		if method is None:
			raise NotImplementedError(f"No LMC lowering for expr {type(expr).__name__}")
		return method(expr)

	def lower_expect(self, expr: A.Expr, ty: Type) -> Value:
		value = self.lower_value(expr)
		if value.type is not ty:
			raise LoweringError(f"expected a {ty} instead got {value.type} at {expr.pos}", expr.pos)
		return value

	def _value_IntLiteral(self, expr: A.IntLiteral) -> Value:
		return Value(Type.INT, acc=False, label=self.b.get_constant(expr.value))

	def _value_BoolLiteral(self, expr: A.BoolLiteral) -> Value:
		return Value(Type.BOOL, acc=False, label=self.b.get_constant(1 if expr.value else 0))

	def _value_Input(self, expr: A.Input) -> Value:
		self.b.emit("INP")
		return Value(Type.INT, acc=True)

	def _value_Ident(self, expr: A.Ident) -> Value:
		variable = self.scope.get(expr.name)
		if variable is None:
			raise LoweringError(f"undefined variable '{expr.name}' at {expr.pos}", expr.pos)
		return Value(variable.type, acc=False, label=variable.label)

	def _value_Binary(self, expr: A.Binary) -> Value:
		if expr.op in A.ARITHMETIC_OPS:
			right = self.lower_expect(expr.right, Type.INT)
			with self.spill(right) as right_label:
				left = self.lower_expect(expr.left, Type.INT)
				self.load(left)
				self.b.emit("ADD" if expr.op == "+" else "SUB", right_label)
			return Value(Type.INT, acc=True)
		if expr.op in A.COMPARISON_OPS or expr.op in A.LOGICAL_OPS:
			return self._materialize(lambda if_true, if_false: self._cond_Binary(expr, if_true, if_false))
		raise AssertionError(f"unknown binary operator {expr.op!r}")

	def _value_Unary(self, expr: A.Unary) -> Value:
		if expr.op == "-":
			operand = self.lower_expect(expr.operand, Type.INT)
			with self.spill(operand) as label:
				self.b.emit("LDA", self.b.get_constant(0))
				self.b.emit("SUB", label)
			return Value(Type.INT, acc=True)
		if expr.op == "not":
			return self._materialize(lambda if_true, if_false: self._cond_Unary(expr, if_true, if_false))
		raise AssertionError(f"unknown unary operator {expr.op!r}")

	def _materialize(self, lower_cond: Callable[[Block, Block], None]) -> Value:
		"""
		Turn a condition into a 0/1 Bool in the accumulator.

		if_true: LDA c1; BRA exit   if_false: LDA c0; BRA exit
		Lowering continues in the exit block.
		"""
		if_true = self.b.new_unique_block()
		if_false = self.b.new_unique_block()
		exit_block = self.b.new_unique_block()

		self.b.emit("LDA", self.b.get_constant(0), block=if_false)
		self.b.emit("LDA", self.b.get_constant(1), block=if_true)
		self.b.emit("BRA", exit_block.label, block=if_true)
		self.b.emit("BRA", exit_block.label, block=if_false)

		lower_cond(if_true, if_false)
		self.b.set_block(exit_block)
		return Value(Type.BOOL, acc=True)

	# --- Accumulator helpers ---

	def load(self, value: Value) -> None:
		"""Make sure `value` is in the accumulator."""
		if not value.acc:
			self.b.emit("LDA", value.label)

	@contextmanager
	def spill(self, value: Value) -> Iterator[str]:
		"""
		Yield a cell label holding `value` while the accumulator is reused.

		Only an accumulator-resident value takes a temp; the temp is popped on
		every exit from the block.
		"""
		if not value.acc:
			yield value.label
			return
		label = self.b.push_temp()
		self.b.emit("STA", label)
		try:
			yield label
		finally:
			self.b.pop_temp()

	# --- Condition mode ---

	def lower_condition(self, expr: A.Expr, if_true: Block, if_false: Block) -> None:
		method = getattr(self, f"_cond_{type(expr).__name__}", None)
		if method is None:
			raise NotImplementedError(f"No LMC condition lowering for expr {type(expr).__name__}")
		method(expr, if_true, if_false)

	def _cond_IntLiteral(self, expr: A.IntLiteral, if_true: Block, if_false: Block) -> None:
		raise LoweringError(f"int used as a condition at {expr.pos}", expr.pos)

	def _cond_BoolLiteral(self, expr: A.BoolLiteral, if_true: Block, if_false: Block) -> None:
		self.b.emit("BRA", (if_true if expr.value else if_false).label)

	def _cond_Input(self, expr: A.Input, if_true: Block, if_false: Block) -> None:
		raise LoweringError(f"cannot use input as condition at {expr.pos}", expr.pos)

	def _cond_Ident(self, expr: A.Ident, if_true: Block, if_false: Block) -> None:
		variable = self.scope.get(expr.name)
		if variable is None:
			raise LoweringError(f"undefined variable '{expr.name}' at {expr.pos}", expr.pos)
		if variable.type is Type.INT:
			raise LoweringError(
				f"variable '{expr.name}' at {expr.pos} has type {variable.type} but is being used in condition so should be bool",
				expr.pos,
			)
		self.b.emit("LDA", variable.label)
		self.b.emit("BRZ", if_false.label)
		self.b.emit("BRA", if_true.label)

	def _cond_Unary(self, expr: A.Unary, if_true: Block, if_false: Block) -> None:
		if expr.op == "not":
			self.lower_condition(expr.operand, if_false, if_true)
			return
		if expr.op == "-":
			raise LoweringError(f"cannot use '-' operator in condition at {expr.pos}", expr.pos)
		raise AssertionError(f"unknown unary operator {expr.op!r}")

	def _cond_Binary(self, expr: A.Binary, if_true: Block, if_false: Block) -> None:
		op = expr.op
		# Every relation is `x - y` followed by BRP (accumulator >= 0).
		if op == ">=":
			self._branch_nonnegative(expr.left, expr.right, if_true, if_false)
		elif op == "<":
			self._branch_nonnegative(expr.left, expr.right, if_false, if_true)
		elif op == "<=":
			self._branch_nonnegative(expr.right, expr.left, if_true, if_false)
		elif op == ">":
			self._branch_nonnegative(expr.right, expr.left, if_false, if_true)
		elif op == "==":
			# BRP, not BRZ: this tests left >= right (kept for output compatibility).
			self._branch_nonnegative(expr.left, expr.right, if_true, if_false)
		elif op == "!=":
			self._branch_nonnegative(expr.left, expr.right, if_false, if_true)
		elif op == "and":
			next_block = self.b.new_unique_block()
			self.lower_condition(expr.left, next_block, if_false)
			self.b.set_block(next_block)
			self.lower_condition(expr.right, if_true, if_false)
		elif op == "or":
			next_block = self.b.new_unique_block()
			self.lower_condition(expr.left, if_true, next_block)
			self.b.set_block(next_block)
			self.lower_condition(expr.right, if_true, if_false)
		elif op in A.ARITHMETIC_OPS:
			# An Int-valued binary is not a condition; report it through the type check.
			self.lower_expect(expr, Type.BOOL)
		else:
			raise AssertionError(f"unknown binary operator {op!r}")

	def _compare(self, left: A.Expr, right: A.Expr) -> None:
		"""Leave left - right in the accumulator."""
		right_val = self.lower_expect(right, Type.INT)
		with self.spill(right_val) as right_label:
			left_val = self.lower_expect(left, Type.INT)
			self.load(left_val)
			self.b.emit("SUB", right_label)

	def _branch_nonnegative(self, left: A.Expr, right: A.Expr, if_true: Block, if_false: Block) -> None:
		self._compare(left, right)
		self.b.emit("BRP", if_true.label)
		self.b.emit("BRA", if_false.label)


__all__ = ["ExprLowerer", "LoweringError", "Value"]
