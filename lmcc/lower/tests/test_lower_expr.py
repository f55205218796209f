# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Expression lowering in isolation: value placement, spill temps and the
branches produced in condition mode.
"""

from __future__ import annotations

import pytest

from lmcc.core.types import Type
from lmcc.lmc import AsmBuilder, Instruction
from lmcc.lower import ExprLowerer, LoweringError, Scope
from lmcc.parser import ast as A


def _lowerer() -> ExprLowerer:
	builder = AsmBuilder()
	builder.set_block(builder.new_block("start"))
	return ExprLowerer(builder, Scope())


def _ops(lowerer: ExprLowerer) -> list[tuple[str, str]]:
	return [(i.opcode, i.operand) for i in lowerer.b.block.instructions]


def test_literals_stay_in_their_cells():
	lw = _lowerer()
	value = lw.lower_value(A.IntLiteral(3))
	assert (value.type, value.acc, value.label) == (Type.INT, False, "c3")
	value = lw.lower_value(A.BoolLiteral(True))
	assert (value.type, value.acc, value.label) == (Type.BOOL, False, "c1")
	assert lw.b.block.instructions == []


def test_input_lands_in_accumulator():
	lw = _lowerer()
	value = lw.lower_value(A.Input())
	assert value.acc and value.type is Type.INT
	assert _ops(lw) == [("INP", "")]


def test_identifier_uses_scope_label():
	lw = _lowerer()
	lw.scope.declare("x", Type.INT)
	lw.scope.push_scope()
	lw.scope.declare("x", Type.BOOL)
	value = lw.lower_value(A.Ident("x"))
	assert (value.type, value.label) == (Type.BOOL, "x_")


def test_right_operand_is_lowered_first_and_spilled():
	lw = _lowerer()
	expr = A.Binary("+", A.Input(), A.Input())
	value = lw.lower_value(expr)
	assert value.acc
	assert _ops(lw) == [
		("INP", ""),
		("STA", "temp0"),
		("INP", ""),
		("ADD", "temp0"),
	]
	assert lw.b.current_temp == 0
	assert lw.b.max_temp == 1


def test_cell_operand_needs_no_temp():
	lw = _lowerer()
	lw.lower_value(A.Binary("-", A.Input(), A.IntLiteral(1)))
	assert _ops(lw) == [("INP", ""), ("SUB", "c1")]
	assert lw.b.max_temp == 0


def test_negation_subtracts_from_zero():
	lw = _lowerer()
	lw.lower_value(A.Unary("-", A.IntLiteral(4)))
	assert _ops(lw) == [("LDA", "c0"), ("SUB", "c4")]


def test_comparison_value_is_materialised_through_blocks():
	lw = _lowerer()
	value = lw.lower_value(A.Binary("<", A.IntLiteral(1), A.IntLiteral(2)))
	assert value.acc and value.type is Type.BOOL
	by_label = {blk.label: blk.instructions for blk in lw.b.blocks}
	assert by_label["b0"] == [Instruction("LDA", "c1"), Instruction("BRA", "b2")]
	assert by_label["b1"] == [Instruction("LDA", "c0"), Instruction("BRA", "b2")]
	# 1 < 2 branches to the false block when 1 - 2 >= 0.
	assert by_label["start"] == [
		Instruction("LDA", "c1"),
		Instruction("SUB", "c2"),
		Instruction("BRP", "b1"),
		Instruction("BRA", "b0"),
	]
	assert lw.b.block.label == "b2"


def test_bool_identifier_condition():
	lw = _lowerer()
	lw.scope.declare("flag", Type.BOOL)
	yes, no = lw.b.new_unique_block(), lw.b.new_unique_block()
	lw.lower_condition(A.Ident("flag"), yes, no)
	assert _ops(lw) == [("LDA", "flag"), ("BRZ", "b1"), ("BRA", "b0")]


def test_not_swaps_targets():
	lw = _lowerer()
	yes, no = lw.b.new_unique_block(), lw.b.new_unique_block()
	lw.lower_condition(A.Unary("not", A.BoolLiteral(True)), yes, no)
	assert _ops(lw) == [("BRA", "b1")]


@pytest.mark.parametrize(
	"op, first, target",
	[
		(">=", "a", "b0"),
		("<", "a", "b1"),
		("<=", "b", "b0"),
		(">", "b", "b1"),
		("==", "a", "b0"),
		("!=", "a", "b1"),
	],
)
def test_relations_use_brp(op, first, target):
	lw = _lowerer()
	lw.scope.declare("a", Type.INT)
	lw.scope.declare("b", Type.INT)
	yes, no = lw.b.new_unique_block(), lw.b.new_unique_block()
	lw.lower_condition(A.Binary(op, A.Ident("a"), A.Ident("b")), yes, no)
	other = "b" if first == "a" else "a"
	fallthrough = "b1" if target == "b0" else "b0"
	assert _ops(lw) == [("LDA", first), ("SUB", other), ("BRP", target), ("BRA", fallthrough)]


def test_and_short_circuits_through_a_fresh_block():
	lw = _lowerer()
	lw.scope.declare("p", Type.BOOL)
	lw.scope.declare("q", Type.BOOL)
	yes, no = lw.b.new_unique_block(), lw.b.new_unique_block()
	lw.lower_condition(A.Binary("and", A.Ident("p"), A.Ident("q")), yes, no)
	by_label = {blk.label: blk.instructions for blk in lw.b.blocks}
	assert by_label["start"] == [Instruction("LDA", "p"), Instruction("BRZ", "b1"), Instruction("BRA", "b2")]
	assert by_label["b2"] == [Instruction("LDA", "q"), Instruction("BRZ", "b1"), Instruction("BRA", "b0")]


def test_or_short_circuits_through_a_fresh_block():
	lw = _lowerer()
	lw.scope.declare("p", Type.BOOL)
	lw.scope.declare("q", Type.BOOL)
	yes, no = lw.b.new_unique_block(), lw.b.new_unique_block()
	lw.lower_condition(A.Binary("or", A.Ident("p"), A.Ident("q")), yes, no)
	by_label = {blk.label: blk.instructions for blk in lw.b.blocks}
	assert by_label["start"] == [Instruction("LDA", "p"), Instruction("BRZ", "b2"), Instruction("BRA", "b0")]
	assert by_label["b2"] == [Instruction("LDA", "q"), Instruction("BRZ", "b1"), Instruction("BRA", "b0")]


def test_errors_release_spill_temps():
	lw = _lowerer()
	expr = A.Binary("+", A.Ident("missing"), A.Input())
	with pytest.raises(LoweringError) as excinfo:
		lw.lower_value(expr)
	assert excinfo.value.message == "undefined variable 'missing' at (1, 1)"
	assert lw.b.current_temp == 0


@pytest.mark.parametrize(
	"expr, message",
	[
		(A.IntLiteral(1), "int used as a condition at (1, 1)"),
		(A.Input(), "cannot use input as condition at (1, 1)"),
		(A.Unary("-", A.IntLiteral(1)), "cannot use '-' operator in condition at (1, 1)"),
		(A.Binary("+", A.IntLiteral(1), A.IntLiteral(2)), "expected a bool instead got int at (1, 1)"),
	],
)
def test_non_boolean_conditions_are_rejected(expr, message):
	lw = _lowerer()
	yes, no = lw.b.new_unique_block(), lw.b.new_unique_block()
	with pytest.raises(LoweringError) as excinfo:
		lw.lower_condition(expr, yes, no)
	assert excinfo.value.message == message


def test_int_variable_as_condition():
	lw = _lowerer()
	lw.scope.declare("n", Type.INT)
	yes, no = lw.b.new_unique_block(), lw.b.new_unique_block()
	with pytest.raises(LoweringError) as excinfo:
		lw.lower_condition(A.Ident("n"), yes, no)
	assert excinfo.value.message == (
		"variable 'n' at (1, 1) has type int but is being used in condition so should be bool"
	)


def test_lower_expect_reports_type_mismatch():
	lw = _lowerer()
	with pytest.raises(LoweringError) as excinfo:
		lw.lower_expect(A.BoolLiteral(False), Type.INT)
	assert excinfo.value.message == "expected a int instead got bool at (1, 1)"
