# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
End-to-end tests: compile programs and run them on the reference LMC
machine, plus structural properties every generated program must have.
"""

from __future__ import annotations

import pytest

from lmcc.driver.lmcc import compile_source
from lmcc.test_support import build, run_source


PROGRAMS = [
	"out 42",
	"x : int = 5 x = x + 3 out x",
	"if in < 10 out 1 else out 2",
	"while in > 0 out in",
	"y : bool = true and false if y out 1",
	"n : int = in while n > 0 { if n > 5 out 1 else out 0 n = n - 1 }",
	"a : = in b : = in c : bool = a < b or not a == b if c out a - b - in + in",
	"{ x : int = 1 { x : bool = x > 0 if x out 1 } out x }",
]


@pytest.mark.parametrize("src", PROGRAMS)
def test_labels_are_unique(src):
	labels = build(src).labels()
	assert len(labels) == len(set(labels))


@pytest.mark.parametrize("src", PROGRAMS)
def test_code_blocks_end_in_a_transfer(src):
	for block in build(src).blocks:
		if block.is_data:
			continue
		assert block.terminator is not None, block.label


@pytest.mark.parametrize("src", PROGRAMS)
def test_spill_temps_are_balanced(src):
	assert build(src).current_temp == 0


@pytest.mark.parametrize("src", PROGRAMS)
def test_output_is_deterministic(src):
	assert compile_source(src).output == compile_source(src).output


def test_double_not_compiles_like_its_operand():
	plain = compile_source("a : bool = true if a out 1").output
	doubled = compile_source("a : bool = true if not not a out 1").output
	assert plain == doubled


def test_right_operand_is_evaluated_first():
	# ((1 - in) + in): the outer right `in` is read first.
	assert run_source("out 1 - in + in", [10, 3]) == [8]
	assert build("out 1 - in + in").max_temp == 2


def test_negation():
	assert run_source("out -in", [5]) == [-5]
	assert run_source("x : int = 7 out - - x", []) == [7]


def test_loop_with_nested_if():
	src = "n : int = in while n > 0 { if n > 5 out 1 else out 0 n = n - 1 }"
	assert run_source(src, [7]) == [1, 1, 0, 0, 0, 0, 0]
	assert run_source(src, [0]) == []


def test_while_condition_reads_input_each_iteration():
	assert run_source("while in > 0 out in", [3, 7, 0]) == [7]


@pytest.mark.parametrize("op", ["<", "<=", ">", ">="])
@pytest.mark.parametrize("a, b", [(1, 2), (2, 2), (3, 2), (-4, 5)])
def test_ordering_relations(op, a, b):
	src = f"a : int = in b : int = in if a {op} b out 1 else out 0"
	expected = {"<": a < b, "<=": a <= b, ">": a > b, ">=": a >= b}[op]
	assert run_source(src, [a, b]) == [int(expected)]


def test_equality_branches_on_nonnegative_difference():
	src = "a : int = in b : int = in if a == b out 1 else out 0"
	assert run_source(src, [2, 2]) == [1]
	assert run_source(src, [1, 2]) == [0]
	# BRP is used, so any a >= b counts as equal.
	assert run_source(src, [5, 3]) == [1]


def test_inequality_mirrors_equality():
	src = "a : int = in b : int = in if a != b out 1 else out 0"
	assert run_source(src, [1, 2]) == [1]
	assert run_source(src, [2, 2]) == [0]
	assert run_source(src, [5, 3]) == [0]


def test_and_does_not_evaluate_right_side_when_left_is_false():
	# The right side would need an input that is never supplied.
	assert run_source("if false and in > 0 out 1 out 2", []) == [2]


def test_or_does_not_evaluate_right_side_when_left_is_true():
	assert run_source("if true or in > 0 out 1 out 2", []) == [1, 2]


def test_materialised_booleans():
	src = "t : bool = 3 < 5 f : bool = not t if t and not f out 1 else out 0"
	assert run_source(src, []) == [1]


def test_shadowing_restores_outer_binding():
	assert run_source("{ x : int = 1 { x : int = 2 out x } out x }", []) == [2, 1]
	assert run_source("x : int = 1 { x : bool = x > 0 if x out 10 } out x", []) == [10, 1]


def test_assignment_in_inner_scope_updates_outer_variable():
	assert run_source("x : int = 1 { x = x + 1 } out x", []) == [2]


def test_mixed_program():
	src = "a : = in b : = in c : bool = a < b or not a == b if c out a - b - in + in"
	# a=2, b=5: condition true; right-first reads 4 then 1: ((2 - 5) - 1) + 4.
	assert run_source(src, [2, 5, 4, 1]) == [0]


def test_variable_named_like_a_constant_is_rejected():
	result = compile_source("c1 : int = 0 c1 = 5 out 1")
	assert result.output is None
	assert result.diagnostics[0].message == "variable name 'c1' at (1, 1) is reserved for generated labels"
