# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shared helpers for tests: a reference LMC interpreter and small compile
helpers so end-to-end tests can check what generated programs actually do.
"""

from __future__ import annotations

from typing import Iterable, List

from lmcc.lmc.builder import AsmBuilder
from lmcc.lower import lower_program
from lmcc.parser import parse_source

from .lmc_vm import LmcMachine, MachineError, run_builder


def build(source: str) -> AsmBuilder:
	"""Parse and lower `source`, failing loudly on any diagnostic."""
	statements, parse_diags = parse_source(source)
	assert not parse_diags, [str(d) for d in parse_diags]
	builder, lower_diags = lower_program(statements)
	assert not lower_diags, [str(d) for d in lower_diags]
	return builder


def run_source(source: str, inputs: Iterable[int] = ()) -> List[int]:
	"""Compile `source` and run it on the reference machine."""
	return run_builder(build(source), inputs)


__all__ = ["LmcMachine", "MachineError", "run_builder", "build", "run_source"]
