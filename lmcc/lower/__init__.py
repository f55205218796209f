# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
AST → LMC lowering: scope, expression lowering (value and condition modes)
and statement lowering.

Entry point: `lower_program(statements)` returns the AsmBuilder plus lowering
Diagnostics.
"""

from .expr import ExprLowerer, LoweringError, Value
from .scope import Scope, Variable
from .stmt import StmtLowerer, lower_program

__all__ = ["ExprLowerer", "LoweringError", "Value", "Scope", "Variable", "StmtLowerer", "lower_program"]
