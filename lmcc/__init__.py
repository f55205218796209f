# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
lmcc: a single-pass compiler from a small imperative language to Little Man
Computer assembly.

Stages:
  parser: Lark grammar → AST (lmcc/parser)
  lower:  AST → LMC basic blocks (lmcc/lower), emitted through lmcc/lmc
  driver: CLI and compile pipeline (lmcc/driver)
"""

__all__ = ["core", "parser", "lmc", "lower", "driver"]
