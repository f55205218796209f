# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source-language front end: Lark grammar, AST and debug printer.

Entry points: `parse_source(text)` / `parse_file(path)` return the top-level
statements plus parser Diagnostics.
"""

from . import ast
from .parser import parse_file, parse_source
from .printer import format_expr, format_stmt, pretty_print

__all__ = ["ast", "parse_source", "parse_file", "format_expr", "format_stmt", "pretty_print"]
