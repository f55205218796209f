#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
lmcc driver: source file → LMC assembly file.

Pipeline: parse (lmcc/parser) → lower (lmcc/lower) → serialize (lmcc/lmc).
Parse diagnostics stop the pipeline before lowering; lowering diagnostics are
collected across sibling statements and suppress the output file.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from lmcc.core.diagnostics import Diagnostic
from lmcc.lower import lower_program
from lmcc.parser import ast as A
from lmcc.parser import parse_source, pretty_print

DEFAULT_OUTPUT = Path("output.txt")


@dataclass
class CompileResult:
	"""Assembly text (None when compilation failed) plus everything reported."""
	output: Optional[str]
	statements: List[A.Stmt] = field(default_factory=list)
	diagnostics: List[Diagnostic] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return self.output is not None


def compile_source(source: str) -> CompileResult:
	"""Compile program text to LMC assembly."""
	statements, parse_diags = parse_source(source)
	if parse_diags:
		return CompileResult(output=None, diagnostics=parse_diags)
	builder, lower_diags = lower_program(statements)
	if lower_diags:
		return CompileResult(output=None, statements=statements, diagnostics=lower_diags)
	return CompileResult(output=builder.to_text(), statements=statements)


def _report(diagnostics: List[Diagnostic], source_path: Path, as_json: bool) -> None:
	if as_json:
		payload = {
			"exit_code": 1,
			"diagnostics": [d.to_json(str(source_path)) for d in diagnostics],
		}
		print(json.dumps(payload))
		return
	for d in diagnostics:
		print(str(d), file=sys.stderr)


def compile_file(source_path: Path, output_path: Path, debug: bool = False, as_json: bool = False) -> int:
	try:
		source = source_path.read_text(encoding="utf-8")
	except OSError as err:
		print(f"{source_path}: error: cannot read source: {err.strerror or err}", file=sys.stderr)
		return 1

	result = compile_source(source)
	# Statements are only kept once parsing succeeded.
	if debug and result.statements:
		print(pretty_print(result.statements), end="")
	if not result.ok:
		_report(result.diagnostics, source_path, as_json)
		return 1

	output_path.write_text(result.output, encoding="utf-8")
	return 0


def main(argv: list[str] | None = None) -> int:
	"""
	CLI: compile one source file to LMC assembly.

	With --json, prints structured diagnostics (phase/message/severity/file/line/column)
	and an exit_code; otherwise prints human-readable messages to stderr.
	"""
	parser = argparse.ArgumentParser(prog="lmcc", description="Compile a source file to Little Man Computer assembly")
	parser.add_argument("source", type=Path, nargs="?", help="Path to the source file")
	parser.add_argument("--debug", action="store_true", help="Print the parsed AST to stdout")
	parser.add_argument(
		"-o",
		"--output",
		type=Path,
		default=DEFAULT_OUTPUT,
		help=f"Where to write the assembly (default: {DEFAULT_OUTPUT})",
	)
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/message/severity/file/line/column)",
	)
	args = parser.parse_args(argv)

	if args.source is None:
		print("no source file")
		return 0
	return compile_file(args.source, args.output, debug=args.debug, as_json=args.json)


__all__ = ["CompileResult", "compile_source", "compile_file", "main"]


if __name__ == "__main__":
	raise SystemExit(main())
