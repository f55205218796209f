# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure for the parser and lowering passes.

`message` is the complete human-readable text (it already names the source
position, e.g. "undefined variable 'x' at (1, 5)"); `pos` keeps the same
location in structured form for JSON output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .span import Position


@dataclass
class Diagnostic:
	"""Represents a compiler diagnostic (error/warning/etc.)."""

	message: str
	# Pass that produced the diagnostic: "parser" or "lower".
	phase: str | None = None
	severity: str = "error"
	pos: Optional[Position] = None

	def __str__(self) -> str:
		return self.message

	def to_json(self, file: str | None = None) -> dict:
		"""Render to a structured JSON-friendly dict."""
		return {
			"phase": self.phase,
			"message": self.message,
			"severity": self.severity,
			"file": file,
			"line": self.pos.line if self.pos is not None else None,
			"column": self.pos.column if self.pos is not None else None,
		}


__all__ = ["Diagnostic"]
