# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source positions carried on every AST node.

A Position is a (line, column, index) triple: 1-based line/column for humans
and the 0-based character index into the source for span arithmetic. A node's
extent is its start Position plus a length in characters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Position:
	"""A point in the source text."""

	line: int = 1
	column: int = 1
	index: int = 0

	def __str__(self) -> str:
		return f"({self.line}, {self.column})"

	@classmethod
	def from_loc(cls, loc: Any) -> "Position":
		"""
		Build a Position from a Lark token or tree meta.

		Both expose `line`/`column`/`start_pos`; missing fields fall back to the
		start of the file.
		"""
		if isinstance(loc, cls):
			return loc
		return cls(
			line=getattr(loc, "line", None) or 1,
			column=getattr(loc, "column", None) or 1,
			index=getattr(loc, "start_pos", None) or 0,
		)


def length(start: Position, end: Position) -> int:
	"""Number of characters between two positions."""
	return end.index - start.index


__all__ = ["Position", "length"]
