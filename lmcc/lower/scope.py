# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lexical symbol table with shadowing.

Each live binding keeps two back-links: `prev_name` to the binding of the same
name it shadows, and `prev_decl` to the binding declared just before it (any
name). `pop_scope` walks the `prev_decl` chain, restoring `prev_name` links,
until it reaches a binding at or above the new depth.

A redeclared name gets the shadowed binding's label plus `_`, so `x` shadowed
twice is emitted as `x__`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from lmcc.core.types import Type


@dataclass
class Variable:
	name: str
	label: str
	type: Type
	prev_name: Optional["Variable"]
	prev_decl: Optional["Variable"]
	depth: int


class Scope:
	def __init__(self) -> None:
		self._bindings: Dict[str, Variable] = {}
		self._last_decl: Optional[Variable] = None
		self.depth = 0

	def declare(self, name: str, ty: Type) -> str:
		"""Bind `name` at the current depth and return its emitted label."""
		prev = self._bindings.get(name)
		label = prev.label + "_" if prev is not None else name
		variable = Variable(
			name=name,
			label=label,
			type=ty,
			prev_name=prev,
			prev_decl=self._last_decl,
			depth=self.depth,
		)
		self._bindings[name] = variable
		self._last_decl = variable
		return label

	def get(self, name: str) -> Optional[Variable]:
		"""Innermost live binding of `name`, or None."""
		return self._bindings.get(name)

	def push_scope(self) -> None:
		self.depth += 1

	def pop_scope(self) -> None:
		if self.depth == 0:
			raise RuntimeError("pop_scope at top level")
		self.depth -= 1
		while self._last_decl is not None and self._last_decl.depth > self.depth:
			variable = self._last_decl
			if variable.prev_name is not None:
				self._bindings[variable.name] = variable.prev_name
			else:
				del self._bindings[variable.name]
			self._last_decl = variable.prev_decl


__all__ = ["Scope", "Variable"]
