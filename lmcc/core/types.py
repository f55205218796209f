# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Value types of the source language.

UNDEFINED is a sentinel for "not annotated / not yet known"; a well-typed
program never carries it into code emission.
"""

from __future__ import annotations

from enum import Enum


class Type(Enum):
	INT = "int"
	BOOL = "bool"
	UNDEFINED = "undefined"

	def __str__(self) -> str:
		return self.value

	@classmethod
	def from_name(cls, name: str) -> "Type | None":
		"""Resolve a source-level type name (`int`/`bool`); None if unknown."""
		if name == "int":
			return cls.INT
		if name == "bool":
			return cls.BOOL
		return None


__all__ = ["Type"]
