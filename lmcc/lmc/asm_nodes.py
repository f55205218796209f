# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Little Man Computer assembly nodes: instructions and labelled blocks.

A Block is a label plus an append-only list of instructions. Blocks are laid
out in creation order; branch targets name block labels, and data cells are
blocks holding a single DAT.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


OPCODES = frozenset({"LDA", "STA", "ADD", "SUB", "INP", "OUT", "BRA", "BRZ", "BRP", "DAT", "HLT"})
BRANCH_OPCODES = frozenset({"BRA", "BRZ", "BRP"})
# Opcodes that may end a basic block.
TERMINATOR_OPCODES = BRANCH_OPCODES | {"HLT"}


@dataclass(frozen=True)
class Instruction:
	"""opcode operand; operand is a label, a DAT value, or empty."""
	opcode: str
	operand: str = ""

	def render(self) -> str:
		# The trailing space after the opcode is kept even for an empty operand.
		return f"\t{self.opcode} {self.operand}\n"


@dataclass
class Block:
	label: str
	instructions: List[Instruction] = field(default_factory=list)

	def render(self) -> str:
		# No newline after the label: an empty block runs straight into the
		# next block's label, which is the format the assembler expects.
		return self.label + "".join(instr.render() for instr in self.instructions)

	@property
	def is_data(self) -> bool:
		return len(self.instructions) == 1 and self.instructions[0].opcode == "DAT"

	@property
	def terminator(self) -> Instruction | None:
		"""Last instruction if it transfers control, else None."""
		if self.instructions and self.instructions[-1].opcode in TERMINATOR_OPCODES:
			return self.instructions[-1]
		return None


__all__ = ["OPCODES", "BRANCH_OPCODES", "TERMINATOR_OPCODES", "Instruction", "Block"]
