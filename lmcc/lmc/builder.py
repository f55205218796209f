# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Incremental builder for an LMC program.

Owns:
- the ordered block list (code blocks and DAT cells interleaved in creation order)
- the current block cursor used by the lowering passes
- the integer constant pool (`c<v>` cells, interned once)
- the spill-temp stack (`temp<i>` cells, strictly LIFO)
"""

from __future__ import annotations

from io import StringIO
from typing import Dict, List, Optional, TextIO

from .asm_nodes import OPCODES, Block, Instruction


class AsmBuilder:
	"""
	Helper to construct an LMC program incrementally.

	Entry point for lowering:
	  - build an AsmBuilder
	  - create the entry block with new_block("start") and select it with set_block
	  - emit into the current block; read out serialize()/to_text() when done
	"""

	def __init__(self) -> None:
		self.blocks: List[Block] = []
		self.block: Optional[Block] = None
		self._constants: Dict[int, str] = {}
		self._block_counter = 0
		# Spill temps: cells temp0..temp{max_temp-1} exist; temp0..temp{current_temp-1} are live.
		self.max_temp = 0
		self.current_temp = 0

	def new_block(self, label: str) -> Block:
		"""Append an empty block with a caller-chosen label."""
		block = Block(label=label)
		self.blocks.append(block)
		return block

	def new_unique_block(self) -> Block:
		"""Append an empty block labelled b<k> from a monotonically increasing counter."""
		block = self.new_block(f"b{self._block_counter}")
		self._block_counter += 1
		return block

	def set_block(self, block: Block) -> None:
		"""Switch the current insertion block."""
		self.block = block

	def create_variable(self, label: str, value: int) -> Block:
		"""Append a data cell: a block whose only instruction is DAT value."""
		block = self.new_block(label)
		block.instructions.append(Instruction("DAT", str(value)))
		return block

	def get_constant(self, value: int) -> str:
		"""Label of the c<value> cell, creating it on first use."""
		label = self._constants.get(value)
		if label is None:
			label = f"c{value}"
			self.create_variable(label, value)
			self._constants[value] = label
		return label

	def push_temp(self) -> str:
		"""Acquire the next spill slot, materialising its cell on first use."""
		label = f"temp{self.current_temp}"
		if self.current_temp == self.max_temp:
			self.max_temp += 1
			self.create_variable(label, 0)
		self.current_temp += 1
		return label

	def pop_temp(self) -> None:
		"""Release the most recently acquired spill slot."""
		if self.current_temp == 0:
			raise RuntimeError("pop_temp without a matching push_temp")
		self.current_temp -= 1

	def emit(self, opcode: str, operand: str = "", block: Block | None = None) -> Instruction:
		"""
		Append an instruction to `block` (the current block when omitted).
		"""
		if opcode not in OPCODES:
			raise ValueError(f"unknown LMC opcode {opcode!r}")
		target = block if block is not None else self.block
		if target is None:
			raise RuntimeError("no current block to emit into")
		instr = Instruction(opcode, operand)
		target.instructions.append(instr)
		return instr

	def serialize(self, out: TextIO) -> None:
		"""Write every block in creation order."""
		for block in self.blocks:
			out.write(block.render())

	def to_text(self) -> str:
		buf = StringIO()
		self.serialize(buf)
		return buf.getvalue()

	def labels(self) -> List[str]:
		return [block.label for block in self.blocks]


__all__ = ["AsmBuilder"]
