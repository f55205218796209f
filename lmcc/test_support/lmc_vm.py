# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reference Little Man Computer interpreter for tests.

Runs a builder's block list directly: blocks are laid out in order, each
instruction takes one address, and a label names the address of its block's
first instruction (an empty block therefore aliases the next instruction,
as it does in the serialized text). DAT cells hold unbounded integers and
BRP branches when the accumulator is >= 0.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from lmcc.lmc.asm_nodes import Block, Instruction
from lmcc.lmc.builder import AsmBuilder


class MachineError(RuntimeError):
	pass


class LmcMachine:
	def __init__(self, blocks: Sequence[Block], inputs: Iterable[int] = (), max_steps: int = 100_000) -> None:
		self.code: List[Instruction] = []
		self.labels: Dict[str, int] = {}
		for block in blocks:
			if block.label in self.labels:
				raise MachineError(f"duplicate label {block.label!r}")
			self.labels[block.label] = len(self.code)
			self.code.extend(block.instructions)
		self.memory: Dict[int, int] = {
			addr: int(instr.operand) for addr, instr in enumerate(self.code) if instr.opcode == "DAT"
		}
		self._inputs = iter(inputs)
		self.max_steps = max_steps
		self.acc = 0
		self.pc = 0
		self.steps = 0
		self.outputs: List[int] = []

	def address(self, label: str) -> int:
		try:
			return self.labels[label]
		except KeyError:
			raise MachineError(f"unknown label {label!r}") from None

	def read(self, label: str) -> int:
		"""Current value of the data cell `label`."""
		addr = self.address(label)
		if addr not in self.memory:
			raise MachineError(f"{label!r} is not a data cell")
		return self.memory[addr]

	def run(self) -> List[int]:
		"""Execute from address 0 until HLT; returns everything written by OUT."""
		while True:
			if self.steps >= self.max_steps:
				raise MachineError(f"no HLT after {self.max_steps} steps")
			if self.pc >= len(self.code):
				raise MachineError("ran off the end of the program")
			instr = self.code[self.pc]
			self.pc += 1
			self.steps += 1
			op = instr.opcode
			if op == "HLT":
				return self.outputs
			if op == "LDA":
				self.acc = self.read(instr.operand)
			elif op == "STA":
				self.memory[self._data_address(instr.operand)] = self.acc
			elif op == "ADD":
				self.acc += self.read(instr.operand)
			elif op == "SUB":
				self.acc -= self.read(instr.operand)
			elif op == "INP":
				try:
					self.acc = next(self._inputs)
				except StopIteration:
					raise MachineError("input exhausted") from None
			elif op == "OUT":
				self.outputs.append(self.acc)
			elif op == "BRA":
				self.pc = self.address(instr.operand)
			elif op == "BRZ":
				if self.acc == 0:
					self.pc = self.address(instr.operand)
			elif op == "BRP":
				if self.acc >= 0:
					self.pc = self.address(instr.operand)
			elif op == "DAT":
				raise MachineError(f"executed data cell at address {self.pc - 1}")
			else:
				raise MachineError(f"unknown opcode {op!r}")

	def _data_address(self, label: str) -> int:
		addr = self.address(label)
		if addr not in self.memory:
			raise MachineError(f"{label!r} is not a data cell")
		return addr


def run_builder(builder: AsmBuilder, inputs: Iterable[int] = (), max_steps: int = 100_000) -> List[int]:
	"""Run a lowered program and return its outputs."""
	return LmcMachine(builder.blocks, inputs, max_steps=max_steps).run()


__all__ = ["LmcMachine", "MachineError", "run_builder"]
