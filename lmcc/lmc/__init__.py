# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
LMC target: assembly nodes and the incremental AsmBuilder.
"""

from .asm_nodes import BRANCH_OPCODES, OPCODES, TERMINATOR_OPCODES, Block, Instruction
from .builder import AsmBuilder

__all__ = ["AsmBuilder", "Block", "Instruction", "OPCODES", "BRANCH_OPCODES", "TERMINATOR_OPCODES"]
