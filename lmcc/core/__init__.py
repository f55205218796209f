# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shared core types used by every stage: source positions, value types and
diagnostics.
"""

from .diagnostics import Diagnostic
from .span import Position, length
from .types import Type

__all__ = ["Diagnostic", "Position", "Type", "length"]
