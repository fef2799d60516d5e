# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .scalar_types import ScalarType


@dataclass(frozen=True)
class TypedValue:
	"""
	A value flowing through the safety passes.

	For literals `value` is the compile-time payload (int, Decimal or bytes).
	For runtime values it is the IR ValueId. `operand` is the IR value holding
	the value once it has been materialized (always set for runtime values).
	"""

	ty: ScalarType
	value: object
	is_literal: bool = False
	operand: Optional[str] = None

	def __post_init__(self) -> None:
		if not isinstance(self.ty, ScalarType):
			raise TypeError(f"TypedValue requires a ScalarType, got {self.ty!r}")
		if not self.is_literal and self.operand is None:
			object.__setattr__(self, "operand", self.value)

	@classmethod
	def literal(cls, ty: ScalarType, value: object) -> "TypedValue":
		return cls(ty=ty, value=value, is_literal=True)

	@classmethod
	def runtime(cls, ty: ScalarType, operand: str) -> "TypedValue":
		return cls(ty=ty, value=operand, is_literal=False, operand=operand)


__all__ = ["TypedValue"]
