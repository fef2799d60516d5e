# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Safety IR.

Pipeline placement:
  declaration tree (clampc/parser/ast.py) → safety passes → IR (this file) → external code generator

The IR is a flat, ordered sequence of nodes per function. Values are named by
ValueIds (`%0`, `%1`, ...). There are two families of nodes:

* plain operations (`Const`, `LoadParam`, `Convert`, `BinaryOp`, `Return`);
* runtime checks (`Clamp`, `ZeroCheck`). A failing check aborts execution of
  the compiled program with the node's `AbortCode`; nothing is committed.

Nodes are frozen. A `FunctionIR` buffer owns the sequence while a function is
being lowered and publishes it as an immutable `CompiledFunction`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from clampc.core.scalar_types import Bound, ScalarType

ValueId = str


class ArithOp(str, Enum):
	ADD = "add"
	SUB = "sub"
	MUL = "mul"
	DIV = "div"


class AbortCode(int, Enum):
	"""Runtime abort reasons carried by runtime-check nodes."""

	RANGE_VIOLATION = 1
	DIVISION_BY_ZERO = 2


class ConvertMode(str, Enum):
	IDENTITY = "identity"
	EXTEND = "extend"
	TRUNCATE = "truncate"
	TO_FIXED = "to_fixed"
	FROM_FIXED = "from_fixed"  # rounds toward zero
	BYTES_TO_INT = "bytes_to_int"
	INT_TO_BYTES = "int_to_bytes"


class IRNode:
	"""Base class for IR nodes."""

	pass


class RuntimeCheck(IRNode):
	"""Base class for nodes that abort execution when their check fails."""

	pass


@dataclass(frozen=True)
class Const(IRNode):
	"""dest = constant of `ty`"""
	dest: ValueId
	ty: ScalarType
	value: object


@dataclass(frozen=True)
class LoadParam(IRNode):
	"""dest = function parameter `name`"""
	dest: ValueId
	name: str
	ty: ScalarType


@dataclass(frozen=True)
class Convert(IRNode):
	"""dest = src reinterpreted/resized from `from_ty` to `to_ty`"""
	dest: ValueId
	src: ValueId
	from_ty: ScalarType
	to_ty: ScalarType
	mode: ConvertMode


@dataclass(frozen=True)
class BinaryOp(IRNode):
	"""
	dest = left <op> right, computed without wrapping.

	The code generator must evaluate the raw operation wide enough to hold the
	exact result; the following `Clamp` decides whether it fits `ty`.
	"""
	dest: ValueId
	op: ArithOp
	left: ValueId
	right: ValueId
	ty: ScalarType


@dataclass(frozen=True)
class Clamp(RuntimeCheck):
	"""dest = src if lower <= src <= upper, otherwise abort."""
	dest: ValueId
	src: ValueId
	lower: Bound
	upper: Bound
	ty: ScalarType
	abort: AbortCode = AbortCode.RANGE_VIOLATION


@dataclass(frozen=True)
class ZeroCheck(RuntimeCheck):
	"""abort if src == 0"""
	src: ValueId
	ty: ScalarType
	abort: AbortCode = AbortCode.DIVISION_BY_ZERO


@dataclass(frozen=True)
class Return(IRNode):
	value: Optional[ValueId] = None


@dataclass(frozen=True)
class CompiledFunction:
	"""IR for one accepted function, read-only for the code generator."""

	name: str
	nodes: Tuple[IRNode, ...]

	def clamps(self) -> Tuple[Clamp, ...]:
		return tuple(n for n in self.nodes if isinstance(n, Clamp))


@dataclass
class FunctionIR:
	"""Per-function output buffer; the only writer of its node list."""

	name: str
	nodes: List[IRNode] = field(default_factory=list)
	_next_value: int = 0

	def new_value(self) -> ValueId:
		vid = f"%{self._next_value}"
		self._next_value += 1
		return vid

	def emit(self, node: IRNode) -> IRNode:
		self.nodes.append(node)
		return node

	def finish(self) -> CompiledFunction:
		return CompiledFunction(name=self.name, nodes=tuple(self.nodes))


__all__ = [
	"ValueId",
	"ArithOp",
	"AbortCode",
	"ConvertMode",
	"IRNode",
	"RuntimeCheck",
	"Const",
	"LoadParam",
	"Convert",
	"BinaryOp",
	"Clamp",
	"ZeroCheck",
	"Return",
	"CompiledFunction",
	"FunctionIR",
]
