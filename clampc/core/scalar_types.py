# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Numeric range table.

The scalar type universe is closed: every ScalarType is built once at import
from `_TYPE_SPECS` and the legal bounds of each type live in a read-only
mapping. Clamp bounds are always looked up here, never written per call site.

Bounds are arbitrary-precision ints, except for the fixed-point type whose
bounds are `Decimal`s. A `bytesN` value is bounded by its unsigned big-endian
integer interpretation.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Context, Decimal, localcontext
from enum import Enum, auto
from types import MappingProxyType
from typing import Mapping, Tuple, Union

from .errors import UnknownType

Bound = Union[int, Decimal]

# Wide enough for the 128-bit fixed-point bounds with all fractional digits.
DECIMAL_CONTEXT = Context(prec=96)


class ScalarKind(Enum):
	UINT = auto()
	INT = auto()
	DECIMAL = auto()
	BYTES = auto()


@dataclass(frozen=True)
class ScalarType:
	"""A scalar type from the closed table (compare by identity or equality)."""

	name: str
	kind: ScalarKind
	bits: int
	scale: int = 0  # fractional decimal digits (DECIMAL only)

	@property
	def signed(self) -> bool:
		return self.kind in (ScalarKind.INT, ScalarKind.DECIMAL)

	@property
	def is_numeric(self) -> bool:
		return self.kind is not ScalarKind.BYTES

	@property
	def byte_length(self) -> int:
		return self.bits // 8

	def __str__(self) -> str:
		return self.name


_TYPE_SPECS: Tuple[Tuple[str, ScalarKind, int, int], ...] = (
	*((f"uint{w}", ScalarKind.UINT, w, 0) for w in (8, 16, 32, 64, 128, 256)),
	*((f"int{w}", ScalarKind.INT, w, 0) for w in (8, 16, 32, 64, 128, 256)),
	("fixed128x18", ScalarKind.DECIMAL, 128, 18),
	*((f"bytes{n}", ScalarKind.BYTES, n * 8, 0) for n in (1, 2, 4, 8, 16, 32)),
)


def _compute_bounds(ty: ScalarType) -> Tuple[Bound, Bound]:
	if ty.kind is ScalarKind.UINT or ty.kind is ScalarKind.BYTES:
		return 0, (1 << ty.bits) - 1
	if ty.kind is ScalarKind.INT:
		return -(1 << (ty.bits - 1)), (1 << (ty.bits - 1)) - 1
	if ty.kind is ScalarKind.DECIMAL:
		with localcontext(DECIMAL_CONTEXT):
			unit = Decimal(10) ** ty.scale
			lo = Decimal(-(1 << (ty.bits - 1))) / unit
			hi = Decimal((1 << (ty.bits - 1)) - 1) / unit
		return lo, hi
	raise AssertionError(f"unhandled scalar kind {ty.kind}")


_TYPES: Mapping[str, ScalarType] = MappingProxyType(
	{name: ScalarType(name=name, kind=kind, bits=bits, scale=scale) for name, kind, bits, scale in _TYPE_SPECS}
)
_BOUNDS: Mapping[str, Tuple[Bound, Bound]] = MappingProxyType(
	{name: _compute_bounds(ty) for name, ty in _TYPES.items()}
)


def _name_of(ty: Union[ScalarType, str]) -> str:
	return ty.name if isinstance(ty, ScalarType) else ty


def scalar_type(name: str) -> ScalarType:
	"""Return the ScalarType registered under `name`."""
	try:
		return _TYPES[name]
	except KeyError:
		raise UnknownType(name) from None


def is_scalar_type_name(name: str) -> bool:
	return name in _TYPES


def all_scalar_types() -> Tuple[ScalarType, ...]:
	"""Every ScalarType, in table order."""
	return tuple(_TYPES.values())


def bounds(ty: Union[ScalarType, str]) -> Tuple[Bound, Bound]:
	"""Return the inclusive (min, max) bounds for a scalar type."""
	name = _name_of(ty)
	try:
		return _BOUNDS[name]
	except KeyError:
		raise UnknownType(name) from None


def literal_in_range(ty: ScalarType, value: object) -> bool:
	"""
	Return True when `value` is a legal compile-time literal of `ty`.

	Integer kinds take `int` (not `bool`); the fixed-point kind takes `Decimal`
	or `int` with at most `scale` fractional digits; `bytesN` takes exactly N
	bytes.
	"""
	lo, hi = bounds(ty)
	if ty.kind is ScalarKind.BYTES:
		return isinstance(value, (bytes, bytearray)) and len(value) == ty.byte_length
	if isinstance(value, bool):
		return False
	if ty.kind is ScalarKind.DECIMAL:
		if isinstance(value, int):
			value = Decimal(value)
		if not isinstance(value, Decimal) or not value.is_finite():
			return False
		if not lo <= value <= hi:
			return False
		return value == value.quantize(Decimal(1).scaleb(-ty.scale), context=DECIMAL_CONTEXT)
	return isinstance(value, int) and lo <= value <= hi


__all__ = [
	"Bound",
	"DECIMAL_CONTEXT",
	"ScalarKind",
	"ScalarType",
	"scalar_type",
	"is_scalar_type_name",
	"all_scalar_types",
	"bounds",
	"literal_in_range",
]
