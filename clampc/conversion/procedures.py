# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Conversion procedures, one per target ScalarKind.

A procedure receives the (already range-checked) source value and the target
type and returns a `Converted` describing how the code generator converts at
run time plus, for literals, the converted compile-time payload. Combinations
that have no meaning are rejected with `InvalidConversion`.

`PROCEDURES_BY_KIND` is checked against `ScalarKind` at import so a new kind
without a procedure is a configuration fault, not a late `UnsupportedConversion`.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, localcontext
from typing import Callable, Dict, Optional

from clampc.core.errors import ConfigurationFault, InvalidConversion
from clampc.core.scalar_types import DECIMAL_CONTEXT, ScalarKind, ScalarType
from clampc.core.span import Span
from clampc.core.typed_value import TypedValue
from clampc.ir.nodes import ConvertMode


@dataclass(frozen=True)
class Converted:
	mode: ConvertMode
	literal: object = None  # converted payload when the source is a literal


ConversionProcedure = Callable[[TypedValue, ScalarType, Span], Converted]


def _invalid(src: ScalarType, dst: ScalarType, why: str, span: Span) -> InvalidConversion:
	return InvalidConversion(f"{src} -> {dst}: {why}", span=span, construct=f"{dst}({src})")


def _resize_mode(src: ScalarType, dst: ScalarType) -> ConvertMode:
	if src == dst:
		return ConvertMode.IDENTITY
	return ConvertMode.EXTEND if dst.bits >= src.bits else ConvertMode.TRUNCATE


def to_integer(value: TypedValue, target: ScalarType, span: Span) -> Converted:
	"""Convert into a signed or unsigned integer type."""
	src = value.ty
	if src.kind in (ScalarKind.UINT, ScalarKind.INT):
		return Converted(_resize_mode(src, target), value.value if value.is_literal else None)
	if src.kind is ScalarKind.DECIMAL:
		if not value.is_literal:
			return Converted(ConvertMode.FROM_FIXED)
		payload = Decimal(value.value)
		if payload != payload.to_integral_value(rounding=ROUND_DOWN):
			raise _invalid(src, target, f"literal {payload} has a fractional part", span)
		return Converted(ConvertMode.FROM_FIXED, int(payload))
	if src.kind is ScalarKind.BYTES:
		if src.bits != target.bits:
			raise _invalid(src, target, "byte length must match the integer width", span)
		literal: Optional[int] = None
		if value.is_literal:
			literal = int.from_bytes(bytes(value.value), "big", signed=target.signed)
		return Converted(ConvertMode.BYTES_TO_INT, literal)
	raise _invalid(src, target, "no conversion path", span)


def to_decimal(value: TypedValue, target: ScalarType, span: Span) -> Converted:
	"""Convert into the fixed-point decimal type."""
	src = value.ty
	if src.kind is ScalarKind.DECIMAL:
		return Converted(ConvertMode.IDENTITY, value.value if value.is_literal else None)
	if src.kind in (ScalarKind.UINT, ScalarKind.INT):
		literal = None
		if value.is_literal:
			with localcontext(DECIMAL_CONTEXT):
				literal = Decimal(value.value)
		return Converted(ConvertMode.TO_FIXED, literal)
	raise _invalid(src, target, "byte sequences have no numeric value", span)


def to_bytes(value: TypedValue, target: ScalarType, span: Span) -> Converted:
	"""
	Convert into a fixed-length byte sequence.

	Only same-length byte sequences and unsigned integers of exactly the same
	width convert; padding or truncating is never chosen implicitly.
	"""
	src = value.ty
	if src.kind is ScalarKind.BYTES:
		if src.byte_length != target.byte_length:
			raise _invalid(src, target, f"length {src.byte_length} differs from {target.byte_length}", span)
		return Converted(ConvertMode.IDENTITY, value.value if value.is_literal else None)
	if src.kind is ScalarKind.UINT:
		if src.bits != target.bits:
			raise _invalid(src, target, "integer width must match the byte length", span)
		literal = None
		if value.is_literal:
			literal = int(value.value).to_bytes(target.byte_length, "big")
		return Converted(ConvertMode.INT_TO_BYTES, literal)
	if src.kind is ScalarKind.INT:
		raise _invalid(src, target, "signed integers must be converted to an unsigned type first", span)
	raise _invalid(src, target, "fixed-point values cannot be reinterpreted as bytes", span)


PROCEDURES_BY_KIND: Dict[ScalarKind, ConversionProcedure] = {
	ScalarKind.UINT: to_integer,
	ScalarKind.INT: to_integer,
	ScalarKind.DECIMAL: to_decimal,
	ScalarKind.BYTES: to_bytes,
}

_missing_kinds = [k.name for k in ScalarKind if k not in PROCEDURES_BY_KIND]
if _missing_kinds:
	raise ConfigurationFault(f"no conversion procedure for scalar kinds: {', '.join(_missing_kinds)}")


def procedure_for(target: ScalarType) -> ConversionProcedure:
	return PROCEDURES_BY_KIND[target.kind]


__all__ = [
	"Converted",
	"ConversionProcedure",
	"to_integer",
	"to_decimal",
	"to_bytes",
	"PROCEDURES_BY_KIND",
	"procedure_for",
]
