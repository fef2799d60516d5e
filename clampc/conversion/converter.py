# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Explicit type conversion.

Conversions never happen implicitly: every `T(x)` in the source comes through
`convert`, which resolves `T` in the conversion registry, range-checks
literals, runs the registered procedure and wraps the result in a `Clamp`
bounded by `T`'s range. Downstream arithmetic can therefore assume every
value is within its type's bounds.
"""

from __future__ import annotations

from typing import Optional, Union

from clampc.core.errors import LiteralOutOfRange
from clampc.core.scalar_types import ScalarType, bounds, literal_in_range
from clampc.core.span import Span
from clampc.core.typed_value import TypedValue
from clampc.ir import nodes as ir
from .registry import ConversionRegistry, default_registry


def materialize(value: TypedValue, out: ir.FunctionIR) -> ir.ValueId:
	"""Return the IR value holding `value`, emitting a `Const` for bare literals."""
	if value.operand is not None:
		return value.operand
	dest = out.new_value()
	out.emit(ir.Const(dest=dest, ty=value.ty, value=value.value))
	return dest


def emit_clamp(src: ir.ValueId, ty: ScalarType, out: ir.FunctionIR) -> ir.ValueId:
	"""Emit a range clamp for `ty`; bounds always come from the range table."""
	lower, upper = bounds(ty)
	dest = out.new_value()
	out.emit(ir.Clamp(dest=dest, src=src, lower=lower, upper=upper, ty=ty))
	return dest


class TypeConverter:
	def __init__(self, registry: Optional[ConversionRegistry] = None) -> None:
		self.registry = registry if registry is not None else default_registry()

	def convert(
		self,
		value: TypedValue,
		target: Union[ScalarType, str],
		span: Optional[Span],
		out: ir.FunctionIR,
	) -> TypedValue:
		span = span or Span()
		entry = self.registry.resolve(target, span)
		target_ty = entry.target

		# An out-of-range literal is an authoring bug, reported before any
		# conversion runs.
		if value.is_literal and not literal_in_range(value.ty, value.value):
			raise LiteralOutOfRange(value.value, value.ty.name, span=span)
		if value.is_literal and value.ty.is_numeric and target_ty.is_numeric:
			lower, upper = bounds(target_ty)
			if not lower <= value.value <= upper:
				raise LiteralOutOfRange(value.value, target_ty.name, span=span)

		converted = entry.procedure(value, target_ty, span)
		if value.is_literal and not literal_in_range(target_ty, converted.literal):
			raise LiteralOutOfRange(value.value, target_ty.name, span=span)

		src = materialize(value, out)
		if value.ty != target_ty:
			conv_dest = out.new_value()
			out.emit(ir.Convert(dest=conv_dest, src=src, from_ty=value.ty, to_ty=target_ty, mode=converted.mode))
			src = conv_dest
		clamped = emit_clamp(src, target_ty, out)

		if value.is_literal:
			return TypedValue(ty=target_ty, value=converted.literal, is_literal=True, operand=clamped)
		return TypedValue.runtime(target_ty, clamped)


def convert(
	value: TypedValue,
	target: Union[ScalarType, str],
	span: Optional[Span],
	out: ir.FunctionIR,
	*,
	registry: Optional[ConversionRegistry] = None,
) -> TypedValue:
	"""Module-level shorthand for `TypeConverter(registry).convert(...)`."""
	return TypeConverter(registry).convert(value, target, span, out)


__all__ = ["TypeConverter", "convert", "materialize", "emit_clamp"]
