# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Arithmetic guard.

Every binary arithmetic expression is lowered to a raw `BinaryOp` followed by a
`Clamp` to the operand type's bounds, so a result that does not fit aborts
execution instead of wrapping. Division also gets a `ZeroCheck` on the
divisor. When both operands are literals the exact result is computed here and
an out-of-range result is a compile-time error.

There is no switch to turn this off.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, localcontext
from typing import Optional, Union

from clampc.conversion.converter import emit_clamp, materialize
from clampc.core.errors import DivisionByZero, LiteralOutOfRange, NonNumericOperand, OverflowAtCompileTime, TypeMismatch
from clampc.core.scalar_types import DECIMAL_CONTEXT, ScalarKind, ScalarType, bounds, literal_in_range
from clampc.core.span import Span
from clampc.core.typed_value import TypedValue
from clampc.ir import nodes as ir


def _int_div(a: int, b: int) -> int:
	# Truncates toward zero.
	q = abs(a) // abs(b)
	return q if (a < 0) == (b < 0) else -q


def fold(op: ir.ArithOp, ty: ScalarType, a: object, b: object) -> Union[int, Decimal]:
	"""Exact result of `a <op> b` for literals of `ty` (division by zero excluded)."""
	if ty.kind is ScalarKind.DECIMAL:
		with localcontext(DECIMAL_CONTEXT):
			x, y = Decimal(a), Decimal(b)  # type: ignore[arg-type]
			if op is ir.ArithOp.ADD:
				return x + y
			if op is ir.ArithOp.SUB:
				return x - y
			quantum = Decimal(1).scaleb(-ty.scale)
			exact = x * y if op is ir.ArithOp.MUL else x / y
			return exact.quantize(quantum, rounding=ROUND_DOWN)
	x, y = int(a), int(b)  # type: ignore[call-overload]
	if op is ir.ArithOp.ADD:
		return x + y
	if op is ir.ArithOp.SUB:
		return x - y
	if op is ir.ArithOp.MUL:
		return x * y
	return _int_div(x, y)


def _is_zero_literal(value: TypedValue) -> bool:
	return value.is_literal and value.value == 0


def guard(
	op: Union[ir.ArithOp, str],
	left: TypedValue,
	right: TypedValue,
	span: Optional[Span],
	out: ir.FunctionIR,
) -> TypedValue:
	op = ir.ArithOp(op)
	span = span or Span()
	if left.ty != right.ty:
		raise TypeMismatch(left.ty.name, right.ty.name, span=span, construct=op.value)
	ty = left.ty
	if not ty.is_numeric:
		raise NonNumericOperand(op.value, ty.name, span=span)
	for operand in (left, right):
		if operand.is_literal and not literal_in_range(ty, operand.value):
			raise LiteralOutOfRange(operand.value, ty.name, span=span)
	if op is ir.ArithOp.DIV and _is_zero_literal(right):
		raise DivisionByZero(span=span)

	folded = None
	if left.is_literal and right.is_literal:
		folded = fold(op, ty, left.value, right.value)
		lo, hi = bounds(ty)
		if not lo <= folded <= hi:
			raise OverflowAtCompileTime(op.value, ty.name, folded, span=span)

	lhs = materialize(left, out)
	rhs = materialize(right, out)
	if op is ir.ArithOp.DIV:
		out.emit(ir.ZeroCheck(src=rhs, ty=ty))
	raw = out.new_value()
	out.emit(ir.BinaryOp(dest=raw, op=op, left=lhs, right=rhs, ty=ty))
	clamped = emit_clamp(raw, ty, out)

	if folded is not None:
		return TypedValue(ty=ty, value=folded, is_literal=True, operand=clamped)
	return TypedValue.runtime(ty, clamped)


__all__ = ["guard", "fold"]
