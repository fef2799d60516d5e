# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from decimal import Decimal

import pytest

from clampc.core.errors import (
	DivisionByZero,
	LiteralOutOfRange,
	NonNumericOperand,
	OverflowAtCompileTime,
	TypeMismatch,
)
from clampc.core.scalar_types import bounds, scalar_type
from clampc.core.span import Span
from clampc.core.typed_value import TypedValue
from clampc.guard.arithmetic import fold, guard
from clampc.ir import nodes as ir

SPAN = Span(file="guard.src", line=2, column=3)


def _lit(type_name: str, value: object) -> TypedValue:
	return TypedValue.literal(scalar_type(type_name), value)


def _rt(type_name: str, operand: str) -> TypedValue:
	return TypedValue.runtime(scalar_type(type_name), operand)


def test_literal_uint8_sum_of_300_overflows_at_compile_time():
	out = ir.FunctionIR(name="f")
	with pytest.raises(OverflowAtCompileTime) as exc:
		guard("add", _lit("uint8", 200), _lit("uint8", 100), SPAN, out)
	assert exc.value.op == "add"
	assert exc.value.result == 300
	assert exc.value.span == SPAN
	assert out.nodes == []


def test_literal_uint8_sum_of_250_emits_add_then_clamp():
	out = ir.FunctionIR(name="f")
	result = guard("add", _lit("uint8", 200), _lit("uint8", 50), SPAN, out)
	kinds = [type(n) for n in out.nodes]
	assert kinds == [ir.Const, ir.Const, ir.BinaryOp, ir.Clamp]
	add, clamp = out.nodes[2], out.nodes[3]
	assert add.op is ir.ArithOp.ADD
	assert clamp.src == add.dest
	assert (clamp.lower, clamp.upper) == (0, 255)
	assert result.is_literal and result.value == 250
	assert result.operand == clamp.dest


@pytest.mark.parametrize(
	"left,right",
	[
		(("uint8", 1), ("uint16", 1)),
		(("int8", 1), ("uint8", 1)),
		(("uint256", 1), ("fixed128x18", Decimal(1))),
	],
)
def test_mixed_types_always_mismatch(left, right):
	out = ir.FunctionIR(name="f")
	with pytest.raises(TypeMismatch):
		guard("mul", _lit(*left), _lit(*right), SPAN, out)
	with pytest.raises(TypeMismatch):
		guard("mul", _rt(left[0], "%0"), _rt(right[0], "%1"), SPAN, out)
	assert out.nodes == []


def test_runtime_operands_are_always_clamped():
	out = ir.FunctionIR(name="f")
	result = guard("sub", _rt("int32", "%0"), _lit("int32", 5), SPAN, out)
	const, sub, clamp = out.nodes
	assert isinstance(const, ir.Const) and const.value == 5
	assert sub.left == "%0" and sub.right == const.dest
	assert (clamp.lower, clamp.upper) == bounds("int32")
	assert not result.is_literal


def test_division_checks_divisor_before_dividing():
	out = ir.FunctionIR(name="f")
	guard("div", _rt("uint64", "%0"), _rt("uint64", "%1"), SPAN, out)
	check, div, clamp = out.nodes
	assert isinstance(check, ir.ZeroCheck) and check.src == "%1"
	assert check.abort is ir.AbortCode.DIVISION_BY_ZERO
	assert isinstance(div, ir.BinaryOp) and div.op is ir.ArithOp.DIV
	assert isinstance(clamp, ir.Clamp) and clamp.abort is ir.AbortCode.RANGE_VIOLATION


def test_division_by_literal_zero_is_a_source_error():
	with pytest.raises(DivisionByZero):
		guard("div", _rt("uint64", "%0"), _lit("uint64", 0), SPAN, ir.FunctionIR(name="f"))


def test_signed_division_overflow_is_caught():
	with pytest.raises(OverflowAtCompileTime):
		guard("div", _lit("int8", -128), _lit("int8", -1), SPAN, ir.FunctionIR(name="f"))


def test_unsigned_underflow_is_caught():
	with pytest.raises(OverflowAtCompileTime):
		guard("sub", _lit("uint8", 0), _lit("uint8", 1), SPAN, ir.FunctionIR(name="f"))


def test_out_of_range_literal_operand_is_rejected():
	with pytest.raises(LiteralOutOfRange):
		guard("add", _lit("uint8", 256), _lit("uint8", 0), SPAN, ir.FunctionIR(name="f"))


def test_byte_sequences_have_no_arithmetic():
	with pytest.raises(NonNumericOperand):
		guard("add", _rt("bytes4", "%0"), _rt("bytes4", "%1"), SPAN, ir.FunctionIR(name="f"))


def test_integer_division_truncates_toward_zero():
	i8 = scalar_type("int8")
	assert fold(ir.ArithOp.DIV, i8, -7, 2) == -3
	assert fold(ir.ArithOp.DIV, i8, 7, -2) == -3
	assert fold(ir.ArithOp.DIV, i8, -7, -2) == 3


def test_fixed_point_products_round_toward_zero():
	fx = scalar_type("fixed128x18")
	tiny = Decimal("0.000000000000000001")
	assert fold(ir.ArithOp.MUL, fx, Decimal("1.5"), tiny) == tiny
	assert fold(ir.ArithOp.MUL, fx, Decimal("-1.5"), tiny) == -tiny
	assert fold(ir.ArithOp.DIV, fx, Decimal(1), Decimal(3)) == Decimal("0.333333333333333333")


def test_every_emitted_clamp_uses_table_bounds():
	out = ir.FunctionIR(name="f")
	for name in ("uint16", "int64", "fixed128x18"):
		guard("mul", _rt(name, "%a"), _rt(name, "%b"), SPAN, out)
	clamps = [n for n in out.nodes if isinstance(n, ir.Clamp)]
	assert len(clamps) == 3
	for clamp in clamps:
		assert (clamp.lower, clamp.upper) == bounds(clamp.ty)


def test_unknown_operator_is_rejected():
	with pytest.raises(ValueError):
		guard("mod", _rt("uint8", "%0"), _rt("uint8", "%1"), SPAN, ir.FunctionIR(name="f"))
