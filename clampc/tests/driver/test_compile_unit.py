# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from clampc.config import CompilerOptions
from clampc.conversion.registry import ConversionRegistry
from clampc.core.errors import RegistryNotClosed, UnknownType
from clampc.driver import compile_function, compile_source, compile_unit
from clampc.ir import nodes as ir
from clampc.ir.printer import format_function
from clampc.parser import ast as A
from clampc.parser.parser import parse_source

MIXED_UNIT = """
@public
fn ok_add() -> uint8 {
	return uint8(200) + uint8(50);
}

@public
fn overflow() -> uint8 {
	return uint8(200) + uint8(100);
}

@public @private
fn confused() {
	return;
}

@public @payable @constant
fn greedy() {
	return;
}

fn hidden() {
	return;
}

@private
fn narrow(x: uint16) -> uint8 {
	return uint8(x);
}

@public
fn mixed(a: uint8, b: uint16) {
	return a + b;
}

@public
fn bad_target(a: uint8) {
	return uint7(a);
}
"""


def _by_name(unit):
	return {r.name: r for r in unit.functions}


def test_each_function_gets_exactly_one_outcome():
	unit = compile_source(MIXED_UNIT, CompilerOptions(filename="mixed.src"))
	results = _by_name(unit)
	assert [r.name for r in unit.functions] == [
		"ok_add", "overflow", "confused", "greedy", "hidden", "narrow", "mixed", "bad_target",
	]
	codes = {name: [d.code for d in r.diagnostics] for name, r in results.items()}
	assert codes == {
		"ok_add": [],
		"overflow": ["OverflowAtCompileTime"],
		"confused": ["ConflictingVisibility"],
		"greedy": ["PayableConstantConflict"],
		"hidden": ["MissingVisibility"],
		"narrow": [],
		"mixed": ["TypeMismatch"],
		"bad_target": ["UnsupportedConversion"],
	}
	assert {f.name for f in unit.compiled} == {"ok_add", "narrow"}
	assert unit.has_errors


def test_rejected_functions_emit_no_ir():
	unit = compile_source(MIXED_UNIT)
	for result in unit.functions:
		if result.diagnostics:
			assert result.compiled is None
			assert not result.ok


def test_diagnostics_carry_function_name_and_position():
	unit = compile_source(MIXED_UNIT, CompilerOptions(filename="mixed.src"))
	diag = _by_name(unit)["hidden"].diagnostics[0]
	assert diag.construct == "hidden"
	assert diag.span.file == "mixed.src"
	assert diag.span.line == 22
	overflow = _by_name(unit)["overflow"].diagnostics[0]
	assert overflow.span.line == 9


def test_add_then_clamp_sequence():
	unit = compile_source(MIXED_UNIT)
	fn = _by_name(unit)["ok_add"].compiled
	assert format_function(fn).splitlines() == [
		"fn ok_add:",
		"  %0 = const uint256 200",
		"  %1 = convert.truncate %0 : uint256 -> uint8",
		"  %2 = clamp uint8 %1 [0, 255] abort RANGE_VIOLATION",
		"  %3 = const uint256 50",
		"  %4 = convert.truncate %3 : uint256 -> uint8",
		"  %5 = clamp uint8 %4 [0, 255] abort RANGE_VIOLATION",
		"  %6 = add uint8 %2, %5",
		"  %7 = clamp uint8 %6 [0, 255] abort RANGE_VIOLATION",
		"  return %7",
	]


def test_narrowing_parameter_conversion():
	unit = compile_source(MIXED_UNIT)
	fn = _by_name(unit)["narrow"].compiled
	load, conv, clamp, ret = fn.nodes
	assert isinstance(load, ir.LoadParam) and load.name == "x"
	assert isinstance(conv, ir.Convert) and conv.mode is ir.ConvertMode.TRUNCATE
	assert isinstance(clamp, ir.Clamp) and (clamp.lower, clamp.upper) == (0, 255)
	assert ret == ir.Return(value=clamp.dest)


def test_parallel_workers_preserve_order_and_results():
	decls, _ = parse_source(MIXED_UNIT)
	sequential = compile_unit(decls, CompilerOptions(workers=1))
	parallel = compile_unit(decls, CompilerOptions(workers=4))
	assert [r.name for r in parallel.functions] == [r.name for r in sequential.functions]
	assert [r.compiled for r in parallel.functions] == [r.compiled for r in sequential.functions]
	assert [[d.code for d in r.diagnostics] for r in parallel.functions] == [
		[d.code for d in r.diagnostics] for r in sequential.functions
	]


class _BrokenRegistry(ConversionRegistry):
	"""Registry whose table lost an entry after start-up."""

	def resolve(self, target, span=None):
		raise UnknownType(str(target))


@pytest.mark.parametrize("workers", [1, 3])
def test_configuration_fault_halts_the_unit(workers):
	decls, _ = parse_source(MIXED_UNIT)
	with pytest.raises(UnknownType):
		compile_unit(decls, CompilerOptions(workers=workers), registry=_BrokenRegistry())


@pytest.mark.parametrize("workers", [1, 3])
def test_unclosed_registry_halts_the_unit(workers):
	decls, _ = parse_source(MIXED_UNIT)
	with pytest.raises(RegistryNotClosed):
		compile_unit(decls, CompilerOptions(workers=workers), registry=ConversionRegistry())


def test_body_errors_inside_accepted_functions():
	src = """
	@public fn dup(a: uint8) { let a = a; }
	@public fn unknown() { return missing; }
	@public fn bad_param(a: uint7) { return; }
	@public fn ret(a: uint16) -> uint8 { return a; }
	@public fn zero(a: uint8) { return a / uint8(0); }
	"""
	unit = compile_source(src)
	assert [[d.code for d in r.diagnostics] for r in unit.functions] == [
		["DuplicateName"],
		["UnknownName"],
		["UnknownTypeName"],
		["TypeMismatch"],
		["DivisionByZero"],
	]


def test_parse_errors_stop_before_compilation():
	unit = compile_source("@public fn (", CompilerOptions(filename="broken.src"))
	assert unit.functions == []
	payload = unit.to_json()
	assert payload["exit_code"] == 1
	assert payload["diagnostics"][0]["code"] == "ParseError"
	assert payload["diagnostics"][0]["file"] == "broken.src"


def test_json_summary():
	unit = compile_source("@public fn f(a: uint8) -> uint8 { return a * uint8(2); }")
	payload = unit.to_json()
	assert payload == {"exit_code": 0, "functions": ["f"], "diagnostics": []}


def test_function_without_explicit_return_gets_one():
	decl = A.FunctionDecl(name="noop", attributes=("private",))
	result = compile_function(decl)
	assert result.compiled.nodes == (ir.Return(),)


@pytest.mark.parametrize(
	"source",
	[
		"@public fn f() -> uint8 { return; }",
		"@public fn f() -> uint8 { let x = 1; }",
		"@public fn f(a: uint8) -> uint8 { }",
	],
)
def test_typed_function_must_return_a_value(source):
	unit = compile_source(source)
	(result,) = unit.functions
	assert result.compiled is None
	assert [d.code for d in result.diagnostics] == ["TypeMismatch"]


def test_untyped_function_may_return_nothing():
	unit = compile_source("@public fn f(a: uint8) { let b = a; }")
	(result,) = unit.functions
	assert result.ok
	assert result.compiled.nodes[-1] == ir.Return()


def test_invalid_worker_count():
	with pytest.raises(ValueError):
		CompilerOptions(workers=0).validated()


def test_lower_function_directly():
	from clampc.lower import lower_function

	(decl,), _ = parse_source("@public fn scale(a: int64) -> int64 { return a * int64(3) - int64(1); }")
	fn = lower_function(decl)
	clamps = fn.clamps()
	# int64(3), mul, int64(1), sub
	assert len(clamps) == 4
	assert all((c.lower, c.upper) == (-(2**63), 2**63 - 1) for c in clamps)
	assert isinstance(fn.nodes[-1], ir.Return)
