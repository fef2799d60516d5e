# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from decimal import Decimal

from clampc.checker.attributes import Attribute
from clampc.core.scalar_types import scalar_type
from clampc.parser import ast as A
from clampc.parser.parser import parse_source


def _parse_one(src: str) -> A.FunctionDecl:
	decls, diags = parse_source(src, "t.src")
	assert diags == []
	assert len(decls) == 1
	return decls[0]


def test_function_declaration_shape():
	fn = _parse_one(
		"""
		@public @payable
		fn deposit(amount: uint64, fee: uint64) -> uint64 {
			let net = amount - fee; // no wrap
			return net;
		}
		"""
	)
	assert fn.name == "deposit"
	assert fn.attributes == ("public", "payable")
	assert fn.attribute_set == frozenset({Attribute.PUBLIC, Attribute.PAYABLE})
	assert [(p.name, p.type_name) for p in fn.params] == [("amount", "uint64"), ("fee", "uint64")]
	assert fn.return_type == "uint64"
	let, ret = fn.body
	assert isinstance(let, A.LetStmt) and let.name == "net"
	assert isinstance(let.value, A.BinaryExpr) and let.value.op == "sub"
	assert isinstance(ret, A.ReturnStmt) and isinstance(ret.value, A.Name)
	assert fn.span.file == "t.src"
	assert fn.span.line == 2


def test_literal_typing():
	fn = _parse_one("@private fn f() { 7; -7; 1.25; 0xdeadbeef; }")
	values = [s.value for s in fn.body]
	assert all(isinstance(v, A.Literal) for v in values)
	assert (values[0].value, values[0].ty) == (7, scalar_type("uint256"))
	assert (values[1].value, values[1].ty) == (-7, scalar_type("int256"))
	assert (values[2].value, values[2].ty) == (Decimal("1.25"), scalar_type("fixed128x18"))
	assert (values[3].value, values[3].ty) == (b"\xde\xad\xbe\xef", scalar_type("bytes4"))


def test_conversion_calls_and_precedence():
	fn = _parse_one("@public fn f() { uint8(1) + uint8(2) * uint8(3); }")
	expr = fn.body[0].value
	assert isinstance(expr, A.BinaryExpr) and expr.op == "add"
	assert isinstance(expr.left, A.ConversionCall) and expr.left.target == "uint8"
	assert isinstance(expr.right, A.BinaryExpr) and expr.right.op == "mul"


def test_keyword_prefixed_names_are_identifiers():
	fn = _parse_one("@public fn f(letter: uint8) { return letter; }")
	assert fn.body[0].value.ident == "letter"


def test_syntax_error_becomes_parse_diagnostic():
	decls, diags = parse_source("@public fn f( {", "bad.src")
	assert decls == []
	(diag,) = diags
	assert diag.code == "ParseError"
	assert diag.phase == "parse"
	assert diag.span.file == "bad.src"
	assert diag.span.line == 1


def test_hex_literal_without_matching_bytes_type():
	_, diags = parse_source("@public fn f() { 0xabcdef; }")
	assert diags and diags[0].code == "ParseError"
	_, diags = parse_source("@public fn f() { 0xabc; }")
	assert diags and "odd number" in diags[0].message


def test_empty_source_has_no_declarations():
	assert parse_source("") == ([], [])


def test_oversized_integer_literal_becomes_parse_diagnostic():
	decls, diags = parse_source("@public fn f() { return " + "9" * 5000 + "; }", "big.src")
	assert decls == []
	(diag,) = diags
	assert diag.code == "ParseError"
	assert "5000 digits" in diag.message
	assert diag.span.file == "big.src"
	_, diags = parse_source("@public fn f() { return -" + "1" * 79 + "; }")
	assert diags and diags[0].code == "ParseError"


def test_leading_zeros_do_not_count_toward_literal_length():
	fn = _parse_one("@public fn f() { return " + "0" * 100 + "7; }")
	assert fn.body[0].value.value == 7
