# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from clampc.core.diagnostics import Diagnostic, diagnostic_to_json
from clampc.core.errors import LiteralOutOfRange, TypeMismatch
from clampc.core.span import Span


def test_source_error_becomes_structured_diagnostic():
	err = LiteralOutOfRange(300, "uint8", span=Span(file="a.src", line=3, column=7))
	diag = err.to_diagnostic()
	assert diag.code == "LiteralOutOfRange"
	assert diag.phase == "safety"
	assert diag.construct == "300"
	assert diag.span.line == 3
	payload = diagnostic_to_json(diag)
	assert payload["file"] == "a.src"
	assert payload["line"] == 3
	assert payload["column"] == 7
	assert payload["code"] == "LiteralOutOfRange"


def test_missing_span_is_normalized():
	diag = Diagnostic(message="x", span=None)  # type: ignore[arg-type]
	assert diag.span == Span()
	assert diagnostic_to_json(diag, default_file="unit.src")["file"] == "unit.src"


def test_error_kind_is_class_name():
	assert TypeMismatch("uint8", "uint16").kind == "TypeMismatch"


def test_span_describe():
	assert Span(file="f.src", line=2, column=5).describe() == "f.src:2:5"
	assert Span().describe() == "<input>"
