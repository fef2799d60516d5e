# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Error taxonomy for the safety passes.

Two families are raised by the compiler itself:

* `ConfigurationFault`: a malformed range table or conversion registry. This is
  a build defect, never triggered by user source, and halts the whole
  compilation unit.
* `SourceError`: a problem in the program being compiled. It ends processing
  of the offending function only; the driver turns it into a `Diagnostic`.

Runtime aborts (clamp violations, division by zero) are not exceptions: they
are encoded into the IR as `AbortCode`s on runtime-check nodes.
"""

from __future__ import annotations

from typing import Optional

from .diagnostics import Diagnostic
from .span import Span


class ConfigurationFault(Exception):
	"""Malformed process-wide table (range table or conversion registry)."""


class UnknownType(ConfigurationFault):
	def __init__(self, name: str) -> None:
		super().__init__(f"scalar type '{name}' is not in the range table")
		self.name = name


class DuplicateRegistration(ConfigurationFault):
	def __init__(self, name: str) -> None:
		super().__init__(f"conversion to '{name}' is already registered")
		self.name = name


class RegistryClosed(ConfigurationFault):
	def __init__(self, name: str) -> None:
		super().__init__(f"cannot register conversion to '{name}': registry is closed")
		self.name = name


class RegistryNotClosed(ConfigurationFault):
	def __init__(self) -> None:
		super().__init__("conversion registry was used before close()")


class IncompleteRegistry(ConfigurationFault):
	def __init__(self, missing: list[str], unknown: list[str]) -> None:
		parts = []
		if missing:
			parts.append(f"missing conversions for {', '.join(missing)}")
		if unknown:
			parts.append(f"conversions registered for unknown types {', '.join(unknown)}")
		super().__init__("; ".join(parts) or "conversion registry is incomplete")
		self.missing = list(missing)
		self.unknown = list(unknown)


class SourceError(Exception):
	"""
	User-facing error scoped to one function declaration.

	The class name doubles as the diagnostic code so callers (and tests) can
	match on `kind` without a separate catalog.
	"""

	def __init__(self, message: str, *, span: Optional[Span] = None, construct: Optional[str] = None) -> None:
		super().__init__(message)
		self.message = message
		self.span = span or Span()
		self.construct = construct

	@property
	def kind(self) -> str:
		return type(self).__name__

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(
			message=self.message,
			code=self.kind,
			phase="safety",
			severity="error",
			span=self.span,
			construct=self.construct,
		)


# Conversion errors


class UnsupportedConversion(SourceError):
	def __init__(self, type_name: str, *, span: Optional[Span] = None) -> None:
		super().__init__(f"conversion to unsupported type '{type_name}'", span=span, construct=type_name)
		self.type_name = type_name


class LiteralOutOfRange(SourceError):
	def __init__(self, value: object, type_name: str, *, span: Optional[Span] = None) -> None:
		super().__init__(f"literal {value!r} is out of range for '{type_name}'", span=span, construct=repr(value))
		self.value = value
		self.type_name = type_name


class InvalidConversion(SourceError):
	def __init__(self, reason: str, *, span: Optional[Span] = None, construct: Optional[str] = None) -> None:
		super().__init__(f"invalid conversion: {reason}", span=span, construct=construct)
		self.reason = reason


# Arithmetic errors


class TypeMismatch(SourceError):
	def __init__(self, left: str, right: str, *, span: Optional[Span] = None, construct: Optional[str] = None) -> None:
		super().__init__(
			f"operand types '{left}' and '{right}' differ; convert explicitly",
			span=span,
			construct=construct or f"{left}, {right}",
		)
		self.left = left
		self.right = right


class OverflowAtCompileTime(SourceError):
	def __init__(self, op: str, type_name: str, result: object, *, span: Optional[Span] = None) -> None:
		super().__init__(
			f"'{op}' on constant operands yields {result}, outside the range of '{type_name}'",
			span=span,
			construct=op,
		)
		self.op = op
		self.type_name = type_name
		self.result = result


class DivisionByZero(SourceError):
	def __init__(self, *, span: Optional[Span] = None) -> None:
		super().__init__("division by constant zero", span=span, construct="div")


class NonNumericOperand(SourceError):
	def __init__(self, op: str, type_name: str, *, span: Optional[Span] = None) -> None:
		super().__init__(f"'{op}' is not defined for '{type_name}'", span=span, construct=op)
		self.op = op
		self.type_name = type_name


# Attribute errors


class AttributeRejection(SourceError):
	"""Base for attribute-set rejections."""

	def __init__(self, message: str, fn_name: str, *, span: Optional[Span] = None) -> None:
		super().__init__(f"function '{fn_name}': {message}", span=span, construct=fn_name)
		self.fn_name = fn_name


class MissingVisibility(AttributeRejection):
	def __init__(self, fn_name: str, *, span: Optional[Span] = None) -> None:
		super().__init__("missing visibility attribute (@public or @private)", fn_name, span=span)


class ConflictingVisibility(AttributeRejection):
	def __init__(self, fn_name: str, *, span: Optional[Span] = None) -> None:
		super().__init__("@public and @private are mutually exclusive", fn_name, span=span)


class PayableConstantConflict(AttributeRejection):
	def __init__(self, fn_name: str, *, span: Optional[Span] = None) -> None:
		super().__init__("a @constant function cannot be @payable", fn_name, span=span)


class UnknownAttribute(AttributeRejection):
	def __init__(self, fn_name: str, attribute: str, *, span: Optional[Span] = None) -> None:
		super().__init__(f"unknown attribute '@{attribute}'", fn_name, span=span)
		self.attribute = attribute


# Name resolution errors raised while walking a body


class UnknownName(SourceError):
	def __init__(self, name: str, *, span: Optional[Span] = None) -> None:
		super().__init__(f"unknown name '{name}'", span=span, construct=name)
		self.name = name


class UnknownTypeName(SourceError):
	def __init__(self, name: str, *, span: Optional[Span] = None) -> None:
		super().__init__(f"unknown type '{name}'", span=span, construct=name)
		self.name = name


class DuplicateName(SourceError):
	def __init__(self, name: str, *, span: Optional[Span] = None) -> None:
		super().__init__(f"'{name}' is already defined", span=span, construct=name)
		self.name = name


__all__ = [
	"ConfigurationFault",
	"UnknownType",
	"DuplicateRegistration",
	"RegistryClosed",
	"IncompleteRegistry",
	"RegistryNotClosed",
	"SourceError",
	"UnsupportedConversion",
	"LiteralOutOfRange",
	"InvalidConversion",
	"TypeMismatch",
	"OverflowAtCompileTime",
	"DivisionByZero",
	"NonNumericOperand",
	"AttributeRejection",
	"MissingVisibility",
	"ConflictingVisibility",
	"PayableConstantConflict",
	"UnknownAttribute",
	"UnknownName",
	"UnknownTypeName",
	"DuplicateName",
]
