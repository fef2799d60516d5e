# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration tree handed to the safety passes.

This is the interface to the (external) parser: function declarations with a
raw attribute list and a body of expressions. Literals arrive already typed;
names are typed by the body walker from parameters and `let` bindings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Tuple, Union

from clampc.checker.attributes import Attribute, parse_attribute
from clampc.core.scalar_types import ScalarType
from clampc.core.span import Span


class Expr:
	span: Span


class Stmt:
	span: Span


@dataclass
class Literal(Expr):
	value: object
	ty: ScalarType
	span: Span = field(default_factory=Span)


@dataclass
class Name(Expr):
	ident: str
	span: Span = field(default_factory=Span)


@dataclass
class BinaryExpr(Expr):
	op: str  # "add" | "sub" | "mul" | "div"
	left: Expr
	right: Expr
	span: Span = field(default_factory=Span)


@dataclass
class ConversionCall(Expr):
	"""`target(arg)`: an explicit conversion to the type named `target`."""
	target: str
	arg: Expr
	span: Span = field(default_factory=Span)


@dataclass
class LetStmt(Stmt):
	name: str
	value: Expr
	span: Span = field(default_factory=Span)


@dataclass
class ReturnStmt(Stmt):
	value: Optional[Expr] = None
	span: Span = field(default_factory=Span)


@dataclass
class ExprStmt(Stmt):
	value: Expr
	span: Span = field(default_factory=Span)


@dataclass
class Param:
	name: str
	type_name: str
	span: Span = field(default_factory=Span)


@dataclass
class FunctionDecl:
	name: str
	attributes: Tuple[Union[Attribute, str], ...] = ()
	params: List[Param] = field(default_factory=list)
	return_type: Optional[str] = None
	body: List[Stmt] = field(default_factory=list)
	span: Span = field(default_factory=Span)

	@property
	def attribute_set(self) -> FrozenSet[Attribute]:
		"""Known attributes only; unknown names are reported by the validator."""
		return frozenset(a for a in (parse_attribute(raw) for raw in self.attributes) if a is not None)


__all__ = [
	"Expr",
	"Stmt",
	"Literal",
	"Name",
	"BinaryExpr",
	"ConversionCall",
	"LetStmt",
	"ReturnStmt",
	"ExprStmt",
	"Param",
	"FunctionDecl",
]
