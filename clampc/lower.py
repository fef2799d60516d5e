# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Function body walker.

Lowers one accepted `FunctionDecl` into safety IR: parameters are loaded and
typed, every `type(expr)` goes through the type converter and every arithmetic
expression through the arithmetic guard. Any `SourceError` aborts lowering of
this function; the partially filled buffer is discarded by the caller.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from clampc.conversion.converter import TypeConverter, materialize
from clampc.core import errors
from clampc.core.scalar_types import ScalarType, is_scalar_type_name, literal_in_range, scalar_type
from clampc.core.span import Span
from clampc.core.typed_value import TypedValue
from clampc.guard.arithmetic import guard
from clampc.ir import nodes as ir
from clampc.parser import ast as A

logger = logging.getLogger(__name__)


def resolve_type_name(name: str, span: Optional[Span]) -> ScalarType:
	if not is_scalar_type_name(name):
		raise errors.UnknownTypeName(name, span=span)
	return scalar_type(name)


class FunctionLowerer:
	def __init__(self, decl: A.FunctionDecl, converter: TypeConverter) -> None:
		self.decl = decl
		self.converter = converter
		self.out = ir.FunctionIR(name=decl.name)
		self.locals: Dict[str, TypedValue] = {}
		self.return_type: Optional[ScalarType] = None

	def lower(self) -> ir.CompiledFunction:
		decl = self.decl
		if decl.return_type is not None:
			self.return_type = resolve_type_name(decl.return_type, decl.span)
		for param in decl.params:
			ty = resolve_type_name(param.type_name, param.span)
			self._bind(param.name, param.span)
			dest = self.out.new_value()
			self.out.emit(ir.LoadParam(dest=dest, name=param.name, ty=ty))
			self.locals[param.name] = TypedValue.runtime(ty, dest)
		for stmt in decl.body:
			self.lower_stmt(stmt)
		if not self.out.nodes or not isinstance(self.out.nodes[-1], ir.Return):
			self._check_missing_value(decl.span)
			self.out.emit(ir.Return())
		logger.debug("lowered %s into %d IR nodes", decl.name, len(self.out.nodes))
		return self.out.finish()

	def _bind(self, name: str, span: Optional[Span]) -> None:
		if name in self.locals:
			raise errors.DuplicateName(name, span=span)

	def lower_stmt(self, stmt: A.Stmt) -> None:
		if isinstance(stmt, A.LetStmt):
			self._bind(stmt.name, stmt.span)
			self.locals[stmt.name] = self.lower_expr(stmt.value)
		elif isinstance(stmt, A.ExprStmt):
			self.lower_expr(stmt.value)
		elif isinstance(stmt, A.ReturnStmt):
			self.lower_return(stmt)
		else:
			raise TypeError(f"unsupported statement {type(stmt).__name__}")

	def lower_return(self, stmt: A.ReturnStmt) -> None:
		if stmt.value is None:
			self._check_missing_value(stmt.span)
			self.out.emit(ir.Return())
			return
		value = self.lower_expr(stmt.value)
		if self.return_type is not None and value.ty != self.return_type:
			raise errors.TypeMismatch(value.ty.name, self.return_type.name, span=stmt.span, construct="return")
		if value.is_literal and value.operand is None and not literal_in_range(value.ty, value.value):
			raise errors.LiteralOutOfRange(value.value, value.ty.name, span=stmt.span)
		self.out.emit(ir.Return(value=materialize(value, self.out)))

	def _check_missing_value(self, span: Optional[Span]) -> None:
		if self.return_type is not None:
			raise errors.TypeMismatch("void", self.return_type.name, span=span, construct="return")

	def lower_expr(self, expr: A.Expr) -> TypedValue:
		if isinstance(expr, A.Literal):
			return TypedValue.literal(expr.ty, expr.value)
		if isinstance(expr, A.Name):
			try:
				return self.locals[expr.ident]
			except KeyError:
				raise errors.UnknownName(expr.ident, span=expr.span) from None
		if isinstance(expr, A.ConversionCall):
			arg = self.lower_expr(expr.arg)
			return self.converter.convert(arg, expr.target, expr.span, self.out)
		if isinstance(expr, A.BinaryExpr):
			left = self.lower_expr(expr.left)
			right = self.lower_expr(expr.right)
			return guard(expr.op, left, right, expr.span, self.out)
		raise TypeError(f"unsupported expression {type(expr).__name__}")


def lower_function(decl: A.FunctionDecl, converter: Optional[TypeConverter] = None) -> ir.CompiledFunction:
	return FunctionLowerer(decl, converter or TypeConverter()).lower()


__all__ = ["FunctionLowerer", "lower_function", "resolve_type_name"]
