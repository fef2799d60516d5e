# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Minimal declaration reader.

Only the constructs the safety passes consume are recognized: attributed
function declarations with typed parameters, `let`/`return`/expression
statements, the four arithmetic operators, literals, names and explicit
conversions written as `type(expr)`:

	@public @payable
	fn deposit(amount: uint64) -> uint64 {
		let fee = amount / uint64(100);
		return amount - fee;
	}

Literal typing: integer literals are `uint256` (`int256` when negated),
decimal literals are `fixed128x18`, and `0x..` literals are `bytesN` with N
the number of bytes written.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Tuple

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from clampc.core.diagnostics import Diagnostic
from clampc.core.scalar_types import is_scalar_type_name, scalar_type
from clampc.core.span import Span
from .ast import (
	BinaryExpr,
	ConversionCall,
	Expr,
	ExprStmt,
	FunctionDecl,
	LetStmt,
	Literal,
	Name,
	Param,
	ReturnStmt,
	Stmt,
)

_GRAMMAR_SRC = r"""
start: function*

function: attribute* "fn" NAME "(" [param ("," param)*] ")" ["->" NAME] block
attribute: "@" NAME
param: NAME ":" NAME
block: "{" stmt* "}"

?stmt: "let" NAME "=" expr ";"     -> let_stmt
     | "return" [expr] ";"         -> return_stmt
     | expr ";"                    -> expr_stmt

?expr: sum
?sum: product
    | sum PLUS product             -> binary
    | sum MINUS product            -> binary
?product: unary
    | product STAR unary           -> binary
    | product SLASH unary          -> binary
?unary: atom
    | MINUS INT                    -> neg_int
    | MINUS DECIMAL                -> neg_decimal
?atom: INT                         -> int_lit
     | DECIMAL                     -> decimal_lit
     | HEX                         -> hex_lit
     | NAME "(" expr ")"           -> conversion
     | NAME                        -> name
     | "(" expr ")"

PLUS: "+"
MINUS: "-"
STAR: "*"
SLASH: "/"
HEX.2: /0x[0-9a-fA-F]+/
DECIMAL.2: /[0-9]+\.[0-9]+/
INT: /[0-9]+/
NAME: /[A-Za-z_][A-Za-z0-9_]*/
COMMENT: /\/\/[^\n]*/

%import common.WS
%ignore WS
%ignore COMMENT
"""

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	start="start",
	propagate_positions=True,
	maybe_placeholders=True,
)

_OPS = {"+": "add", "-": "sub", "*": "mul", "/": "div"}

INT_LITERAL_TYPE = "uint256"
NEG_INT_LITERAL_TYPE = "int256"
DECIMAL_LITERAL_TYPE = "fixed128x18"


# Digits in 2**256 - 1; no integer type holds a longer literal.
_MAX_INT_DIGITS = 78


class LiteralSyntaxError(ValueError):
	"""A literal that lexes but has no scalar type (e.g. `0xabc`)."""

	def __init__(self, message: str, *, span: Span) -> None:
		super().__init__(message)
		self.span = span


class _Builder:
	def __init__(self, filename: Optional[str]) -> None:
		self.filename = filename

	def span(self, node: object) -> Span:
		if isinstance(node, Tree):
			return Span.from_loc(node.meta, file=self.filename) if not node.meta.empty else Span(file=self.filename)
		return Span.from_loc(node, file=self.filename)

	def program(self, tree: Tree) -> List[FunctionDecl]:
		return [self.function(child) for child in tree.children]

	def function(self, tree: Tree) -> FunctionDecl:
		attributes: List[str] = []
		params: List[Param] = []
		name: Optional[Token] = None
		return_type: Optional[str] = None
		body: List[Stmt] = []
		for child in tree.children:
			if isinstance(child, Tree) and child.data == "attribute":
				attributes.append(str(child.children[0]))
			elif isinstance(child, Tree) and child.data == "param":
				pname, ptype = child.children
				params.append(Param(name=str(pname), type_name=str(ptype), span=self.span(child)))
			elif isinstance(child, Tree) and child.data == "block":
				body = [self.stmt(s) for s in child.children]
			elif isinstance(child, Token) and name is None:
				name = child
			elif isinstance(child, Token):
				return_type = str(child)
		assert name is not None, "function without a name"
		return FunctionDecl(
			name=str(name),
			attributes=tuple(attributes),
			params=params,
			return_type=return_type,
			body=body,
			span=self.span(tree),
		)

	def stmt(self, tree: Tree) -> Stmt:
		span = self.span(tree)
		if tree.data == "let_stmt":
			name, value = tree.children
			return LetStmt(name=str(name), value=self.expr(value), span=span)
		if tree.data == "return_stmt":
			(value,) = tree.children
			return ReturnStmt(value=self.expr(value) if value is not None else None, span=span)
		if tree.data == "expr_stmt":
			return ExprStmt(value=self.expr(tree.children[0]), span=span)
		raise TypeError(f"unexpected statement node {tree.data}")

	def expr(self, node: object) -> Expr:
		if not isinstance(node, Tree):
			raise TypeError(f"expected expression tree, got {node!r}")
		span = self.span(node)
		kind = node.data
		if kind == "binary":
			left, op, right = node.children
			return BinaryExpr(op=_OPS[str(op)], left=self.expr(left), right=self.expr(right), span=span)
		if kind == "int_lit":
			return Literal(value=self.int_literal(node.children[0], span), ty=scalar_type(INT_LITERAL_TYPE), span=span)
		if kind == "neg_int":
			return Literal(value=-self.int_literal(node.children[1], span), ty=scalar_type(NEG_INT_LITERAL_TYPE), span=span)
		if kind == "decimal_lit":
			return Literal(value=Decimal(str(node.children[0])), ty=scalar_type(DECIMAL_LITERAL_TYPE), span=span)
		if kind == "neg_decimal":
			return Literal(value=-Decimal(str(node.children[1])), ty=scalar_type(DECIMAL_LITERAL_TYPE), span=span)
		if kind == "hex_lit":
			return self.hex_literal(node.children[0], span)
		if kind == "conversion":
			target, arg = node.children
			return ConversionCall(target=str(target), arg=self.expr(arg), span=span)
		if kind == "name":
			return Name(ident=str(node.children[0]), span=span)
		raise TypeError(f"unexpected expression node {kind}")

	def int_literal(self, tok: Token, span: Span) -> int:
		digits = str(tok).lstrip("0") or "0"
		if len(digits) > _MAX_INT_DIGITS:
			raise LiteralSyntaxError(f"integer literal with {len(digits)} digits does not fit any integer type", span=span)
		return int(digits)

	def hex_literal(self, tok: Token, span: Span) -> Literal:
		digits = str(tok)[2:]
		if len(digits) % 2:
			raise LiteralSyntaxError(f"hex literal '{tok}' has an odd number of digits", span=span)
		payload = bytes.fromhex(digits)
		type_name = f"bytes{len(payload)}"
		if not is_scalar_type_name(type_name):
			raise LiteralSyntaxError(f"no byte sequence type holds {len(payload)} bytes", span=span)
		return Literal(value=payload, ty=scalar_type(type_name), span=span)


def parse_source(source: str, filename: Optional[str] = None) -> Tuple[List[FunctionDecl], List[Diagnostic]]:
	"""
	Parse declarations from `source`.

	Syntax errors are returned as diagnostics (phase "parse", code
	"ParseError") rather than raised; no declarations are returned then.
	"""
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as err:
		span = Span(file=filename, line=getattr(err, "line", None), column=getattr(err, "column", None))
		return [], [Diagnostic(message=f"syntax error: {_first_line(str(err))}", code="ParseError", phase="parse", span=span)]
	try:
		return _Builder(filename).program(tree), []
	except LiteralSyntaxError as err:
		return [], [Diagnostic(message=str(err), code="ParseError", phase="parse", span=err.span)]


def _first_line(text: str) -> str:
	return text.strip().splitlines()[0] if text.strip() else text


__all__ = ["parse_source", "LiteralSyntaxError", "INT_LITERAL_TYPE", "NEG_INT_LITERAL_TYPE", "DECIMAL_LITERAL_TYPE"]
