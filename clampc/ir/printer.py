# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Textual dump of the safety IR (debugging and golden-style tests)."""

from __future__ import annotations

from . import nodes as ir


def format_node(node: ir.IRNode) -> str:
	if isinstance(node, ir.Const):
		value = node.value.hex() if isinstance(node.value, (bytes, bytearray)) else node.value
		return f"  {node.dest} = const {node.ty} {value}"
	if isinstance(node, ir.LoadParam):
		return f"  {node.dest} = param {node.ty} {node.name}"
	if isinstance(node, ir.Convert):
		return f"  {node.dest} = convert.{node.mode.value} {node.src} : {node.from_ty} -> {node.to_ty}"
	if isinstance(node, ir.BinaryOp):
		return f"  {node.dest} = {node.op.value} {node.ty} {node.left}, {node.right}"
	if isinstance(node, ir.Clamp):
		return f"  {node.dest} = clamp {node.ty} {node.src} [{node.lower}, {node.upper}] abort {node.abort.name}"
	if isinstance(node, ir.ZeroCheck):
		return f"  check_nonzero {node.ty} {node.src} abort {node.abort.name}"
	if isinstance(node, ir.Return):
		if node.value is None:
			return "  return"
		return f"  return {node.value}"
	return f"  <unknown node {type(node).__name__}>"


def format_function(fn: ir.CompiledFunction) -> str:
	lines = [f"fn {fn.name}:"]
	lines.extend(format_node(n) for n in fn.nodes)
	return "\n".join(lines)


__all__ = ["format_node", "format_function"]
