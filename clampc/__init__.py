# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
clampc: semantic-safety passes for a contract language compiler.

Explicit conversions (`clampc.conversion`), overflow-guarded arithmetic
(`clampc.guard`) and function attribute validation (`clampc.checker`) emit a
clamp-carrying IR (`clampc.ir`). `clampc.driver` ties them together per
function declaration.
"""

__all__ = []
