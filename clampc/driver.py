# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Driver for the safety passes.

Each function declaration is an independent unit:

	attribute validation → body lowering (converter + guard) → CompiledFunction

A `SourceError` anywhere in a unit turns into a diagnostic for that function
alone; the function contributes no IR and the other functions still compile.
A `ConfigurationFault` is a build defect and propagates out of `compile_unit`.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from clampc.checker.attributes import Verdict, validate_attributes
from clampc.config import CompilerOptions
from clampc.conversion.converter import TypeConverter
from clampc.conversion.registry import ConversionRegistry, default_registry
from clampc.core.diagnostics import Diagnostic, diagnostic_to_json
from clampc.core.errors import SourceError
from clampc.ir.nodes import CompiledFunction
from clampc.lower import FunctionLowerer
from clampc.parser.ast import FunctionDecl
from clampc.parser.parser import parse_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FunctionResult:
	"""Outcome for one declaration: IR on success, diagnostics otherwise."""

	name: str
	verdict: Verdict
	compiled: Optional[CompiledFunction] = None
	diagnostics: tuple[Diagnostic, ...] = ()

	@property
	def ok(self) -> bool:
		return self.compiled is not None


@dataclass
class CompiledUnit:
	functions: List[FunctionResult] = field(default_factory=list)
	diagnostics: List[Diagnostic] = field(default_factory=list)  # unit-level (parse) diagnostics

	@property
	def compiled(self) -> List[CompiledFunction]:
		return [r.compiled for r in self.functions if r.compiled is not None]

	@property
	def all_diagnostics(self) -> List[Diagnostic]:
		out = list(self.diagnostics)
		for r in self.functions:
			out.extend(r.diagnostics)
		return out

	@property
	def has_errors(self) -> bool:
		return any(d.severity == "error" for d in self.all_diagnostics)

	def to_json(self, *, default_file: Optional[str] = None) -> dict:
		return {
			"exit_code": 1 if self.has_errors else 0,
			"functions": [r.name for r in self.functions if r.ok],
			"diagnostics": [diagnostic_to_json(d, default_file=default_file) for d in self.all_diagnostics],
		}


def compile_function(decl: FunctionDecl, *, registry: Optional[ConversionRegistry] = None) -> FunctionResult:
	"""Validate attributes, then lower the body; never raises `SourceError`."""
	verdict = validate_attributes(decl.attributes)
	if not verdict.accepted:
		err = verdict.to_error(decl.name, decl.span)
		logger.warning("rejected %s: %s", decl.name, err.message)
		return FunctionResult(name=decl.name, verdict=verdict, diagnostics=(err.to_diagnostic(),))
	try:
		compiled = FunctionLowerer(decl, TypeConverter(registry)).lower()
	except SourceError as err:
		logger.debug("lowering %s failed: %s", decl.name, err.message)
		return FunctionResult(name=decl.name, verdict=verdict, diagnostics=(err.to_diagnostic(),))
	return FunctionResult(name=decl.name, verdict=verdict, compiled=compiled)


def compile_unit(
	decls: Sequence[FunctionDecl],
	options: Optional[CompilerOptions] = None,
	*,
	registry: Optional[ConversionRegistry] = None,
) -> CompiledUnit:
	"""
	Compile every declaration; results keep declaration order.

	With `options.workers > 1` the declarations are processed on a thread pool.
	The range table and registry are read-only, so workers share them freely.
	"""
	options = (options or CompilerOptions()).validated()
	if registry is None:
		registry = default_registry()
	if options.workers == 1 or len(decls) <= 1:
		results = [compile_function(d, registry=registry) for d in decls]
	else:
		with ThreadPoolExecutor(max_workers=options.workers) as pool:
			futures = [pool.submit(compile_function, d, registry=registry) for d in decls]
			# result() re-raises ConfigurationFault from a worker.
			results = [f.result() for f in futures]
	unit = CompiledUnit(functions=results)
	logger.info(
		"compiled %d of %d functions (%d diagnostics)",
		len(unit.compiled),
		len(results),
		len(unit.all_diagnostics),
	)
	return unit


def compile_source(source: str, options: Optional[CompilerOptions] = None) -> CompiledUnit:
	"""Parse `source` with the declaration reader and compile the result."""
	options = (options or CompilerOptions()).validated()
	decls, diagnostics = parse_source(source, options.filename)
	if diagnostics:
		return CompiledUnit(diagnostics=list(diagnostics))
	return compile_unit(decls, options)


__all__ = ["FunctionResult", "CompiledUnit", "compile_function", "compile_unit", "compile_source"]
