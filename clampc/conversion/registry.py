# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Conversion registry: target type name → conversion procedure.

The registry is write-once/read-many. Entries are registered during start-up,
then `close()` checks that every ScalarType in the range table has exactly one
entry and freezes the table. After that the registry exposes no mutator, so it
can be shared across compilation workers without locking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

from clampc.core.errors import (
	DuplicateRegistration,
	IncompleteRegistry,
	RegistryClosed,
	RegistryNotClosed,
	UnsupportedConversion,
)
from clampc.core.scalar_types import ScalarType, all_scalar_types, is_scalar_type_name, scalar_type
from clampc.core.span import Span
from .procedures import ConversionProcedure, procedure_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionEntry:
	target: ScalarType
	procedure: ConversionProcedure


class ConversionRegistry:
	def __init__(self) -> None:
		self._pending: Dict[str, ConversionProcedure] = {}
		self._entries: Optional[Mapping[str, ConversionEntry]] = None

	@property
	def closed(self) -> bool:
		return self._entries is not None

	def register(self, target: Union[ScalarType, str], procedure: ConversionProcedure) -> None:
		name = target.name if isinstance(target, ScalarType) else target
		if self.closed:
			raise RegistryClosed(name)
		if name in self._pending:
			raise DuplicateRegistration(name)
		self._pending[name] = procedure

	def close(self) -> "ConversionRegistry":
		"""Verify totality against the range table and freeze the entries."""
		if self.closed:
			return self
		expected = [ty.name for ty in all_scalar_types()]
		missing = [name for name in expected if name not in self._pending]
		unknown = sorted(name for name in self._pending if not is_scalar_type_name(name))
		if missing or unknown:
			raise IncompleteRegistry(missing, unknown)
		self._entries = MappingProxyType(
			{name: ConversionEntry(target=scalar_type(name), procedure=self._pending[name]) for name in expected}
		)
		self._pending = {}
		logger.debug("conversion registry closed with %d entries", len(self._entries))
		return self

	def resolve(self, target: Union[ScalarType, str], span: Optional[Span] = None) -> ConversionEntry:
		"""
		Look up the conversion for `target`.

		Asking for a type the registry does not know is a source error (the
		program named an unsupported conversion target), reported with the type
		name and position. Resolving through a registry that was never closed
		is a build defect and raises `RegistryNotClosed`.
		"""
		if self._entries is None:
			raise RegistryNotClosed()
		name = target.name if isinstance(target, ScalarType) else target
		try:
			return self._entries[name]
		except KeyError:
			raise UnsupportedConversion(name, span=span) from None

	def __len__(self) -> int:
		return len(self._entries) if self._entries is not None else 0


def build_default_registry() -> ConversionRegistry:
	registry = ConversionRegistry()
	for ty in all_scalar_types():
		registry.register(ty, procedure_for(ty))
	return registry.close()


_DEFAULT_REGISTRY = build_default_registry()


def default_registry() -> ConversionRegistry:
	"""The process-wide registry, built and closed at import."""
	return _DEFAULT_REGISTRY


__all__ = ["ConversionEntry", "ConversionRegistry", "build_default_registry", "default_registry"]
