# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Compiler options for the safety passes.

Overflow clamps and conversion clamps are unconditional; nothing here turns
them off.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CompilerOptions:
	# Number of worker threads for independent function declarations; 1 keeps
	# everything on the calling thread.
	workers: int = 1
	# Default file name recorded in diagnostics whose span has none.
	filename: Optional[str] = None

	def validated(self) -> "CompilerOptions":
		if not isinstance(self.workers, int) or self.workers < 1:
			raise ValueError(f"workers must be a positive integer, got {self.workers!r}")
		return self


__all__ = ["CompilerOptions"]
