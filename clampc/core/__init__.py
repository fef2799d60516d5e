# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Shared core: spans, diagnostics, error taxonomy, the numeric range table."""

__all__ = []
