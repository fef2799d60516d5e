# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Safety IR consumed by the external code generator."""

__all__ = []
