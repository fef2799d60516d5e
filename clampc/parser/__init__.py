# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration tree plus a minimal lark-based reader that produces it.
"""

from .parser import parse_source

__all__ = ["parse_source"]
