# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Explicit conversions: the process-wide registry and the type converter.
"""

from .converter import TypeConverter, convert
from .registry import ConversionEntry, ConversionRegistry, default_registry

__all__ = ["TypeConverter", "convert", "ConversionEntry", "ConversionRegistry", "default_registry"]
