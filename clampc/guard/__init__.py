# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from .arithmetic import fold, guard

__all__ = ["guard", "fold"]
