# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration checks that gate IR emission.

Currently: attribute-set consistency (`attributes.validate_attributes`).
"""

from .attributes import Attribute, RejectionReason, ValidationState, Verdict, validate_attributes

__all__ = ["Attribute", "RejectionReason", "ValidationState", "Verdict", "validate_attributes"]
