# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Function attribute consistency.

Each function declaration carries a set of attributes drawn from a fixed
vocabulary. Before any IR is emitted for a function its attribute set is
evaluated exactly once, moving from UNVALIDATED straight to ACCEPTED or
REJECTED(reason). The rules, in order:

1. every attribute must be in the vocabulary (UNKNOWN_ATTRIBUTE);
2. one of @public/@private is required (MISSING_VISIBILITY);
3. @public and @private exclude each other (CONFLICTING_VISIBILITY);
4. a @constant function never accepts value transfer, so @payable with
   @constant is rejected (PAYABLE_CONSTANT_CONFLICT).

Validation is a pure function of the set: re-validating yields the same verdict.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import FrozenSet, Iterable, Optional, Union

from clampc.core import errors
from clampc.core.span import Span


class Attribute(str, Enum):
	PRIVATE = "private"
	PUBLIC = "public"
	CONSTANT = "constant"
	PAYABLE = "payable"


class ValidationState(Enum):
	UNVALIDATED = auto()
	ACCEPTED = auto()
	REJECTED = auto()


class RejectionReason(Enum):
	UNKNOWN_ATTRIBUTE = auto()
	MISSING_VISIBILITY = auto()
	CONFLICTING_VISIBILITY = auto()
	PAYABLE_CONSTANT_CONFLICT = auto()


@dataclass(frozen=True)
class Verdict:
	state: ValidationState
	reason: Optional[RejectionReason] = None
	detail: Optional[str] = None  # offending attribute name for UNKNOWN_ATTRIBUTE

	@property
	def accepted(self) -> bool:
		return self.state is ValidationState.ACCEPTED

	def to_error(self, fn_name: str, span: Optional[Span] = None) -> errors.SourceError:
		"""Build the SourceError for a rejected verdict."""
		if self.reason is RejectionReason.UNKNOWN_ATTRIBUTE:
			return errors.UnknownAttribute(fn_name, self.detail or "?", span=span)
		if self.reason is RejectionReason.MISSING_VISIBILITY:
			return errors.MissingVisibility(fn_name, span=span)
		if self.reason is RejectionReason.CONFLICTING_VISIBILITY:
			return errors.ConflictingVisibility(fn_name, span=span)
		if self.reason is RejectionReason.PAYABLE_CONSTANT_CONFLICT:
			return errors.PayableConstantConflict(fn_name, span=span)
		raise ValueError(f"verdict {self.state.name} has no error")


ACCEPTED = Verdict(ValidationState.ACCEPTED)

AttributeSet = FrozenSet[Attribute]


def parse_attribute(name: Union[Attribute, str]) -> Optional[Attribute]:
	"""Map a raw attribute name (`public`, `@Payable`, ...) to the vocabulary."""
	if isinstance(name, Attribute):
		return name
	try:
		return Attribute(name.lstrip("@").lower())
	except ValueError:
		return None


def validate_attributes(attrs: Iterable[Union[Attribute, str]]) -> Verdict:
	known = set()
	for raw in attrs:
		attr = parse_attribute(raw)
		if attr is None:
			return Verdict(ValidationState.REJECTED, RejectionReason.UNKNOWN_ATTRIBUTE, str(raw))
		known.add(attr)

	public = Attribute.PUBLIC in known
	private = Attribute.PRIVATE in known
	if not public and not private:
		return Verdict(ValidationState.REJECTED, RejectionReason.MISSING_VISIBILITY)
	if public and private:
		return Verdict(ValidationState.REJECTED, RejectionReason.CONFLICTING_VISIBILITY)
	if Attribute.PAYABLE in known and Attribute.CONSTANT in known:
		return Verdict(ValidationState.REJECTED, RejectionReason.PAYABLE_CONSTANT_CONFLICT)
	return ACCEPTED


__all__ = [
	"Attribute",
	"AttributeSet",
	"ValidationState",
	"RejectionReason",
	"Verdict",
	"ACCEPTED",
	"parse_attribute",
	"validate_attributes",
]
