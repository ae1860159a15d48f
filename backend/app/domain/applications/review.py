"""Review state machine for membership applications.

An application is Pending until a recruiter approves or rejects it. A decided
application can be rolled back to Pending. There is no terminal state and no
other edge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping, Optional, Union

Decision = Literal["approved", "rejected"]

DECISIONS: tuple[str, ...] = ("approved", "rejected")


class ReviewError(ValueError):
	"""Base error for rejected review events."""


class MissingRemarks(ReviewError):
	pass


class InvalidTransition(ReviewError):
	pass


@dataclass(frozen=True, slots=True)
class Pending:
	status: Literal["pending"] = "pending"


@dataclass(frozen=True, slots=True)
class Approved:
	remarks: str
	status: Literal["approved"] = "approved"


@dataclass(frozen=True, slots=True)
class Rejected:
	remarks: str
	status: Literal["rejected"] = "rejected"


ReviewState = Union[Pending, Approved, Rejected]


@dataclass(frozen=True, slots=True)
class Decide:
	decision: Decision
	remarks: str


@dataclass(frozen=True, slots=True)
class Rollback:
	reason: str


ReviewEvent = Union[Decide, Rollback]


def transition(state: ReviewState, event: ReviewEvent) -> ReviewState:
	"""Apply ``event`` to ``state`` and return the next state.

	Remarks and reasons are trimmed; blank text is rejected before the edge is
	checked so callers can surface the validation error first.
	"""
	if isinstance(event, Decide):
		remarks = (event.remarks or "").strip()
		if not remarks:
			raise MissingRemarks("Remarks are required")
		if event.decision not in DECISIONS:
			raise InvalidTransition(f"Unknown decision: {event.decision}")
		if not isinstance(state, Pending):
			raise InvalidTransition(f"Application is already {state.status}")
		return Approved(remarks) if event.decision == "approved" else Rejected(remarks)
	if isinstance(event, Rollback):
		reason = (event.reason or "").strip()
		if not reason:
			raise MissingRemarks("Reason is required")
		if isinstance(state, Pending):
			raise InvalidTransition("Application is not marked")
		return Pending()
	raise InvalidTransition(f"Unsupported event: {event!r}")


def state_from_marked(marked: Optional[Mapping[str, object]]) -> ReviewState:
	"""Build the state from a ``marked_apps`` record (or None for Pending)."""
	if not marked:
		return Pending()
	status = str(marked.get("status") or "")
	remarks = str(marked.get("remarks") or "")
	if status == "approved":
		return Approved(remarks)
	if status == "rejected":
		return Rejected(remarks)
	return Pending()
