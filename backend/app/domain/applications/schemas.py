"""Pydantic schemas for the recruitment API."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic_core import PydanticCustomError

ApplicationType = Literal["pending", "approved", "rejected"]

# field -> (minimum length as typed, message shown next to the field)
JOIN_MIN_LENGTHS: dict[str, tuple[int, str]] = {
	"name": (2, "Name must be at least 2 characters"),
	"phone": (10, "Phone number must be at least 10 digits"),
	"batch": (4, "Please enter your batch year"),
	"rollNumber": (1, "Roll number is required"),
	"registrationNumber": (1, "Registration number is required"),
	"department": (1, "Please select a department"),
	"whyJoin": (50, "Please provide at least 50 characters explaining why you want to join"),
}


class JoinSubmission(BaseModel):
	"""Membership application as typed into the join form.

	Shared by the ``/api/join`` route and the console join form so both sides
	reject the same input with the same messages.
	"""

	name: str
	email: EmailStr
	phone: str
	batch: str
	rollNumber: str
	registrationNumber: str
	department: str
	interestedTracks: List[str]
	whyJoin: str
	experience: Optional[str] = None
	projects: Optional[str] = None
	otherRemarks: Optional[str] = None

	@field_validator(*JOIN_MIN_LENGTHS.keys())
	@classmethod
	def _min_length(cls, value: str, info) -> str:
		minimum, message = JOIN_MIN_LENGTHS[info.field_name]
		if len(value) < minimum:
			raise PydanticCustomError("join_field", message)
		return value

	@field_validator("interestedTracks")
	@classmethod
	def _tracks(cls, value: List[str]) -> List[str]:
		tracks = [track.strip() for track in value if track and track.strip()]
		if not tracks:
			raise PydanticCustomError("join_field", "Please select at least one track")
		return tracks

	def to_record(self) -> dict[str, Any]:
		record = {
			key: value.strip() if isinstance(value, str) else value
			for key, value in self.model_dump(exclude_none=True).items()
		}
		record["interestedTracks"] = ", ".join(self.interestedTracks)
		return record


class JoinRequest(JoinSubmission):
	turnstileToken: str = Field(default="")


class MarkApplicationRequest(BaseModel):
	applicationId: str = Field(min_length=1)
	status: Literal["approved", "rejected"]
	remarks: str = ""


class RollbackApplicationRequest(BaseModel):
	applicationId: str = Field(min_length=1)
	reason: str = ""


class ApplicationsResponse(BaseModel):
	applications: List[dict[str, Any]]
	type: ApplicationType
	count: int


class ApplicationStats(BaseModel):
	pending: int
	approved: int
	rejected: int
	total: int
