"""Pydantic schemas for the core team roster, the BOS roster and BOS onboarding."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

CoreCategory = Literal["founding", "core", "direc"]


class CoreMemberRequest(BaseModel):
	model_config = ConfigDict(str_strip_whitespace=True)

	name: str = Field(min_length=1)
	title: str = Field(min_length=1)
	profile: str = Field(min_length=1)
	category: CoreCategory
	photo: str = ""
	linkedin: str = ""
	github: str = ""
	email: str = ""
	phone: str = ""
	skills: str = ""
	pos: int = Field(default=1, ge=0)

	def to_record(self) -> dict:
		record = self.model_dump()
		record["qualification"] = record.pop("profile")
		return record


class BosMemberRequest(BaseModel):
	model_config = ConfigDict(str_strip_whitespace=True)

	name: str = Field(min_length=1)
	title: str = Field(min_length=1)
	profile: str = Field(min_length=1)
	photo: str = ""
	linkedin: str = ""
	github: str = ""
	priority: int = 0

	def to_record(self) -> dict:
		record = self.model_dump()
		record["qualification"] = record.pop("profile")
		record["category"] = "direc"
		return record


class BosOnboarding(BaseModel):
	"""Text part of the BOS onboarding form; the photo travels separately."""

	model_config = ConfigDict(str_strip_whitespace=True)

	name: str = Field(min_length=1)
	email: EmailStr
	phone: str = Field(min_length=1)
	rollNumber: str = Field(min_length=1)
	department: str = Field(min_length=1)
	year: str = Field(min_length=1)
	bio: str = Field(min_length=1)
	skills: str = Field(min_length=1)
	interests: str = Field(min_length=1)
	experience: str = Field(min_length=1)
	goals: str = Field(min_length=1)
	opportunities: str = Field(min_length=1)
	availability: List[str] = Field(min_length=1)
	communication_preference: str = Field(min_length=1)
	achievements: str = ""
	github: str = ""
	linkedin: str = ""
	portfolio: str = ""
	newsletter: bool = False
	events_notification: bool = False

	def to_form(self) -> dict[str, str]:
		return {
			"name": self.name,
			"email": str(self.email),
			"phone": self.phone,
			"roll_number": self.rollNumber,
			"department": self.department,
			"year": self.year,
			"bio": self.bio,
			"skills": self.skills,
			"achievements": self.achievements,
			"interests": self.interests,
			"github": self.github,
			"linkedin": self.linkedin,
			"portfolio": self.portfolio,
			"experience": self.experience,
			"goals": self.goals,
			"opportunities": self.opportunities,
			"availability": ", ".join(self.availability),
			"communication_preference": self.communication_preference,
			"newsletter": "true" if self.newsletter else "false",
			"events_notification": "true" if self.events_notification else "false",
		}


class Photo(BaseModel):
	filename: str
	content_type: Optional[str] = None
	content: bytes
