"""Pydantic schemas for the club member directory."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, field_validator

MemberStatus = Literal["active", "inactive", "alumni"]


def _blank_to_none(value):
	if isinstance(value, str) and not value.strip():
		return None
	return value


class ClubMemberBase(BaseModel):
	model_config = ConfigDict(str_strip_whitespace=True)

	student_id: str = ""
	phone: str = ""
	position: str = ""
	department: str = ""
	year: Optional[int] = None
	teams: List[str] = Field(default_factory=list)
	skills: List[str] = Field(default_factory=list)
	bio: str = ""
	linkedin_url: Optional[HttpUrl] = None
	github_url: Optional[HttpUrl] = None
	portfolio_url: Optional[HttpUrl] = None
	status: MemberStatus = "active"

	@field_validator("linkedin_url", "github_url", "portfolio_url", "year", mode="before")
	@classmethod
	def _optional(cls, value):
		return _blank_to_none(value)


class ClubMemberCreate(ClubMemberBase):
	name: str = Field(min_length=1)
	email: EmailStr
	member_type: str = Field(min_length=1)

	def to_record(self) -> dict:
		record = self.model_dump(mode="json")
		record["email"] = str(self.email).lower()
		for key in ("linkedin_url", "github_url", "portfolio_url"):
			record[key] = record.get(key) or ""
		return record


class ClubMemberUpdate(ClubMemberCreate):
	pass
