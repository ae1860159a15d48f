"""Pydantic schemas for Teams API."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator


class TeamCreateRequest(BaseModel):
	model_config = ConfigDict(str_strip_whitespace=True)

	name: str = Field(min_length=1, max_length=100)
	description: str = Field(min_length=1)
	category: str = Field(min_length=1)
	team_lead: str = ""
	repository_url: Optional[HttpUrl] = None
	status: Literal["active", "inactive", "archived"] = "active"
	image_url: Optional[HttpUrl] = None

	@field_validator("repository_url", "image_url", mode="before")
	@classmethod
	def _blank_url(cls, value):
		if isinstance(value, str) and not value.strip():
			return None
		return value

	def to_record(self) -> dict:
		record = self.model_dump(mode="json")
		record["repository_url"] = record.get("repository_url") or ""
		record["image_url"] = record.get("image_url") or ""
		return record


class TeamUpdateRequest(TeamCreateRequest):
	description: str = ""
	jira_url: Optional[HttpUrl] = None
	skills_required: List[str] = Field(default_factory=list)
	max_members: Optional[int] = Field(default=None, ge=1)

	@field_validator("jira_url", "max_members", mode="before")
	@classmethod
	def _blank_optional(cls, value):
		if isinstance(value, str) and not value.strip():
			return None
		return value

	def to_record(self) -> dict:
		record = super().to_record()
		record["jira_url"] = record.get("jira_url") or ""
		return record


class TeamMemberAddRequest(BaseModel):
	member_id: str = Field(min_length=1)
