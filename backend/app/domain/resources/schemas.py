"""Pydantic schemas for Resources API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, HttpUrl


class ResourceRequest(BaseModel):
	model_config = ConfigDict(str_strip_whitespace=True)

	title: str = Field(min_length=1)
	description: str = Field(min_length=1)
	category: str = Field(min_length=1)
	type: str = Field(min_length=1)
	link: HttpUrl
	semester: str = ""
	subject: str = ""

	def to_record(self) -> dict:
		record = self.model_dump(mode="json")
		record["link"] = str(self.link)
		return record
