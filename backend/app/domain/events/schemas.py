"""Pydantic schemas for Events API."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator, model_validator


def to_store_datetime(value: datetime) -> str:
	"""Render ``value`` in the store's datetime format, ``YYYY-MM-DD HH:MM:SS.000Z``.

	Naive datetimes (browser ``datetime-local`` input) are taken as UTC.
	"""
	if value.tzinfo is None:
		value = value.replace(tzinfo=timezone.utc)
	return value.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S.000Z")


class EventRequest(BaseModel):
	model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

	title: str = Field(min_length=1)
	description: str = Field(min_length=1)
	starts_at: datetime = Field(alias="from")
	ends_at: datetime = Field(alias="to")
	location: str = Field(min_length=1)
	category: str = ""
	remSpots: int = Field(default=0, ge=0)
	regLink: Optional[HttpUrl] = None

	@field_validator("regLink", mode="before")
	@classmethod
	def _blank_link(cls, value):
		if isinstance(value, str) and not value.strip():
			return None
		return value

	@model_validator(mode="after")
	def _ordered(self) -> "EventRequest":
		if to_store_datetime(self.ends_at) < to_store_datetime(self.starts_at):
			raise ValueError("Event end must not be before its start")
		return self

	def to_record(self) -> dict:
		return {
			"title": self.title,
			"description": self.description,
			"from": to_store_datetime(self.starts_at),
			"to": to_store_datetime(self.ends_at),
			"location": self.location,
			"category": self.category,
			"remSpots": self.remSpots,
			"regLink": str(self.regLink) if self.regLink else "",
		}
