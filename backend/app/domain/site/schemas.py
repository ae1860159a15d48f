"""Pydantic schemas for public site endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class WebMetadata(BaseModel):
	maintenance: bool = False
	accepting: bool = True
	updated: Optional[str] = None


class WebMetadataUpdate(BaseModel):
	maintenance: Optional[bool] = None
	accepting: Optional[bool] = None


class CollaborationRequest(BaseModel):
	model_config = ConfigDict(str_strip_whitespace=True)

	organization: str = Field(min_length=1)
	contactName: str = Field(min_length=1)
	email: EmailStr
	phone: Optional[str] = None
	requestTypes: List[str] = Field(min_length=1)
	details: str = Field(min_length=1)
	turnstileToken: str = ""


class Fingerprint(BaseModel):
	screen_resolution: Optional[str] = None
	timezone: Optional[str] = None
	language: Optional[str] = None
	platform: Optional[str] = None
	cookie_enabled: Optional[bool] = None
	do_not_track: Optional[str] = None
	connection_type: Optional[str] = None


class VisitorActivity(BaseModel):
	action: str = "page_view"
	page_url: Optional[str] = None
	referrer: Optional[str] = None
	timestamp: Optional[str] = None
	ip_address: Optional[str] = None
	user_agent: Optional[str] = None
	fingerprint: Optional[Fingerprint] = None
	additional_data: Optional[Dict[str, Any]] = None
