"""Request ids: accepted from the caller when sane, generated otherwise.

Every response carries ``X-Request-Id`` and error bodies echo it as
``request_id`` so a recruiter can quote it when reporting a failure.
"""

from __future__ import annotations

import re
import uuid
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.obs import logging as obs_logging

REQUEST_ID_ATTR = "request_id"
REQUEST_ID_HEADER = "X-Request-Id"

_ACCEPTED_ID = re.compile(r"^[A-Za-z0-9._:-]{8,128}$")


def _incoming_id(request: Request) -> Optional[str]:
	value = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
	return value if _ACCEPTED_ID.match(value) else None


def get_request_id(request: Optional[Request] = None, default: str = "unknown") -> str:
	"""Return the current request id if bound, else a default."""
	if request is not None:
		rid = getattr(request.state, REQUEST_ID_ATTR, None)
		if rid:
			return str(rid)
	return obs_logging.current_request_id() or default


class RequestIdMiddleware(BaseHTTPMiddleware):
	"""Assign the request id before routing and stamp it on the response."""

	async def dispatch(self, request: Request, call_next):  # type: ignore[override]
		rid = _incoming_id(request) or uuid.uuid4().hex
		setattr(request.state, REQUEST_ID_ATTR, rid)
		token = obs_logging.bind_context(request_id=rid)
		try:
			response = await call_next(request)
		finally:
			obs_logging.reset_context(token)
		response.headers.setdefault(REQUEST_ID_HEADER, rid)
		return response
