"""Recruiter authentication endpoints.

The dashboard session is the recruiter's auth key held in the httpOnly
``auth-key`` cookie; these routes issue, check and clear it.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Cookie, HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from app.api.request_id import get_request_id
from app.infra import pocketbase, rate_limit
from app.infra.auth import lookup_recruiter
from app.infra.cookies import AUTH_COOKIE_NAME, clear_auth_cookie, set_auth_cookie
from app.obs import audit as obs_audit
from app.obs import logging as obs_logging
from app.obs import metrics as obs_metrics
from app.obs.middleware import client_ip
from app.settings import settings

router = APIRouter(prefix="/api", tags=["auth"])

logger = obs_logging.get_logger("nodex.auth")


class LoginRequest(BaseModel):
	authKey: str = Field(min_length=1)


def _raise(message: str, status_code: int, **extra) -> None:
	"""Raise an HTTP error with request id header attached."""
	raise HTTPException(
		status_code=status_code,
		detail={"message": message, **extra},
		headers={"X-Request-Id": get_request_id()},
	)


def _unauthenticated(message: str, status_code: int = status.HTTP_401_UNAUTHORIZED) -> JSONResponse:
	response = JSONResponse(
		status_code=status_code,
		content={"message": message, "authenticated": False, "request_id": get_request_id()},
	)
	clear_auth_cookie(response)
	return response


@router.post("/login")
async def login(payload: LoginRequest, request: Request) -> JSONResponse:
	ip = client_ip(request) or "unknown"
	if not await rate_limit.allow(
		"login:ip", ip, limit=settings.rate_limit_login, window_seconds=settings.rate_limit_window_seconds
	):
		obs_metrics.inc_rate_limited("login")
		_raise("Too many login attempts. Please try again later.", status.HTTP_429_TOO_MANY_REQUESTS, success=False)
	try:
		recruiter = await lookup_recruiter(payload.authKey.strip())
	except pocketbase.PocketBaseError:
		obs_metrics.inc_auth_check("error")
		_raise("Authentication service error", status.HTTP_500_INTERNAL_SERVER_ERROR, success=False)
	if recruiter is None:
		obs_metrics.inc_auth_check("invalid")
		logger.info("login_rejected")
		_raise("Invalid auth key", status.HTTP_401_UNAUTHORIZED, success=False)

	obs_metrics.inc_auth_check("ok")
	obs_logging.bind_recruiter(recruiter.id)
	response = JSONResponse(
		{
			"message": "Login successful",
			"success": True,
			"recruiter": recruiter.to_public(),
		}
	)
	set_auth_cookie(response, auth_key=payload.authKey.strip())
	await obs_audit.log_exec_activity(request, recruiter, "Login", "auth", details=f"{recruiter.assignee} signed in")
	return response


@router.get("/auth-check")
async def auth_check(auth_key: Optional[str] = Cookie(default=None, alias=AUTH_COOKIE_NAME)) -> JSONResponse:
	if not auth_key:
		obs_metrics.inc_auth_check("missing")
		return JSONResponse(
			status_code=status.HTTP_401_UNAUTHORIZED,
			content={"message": "No auth key found", "authenticated": False, "request_id": get_request_id()},
		)
	try:
		recruiter = await lookup_recruiter(auth_key)
	except pocketbase.PocketBaseError:
		obs_metrics.inc_auth_check("error")
		return _unauthenticated("Authentication failed")
	if recruiter is None:
		obs_metrics.inc_auth_check("invalid")
		return _unauthenticated("Invalid auth key")
	obs_metrics.inc_auth_check("ok")
	obs_logging.bind_recruiter(recruiter.id)
	return JSONResponse(
		{
			"message": "Authenticated",
			"authenticated": True,
			"recruiter": recruiter.to_public(with_flags=True),
		}
	)


@router.post("/logout")
async def logout(
	request: Request,
	auth_key: Optional[str] = Cookie(default=None, alias=AUTH_COOKIE_NAME),
) -> JSONResponse:
	if auth_key:
		try:
			recruiter = await lookup_recruiter(auth_key)
		except pocketbase.PocketBaseError:
			recruiter = None
		if recruiter is not None:
			await obs_audit.log_exec_activity(
				request, recruiter, "Logout", "auth", details=f"{recruiter.assignee} signed out"
			)
	response = JSONResponse({"message": "Logged out successfully", "success": True})
	clear_auth_cookie(response)
	return response
