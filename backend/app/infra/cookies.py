"""Cookie helpers for the recruiter session.

The dashboard session is a single cookie carrying the recruiter's auth key:
- auth-key: httpOnly, Secure (configurable), SameSite=Strict, Path=/
"""

from __future__ import annotations

from fastapi import Response

from app.settings import settings


AUTH_COOKIE_NAME = "auth-key"
AUTH_COOKIE_PATH = "/"


def _secure() -> bool:
	# Always Secure in production; elsewhere only when COOKIE_SECURE is set
	return settings.is_prod() or bool(settings.cookie_secure)


def set_auth_cookie(response: Response, *, auth_key: str) -> None:
	"""Set the auth-key cookie with the configured TTL and flags."""
	max_age = int(settings.auth_cookie_max_age_seconds)
	response.set_cookie(
		key=AUTH_COOKIE_NAME,
		value=auth_key,
		max_age=max_age,
		expires=max_age,
		path=AUTH_COOKIE_PATH,
		secure=_secure(),
		httponly=True,
		samesite="strict",
		domain=settings.cookie_domain or None,
	)


def clear_auth_cookie(response: Response) -> None:
	"""Expire the auth-key cookie immediately."""
	response.delete_cookie(
		key=AUTH_COOKIE_NAME,
		path=AUTH_COOKIE_PATH,
		secure=_secure(),
		httponly=True,
		samesite="strict",
		domain=settings.cookie_domain or None,
	)
