"""Cloudflare Turnstile token verification."""

from __future__ import annotations

from typing import Optional

import httpx

from app.obs.logging import get_logger
from app.settings import settings

logger = get_logger("nodex.turnstile")

_transport: Optional[httpx.AsyncBaseTransport] = None


def set_transport(transport: Optional[httpx.AsyncBaseTransport]) -> None:
	"""Route verification calls through ``transport`` (tests use a mock transport)."""
	global _transport
	_transport = transport


async def verify(token: Optional[str], *, remote_ip: Optional[str] = None) -> bool:
	if not token or not token.strip():
		return False
	secret = settings.turnstile_secret_key
	if not secret:
		# Development mode: no secret means no remote verification
		return True
	form = {"secret": secret, "response": token}
	if remote_ip:
		form["remoteip"] = remote_ip
	try:
		async with httpx.AsyncClient(timeout=5.0, transport=_transport) as client:
			response = await client.post(settings.turnstile_verify_url, data=form)
		body = response.json()
	except (httpx.HTTPError, ValueError):
		logger.warning("turnstile_unreachable", exc_info=True)
		return False
	ok = bool(body.get("success")) if isinstance(body, dict) else False
	if not ok:
		logger.info("turnstile_rejected", extra={"codes": body.get("error-codes") if isinstance(body, dict) else None})
	return ok

