"""Async HTTP client used by the dashboard console.

One :class:`ConsoleClient` is bound to one browser-like session: it carries the
``auth-key`` cookie and talks to the portal API. Failures are normalised into
:class:`RequestFailed` with a ``kind`` of ``network`` or ``server`` so view
models can pick the right notice.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional

import httpx

from app.obs.logging import get_logger

logger = get_logger("nodex.console")

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."
GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."

AUTH_COOKIE_NAME = "auth-key"


class RequestFailed(Exception):
	def __init__(self, kind: Literal["network", "server"], message: str, status_code: Optional[int] = None) -> None:
		super().__init__(message)
		self.kind = kind
		self.message = message
		self.status_code = status_code


@dataclass(frozen=True, slots=True)
class Session:
	"""Recruiter identity and permissions for one dashboard page."""

	recruiter_id: str
	assignee: str
	exec: bool = False
	team_mgmt: bool = False

	def has_role(self, role: str) -> bool:
		if role == "exec":
			return self.exec
		if role == "team_mgmt":
			return self.team_mgmt
		return False


def _server_message(response: httpx.Response) -> str:
	try:
		body = response.json()
	except ValueError:
		return GENERIC_ERROR_MESSAGE
	if isinstance(body, dict):
		message = body.get("message") or body.get("error")
		if message:
			return str(message)
	return GENERIC_ERROR_MESSAGE


class ConsoleClient:
	def __init__(
		self,
		base_url: str,
		*,
		auth_key: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		cookies = {AUTH_COOKIE_NAME: auth_key} if auth_key else None
		self._http = httpx.AsyncClient(base_url=base_url, cookies=cookies, transport=transport)

	async def __aenter__(self) -> "ConsoleClient":
		return self

	async def __aexit__(self, *exc_info) -> None:
		await self.aclose()

	async def aclose(self) -> None:
		await self._http.aclose()

	async def request(
		self,
		method: str,
		path: str,
		*,
		json: Any = None,
		params: Optional[dict[str, Any]] = None,
	) -> dict[str, Any]:
		try:
			response = await self._http.request(method, path, json=json, params=params)
		except httpx.HTTPError as exc:
			logger.warning("console_network_error", extra={"method": method, "path": path, "error": str(exc)})
			raise RequestFailed("network", NETWORK_ERROR_MESSAGE) from exc
		if not response.is_success:
			raise RequestFailed("server", _server_message(response), response.status_code)
		try:
			body = response.json()
		except ValueError:
			return {}
		return body if isinstance(body, dict) else {"items": body}

	async def get(self, path: str, **params: Any) -> dict[str, Any]:
		return await self.request("GET", path, params={k: v for k, v in params.items() if v not in (None, "")})

	async def post(self, path: str, payload: Any) -> dict[str, Any]:
		return await self.request("POST", path, json=payload)

	async def delete(self, path: str) -> dict[str, Any]:
		return await self.request("DELETE", path)

	async def session(self) -> Optional[Session]:
		"""Resolve the current recruiter; None when the cookie is missing or stale."""
		try:
			body = await self.get("/api/auth-check")
		except RequestFailed as exc:
			if exc.status_code == 401:
				return None
			raise
		recruiter = body.get("recruiter") or {}
		return Session(
			recruiter_id=str(recruiter.get("id") or ""),
			assignee=str(recruiter.get("assignee") or ""),
			exec=bool(recruiter.get("exec")),
			team_mgmt=bool(recruiter.get("team_mgmt")),
		)
