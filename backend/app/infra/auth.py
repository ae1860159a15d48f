"""Authentication helpers for FastAPI endpoints.

Recruiters authenticate with an opaque auth key stored in the `auth-key`
cookie. Every dashboard request resolves the key against the `recruiters`
collection; the permission flags on that record become roles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from fastapi import Cookie, Depends, HTTPException, status

from app.infra import pocketbase
from app.infra.cookies import AUTH_COOKIE_NAME
from app.obs import logging as obs_logging
from app.obs import metrics as obs_metrics

ROLE_EXEC = "exec"
ROLE_TEAM_MGMT = "team_mgmt"


@dataclass(slots=True)
class Recruiter:
	id: str
	assignee: str
	exec: bool = False
	team_mgmt: bool = False

	@property
	def roles(self) -> Tuple[str, ...]:
		roles = []
		if self.exec:
			roles.append(ROLE_EXEC)
		if self.team_mgmt:
			roles.append(ROLE_TEAM_MGMT)
		return tuple(roles)

	def has_role(self, role: str) -> bool:
		return role in self.roles

	@classmethod
	def from_record(cls, record: Mapping[str, Any]) -> "Recruiter":
		return cls(
			id=str(record.get("id") or ""),
			assignee=str(record.get("assignee") or ""),
			exec=bool(record.get("exec")),
			team_mgmt=bool(record.get("team_mgmt")),
		)

	def to_public(self, *, with_flags: bool = False) -> dict[str, Any]:
		payload: dict[str, Any] = {"id": self.id, "assignee": self.assignee}
		if with_flags:
			payload["exec"] = self.exec
			payload["team_mgmt"] = self.team_mgmt
		return payload


async def lookup_recruiter(auth_key: str) -> Optional[Recruiter]:
	"""Return the recruiter owning ``auth_key`` or None when no record matches.

	Store failures propagate as :class:`PocketBaseError`.
	"""
	client = await pocketbase.get_client()
	record = await client.first("recruiters", filter=pocketbase.eq("auth_key", auth_key))
	if record is None:
		return None
	return Recruiter.from_record(record)


async def get_current_recruiter(
	auth_key: Optional[str] = Cookie(default=None, alias=AUTH_COOKIE_NAME),
) -> Recruiter:
	"""Resolve the authenticated recruiter from the auth-key cookie."""
	if not auth_key:
		obs_metrics.inc_auth_check("missing")
		raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
	try:
		recruiter = await lookup_recruiter(auth_key)
	except pocketbase.PocketBaseError:
		obs_metrics.inc_auth_check("error")
		raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication failed")
	if recruiter is None:
		obs_metrics.inc_auth_check("invalid")
		raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authentication")
	obs_metrics.inc_auth_check("ok")
	obs_logging.bind_recruiter(recruiter.id)
	return recruiter


def require_roles(*required: str, detail: str = "Permission denied"):
	"""Return a dependency that enforces the presence of any of the given roles.

	Usage:
		@router.delete("/{id}", dependencies=[Depends(require_roles("exec"))])
	"""
	required_set = {str(r).strip() for r in required if str(r).strip()}

	async def _dep(recruiter: Recruiter = Depends(get_current_recruiter)) -> Recruiter:
		if not required_set:
			return recruiter
		if any(recruiter.has_role(r) for r in required_set):
			return recruiter
		raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

	return _dep
