"""Service for the club member directory.

The directory merges two collections: ``club_members`` (editable) and the core
team roster in ``nodex_team``, which appears read-only with ``nodex_``
prefixed ids.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import HTTPException, status

from app.api.pagination import paginate
from app.domain.members import filters
from app.domain.members.schemas import ClubMemberCreate, ClubMemberUpdate
from app.infra import pocketbase

CLUB_MEMBERS = "club_members"
CORE_TEAM = "nodex_team"
TEAMS = "teams"
READONLY_PREFIX = "nodex_"


def is_readonly_id(member_id: str) -> bool:
	return member_id.startswith(READONLY_PREFIX)


def split_skills(value: Any) -> list[str]:
	if isinstance(value, list):
		return [str(item).strip() for item in value if str(item).strip()]
	if not value:
		return []
	return [part.strip() for part in str(value).split(",") if part.strip()]


def core_as_member(record: dict[str, Any]) -> dict[str, Any]:
	"""Project a ``nodex_team`` record onto the club member shape."""
	category = record.get("category") or ""
	return {
		"id": f"{READONLY_PREFIX}{record.get('id')}",
		"name": record.get("name") or "",
		"email": record.get("email") or "",
		"student_id": "",
		"phone": record.get("phone") or "",
		"member_type": "bos" if category == "direc" else category,
		"position": record.get("title") or "",
		"department": "",
		"year": None,
		"teams": list(record.get("teams") or []),
		"skills": split_skills(record.get("skills")),
		"bio": record.get("description") or "",
		"linkedin_url": record.get("linkedin") or "",
		"github_url": record.get("github") or "",
		"portfolio_url": "",
		"status": "active",
		"created": record.get("created"),
		"updated": record.get("updated"),
		"source": CORE_TEAM,
		"readonly": True,
		"photo": record.get("photo") or "",
		"qualification": record.get("qualification") or "",
	}


def _store_filter(search: Optional[str], member_type: Optional[str], team: Optional[str], status_: Optional[str]) -> str:
	clauses = []
	if search:
		clauses.append(
			pocketbase.any_of(
				[
					pocketbase.like("name", search),
					pocketbase.like("email", search),
					pocketbase.like("student_id", search),
				]
			)
		)
	if member_type:
		clauses.append(pocketbase.eq("member_type", member_type))
	if team:
		clauses.append(pocketbase.like("teams", team))
	if status_:
		clauses.append(pocketbase.eq("status", status_))
	return pocketbase.all_of(clauses)


class MemberService:
	async def list_members(
		self,
		*,
		search: Optional[str] = None,
		member_type: Optional[str] = None,
		team: Optional[str] = None,
		status_: Optional[str] = None,
		page: int = 1,
		limit: int = 50,
	) -> dict[str, Any]:
		client = await pocketbase.get_client()
		members = await client.list_all(
			CLUB_MEMBERS,
			filter=_store_filter(search, member_type, team, status_),
			sort="-created",
			expand=TEAMS,
		)
		for member in members:
			member.setdefault("source", CLUB_MEMBERS)
		core = [core_as_member(record) for record in await client.list_all(CORE_TEAM, sort="pos")]
		members.extend(
			filters.filter_members(core, search=search, status=status_, member_type=member_type, team=team)
		)
		members.sort(key=lambda m: str(m.get("created") or ""), reverse=True)
		page_items, total, pages = paginate(members, page, limit)
		teams = await client.list_all(TEAMS, sort="name")
		return {
			"members": page_items,
			"totalItems": total,
			"totalPages": pages,
			"page": page,
			"teams": teams,
		}

	async def get_member(self, member_id: str) -> dict[str, Any]:
		client = await pocketbase.get_client()
		try:
			if is_readonly_id(member_id):
				record = await client.get_record(CORE_TEAM, member_id[len(READONLY_PREFIX) :])
				return core_as_member(record)
			return await client.get_record(CLUB_MEMBERS, member_id, expand=TEAMS)
		except pocketbase.PocketBaseError as exc:
			if exc.is_not_found:
				raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Member not found") from exc
			raise

	async def create_member(self, payload: ClubMemberCreate) -> dict[str, Any]:
		client = await pocketbase.get_client()
		return await client.create_record(CLUB_MEMBERS, payload.to_record())

	async def update_member(self, member_id: str, payload: ClubMemberUpdate) -> dict[str, Any]:
		self._ensure_editable(member_id)
		client = await pocketbase.get_client()
		return await client.update_record(CLUB_MEMBERS, member_id, payload.to_record())

	async def delete_member(self, member_id: str) -> None:
		self._ensure_editable(member_id)
		client = await pocketbase.get_client()
		await client.delete_record(CLUB_MEMBERS, member_id)

	@staticmethod
	def _ensure_editable(member_id: str) -> None:
		if is_readonly_id(member_id):
			raise HTTPException(
				status.HTTP_400_BAD_REQUEST,
				detail="Core team members are managed from the team roster",
			)
