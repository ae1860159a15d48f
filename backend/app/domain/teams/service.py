"""Service for Teams."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from app.domain.members.service import CLUB_MEMBERS, CORE_TEAM, READONLY_PREFIX, core_as_member, split_skills
from app.domain.teams.schemas import TeamCreateRequest, TeamUpdateRequest
from app.infra import pocketbase
from app.obs.logging import get_logger

TEAMS = "teams"

logger = get_logger("nodex.teams")


class TeamService:
	async def list_teams(self) -> list[dict[str, Any]]:
		"""List teams, newest first, each annotated with ``memberCount``."""
		client = await pocketbase.get_client()
		teams = await client.list_all(TEAMS, sort="-created", expand="team_lead")
		for team in teams:
			team["memberCount"] = await client.count(CLUB_MEMBERS, filter=pocketbase.like("teams", team["id"]))
		return teams

	async def create_team(self, recruiter_id: str, payload: TeamCreateRequest) -> dict[str, Any]:
		record = payload.to_record()
		record["created_by"] = recruiter_id
		client = await pocketbase.get_client()
		return await client.create_record(TEAMS, record)

	async def get_team(self, team_id: str) -> dict[str, Any]:
		client = await pocketbase.get_client()
		try:
			team = await client.get_record(TEAMS, team_id)
		except pocketbase.PocketBaseError as exc:
			if exc.is_not_found:
				raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Team not found") from exc
			raise
		members = await client.list_all(CLUB_MEMBERS, filter=pocketbase.like("teams", team_id), sort="name")
		return {"team": team, "members": members}

	async def update_team(self, team_id: str, payload: TeamUpdateRequest) -> dict[str, Any]:
		client = await pocketbase.get_client()
		return await client.update_record(TEAMS, team_id, payload.to_record())

	async def delete_team(self, team_id: str) -> None:
		"""Detach the team from every member, then delete it."""
		client = await pocketbase.get_client()
		members = await client.list_all(CLUB_MEMBERS, filter=pocketbase.like("teams", team_id))
		for member in members:
			remaining = [t for t in (member.get("teams") or []) if t != team_id]
			await client.update_record(CLUB_MEMBERS, member["id"], {"teams": remaining})
		try:
			await client.delete_record(TEAMS, team_id)
		except pocketbase.PocketBaseError as exc:
			if exc.is_not_found:
				raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Team not found") from exc
			raise
		logger.info("team_deleted", extra={"team_id": team_id, "detached_members": len(members)})

	async def list_team_members(self, team_id: str) -> list[dict[str, Any]]:
		client = await pocketbase.get_client()
		members = await client.list_all(CLUB_MEMBERS, filter=pocketbase.like("teams", team_id), sort="name")
		for member in members:
			member["source"] = CLUB_MEMBERS
		core = await client.list_all(CORE_TEAM, filter=pocketbase.like("teams", team_id), sort="name")
		members.extend(core_as_member(record) for record in core)
		return members

	async def _resolve_club_member(self, member_id: str, *, create: bool = True) -> dict[str, Any]:
		"""Return the ``club_members`` record behind ``member_id``.

		Core team ids (``nodex_`` prefix) resolve to the club member with the same
		name and email, created on first use when ``create`` is set.
		"""
		client = await pocketbase.get_client()
		if not member_id.startswith(READONLY_PREFIX):
			try:
				return await client.get_record(CLUB_MEMBERS, member_id)
			except pocketbase.PocketBaseError as exc:
				if exc.is_not_found:
					raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Member not found") from exc
				raise
		try:
			core = await client.get_record(CORE_TEAM, member_id[len(READONLY_PREFIX) :])
		except pocketbase.PocketBaseError as exc:
			if exc.is_not_found:
				raise HTTPException(status.HTTP_404_NOT_FOUND, detail="NodeX team member not found") from exc
			raise
		existing = await client.first(
			CLUB_MEMBERS,
			filter=pocketbase.all_of(
				[pocketbase.eq("name", core.get("name") or ""), pocketbase.eq("email", core.get("email") or "")]
			),
		)
		if existing is not None:
			return existing
		if not create:
			raise HTTPException(
				status.HTTP_404_NOT_FOUND, detail="Club member record not found for this NodeX team member"
			)
		category = core.get("category") or ""
		return await client.create_record(
			CLUB_MEMBERS,
			{
				"name": core.get("name") or "",
				"email": core.get("email") or "",
				"phone": core.get("phone") or "",
				"member_type": "bos" if category == "direc" else category,
				"position": core.get("title") or "",
				"bio": core.get("description") or "",
				"linkedin_url": core.get("linkedin") or "",
				"github_url": core.get("github") or "",
				"qualification": core.get("qualification") or "",
				"skills": split_skills(core.get("skills")),
				"status": "active",
				"teams": [],
			},
		)

	async def add_member(self, team_id: str, member_id: str) -> dict[str, Any]:
		await self.get_team(team_id)
		member = await self._resolve_club_member(member_id)
		teams = list(member.get("teams") or [])
		if team_id in teams:
			raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Member is already in this team")
		teams.append(team_id)
		client = await pocketbase.get_client()
		return await client.update_record(CLUB_MEMBERS, member["id"], {"teams": teams})

	async def remove_member(self, team_id: str, member_id: str) -> None:
		member = await self._resolve_club_member(member_id, create=False)
		teams = [t for t in (member.get("teams") or []) if t != team_id]
		client = await pocketbase.get_client()
		await client.update_record(CLUB_MEMBERS, member["id"], {"teams": teams})
