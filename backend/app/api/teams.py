"""Dashboard routes for project teams and their members."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from app.domain.teams import schemas
from app.domain.teams.service import TeamService
from app.infra.auth import ROLE_TEAM_MGMT, Recruiter, get_current_recruiter, require_roles
from app.obs import audit as obs_audit

router = APIRouter(prefix="/api/dashboard/teams", tags=["teams"])

_team_service = TeamService()

require_team_mgmt = require_roles(ROLE_TEAM_MGMT, detail="Insufficient permissions for team management")


@router.get("")
async def list_teams(recruiter: Recruiter = Depends(require_team_mgmt)) -> dict:
	return {"teams": await _team_service.list_teams()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_team(
	request: Request,
	payload: schemas.TeamCreateRequest,
	recruiter: Recruiter = Depends(require_team_mgmt),
) -> dict:
	team = await _team_service.create_team(recruiter.id, payload)
	await obs_audit.log_exec_activity(
		request, recruiter, "Create Team", "team", resource_id=team.get("id"), details=f"Created team {payload.name}"
	)
	return {"team": team}


@router.get("/{team_id}")
async def get_team(team_id: str, recruiter: Recruiter = Depends(get_current_recruiter)) -> dict:
	return await _team_service.get_team(team_id)


@router.put("/{team_id}")
async def update_team(
	request: Request,
	team_id: str,
	payload: schemas.TeamUpdateRequest,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	team = await _team_service.update_team(team_id, payload)
	await obs_audit.log_exec_activity(
		request, recruiter, "Update Team", "team", resource_id=team_id, details=f"Updated team {payload.name}"
	)
	return {"message": "Team updated successfully", "team": team}


@router.delete("/{team_id}")
async def delete_team(
	request: Request,
	team_id: str,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	await _team_service.delete_team(team_id)
	await obs_audit.log_exec_activity(request, recruiter, "Delete Team", "team", resource_id=team_id)
	return {"message": "Team deleted successfully"}


@router.get("/{team_id}/members")
async def list_team_members(team_id: str, recruiter: Recruiter = Depends(require_team_mgmt)) -> dict:
	return {"members": await _team_service.list_team_members(team_id)}


@router.post("/{team_id}/members", status_code=status.HTTP_201_CREATED)
async def add_team_member(
	request: Request,
	team_id: str,
	payload: schemas.TeamMemberAddRequest,
	recruiter: Recruiter = Depends(require_team_mgmt),
) -> dict:
	member = await _team_service.add_member(team_id, payload.member_id)
	await obs_audit.log_exec_activity(
		request,
		recruiter,
		"Add Team Member",
		"team",
		resource_id=team_id,
		details=f"Added {member.get('name') or payload.member_id}",
	)
	return {"message": "Member added to team successfully", "member": member}


async def _remove(request: Request, recruiter: Recruiter, team_id: str, member_id: str) -> dict:
	await _team_service.remove_member(team_id, member_id)
	await obs_audit.log_exec_activity(
		request, recruiter, "Remove Team Member", "team", resource_id=team_id, details=f"Removed {member_id}"
	)
	return {"success": True}


@router.delete("/{team_id}/members")
async def remove_team_member_by_query(
	request: Request,
	team_id: str,
	member_id: Optional[str] = Query(default=None),
	recruiter: Recruiter = Depends(require_team_mgmt),
) -> dict:
	if not member_id:
		raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Member ID is required")
	return await _remove(request, recruiter, team_id, member_id)


@router.delete("/{team_id}/members/{member_id}")
async def remove_team_member(
	request: Request,
	team_id: str,
	member_id: str,
	recruiter: Recruiter = Depends(require_team_mgmt),
) -> dict:
	return await _remove(request, recruiter, team_id, member_id)
