"""Dashboard routes for the club member directory."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from app.api.pagination import clamp_limit, clamp_page
from app.domain.members import schemas
from app.domain.members.service import MemberService
from app.infra.auth import Recruiter, get_current_recruiter
from app.obs import audit as obs_audit

router = APIRouter(prefix="/api/dashboard/club-members", tags=["club-members"])

_member_service = MemberService()


@router.get("")
async def list_members(
	search: Optional[str] = Query(default=None),
	type: Optional[str] = Query(default=None),
	team: Optional[str] = Query(default=None),
	status_: Optional[str] = Query(default=None, alias="status"),
	page: Optional[int] = Query(default=None),
	limit: Optional[int] = Query(default=None),
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	return await _member_service.list_members(
		search=search or None,
		member_type=type or None,
		team=team or None,
		status_=status_ or None,
		page=clamp_page(page),
		limit=clamp_limit(limit, default=50),
	)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_member(
	request: Request,
	payload: schemas.ClubMemberCreate,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	member = await _member_service.create_member(payload)
	await obs_audit.log_exec_activity(
		request, recruiter, "Create Member", "club_member", resource_id=member.get("id"), details=payload.name
	)
	return {"message": "Club member created successfully", "member": member}


@router.get("/{member_id}")
async def get_member(member_id: str, recruiter: Recruiter = Depends(get_current_recruiter)) -> dict:
	return {"member": await _member_service.get_member(member_id)}


@router.put("/{member_id}")
async def update_member(
	request: Request,
	member_id: str,
	payload: schemas.ClubMemberUpdate,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	member = await _member_service.update_member(member_id, payload)
	await obs_audit.log_exec_activity(
		request, recruiter, "Update Member", "club_member", resource_id=member_id, details=payload.name
	)
	return {"message": "Club member updated successfully", "member": member}


@router.delete("/{member_id}")
async def delete_member(
	request: Request,
	member_id: str,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	await _member_service.delete_member(member_id)
	await obs_audit.log_exec_activity(request, recruiter, "Delete Member", "club_member", resource_id=member_id)
	return {"message": "Club member deleted successfully"}
