"""Dashboard routes for published content: core team, BOS, events and resources."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from app.api.pagination import clamp_limit, clamp_page
from app.domain.events.schemas import EventRequest
from app.domain.events.service import EventService
from app.domain.resources.schemas import ResourceRequest
from app.domain.resources.service import ResourceService
from app.domain.roster.schemas import BosMemberRequest, CoreMemberRequest
from app.domain.roster.service import RosterService
from app.infra.auth import ROLE_EXEC, Recruiter, get_current_recruiter, require_roles
from app.obs import audit as obs_audit

router = APIRouter(prefix="/api/dashboard", tags=["content"])

_roster_service = RosterService()
_event_service = EventService()
_resource_service = ResourceService()


@router.get("/team")
async def list_core_team(recruiter: Recruiter = Depends(get_current_recruiter)) -> dict:
	return {"members": await _roster_service.list_core()}


@router.post("/team", status_code=status.HTTP_201_CREATED)
async def create_core_member(
	request: Request,
	payload: CoreMemberRequest,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	member = await _roster_service.create_core(payload)
	await obs_audit.log_exec_activity(
		request, recruiter, "Create Team Member", "nodex_team", resource_id=member.get("id"), details=payload.name
	)
	return {"member": member}


@router.put("/team/{member_id}")
async def update_core_member(
	request: Request,
	member_id: str,
	payload: CoreMemberRequest,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	member = await _roster_service.update_core(member_id, payload)
	await obs_audit.log_exec_activity(
		request, recruiter, "Update Team Member", "nodex_team", resource_id=member_id, details=payload.name
	)
	return {"member": member}


@router.delete("/team/{member_id}")
async def delete_core_member(
	request: Request,
	member_id: str,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	await _roster_service.delete_core(member_id)
	await obs_audit.log_exec_activity(request, recruiter, "Delete Team Member", "nodex_team", resource_id=member_id)
	return {"message": "Team member deleted successfully"}


@router.get("/bos")
async def list_bos(recruiter: Recruiter = Depends(get_current_recruiter)) -> dict:
	return {"members": await _roster_service.list_bos()}


@router.post("/bos", status_code=status.HTTP_201_CREATED)
async def create_bos(
	request: Request,
	payload: BosMemberRequest,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	member = await _roster_service.create_bos(payload)
	await obs_audit.log_exec_activity(
		request, recruiter, "Create BOS Member", "bos", resource_id=member.get("id"), details=payload.name
	)
	return {"member": member}


@router.put("/bos/{member_id}")
async def update_bos(
	request: Request,
	member_id: str,
	payload: BosMemberRequest,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	member = await _roster_service.update_bos(member_id, payload)
	await obs_audit.log_exec_activity(
		request, recruiter, "Update BOS Member", "bos", resource_id=member_id, details=payload.name
	)
	return {"member": member}


@router.delete("/bos/{member_id}")
async def delete_bos(
	request: Request,
	member_id: str,
	recruiter: Recruiter = Depends(require_roles(ROLE_EXEC, detail="Permission Denied")),
) -> dict:
	removed = await _roster_service.delete_bos(member_id)
	await obs_audit.log_exec_activity(
		request, recruiter, "Delete BOS Member", "bos", resource_id=member_id, details=removed.get("name")
	)
	return {"message": "BOS member deleted successfully"}


@router.get("/events")
async def list_events(
	page: Optional[int] = Query(default=None),
	limit: Optional[int] = Query(default=None),
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	return await _event_service.list_events(page=clamp_page(page), limit=clamp_limit(limit, default=50))


@router.post("/events", status_code=status.HTTP_201_CREATED)
async def create_event(
	request: Request,
	payload: EventRequest,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	event = await _event_service.create_event(payload)
	await obs_audit.log_exec_activity(
		request, recruiter, "Create Event", "event", resource_id=event.get("id"), details=payload.title
	)
	return {"event": event}


@router.put("/events/{event_id}")
async def update_event(
	request: Request,
	event_id: str,
	payload: EventRequest,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	event = await _event_service.update_event(event_id, payload)
	await obs_audit.log_exec_activity(
		request, recruiter, "Update Event", "event", resource_id=event_id, details=payload.title
	)
	return {"event": event}


@router.delete("/events/{event_id}")
async def delete_event(
	request: Request,
	event_id: str,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	await _event_service.delete_event(event_id)
	await obs_audit.log_exec_activity(request, recruiter, "Delete Event", "event", resource_id=event_id)
	return {"message": "Event deleted successfully"}


@router.get("/resources")
async def list_resources(
	category: Optional[str] = Query(default=None),
	search: Optional[str] = Query(default=None),
	page: Optional[int] = Query(default=None),
	limit: Optional[int] = Query(default=None),
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	return await _resource_service.list_resources(
		page=clamp_page(page),
		limit=clamp_limit(limit, default=50),
		category=category or None,
		search=search or None,
	)


@router.post("/resources", status_code=status.HTTP_201_CREATED)
async def create_resource(
	request: Request,
	payload: ResourceRequest,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	resource = await _resource_service.create_resource(payload)
	await obs_audit.log_exec_activity(
		request, recruiter, "Create Resource", "resource", resource_id=resource.get("id"), details=payload.title
	)
	return {"resource": resource}


@router.put("/resources/{resource_id}")
async def update_resource(
	request: Request,
	resource_id: str,
	payload: ResourceRequest,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	resource = await _resource_service.update_resource(resource_id, payload)
	await obs_audit.log_exec_activity(
		request, recruiter, "Update Resource", "resource", resource_id=resource_id, details=payload.title
	)
	return {"resource": resource}


@router.delete("/resources/{resource_id}")
async def delete_resource(
	request: Request,
	resource_id: str,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	await _resource_service.delete_resource(resource_id)
	await obs_audit.log_exec_activity(request, recruiter, "Delete Resource", "resource", resource_id=resource_id)
	return {"message": "Resource deleted successfully"}


@router.get("/stats/team")
async def team_stats(recruiter: Recruiter = Depends(get_current_recruiter)) -> dict:
	return {"total": await _roster_service.count_core()}


@router.get("/stats/resources")
async def resource_stats(recruiter: Recruiter = Depends(get_current_recruiter)) -> dict:
	return {"active": await _resource_service.count_resources()}


@router.get("/stats/event-metrics")
async def event_stats(recruiter: Recruiter = Depends(get_current_recruiter)) -> dict:
	return {"total": await _event_service.count_events()}
