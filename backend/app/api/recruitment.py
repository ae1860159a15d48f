"""FastAPI routes for recruitment review."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from app.domain.applications import schemas
from app.domain.applications.service import ApplicationService
from app.infra.auth import Recruiter, get_current_recruiter
from app.obs import audit as obs_audit

router = APIRouter(prefix="/api", tags=["recruitment"])

_application_service = ApplicationService()


@router.get("/applications", response_model=schemas.ApplicationsResponse)
async def list_applications(
	type: schemas.ApplicationType = Query(default="pending"),
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> schemas.ApplicationsResponse:
	applications = await _application_service.list_applications(type)
	return schemas.ApplicationsResponse(applications=applications, type=type, count=len(applications))


@router.post("/mark-application")
async def mark_application(
	request: Request,
	payload: schemas.MarkApplicationRequest,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	result = await _application_service.decide(recruiter, payload.applicationId, payload.status, payload.remarks)
	await obs_audit.log_exec_activity(
		request,
		recruiter,
		"Approve Application" if payload.status == "approved" else "Reject Application",
		"application",
		resource_id=payload.applicationId,
		details=f"Application {payload.status}: {result['markedData']['remarks']}",
	)
	return result


@router.post("/rollback-application")
async def rollback_application(
	request: Request,
	payload: schemas.RollbackApplicationRequest,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	result = await _application_service.rollback(recruiter, payload.applicationId, payload.reason)
	await obs_audit.log_exec_activity(
		request,
		recruiter,
		"Rollback Application",
		"application",
		resource_id=payload.applicationId,
		details=f"Rolled back from {result['previousStatus']}: {payload.reason.strip()}",
	)
	return result


@router.get("/dashboard/stats/applications", response_model=schemas.ApplicationStats)
async def application_stats(
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> schemas.ApplicationStats:
	return await _application_service.stats()
