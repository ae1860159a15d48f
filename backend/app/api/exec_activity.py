"""Dashboard routes for the exec activity trail."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel, ConfigDict, Field

from app.api.pagination import clamp_limit
from app.infra.auth import Recruiter, get_current_recruiter
from app.obs import audit as obs_audit

router = APIRouter(prefix="/api/dashboard/exec-activity", tags=["exec-activity"])


class ExecActivityRequest(BaseModel):
	model_config = ConfigDict(str_strip_whitespace=True)

	action: str = Field(min_length=1)
	resource_type: str = Field(min_length=1)
	resource_id: Optional[str] = None
	details: Optional[str] = None


@router.get("")
async def list_exec_activity(
	limit: Optional[int] = Query(default=None),
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	return {"activities": await obs_audit.recent_exec_activity(clamp_limit(limit, default=50))}


@router.post("", status_code=status.HTTP_201_CREATED)
async def record_exec_activity(
	request: Request,
	payload: ExecActivityRequest,
	recruiter: Recruiter = Depends(get_current_recruiter),
) -> dict:
	record = obs_audit.build_exec_activity(
		request,
		recruiter,
		action=payload.action,
		resource_type=payload.resource_type,
		resource_id=payload.resource_id,
		details=payload.details,
	)
	return {"activity": await obs_audit.write_exec_activity(record)}
