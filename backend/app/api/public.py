"""Public site endpoints: forms, site switches and published content."""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from app.domain.applications.schemas import JoinRequest
from app.domain.applications.service import ApplicationService
from app.domain.events.service import EventService
from app.domain.resources.service import ResourceService
from app.domain.roster.schemas import BosOnboarding, Photo
from app.domain.roster.service import RosterService
from app.domain.site import schemas as site_schemas
from app.domain.site.service import SiteService
from app.infra import turnstile
from app.infra.auth import ROLE_EXEC, Recruiter, require_roles
from app.infra.rate_limit import limit_by_ip
from app.obs import audit as obs_audit
from app.obs import metrics as obs_metrics
from app.obs.logging import get_logger
from app.obs.middleware import client_ip
from app.settings import settings

router = APIRouter(prefix="/api", tags=["public"])

logger = get_logger("nodex.public")

_application_service = ApplicationService()
_site_service = SiteService()
_roster_service = RosterService()
_event_service = EventService()
_resource_service = ResourceService()

_BOOLEAN_FIELDS = ("newsletter", "events_notification")
_MISSING_ERROR_TYPES = ("missing", "string_too_short", "too_short")


@router.post("/join", dependencies=[Depends(limit_by_ip("join", "rate_limit_join"))])
async def join(request: Request, payload: JoinRequest) -> dict:
	if not await _site_service.is_accepting():
		obs_metrics.inc_public_form_reject("join", "closed")
		raise HTTPException(status.HTTP_403_FORBIDDEN, detail="Applications are currently closed")
	if not await turnstile.verify(payload.turnstileToken, remote_ip=client_ip(request)):
		obs_metrics.inc_public_form_reject("join", "captcha")
		raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Captcha verification failed")
	created = await _application_service.submit(payload)
	logger.info("application_submitted", extra={"application_id": created.get("id")})
	return {
		"success": True,
		"message": "Application submitted successfully! We'll get back to you soon.",
		"applicationId": created.get("id"),
	}


@router.post(
	"/collaborate",
	status_code=status.HTTP_201_CREATED,
	dependencies=[Depends(limit_by_ip("collaborate", "rate_limit_collaborate"))],
)
async def collaborate(request: Request, payload: site_schemas.CollaborationRequest) -> dict:
	if not await turnstile.verify(payload.turnstileToken, remote_ip=client_ip(request)):
		obs_metrics.inc_public_form_reject("collaborate", "captcha")
		raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Captcha verification failed")
	created = await _site_service.submit_collaboration(payload)
	return {
		"success": True,
		"message": "Collaboration request submitted successfully",
		"id": created.get("id"),
	}


@router.get("/collaborate")
async def list_collaborations(recruiter: Recruiter = Depends(require_roles(ROLE_EXEC))) -> dict:
	return await _site_service.list_collaborations()


async def _read_photo(upload: UploadFile) -> Photo:
	# One byte past the limit is enough to reject an oversized upload
	content = await upload.read(settings.bos_photo_max_bytes + 1)
	return Photo(filename=upload.filename or "photo", content_type=upload.content_type, content=content)


async def _read_onboarding(request: Request) -> tuple[BosOnboarding, Photo | None]:
	form = await request.form()
	fields: dict[str, object] = {}
	photo: Photo | None = None
	for key, value in form.multi_items():
		if isinstance(value, UploadFile):
			if key == "photo":
				photo = await _read_photo(value)
			continue
		fields[key] = value
	raw_availability = fields.get("availability")
	if raw_availability:
		try:
			fields["availability"] = json.loads(str(raw_availability))
		except ValueError:
			raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="availability must be a JSON array")
	for key in _BOOLEAN_FIELDS:
		fields[key] = str(fields.get(key, "")).lower() == "true"
	try:
		return BosOnboarding.model_validate(fields), photo
	except ValidationError as exc:
		errors = exc.errors()
		first = errors[0] if errors else {}
		field = first["loc"][0] if first.get("loc") else "form"
		missing = first.get("type") in _MISSING_ERROR_TYPES
		obs_metrics.inc_public_form_reject("bos_onboarding", "validation")
		raise HTTPException(
			status.HTTP_400_BAD_REQUEST,
			detail={"message": f"{field} is required" if missing else f"Invalid {field}", "errors": jsonable_encoder(errors)},
		) from exc


@router.post(
	"/bos-onboarding",
	status_code=status.HTTP_201_CREATED,
	dependencies=[Depends(limit_by_ip("bos_onboarding", "rate_limit_onboarding"))],
)
async def bos_onboarding(request: Request) -> dict:
	form, photo = await _read_onboarding(request)
	created = await _roster_service.submit_onboarding(form, photo)
	return {
		"success": True,
		"message": "Onboarding form submitted successfully",
		"id": created.get("id"),
	}


@router.get("/web-metadata", response_model=site_schemas.WebMetadata)
async def web_metadata() -> site_schemas.WebMetadata:
	return await _site_service.metadata()


@router.post("/web-metadata", response_model=site_schemas.WebMetadata)
async def update_web_metadata(
	request: Request,
	payload: site_schemas.WebMetadataUpdate,
	recruiter: Recruiter = Depends(require_roles(ROLE_EXEC)),
) -> site_schemas.WebMetadata:
	updated = await _site_service.update_metadata(payload)
	await obs_audit.log_exec_activity(
		request,
		recruiter,
		"Update Site Settings",
		"web_metadata",
		details=f"maintenance={updated.maintenance} accepting={updated.accepting}",
	)
	return updated


@router.post("/activity-log")
async def activity_log(request: Request, payload: site_schemas.VisitorActivity) -> dict:
	ok = await _site_service.log_visit(
		payload,
		ip_address=client_ip(request),
		user_agent=request.headers.get("user-agent"),
		referrer=request.headers.get("referer"),
	)
	if not ok:
		raise HTTPException(
			status.HTTP_500_INTERNAL_SERVER_ERROR,
			detail={"message": "Failed to log activity", "success": False},
		)
	return {"success": True}


@router.get("/events")
async def public_events() -> dict:
	return await _event_service.public_events()


@router.get("/team")
async def public_team() -> dict:
	return await _roster_service.public_team()


@router.get("/resources")
async def public_resources() -> dict:
	return await _resource_service.public_resources()
