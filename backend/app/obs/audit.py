from __future__ import annotations

from typing import Any, Mapping, Optional

from fastapi import Request

from app.infra import pocketbase
from app.infra.auth import Recruiter
from app.obs import metrics as obs_metrics
from app.obs.logging import current_request_id, get_logger
from app.obs.middleware import client_ip

audit_logger = get_logger("audit.exec")

EXEC_ACTIVITY_COLLECTION = "exec_activity"


def build_exec_activity(
	request: Request,
	recruiter: Recruiter,
	*,
	action: str,
	resource_type: str,
	resource_id: Optional[str] = None,
	details: Optional[str] = None,
) -> dict[str, Any]:
	return {
		"action": action,
		"resource_type": resource_type,
		"resource_id": resource_id or "",
		"details": details or "",
		"performed_by": recruiter.assignee,
		"performer_id": recruiter.id,
		"ip_address": client_ip(request) or "",
		"user_agent": request.headers.get("user-agent") or "",
	}


async def write_exec_activity(record: Mapping[str, Any]) -> dict[str, Any]:
	"""Persist an exec activity record; store failures propagate."""
	client = await pocketbase.get_client()
	created = await client.create_record(EXEC_ACTIVITY_COLLECTION, record)
	obs_metrics.inc_exec_activity("ok")
	audit_logger.info(
		"exec_activity",
		extra={
			"action": record.get("action"),
			"resource_type": record.get("resource_type"),
			"resource_id": record.get("resource_id"),
			"performer_id": record.get("performer_id"),
			"request_id": current_request_id(),
		},
	)
	return created


async def log_exec_activity(
	request: Request,
	recruiter: Recruiter,
	action: str,
	resource_type: str,
	*,
	resource_id: Optional[str] = None,
	details: Optional[str] = None,
) -> None:
	"""Record an exec activity entry without ever failing the caller."""
	record = build_exec_activity(
		request,
		recruiter,
		action=action,
		resource_type=resource_type,
		resource_id=resource_id,
		details=details,
	)
	try:
		await write_exec_activity(record)
	except pocketbase.PocketBaseError as exc:
		obs_metrics.inc_exec_activity("error")
		audit_logger.warning(
			"exec_activity_write_failed",
			extra={"action": action, "resource_type": resource_type, "error": exc.message},
		)


async def recent_exec_activity(limit: int) -> list[dict[str, Any]]:
	"""Newest exec activity entries, each carrying ``recruiter.assignee``."""
	client = await pocketbase.get_client()
	items = await client.list_items(EXEC_ACTIVITY_COLLECTION, sort="-created", per_page=limit, expand="performer_id")
	for item in items:
		performer = (item.get("expand") or {}).get("performer_id") or {}
		item["recruiter"] = {"assignee": performer.get("assignee") or item.get("performed_by") or "Unknown"}
	return items
