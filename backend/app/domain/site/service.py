"""Site-wide switches, visitor activity and collaboration requests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from app.domain.site.schemas import CollaborationRequest, VisitorActivity, WebMetadata, WebMetadataUpdate
from app.infra import pocketbase
from app.obs.logging import get_logger

WEB_METADATA = "web_metadata"
ACTIVITY_LOG = "activity_log"
COLLABORATIONS = "nodex_collaboration_requests"

logger = get_logger("nodex.site")


def _metadata_from_record(record: Optional[dict[str, Any]]) -> WebMetadata:
	if not record:
		return WebMetadata()
	maintenance = record.get("maintenance")
	accepting = record.get("accepting")
	return WebMetadata(
		maintenance=bool(maintenance) if maintenance is not None else False,
		accepting=bool(accepting) if accepting is not None else True,
		updated=record.get("updated"),
	)


class SiteService:
	async def metadata(self) -> WebMetadata:
		"""Newest web_metadata record; defaults apply when none exists."""
		client = await pocketbase.get_client()
		record = await client.first(WEB_METADATA, sort="-created")
		return _metadata_from_record(record)

	async def is_accepting(self) -> bool:
		try:
			return (await self.metadata()).accepting
		except pocketbase.PocketBaseError:
			logger.warning("web_metadata_unavailable")
			return True

	async def update_metadata(self, payload: WebMetadataUpdate) -> WebMetadata:
		current = await self.metadata()
		record = {
			"maintenance": payload.maintenance if payload.maintenance is not None else current.maintenance,
			"accepting": payload.accepting if payload.accepting is not None else current.accepting,
		}
		client = await pocketbase.get_client()
		created = await client.create_record(WEB_METADATA, record)
		return _metadata_from_record(created)

	async def log_visit(
		self,
		activity: VisitorActivity,
		*,
		ip_address: Optional[str],
		user_agent: Optional[str],
		referrer: Optional[str],
	) -> bool:
		"""Persist one visitor activity entry; returns False when the store refuses it."""
		record = {
			"ip_address": activity.ip_address or ip_address or "unknown",
			"user_agent": activity.user_agent or user_agent or "unknown",
			"action": activity.action or "page_view",
			"page_url": activity.page_url or referrer or "unknown",
			"referrer": activity.referrer or referrer,
			"timestamp": activity.timestamp or datetime.now(timezone.utc).isoformat(),
			"fingerprint": activity.fingerprint.model_dump(exclude_none=True) if activity.fingerprint else None,
			"additional_data": activity.additional_data,
		}
		client = await pocketbase.get_client()
		try:
			await client.create_record(ACTIVITY_LOG, {k: v for k, v in record.items() if v is not None})
		except pocketbase.PocketBaseError as exc:
			logger.warning("activity_log_write_failed", extra={"error": exc.message})
			return False
		return True

	async def submit_collaboration(self, payload: CollaborationRequest) -> dict[str, Any]:
		record = {
			"organization": payload.organization,
			"contact_name": payload.contactName,
			"email": str(payload.email),
			"phone": payload.phone or "",
			"request_types": payload.requestTypes,
			"details": payload.details,
			"status": "pending",
		}
		client = await pocketbase.get_client()
		return await client.create_record(COLLABORATIONS, record)

	async def list_collaborations(self) -> dict[str, Any]:
		client = await pocketbase.get_client()
		items = await client.list_all(COLLABORATIONS, sort="-created")
		return {"success": True, "requests": items, "totalRequests": len(items)}
