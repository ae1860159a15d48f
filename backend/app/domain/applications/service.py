"""Service for membership applications and their review."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import HTTPException, status

from app.domain.applications import history, review
from app.domain.applications.schemas import ApplicationStats, JoinSubmission
from app.infra import pocketbase
from app.infra.auth import Recruiter
from app.obs import metrics as obs_metrics
from app.obs.logging import get_logger

APPLICATIONS = "nodex_apps"
MARKED = "marked_apps"

logger = get_logger("nodex.applications")


def _fold_marked(item: dict[str, Any]) -> dict[str, Any]:
	application = dict((item.get("expand") or {}).get("application") or {})
	application["markedData"] = {
		"status": item.get("status"),
		"remarks": item.get("remarks"),
		"created": item.get("created"),
	}
	return application


class ApplicationService:
	async def list_applications(self, kind: str) -> list[dict[str, Any]]:
		"""Return one state's applications, newest first."""
		client = await pocketbase.get_client()
		if kind == "pending":
			return await client.list_all(APPLICATIONS, filter=pocketbase.eq("marked", False), sort="-created")
		items = await client.list_all(
			MARKED,
			filter=pocketbase.eq("status", kind),
			expand="application",
			sort="-created",
		)
		return [_fold_marked(item) for item in items if (item.get("expand") or {}).get("application")]

	async def stats(self) -> ApplicationStats:
		client = await pocketbase.get_client()
		pending = await client.count(APPLICATIONS, filter=pocketbase.eq("marked", False))
		approved = await client.count(MARKED, filter=pocketbase.eq("status", "approved"))
		rejected = await client.count(MARKED, filter=pocketbase.eq("status", "rejected"))
		return ApplicationStats(pending=pending, approved=approved, rejected=rejected, total=pending + approved + rejected)

	async def _load(self, application_id: str) -> dict[str, Any]:
		client = await pocketbase.get_client()
		try:
			return await client.get_record(APPLICATIONS, application_id)
		except pocketbase.PocketBaseError as exc:
			if exc.is_not_found:
				raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Application not found") from exc
			raise

	async def _marked_record(self, application_id: str) -> Optional[dict[str, Any]]:
		client = await pocketbase.get_client()
		return await client.first(MARKED, filter=pocketbase.eq("application", application_id))

	async def decide(
		self,
		recruiter: Recruiter,
		application_id: str,
		decision: str,
		remarks: str,
		*,
		now: Optional[datetime] = None,
	) -> dict[str, Any]:
		"""Approve or reject a Pending application."""
		application = await self._load(application_id)
		marked = await self._marked_record(application_id)
		current = review.state_from_marked(marked)
		if marked is None and application.get("marked"):
			# Flag set without a decision record; treat as already reviewed
			current = review.Approved("")
		try:
			next_state = review.transition(current, review.Decide(decision, remarks))
		except review.MissingRemarks as exc:
			raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
		except review.InvalidTransition as exc:
			raise HTTPException(status.HTTP_409_CONFLICT, detail="Application has already been reviewed") from exc

		trimmed = next_state.remarks
		entry = history.decision_entry(decision, recruiter.assignee, trimmed, now=now)
		mod_remarks = history.append(application.get("modRemarks"), entry)

		client = await pocketbase.get_client()
		marked_app = await client.create_record(
			MARKED,
			{
				"application": application_id,
				"status": decision,
				"remarks": trimmed,
				"recruiter": recruiter.id,
			},
		)
		try:
			await client.update_record(APPLICATIONS, application_id, {"marked": True, "modRemarks": mod_remarks})
		except pocketbase.PocketBaseError:
			# Keep the two collections consistent: no decision record without the flag
			await client.delete_record(MARKED, marked_app["id"])
			raise
		obs_metrics.inc_application_decision(decision)
		logger.info(
			"application_decided",
			extra={"application_id": application_id, "status": decision},
		)
		decided_at = marked_app.get("created") or (now or datetime.now(timezone.utc)).isoformat()
		return {
			"message": f"Application {decision} successfully",
			"markedApp": marked_app,
			"markedData": {"status": decision, "remarks": trimmed, "created": decided_at},
			"modRemarks": mod_remarks,
		}

	async def rollback(
		self,
		recruiter: Recruiter,
		application_id: str,
		reason: str,
		*,
		now: Optional[datetime] = None,
	) -> dict[str, Any]:
		"""Move an Approved or Rejected application back to Pending."""
		marked = await self._marked_record(application_id)
		current = review.state_from_marked(marked)
		try:
			review.transition(current, review.Rollback(reason))
		except review.MissingRemarks as exc:
			raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
		except review.InvalidTransition as exc:
			raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Application is not marked") from exc

		previous_status = current.status
		application = await self._load(application_id)
		entry = history.rollback_entry(previous_status, recruiter.assignee, reason.strip(), now=now)
		mod_remarks = history.append(application.get("modRemarks"), entry)

		client = await pocketbase.get_client()
		await client.update_record(APPLICATIONS, application_id, {"marked": False, "modRemarks": mod_remarks})
		try:
			await client.delete_record(MARKED, marked["id"])
		except pocketbase.PocketBaseError:
			# Decision record still stands, so restore the flag and history it belongs to
			await client.update_record(
				APPLICATIONS,
				application_id,
				{"marked": True, "modRemarks": application.get("modRemarks") or ""},
			)
			raise
		obs_metrics.inc_application_rollback(previous_status)
		logger.info(
			"application_rolled_back",
			extra={"application_id": application_id, "previous_status": previous_status},
		)
		return {
			"message": f"Application successfully rolled back from {previous_status}",
			"modRemarks": mod_remarks,
			"previousStatus": previous_status,
		}

	async def submit(self, submission: JoinSubmission, *, now: Optional[datetime] = None) -> dict[str, Any]:
		"""Store a new membership application in the Pending state."""
		record = submission.to_record()
		record["marked"] = False
		record["submittedAt"] = (now or datetime.now(timezone.utc)).isoformat()
		client = await pocketbase.get_client()
		created = await client.create_record(APPLICATIONS, record)
		obs_metrics.inc_application_submitted()
		return created
