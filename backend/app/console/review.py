"""Recruitment review queue as seen from the dashboard.

The queue keeps the three application lists in memory and mirrors the
server's state machine: an application sits in exactly one list, lists only
change after the server accepted the change, and moved items go to the head
of their new list.
"""

from __future__ import annotations

from typing import Any, Optional

from app.console.client import GENERIC_ERROR_MESSAGE, ConsoleClient, RequestFailed, Session
from app.console.notices import Notifier

LISTS = ("pending", "approved", "rejected")


class ReviewQueue:
	def __init__(self, client: ConsoleClient, session: Session, notifier: Notifier) -> None:
		self._client = client
		self.session = session
		self.notifier = notifier
		self.pending: list[dict[str, Any]] = []
		self.approved: list[dict[str, Any]] = []
		self.rejected: list[dict[str, Any]] = []
		self.submitting = False

	def _list(self, name: str) -> list[dict[str, Any]]:
		return getattr(self, name)

	async def load(self) -> None:
		for name in LISTS:
			try:
				body = await self._client.get("/api/applications", type=name)
			except RequestFailed as exc:
				self.notifier.error("Error", exc.message)
				continue
			self._list(name)[:] = list(body.get("applications") or [])

	def locate(self, application_id: str) -> Optional[str]:
		for name in LISTS:
			if any(item.get("id") == application_id for item in self._list(name)):
				return name
		return None

	def _detach(self, application_id: str) -> Optional[dict[str, Any]]:
		found: Optional[dict[str, Any]] = None
		for name in LISTS:
			items = self._list(name)
			for index, item in enumerate(items):
				if item.get("id") == application_id:
					found = items.pop(index)
					break
		return found

	def _fail(self, exc: RequestFailed) -> None:
		if exc.kind == "network":
			self.notifier.error("Connection Error", exc.message)
		else:
			self.notifier.error("Error", exc.message or GENERIC_ERROR_MESSAGE)

	async def decide(self, application_id: str, decision: str, remarks: str) -> bool:
		"""Approve or reject a pending application; returns True when it moved."""
		if not (remarks or "").strip():
			self.notifier.error("Remarks Required", f"Please add remarks before marking this application {decision}.")
			return False
		if self.locate(application_id) != "pending":
			self.notifier.error("Error", "Only pending applications can be reviewed.")
			return False
		if self.submitting:
			return False
		self.submitting = True
		try:
			body = await self._client.post(
				"/api/mark-application",
				{"applicationId": application_id, "status": decision, "remarks": remarks.strip()},
			)
		except RequestFailed as exc:
			self._fail(exc)
			return False
		finally:
			self.submitting = False

		item = self._detach(application_id) or {"id": application_id}
		item["markedData"] = body.get("markedData") or {"status": decision, "remarks": remarks.strip()}
		if "modRemarks" in body:
			item["modRemarks"] = body["modRemarks"]
		self._list(decision).insert(0, item)
		self.notifier.success(
			"Application Updated",
			body.get("message") or f"Application {decision} successfully",
		)
		return True

	async def rollback(self, application_id: str, reason: str) -> bool:
		"""Send a decided application back to pending; returns True when it moved."""
		if not (reason or "").strip():
			self.notifier.error("Reason Required", "Please provide a reason for the rollback.")
			return False
		if self.locate(application_id) not in ("approved", "rejected"):
			self.notifier.error("Error", "Application is not marked")
			return False
		if self.submitting:
			return False
		self.submitting = True
		try:
			body = await self._client.post(
				"/api/rollback-application",
				{"applicationId": application_id, "reason": reason.strip()},
			)
		except RequestFailed as exc:
			self._fail(exc)
			return False
		finally:
			self.submitting = False

		item = self._detach(application_id) or {"id": application_id}
		item.pop("markedData", None)
		item["modRemarks"] = body.get("modRemarks", item.get("modRemarks"))
		self.pending.insert(0, item)
		self.notifier.success("Application Rolled Back", body.get("message") or "Application moved back to pending")
		return True
