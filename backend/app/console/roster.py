"""BOS roster view model."""

from __future__ import annotations

from typing import Any

from app.console.client import ConsoleClient, RequestFailed, Session
from app.console.notices import Notifier


class BosRoster:
	def __init__(self, client: ConsoleClient, session: Session, notifier: Notifier) -> None:
		self._client = client
		self.session = session
		self.notifier = notifier
		self.members: list[dict[str, Any]] = []

	async def load(self) -> None:
		try:
			body = await self._client.get("/api/dashboard/bos")
		except RequestFailed as exc:
			self.notifier.error("Error", exc.message)
			return
		self.members = list(body.get("members") or [])

	async def delete(self, member_id: str) -> bool:
		if not self.session.has_role("exec"):
			self.notifier.error("Permission Denied", "Only executives can remove BOS members.")
			return False
		try:
			await self._client.delete(f"/api/dashboard/bos/{member_id}")
		except RequestFailed as exc:
			self.notifier.error("Error", exc.message)
			return False
		self.members = [m for m in self.members if m.get("id") != member_id]
		self.notifier.success("Member Removed", "BOS member deleted successfully")
		return True
