"""Club member directory view model."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from app.console.client import ConsoleClient, RequestFailed
from app.console.notices import Notifier
from app.domain.members.filters import filter_members


class MemberDirectory:
	"""Loads the directory once and filters it locally as the user types."""

	def __init__(self, client: ConsoleClient, notifier: Notifier) -> None:
		self._client = client
		self.notifier = notifier
		self.members: list[dict[str, Any]] = []
		self.teams: list[dict[str, Any]] = []
		self.search = ""
		self.status: Optional[str] = None
		self.member_type: Optional[str] = None
		self.team: Optional[str] = None

	async def load(self) -> None:
		try:
			body = await self._client.get("/api/dashboard/club-members", limit=200)
		except RequestFailed as exc:
			self.notifier.error("Error", exc.message)
			return
		self.members = list(body.get("members") or [])
		self.teams = list(body.get("teams") or [])

	@property
	def visible(self) -> list[Mapping[str, Any]]:
		return filter_members(
			self.members,
			search=self.search or None,
			status=self.status,
			member_type=self.member_type,
			team=self.team,
		)

	def editable(self, member: Mapping[str, Any]) -> bool:
		return not member.get("readonly")
