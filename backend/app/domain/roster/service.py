"""Service for the core team roster (``nodex_team``) and BOS onboarding."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import HTTPException, status

from app.domain.roster.schemas import BosMemberRequest, BosOnboarding, CoreMemberRequest, Photo
from app.infra import pocketbase
from app.settings import settings

CORE_TEAM = "nodex_team"
BOS_APPLICATIONS = "nodex_bos"
BOS_CATEGORY = "direc"

ALLOWED_PHOTO_TYPES = ("image/jpeg", "image/jpg", "image/png")


def _with_profile(record: dict[str, Any]) -> dict[str, Any]:
	record["profile"] = record.get("qualification") or ""
	return record


async def _get_or_404(collection: str, record_id: str, message: str) -> dict[str, Any]:
	client = await pocketbase.get_client()
	try:
		return await client.get_record(collection, record_id)
	except pocketbase.PocketBaseError as exc:
		if exc.is_not_found:
			raise HTTPException(status.HTTP_404_NOT_FOUND, detail=message) from exc
		raise


class RosterService:
	async def list_core(self) -> list[dict[str, Any]]:
		client = await pocketbase.get_client()
		return [_with_profile(r) for r in await client.list_all(CORE_TEAM, sort="pos")]

	async def public_team(self) -> dict[str, Any]:
		"""Roster grouped by category for the public team page."""
		client = await pocketbase.get_client()
		members = await client.list_all(CORE_TEAM, sort="category,pos")
		grouped: dict[str, list[dict[str, Any]]] = defaultdict(list)
		for member in members:
			grouped[str(member.get("category") or "")].append(member)
		return {"success": True, "team": dict(grouped), "totalMembers": len(members)}

	async def create_core(self, payload: CoreMemberRequest) -> dict[str, Any]:
		client = await pocketbase.get_client()
		return _with_profile(await client.create_record(CORE_TEAM, payload.to_record()))

	async def update_core(self, member_id: str, payload: CoreMemberRequest) -> dict[str, Any]:
		await _get_or_404(CORE_TEAM, member_id, "Team member not found")
		client = await pocketbase.get_client()
		return _with_profile(await client.update_record(CORE_TEAM, member_id, payload.to_record()))

	async def delete_core(self, member_id: str) -> None:
		await _get_or_404(CORE_TEAM, member_id, "Team member not found")
		client = await pocketbase.get_client()
		await client.delete_record(CORE_TEAM, member_id)

	async def list_bos(self) -> list[dict[str, Any]]:
		client = await pocketbase.get_client()
		members = await client.list_all(CORE_TEAM, filter=pocketbase.eq("category", BOS_CATEGORY), sort="-created")
		return [_with_profile(r) for r in members]

	async def create_bos(self, payload: BosMemberRequest) -> dict[str, Any]:
		client = await pocketbase.get_client()
		return _with_profile(await client.create_record(CORE_TEAM, payload.to_record()))

	async def update_bos(self, member_id: str, payload: BosMemberRequest) -> dict[str, Any]:
		await self._bos_or_404(member_id)
		client = await pocketbase.get_client()
		return _with_profile(await client.update_record(CORE_TEAM, member_id, payload.to_record()))

	async def delete_bos(self, member_id: str) -> dict[str, Any]:
		record = await self._bos_or_404(member_id)
		client = await pocketbase.get_client()
		await client.delete_record(CORE_TEAM, member_id)
		return record

	async def _bos_or_404(self, member_id: str) -> dict[str, Any]:
		record = await _get_or_404(CORE_TEAM, member_id, "BOS member not found")
		if record.get("category") != BOS_CATEGORY:
			raise HTTPException(status.HTTP_404_NOT_FOUND, detail="BOS member not found")
		return record

	async def submit_onboarding(
		self,
		form: BosOnboarding,
		photo: Optional[Photo],
		*,
		now: Optional[datetime] = None,
	) -> dict[str, Any]:
		"""Validate the headshot and forward the onboarding form as multipart."""
		if photo is None or not photo.content:
			raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Professional headshot is required")
		if (photo.content_type or "").lower() not in ALLOWED_PHOTO_TYPES:
			raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Only JPEG and PNG images are allowed")
		if len(photo.content) > settings.bos_photo_max_bytes:
			raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="File size must be less than 5MB")

		data = form.to_form()
		data["status"] = "pending"
		data["onboarded_date"] = (now or datetime.now(timezone.utc)).isoformat()
		files = {"photo": (photo.filename, photo.content, photo.content_type)}
		client = await pocketbase.get_client()
		try:
			return await client.create_record(BOS_APPLICATIONS, data, files=files)
		except pocketbase.PocketBaseError as exc:
			if exc.status_code == 400:
				if "email" in exc.data:
					raise HTTPException(
						status.HTTP_400_BAD_REQUEST,
						detail="An onboarding form with this email already exists",
					) from exc
				raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Invalid data provided") from exc
			raise

	async def count_core(self) -> int:
		client = await pocketbase.get_client()
		return await client.count(CORE_TEAM)
