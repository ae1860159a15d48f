"""Service for club events."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from app.domain.events.schemas import EventRequest
from app.infra import pocketbase

EVENTS = "nodex_events"


class EventService:
	async def list_events(self, *, page: int, limit: int) -> dict[str, Any]:
		client = await pocketbase.get_client()
		body = await client.list_records(EVENTS, sort="-created", page=page, per_page=limit)
		return {
			"events": body["items"],
			"page": body.get("page", page),
			"totalItems": body.get("totalItems", len(body["items"])),
			"totalPages": body.get("totalPages", 1),
		}

	async def public_events(self) -> dict[str, Any]:
		"""Events grouped for the public site: live ones and the archive."""
		client = await pocketbase.get_client()
		events = await client.list_all(EVENTS, sort="-created")
		return {
			"success": True,
			"events": {
				"active": [e for e in events if e.get("active") and not e.get("archived")],
				"archived": [e for e in events if e.get("archived")],
			},
			"totalEvents": len(events),
		}

	async def create_event(self, payload: EventRequest) -> dict[str, Any]:
		record = payload.to_record()
		record["active"] = True
		record["archived"] = False
		client = await pocketbase.get_client()
		return await client.create_record(EVENTS, record)

	async def update_event(self, event_id: str, payload: EventRequest) -> dict[str, Any]:
		client = await pocketbase.get_client()
		try:
			return await client.update_record(EVENTS, event_id, payload.to_record())
		except pocketbase.PocketBaseError as exc:
			if exc.is_not_found:
				raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Event not found") from exc
			raise

	async def delete_event(self, event_id: str) -> None:
		client = await pocketbase.get_client()
		try:
			await client.delete_record(EVENTS, event_id)
		except pocketbase.PocketBaseError as exc:
			if exc.is_not_found:
				raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Event not found") from exc
			raise

	async def count_events(self) -> int:
		client = await pocketbase.get_client()
		return await client.count(EVENTS)
