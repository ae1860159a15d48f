"""Service for study resources."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Optional

from fastapi import HTTPException, status

from app.domain.resources.schemas import ResourceRequest
from app.infra import pocketbase

RESOURCES = "nodex_resources"

PUBLIC_CATEGORIES = ("notes", "books", "cheatsheets", "roadmaps")


class ResourceService:
	async def list_resources(
		self,
		*,
		page: int,
		limit: int,
		category: Optional[str] = None,
		search: Optional[str] = None,
	) -> dict[str, Any]:
		clauses = []
		if category:
			clauses.append(pocketbase.eq("category", category))
		if search:
			clauses.append(
				pocketbase.any_of([pocketbase.like("title", search), pocketbase.like("description", search)])
			)
		client = await pocketbase.get_client()
		body = await client.list_records(
			RESOURCES, filter=pocketbase.all_of(clauses), sort="-created", page=page, per_page=limit
		)
		return {
			"resources": body["items"],
			"page": body.get("page", page),
			"totalItems": body.get("totalItems", len(body["items"])),
			"totalPages": body.get("totalPages", 1),
		}

	async def public_resources(self) -> dict[str, Any]:
		client = await pocketbase.get_client()
		resources = await client.list_all(RESOURCES, sort="category,title")
		grouped: dict[str, list[dict[str, Any]]] = defaultdict(list)
		for category in PUBLIC_CATEGORIES:
			grouped[category] = []
		for resource in resources:
			grouped[str(resource.get("category") or "")].append(resource)
		return {"success": True, "resources": dict(grouped), "totalResources": len(resources)}

	async def create_resource(self, payload: ResourceRequest) -> dict[str, Any]:
		client = await pocketbase.get_client()
		return await client.create_record(RESOURCES, payload.to_record())

	async def update_resource(self, resource_id: str, payload: ResourceRequest) -> dict[str, Any]:
		client = await pocketbase.get_client()
		try:
			return await client.update_record(RESOURCES, resource_id, payload.to_record())
		except pocketbase.PocketBaseError as exc:
			if exc.is_not_found:
				raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Resource not found") from exc
			raise

	async def delete_resource(self, resource_id: str) -> None:
		client = await pocketbase.get_client()
		try:
			await client.delete_record(RESOURCES, resource_id)
		except pocketbase.PocketBaseError as exc:
			if exc.is_not_found:
				raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Resource not found") from exc
			raise

	async def count_resources(self) -> int:
		client = await pocketbase.get_client()
		return await client.count(RESOURCES)
