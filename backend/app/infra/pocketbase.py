"""Async PocketBase REST client and connection management.

Every collection this service reads or writes lives in PocketBase. Routes and
services never build URLs themselves; they go through :class:`PocketBaseClient`
so that filter quoting, error decoding and metrics stay in one place.
"""

from __future__ import annotations

import time
from typing import Any, Iterable, Mapping, Optional

import httpx

from app.obs import metrics as obs_metrics
from app.obs.logging import get_logger
from app.settings import settings

logger = get_logger("nodex.pocketbase")


class PocketBaseError(Exception):
	"""Raised when the store answers with a non-2xx status or cannot be reached."""

	def __init__(self, status_code: int, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
		super().__init__(message)
		self.status_code = status_code
		self.message = message
		self.data: dict[str, Any] = dict(data or {})

	@property
	def is_not_found(self) -> bool:
		return self.status_code == 404


def quote(value: Any) -> str:
	"""Render a value as a PocketBase filter string literal."""
	text = str(value).replace("\\", "\\\\").replace('"', '\\"')
	return f'"{text}"'


def eq(field: str, value: Any) -> str:
	if isinstance(value, bool):
		return f"{field}={'true' if value else 'false'}"
	return f"{field}={quote(value)}"


def like(field: str, value: Any) -> str:
	return f"{field}~{quote(value)}"


def any_of(clauses: Iterable[str]) -> str:
	parts = [c for c in clauses if c]
	if not parts:
		return ""
	return "(" + " || ".join(parts) + ")"


def all_of(clauses: Iterable[str]) -> str:
	parts = [c for c in clauses if c]
	if not parts:
		return ""
	return "(" + " && ".join(parts) + ")"


def _error_message(response: httpx.Response) -> tuple[str, dict[str, Any]]:
	try:
		body = response.json()
	except ValueError:
		text = response.text.strip()
		return (text or f"store_error_{response.status_code}", {})
	if isinstance(body, dict):
		message = str(body.get("message") or body.get("error") or f"store_error_{response.status_code}")
		data = body.get("data") if isinstance(body.get("data"), dict) else {}
		return message, data
	return (f"store_error_{response.status_code}", {})


class PocketBaseClient:
	"""Thin async wrapper over the PocketBase records API."""

	def __init__(
		self,
		base_url: str,
		*,
		timeout: float = 10.0,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self._http = httpx.AsyncClient(
			base_url=base_url.rstrip("/"),
			timeout=timeout,
			transport=transport,
		)

	async def aclose(self) -> None:
		await self._http.aclose()

	async def _request(
		self,
		method: str,
		collection: str,
		path: str,
		*,
		params: Optional[Mapping[str, Any]] = None,
		json: Any = None,
		data: Optional[Mapping[str, Any]] = None,
		files: Any = None,
	) -> httpx.Response:
		start = time.perf_counter()
		kwargs: dict[str, Any] = {}
		if params:
			kwargs["params"] = {k: v for k, v in params.items() if v not in (None, "")}
		if files is not None:
			kwargs["data"] = data or {}
			kwargs["files"] = files
		elif json is not None:
			kwargs["json"] = json
		try:
			response = await self._http.request(method, path, **kwargs)
		except httpx.HTTPError as exc:
			obs_metrics.observe_pocketbase(collection, method, "error", time.perf_counter() - start)
			logger.warning(
				"pocketbase_unreachable",
				extra={"collection": collection, "method": method, "error": str(exc)},
			)
			raise PocketBaseError(502, "Upstream store unavailable") from exc
		elapsed = time.perf_counter() - start
		if response.is_success:
			obs_metrics.observe_pocketbase(collection, method, "ok", elapsed)
			return response
		obs_metrics.observe_pocketbase(collection, method, str(response.status_code), elapsed)
		message, details = _error_message(response)
		logger.info(
			"pocketbase_error",
			extra={
				"collection": collection,
				"method": method,
				"status": response.status_code,
				"error": message,
			},
		)
		raise PocketBaseError(response.status_code, message, details)

	@staticmethod
	def _records_path(collection: str, record_id: Optional[str] = None) -> str:
		base = f"/api/collections/{collection}/records"
		return f"{base}/{record_id}" if record_id else base

	async def list_records(
		self,
		collection: str,
		*,
		filter: Optional[str] = None,
		sort: Optional[str] = None,
		expand: Optional[str] = None,
		page: Optional[int] = None,
		per_page: Optional[int] = None,
	) -> dict[str, Any]:
		"""Return one PocketBase page: ``{items, page, perPage, totalItems, totalPages}``."""
		params = {
			"filter": filter,
			"sort": sort,
			"expand": expand,
			"page": page,
			"perPage": per_page,
		}
		response = await self._request("GET", collection, self._records_path(collection), params=params)
		body = response.json()
		body.setdefault("items", [])
		return body

	async def list_items(self, collection: str, **kwargs: Any) -> list[dict[str, Any]]:
		page = await self.list_records(collection, **kwargs)
		return list(page.get("items") or [])

	async def list_all(
		self,
		collection: str,
		*,
		filter: Optional[str] = None,
		sort: Optional[str] = None,
		expand: Optional[str] = None,
		per_page: int = 200,
	) -> list[dict[str, Any]]:
		"""Walk every page of a listing and return the concatenated items."""
		items: list[dict[str, Any]] = []
		page = 1
		while True:
			body = await self.list_records(
				collection, filter=filter, sort=sort, expand=expand, page=page, per_page=per_page
			)
			batch = list(body.get("items") or [])
			items.extend(batch)
			total_pages = int(body.get("totalPages") or 1)
			if not batch or page >= total_pages:
				return items
			page += 1

	async def count(self, collection: str, *, filter: Optional[str] = None) -> int:
		body = await self.list_records(collection, filter=filter, page=1, per_page=1)
		return int(body.get("totalItems") or len(body.get("items") or []))

	async def first(
		self,
		collection: str,
		*,
		filter: Optional[str] = None,
		sort: Optional[str] = None,
		expand: Optional[str] = None,
	) -> Optional[dict[str, Any]]:
		items = await self.list_items(collection, filter=filter, sort=sort, expand=expand, per_page=1)
		return items[0] if items else None

	async def get_record(self, collection: str, record_id: str, *, expand: Optional[str] = None) -> dict[str, Any]:
		response = await self._request(
			"GET",
			collection,
			self._records_path(collection, record_id),
			params={"expand": expand},
		)
		return response.json()

	async def create_record(
		self,
		collection: str,
		payload: Mapping[str, Any],
		*,
		files: Any = None,
	) -> dict[str, Any]:
		if files is not None:
			response = await self._request(
				"POST",
				collection,
				self._records_path(collection),
				data={k: str(v) for k, v in payload.items()},
				files=files,
			)
		else:
			response = await self._request("POST", collection, self._records_path(collection), json=dict(payload))
		return response.json()

	async def update_record(self, collection: str, record_id: str, payload: Mapping[str, Any]) -> dict[str, Any]:
		response = await self._request(
			"PATCH",
			collection,
			self._records_path(collection, record_id),
			json=dict(payload),
		)
		return response.json()

	async def delete_record(self, collection: str, record_id: str) -> None:
		await self._request("DELETE", collection, self._records_path(collection, record_id))

	async def health(self) -> bool:
		try:
			response = await self._http.get("/api/health")
		except httpx.HTTPError:
			return False
		return response.is_success


_client: Optional[PocketBaseClient] = None


async def init_client() -> PocketBaseClient:
	global _client
	if _client is None:
		_client = PocketBaseClient(settings.pocketbase_url, timeout=settings.pocketbase_timeout_seconds)
	return _client


def set_client(client: Optional[PocketBaseClient]) -> None:
	global _client
	_client = client


async def get_client() -> PocketBaseClient:
	if _client is None:
		return await init_client()
	return _client


async def close_client() -> None:
	global _client
	if _client is not None:
		await _client.aclose()
		_client = None
