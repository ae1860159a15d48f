import itertools
import json
import re
import sys
from pathlib import Path
from typing import Any, Optional
from urllib.parse import parse_qs

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from fakeredis.aioredis import FakeRedis

# Ensure backend package is importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
	sys.path.insert(0, str(BACKEND_ROOT))

from app.infra import pocketbase, turnstile
from app.infra.pocketbase import PocketBaseClient
from app.main import app
from app.settings import settings

# relation fields resolved by ?expand=
RELATIONS = {
	("marked_apps", "application"): "nodex_apps",
	("exec_activity", "performer_id"): "recruiters",
	("club_members", "teams"): "teams",
	("teams", "team_lead"): "club_members",
}

_TOKEN = re.compile(r'\s*(\(|\)|&&|\|\||"(?:[^"\\]|\\.)*"|!=|~|=|[A-Za-z0-9_.]+)')


def _tokenize(text: str) -> list[str]:
	tokens = []
	pos = 0
	text = text.strip()
	while pos < len(text):
		match = _TOKEN.match(text, pos)
		if not match:
			raise ValueError(f"bad filter near {text[pos:]!r}")
		tokens.append(match.group(1))
		pos = match.end()
	return tokens


def _literal(token: str) -> Any:
	if token.startswith('"'):
		return token[1:-1].replace('\\"', '"').replace("\\\\", "\\")
	if token in ("true", "false"):
		return token == "true"
	return token


def _compare(record: dict, field: str, op: str, value: Any) -> bool:
	current = record.get(field)
	if op == "~":
		if isinstance(current, list):
			return any(str(value).lower() in str(item).lower() for item in current)
		return str(value).lower() in str(current or "").lower()
	if isinstance(value, bool):
		equal = bool(current) == value
	else:
		equal = str(current if current is not None else "") == str(value)
	return equal if op == "=" else not equal


class _FilterParser:
	"""Evaluates the small PocketBase filter subset the services emit."""

	def __init__(self, text: str) -> None:
		self.tokens = _tokenize(text)
		self.pos = 0

	def _next(self) -> str:
		token = self.tokens[self.pos]
		self.pos += 1
		return token

	def _peek(self) -> Optional[str]:
		return self.tokens[self.pos] if self.pos < len(self.tokens) else None

	def parse(self):
		node = self._or()
		return node

	def _or(self):
		left = self._and()
		while self._peek() == "||":
			self._next()
			right = self._and()
			left = (lambda a, b: lambda r: a(r) or b(r))(left, right)
		return left

	def _and(self):
		left = self._atom()
		while self._peek() == "&&":
			self._next()
			right = self._atom()
			left = (lambda a, b: lambda r: a(r) and b(r))(left, right)
		return left

	def _atom(self):
		token = self._next()
		if token == "(":
			node = self._or()
			self._next()
			return node
		op = self._next()
		value = _literal(self._next())
		return lambda record: _compare(record, token, op, value)


def _sort(items: list[dict], order: Optional[str]) -> list[dict]:
	if not order:
		return items
	for part in reversed([p.strip() for p in order.split(",") if p.strip()]):
		reverse = part.startswith("-")
		field = part.lstrip("-+")
		items = sorted(items, key=lambda r: (r.get(field) is None, str(r.get(field) or "")), reverse=reverse)
	return items


def _multipart_fields(request: httpx.Request) -> tuple[dict[str, Any], dict[str, bytes]]:
	body = request.read()
	boundary = request.headers["content-type"].split("boundary=")[1].encode()
	fields: dict[str, Any] = {}
	files: dict[str, bytes] = {}
	for part in body.split(b"--" + boundary):
		head, sep, content = part.partition(b"\r\n\r\n")
		if not sep:
			continue
		name = re.search(rb'name="([^"]+)"', head)
		if not name:
			continue
		content = content[: -2] if content.endswith(b"\r\n") else content
		if b"filename=" in head:
			files[name.group(1).decode()] = content
		else:
			fields[name.group(1).decode()] = content.decode()
	return fields, files


class FakePocketBase:
	"""In-memory stand-in for the PocketBase records API."""

	def __init__(self) -> None:
		self.collections: dict[str, dict[str, dict]] = {}
		self.requests: list[httpx.Request] = []
		self.failures: dict[tuple[str, str], tuple[int, dict]] = {}
		self._ids = itertools.count(1)
		self.healthy = True

	def seed(self, collection: str, **fields: Any) -> dict:
		record_id = fields.pop("id", None) or f"rec{next(self._ids):05d}"
		seq = next(self._ids)
		record = {
			"id": record_id,
			"created": fields.pop("created", f"2026-01-01 00:00:{seq // 1000:02d}.{seq % 1000:03d}Z"),
			"updated": fields.pop("updated", None),
			**fields,
		}
		record["updated"] = record["updated"] or record["created"]
		self.collections.setdefault(collection, {})[record_id] = record
		return record

	def fail(self, collection: str, method: str, status_code: int = 500, data: Optional[dict] = None) -> None:
		self.failures[(collection, method)] = (status_code, data or {})

	def records(self, collection: str) -> list[dict]:
		return list(self.collections.get(collection, {}).values())

	def calls(self, method: str, collection: str) -> list[httpx.Request]:
		prefix = f"/api/collections/{collection}/records"
		return [r for r in self.requests if r.method == method and r.url.path.startswith(prefix)]

	def _expand(self, collection: str, record: dict, expand: Optional[str]) -> dict:
		if not expand:
			return record
		out = dict(record)
		out["expand"] = {}
		for field in expand.split(","):
			target = RELATIONS.get((collection, field))
			value = record.get(field)
			if not target or not value:
				continue
			store = self.collections.get(target, {})
			if isinstance(value, list):
				out["expand"][field] = [store[v] for v in value if v in store]
			elif value in store:
				out["expand"][field] = store[value]
		return out

	def handler(self, request: httpx.Request) -> httpx.Response:
		self.requests.append(request)
		path = request.url.path
		if path == "/api/health":
			return httpx.Response(200 if self.healthy else 503, json={"code": 200})
		match = re.fullmatch(r"/api/collections/([^/]+)/records(?:/([^/]+))?", path)
		if not match:
			return httpx.Response(404, json={"message": "Not found."})
		collection, record_id = match.groups()
		failure = self.failures.get((collection, request.method))
		if failure:
			status_code, data = failure
			return httpx.Response(status_code, json={"code": status_code, "message": "Failed.", "data": data})
		store = self.collections.setdefault(collection, {})
		params = request.url.params

		if request.method == "GET" and record_id is None:
			items = list(store.values())
			if params.get("filter"):
				predicate = _FilterParser(params["filter"]).parse()
				items = [r for r in items if predicate(r)]
			items = _sort(items, params.get("sort"))
			page = int(params.get("page") or 1)
			per_page = int(params.get("perPage") or 30)
			total = len(items)
			window = items[(page - 1) * per_page : page * per_page]
			return httpx.Response(
				200,
				json={
					"page": page,
					"perPage": per_page,
					"totalItems": total,
					"totalPages": max(1, -(-total // per_page)),
					"items": [self._expand(collection, r, params.get("expand")) for r in window],
				},
			)
		if request.method == "POST":
			if request.headers.get("content-type", "").startswith("multipart/"):
				fields, files = _multipart_fields(request)
				fields.update({name: f"{name}.upload" for name in files})
			else:
				fields = json.loads(request.content or b"{}")
			return httpx.Response(200, json=self.seed(collection, **fields))
		if record_id not in store:
			return httpx.Response(404, json={"code": 404, "message": "The requested resource wasn't found.", "data": {}})
		if request.method == "GET":
			return httpx.Response(200, json=self._expand(collection, store[record_id], params.get("expand")))
		if request.method == "PATCH":
			store[record_id].update(json.loads(request.content or b"{}"))
			return httpx.Response(200, json=store[record_id])
		if request.method == "DELETE":
			del store[record_id]
			return httpx.Response(204)
		return httpx.Response(405, json={"message": "Method not allowed."})


@pytest_asyncio.fixture(autouse=True)
async def fake_redis():
	from app.infra.redis import redis_client, set_redis_client

	original = redis_client._client
	client = FakeRedis(decode_responses=True)
	set_redis_client(client)
	try:
		yield client
	finally:
		set_redis_client(original)
		await client.flushall()


@pytest_asyncio.fixture(autouse=True)
async def pb():
	fake = FakePocketBase()
	client = PocketBaseClient("http://pocketbase.test", transport=httpx.MockTransport(fake.handler))
	pocketbase.set_client(client)
	try:
		yield fake
	finally:
		pocketbase.set_client(None)
		await client.aclose()


@pytest.fixture(autouse=True)
def force_test_settings():
	"""Development settings: no captcha secret, plain-http cookies."""
	original = (settings.environment, settings.turnstile_secret_key, settings.cookie_secure)
	settings.environment = "dev"
	settings.turnstile_secret_key = None
	settings.cookie_secure = False
	turnstile.set_transport(None)
	try:
		yield
	finally:
		settings.environment, settings.turnstile_secret_key, settings.cookie_secure = original
		turnstile.set_transport(None)


@pytest.fixture
def recruiter(pb):
	return pb.seed("recruiters", id="rec_alice", assignee="Alice", auth_key="key-alice", exec=False, team_mgmt=False)


@pytest.fixture
def exec_recruiter(pb):
	return pb.seed("recruiters", id="rec_erin", assignee="Erin", auth_key="key-erin", exec=True, team_mgmt=True)


@pytest_asyncio.fixture
async def api_client():
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client


@pytest_asyncio.fixture
async def recruiter_client(api_client, recruiter):
	api_client.cookies.set("auth-key", recruiter["auth_key"])
	return api_client


@pytest_asyncio.fixture
async def exec_client(api_client, exec_recruiter):
	api_client.cookies.set("auth-key", exec_recruiter["auth_key"])
	return api_client
