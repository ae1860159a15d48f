import json

import httpx
import pytest

from app.console import ConsoleClient, Notifier, ReviewQueue, Session

SESSION = Session(recruiter_id="rec1", assignee="Alice")


class Backend:
	def __init__(self, responder=None):
		self.requests: list[httpx.Request] = []
		self.responder = responder

	def __call__(self, request: httpx.Request) -> httpx.Response:
		self.requests.append(request)
		if request.url.path == "/api/applications":
			kind = request.url.params["type"]
			items = [{"id": "app1", "name": "Asha"}] if kind == "pending" else []
			if kind == "approved":
				items = [{"id": "app2", "name": "Ben", "markedData": {"status": "approved"}, "modRemarks": "old\n\n---"}]
			if kind == "rejected":
				items = [{"id": "app3", "name": "Chen", "markedData": {"status": "rejected"}, "modRemarks": "old\n\n---"}]
			return httpx.Response(200, json={"applications": items, "type": kind, "count": len(items)})
		return self.responder(request)


async def _queue(backend):
	client = ConsoleClient("http://portal.test", auth_key="k", transport=httpx.MockTransport(backend))
	queue = ReviewQueue(client, SESSION, Notifier())
	await queue.load()
	return queue


@pytest.mark.asyncio
async def test_blank_remarks_send_nothing():
	backend = Backend()
	queue = await _queue(backend)
	sent = len(backend.requests)
	assert await queue.decide("app1", "approved", "   ") is False
	assert len(backend.requests) == sent
	assert queue.notifier.last.title == "Remarks Required"
	assert [a["id"] for a in queue.pending] == ["app1"]


@pytest.mark.asyncio
async def test_decide_moves_item_to_head_on_success():
	def responder(request):
		payload = json.loads(request.content)
		assert payload == {"applicationId": "app1", "status": "approved", "remarks": "great"}
		return httpx.Response(
			200,
			json={
				"message": "Application approved successfully",
				"markedData": {"status": "approved", "remarks": "great"},
				"modRemarks": "entry\n\n---",
			},
		)

	queue = await _queue(Backend(responder))
	assert await queue.decide("app1", "approved", " great ")
	assert queue.pending == []
	assert [a["id"] for a in queue.approved] == ["app1", "app2"]
	assert queue.approved[0]["modRemarks"] == "entry\n\n---"
	assert queue.notifier.last.level == "success"
	assert queue.submitting is False


@pytest.mark.asyncio
async def test_server_error_leaves_lists_untouched():
	queue = await _queue(Backend(lambda r: httpx.Response(409, json={"message": "Application has already been reviewed"})))
	assert await queue.decide("app1", "rejected", "no") is False
	assert [a["id"] for a in queue.pending] == ["app1"]
	assert [a["id"] for a in queue.rejected] == ["app3"]
	assert queue.notifier.last.message == "Application has already been reviewed"


@pytest.mark.asyncio
async def test_network_error_uses_connection_message():
	def responder(request):
		raise httpx.ConnectError("down", request=request)

	queue = await _queue(Backend(responder))
	assert await queue.decide("app1", "approved", "ok") is False
	assert queue.notifier.last.title == "Connection Error"
	assert "check your connection" in queue.notifier.last.message


@pytest.mark.asyncio
async def test_rollback_returns_item_to_pending_head():
	def responder(request):
		assert request.url.path == "/api/rollback-application"
		return httpx.Response(200, json={"message": "Application successfully rolled back from approved", "modRemarks": "old\n\n---\n\nrb\n\n---"})

	queue = await _queue(Backend(responder))
	assert await queue.rollback("app2", "mistake")
	assert [a["id"] for a in queue.pending] == ["app2", "app1"]
	assert "markedData" not in queue.pending[0]
	assert queue.pending[0]["modRemarks"].endswith("rb\n\n---")
	assert queue.approved == []


@pytest.mark.asyncio
@pytest.mark.parametrize("application_id", ["app2", "app3"])
async def test_rollback_requires_reason(application_id):
	backend = Backend()
	queue = await _queue(backend)
	sent = len(backend.requests)
	assert await queue.rollback(application_id, "  ") is False
	assert len(backend.requests) == sent
	assert queue.notifier.last.title == "Reason Required"
	assert [a["id"] for a in queue.approved] == ["app2"]
	assert [a["id"] for a in queue.rejected] == ["app3"]
