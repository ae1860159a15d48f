import pytest
from starlette.requests import Request

from app.infra.auth import Recruiter
from app.obs import audit


def _request() -> Request:
	scope = {
		"type": "http",
		"method": "POST",
		"path": "/api/mark-application",
		"headers": [(b"user-agent", b"pytest"), (b"x-forwarded-for", b"10.0.0.9, 10.0.0.1")],
		"client": ("127.0.0.1", 5000),
		"query_string": b"",
	}
	return Request(scope)


RECRUITER = Recruiter(id="rec1", assignee="Alice", exec=True, team_mgmt=False)


@pytest.mark.asyncio
async def test_log_exec_activity_writes_record(pb):
	await audit.log_exec_activity(_request(), RECRUITER, "Delete Event", "event", resource_id="ev1", details="Hack Night")
	[record] = pb.records("exec_activity")
	assert record["action"] == "Delete Event"
	assert record["performed_by"] == "Alice"
	assert record["performer_id"] == "rec1"
	assert record["ip_address"] == "10.0.0.9"
	assert record["user_agent"] == "pytest"


@pytest.mark.asyncio
async def test_log_exec_activity_swallows_store_failure(pb):
	pb.fail("exec_activity", "POST", 500)
	await audit.log_exec_activity(_request(), RECRUITER, "Login", "auth")
	assert pb.records("exec_activity") == []


@pytest.mark.asyncio
async def test_recent_activity_resolves_performer(pb):
	pb.seed("recruiters", id="rec1", assignee="Alice", auth_key="k")
	pb.seed("exec_activity", action="Login", resource_type="auth", performer_id="rec1", performed_by="Alice")
	items = await audit.recent_exec_activity(10)
	assert items[0]["recruiter"]["assignee"] == "Alice"
