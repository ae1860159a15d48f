import io

import httpx
import pytest
from starlette.datastructures import Headers, UploadFile

from app.api.public import _read_photo
from app.infra import turnstile
from app.settings import settings

JOIN = {
	"name": "Asha Rao",
	"email": "asha@example.com",
	"phone": "9876543210",
	"batch": "2027",
	"rollNumber": "21CS001",
	"registrationNumber": "REG-77",
	"department": "CSE",
	"interestedTracks": ["Web"],
	"whyJoin": "I want to build real projects with a team and learn from seniors who ship.",
	"turnstileToken": "tok",
}

ONBOARDING = {
	"name": "Dev Patel",
	"email": "dev@example.com",
	"phone": "9999999999",
	"rollNumber": "20EE9",
	"department": "EEE",
	"year": "4",
	"bio": "Embedded hacker",
	"skills": "C, PCB design",
	"interests": "Robotics",
	"experience": "Two internships",
	"goals": "Mentor juniors",
	"opportunities": "Workshops",
	"availability": '["Weekends", "Evenings"]',
	"communication_preference": "Email",
	"newsletter": "true",
}

PNG = b"\x89PNG\r\n\x1a\n" + b"0" * 32


@pytest.mark.asyncio
async def test_join_creates_pending_application(api_client, pb):
	resp = await api_client.post("/api/join", json=JOIN)
	assert resp.status_code == 200
	body = resp.json()
	assert body["success"] is True
	[record] = pb.records("nodex_apps")
	assert body["applicationId"] == record["id"]
	assert record["marked"] is False
	assert record["interestedTracks"] == "Web"
	assert "turnstileToken" not in record


@pytest.mark.asyncio
async def test_join_closed(api_client, pb):
	pb.seed("web_metadata", maintenance=False, accepting=False)
	resp = await api_client.post("/api/join", json=JOIN)
	assert resp.status_code == 403
	assert resp.json()["message"] == "Applications are currently closed"
	assert pb.records("nodex_apps") == []


@pytest.mark.asyncio
async def test_join_validation_failure(api_client, pb):
	resp = await api_client.post("/api/join", json={**JOIN, "whyJoin": "short"})
	assert resp.status_code == 400
	assert resp.json()["message"] == "Validation failed"
	assert pb.records("nodex_apps") == []


@pytest.mark.asyncio
async def test_join_missing_captcha(api_client, pb):
	resp = await api_client.post("/api/join", json={**JOIN, "turnstileToken": ""})
	assert resp.status_code == 400
	assert resp.json()["message"] == "Captcha verification failed"


@pytest.mark.asyncio
async def test_join_checks_captcha_with_secret(api_client, pb, monkeypatch):
	seen = {}

	def handler(request: httpx.Request) -> httpx.Response:
		seen["body"] = request.content.decode()
		return httpx.Response(200, json={"success": False, "error-codes": ["invalid-input-response"]})

	monkeypatch.setattr(settings, "turnstile_secret_key", "s3cret")
	turnstile.set_transport(httpx.MockTransport(handler))
	resp = await api_client.post("/api/join", json=JOIN)
	assert resp.status_code == 400
	assert "secret=s3cret" in seen["body"]


@pytest.mark.asyncio
async def test_join_rate_limited(api_client, pb, monkeypatch):
	monkeypatch.setattr(settings, "rate_limit_join", 1)
	assert (await api_client.post("/api/join", json=JOIN)).status_code == 200
	resp = await api_client.post("/api/join", json=JOIN)
	assert resp.status_code == 429


@pytest.mark.asyncio
async def test_collaborate_request(api_client, pb):
	resp = await api_client.post(
		"/api/collaborate",
		json={
			"organization": "Acme",
			"contactName": "Ravi",
			"email": "ravi@acme.io",
			"phone": "1234567890",
			"requestTypes": ["Workshop"],
			"details": "Let's run a joint hackathon",
			"turnstileToken": "tok",
		},
	)
	assert resp.status_code == 201
	[record] = pb.records("nodex_collaboration_requests")
	assert record["status"] == "pending"


@pytest.mark.asyncio
async def test_collaboration_listing_requires_exec(recruiter_client):
	resp = await recruiter_client.get("/api/collaborate")
	assert resp.status_code == 403


@pytest.mark.asyncio
async def test_onboarding_uploads_multipart(api_client, pb):
	resp = await api_client.post(
		"/api/bos-onboarding", data=ONBOARDING, files={"photo": ("me.png", PNG, "image/png")}
	)
	assert resp.status_code == 201
	[record] = pb.records("nodex_bos")
	assert record["availability"] == "Weekends, Evenings"
	assert record["roll_number"] == "20EE9"
	assert record["status"] == "pending"
	assert record["newsletter"] == "true"
	assert record["photo"] == "photo.upload"


@pytest.mark.asyncio
async def test_onboarding_requires_photo(api_client, pb):
	resp = await api_client.post("/api/bos-onboarding", data=ONBOARDING)
	assert resp.status_code == 400
	assert resp.json()["message"] == "Professional headshot is required"


@pytest.mark.asyncio
async def test_onboarding_rejects_other_image_types(api_client):
	resp = await api_client.post(
		"/api/bos-onboarding", data=ONBOARDING, files={"photo": ("me.gif", b"GIF89a", "image/gif")}
	)
	assert resp.status_code == 400
	assert resp.json()["message"] == "Only JPEG and PNG images are allowed"


@pytest.mark.asyncio
async def test_onboarding_rejects_large_photo(api_client, monkeypatch):
	monkeypatch.setattr(settings, "bos_photo_max_bytes", 10)
	resp = await api_client.post(
		"/api/bos-onboarding", data=ONBOARDING, files={"photo": ("me.png", PNG, "image/png")}
	)
	assert resp.status_code == 400
	assert resp.json()["message"] == "File size must be less than 5MB"


@pytest.mark.asyncio
async def test_onboarding_missing_field(api_client):
	data = {k: v for k, v in ONBOARDING.items() if k != "goals"}
	resp = await api_client.post(
		"/api/bos-onboarding", data=data, files={"photo": ("me.png", PNG, "image/png")}
	)
	assert resp.status_code == 400
	assert resp.json()["message"] == "goals is required"


@pytest.mark.asyncio
async def test_onboarding_duplicate_email(api_client, pb):
	pb.fail("nodex_bos", "POST", 400, {"email": {"code": "validation_not_unique"}})
	resp = await api_client.post(
		"/api/bos-onboarding", data=ONBOARDING, files={"photo": ("me.png", PNG, "image/png")}
	)
	assert resp.status_code == 400
	assert resp.json()["message"] == "An onboarding form with this email already exists"


@pytest.mark.asyncio
async def test_web_metadata_defaults_and_update(exec_client, pb):
	resp = await exec_client.get("/api/web-metadata")
	assert resp.json()["accepting"] is True
	resp = await exec_client.post("/api/web-metadata", json={"maintenance": True, "accepting": False})
	assert resp.status_code == 200
	assert (await exec_client.get("/api/web-metadata")).json()["maintenance"] is True
	assert [a["action"] for a in pb.records("exec_activity")] == ["Update Site Settings"]


@pytest.mark.asyncio
async def test_web_metadata_update_requires_exec(recruiter_client):
	resp = await recruiter_client.post("/api/web-metadata", json={"maintenance": True, "accepting": True})
	assert resp.status_code == 403


@pytest.mark.asyncio
async def test_public_resources_always_have_core_categories(api_client, pb):
	pb.seed("nodex_resources", title="DSA sheet", category="cheatsheets", link="https://x.io")
	body = (await api_client.get("/api/resources")).json()
	assert {"notes", "books", "cheatsheets", "roadmaps"} <= set(body["resources"])
	assert body["resources"]["cheatsheets"][0]["title"] == "DSA sheet"
	assert body["totalResources"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("length, expected", [(49, 400), (50, 200)])
async def test_join_why_join_length_boundary(api_client, pb, length, expected):
	resp = await api_client.post("/api/join", json={**JOIN, "whyJoin": "w" * length})
	assert resp.status_code == expected
	assert len(pb.records("nodex_apps")) == (1 if expected == 200 else 0)


@pytest.mark.asyncio
async def test_photo_read_stops_past_size_limit(monkeypatch):
	monkeypatch.setattr(settings, "bos_photo_max_bytes", 10)
	upload = UploadFile(
		file=io.BytesIO(PNG * 100),
		filename="me.png",
		headers=Headers({"content-type": "image/png"}),
	)
	photo = await _read_photo(upload)
	assert len(photo.content) == 11
	assert photo.content_type == "image/png"
