import pytest

from app.settings import settings


@pytest.mark.asyncio
async def test_liveness(api_client):
	resp = await api_client.get("/health/live")
	assert resp.status_code == 200
	assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_readiness_checks_store_and_redis(api_client, pb):
	resp = await api_client.get("/health/ready")
	assert resp.status_code == 200
	body = resp.json()
	assert body["checks"]["redis"]["ok"] is True
	assert body["checks"]["pocketbase"]["ok"] is True


@pytest.mark.asyncio
async def test_readiness_degrades_when_store_is_down(api_client, pb):
	pb.healthy = False
	resp = await api_client.get("/health/ready")
	assert resp.status_code == 503
	assert resp.json()["status"] == "degraded"


@pytest.mark.asyncio
async def test_metrics_require_admin_token(api_client, monkeypatch):
	monkeypatch.setattr(settings, "obs_metrics_public", False)
	monkeypatch.setattr(settings, "obs_admin_token", "ops-token")
	assert (await api_client.get("/metrics")).status_code == 403
	resp = await api_client.get("/metrics", headers={"X-Admin-Token": "ops-token"})
	assert resp.status_code == 200
	assert "nodex_http_requests_total" in resp.text


@pytest.mark.asyncio
async def test_store_outage_maps_to_502(recruiter_client, pb):
	pb.fail("nodex_apps", "GET", 503)
	resp = await recruiter_client.get("/api/applications")
	assert resp.status_code == 502
	body = resp.json()
	assert body["message"] == "Upstream store unavailable"
	assert body["request_id"]
