"""Probe and scrape endpoints for the deployment platform."""

from __future__ import annotations

import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Response, status
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from app.obs import health
from app.settings import settings

router = APIRouter(tags=["ops"])


def _presented_token(x_admin_token: Optional[str], authorization: Optional[str]) -> Optional[str]:
	if x_admin_token:
		return x_admin_token.strip()
	scheme, _, value = (authorization or "").partition(" ")
	if scheme.lower() == "bearer" and value:
		return value.strip()
	return None


async def require_ops_token(
	x_admin_token: Optional[str] = Header(default=None, alias="X-Admin-Token"),
	authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> None:
	"""Guard for operator-only endpoints; closed when no token is configured."""
	expected = settings.obs_admin_token
	if not expected:
		raise HTTPException(status.HTTP_403_FORBIDDEN, detail="Operations access is not configured")
	presented = _presented_token(x_admin_token, authorization) or ""
	if not secrets.compare_digest(presented, expected):
		raise HTTPException(status.HTTP_403_FORBIDDEN, detail="Invalid operations token")


async def require_metrics_access(
	x_admin_token: Optional[str] = Header(default=None, alias="X-Admin-Token"),
	authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> None:
	if not settings.obs_metrics_public:
		await require_ops_token(x_admin_token=x_admin_token, authorization=authorization)


@router.get("/health/live")
async def health_live() -> dict[str, str]:
	return await health.liveness()


@router.get("/health/ready")
async def health_ready() -> JSONResponse:
	"""200 when both PocketBase and Redis answer, 503 otherwise."""
	status_code, payload = await health.readiness()
	return JSONResponse(content=payload, status_code=status_code)


@router.get("/metrics", dependencies=[Depends(require_metrics_access)])
async def prometheus_metrics() -> Response:
	return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
