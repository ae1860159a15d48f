"""Global error handlers ensuring request_id is included in JSON responses."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.request_id import get_request_id
from app.infra.pocketbase import PocketBaseError
from app.obs.logging import get_logger

logger = get_logger("nodex.errors")

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


def _message(detail: Any) -> str:
	if isinstance(detail, str):
		return detail
	if isinstance(detail, dict) and "message" in detail:
		return str(detail["message"])
	return str(detail)


def error_payload(request: Request, message: str, **extra: Any) -> dict[str, Any]:
	payload: dict[str, Any] = {"message": message}
	payload.update(extra)
	payload["request_id"] = get_request_id(request)
	return payload


def install_error_handlers(app: FastAPI) -> None:
	@app.exception_handler(StarletteHTTPException)
	async def http_exc_handler(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
		extra: dict[str, Any] = {}
		if isinstance(exc.detail, dict):
			extra = {k: v for k, v in exc.detail.items() if k != "message"}
		payload = error_payload(request, _message(exc.detail), **extra)
		return JSONResponse(status_code=exc.status_code, content=payload, headers=getattr(exc, "headers", None))

	@app.exception_handler(RequestValidationError)
	async def validation_exc_handler(request: Request, exc: RequestValidationError):  # type: ignore[override]
		payload = error_payload(request, "Validation failed", errors=jsonable_encoder(exc.errors()))
		return JSONResponse(status_code=400, content=payload)

	@app.exception_handler(PocketBaseError)
	async def store_exc_handler(request: Request, exc: PocketBaseError):  # type: ignore[override]
		if 400 <= exc.status_code < 500:
			extra: dict[str, Any] = {"errors": exc.data} if exc.data else {}
			return JSONResponse(status_code=exc.status_code, content=error_payload(request, exc.message, **extra))
		return JSONResponse(status_code=502, content=error_payload(request, "Upstream store unavailable"))

	@app.exception_handler(Exception)
	async def unhandled_exc_handler(request: Request, exc: Exception):  # type: ignore[override]
		logger.error("unhandled_error", exc_info=exc, extra={"path": request.url.path})
		return JSONResponse(status_code=500, content=error_payload(request, GENERIC_ERROR_MESSAGE))
