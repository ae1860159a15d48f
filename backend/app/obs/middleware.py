"""Request instrumentation: Prometheus counters and one ``http_request`` log line."""

from __future__ import annotations

import time
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.obs import logging as obs_logging
from app.obs import metrics

# Paths excluded from request metrics and logs
_UNMEASURED_PREFIXES = ("/health/", "/metrics")


def _route_template(request: Request) -> str:
	route = request.scope.get("route")
	return getattr(route, "path", None) or request.url.path


def client_ip(request: Request) -> Optional[str]:
	"""First hop of X-Forwarded-For, then X-Real-Ip, then the socket peer."""
	forwarded = request.headers.get("x-forwarded-for")
	if forwarded:
		first = forwarded.split(",")[0].strip()
		if first:
			return first
	real_ip = request.headers.get("x-real-ip")
	if real_ip:
		return real_ip.strip()
	client = request.client
	return client.host if client else None


class ObservabilityMiddleware(BaseHTTPMiddleware):
	def __init__(self, app) -> None:
		super().__init__(app)
		self._logger = obs_logging.get_logger("nodex.http")

	async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
		if request.url.path.startswith(_UNMEASURED_PREFIXES):
			return await call_next(request)

		token = obs_logging.bind_context(
			request_id=getattr(request.state, "request_id", None),
			route=request.url.path,
			client_ip=client_ip(request),
		)
		start = time.perf_counter()
		status_code = 500
		try:
			response = await call_next(request)
			status_code = response.status_code
			return response
		except Exception:
			self._logger.exception("http_request_error", extra={"method": request.method, "path": request.url.path})
			raise
		finally:
			elapsed = time.perf_counter() - start
			# Resolved after routing so the metric label is the template, not the raw path
			route = _route_template(request)
			metrics.observe_request(route, request.method, status_code, elapsed)
			level = self._logger.warning if status_code >= 500 else self._logger.info
			level(
				"http_request",
				extra={
					"method": request.method,
					"route": route,
					"status": status_code,
					"latency_ms": round(elapsed * 1000, 3),
				},
			)
			obs_logging.reset_context(token)


def install(app) -> None:
	app.add_middleware(ObservabilityMiddleware)
