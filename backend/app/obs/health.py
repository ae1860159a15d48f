"""Liveness and readiness probes over the two backing services."""

from __future__ import annotations

import asyncio
import logging
from time import perf_counter
from typing import Any, Dict, Tuple

from redis.exceptions import RedisError

from app.infra import pocketbase
from app.infra.redis import redis_client
from app.obs import metrics

LOGGER = logging.getLogger(__name__)


def _ms(start: float) -> float:
	return round((perf_counter() - start) * 1000, 2)


async def _redis_status(timeout: float = 0.2) -> Dict[str, Any]:
	start = perf_counter()
	try:
		await asyncio.wait_for(redis_client.ping(), timeout=timeout)
	except (RedisError, OSError, asyncio.TimeoutError) as exc:
		metrics.mark_redis(False)
		LOGGER.warning("redis_not_ready", extra={"error": str(exc) or type(exc).__name__})
		return {"ok": False, "error": str(exc) or "timeout"}
	metrics.mark_redis(True, latency_seconds=perf_counter() - start)
	return {"ok": True, "latency_ms": _ms(start)}


async def _pocketbase_status(timeout: float = 1.0) -> Dict[str, Any]:
	start = perf_counter()
	client = await pocketbase.get_client()
	try:
		ok = await asyncio.wait_for(client.health(), timeout=timeout)
	except asyncio.TimeoutError:
		ok = False
	metrics.mark_pocketbase(ok)
	if not ok:
		LOGGER.warning("pocketbase_not_ready")
		return {"ok": False, "error": "unreachable"}
	return {"ok": True, "latency_ms": _ms(start)}


async def liveness() -> Dict[str, Any]:
	return {"status": "ok"}


async def readiness() -> Tuple[int, Dict[str, Any]]:
	redis_state, pocketbase_state = await asyncio.gather(_redis_status(), _pocketbase_status())
	ok = redis_state["ok"] and pocketbase_state["ok"]
	return (
		200 if ok else 503,
		{
			"status": "ok" if ok else "degraded",
			"checks": {"redis": redis_state, "pocketbase": pocketbase_state},
		},
	)
