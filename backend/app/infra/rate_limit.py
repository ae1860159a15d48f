"""Simple Redis-backed rate limiting utilities."""

from __future__ import annotations

import math
import time
from typing import Optional

from fastapi import HTTPException, Request, status

from app.infra.redis import redis_client
from app.obs import metrics as obs_metrics
from app.obs.middleware import client_ip
from app.settings import settings


async def allow(
	kind: str,
	actor_id: str,
	*,
	limit: int,
	window_seconds: int = 60,
	now: Optional[float] = None,
) -> bool:
	"""Return True when the operation is still within the allowed budget."""

	if limit <= 0:
		return False
	now = now or time.time()
	window = max(1, int(window_seconds))
	slot = int(math.floor(now / window))
	key = f"rl:{kind}:{actor_id}:{slot}:{window}"
	async with redis_client.pipeline(transaction=True) as pipe:
		pipe.incr(key)
		pipe.expire(key, window)
		count, _ = await pipe.execute()
	return int(count) <= limit


def limit_by_ip(kind: str, limit_setting: str):
	"""Return a dependency enforcing a per-client-ip budget read from settings."""

	async def _dep(request: Request) -> None:
		limit = int(getattr(settings, limit_setting))
		actor = client_ip(request) or "unknown"
		if await allow(kind, actor, limit=limit, window_seconds=settings.rate_limit_window_seconds):
			return
		obs_metrics.inc_rate_limited(kind)
		raise HTTPException(
			status_code=status.HTTP_429_TOO_MANY_REQUESTS,
			detail="Too many requests. Please try again later.",
		)

	return _dep
