"""Redis connection used for rate-limit counters.

Modules import ``redis_client`` once; the proxy creates the real client on
first use from ``REDIS_URL`` and lets tests swap in fakeredis.
"""

from __future__ import annotations

from typing import Optional

import redis.asyncio as redis

from app.settings import settings


class RedisProxy:
	"""Forwards attribute access to a lazily created ``redis.asyncio`` client."""

	def __init__(self, url: str) -> None:
		self._url = url
		self._client: Optional[redis.Redis] = None

	@property
	def client(self) -> redis.Redis:
		if self._client is None:
			self._client = redis.from_url(self._url, decode_responses=True)
		return self._client

	def set_client(self, client: Optional[redis.Redis]) -> None:
		self._client = client

	async def close(self) -> None:
		if self._client is not None:
			await self._client.aclose()
			self._client = None

	def __getattr__(self, item):
		return getattr(self.client, item)


redis_client: RedisProxy = RedisProxy(settings.redis_url)


def set_redis_client(client: Optional[redis.Redis]) -> None:
	redis_client.set_client(client)
