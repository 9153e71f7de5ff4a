"""Shared Redis client for lifecycle streams and reminder deduplication.

Modules import ``redis_client`` once; the object behind it is created on first
use and can be replaced at runtime (tests install fakeredis).
"""

from __future__ import annotations

from typing import Any, Optional

import redis.asyncio as redis

from yu_community.settings import settings


class RedisProxy:
	"""Forwards attribute access to the current client, connecting lazily."""

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

	def __getattr__(self, item: str) -> Any:
		return getattr(self.client, item)


redis_client = RedisProxy(settings.redis_url)


def set_redis_client(client: Optional[redis.Redis]) -> None:
	redis_client.set_client(client)
