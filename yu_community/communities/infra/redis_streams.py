"""Redis stream publishing for committed lifecycle transitions."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from redis.exceptions import RedisError

from yu_community.infra.redis import redis_client
from yu_community.obs import metrics as obs_metrics
from yu_community.settings import settings

_LOG = logging.getLogger(__name__)

STREAM_POST = "yu:post"
STREAM_EVENT = "yu:event"
STREAM_CLUB = "yu:club"


def _now_ts() -> str:
	return datetime.now(timezone.utc).isoformat()


async def _publish(stream: str, payload: dict[str, Any]) -> bool:
	"""Append ``payload`` to ``stream``.

	The transition has already been committed when this runs, so a Redis
	failure is logged and counted instead of being raised to the caller.
	"""
	if not settings.lifecycle_streams_enabled:
		return False
	try:
		await redis_client.xadd(
			stream,
			payload,
			maxlen=settings.lifecycle_stream_maxlen,
			approximate=True,
		)
	except RedisError:
		obs_metrics.stream_publish_failed(stream)
		_LOG.warning("lifecycle_stream_publish_failed", extra={"stream": stream, "entity_id": payload.get("id")}, exc_info=True)
		return False
	return True


async def publish_post_event(event: str, *, post_id: str, club_id: str, actor_id: str | None = None) -> bool:
	payload: dict[str, Any] = {
		"event": event,
		"entity": "post",
		"id": post_id,
		"club_id": club_id,
		"ts": _now_ts(),
	}
	if actor_id:
		payload["actor_id"] = actor_id
	return await _publish(STREAM_POST, payload)


async def publish_event_event(event: str, *, event_id: str, club_id: str, actor_id: str | None = None) -> bool:
	payload: dict[str, Any] = {
		"event": event,
		"entity": "event",
		"id": event_id,
		"club_id": club_id,
		"ts": _now_ts(),
	}
	if actor_id:
		payload["actor_id"] = actor_id
	return await _publish(STREAM_EVENT, payload)


async def publish_club_event(event: str, *, club_id: str, actor_id: str | None = None) -> bool:
	payload: dict[str, Any] = {
		"event": event,
		"entity": "club",
		"id": club_id,
		"club_id": club_id,
		"ts": _now_ts(),
	}
	if actor_id:
		payload["actor_id"] = actor_id
	return await _publish(STREAM_CLUB, payload)
