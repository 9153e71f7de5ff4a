"""Operations endpoints: health check and Prometheus exposition."""

from __future__ import annotations

import asyncio
import logging
from time import perf_counter
from typing import Any, Dict

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from redis.exceptions import RedisError

from yu_community import __version__
from yu_community.infra.redis import redis_client
from yu_community.settings import settings

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["ops"])


async def _redis_status(timeout: float = 0.2) -> Dict[str, Any]:
	start = perf_counter()
	try:
		await asyncio.wait_for(redis_client.ping(), timeout=timeout)
	except (RedisError, OSError, asyncio.TimeoutError) as exc:
		LOGGER.warning("Redis health check failed", exc_info=True)
		return {"ok": False, "error": type(exc).__name__}
	return {"ok": True, "latency_ms": round((perf_counter() - start) * 1000, 2)}


@router.get("/health")
async def health() -> Dict[str, Any]:
	# Redis only backs streams and reminder dedupe, so its loss degrades rather than fails.
	redis_status = await _redis_status()
	return {
		"status": "ok" if redis_status["ok"] else "degraded",
		"service": settings.service_name,
		"version": __version__,
		"commit": settings.git_commit,
		"redis": redis_status,
	}


@router.get("/metrics")
async def prometheus_metrics() -> Response:
	payload = generate_latest()
	return Response(content=payload, media_type=CONTENT_TYPE_LATEST)
