"""FastAPI application entrypoint."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from yu_community import __version__
from yu_community.api import ops
from yu_community.api.errors import install_error_handlers
from yu_community.communities import api as communities_api
from yu_community.communities.domain.container import get_container
from yu_community.communities.domain.seed import seed_demo_data
from yu_community.infra.redis import redis_client
from yu_community.obs import init as obs_init
from yu_community.settings import settings

_LOG = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
	container = get_container()
	if settings.seed_demo_data and not container.registry.all():
		await seed_demo_data(container)
	worker_tasks: list[asyncio.Task] = []
	if settings.reminders_enabled:
		worker_tasks.append(
			asyncio.create_task(container.reminders.run_forever(), name="communities-upcoming-reminders")
		)
	_LOG.info("app_started", extra={"environment": settings.environment, "reminders": settings.reminders_enabled})
	try:
		yield
	finally:
		container.reminders.stop()
		for task in worker_tasks:
			task.cancel()
		await asyncio.gather(*worker_tasks, return_exceptions=True)
		await redis_client.close()


app = FastAPI(title="YU Community API", version=__version__, lifespan=lifespan)
install_error_handlers(app)

allow_origins = list(settings.cors_allow_origins)
if not allow_origins:
	allow_origins = ["http://localhost:3000"] if settings.is_dev() else []

# Starlette disallows wildcard '*' with allow_credentials=True.
if "*" in allow_origins:
	allow_origins = ["http://localhost:3000", "http://127.0.0.1:3000"] if settings.is_dev() else []

app.add_middleware(
	CORSMiddleware,
	allow_origins=allow_origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)
obs_init(app)

app.include_router(ops.router)
app.include_router(communities_api.router)
