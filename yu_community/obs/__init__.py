"""Observability wiring: JSON logs, request metrics and request ids."""

from __future__ import annotations

from fastapi import FastAPI

from yu_community.obs import logging as obs_logging
from yu_community.obs import middleware
from yu_community.settings import settings


def init(app: FastAPI) -> None:
	"""Attach request instrumentation to ``app`` and (re)configure JSON logging."""
	if not settings.obs_enabled or getattr(app.state, "obs_installed", False):
		return
	middleware.install(app)
	app.state.obs_installed = True
	obs_logging.configure_logging()


__all__ = ["init"]
