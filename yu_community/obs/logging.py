"""JSON logging with request-scoped context for the YU Community API."""

from __future__ import annotations

import json
import logging
import random
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from yu_community.settings import settings

_LOGGER_NAME = "yu_community"

# Output key -> context variable. Bound by the HTTP middleware and auth dependencies.
_CONTEXT: Dict[str, ContextVar[Optional[str]]] = {
	"request_id": ContextVar("yu_request_id", default=None),
	"route": ContextVar("yu_route", default=None),
	"admin_id": ContextVar("yu_admin_id", default=None),
	"ip": ContextVar("yu_client_ip", default=None),
}

_REDACTED = "[redacted]"
_SENSITIVE_KEYWORDS = ("token", "secret", "authorization", "password", "credential", "email", "image_data")
_MAX_STRING_LENGTH = 256
_MAX_COLLECTION_ITEMS = 10

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime", "taskName"}


def bind_context(
	*,
	request_id: Optional[str] = None,
	route: Optional[str] = None,
	admin_id: Optional[str] = None,
	client_ip: Optional[str] = None,
) -> Dict[str, Token]:
	"""Set the given context fields and return tokens for :func:`reset_context`."""
	values = {"request_id": request_id, "route": route, "admin_id": admin_id, "ip": client_ip}
	return {key: _CONTEXT[key].set(value) for key, value in values.items() if value is not None}


def reset_context(tokens: Mapping[str, Token]) -> None:
	for key, token in tokens.items():
		_CONTEXT[key].reset(token)


def current_request_id() -> Optional[str]:
	return _CONTEXT["request_id"].get()


def _is_sensitive(key: str) -> bool:
	lowered = key.lower()
	return any(keyword in lowered for keyword in _SENSITIVE_KEYWORDS)


def _clip(value: Any) -> Any:
	if value is None or isinstance(value, (bool, int, float)):
		return value
	if isinstance(value, str):
		return value if len(value) <= _MAX_STRING_LENGTH else value[:_MAX_STRING_LENGTH] + "…"
	if isinstance(value, Mapping):
		clipped = {str(key): scrub(str(key), nested) for key, nested in list(value.items())[:_MAX_COLLECTION_ITEMS]}
		if len(value) > _MAX_COLLECTION_ITEMS:
			clipped["…"] = f"+{len(value) - _MAX_COLLECTION_ITEMS} keys"
		return clipped
	if isinstance(value, (list, tuple, set, frozenset)):
		items = [_clip(item) for item in list(value)[:_MAX_COLLECTION_ITEMS]]
		if len(value) > _MAX_COLLECTION_ITEMS:
			items.append("…")
		return items
	return str(value)


def scrub(key: str, value: Any) -> Any:
	"""Redact sensitive fields by name and bound the size of everything else."""
	if _is_sensitive(key):
		return _REDACTED
	return _clip(value)


class JSONLogFormatter(logging.Formatter):
	"""One JSON object per line: fixed envelope, bound context, then ``extra`` fields."""

	def format(self, record: logging.LogRecord) -> str:  # noqa: A003
		payload: Dict[str, Any] = {
			"ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
			"level": record.levelname.lower(),
			"logger": record.name,
			"msg": record.getMessage(),
			"service": settings.service_name,
			"env": settings.environment,
			"commit": settings.git_commit,
		}
		for key, var in _CONTEXT.items():
			value = var.get()
			if value:
				payload[key] = value
		if record.exc_info:
			payload["exc_info"] = self.formatException(record.exc_info)
		for key, value in vars(record).items():
			if key not in _RECORD_ATTRS and key not in payload:
				payload[key] = scrub(key, value)
		return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


class InfoSamplingFilter(logging.Filter):
	"""Drop a share of INFO records; other levels always pass."""

	def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
		if record.levelno != logging.INFO:
			return True
		rate = settings.obs_log_sampling_rate_info
		return rate >= 1.0 or random.random() < max(rate, 0.0)


def configure_logging() -> logging.Logger:
	"""Install the JSON handler on the root logger."""
	handler = logging.StreamHandler()
	handler.setFormatter(JSONLogFormatter())
	handler.addFilter(InfoSamplingFilter())
	root = logging.getLogger()
	root.handlers[:] = [handler]
	root.setLevel(settings.obs_log_level)
	return logging.getLogger(_LOGGER_NAME)


def get_logger(name: Optional[str] = None) -> logging.Logger:
	return logging.getLogger(name or _LOGGER_NAME)
