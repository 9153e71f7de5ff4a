"""Exception handlers that give every error body the same envelope.

Each response carries ``detail`` plus the ``request_id`` of the call, so a
client report can be matched with the access log line.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from yu_community.communities.domain.exceptions import CommunityError, ValidationError
from yu_community.obs import logging as obs_logging


def get_request_id(request: Request, default: str = "unknown") -> str:
    return getattr(request.state, "request_id", None) or obs_logging.current_request_id() or default


def _envelope(request: Request, status_code: int, detail: Any, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    body = {"detail": detail, "request_id": get_request_id(request)}
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def _field_errors(exc: RequestValidationError) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        fields.setdefault(".".join(location) or "request", str(error.get("type", "invalid")))
    return fields


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exc_handler(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
        return _envelope(request, exc.status_code, exc.detail, getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError):  # type: ignore[override]
        shaped = ValidationError(fields=_field_errors(exc))
        return _envelope(request, shaped.status_code, shaped.to_detail())

    @app.exception_handler(CommunityError)
    async def community_exc_handler(request: Request, exc: CommunityError):  # type: ignore[override]
        # Domain errors that escape a router untranslated.
        return _envelope(request, exc.status_code, exc.to_detail())
