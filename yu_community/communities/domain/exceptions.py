"""Custom exceptions for communities services."""

from __future__ import annotations

from typing import Any

from fastapi import status

if hasattr(status, "HTTP_422_UNPROCESSABLE_CONTENT"):
	_HTTP_422 = status.HTTP_422_UNPROCESSABLE_CONTENT
else:  # pragma: no cover - older Starlette builds
	_HTTP_422 = status.HTTP_422_UNPROCESSABLE_ENTITY


class CommunityError(Exception):
	"""Base class for community related errors."""

	status_code: int = status.HTTP_400_BAD_REQUEST
	detail: str = "community_error"

	def __init__(self, detail: str | None = None) -> None:
		super().__init__(detail or self.detail)
		if detail:
			self.detail = detail

	def to_detail(self) -> str | dict[str, Any]:
		return self.detail


class AuthenticationError(CommunityError):
	"""Raised when credentials or an access token do not check out."""

	status_code = status.HTTP_401_UNAUTHORIZED
	detail = "invalid_credentials"


class AuthorizationError(CommunityError):
	"""Raised when the caller lacks scope over the target club."""

	status_code = status.HTTP_403_FORBIDDEN
	detail = "forbidden"


class NotFoundError(CommunityError):
	"""Thrown when a referenced resource is missing."""

	status_code = status.HTTP_404_NOT_FOUND
	detail = "not_found"


class ConflictError(CommunityError):
	"""Raised for conflicting operations."""

	status_code = status.HTTP_409_CONFLICT
	detail = "conflict"


class InvalidStateError(ConflictError):
	"""Raised when a post transition is attempted from a resolved state."""

	detail = "invalid_state"

	def __init__(self, current_state: str, detail: str | None = None) -> None:
		super().__init__(detail)
		self.current_state = current_state

	def to_detail(self) -> dict[str, Any]:
		return {"code": self.detail, "current_state": self.current_state}


class ValidationError(CommunityError):
	"""Raised for validation errors not covered by FastAPI schema validation.

	``fields`` maps each offending field to a short reason code so the caller
	can render the message next to the right input.
	"""

	status_code = _HTTP_422
	detail = "validation_error"

	def __init__(self, detail: str | None = None, *, fields: dict[str, str] | None = None) -> None:
		super().__init__(detail)
		self.fields = dict(fields or {})

	def to_detail(self) -> dict[str, Any]:
		return {"code": self.detail, "fields": self.fields}
