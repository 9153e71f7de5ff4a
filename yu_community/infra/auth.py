"""Authentication dependencies for FastAPI endpoints.

Callers present the Bearer token issued by ``POST /login``. The token only
identifies a session; the administrator's role and club scope are looked up
server-side on every request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from yu_community.communities.domain import models
from yu_community.communities.domain.container import CommunityContainer, get_container
from yu_community.communities.domain.exceptions import AuthenticationError
from yu_community.obs import logging as obs_logging


@dataclass(slots=True)
class AuthenticatedAdmin:
	admin: models.Administrator
	session_id: str


_bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
	return HTTPException(
		status_code=status.HTTP_401_UNAUTHORIZED,
		detail=detail,
		headers={"WWW-Authenticate": "Bearer"},
	)


async def get_optional_session(
	credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
	container: CommunityContainer = Depends(get_container),
) -> Optional[AuthenticatedAdmin]:
	"""Resolve the caller's session, or None for anonymous viewers.

	A token that is present but invalid is rejected rather than downgraded to
	anonymous access.
	"""
	if credentials is None:
		return None
	if credentials.scheme.lower() != "bearer":
		raise _unauthorized("invalid_token")
	try:
		admin, session_id = await container.identity.resolve_token(credentials.credentials)
	except AuthenticationError as exc:
		raise _unauthorized(exc.detail) from exc
	obs_logging.bind_context(admin_id=str(admin.id))
	return AuthenticatedAdmin(admin=admin, session_id=session_id)


async def get_optional_admin(
	session: Optional[AuthenticatedAdmin] = Depends(get_optional_session),
) -> Optional[models.Administrator]:
	return session.admin if session is not None else None


async def get_current_session(
	session: Optional[AuthenticatedAdmin] = Depends(get_optional_session),
) -> AuthenticatedAdmin:
	if session is None:
		raise _unauthorized("invalid_token")
	return session


async def get_current_admin(
	session: AuthenticatedAdmin = Depends(get_current_session),
) -> models.Administrator:
	return session.admin
