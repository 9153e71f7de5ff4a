"""Administrator registry, credential checks and login sessions."""

from __future__ import annotations

import asyncio
import logging
import secrets
from dataclasses import dataclass
from typing import Iterable, Optional
from uuid import UUID

from jwt import InvalidTokenError

from yu_community.communities.domain import models
from yu_community.communities.domain.exceptions import AuthenticationError
from yu_community.infra import jwt as jwt_helper
from yu_community.infra.password import hash_password, needs_rehash, verify_password
from yu_community.obs import metrics as obs_metrics

_LOG = logging.getLogger(__name__)


class AdminRegistry:
	"""Fixed set of administrators known to the service.

	Injected into :class:`IdentityService`; the app seeds it at startup and
	tests build their own.
	"""

	def __init__(self, admins: Iterable[models.Administrator] = ()) -> None:
		self._by_id: dict[UUID, models.Administrator] = {}
		self._by_username: dict[str, models.Administrator] = {}
		for admin in admins:
			self.add(admin)

	def add(self, admin: models.Administrator) -> None:
		if admin.username in self._by_username:
			raise ValueError(f"duplicate administrator username {admin.username!r}")
		self._by_id[admin.id] = admin
		self._by_username[admin.username] = admin

	def replace(self, admin: models.Administrator) -> None:
		if self._by_id.get(admin.id) is None:
			raise KeyError(admin.id)
		self._by_id[admin.id] = admin
		self._by_username[admin.username] = admin

	def get(self, admin_id: UUID) -> Optional[models.Administrator]:
		return self._by_id.get(admin_id)

	def find_by_username(self, username: str) -> Optional[models.Administrator]:
		return self._by_username.get(username)

	def all(self) -> list[models.Administrator]:
		return list(self._by_id.values())


@dataclass(slots=True)
class Session:
	session_id: str
	admin: models.Administrator
	access_token: str


class IdentityService:
	"""Authenticates administrators and tracks their open sessions.

	There is no process-wide "current admin": each login opens its own
	session, and callers pass the resolved administrator into every core call.
	"""

	def __init__(self, registry: AdminRegistry) -> None:
		self.registry = registry
		self._sessions: dict[str, UUID] = {}

	async def authenticate(self, username: str, credential: str) -> models.Administrator:
		admin = self.registry.find_by_username(username)
		if admin is None:
			obs_metrics.login_attempt("unknown_user")
			raise AuthenticationError("invalid_credentials")
		# Argon2 verification blocks; run it off the event loop.
		valid = await asyncio.to_thread(verify_password, admin.credential_hash, credential)
		if not valid:
			obs_metrics.login_attempt("bad_credential")
			raise AuthenticationError("invalid_credentials")
		if needs_rehash(admin.credential_hash):
			upgraded = await asyncio.to_thread(hash_password, credential)
			admin = admin.model_copy(update={"credential_hash": upgraded})
			self.registry.replace(admin)
		obs_metrics.login_attempt("ok")
		return admin

	async def login(self, username: str, credential: str) -> Session:
		admin = await self.authenticate(username, credential)
		session_id = secrets.token_urlsafe(24)
		token = jwt_helper.issue_access_token(str(admin.id), session_id)
		self._sessions[session_id] = admin.id
		_LOG.info("admin_login", extra={"admin_id": str(admin.id), "role": admin.role.value})
		return Session(session_id=session_id, admin=admin, access_token=token)

	async def logout(self, session_id: str) -> None:
		admin_id = self._sessions.pop(session_id, None)
		if admin_id is not None:
			_LOG.info("admin_logout", extra={"admin_id": str(admin_id)})

	async def resolve_token(self, token: str) -> tuple[models.Administrator, str]:
		"""Return the administrator and session id behind an access token.

		Role and club scope come from the registry, never from the token.
		"""
		try:
			claims = jwt_helper.read_access_token(token)
		except InvalidTokenError as exc:
			raise AuthenticationError("invalid_token") from exc
		session_id = claims.session_id
		admin_id = self._sessions.get(session_id)
		if admin_id is None or str(admin_id) != claims.admin_id:
			raise AuthenticationError("session_expired")
		admin = self.registry.get(admin_id)
		if admin is None:
			raise AuthenticationError("invalid_token")
		return admin, session_id
