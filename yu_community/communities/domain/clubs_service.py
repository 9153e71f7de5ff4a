"""Club directory: lookup, listing and owner updates."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import UUID, uuid4

from yu_community.communities.domain import models, policies, repo as repo_module
from yu_community.communities.domain.exceptions import NotFoundError
from yu_community.communities.domain.locks import ClubLocks
from yu_community.communities.infra import redis_streams
from yu_community.communities.schemas import dto
from yu_community.obs import metrics as obs_metrics

_LOG = logging.getLogger(__name__)

_OPTIONAL_LINKS = ("logo_url", "email", "website", "registration_link")


def _utcnow() -> datetime:
	return datetime.now(timezone.utc)


def _clean_link(value: Optional[str]) -> Optional[str]:
	if value is None or not value.strip():
		return None
	return value.strip()


class ClubDirectory:
	"""Holds club records. Clubs are never deleted."""

	def __init__(
		self,
		*,
		repository: repo_module.CommunityRepository,
		locks: ClubLocks | None = None,
		clock: Callable[[], datetime] | None = None,
	) -> None:
		self.repo = repository
		self.locks = locks or ClubLocks()
		self._clock = clock or _utcnow

	async def create_club(self, payload: dto.ClubCreateRequest) -> models.Club:
		policies.ensure_required_text({"name": payload.name.base, "description": payload.description.base})
		now = self._clock()
		club = models.Club(
			id=uuid4(),
			name=policies.clean_translated(payload.name),
			description=policies.clean_translated(payload.description),
			created_at=now,
			updated_at=now,
			**{field: _clean_link(getattr(payload, field)) for field in _OPTIONAL_LINKS},
		)
		return await self.repo.add_club(club)

	async def get_club(self, club_id: UUID) -> Optional[models.Club]:
		return await self.repo.get_club(club_id)

	async def list_clubs(self) -> list[models.Club]:
		return await self.repo.list_clubs()

	async def find_by_name(self, name: str) -> Optional[models.Club]:
		wanted = name.strip().casefold()
		for club in await self.repo.list_clubs():
			if club.name.base.casefold() == wanted:
				return club
		return None

	async def clubs_in_scope(self, admin: models.Administrator | None) -> list[models.Club]:
		return policies.authorize_club_scope(admin, await self.repo.list_clubs())

	async def update_club(
		self,
		actor: models.Administrator | None,
		club_id: UUID,
		payload: dto.ClubUpdateRequest,
	) -> models.Club:
		"""Replace the provided mutable fields; ``id`` never changes.

		Club admins stay authorized across a rename because their affiliation
		is keyed by club id.
		"""
		club = await self.repo.get_club(club_id)
		if club is None:
			raise NotFoundError("club_not_found")
		policies.assert_can_mutate_club(actor, club, operation="update_club")
		changes = payload.model_dump(exclude_unset=True)
		# An explicit null counts as blank; name and description cannot be cleared.
		policies.ensure_required_text(
			{
				key: getattr(payload, key).base if getattr(payload, key) is not None else None
				for key in ("name", "description")
				if key in changes
			}
		)

		async with self.locks.for_club(club_id):
			current = await self.repo.get_club(club_id)
			if current is None:
				raise NotFoundError("club_not_found")
			update: dict[str, object] = {"updated_at": self._clock()}
			for key in ("name", "description"):
				if key in changes:
					update[key] = policies.clean_translated(getattr(payload, key))
			for key in _OPTIONAL_LINKS:
				if key in changes:
					update[key] = _clean_link(changes[key])
			updated = current.model_copy(update=update)
			await self.repo.save_club(updated)
		obs_metrics.inc_club_updated()
		_LOG.info("club_updated", extra={"club_id": str(club_id), "fields": sorted(changes)})
		await redis_streams.publish_club_event(
			"updated",
			club_id=str(club_id),
			actor_id=str(actor.id) if actor is not None else None,
		)
		return updated
