"""Service layer orchestrating the post and event lifecycle."""

from __future__ import annotations

import logging
from datetime import datetime, time, timezone
from typing import Callable, Optional
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

from yu_community.communities.domain import models, policies, repo as repo_module
from yu_community.communities.domain.exceptions import NotFoundError
from yu_community.communities.domain.locks import ClubLocks
from yu_community.communities.domain.notifications_service import NotificationService
from yu_community.communities.infra import redis_streams
from yu_community.communities.schemas import dto
from yu_community.obs import metrics as obs_metrics
from yu_community.settings import settings

_LOG = logging.getLogger(__name__)


def _utcnow() -> datetime:
	return datetime.now(timezone.utc)


def _actor_id(actor: models.Administrator | None) -> str | None:
	return str(actor.id) if actor is not None else None


class ContentLifecycleService:
	"""Implements the post moderation state machine and event publication.

	Posts move ``pending -> approved`` or ``pending -> rejected`` and never
	leave a resolved state. Events skip moderation entirely and are visible as
	soon as they are created. Every transition holds the owning club's lock
	from the first read to the last write, so two moderators racing on the
	same post resolve deterministically.
	"""

	def __init__(
		self,
		*,
		repository: repo_module.CommunityRepository,
		notifications: NotificationService,
		locks: ClubLocks | None = None,
		clock: Callable[[], datetime] | None = None,
		calendar_tz: str | None = None,
	) -> None:
		self.repo = repository
		self.notifications = notifications
		self.locks = locks or ClubLocks()
		self._clock = clock or _utcnow
		self.calendar_tz = ZoneInfo(calendar_tz or settings.calendar_timezone)

	# ------------------------------------------------------------------
	# Helpers

	async def _require_club(self, club_id: Optional[UUID]) -> models.Club:
		policies.ensure_club_selected(club_id)
		club = await self.repo.get_club(club_id)  # type: ignore[arg-type]
		if club is None:
			raise NotFoundError("club_not_found")
		return club

	async def _require_post(self, post_id: UUID) -> models.Post:
		post = await self.repo.get_post(post_id)
		if post is None:
			raise NotFoundError("post_not_found")
		return post

	async def _resolve(
		self,
		actor: models.Administrator | None,
		post_id: UUID,
		*,
		status: models.ApprovalStatus,
		reason: Optional[str],
		operation: str,
	) -> models.Post:
		policies.assert_can_moderate(actor, operation=operation)
		post = await self._require_post(post_id)
		async with self.locks.for_club(post.club_id):
			# Re-read under the lock; a concurrent transition may have landed.
			post = await self._require_post(post_id)
			policies.ensure_pending(post)
			updated = models.Post.model_validate(
				{**post.model_dump(), "approval_status": status, "rejection_reason": reason}
			)
			await self.repo.save_post(updated)
			club = await self.repo.get_club(updated.club_id)
			if club is not None:
				if status is models.ApprovalStatus.APPROVED:
					await self.notifications.post_approved(updated, club)
				else:
					await self.notifications.post_rejected(updated, club)
		obs_metrics.post_transition(status.value)
		_LOG.info(
			"post_resolved",
			extra={"post_id": str(post_id), "club_id": str(updated.club_id), "status": status.value},
		)
		await redis_streams.publish_post_event(
			status.value,
			post_id=str(updated.id),
			club_id=str(updated.club_id),
			actor_id=_actor_id(actor),
		)
		return updated

	def _all_day_window(self, start: datetime, end: datetime) -> tuple[datetime, datetime]:
		# Whole days as entered, anchored in the calendar timezone used by date queries.
		start_of_day = datetime.combine(start.date(), time.min, tzinfo=self.calendar_tz if start.tzinfo else None)
		end_of_day = datetime.combine(end.date(), time.max, tzinfo=self.calendar_tz if end.tzinfo else None)
		return start_of_day, end_of_day

	# ------------------------------------------------------------------
	# Posts

	async def create_post(
		self,
		author: models.Administrator | None,
		payload: dto.PostCreateRequest,
	) -> models.Post:
		club = await self._require_club(payload.club_id)
		policies.assert_can_mutate_club(author, club, operation="create_post")
		policies.ensure_required_text(
			{
				"title": payload.title.base,
				"description": payload.description.base,
				"content": payload.content.base,
			}
		)
		image_url = payload.image_url.strip() if payload.image_url and payload.image_url.strip() else None
		image_data = payload.image_data or None
		policies.ensure_single_image(image_url, image_data)
		post = models.Post(
			id=uuid4(),
			club_id=club.id,
			title=policies.clean_translated(payload.title),
			description=policies.clean_translated(payload.description),
			content=policies.clean_translated(payload.content),
			date=self._clock(),
			image_url=image_url,
			image_data=image_data,
			approval_status=models.ApprovalStatus.PENDING,
		)
		async with self.locks.for_club(club.id):
			await self.repo.add_post(post)
			await self.notifications.post_submitted(post, club)
		obs_metrics.post_transition("created")
		_LOG.info("post_created", extra={"post_id": str(post.id), "club_id": str(club.id)})
		await redis_streams.publish_post_event(
			"created",
			post_id=str(post.id),
			club_id=str(club.id),
			actor_id=_actor_id(author),
		)
		return post

	async def approve_post(self, actor: models.Administrator | None, post_id: UUID) -> models.Post:
		return await self._resolve(
			actor,
			post_id,
			status=models.ApprovalStatus.APPROVED,
			reason=None,
			operation="approve_post",
		)

	async def reject_post(
		self,
		actor: models.Administrator | None,
		post_id: UUID,
		reason: Optional[str] = None,
	) -> models.Post:
		return await self._resolve(
			actor,
			post_id,
			status=models.ApprovalStatus.REJECTED,
			reason=policies.normalize_rejection_reason(reason),
			operation="reject_post",
		)

	async def delete_post(self, actor: models.Administrator | None, post_id: UUID) -> None:
		"""Remove a post. Deleting an id that is already gone succeeds silently.

		Notifications that reference the post are left in place; readers must
		tolerate a missing post on lookup.
		"""
		policies.assert_authenticated(actor, operation="delete_post")
		post = await self.repo.get_post(post_id)
		if post is None:
			return None
		async with self.locks.for_club(post.club_id):
			post = await self.repo.get_post(post_id)
			if post is None:
				return None
			club = await self.repo.get_club(post.club_id)
			if club is None:
				policies.assert_can_moderate(actor, operation="delete_post")
			else:
				policies.assert_can_mutate_club(actor, club, operation="delete_post")
			await self.repo.remove_post(post_id)
		obs_metrics.post_transition("deleted")
		_LOG.info("post_deleted", extra={"post_id": str(post_id), "club_id": str(post.club_id)})
		await redis_streams.publish_post_event(
			"deleted",
			post_id=str(post_id),
			club_id=str(post.club_id),
			actor_id=_actor_id(actor),
		)
		return None

	async def get_post(self, post_id: UUID) -> Optional[models.Post]:
		return await self.repo.get_post(post_id)

	# ------------------------------------------------------------------
	# Events

	async def create_event(
		self,
		actor: models.Administrator | None,
		payload: dto.EventCreateRequest,
	) -> models.Event:
		club = await self._require_club(payload.club_id)
		policies.assert_can_mutate_club(actor, club, operation="create_event")
		policies.ensure_required_text(
			{
				"title": payload.title.base,
				"description": payload.description.base,
				"location": payload.location.base,
			}
		)
		policies.ensure_event_window(payload.start_date, payload.end_date)
		start_date, end_date = payload.start_date, payload.end_date
		if payload.is_all_day:
			start_date, end_date = self._all_day_window(start_date, end_date)
		event = models.Event(
			id=uuid4(),
			club_id=club.id,
			title=policies.clean_translated(payload.title),
			description=policies.clean_translated(payload.description),
			location=policies.clean_translated(payload.location),
			start_date=start_date,
			end_date=end_date,
			is_all_day=payload.is_all_day,
			created_at=self._clock(),
		)
		async with self.locks.for_club(club.id):
			await self.repo.add_event(event)
			await self.notifications.event_created(event, club)
		obs_metrics.inc_event_created()
		_LOG.info("event_created", extra={"event_id": str(event.id), "club_id": str(club.id)})
		await redis_streams.publish_event_event(
			"created",
			event_id=str(event.id),
			club_id=str(club.id),
			actor_id=_actor_id(actor),
		)
		return event

	async def get_event(self, event_id: UUID) -> Optional[models.Event]:
		return await self.repo.get_event(event_id)
