"""Notification fan-out: builds, stores and filters notifications per viewer."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import UUID, uuid4

from yu_community.communities.domain import models, policies, repo as repo_module
from yu_community.communities.domain.exceptions import NotFoundError, ValidationError
from yu_community.obs import metrics as obs_metrics

_LOG = logging.getLogger(__name__)

Kind = models.NotificationKind

CATEGORY_KINDS: dict[str, frozenset[models.NotificationKind] | None] = {
	"all": None,
	"events": frozenset({Kind.NEW_EVENT, Kind.UPCOMING_EVENT}),
	"approvals": frozenset({Kind.POST_PENDING_APPROVAL}),
	"approved": frozenset({Kind.POST_APPROVED}),
	"rejected": frozenset({Kind.POST_REJECTED}),
}


def _utcnow() -> datetime:
	return datetime.now(timezone.utc)


def _pair(base: str, arabic: str) -> models.Translated:
	return models.Translated(base=base, arabic=arabic)


class NotificationService:
	"""Append-only notification log with per-role visibility.

	Notifications are created only by the fan-out helpers below, each called by
	the lifecycle engine after a committed transition. ``is_read`` is the only
	field that changes after an append.
	"""

	def __init__(
		self,
		*,
		repository: repo_module.CommunityRepository,
		clock: Callable[[], datetime] | None = None,
	) -> None:
		self.repo = repository
		self._clock = clock or _utcnow
		self._lock = asyncio.Lock()

	async def _append(
		self,
		kind: models.NotificationKind,
		*,
		club: models.Club,
		title: models.Translated,
		message: models.Translated,
		related_post_id: UUID | None = None,
		related_event_id: UUID | None = None,
	) -> models.Notification:
		notification = models.Notification(
			id=uuid4(),
			kind=kind,
			title=title,
			message=message,
			date=self._clock(),
			club_id=club.id,
			related_post_id=related_post_id,
			related_event_id=related_event_id,
		)
		async with self._lock:
			await self.repo.append_notification(notification)
		obs_metrics.notification_appended(kind.value)
		_LOG.info(
			"notification_appended",
			extra={"kind": kind.value, "club_id": str(club.id), "notification_id": str(notification.id)},
		)
		return notification

	# ------------------------------------------------------------------
	# Fan-out

	async def post_submitted(self, post: models.Post, club: models.Club) -> models.Notification:
		return await self._append(
			Kind.POST_PENDING_APPROVAL,
			club=club,
			title=_pair("Post awaiting approval", "منشور بانتظار الموافقة"),
			message=_pair(
				f'{club.name.base} submitted "{post.title.base}" for review.',
				f'أرسل {club.name.resolve("ar")} "{post.title.resolve("ar")}" للمراجعة.',
			),
			related_post_id=post.id,
		)

	async def post_approved(self, post: models.Post, club: models.Club) -> list[models.Notification]:
		"""Tell the submitting club, then announce the post to everyone."""
		approved = await self._append(
			Kind.POST_APPROVED,
			club=club,
			title=_pair("Post approved", "تمت الموافقة على المنشور"),
			message=_pair(
				f'"{post.title.base}" is now published.',
				f'تم نشر "{post.title.resolve("ar")}".',
			),
			related_post_id=post.id,
		)
		announced = await self._append(
			Kind.NEW_POST,
			club=club,
			title=_pair(f"New post from {club.name.base}", f'منشور جديد من {club.name.resolve("ar")}'),
			message=post.title,
			related_post_id=post.id,
		)
		return [approved, announced]

	async def post_rejected(self, post: models.Post, club: models.Club) -> models.Notification:
		reason = post.rejection_reason or policies.NO_REASON_PROVIDED
		return await self._append(
			Kind.POST_REJECTED,
			club=club,
			title=_pair("Post rejected", "تم رفض المنشور"),
			message=_pair(
				f'"{post.title.base}" was rejected: {reason}',
				f'تم رفض "{post.title.resolve("ar")}": {reason}',
			),
			related_post_id=post.id,
		)

	async def event_created(self, event: models.Event, club: models.Club) -> models.Notification:
		return await self._append(
			Kind.NEW_EVENT,
			club=club,
			title=_pair(f"New event: {event.title.base}", f'فعالية جديدة: {event.title.resolve("ar")}'),
			message=_pair(
				f"{club.name.base} at {event.location.base}",
				f'{club.name.resolve("ar")} في {event.location.resolve("ar")}',
			),
			related_event_id=event.id,
		)

	async def event_upcoming(self, event: models.Event, club: models.Club) -> models.Notification:
		when = event.start_date.strftime("%Y-%m-%d %H:%M")
		return await self._append(
			Kind.UPCOMING_EVENT,
			club=club,
			title=_pair(f"Upcoming: {event.title.base}", f'فعالية قادمة: {event.title.resolve("ar")}'),
			message=_pair(
				f"Starts {when} at {event.location.base}",
				f'تبدأ {when} في {event.location.resolve("ar")}',
			),
			related_event_id=event.id,
		)

	# ------------------------------------------------------------------
	# Queries

	async def visible_to(
		self,
		admin: models.Administrator | None,
		*,
		category: Optional[str] = None,
	) -> list[models.Notification]:
		"""Notifications the viewer may see, newest first.

		Recomputed from the log on every call so read-state and new appends are
		always reflected.
		"""
		key = category or "all"
		if key not in CATEGORY_KINDS:
			raise ValidationError(fields={"category": "unknown_category"})
		kinds = CATEGORY_KINDS[key]
		items = [
			item
			for item in await self.repo.list_notifications()
			if policies.can_view_notification(admin, item) and (kinds is None or item.kind in kinds)
		]
		# Later appends win ties on identical timestamps.
		return sorted(reversed(items), key=lambda item: item.date, reverse=True)

	async def unread_count(self, admin: models.Administrator | None) -> int:
		return sum(1 for item in await self.visible_to(admin) if not item.is_read)

	# ------------------------------------------------------------------
	# Read state

	async def mark_read(self, admin: models.Administrator, notification_id: UUID) -> models.Notification:
		"""Flip one notification the admin can see; hidden ones read as unknown."""
		async with self._lock:
			notification = await self.repo.get_notification(notification_id)
			if notification is None or not policies.can_view_notification(admin, notification):
				raise NotFoundError("notification_not_found")
			if notification.is_read:
				return notification
			updated = notification.model_copy(update={"is_read": True})
			await self.repo.save_notification(updated)
		obs_metrics.notifications_marked_read("single")
		return updated

	async def mark_all_read(self) -> int:
		"""Mark every stored notification read, returning how many flipped."""
		flipped = 0
		async with self._lock:
			for notification in await self.repo.list_notifications():
				if notification.is_read:
					continue
				await self.repo.save_notification(notification.model_copy(update={"is_read": True}))
				flipped += 1
		obs_metrics.notifications_marked_read("all", flipped)
		return flipped
