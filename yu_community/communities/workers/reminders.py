"""Worker that announces events about to start."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone

from redis.exceptions import RedisError

from yu_community.communities.domain import repo as repo_module
from yu_community.communities.domain.notifications_service import NotificationService
from yu_community.infra.redis import redis_client
from yu_community.obs import metrics as obs_metrics
from yu_community.settings import settings

_LOG = logging.getLogger(__name__)


class UpcomingEventReminder:
	"""Scans upcoming events and emits one ``upcoming_event`` notification each.

	Deduplication uses a Redis ``SET NX`` key per event so several app
	instances sweeping the same store announce an event only once.
	"""

	def __init__(
		self,
		*,
		repository: repo_module.CommunityRepository,
		notifications: NotificationService,
		window: timedelta | None = None,
		poll_interval: float | None = None,
		dedupe_ttl_seconds: int | None = None,
	) -> None:
		self.repo = repository
		self.notifications = notifications
		self.window = window or timedelta(hours=settings.reminder_window_hours)
		self.poll_interval = poll_interval if poll_interval is not None else settings.reminder_poll_seconds
		self.dedupe_ttl_seconds = dedupe_ttl_seconds or settings.reminder_dedupe_ttl_seconds
		self._running = False

	async def run_forever(self) -> None:
		self._running = True
		while self._running:
			try:
				await self.run_once()
			except RedisError:
				obs_metrics.reminder_outcome("error")
				_LOG.warning("upcoming_event_sweep_failed", exc_info=True)
			except Exception:
				obs_metrics.reminder_outcome("error")
				_LOG.exception("upcoming_event_sweep_crashed")
			await asyncio.sleep(self.poll_interval)

	def stop(self) -> None:
		self._running = False

	@staticmethod
	def _key(event_id) -> str:
		return f"yu:event:upcoming:{event_id}"

	async def run_once(self, *, now: datetime | None = None) -> int:
		now = now or datetime.now(timezone.utc)
		horizon = now + self.window
		sent = 0
		for event in await self.repo.list_events():
			start = event.start_date if event.start_date.tzinfo else event.start_date.replace(tzinfo=timezone.utc)
			if not (now < start <= horizon):
				continue
			stored = await redis_client.set(self._key(event.id), "1", ex=self.dedupe_ttl_seconds, nx=True)
			if not stored:
				obs_metrics.reminder_outcome("duplicate")
				continue
			club = await self.repo.get_club(event.club_id)
			if club is None:
				obs_metrics.reminder_outcome("orphaned")
				continue
			await self.notifications.event_upcoming(event, club)
			obs_metrics.reminder_outcome("sent")
			sent += 1
		if sent:
			_LOG.info("upcoming_event_reminders_sent", extra={"count": sent})
		return sent
