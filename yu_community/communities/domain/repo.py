"""Storage interface for clubs, posts, events and notifications.

The shipped implementation keeps everything in process memory. Callers only
depend on :class:`CommunityRepository`, so a database-backed implementation can
be dropped in without touching the services.
"""

from __future__ import annotations

import abc
from typing import Optional
from uuid import UUID

from yu_community.communities.domain import models


class CommunityRepository(abc.ABC):
	"""Persistence contract used by the communities services."""

	# Clubs
	@abc.abstractmethod
	async def add_club(self, club: models.Club) -> models.Club: ...

	@abc.abstractmethod
	async def get_club(self, club_id: UUID) -> Optional[models.Club]: ...

	@abc.abstractmethod
	async def list_clubs(self) -> list[models.Club]: ...

	@abc.abstractmethod
	async def save_club(self, club: models.Club) -> models.Club: ...

	# Posts
	@abc.abstractmethod
	async def add_post(self, post: models.Post) -> models.Post: ...

	@abc.abstractmethod
	async def get_post(self, post_id: UUID) -> Optional[models.Post]: ...

	@abc.abstractmethod
	async def list_posts(self) -> list[models.Post]: ...

	@abc.abstractmethod
	async def save_post(self, post: models.Post) -> models.Post: ...

	@abc.abstractmethod
	async def remove_post(self, post_id: UUID) -> bool: ...

	# Events
	@abc.abstractmethod
	async def add_event(self, event: models.Event) -> models.Event: ...

	@abc.abstractmethod
	async def get_event(self, event_id: UUID) -> Optional[models.Event]: ...

	@abc.abstractmethod
	async def list_events(self) -> list[models.Event]: ...

	# Notifications
	@abc.abstractmethod
	async def append_notification(self, notification: models.Notification) -> models.Notification: ...

	@abc.abstractmethod
	async def get_notification(self, notification_id: UUID) -> Optional[models.Notification]: ...

	@abc.abstractmethod
	async def list_notifications(self) -> list[models.Notification]: ...

	@abc.abstractmethod
	async def save_notification(self, notification: models.Notification) -> models.Notification: ...


class InMemoryCommunityRepository(CommunityRepository):
	"""Dictionary-backed repository; iteration follows insertion order."""

	def __init__(self) -> None:
		self.clubs: dict[UUID, models.Club] = {}
		self.posts: dict[UUID, models.Post] = {}
		self.events: dict[UUID, models.Event] = {}
		self.notifications: dict[UUID, models.Notification] = {}

	async def add_club(self, club: models.Club) -> models.Club:
		if club.id in self.clubs:
			raise KeyError(f"duplicate club id {club.id}")
		self.clubs[club.id] = club
		return club

	async def get_club(self, club_id: UUID) -> Optional[models.Club]:
		return self.clubs.get(club_id)

	async def list_clubs(self) -> list[models.Club]:
		return list(self.clubs.values())

	async def save_club(self, club: models.Club) -> models.Club:
		self.clubs[club.id] = club
		return club

	async def add_post(self, post: models.Post) -> models.Post:
		self.posts[post.id] = post
		return post

	async def get_post(self, post_id: UUID) -> Optional[models.Post]:
		return self.posts.get(post_id)

	async def list_posts(self) -> list[models.Post]:
		return list(self.posts.values())

	async def save_post(self, post: models.Post) -> models.Post:
		self.posts[post.id] = post
		return post

	async def remove_post(self, post_id: UUID) -> bool:
		return self.posts.pop(post_id, None) is not None

	async def add_event(self, event: models.Event) -> models.Event:
		self.events[event.id] = event
		return event

	async def get_event(self, event_id: UUID) -> Optional[models.Event]:
		return self.events.get(event_id)

	async def list_events(self) -> list[models.Event]:
		return list(self.events.values())

	async def append_notification(self, notification: models.Notification) -> models.Notification:
		self.notifications[notification.id] = notification
		return notification

	async def get_notification(self, notification_id: UUID) -> Optional[models.Notification]:
		return self.notifications.get(notification_id)

	async def list_notifications(self) -> list[models.Notification]:
		return list(self.notifications.values())

	async def save_notification(self, notification: models.Notification) -> models.Notification:
		self.notifications[notification.id] = notification
		return notification
