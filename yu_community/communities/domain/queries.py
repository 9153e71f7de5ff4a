"""Role- and club-scoped read views over posts and events."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID
from zoneinfo import ZoneInfo

from yu_community.communities.domain import models, policies, repo as repo_module
from yu_community.communities.domain.exceptions import AuthorizationError
from yu_community.settings import settings


def _newest_first(posts: list[models.Post]) -> list[models.Post]:
	return sorted(reversed(posts), key=lambda post: post.date, reverse=True)


class QueryService:
	"""Read-only slices consumed by the presentation layer."""

	def __init__(
		self,
		*,
		repository: repo_module.CommunityRepository,
		calendar_tz: str | None = None,
	) -> None:
		self.repo = repository
		self.calendar_tz = ZoneInfo(calendar_tz or settings.calendar_timezone)

	def calendar_day(self, value: date | datetime) -> date:
		"""Calendar day of ``value``; aware datetimes are read in the calendar timezone."""
		if isinstance(value, datetime):
			if value.tzinfo is None:
				return value.date()
			return value.astimezone(self.calendar_tz).date()
		return value

	def _instant(self, value: datetime) -> float:
		if value.tzinfo is None:
			value = value.replace(tzinfo=self.calendar_tz)
		return value.timestamp()

	async def posts_for_club(self, club_id: UUID, *, approved_only: bool) -> list[models.Post]:
		return [
			post
			for post in await self.repo.list_posts()
			if post.club_id == club_id
			and (not approved_only or post.approval_status is models.ApprovalStatus.APPROVED)
		]

	async def visible_posts(self, viewer: models.Administrator | None) -> list[models.Post]:
		"""Approved posts for everyone plus pending posts inside the viewer's scope.

		Rejected posts never appear here; they are reachable by id only.
		"""
		posts = [post for post in await self.repo.list_posts() if policies.can_view_post(viewer, post)]
		return _newest_first(posts)

	async def list_posts(
		self,
		viewer: models.Administrator | None,
		*,
		club_id: Optional[UUID] = None,
		status: Optional[models.ApprovalStatus] = None,
	) -> list[models.Post]:
		"""Filtered listing behind ``GET /posts``.

		Rejected posts are listed only when explicitly requested and only to
		admins who can act on the owning club.
		"""
		if status is not None and status is not models.ApprovalStatus.APPROVED and viewer is None:
			raise AuthorizationError("authentication_required")
		if status is models.ApprovalStatus.REJECTED:
			clubs = {club.id: club for club in await self.repo.list_clubs()}
			posts = [
				post
				for post in await self.repo.list_posts()
				if post.approval_status is models.ApprovalStatus.REJECTED
				and post.club_id in clubs
				and policies.authorize_club_mutation(viewer, clubs[post.club_id])
			]
			posts = _newest_first(posts)
		else:
			posts = await self.visible_posts(viewer)
			if status is not None:
				posts = [post for post in posts if post.approval_status is status]
		if club_id is not None:
			posts = [post for post in posts if post.club_id == club_id]
		return posts

	async def events_on_date(self, day: date | datetime) -> list[models.Event]:
		"""Events whose calendar span covers ``day``, earliest start first."""
		wanted = self.calendar_day(day)
		matches = [
			event
			for event in await self.repo.list_events()
			if self.calendar_day(event.start_date) <= wanted <= self.calendar_day(event.end_date)
		]
		return sorted(matches, key=lambda event: self._instant(event.start_date))

	async def list_events(self) -> list[models.Event]:
		return sorted(await self.repo.list_events(), key=lambda event: self._instant(event.start_date))
