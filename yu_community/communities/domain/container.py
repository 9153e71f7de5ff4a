"""Lightweight service container shared by the communities API."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional

from yu_community.communities.domain import models
from yu_community.communities.domain.clubs_service import ClubDirectory
from yu_community.communities.domain.identity_service import AdminRegistry, IdentityService
from yu_community.communities.domain.locks import ClubLocks
from yu_community.communities.domain.notifications_service import NotificationService
from yu_community.communities.domain.queries import QueryService
from yu_community.communities.domain.repo import CommunityRepository, InMemoryCommunityRepository
from yu_community.communities.domain.services import ContentLifecycleService
from yu_community.communities.workers.reminders import UpcomingEventReminder


@dataclass(slots=True)
class CommunityContainer:
	repository: CommunityRepository
	registry: AdminRegistry
	identity: IdentityService
	clubs: ClubDirectory
	lifecycle: ContentLifecycleService
	notifications: NotificationService
	queries: QueryService
	reminders: UpcomingEventReminder


def build_container(
	*,
	repository: CommunityRepository | None = None,
	admins: Iterable[models.Administrator] = (),
	clock: Callable[[], datetime] | None = None,
	calendar_tz: str | None = None,
) -> CommunityContainer:
	repository = repository or InMemoryCommunityRepository()
	registry = AdminRegistry(admins)
	locks = ClubLocks()
	notifications = NotificationService(repository=repository, clock=clock)
	return CommunityContainer(
		repository=repository,
		registry=registry,
		identity=IdentityService(registry),
		clubs=ClubDirectory(repository=repository, locks=locks, clock=clock),
		lifecycle=ContentLifecycleService(
			repository=repository,
			notifications=notifications,
			locks=locks,
			clock=clock,
			calendar_tz=calendar_tz,
		),
		notifications=notifications,
		queries=QueryService(repository=repository, calendar_tz=calendar_tz),
		reminders=UpcomingEventReminder(repository=repository, notifications=notifications),
	)


_container: Optional[CommunityContainer] = None


def get_container() -> CommunityContainer:
	global _container
	if _container is None:
		_container = build_container()
	return _container


def set_container(container: Optional[CommunityContainer]) -> None:
	global _container
	_container = container
