"""Notification feed routes."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from yu_community.communities.api._errors import to_http_error
from yu_community.communities.domain import models
from yu_community.communities.domain.container import CommunityContainer, get_container
from yu_community.communities.domain.exceptions import CommunityError
from yu_community.communities.schemas import dto
from yu_community.infra.auth import get_current_admin, get_optional_admin

router = APIRouter(tags=["communities:notifications"])


def _notification_to_response(notification: models.Notification) -> dto.NotificationResponse:
	return dto.NotificationResponse(**notification.model_dump())


@router.get("/notifications", response_model=dto.NotificationListResponse)
async def list_notifications_endpoint(
	category: Optional[str] = Query(default=None, max_length=32),
	admin: Optional[models.Administrator] = Depends(get_optional_admin),
	container: CommunityContainer = Depends(get_container),
) -> dto.NotificationListResponse:
	try:
		items = await container.notifications.visible_to(admin, category=category)
	except CommunityError as exc:
		raise to_http_error(exc) from exc
	unread = await container.notifications.unread_count(admin)
	return dto.NotificationListResponse(
		items=[_notification_to_response(item) for item in items],
		unread=unread,
	)


@router.get("/notifications/unread", response_model=dto.NotificationUnreadResponse)
async def unread_notifications_endpoint(
	admin: Optional[models.Administrator] = Depends(get_optional_admin),
	container: CommunityContainer = Depends(get_container),
) -> dto.NotificationUnreadResponse:
	count = await container.notifications.unread_count(admin)
	return dto.NotificationUnreadResponse(count=count)


@router.post("/notifications/{notification_id}/read", response_model=dto.NotificationResponse)
async def mark_notification_read_endpoint(
	notification_id: UUID,
	admin: models.Administrator = Depends(get_current_admin),
	container: CommunityContainer = Depends(get_container),
) -> dto.NotificationResponse:
	try:
		notification = await container.notifications.mark_read(admin, notification_id)
	except CommunityError as exc:
		raise to_http_error(exc) from exc
	return _notification_to_response(notification)


@router.post("/notifications/read-all", response_model=dto.NotificationMarkReadResponse)
async def mark_all_notifications_read_endpoint(
	admin: models.Administrator = Depends(get_current_admin),
	container: CommunityContainer = Depends(get_container),
) -> dto.NotificationMarkReadResponse:
	updated = await container.notifications.mark_all_read()
	return dto.NotificationMarkReadResponse(updated=updated)
