"""Authorization and validation policies for club content operations."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping, Optional

from yu_community.communities.domain import models
from yu_community.communities.domain.exceptions import AuthorizationError, InvalidStateError, ValidationError
from yu_community.obs import metrics as obs_metrics

NO_REASON_PROVIDED = "No reason provided"


def authorize_club_mutation(admin: models.Administrator | None, club: models.Club) -> bool:
	"""True when ``admin`` may change content owned by ``club``."""
	if admin is None:
		return False
	if admin.is_app_admin:
		return True
	return admin.is_club_admin and admin.club_id is not None and admin.club_id == club.id


def authorize_club_scope(
	admin: models.Administrator | None,
	clubs: Iterable[models.Club],
) -> list[models.Club]:
	"""Clubs the caller may act on, in directory order."""
	if admin is None:
		return []
	return [club for club in clubs if authorize_club_mutation(admin, club)]


def assert_can_mutate_club(
	admin: models.Administrator | None,
	club: models.Club,
	*,
	operation: str,
) -> None:
	if not authorize_club_mutation(admin, club):
		obs_metrics.authorization_denied(operation)
		raise AuthorizationError("club_scope_required")


def assert_can_moderate(admin: models.Administrator | None, *, operation: str) -> models.Administrator:
	"""Only app admins resolve pending posts; club admins never approve their own."""
	if admin is None or not admin.is_app_admin:
		obs_metrics.authorization_denied(operation)
		raise AuthorizationError("app_admin_required")
	return admin


def assert_authenticated(admin: models.Administrator | None, *, operation: str) -> models.Administrator:
	if admin is None:
		obs_metrics.authorization_denied(operation)
		raise AuthorizationError("authentication_required")
	return admin


def ensure_pending(post: models.Post) -> None:
	if post.approval_status is not models.ApprovalStatus.PENDING:
		raise InvalidStateError(post.approval_status.value, "post_not_pending")


def is_blank(value: Optional[str]) -> bool:
	return value is None or not value.strip()


def ensure_required_text(values: Mapping[str, Optional[str]]) -> None:
	"""Reject every blank field at once, keyed by field name."""
	missing = {name: "required" for name, value in values.items() if is_blank(value)}
	if missing:
		raise ValidationError(fields=missing)


def ensure_club_selected(club_id: object) -> None:
	if club_id is None:
		raise ValidationError(fields={"club_id": "required"})


def ensure_single_image(image_url: Optional[str], image_data: Optional[bytes]) -> None:
	if image_url is not None and image_data is not None:
		raise ValidationError(fields={"image": "url_and_data_are_exclusive"})


def ensure_event_window(start_date: datetime, end_date: datetime) -> None:
	if (start_date.tzinfo is None) != (end_date.tzinfo is None):
		raise ValidationError(fields={"end_date": "timezone_mismatch"})
	if end_date < start_date:
		raise ValidationError(fields={"end_date": "before_start_date"})


def normalize_rejection_reason(reason: Optional[str]) -> str:
	if is_blank(reason):
		return NO_REASON_PROVIDED
	return reason.strip()  # type: ignore[union-attr]


def clean_translated(value: models.Translated) -> models.Translated:
	"""Trim both renditions; a blank Arabic value is treated as absent."""
	arabic = value.arabic.strip() if value.arabic and value.arabic.strip() else None
	return models.Translated(base=value.base.strip(), arabic=arabic)


def can_view_post(admin: models.Administrator | None, post: models.Post) -> bool:
	"""Visibility rule for the general post feed."""
	if post.approval_status is models.ApprovalStatus.APPROVED:
		return True
	if post.approval_status is models.ApprovalStatus.REJECTED or admin is None:
		return False
	if admin.is_app_admin:
		return True
	return admin.club_id is not None and admin.club_id == post.club_id


def can_open_post(admin: models.Administrator | None, post: models.Post) -> bool:
	"""Direct lookup by id; unlike the feed this also reaches rejected posts."""
	if post.approval_status is models.ApprovalStatus.APPROVED:
		return True
	if admin is None:
		return False
	return admin.is_app_admin or (admin.club_id is not None and admin.club_id == post.club_id)


def can_view_notification(admin: models.Administrator | None, notification: models.Notification) -> bool:
	if notification.is_public:
		return True
	if admin is None:
		return False
	if admin.is_app_admin:
		return True
	return admin.club_id is not None and admin.club_id == notification.club_id
