"""Domain models for clubs, content and notifications."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_validator


class AdminRole(str, Enum):
	APP_ADMIN = "app_admin"
	CLUB_ADMIN = "club_admin"


class ApprovalStatus(str, Enum):
	PENDING = "pending"
	APPROVED = "approved"
	REJECTED = "rejected"


class NotificationKind(str, Enum):
	NEW_EVENT = "new_event"
	UPCOMING_EVENT = "upcoming_event"
	POST_PENDING_APPROVAL = "post_pending_approval"
	POST_APPROVED = "post_approved"
	POST_REJECTED = "post_rejected"
	NEW_POST = "new_post"


# Announcements anyone may see; the rest belong to a club's moderation pipeline.
PUBLIC_NOTIFICATION_KINDS = frozenset(
	{
		NotificationKind.NEW_EVENT,
		NotificationKind.UPCOMING_EVENT,
		NotificationKind.NEW_POST,
	}
)


class Translated(BaseModel):
	"""A text value with its optional Arabic rendition."""

	base: str
	arabic: Optional[str] = None

	model_config = ConfigDict(frozen=True)

	def resolve(self, language: str = "en") -> str:
		if language == "ar" and self.arabic:
			return self.arabic
		return self.base


class Administrator(BaseModel):
	"""An identity allowed to manage club content."""

	id: UUID
	username: str
	credential_hash: str
	role: AdminRole
	club_id: Optional[UUID] = None

	model_config = ConfigDict(frozen=True)

	@model_validator(mode="after")
	def _check_scope(self) -> "Administrator":
		if self.role is AdminRole.APP_ADMIN and self.club_id is not None:
			raise ValueError("app admins are not affiliated with a club")
		return self

	@property
	def is_app_admin(self) -> bool:
		return self.role is AdminRole.APP_ADMIN

	@property
	def is_club_admin(self) -> bool:
		return self.role is AdminRole.CLUB_ADMIN


class Club(BaseModel):
	"""Represents a student club."""

	id: UUID
	name: Translated
	description: Translated
	logo_url: Optional[str] = None
	email: Optional[str] = None
	website: Optional[str] = None
	registration_link: Optional[str] = None
	created_at: datetime
	updated_at: datetime


class Post(BaseModel):
	"""Represents a club post awaiting or past moderation."""

	id: UUID
	club_id: UUID
	title: Translated
	description: Translated
	content: Translated
	date: datetime
	image_url: Optional[str] = None
	image_data: Optional[bytes] = None
	approval_status: ApprovalStatus = ApprovalStatus.PENDING
	rejection_reason: Optional[str] = None

	@model_validator(mode="after")
	def _check_invariants(self) -> "Post":
		if self.image_url is not None and self.image_data is not None:
			raise ValueError("a post carries an image url or image data, not both")
		if (self.approval_status is ApprovalStatus.REJECTED) != (self.rejection_reason is not None):
			raise ValueError("rejection_reason is present exactly when the post is rejected")
		return self


class Event(BaseModel):
	"""Represents a club event. Events are published as soon as they are created."""

	id: UUID
	club_id: UUID
	title: Translated
	description: Translated
	location: Translated
	start_date: datetime
	end_date: datetime
	is_all_day: bool = False
	created_at: datetime

	@model_validator(mode="after")
	def _check_window(self) -> "Event":
		if self.end_date < self.start_date:
			raise ValueError("end_date precedes start_date")
		return self


class Notification(BaseModel):
	"""Stored notification produced by a lifecycle transition."""

	id: UUID
	kind: NotificationKind
	title: Translated
	message: Translated
	date: datetime
	club_id: UUID
	is_read: bool = False
	related_post_id: Optional[UUID] = None
	related_event_id: Optional[UUID] = None

	@model_validator(mode="after")
	def _check_reference(self) -> "Notification":
		if self.related_post_id is not None and self.related_event_id is not None:
			raise ValueError("a notification references a post or an event, not both")
		return self

	@property
	def is_public(self) -> bool:
		return self.kind in PUBLIC_NOTIFICATION_KINDS
