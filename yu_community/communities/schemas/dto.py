"""Pydantic schemas for the communities API."""

from __future__ import annotations

import base64
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Base64Bytes, BaseModel, Field

from yu_community.communities.domain import models
from yu_community.communities.domain.models import AdminRole, ApprovalStatus, NotificationKind, Translated


class LoginRequest(BaseModel):
	username: str = Field(..., max_length=120)
	credential: str = Field(..., max_length=512)


class LoginResponse(BaseModel):
	access_token: str
	token_type: str = "bearer"
	admin_id: UUID
	username: str
	role: AdminRole
	club_id: Optional[UUID] = None


class ClubResponse(BaseModel):
	id: UUID
	name: Translated
	description: Translated
	logo_url: Optional[str] = None
	email: Optional[str] = None
	website: Optional[str] = None
	registration_link: Optional[str] = None
	created_at: datetime
	updated_at: datetime
	can_edit: bool = False


class ClubListResponse(BaseModel):
	items: List[ClubResponse]


class ClubCreateRequest(BaseModel):
	name: Translated
	description: Translated
	logo_url: Optional[str] = None
	email: Optional[str] = None
	website: Optional[str] = None
	registration_link: Optional[str] = None


class ClubUpdateRequest(BaseModel):
	name: Optional[Translated] = None
	description: Optional[Translated] = None
	logo_url: Optional[str] = Field(default=None, max_length=2048)
	email: Optional[str] = Field(default=None, max_length=320)
	website: Optional[str] = Field(default=None, max_length=2048)
	registration_link: Optional[str] = Field(default=None, max_length=2048)


class PostCreateRequest(BaseModel):
	club_id: Optional[UUID] = None
	title: Translated
	description: Translated
	content: Translated
	image_url: Optional[str] = Field(default=None, max_length=2048)
	image_data: Optional[Base64Bytes] = None


class PostRejectRequest(BaseModel):
	reason: str = Field(default="", max_length=2000)


class PostResponse(BaseModel):
	id: UUID
	club_id: UUID
	title: Translated
	description: Translated
	content: Translated
	date: datetime
	image_url: Optional[str] = None
	image_data: Optional[str] = None
	approval_status: ApprovalStatus
	rejection_reason: Optional[str] = None

	@classmethod
	def from_model(cls, post: models.Post) -> "PostResponse":
		payload = post.model_dump(exclude={"image_data"})
		if post.image_data is not None:
			payload["image_data"] = base64.b64encode(post.image_data).decode("ascii")
		return cls(**payload)


class PostListResponse(BaseModel):
	items: List[PostResponse]


class EventCreateRequest(BaseModel):
	club_id: Optional[UUID] = None
	title: Translated
	description: Translated
	location: Translated
	start_date: datetime
	end_date: datetime
	is_all_day: bool = False


class EventResponse(BaseModel):
	id: UUID
	club_id: UUID
	title: Translated
	description: Translated
	location: Translated
	start_date: datetime
	end_date: datetime
	is_all_day: bool
	created_at: datetime


class EventListResponse(BaseModel):
	items: List[EventResponse]


class NotificationResponse(BaseModel):
	id: UUID
	kind: NotificationKind
	title: Translated
	message: Translated
	date: datetime
	club_id: UUID
	is_read: bool
	related_post_id: Optional[UUID] = None
	related_event_id: Optional[UUID] = None


class NotificationListResponse(BaseModel):
	items: List[NotificationResponse]
	unread: int


class NotificationUnreadResponse(BaseModel):
	count: int


class NotificationMarkReadResponse(BaseModel):
	updated: int
