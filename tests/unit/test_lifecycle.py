from __future__ import annotations

import asyncio
import base64
from datetime import datetime, time
from uuid import uuid4

import pytest

from yu_community.communities.domain import models
from yu_community.communities.domain.exceptions import (
	AuthorizationError,
	InvalidStateError,
	NotFoundError,
	ValidationError,
)
from yu_community.communities.domain.policies import NO_REASON_PROVIDED
from yu_community.communities.schemas import dto

Kind = models.NotificationKind


async def _kinds(world) -> list[models.NotificationKind]:
	return [item.kind for item in await world.container.repository.list_notifications()]


@pytest.mark.asyncio
async def test_create_post_starts_pending_and_notifies_club(world, post_payload):
	post = await world.container.lifecycle.create_post(world.chess_admin, post_payload(world.chess.id))

	assert post.approval_status is models.ApprovalStatus.PENDING
	assert post.rejection_reason is None
	assert post.title.arabic == "ليلة اللوح المفتوح"
	notifications = await world.container.repository.list_notifications()
	assert len(notifications) == 1
	assert notifications[0].kind is Kind.POST_PENDING_APPROVAL
	assert notifications[0].club_id == world.chess.id
	assert notifications[0].related_post_id == post.id


@pytest.mark.asyncio
async def test_create_post_outside_affiliation_changes_nothing(world, post_payload):
	with pytest.raises(AuthorizationError):
		await world.container.lifecycle.create_post(world.chess_admin, post_payload(world.debate.id))

	assert await world.container.repository.list_posts() == []
	assert await world.container.repository.list_notifications() == []


@pytest.mark.asyncio
async def test_create_post_requires_selected_and_existing_club(world, post_payload):
	with pytest.raises(ValidationError) as exc:
		await world.container.lifecycle.create_post(world.app_admin, post_payload(None))
	assert exc.value.fields == {"club_id": "required"}

	with pytest.raises(NotFoundError):
		await world.container.lifecycle.create_post(world.app_admin, post_payload(uuid4()))


@pytest.mark.asyncio
async def test_create_post_rejects_blank_text_and_double_image(world, post_payload):
	lifecycle = world.container.lifecycle
	with pytest.raises(ValidationError) as exc:
		await lifecycle.create_post(
			world.chess_admin,
			post_payload(world.chess.id, title=models.Translated(base="   "), content=models.Translated(base="")),
		)
	assert exc.value.fields == {"title": "required", "content": "required"}

	with pytest.raises(ValidationError) as exc:
		await lifecycle.create_post(
			world.chess_admin,
			post_payload(world.chess.id, image_url="poster.png", image_data=base64.b64encode(b"\x89PNG")),
		)
	assert exc.value.fields == {"image": "url_and_data_are_exclusive"}
	assert await world.container.repository.list_posts() == []


@pytest.mark.asyncio
async def test_approve_emits_approved_and_public_new_post(world, post_payload):
	lifecycle = world.container.lifecycle
	post = await lifecycle.create_post(world.chess_admin, post_payload(world.chess.id))
	before = len(await world.container.repository.list_notifications())

	approved = await lifecycle.approve_post(world.app_admin, post.id)

	assert approved.approval_status is models.ApprovalStatus.APPROVED
	appended = (await world.container.repository.list_notifications())[before:]
	assert [item.kind for item in appended] == [Kind.POST_APPROVED, Kind.NEW_POST]
	assert all(item.club_id == world.chess.id for item in appended)
	anonymous = await world.container.notifications.visible_to(None)
	assert [item.kind for item in anonymous] == [Kind.NEW_POST]


@pytest.mark.asyncio
async def test_second_transition_raises_invalid_state(world, post_payload):
	lifecycle = world.container.lifecycle
	post = await lifecycle.create_post(world.chess_admin, post_payload(world.chess.id))
	await lifecycle.approve_post(world.app_admin, post.id)

	with pytest.raises(InvalidStateError) as exc:
		await lifecycle.approve_post(world.app_admin, post.id)
	assert exc.value.current_state == "approved"
	with pytest.raises(InvalidStateError):
		await lifecycle.reject_post(world.app_admin, post.id, "late")
	assert (await lifecycle.get_post(post.id)).approval_status is models.ApprovalStatus.APPROVED


@pytest.mark.asyncio
@pytest.mark.parametrize("reason", [None, "", "  "])
async def test_reject_without_reason_uses_sentinel(world, post_payload, reason):
	lifecycle = world.container.lifecycle
	post = await lifecycle.create_post(world.chess_admin, post_payload(world.chess.id))

	rejected = await lifecycle.reject_post(world.app_admin, post.id, reason)

	assert rejected.approval_status is models.ApprovalStatus.REJECTED
	assert rejected.rejection_reason == NO_REASON_PROVIDED
	assert (await _kinds(world))[-1] is Kind.POST_REJECTED


@pytest.mark.asyncio
async def test_club_admin_can_never_approve(world, post_payload):
	lifecycle = world.container.lifecycle
	post = await lifecycle.create_post(world.chess_admin, post_payload(world.chess.id))

	for actor in (world.chess_admin, world.debate_admin, None):
		with pytest.raises(AuthorizationError):
			await lifecycle.approve_post(actor, post.id)
	# Authorization is checked before the lookup.
	with pytest.raises(AuthorizationError):
		await lifecycle.approve_post(world.chess_admin, uuid4())
	with pytest.raises(NotFoundError):
		await lifecycle.approve_post(world.app_admin, uuid4())
	assert (await lifecycle.get_post(post.id)).approval_status is models.ApprovalStatus.PENDING


@pytest.mark.asyncio
async def test_concurrent_approve_and_reject_has_one_winner(world, post_payload):
	lifecycle = world.container.lifecycle
	post = await lifecycle.create_post(world.chess_admin, post_payload(world.chess.id))

	results = await asyncio.gather(
		lifecycle.approve_post(world.app_admin, post.id),
		lifecycle.reject_post(world.app_admin, post.id, "duplicate"),
		return_exceptions=True,
	)

	winners = [item for item in results if isinstance(item, models.Post)]
	losers = [item for item in results if isinstance(item, InvalidStateError)]
	assert len(winners) == 1
	assert len(losers) == 1
	stored = await lifecycle.get_post(post.id)
	assert stored.approval_status is winners[0].approval_status


@pytest.mark.asyncio
async def test_delete_twice_is_a_silent_noop(world, post_payload):
	lifecycle = world.container.lifecycle
	post = await lifecycle.create_post(world.chess_admin, post_payload(world.chess.id))
	notifications_before = len(await world.container.repository.list_notifications())

	await lifecycle.delete_post(world.chess_admin, post.id)
	assert await lifecycle.get_post(post.id) is None
	await lifecycle.delete_post(world.chess_admin, post.id)

	# Stale references are left for readers to tolerate.
	assert len(await world.container.repository.list_notifications()) == notifications_before


@pytest.mark.asyncio
async def test_delete_requires_authentication_and_scope(world, post_payload):
	lifecycle = world.container.lifecycle
	post = await lifecycle.create_post(world.chess_admin, post_payload(world.chess.id))

	with pytest.raises(AuthorizationError):
		await lifecycle.delete_post(None, post.id)
	with pytest.raises(AuthorizationError):
		await lifecycle.delete_post(world.debate_admin, post.id)
	assert await lifecycle.get_post(post.id) is not None

	await lifecycle.delete_post(world.app_admin, post.id)
	assert await lifecycle.get_post(post.id) is None


@pytest.mark.asyncio
async def test_create_event_outside_affiliation_creates_nothing(world, event_payload):
	with pytest.raises(AuthorizationError):
		await world.container.lifecycle.create_event(world.chess_admin, event_payload(world.debate.id))

	assert await world.container.repository.list_events() == []
	assert await world.container.repository.list_notifications() == []


@pytest.mark.asyncio
async def test_create_event_publishes_immediately(world, event_payload):
	event = await world.container.lifecycle.create_event(world.debate_admin, event_payload(world.debate.id))

	assert await world.container.lifecycle.get_event(event.id) == event
	anonymous = await world.container.notifications.visible_to(None)
	assert [item.kind for item in anonymous] == [Kind.NEW_EVENT]
	assert anonymous[0].related_event_id == event.id
	assert anonymous[0].related_post_id is None


@pytest.mark.asyncio
async def test_event_ending_before_it_starts_is_rejected(world, event_payload):
	payload = event_payload(
		world.chess.id,
		start_date=datetime(2025, 3, 10, 17, 0),
		end_date=datetime(2025, 3, 10, 9, 0),
	)
	with pytest.raises(ValidationError) as exc:
		await world.container.lifecycle.create_event(world.chess_admin, payload)

	assert exc.value.fields == {"end_date": "before_start_date"}
	assert await world.container.repository.list_events() == []
	assert await world.container.repository.list_notifications() == []


@pytest.mark.asyncio
async def test_event_requires_location(world, event_payload):
	with pytest.raises(ValidationError) as exc:
		await world.container.lifecycle.create_event(
			world.chess_admin,
			event_payload(world.chess.id, location=models.Translated(base=" ")),
		)
	assert exc.value.fields == {"location": "required"}


@pytest.mark.asyncio
async def test_all_day_event_covers_whole_days(world, event_payload):
	payload = event_payload(
		world.chess.id,
		start_date=datetime(2025, 3, 10, 9, 0),
		end_date=datetime(2025, 3, 11, 12, 0),
		is_all_day=True,
	)
	event = await world.container.lifecycle.create_event(world.chess_admin, payload)

	assert event.start_date == datetime.combine(datetime(2025, 3, 10).date(), time.min)
	assert event.end_date == datetime.combine(datetime(2025, 3, 11).date(), time.max)
	assert event.is_all_day is True


@pytest.mark.asyncio
async def test_renamed_club_keeps_its_admin_authorized(world, post_payload):
	await world.container.clubs.update_club(
		world.chess_admin,
		world.chess.id,
		dto.ClubUpdateRequest(name=models.Translated(base="Chess & Go Society")),
	)

	post = await world.container.lifecycle.create_post(world.chess_admin, post_payload(world.chess.id))
	assert post.club_id == world.chess.id
