from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from yu_community.communities.domain import models, policies
from yu_community.communities.domain.exceptions import AuthorizationError, InvalidStateError, ValidationError


def _club(name: str = "Chess Club") -> models.Club:
	now = datetime.now(timezone.utc)
	return models.Club(
		id=uuid4(),
		name=models.Translated(base=name),
		description=models.Translated(base="desc"),
		created_at=now,
		updated_at=now,
	)


def _admin(role: models.AdminRole, club_id=None) -> models.Administrator:
	return models.Administrator(id=uuid4(), username=f"u-{uuid4().hex[:6]}", credential_hash="x", role=role, club_id=club_id)


def _post(club_id, status=models.ApprovalStatus.PENDING) -> models.Post:
	return models.Post(
		id=uuid4(),
		club_id=club_id,
		title=models.Translated(base="t"),
		description=models.Translated(base="d"),
		content=models.Translated(base="c"),
		date=datetime.now(timezone.utc),
		approval_status=status,
		rejection_reason="nope" if status is models.ApprovalStatus.REJECTED else None,
	)


def test_authorize_club_mutation_matrix():
	chess, debate = _club(), _club("Debate Club")
	app_admin = _admin(models.AdminRole.APP_ADMIN)
	chess_admin = _admin(models.AdminRole.CLUB_ADMIN, chess.id)
	orphan = _admin(models.AdminRole.CLUB_ADMIN)

	assert policies.authorize_club_mutation(app_admin, chess)
	assert policies.authorize_club_mutation(app_admin, debate)
	assert policies.authorize_club_mutation(chess_admin, chess)
	assert not policies.authorize_club_mutation(chess_admin, debate)
	assert not policies.authorize_club_mutation(orphan, chess)
	assert not policies.authorize_club_mutation(None, chess)


def test_authorize_club_scope_keeps_directory_order():
	clubs = [_club("A"), _club("B"), _club("C")]
	club_admin = _admin(models.AdminRole.CLUB_ADMIN, clubs[1].id)

	assert policies.authorize_club_scope(_admin(models.AdminRole.APP_ADMIN), clubs) == clubs
	assert policies.authorize_club_scope(club_admin, clubs) == [clubs[1]]
	assert policies.authorize_club_scope(None, clubs) == []


def test_app_admin_cannot_carry_affiliation():
	with pytest.raises(ValueError):
		models.Administrator(
			id=uuid4(),
			username="dean",
			credential_hash="x",
			role=models.AdminRole.APP_ADMIN,
			club_id=uuid4(),
		)


def test_assert_can_moderate_rejects_club_admins():
	club = _club()
	with pytest.raises(AuthorizationError) as exc:
		policies.assert_can_moderate(_admin(models.AdminRole.CLUB_ADMIN, club.id), operation="approve_post")
	assert exc.value.detail == "app_admin_required"
	with pytest.raises(AuthorizationError):
		policies.assert_can_moderate(None, operation="approve_post")


def test_ensure_pending_reports_current_state():
	post = _post(uuid4(), models.ApprovalStatus.APPROVED)
	with pytest.raises(InvalidStateError) as exc:
		policies.ensure_pending(post)
	assert exc.value.to_detail() == {"code": "post_not_pending", "current_state": "approved"}


def test_ensure_required_text_collects_every_blank_field():
	with pytest.raises(ValidationError) as exc:
		policies.ensure_required_text({"title": "  ", "description": "ok", "content": None})
	assert exc.value.fields == {"title": "required", "content": "required"}


@pytest.mark.parametrize("reason", [None, "", "   \n"])
def test_blank_rejection_reason_uses_sentinel(reason):
	assert policies.normalize_rejection_reason(reason) == policies.NO_REASON_PROVIDED


def test_rejection_reason_is_trimmed():
	assert policies.normalize_rejection_reason("  off topic ") == "off topic"


def test_event_window_rules():
	start = datetime(2025, 3, 10, 9, 0)
	policies.ensure_event_window(start, start)
	with pytest.raises(ValidationError) as exc:
		policies.ensure_event_window(start, datetime(2025, 3, 9, 9, 0))
	assert exc.value.fields == {"end_date": "before_start_date"}
	with pytest.raises(ValidationError) as exc:
		policies.ensure_event_window(start, datetime(2025, 3, 11, tzinfo=timezone.utc))
	assert exc.value.fields == {"end_date": "timezone_mismatch"}


def test_clean_translated_drops_blank_arabic():
	value = policies.clean_translated(models.Translated(base="  Hello ", arabic="  "))
	assert value == models.Translated(base="Hello", arabic=None)
	assert value.resolve("ar") == "Hello"


def test_post_visibility_rules():
	club_id = uuid4()
	pending = _post(club_id)
	rejected = _post(club_id, models.ApprovalStatus.REJECTED)
	approved = _post(club_id, models.ApprovalStatus.APPROVED)
	own_admin = _admin(models.AdminRole.CLUB_ADMIN, club_id)
	other_admin = _admin(models.AdminRole.CLUB_ADMIN, uuid4())

	assert policies.can_view_post(None, approved)
	assert not policies.can_view_post(None, pending)
	assert policies.can_view_post(own_admin, pending)
	assert not policies.can_view_post(other_admin, pending)
	assert not policies.can_view_post(own_admin, rejected)

	assert policies.can_open_post(own_admin, rejected)
	assert not policies.can_open_post(other_admin, rejected)
	assert not policies.can_open_post(None, rejected)


def test_post_model_invariants():
	with pytest.raises(ValueError):
		models.Post(
			id=uuid4(),
			club_id=uuid4(),
			title=models.Translated(base="t"),
			description=models.Translated(base="d"),
			content=models.Translated(base="c"),
			date=datetime.now(timezone.utc),
			approval_status=models.ApprovalStatus.REJECTED,
		)
	with pytest.raises(ValueError):
		models.Post(
			id=uuid4(),
			club_id=uuid4(),
			title=models.Translated(base="t"),
			description=models.Translated(base="d"),
			content=models.Translated(base="c"),
			date=datetime.now(timezone.utc),
			image_url="a.png",
			image_data=b"\x89PNG",
		)
