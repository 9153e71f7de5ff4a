from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from fakeredis.aioredis import FakeRedis
from httpx import ASGITransport, AsyncClient

from yu_community.communities.domain import models
from yu_community.communities.domain.container import CommunityContainer, build_container, set_container
from yu_community.communities.schemas import dto
from yu_community.infra.password import hash_password
from yu_community.infra.redis import set_redis_client
from yu_community.settings import settings

CREDENTIAL = "correct-horse-battery"


class TickingClock:
	"""Deterministic clock; every reading is one minute after the previous one."""

	def __init__(self, start: datetime) -> None:
		self.current = start

	def __call__(self) -> datetime:
		self.current = self.current + timedelta(minutes=1)
		return self.current


@dataclass
class World:
	container: CommunityContainer
	chess: models.Club
	debate: models.Club
	app_admin: models.Administrator
	chess_admin: models.Administrator
	debate_admin: models.Administrator
	clock: TickingClock


@pytest_asyncio.fixture(autouse=True)
async def fake_redis():
	client = FakeRedis(decode_responses=True)
	set_redis_client(client)
	try:
		yield client
	finally:
		await client.flushall()
		set_redis_client(None)


@pytest.fixture(autouse=True)
def force_test_settings():
	original_seed = settings.seed_demo_data
	original_reminders = settings.reminders_enabled
	settings.seed_demo_data = False
	settings.reminders_enabled = False
	try:
		yield
	finally:
		settings.seed_demo_data = original_seed
		settings.reminders_enabled = original_reminders


@pytest.fixture(scope="session")
def credential() -> str:
	return CREDENTIAL


@pytest.fixture(scope="session")
def credential_hash() -> str:
	# Shared by every test admin.
	return hash_password(CREDENTIAL)


def _admin(username: str, role: models.AdminRole, credential_hash: str, club_id: Optional[UUID] = None) -> models.Administrator:
	return models.Administrator(
		id=uuid4(),
		username=username,
		credential_hash=credential_hash,
		role=role,
		club_id=club_id,
	)


@pytest_asyncio.fixture
async def world(credential_hash) -> World:
	clock = TickingClock(datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc))
	container = build_container(clock=clock, calendar_tz="UTC")
	chess = await container.clubs.create_club(
		dto.ClubCreateRequest(
			name=models.Translated(base="Chess Club", arabic="نادي الشطرنج"),
			description=models.Translated(base="Weekly rapid and blitz games."),
			email="chess@example.com",
		)
	)
	debate = await container.clubs.create_club(
		dto.ClubCreateRequest(
			name=models.Translated(base="Debate Club"),
			description=models.Translated(base="British parliamentary debating."),
		)
	)
	app_admin = _admin("dean", models.AdminRole.APP_ADMIN, credential_hash)
	chess_admin = _admin("x", models.AdminRole.CLUB_ADMIN, credential_hash, chess.id)
	debate_admin = _admin("y", models.AdminRole.CLUB_ADMIN, credential_hash, debate.id)
	for admin in (app_admin, chess_admin, debate_admin):
		container.registry.add(admin)
	set_container(container)
	try:
		yield World(
			container=container,
			chess=chess,
			debate=debate,
			app_admin=app_admin,
			chess_admin=chess_admin,
			debate_admin=debate_admin,
			clock=clock,
		)
	finally:
		set_container(None)


@pytest.fixture
def post_payload():
	def _build(club_id: Optional[UUID], **overrides: Any) -> dto.PostCreateRequest:
		fields: dict[str, Any] = {
			"club_id": club_id,
			"title": models.Translated(base="Open board night", arabic="ليلة اللوح المفتوح"),
			"description": models.Translated(base="Casual games for all levels."),
			"content": models.Translated(base="Bring a friend. Boards are provided."),
		}
		fields.update(overrides)
		return dto.PostCreateRequest(**fields)

	return _build


@pytest.fixture
def event_payload():
	def _build(club_id: Optional[UUID], **overrides: Any) -> dto.EventCreateRequest:
		fields: dict[str, Any] = {
			"club_id": club_id,
			"title": models.Translated(base="Spring tournament"),
			"description": models.Translated(base="Swiss system, five rounds."),
			"location": models.Translated(base="Student Union, Room 2"),
			"start_date": datetime(2025, 3, 10, 9, 0),
			"end_date": datetime(2025, 3, 10, 17, 0),
		}
		fields.update(overrides)
		return dto.EventCreateRequest(**fields)

	return _build


@pytest_asyncio.fixture
async def api_client(world):
	from yu_community.main import app

	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client


@pytest_asyncio.fixture
async def auth_headers(api_client):
	async def _login(username: str) -> dict[str, str]:
		resp = await api_client.post("/api/v1/login", json={"username": username, "credential": CREDENTIAL})
		assert resp.status_code == 200, resp.text
		return {"Authorization": f"Bearer {resp.json()['access_token']}"}

	return _login
