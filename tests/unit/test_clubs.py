from __future__ import annotations

from uuid import uuid4

import pytest

from yu_community.communities.domain import models
from yu_community.communities.domain.exceptions import AuthorizationError, NotFoundError, ValidationError
from yu_community.communities.schemas import dto


@pytest.mark.asyncio
async def test_list_clubs_keeps_insertion_order(world):
	clubs = await world.container.clubs.list_clubs()

	assert [club.id for club in clubs] == [world.chess.id, world.debate.id]


@pytest.mark.asyncio
async def test_update_replaces_only_provided_fields(world):
	updated = await world.container.clubs.update_club(
		world.chess_admin,
		world.chess.id,
		dto.ClubUpdateRequest(website=" https://chess.example.com ", email=None),
	)

	assert updated.id == world.chess.id
	assert updated.website == "https://chess.example.com"
	assert updated.email is None
	assert updated.name == world.chess.name
	assert updated.updated_at > world.chess.updated_at
	assert await world.container.clubs.get_club(world.chess.id) == updated


@pytest.mark.asyncio
async def test_update_requires_scope(world):
	payload = dto.ClubUpdateRequest(website="https://debate.example.com")

	with pytest.raises(AuthorizationError):
		await world.container.clubs.update_club(world.chess_admin, world.debate.id, payload)
	with pytest.raises(AuthorizationError):
		await world.container.clubs.update_club(None, world.debate.id, payload)
	with pytest.raises(NotFoundError):
		await world.container.clubs.update_club(world.app_admin, uuid4(), payload)

	updated = await world.container.clubs.update_club(world.app_admin, world.debate.id, payload)
	assert updated.website == "https://debate.example.com"


@pytest.mark.asyncio
async def test_blank_name_is_rejected(world):
	with pytest.raises(ValidationError) as exc:
		await world.container.clubs.update_club(
			world.chess_admin,
			world.chess.id,
			dto.ClubUpdateRequest(name=models.Translated(base="  ")),
		)
	assert exc.value.fields == {"name": "required"}

	with pytest.raises(ValidationError):
		await world.container.clubs.update_club(
			world.chess_admin,
			world.chess.id,
			dto.ClubUpdateRequest(description=None),
		)
	assert (await world.container.clubs.get_club(world.chess.id)).name.base == "Chess Club"


@pytest.mark.asyncio
async def test_clubs_in_scope(world):
	directory = world.container.clubs

	assert [club.id for club in await directory.clubs_in_scope(world.app_admin)] == [world.chess.id, world.debate.id]
	assert [club.id for club in await directory.clubs_in_scope(world.debate_admin)] == [world.debate.id]
	assert await directory.clubs_in_scope(None) == []


@pytest.mark.asyncio
async def test_find_by_name_is_case_insensitive(world):
	assert (await world.container.clubs.find_by_name(" chess club ")).id == world.chess.id
	assert await world.container.clubs.find_by_name("Robotics") is None
