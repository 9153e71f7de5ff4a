"""Club directory routes."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from yu_community.communities.api._errors import to_http_error
from yu_community.communities.domain import models, policies
from yu_community.communities.domain.container import CommunityContainer, get_container
from yu_community.communities.domain.exceptions import CommunityError
from yu_community.communities.schemas import dto
from yu_community.infra.auth import get_current_admin, get_optional_admin

router = APIRouter(tags=["communities:clubs"])


def _club_to_response(club: models.Club, admin: Optional[models.Administrator]) -> dto.ClubResponse:
	return dto.ClubResponse(**club.model_dump(), can_edit=policies.authorize_club_mutation(admin, club))


@router.get("/clubs", response_model=dto.ClubListResponse)
async def list_clubs_endpoint(
	scope: str = Query(default="all", pattern="^(all|mine)$"),
	admin: Optional[models.Administrator] = Depends(get_optional_admin),
	container: CommunityContainer = Depends(get_container),
) -> dto.ClubListResponse:
	if scope == "mine":
		clubs = await container.clubs.clubs_in_scope(admin)
	else:
		clubs = await container.clubs.list_clubs()
	return dto.ClubListResponse(items=[_club_to_response(club, admin) for club in clubs])


@router.get("/clubs/{club_id}", response_model=dto.ClubResponse)
async def get_club_endpoint(
	club_id: UUID,
	admin: Optional[models.Administrator] = Depends(get_optional_admin),
	container: CommunityContainer = Depends(get_container),
) -> dto.ClubResponse:
	club = await container.clubs.get_club(club_id)
	if club is None:
		raise HTTPException(status_code=404, detail="club_not_found")
	return _club_to_response(club, admin)


@router.patch("/clubs/{club_id}", response_model=dto.ClubResponse)
async def update_club_endpoint(
	club_id: UUID,
	payload: dto.ClubUpdateRequest,
	admin: models.Administrator = Depends(get_current_admin),
	container: CommunityContainer = Depends(get_container),
) -> dto.ClubResponse:
	try:
		club = await container.clubs.update_club(admin, club_id, payload)
	except CommunityError as exc:
		raise to_http_error(exc) from exc
	return _club_to_response(club, admin)


@router.get("/clubs/{club_id}/posts", response_model=dto.PostListResponse)
async def list_club_posts_endpoint(
	club_id: UUID,
	approved_only: bool = Query(default=True),
	admin: Optional[models.Administrator] = Depends(get_optional_admin),
	container: CommunityContainer = Depends(get_container),
) -> dto.PostListResponse:
	club = await container.clubs.get_club(club_id)
	if club is None:
		raise HTTPException(status_code=404, detail="club_not_found")
	if not approved_only and not policies.authorize_club_mutation(admin, club):
		raise HTTPException(status_code=403, detail="club_scope_required")
	posts = await container.queries.posts_for_club(club_id, approved_only=approved_only)
	return dto.PostListResponse(items=[dto.PostResponse.from_model(post) for post in posts])
