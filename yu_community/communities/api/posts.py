"""Post routes: submission, moderation and listing."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from yu_community.communities.api._errors import to_http_error
from yu_community.communities.domain import models, policies
from yu_community.communities.domain.container import CommunityContainer, get_container
from yu_community.communities.domain.exceptions import CommunityError
from yu_community.communities.schemas import dto
from yu_community.infra.auth import get_current_admin, get_optional_admin

router = APIRouter(tags=["communities:posts"])


@router.post("/posts", response_model=dto.PostResponse, status_code=201)
async def create_post_endpoint(
	payload: dto.PostCreateRequest,
	admin: models.Administrator = Depends(get_current_admin),
	container: CommunityContainer = Depends(get_container),
) -> dto.PostResponse:
	try:
		post = await container.lifecycle.create_post(admin, payload)
	except CommunityError as exc:
		raise to_http_error(exc) from exc
	return dto.PostResponse.from_model(post)


@router.get("/posts", response_model=dto.PostListResponse)
async def list_posts_endpoint(
	club_id: Optional[UUID] = Query(default=None),
	status: Optional[models.ApprovalStatus] = Query(default=None),
	admin: Optional[models.Administrator] = Depends(get_optional_admin),
	container: CommunityContainer = Depends(get_container),
) -> dto.PostListResponse:
	try:
		posts = await container.queries.list_posts(admin, club_id=club_id, status=status)
	except CommunityError as exc:
		raise to_http_error(exc) from exc
	return dto.PostListResponse(items=[dto.PostResponse.from_model(post) for post in posts])


@router.get("/posts/{post_id}", response_model=dto.PostResponse)
async def get_post_endpoint(
	post_id: UUID,
	admin: Optional[models.Administrator] = Depends(get_optional_admin),
	container: CommunityContainer = Depends(get_container),
) -> dto.PostResponse:
	post = await container.lifecycle.get_post(post_id)
	if post is None:
		raise HTTPException(status_code=404, detail="post_not_found")
	if not policies.can_open_post(admin, post):
		raise HTTPException(status_code=404, detail="post_not_found")
	return dto.PostResponse.from_model(post)


@router.post("/posts/{post_id}/approve", response_model=dto.PostResponse)
async def approve_post_endpoint(
	post_id: UUID,
	admin: models.Administrator = Depends(get_current_admin),
	container: CommunityContainer = Depends(get_container),
) -> dto.PostResponse:
	try:
		post = await container.lifecycle.approve_post(admin, post_id)
	except CommunityError as exc:
		raise to_http_error(exc) from exc
	return dto.PostResponse.from_model(post)


@router.post("/posts/{post_id}/reject", response_model=dto.PostResponse)
async def reject_post_endpoint(
	post_id: UUID,
	payload: Optional[dto.PostRejectRequest] = None,
	admin: models.Administrator = Depends(get_current_admin),
	container: CommunityContainer = Depends(get_container),
) -> dto.PostResponse:
	reason = payload.reason if payload is not None else None
	try:
		post = await container.lifecycle.reject_post(admin, post_id, reason)
	except CommunityError as exc:
		raise to_http_error(exc) from exc
	return dto.PostResponse.from_model(post)


@router.delete(
	"/posts/{post_id}",
	status_code=204,
	response_class=Response,
	response_model=None,
)
async def delete_post_endpoint(
	post_id: UUID,
	admin: models.Administrator = Depends(get_current_admin),
	container: CommunityContainer = Depends(get_container),
) -> None:
	try:
		await container.lifecycle.delete_post(admin, post_id)
	except CommunityError as exc:
		raise to_http_error(exc) from exc
	return None
