"""Login and logout routes for administrators."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from yu_community.communities.api._errors import to_http_error
from yu_community.communities.domain.container import CommunityContainer, get_container
from yu_community.communities.domain.exceptions import CommunityError
from yu_community.communities.schemas import dto
from yu_community.infra.auth import AuthenticatedAdmin, get_current_session

router = APIRouter(tags=["communities:auth"])


@router.post("/login", response_model=dto.LoginResponse)
async def login_endpoint(
	payload: dto.LoginRequest,
	container: CommunityContainer = Depends(get_container),
) -> dto.LoginResponse:
	try:
		session = await container.identity.login(payload.username, payload.credential)
	except CommunityError as exc:
		raise to_http_error(exc) from exc
	return dto.LoginResponse(
		access_token=session.access_token,
		admin_id=session.admin.id,
		username=session.admin.username,
		role=session.admin.role,
		club_id=session.admin.club_id,
	)


@router.post("/logout", status_code=204, response_class=Response, response_model=None)
async def logout_endpoint(
	session: AuthenticatedAdmin = Depends(get_current_session),
	container: CommunityContainer = Depends(get_container),
) -> None:
	await container.identity.logout(session.session_id)
	return None
