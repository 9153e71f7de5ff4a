"""Event routes."""

from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from yu_community.communities.api._errors import to_http_error
from yu_community.communities.domain import models
from yu_community.communities.domain.container import CommunityContainer, get_container
from yu_community.communities.domain.exceptions import CommunityError
from yu_community.communities.schemas import dto
from yu_community.infra.auth import get_current_admin

router = APIRouter(tags=["communities:events"])


def _event_to_response(event: models.Event) -> dto.EventResponse:
	return dto.EventResponse(**event.model_dump())


@router.post("/events", response_model=dto.EventResponse, status_code=201)
async def create_event_endpoint(
	payload: dto.EventCreateRequest,
	admin: models.Administrator = Depends(get_current_admin),
	container: CommunityContainer = Depends(get_container),
) -> dto.EventResponse:
	try:
		event = await container.lifecycle.create_event(admin, payload)
	except CommunityError as exc:
		raise to_http_error(exc) from exc
	return _event_to_response(event)


@router.get("/events", response_model=dto.EventListResponse)
async def list_events_endpoint(
	day: Optional[date] = Query(default=None, alias="date"),
	container: CommunityContainer = Depends(get_container),
) -> dto.EventListResponse:
	if day is None:
		events = await container.queries.list_events()
	else:
		events = await container.queries.events_on_date(day)
	return dto.EventListResponse(items=[_event_to_response(event) for event in events])


@router.get("/events/{event_id}", response_model=dto.EventResponse)
async def get_event_endpoint(
	event_id: UUID,
	container: CommunityContainer = Depends(get_container),
) -> dto.EventResponse:
	event = await container.lifecycle.get_event(event_id)
	if event is None:
		raise HTTPException(status_code=404, detail="event_not_found")
	return _event_to_response(event)
