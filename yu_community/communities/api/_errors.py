"""Maps community domain errors onto HTTP errors."""

from __future__ import annotations

from fastapi import HTTPException, status

from yu_community.communities.domain import exceptions


def to_http_error(exc: exceptions.CommunityError) -> HTTPException:
	headers = None
	if exc.status_code == status.HTTP_401_UNAUTHORIZED:
		headers = {"WWW-Authenticate": "Bearer"}
	return HTTPException(status_code=exc.status_code, detail=exc.to_detail(), headers=headers)
