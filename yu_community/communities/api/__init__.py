"""FastAPI routers for the communities domain."""

from __future__ import annotations

from fastapi import APIRouter

from yu_community.communities.api import auth, clubs, events, notifications, posts

router = APIRouter(prefix="/api/v1")

router.include_router(auth.router)
router.include_router(clubs.router)
router.include_router(posts.router)
router.include_router(events.router)
router.include_router(notifications.router)

__all__ = ["router"]
