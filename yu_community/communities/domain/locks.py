"""Per-club mutation locks shared by the communities services."""

from __future__ import annotations

import asyncio
from uuid import UUID


class ClubLocks:
	"""Serializes read-then-write transitions on one club's records.

	Services that mutate posts, events or the club row itself must hold the
	owning club's lock for the whole transition.
	"""

	def __init__(self) -> None:
		self._locks: dict[UUID, asyncio.Lock] = {}

	def for_club(self, club_id: UUID) -> asyncio.Lock:
		lock = self._locks.get(club_id)
		if lock is None:
			lock = self._locks[club_id] = asyncio.Lock()
		return lock
