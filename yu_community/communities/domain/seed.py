"""Demo clubs, posts and administrator accounts loaded at startup."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Iterable, Optional
from uuid import uuid4

from yu_community.communities.domain import models
from yu_community.communities.schemas import dto
from yu_community.infra.password import hash_password

if TYPE_CHECKING:
	from yu_community.communities.domain.container import CommunityContainer

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AdminSeed:
	username: str
	credential: str
	role: models.AdminRole
	club_name: Optional[str] = None


# Demo accounts. Disable with SEED_DEMO_DATA=false anywhere that is not a laptop.
DEMO_ADMINS: tuple[AdminSeed, ...] = (
	AdminSeed("admin1", "password1", models.AdminRole.APP_ADMIN),
	AdminSeed("admin2", "password2", models.AdminRole.APP_ADMIN),
	AdminSeed("clubadmin1", "clubpass1", models.AdminRole.CLUB_ADMIN, "Google Developers Club"),
	AdminSeed("clubadmin2", "clubpass2", models.AdminRole.CLUB_ADMIN, "ToastMasters"),
	AdminSeed("clubadmin3", "clubpass3", models.AdminRole.CLUB_ADMIN, "Google Developers Club"),
)

DEMO_CLUBS: tuple[dto.ClubCreateRequest, ...] = (
	dto.ClubCreateRequest(
		name=models.Translated(base="Google Developers Club", arabic="نادي مطوري جوجل"),
		description=models.Translated(
			base=(
				"Club for developers interested in Google technologies. We host workshops, "
				"hackathons, and tech talks to help students learn and develop their skills."
			),
		),
		logo_url="https://example.com/gdsc-logo.png",
		email="gdsc@example.com",
		website="https://gdsc.example.com",
		registration_link="https://gdsc.example.com/register",
	),
	dto.ClubCreateRequest(
		name=models.Translated(base="ToastMasters", arabic="توستماسترز"),
		description=models.Translated(
			base=(
				"Public speaking club designed to improve communication, public speaking, and "
				"leadership skills through practice and feedback in a supportive environment."
			),
		),
		logo_url="https://example.com/toastmasters-logo.png",
		email="toastmasters@example.com",
		website="https://toastmasters.example.com",
		registration_link="https://toastmasters.example.com/register",
	),
	dto.ClubCreateRequest(
		name=models.Translated(base="TakeOne", arabic="تيك ون"),
		description=models.Translated(
			base=(
				"Media and film club focused on creating short films, documentaries, and other "
				"visual media. Open to students of all experience levels."
			),
		),
		logo_url="https://example.com/takeone-logo.png",
		email="takeone@example.com",
		website="https://takeone.example.com",
		registration_link="https://takeone.example.com/register",
	),
)


def build_admins(
	seeds: Iterable[AdminSeed],
	clubs: Iterable[models.Club],
	*,
	hasher: Optional[Callable[[str], str]] = None,
) -> list[models.Administrator]:
	"""Hash credentials and resolve club affiliations from names to ids.

	Names are resolved once, here; later checks compare club ids only. An
	admin whose club name matches nothing is loaded without any club scope.
	"""
	hasher = hasher or hash_password
	by_name = {club.name.base.casefold(): club for club in clubs}
	admins: list[models.Administrator] = []
	for seed in seeds:
		club_id = None
		if seed.role is models.AdminRole.CLUB_ADMIN:
			club = by_name.get((seed.club_name or "").strip().casefold())
			if club is None:
				_LOG.warning(
					"admin_affiliation_unresolved",
					extra={"username": seed.username, "club_name": seed.club_name},
				)
			else:
				club_id = club.id
		admins.append(
			models.Administrator(
				id=uuid4(),
				username=seed.username,
				credential_hash=hasher(seed.credential),
				role=seed.role,
				club_id=club_id,
			)
		)
	return admins


async def seed_demo_data(container: CommunityContainer) -> None:
	"""Load demo clubs, two approved posts and the demo accounts."""
	clubs = [await container.clubs.create_club(payload) for payload in DEMO_CLUBS]
	now = datetime.now(timezone.utc)
	samples = (
		(
			clubs[0],
			models.Translated(base="Summer Festival", arabic="مهرجان الصيف"),
			models.Translated(
				base=(
					"The Annual Summer Festival brings together the entire campus community to "
					"celebrate the end of the academic year with fun activities and performances."
				),
			),
			models.Translated(
				base=(
					"Join us for our annual Summer Festival at the University Quad! There will be "
					"food, games, and performances from various student groups."
				),
			),
			"summer_festival.jpg",
		),
		(
			clubs[1],
			models.Translated(base="Ramadan Breakfast", arabic="إفطار رمضان"),
			models.Translated(
				base=(
					"A community breakfast to celebrate Ramadan and build connections between "
					"students of all backgrounds. Everyone is welcome!"
				),
			),
			models.Translated(
				base=(
					"Join us for breakfast during Ramadan. Our club is hosting a special breakfast "
					"event to celebrate this important time."
				),
			),
			"ramadan_breakfast.jpg",
		),
	)
	for club, title, description, content, image_url in samples:
		await container.repository.add_post(
			models.Post(
				id=uuid4(),
				club_id=club.id,
				title=title,
				description=description,
				content=content,
				date=now,
				image_url=image_url,
				approval_status=models.ApprovalStatus.APPROVED,
			)
		)
	for admin in build_admins(DEMO_ADMINS, clubs):
		container.registry.add(admin)
	_LOG.info("demo_data_seeded", extra={"clubs": len(clubs), "admins": len(DEMO_ADMINS)})
