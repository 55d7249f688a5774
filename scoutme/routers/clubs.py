"""
Clubs Router
============

Canonical club management:
- List and fetch clubs
- Create, update and delete clubs
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from scoutme.dependencies import get_current_user, get_db
from scoutme.exceptions import ConflictError
from scoutme.models import Club
from scoutme.schemas import ClubCreate, ClubListResponse, ClubRead, ClubResponse, ClubUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clubs", tags=["Clubs"], dependencies=[Depends(get_current_user)])


async def _get_club_or_404(db: AsyncSession, club_id: UUID) -> Club:
    club = await db.get(Club, club_id)
    if not club:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Club {club_id} not found"
        )
    return club


@router.get("", response_model=ClubListResponse)
async def list_clubs(db: AsyncSession = Depends(get_db)) -> ClubListResponse:
    """List all clubs, ordered by name."""
    result = await db.execute(select(Club).order_by(Club.name, Club.country))
    clubs = result.scalars().all()
    return ClubListResponse(
        message="Clubs listed successfully",
        data=[ClubRead.model_validate(c) for c in clubs],
    )


@router.get("/{club_id}", response_model=ClubResponse)
async def get_club(club_id: UUID, db: AsyncSession = Depends(get_db)) -> ClubResponse:
    """Get a club by id."""
    club = await _get_club_or_404(db, club_id)
    return ClubResponse(message="Club fetched successfully", data=ClubRead.model_validate(club))


@router.post("", response_model=ClubResponse, status_code=status.HTTP_201_CREATED)
async def create_club(body: ClubCreate, db: AsyncSession = Depends(get_db)) -> ClubResponse:
    """
    Create a club.

    Returns 409 if a club with the same name and country already exists.
    """
    club = Club(name=body.name, country=body.country, logo_url=body.logo_url)
    db.add(club)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(f"Club {body.name} ({body.country}) already exists", code="club_exists")

    logger.info(f"Created club {club.name} ({club.country})")
    return ClubResponse(message="Club created successfully", data=ClubRead.model_validate(club))


@router.put("/{club_id}", response_model=ClubResponse)
async def update_club(club_id: UUID, body: ClubUpdate, db: AsyncSession = Depends(get_db)) -> ClubResponse:
    """Update a club's name, country or logo. Omitted fields are left unchanged."""
    club = await _get_club_or_404(db, club_id)

    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field != "logo_url":
            continue
        setattr(club, field, value)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Another club already has this name and country", code="club_exists")

    return ClubResponse(message="Club updated successfully", data=ClubRead.model_validate(club))


@router.delete("/{club_id}", response_model=ClubResponse)
async def delete_club(club_id: UUID, db: AsyncSession = Depends(get_db)) -> ClubResponse:
    """Delete a club. Clubs that took part in a match cannot be deleted."""
    club = await _get_club_or_404(db, club_id)
    await db.delete(club)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Club is referenced by existing matches", code="club_in_use")

    logger.info(f"Deleted club {club_id}")
    return ClubResponse(message="Club deleted successfully")
