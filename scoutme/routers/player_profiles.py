"""
Player Profiles Router
======================

Canonical player profile endpoints:
- List, search and fetch profiles
- Update profile details

Dates of birth are exchanged as DD-MM-YYYY.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from scoutme.dependencies import get_current_user, get_db
from scoutme.exceptions import ConflictError, InvalidInputError
from scoutme.models import PlayerProfile
from scoutme.schemas import (
    PlayerProfileListResponse, PlayerProfileRead, PlayerProfileResponse, PlayerProfileUpdate,
)
from scoutme.services import parse_date

router = APIRouter(prefix="/player-profiles", tags=["Player Profiles"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=PlayerProfileListResponse)
async def list_player_profiles(db: AsyncSession = Depends(get_db)) -> PlayerProfileListResponse:
    """List all player profiles."""
    stmt = select(PlayerProfile).order_by(PlayerProfile.last_name, PlayerProfile.first_name)
    result = await db.execute(stmt)
    return PlayerProfileListResponse(
        message="Player profiles listed successfully",
        data=[PlayerProfileRead.model_validate(p) for p in result.scalars().all()],
    )


@router.get("/search", response_model=PlayerProfileListResponse)
async def search_player_profiles(
    first_name: Optional[str] = Query(None, alias="firstName", max_length=100),
    last_name: Optional[str] = Query(None, alias="lastName", max_length=100),
    date_of_birth: Optional[str] = Query(None, alias="dateOfBirth", description="DD-MM-YYYY or YYYY-MM-DD"),
    country: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
) -> PlayerProfileListResponse:
    """
    Search player profiles.

    Names and country match case-insensitively on substrings; the date of
    birth must match exactly. An unparseable date is ignored.
    """
    stmt = select(PlayerProfile)

    if first_name:
        stmt = stmt.where(PlayerProfile.first_name.ilike(f"%{first_name}%"))
    if last_name:
        stmt = stmt.where(PlayerProfile.last_name.ilike(f"%{last_name}%"))
    if country:
        stmt = stmt.where(PlayerProfile.country.ilike(f"%{country}%"))
    parsed_dob = parse_date(date_of_birth)
    if parsed_dob:
        stmt = stmt.where(PlayerProfile.date_of_birth == parsed_dob)

    result = await db.execute(stmt.order_by(PlayerProfile.last_name, PlayerProfile.first_name))
    return PlayerProfileListResponse(
        message="Player profiles searched successfully",
        data=[PlayerProfileRead.model_validate(p) for p in result.scalars().all()],
    )


@router.get("/{profile_id}", response_model=PlayerProfileResponse)
async def get_player_profile(profile_id: UUID, db: AsyncSession = Depends(get_db)) -> PlayerProfileResponse:
    """Get a player profile by id."""
    profile = await db.get(PlayerProfile, profile_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Player profile not found"
        )
    return PlayerProfileResponse(
        message="Player profile fetched successfully",
        data=PlayerProfileRead.model_validate(profile),
    )


@router.put("/{profile_id}", response_model=PlayerProfileResponse)
async def update_player_profile(
    profile_id: UUID,
    body: PlayerProfileUpdate,
    db: AsyncSession = Depends(get_db),
) -> PlayerProfileResponse:
    """
    Update a player profile. Omitted fields are left unchanged.

    Returns 409 if the new identity collides with another profile.
    """
    profile = await db.get(PlayerProfile, profile_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Player profile not found"
        )

    changes = body.model_dump(exclude_unset=True)

    if "date_of_birth" in changes:
        parsed = parse_date(changes["date_of_birth"])
        if parsed is None:
            raise InvalidInputError("Invalid date format. Expected DD-MM-YYYY", code="invalid_date")
        changes["date_of_birth"] = parsed

    if changes.get("primary_position") is not None:
        changes["primary_position"] = changes["primary_position"].value

    for field, value in changes.items():
        if value is None and field not in ("avatar", "primary_position"):
            continue
        setattr(profile, field, value)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Another player profile has the same identity", code="player_profile_exists")

    return PlayerProfileResponse(
        message="Player profile updated successfully",
        data=PlayerProfileRead.model_validate(profile),
    )
