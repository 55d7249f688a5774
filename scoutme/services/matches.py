"""
Match Services
==============

Match registration and the read/status paths around it.

``create_match`` assembles a match and its rosters in a single transaction:

1. create the match (status PENDING)
2. for each club: resolve the canonical club, create the per-match club row
   and remember it under its team type
3. for each player: resolve a canonical profile when policy allows, then
   create the per-match player row under its team's match club

Any failure rolls the whole assembly back.
"""

import logging
from typing import Dict, List, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from scoutme.exceptions import NotFoundError
from scoutme.models import (
    UNKNOWN_DATE_OF_BIRTH, YOUR_TEAM,
    Match, MatchClub, MatchPlayer, MatchStatus,
)
from scoutme.schemas import MatchClubRead, MatchCreate, MatchDetail, MatchPlayerRead
from scoutme.services.canonical import (
    parse_date, resolve_club, resolve_player_profile, should_resolve_profile,
)

logger = logging.getLogger(__name__)


# =============================================================================
# MATCH ASSEMBLY
# =============================================================================

async def create_match(db: AsyncSession, owner_uid: str, payload: MatchCreate) -> Match:
    """Create a match with its clubs and players, all or nothing."""
    try:
        match = Match(
            user_uid=owner_uid,
            video_url=str(payload.video_url),
            line_up_image=str(payload.line_up_image) if payload.line_up_image else None,
            level=payload.level,
            status=MatchStatus.PENDING,
        )
        db.add(match)
        await db.flush()

        match_clubs: Dict[str, MatchClub] = {}
        for descriptor in payload.clubs:
            club = await resolve_club(db, descriptor.name, descriptor.country, descriptor.logo_url)
            match_club = MatchClub(
                match_id=match.id,
                club_id=club.id,
                name=club.name,
                country=club.country,
                jersey_color=descriptor.jersey_color,
                team_type=descriptor.team_type,
                is_your_team=descriptor.team_type == YOUR_TEAM,
            )
            db.add(match_club)
            match_clubs[descriptor.team_type] = match_club
        await db.flush()

        linked_profiles = 0
        for player in payload.players:
            profile = None
            if should_resolve_profile(player):
                profile = await resolve_player_profile(db, player)
            if profile is not None:
                linked_profiles += 1

            db.add(MatchPlayer(
                match_id=match.id,
                match_club_id=match_clubs[player.team_type].id,
                player_profile_id=profile.id if profile else None,
                first_name=player.first_name,
                last_name=player.last_name,
                date_of_birth=parse_date(player.date_of_birth) or UNKNOWN_DATE_OF_BIRTH,
                country=player.country,
                jersey_number=player.jersey_number,
                position=player.position.value,
                team_type=player.team_type,
                is_your_team=player.team_type == YOUR_TEAM,
            ))

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        f"Match {match.id} created for {owner_uid}: "
        f"{len(match_clubs)} clubs, {len(payload.players)} players, {linked_profiles} linked profiles"
    )
    return match


# =============================================================================
# STATUS LIFECYCLE
# =============================================================================

async def update_match_status(db: AsyncSession, match_id: UUID, status: MatchStatus) -> Match:
    """Set a match's status. Transitions are not ordered; any known status is accepted."""
    match = await db.get(Match, match_id)
    if match is None:
        raise NotFoundError("Match not found!", code="match_not_found")

    previous = match.status
    match.status = status
    await db.commit()

    logger.info(f"Match {match_id} status {previous.value} -> {status.value}")
    return match


# =============================================================================
# QUERIES
# =============================================================================

async def list_user_matches(db: AsyncSession, user_uid: str) -> Sequence[Row]:
    """All matches owned by a user, newest first."""
    stmt = (
        select(Match.id, Match.status, Match.created_at)
        .where(Match.user_uid == user_uid)
        .order_by(Match.created_at.desc(), Match.id.desc())
    )
    result = await db.execute(stmt)
    return result.all()


async def list_matches(db: AsyncSession, page: int, limit: int) -> List[Match]:
    """One page of every match, newest first. Pages past the end are empty."""
    stmt = (
        select(Match)
        .order_by(Match.created_at.desc(), Match.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_match_detail(db: AsyncSession, match_id: UUID) -> MatchDetail:
    """Fetch a match with its clubs, players and analysis result in one lookup."""
    stmt = (
        select(Match)
        .options(
            selectinload(Match.clubs),
            selectinload(Match.players),
            selectinload(Match.analysis),
        )
        .where(Match.id == match_id)
    )
    result = await db.execute(stmt)
    match = result.scalar_one_or_none()

    if match is None:
        raise NotFoundError("The match is not found", code="match_not_found")

    return MatchDetail(
        id=match.id,
        video_url=match.video_url,
        line_up_image=match.line_up_image,
        level=match.level,
        status=match.status,
        created_at=match.created_at,
        clubs=[MatchClubRead.model_validate(c) for c in match.clubs],
        players=[MatchPlayerRead.model_validate(p) for p in match.players],
        result=match.analysis.result if match.analysis else None,
    )
