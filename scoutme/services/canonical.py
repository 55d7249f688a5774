"""
Canonical Entity Resolution
===========================

Find-or-create for the shared entities (clubs and player profiles).

Both resolvers go through ``insert_or_fetch``: look the row up by its natural
key and insert it when missing. The insert runs inside a SAVEPOINT so that a
unique violation caused by a concurrent request only discards the losing
insert; the winner's row is then re-read. The caller's transaction is left
intact either way.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from scoutme.database import Base
from scoutme.models import OPPONENT_TEAM, YOUR_TEAM, Club, PlayerProfile
from scoutme.schemas import PlayerDescriptor

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

# DD-MM-YYYY is what the mobile client sends; ISO dates come from everything else
DATE_FORMATS = ("%d-%m-%Y", "%Y-%m-%d")


# =============================================================================
# DATES
# =============================================================================

def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse a date of birth, returning None for missing or unparseable input."""
    if not value:
        return None
    value = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def format_date(value: date) -> str:
    return value.strftime("%d-%m-%Y")


# =============================================================================
# INSERT OR FETCH
# =============================================================================

async def _fetch_one(session: AsyncSession, model: Type[ModelT], lookup: Dict[str, Any]) -> Optional[ModelT]:
    result = await session.execute(select(model).filter_by(**lookup))
    return result.scalar_one_or_none()


async def insert_or_fetch(
    session: AsyncSession,
    model: Type[ModelT],
    lookup: Dict[str, Any],
    defaults: Optional[Dict[str, Any]] = None,
) -> Tuple[ModelT, bool]:
    """
    Return the row of ``model`` matching ``lookup``, creating it if needed.

    ``lookup`` must cover a unique constraint of the table. ``defaults`` are
    only applied when the row is created; an existing row is never updated.

    Returns:
        (instance, created)
    """
    existing = await _fetch_one(session, model, lookup)
    if existing is not None:
        return existing, False

    # Flush the caller's pending rows first so the handler below only sees
    # violations raised by this insert
    await session.flush()

    instance = model(**lookup, **(defaults or {}))
    try:
        async with session.begin_nested():
            session.add(instance)
    except IntegrityError:
        # Another request inserted the same key between our read and write
        winner = await _fetch_one(session, model, lookup)
        if winner is None:
            raise
        logger.info(f"{model.__name__} {lookup} created concurrently; using existing row {winner.id}")
        return winner, False

    return instance, True


# =============================================================================
# CLUB RESOLVER
# =============================================================================

async def resolve_club(
    session: AsyncSession,
    name: str,
    country: str,
    logo_url: Optional[str] = None,
) -> Club:
    """Find or create the canonical club for ``(name, country)``.

    The logo is stored only when the club is first created.
    """
    club, created = await insert_or_fetch(
        session,
        Club,
        {"name": name.strip(), "country": country.strip()},
        {"logo_url": logo_url},
    )
    if created:
        logger.info(f"Created club {club.name} ({club.country})")
    return club


# =============================================================================
# PLAYER PROFILE RESOLVER
# =============================================================================

def should_resolve_profile(player: PlayerDescriptor) -> bool:
    """
    Decide whether a roster entry should be linked to a canonical profile.

    The submitting user's own players are always resolved. Opponents are only
    resolved when every identifying detail was supplied; otherwise they stay
    anonymous entries of this one match.
    """
    if player.team_type == YOUR_TEAM:
        return True
    if player.team_type == OPPONENT_TEAM:
        return all([
            player.first_name,
            player.last_name,
            player.date_of_birth,
            player.position,
            player.country,
        ])
    return False


def profile_key(player: PlayerDescriptor) -> Optional[Dict[str, Any]]:
    """Natural key of the player's profile, or None when it cannot be formed."""
    first_name = (player.first_name or "").strip()
    last_name = (player.last_name or "").strip()
    country = (player.country or "").strip()
    date_of_birth = parse_date(player.date_of_birth)

    if not (first_name and last_name and country and date_of_birth):
        return None
    return {
        "first_name": first_name,
        "last_name": last_name,
        "date_of_birth": date_of_birth,
        "country": country,
    }


async def resolve_player_profile(
    session: AsyncSession,
    player: PlayerDescriptor,
) -> Optional[PlayerProfile]:
    """Find or create the profile for a roster entry; None if it lacks a full identity."""
    key = profile_key(player)
    if key is None:
        logger.debug(f"No profile for #{player.jersey_number} ({player.team_type}): incomplete identity")
        return None

    profile, created = await insert_or_fetch(
        session,
        PlayerProfile,
        key,
        {"primary_position": player.position.value},
    )
    if created:
        logger.info(f"Created player profile {profile.first_name} {profile.last_name}")
    return profile
