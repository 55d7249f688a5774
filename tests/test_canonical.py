"""
Tests for Canonical Entity Resolution
=====================================

Find-or-create of clubs and player profiles, the opponent identity policy
and date parsing.
"""

from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from scoutme.models import Club, PlayerProfile, PlayerPosition
from scoutme.schemas import PlayerDescriptor
from scoutme.services import canonical
from scoutme.services.canonical import (
    parse_date, profile_key, resolve_club, resolve_player_profile, should_resolve_profile,
)


def player(**overrides) -> PlayerDescriptor:
    fields = {
        "first_name": "Jan",
        "last_name": "de Vries",
        "jersey_number": 1,
        "date_of_birth": "12-05-2001",
        "position": PlayerPosition.KEEPER,
        "country": "Netherlands",
        "team_type": "yourTeam",
    }
    fields.update(overrides)
    return PlayerDescriptor(**fields)


# =============================================================================
# DATES
# =============================================================================

@pytest.mark.parametrize("value,expected", [
    ("12-05-2001", date(2001, 5, 12)),
    ("2001-05-12", date(2001, 5, 12)),
    (" 01-01-1999 ", date(1999, 1, 1)),
    ("2001-05-12T00:00:00", date(2001, 5, 12)),
    ("31-02-2001", None),
    ("yesterday", None),
    ("", None),
    (None, None),
])
def test_parse_date(value, expected):
    assert parse_date(value) == expected


# =============================================================================
# POLICY
# =============================================================================

def test_own_players_are_always_resolved():
    assert should_resolve_profile(player(first_name=None, date_of_birth=None)) is True


def test_fully_identified_opponent_is_resolved():
    assert should_resolve_profile(player(team_type="opponentTeam")) is True


@pytest.mark.parametrize("missing", ["first_name", "last_name", "date_of_birth", "country"])
def test_partially_identified_opponent_is_not_resolved(missing):
    assert should_resolve_profile(player(team_type="opponentTeam", **{missing: None})) is False


def test_other_team_types_are_not_resolved():
    assert should_resolve_profile(player(team_type="neutral")) is False


def test_profile_key_strips_and_parses():
    key = profile_key(player(first_name="  Jan ", country=" Netherlands"))
    assert key == {
        "first_name": "Jan",
        "last_name": "de Vries",
        "date_of_birth": date(2001, 5, 12),
        "country": "Netherlands",
    }


def test_profile_key_needs_a_valid_date():
    assert profile_key(player(date_of_birth="not a date")) is None


# =============================================================================
# RESOLVERS
# =============================================================================

async def count(database, model) -> int:
    async with database.session() as session:
        return await session.scalar(select(func.count()).select_from(model))


@pytest.mark.asyncio
async def test_resolve_club_is_idempotent(database):
    async with database.session() as session:
        first = await resolve_club(session, "Ajax", "Netherlands", "https://cdn.example.com/ajax.png")
        second = await resolve_club(session, " Ajax ", "Netherlands", "https://cdn.example.com/other.png")
        await session.commit()

    assert first.id == second.id
    # The logo is only taken when the club is first created
    assert second.logo_url == "https://cdn.example.com/ajax.png"
    assert await count(database, Club) == 1


@pytest.mark.asyncio
async def test_resolve_club_distinguishes_country(database):
    async with database.session() as session:
        dutch = await resolve_club(session, "Ajax", "Netherlands")
        south_african = await resolve_club(session, "Ajax", "South Africa")
        await session.commit()

    assert dutch.id != south_african.id


@pytest.mark.asyncio
async def test_resolve_player_profile_is_idempotent(database):
    async with database.session() as session:
        first = await resolve_player_profile(session, player())
        second = await resolve_player_profile(session, player(date_of_birth="2001-05-12", jersey_number=12))
        await session.commit()

    assert first is not None
    assert first.id == second.id
    assert first.primary_position == "Keeper"
    assert await count(database, PlayerProfile) == 1


@pytest.mark.asyncio
async def test_resolve_player_profile_without_identity(database):
    async with database.session() as session:
        profile = await resolve_player_profile(session, player(last_name=None))
        await session.commit()

    assert profile is None
    assert await count(database, PlayerProfile) == 0


@pytest.mark.asyncio
async def test_concurrent_insert_falls_back_to_existing_row(database, monkeypatch):
    """
    When another request inserts the same club between our lookup and our
    insert, the unique violation is absorbed and the existing row returned.
    """
    async with database.session() as session:
        winner = await resolve_club(session, "Feyenoord", "Netherlands")
        await session.commit()

    real_fetch = canonical._fetch_one
    calls = {"n": 0}

    async def stale_first_lookup(session, model, lookup):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return await real_fetch(session, model, lookup)

    monkeypatch.setattr(canonical, "_fetch_one", stale_first_lookup)

    async with database.session() as session:
        club = await resolve_club(session, "Feyenoord", "Netherlands")
        # The surrounding transaction is still usable
        other = await resolve_club(session, "PSV", "Netherlands")
        await session.commit()

    assert club.id == winner.id
    assert other.name == "PSV"
    assert await count(database, Club) == 2


@pytest.mark.asyncio
async def test_pending_violation_is_not_mistaken_for_a_race(database, monkeypatch):
    """A bad row the caller added earlier surfaces its own error."""
    async with database.session() as session:
        await resolve_club(session, "Ajax", "Netherlands")
        await resolve_club(session, "PSV", "Netherlands")
        await session.commit()

    real_fetch = canonical._fetch_one
    calls = {"n": 0}

    async def stale_first_lookup(session, model, lookup):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return await real_fetch(session, model, lookup)

    monkeypatch.setattr(canonical, "_fetch_one", stale_first_lookup)

    async with database.session() as session:
        session.add(Club(name="PSV", country="Netherlands"))
        with pytest.raises(IntegrityError):
            await resolve_club(session, "Ajax", "Netherlands")

    assert calls["n"] == 1
    assert await count(database, Club) == 2
