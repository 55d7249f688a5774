#!/usr/bin/env python3
"""
ScoutMe Seed Script
===================

Seeds the database with demo data:
- 1 demo user
- 4 clubs
- 3 matches submitted through the normal registration path, each with two
  full rosters (home players identified, opponents partly anonymous)
- 1 completed match with an analysis result

Run with: python scripts/seed.py
"""

import asyncio
import random

from sqlalchemy import text

from scoutme.config import configure_logging, get_settings
from scoutme.database import Database
from scoutme.models import Analysis, MatchStatus, User
from scoutme.schemas import MatchCreate
from scoutme.services import create_match, resolve_club, update_match_status


# =============================================================================
# SEED DATA DEFINITIONS
# =============================================================================

DEMO_USER = {
    "uid": "demo-firebase-uid",
    "name": "Demo Coach",
    "email": "demo.coach@scoutme.example",
    "phone": "+31 20 123 4567",
}

CLUBS_DATA = [
    {"name": "Ajax", "country": "Netherlands", "logo_url": "https://cdn.scoutme.example/logos/ajax.png"},
    {"name": "Feyenoord", "country": "Netherlands", "logo_url": "https://cdn.scoutme.example/logos/feyenoord.png"},
    {"name": "PSV", "country": "Netherlands", "logo_url": "https://cdn.scoutme.example/logos/psv.png"},
    {"name": "AZ", "country": "Netherlands", "logo_url": None},
]

FIRST_NAMES = ["Jan", "Daan", "Sem", "Lucas", "Milan", "Levi", "Finn", "Noah", "Luuk", "Bram", "Thijs"]
LAST_NAMES = ["de Jong", "Jansen", "de Vries", "van Dijk", "Bakker", "Visser", "Smit", "Meijer", "Mulder", "Bos", "Vos"]
LINEUP = [
    "Keeper", "Fullback", "Defender", "Defender", "Fullback",
    "Anchor", "Midfielder", "Playmaker", "Winger", "Winger", "Striker",
]

FIXTURES = [
    {"home": "Ajax", "away": "Feyenoord", "level": "academy", "video": "ajax-feyenoord-u19"},
    {"home": "Ajax", "away": "PSV", "level": "academy", "video": "ajax-psv-u19"},
    {"home": "Ajax", "away": "AZ", "level": "semi-pro", "video": "ajax-az-friendly"},
]


def build_roster(team_type: str, identified: bool) -> list[dict]:
    players = []
    for n, position in enumerate(LINEUP, start=1):
        player = {"jerseyNumber": n, "position": position, "teamType": team_type}
        if identified or random.random() > 0.7:
            player.update(
                firstName=FIRST_NAMES[n - 1],
                lastName=LAST_NAMES[n - 1] if team_type == "yourTeam" else LAST_NAMES[-n],
                dateOfBirth=f"{n:02d}-0{1 + n % 9}-2006",
                country="Netherlands",
            )
        players.append(player)
    return players


def build_match(fixture: dict) -> MatchCreate:
    return MatchCreate.model_validate({
        "videoUrl": f"https://videos.scoutme.example/{fixture['video']}.mp4",
        "level": fixture["level"],
        "clubs": [
            {"name": fixture["home"], "country": "Netherlands", "jerseyColor": "white", "teamType": "yourTeam"},
            {"name": fixture["away"], "country": "Netherlands", "jerseyColor": "red", "teamType": "opponentTeam"},
        ],
        "players": build_roster("yourTeam", identified=True) + build_roster("opponentTeam", identified=False),
    })


# =============================================================================
# SEEDERS
# =============================================================================

async def seed_user(database: Database) -> User:
    async with database.session() as session:
        user = User(**DEMO_USER)
        session.add(user)
        await session.commit()
    print(f"✓ Seeded user {user.uid}")
    return user


async def seed_clubs(database: Database) -> int:
    async with database.session() as session:
        for data in CLUBS_DATA:
            await resolve_club(session, data["name"], data["country"], data["logo_url"])
        await session.commit()
    print(f"✓ Seeded {len(CLUBS_DATA)} clubs")
    return len(CLUBS_DATA)


async def seed_matches(database: Database, user: User) -> list:
    matches = []
    for fixture in FIXTURES:
        async with database.session() as session:
            match = await create_match(session, user.uid, build_match(fixture))
        matches.append(match)

    # The first match has been through the analysis worker
    completed = matches[0]
    async with database.session() as session:
        await update_match_status(session, completed.id, MatchStatus.COMPLETED)
        session.add(Analysis(
            match_id=completed.id,
            result={
                "possession": {"yourTeam": 61, "opponentTeam": 39},
                "shots": {"yourTeam": 14, "opponentTeam": 6},
                "topPerformers": [9, 11, 8],
            },
        ))
        await session.commit()

    print(f"✓ Seeded {len(matches)} matches (1 completed with analysis)")
    return matches


# =============================================================================
# MAIN
# =============================================================================

async def main():
    """Main seed function"""
    print("\n" + "="*60)
    print("ScoutMe Database Seeder")
    print("="*60 + "\n")

    settings = get_settings()
    configure_logging(settings)
    random.seed(7)

    database = Database.from_settings(settings)
    try:
        print("Clearing existing data...")
        async with database.session() as session:
            await session.execute(text(
                "TRUNCATE TABLE analyses, match_players, match_clubs, matches, "
                "player_profiles, clubs, users CASCADE"
            ))
            await session.commit()
        print("✓ Cleared existing data\n")

        user = await seed_user(database)
        clubs = await seed_clubs(database)
        matches = await seed_matches(database, user)

        print("\n" + "="*60)
        print("Seeding Complete!")
        print("="*60)
        print(f"""
Summary:
  - 1 user ({user.uid})
  - {clubs} clubs
  - {len(matches)} matches
""")
    except Exception as e:
        print(f"\n❌ Error during seeding: {e}")
        raise
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
