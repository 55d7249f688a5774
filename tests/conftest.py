"""
Pytest Configuration and Fixtures
=================================

Shared fixtures for API tests.

Every test gets a fresh in-memory SQLite database and an app wired to it.
Bearer tokens are checked by ``FakeTokenVerifier``: ``"token-<uid>"`` is a
valid token for ``<uid>``, anything else is rejected.

The in-memory database is a single shared connection, so tests read and
write through short-lived ``database.session()`` blocks rather than holding
a session open across requests.
"""

from datetime import date, datetime, timedelta, timezone
from typing import AsyncGenerator, Dict
from uuid import uuid4

import jwt
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from scoutme.config import Settings
from scoutme.database import Database
from scoutme.models import (
    Analysis, Club, Match, MatchClub, MatchPlayer, MatchStatus, PlayerProfile, User,
)
from main import create_app


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_UID = "firebase-uid-coach"
OTHER_UID = "firebase-uid-scout"


class FakeTokenVerifier:
    """Accepts ``token-<uid>``; stands in for Firebase in tests."""

    def verify(self, token: str) -> str:
        if not token.startswith("token-"):
            raise jwt.InvalidTokenError("not a test token")
        return token[len("token-"):]


def auth_headers(uid: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer token-{uid}"}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        environment="test",
        database_url=TEST_DATABASE_URL,
        firebase_project_id="scoutme-test",
        max_page_size=100,
    )


@pytest_asyncio.fixture(scope="function")
async def database() -> AsyncGenerator[Database, None]:
    """Create a fresh database with the full schema for each test."""
    db = Database(TEST_DATABASE_URL)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def token_verifier() -> FakeTokenVerifier:
    return FakeTokenVerifier()


@pytest.fixture
def app(settings: Settings, database: Database, token_verifier: FakeTokenVerifier):
    return create_app(settings=settings, database=database, token_verifier=token_verifier)


@pytest_asyncio.fixture(scope="function")
async def anon_client(app) -> AsyncGenerator[AsyncClient, None]:
    """An HTTP client without credentials."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def registered_user(database: Database) -> User:
    """The caller behind ``client``, already registered."""
    async with database.session() as session:
        user = User(
            uid=TEST_UID,
            name="Coach Carter",
            email="coach@example.com",
            phone="+44 7700 900000",
        )
        session.add(user)
        await session.commit()
    return user


@pytest_asyncio.fixture(scope="function")
async def client(app, registered_user: User) -> AsyncGenerator[AsyncClient, None]:
    """An HTTP client authenticated as the registered user."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers=auth_headers(registered_user.uid),
    ) as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def seeded_db(database: Database, registered_user: User) -> Database:
    """
    Seed the database with test data.

    Creates:
    - 3 clubs
    - 2 player profiles
    - 1 match (with both clubs, 3 players and an analysis result)
    """
    async with database.session() as session:
        ajax = Club(id=uuid4(), name="Ajax", country="Netherlands", logo_url="https://cdn.example.com/ajax.png")
        feyenoord = Club(id=uuid4(), name="Feyenoord", country="Netherlands")
        psv = Club(id=uuid4(), name="PSV", country="Netherlands")
        session.add_all([ajax, feyenoord, psv])

        de_vries = PlayerProfile(
            id=uuid4(),
            first_name="Jan",
            last_name="de Vries",
            date_of_birth=date(2001, 5, 12),
            country="Netherlands",
            primary_position="Keeper",
        )
        bakker = PlayerProfile(
            id=uuid4(),
            first_name="Tom",
            last_name="Bakker",
            date_of_birth=date(2000, 2, 3),
            country="Netherlands",
            primary_position="Striker",
        )
        session.add_all([de_vries, bakker])
        await session.flush()

        match = Match(
            id=uuid4(),
            user_uid=registered_user.uid,
            video_url="https://videos.example.com/ajax-feyenoord.mp4",
            level="academy",
            status=MatchStatus.COMPLETED,
            created_at=datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc),
        )
        session.add(match)
        await session.flush()

        home = MatchClub(
            id=uuid4(), match_id=match.id, club_id=ajax.id, name=ajax.name, country=ajax.country,
            jersey_color="white", team_type="yourTeam", is_your_team=True,
        )
        away = MatchClub(
            id=uuid4(), match_id=match.id, club_id=feyenoord.id, name=feyenoord.name,
            country=feyenoord.country, jersey_color="red", team_type="opponentTeam", is_your_team=False,
        )
        session.add_all([home, away])
        await session.flush()

        session.add_all([
            MatchPlayer(
                match_id=match.id, match_club_id=home.id, player_profile_id=de_vries.id,
                first_name="Jan", last_name="de Vries", date_of_birth=date(2001, 5, 12),
                country="Netherlands", jersey_number=1, position="Keeper",
                team_type="yourTeam", is_your_team=True,
            ),
            MatchPlayer(
                match_id=match.id, match_club_id=home.id, player_profile_id=bakker.id,
                first_name="Tom", last_name="Bakker", date_of_birth=date(2000, 2, 3),
                country="Netherlands", jersey_number=9, position="Striker",
                team_type="yourTeam", is_your_team=True,
            ),
            MatchPlayer(
                match_id=match.id, match_club_id=away.id,
                jersey_number=4, position="Defender",
                team_type="opponentTeam", is_your_team=False,
            ),
        ])
        session.add(Analysis(match_id=match.id, result={"possession": {"yourTeam": 58, "opponentTeam": 42}}))
        await session.commit()

    database.test_data = {
        "clubs": {"ajax": ajax.id, "feyenoord": feyenoord.id, "psv": psv.id},
        "profiles": {"de_vries": de_vries.id, "bakker": bakker.id},
        "matches": {"seeded": match.id},
    }
    return database


@pytest_asyncio.fixture(scope="function")
async def many_matches(database: Database, registered_user: User) -> list:
    """Twelve bare matches one hour apart; returns their ids newest first."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    ids = []
    async with database.session() as session:
        for i in range(12):
            match = Match(
                id=uuid4(),
                user_uid=registered_user.uid,
                video_url=f"https://videos.example.com/match-{i}.mp4",
                status=MatchStatus.PENDING,
                created_at=base + timedelta(hours=i),
            )
            session.add(match)
            ids.append(match.id)
        await session.commit()
    return list(reversed(ids))


def match_payload(**overrides) -> dict:
    """A valid ``POST /match`` body: 11 players per side, opponents anonymous."""
    your_team = [
        {
            "firstName": f"Player{n}",
            "lastName": "Home",
            "jerseyNumber": n,
            "dateOfBirth": f"{n:02d}-06-2004",
            "position": "Keeper" if n == 1 else "Midfielder",
            "country": "Netherlands",
            "teamType": "yourTeam",
        }
        for n in range(1, 12)
    ]
    opponents = [
        {"jerseyNumber": n, "position": "Defender", "teamType": "opponentTeam"}
        for n in range(1, 12)
    ]
    payload = {
        "videoUrl": "https://videos.example.com/derby.mp4",
        "lineUpImage": "https://images.example.com/derby-lineup.png",
        "level": "semi-pro",
        "clubs": [
            {"name": "Ajax", "country": "Netherlands", "jerseyColor": "white", "teamType": "yourTeam"},
            {"name": "Feyenoord", "country": "Netherlands", "jerseyColor": "red", "teamType": "opponentTeam"},
        ],
        "players": your_team + opponents,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_match_payload():
    return match_payload


@pytest.fixture
def make_auth_headers():
    return auth_headers
