"""
ScoutMe Database Models
=======================

Two kinds of rows:
- Canonical entities (clubs, player_profiles): one row per real-world club or
  person, keyed by a natural unique tuple and shared across matches.
- Per-match entities (match_clubs, match_players): scoped to one match and
  carrying the participation-specific details (jersey colour, shirt number,
  position played that day).

The analyses table is written by the external analysis worker; the API only
reads it.
"""

import enum
from datetime import date, datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from scoutme.database import Base


# Shown for match players whose date of birth was not supplied.
UNKNOWN_DATE_OF_BIRTH = date(1900, 1, 1)

YOUR_TEAM = "yourTeam"
OPPONENT_TEAM = "opponentTeam"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS
# =============================================================================

class MatchStatus(str, enum.Enum):
    """Lifecycle of an analysis request."""
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class PlayerPosition(str, enum.Enum):
    """Positions accepted on a match roster."""
    KEEPER = "Keeper"
    DEFENDER = "Defender"  # Centre-back
    FULLBACK = "Fullback"
    MIDFIELDER = "Midfielder"
    ANCHOR = "Anchor"  # Holding midfielder
    PLAYMAKER = "Playmaker"  # Attacking midfielder
    WINGER = "Winger"
    STRIKER = "Striker"


# =============================================================================
# USERS
# =============================================================================

class User(Base):
    """A registered account, keyed by the identity provider's subject id."""
    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    uid: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    photo_url: Mapped[Optional[str]] = mapped_column(String(1000))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    matches: Mapped[list["Match"]] = relationship(back_populates="owner")


# =============================================================================
# CANONICAL ENTITIES
# =============================================================================

class Club(Base):
    """A real-world club, shared by every match that references it."""
    __tablename__ = "clubs"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    logo_url: Mapped[Optional[str]] = mapped_column(String(1000))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("name", "country", name="uq_club_name_country"),
        Index("ix_clubs_country", "country"),
    )


class PlayerProfile(Base):
    """A real person, identified by name, date of birth and country."""
    __tablename__ = "player_profiles"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    primary_position: Mapped[Optional[str]] = mapped_column(String(50))
    avatar: Mapped[Optional[str]] = mapped_column(String(1000))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint(
            "first_name", "last_name", "date_of_birth", "country",
            name="uq_player_profile_identity",
        ),
        Index("ix_player_profiles_last_name", "last_name"),
    )


# =============================================================================
# MATCHES
# =============================================================================

class Match(Base):
    """An analysis request; root of the per-match rows."""
    __tablename__ = "matches"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_uid: Mapped[str] = mapped_column(String(128), ForeignKey("users.uid"), nullable=False)
    video_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    line_up_image: Mapped[Optional[str]] = mapped_column(String(1000))
    level: Mapped[Optional[str]] = mapped_column(String(50))  # competitive level, e.g. "academy", "semi-pro"
    status: Mapped[MatchStatus] = mapped_column(
        Enum(MatchStatus, name="match_status"),
        nullable=False,
        default=MatchStatus.PENDING,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    owner: Mapped["User"] = relationship(back_populates="matches")
    clubs: Mapped[list["MatchClub"]] = relationship(
        back_populates="match", cascade="all, delete-orphan", order_by="MatchClub.created_at"
    )
    players: Mapped[list["MatchPlayer"]] = relationship(
        back_populates="match", cascade="all, delete-orphan", order_by="MatchPlayer.jersey_number"
    )
    analysis: Mapped[Optional["Analysis"]] = relationship(back_populates="match", uselist=False)

    __table_args__ = (
        Index("ix_matches_user_created", "user_uid", "created_at"),
        Index("ix_matches_created_at", "created_at"),
    )


class MatchClub(Base):
    """One team's participation in a match."""
    __tablename__ = "match_clubs"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    match_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False)
    club_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("clubs.id"), nullable=False)

    # Denormalized for this match; jersey colour changes between matches
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    jersey_color: Mapped[Optional[str]] = mapped_column(String(50))

    team_type: Mapped[str] = mapped_column(String(50), nullable=False)
    is_your_team: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    match: Mapped["Match"] = relationship(back_populates="clubs")
    club: Mapped["Club"] = relationship()

    __table_args__ = (
        UniqueConstraint("match_id", "team_type", name="uq_match_club_team_type"),
        Index("ix_match_clubs_club", "club_id"),
    )


class MatchPlayer(Base):
    """A player's participation in one match, for one of its teams."""
    __tablename__ = "match_players"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    match_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False)
    match_club_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("match_clubs.id", ondelete="CASCADE"), nullable=False)
    # Absent when the player's identity is not confidently known
    player_profile_id: Mapped[Optional[UUID]] = mapped_column(Uuid, ForeignKey("player_profiles.id"))

    first_name: Mapped[Optional[str]] = mapped_column(String(100))
    last_name: Mapped[Optional[str]] = mapped_column(String(100))
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False, default=UNKNOWN_DATE_OF_BIRTH)
    country: Mapped[Optional[str]] = mapped_column(String(100))

    jersey_number: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[str] = mapped_column(String(50), nullable=False)  # as played in this match
    team_type: Mapped[str] = mapped_column(String(50), nullable=False)
    is_your_team: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    match: Mapped["Match"] = relationship(back_populates="players")
    match_club: Mapped["MatchClub"] = relationship()
    player_profile: Mapped[Optional["PlayerProfile"]] = relationship()

    __table_args__ = (
        Index("ix_match_players_match", "match_id"),
        Index("ix_match_players_profile", "player_profile_id"),
    )


class Analysis(Base):
    """Result written by the analysis worker once a match is processed."""
    __tablename__ = "analyses"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    match_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("matches.id", ondelete="CASCADE"), unique=True, nullable=False)
    result: Mapped[Optional[dict]] = mapped_column(JSON().with_variant(JSONB(), "postgresql"))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    match: Mapped["Match"] = relationship(back_populates="analysis")
