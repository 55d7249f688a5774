"""
ScoutMe API Schemas
===================

Pydantic schemas for request/response validation.

The wire format is camelCase (``videoUrl``, ``jerseyNumber``, ``teamType``);
snake_case field names are accepted on input as well.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, field_serializer, model_validator
from pydantic.alias_generators import to_camel

from scoutme.models import MatchStatus, PlayerPosition


# =============================================================================
# BASE SCHEMAS
# =============================================================================

class BaseSchema(BaseModel):
    """Base schema with common configuration."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class InputSchema(BaseSchema):
    """Base for request bodies; surrounding whitespace is stripped before length checks."""
    model_config = ConfigDict(str_strip_whitespace=True)


class MessageResponse(BaseSchema):
    message: str


# =============================================================================
# HEALTH & STATUS
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: datetime
    database: str
    environment: str


class ReadyResponse(BaseModel):
    """Readiness check response."""
    ready: bool
    checks: Dict[str, bool]


# =============================================================================
# USER SCHEMAS
# =============================================================================

class UserRegister(InputSchema):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    photo_url: Optional[str] = Field(None, max_length=1000)


class UserRead(BaseSchema):
    id: UUID
    uid: str
    name: str
    email: str
    phone: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: datetime


class UserResponse(BaseSchema):
    message: str
    data: UserRead


# =============================================================================
# CLUB SCHEMAS
# =============================================================================

class ClubBase(InputSchema):
    name: str = Field(..., min_length=1, max_length=255)
    country: str = Field(..., min_length=1, max_length=100)
    logo_url: Optional[str] = Field(None, max_length=1000)


class ClubCreate(ClubBase):
    pass


class ClubUpdate(InputSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    country: Optional[str] = Field(None, min_length=1, max_length=100)
    logo_url: Optional[str] = Field(None, max_length=1000)


class ClubRead(ClubBase):
    id: UUID
    created_at: datetime


class ClubResponse(BaseSchema):
    status: str = "success"
    message: str
    data: Optional[ClubRead] = None


class ClubListResponse(BaseSchema):
    status: str = "success"
    message: str
    data: List[ClubRead]


# =============================================================================
# PLAYER PROFILE SCHEMAS
# =============================================================================

class PlayerProfileRead(BaseSchema):
    id: UUID
    first_name: str
    last_name: str
    date_of_birth: date
    country: str
    primary_position: Optional[str] = None
    avatar: Optional[str] = None
    created_at: datetime

    @field_serializer("date_of_birth")
    def serialize_date_of_birth(self, value: date) -> str:
        return value.strftime("%d-%m-%Y")


class PlayerProfileUpdate(InputSchema):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    # DD-MM-YYYY; ISO dates are accepted too
    date_of_birth: Optional[str] = None
    country: Optional[str] = Field(None, min_length=1, max_length=100)
    primary_position: Optional[PlayerPosition] = None
    avatar: Optional[str] = Field(None, max_length=1000)


class PlayerProfileResponse(BaseSchema):
    status: str = "success"
    message: str
    data: PlayerProfileRead


class PlayerProfileListResponse(BaseSchema):
    status: str = "success"
    message: str
    data: List[PlayerProfileRead]


# =============================================================================
# MATCH REQUEST SCHEMAS
# =============================================================================

class ClubDescriptor(InputSchema):
    """A team taking part in the submitted match."""
    name: str = Field(..., min_length=1, max_length=255)
    country: str = Field(..., min_length=1, max_length=100)
    logo_url: Optional[str] = Field(None, max_length=1000)
    jersey_color: Optional[str] = Field(None, max_length=50)
    team_type: str = Field(..., min_length=1, max_length=50)


class PlayerDescriptor(InputSchema):
    """A roster entry. Opponents may carry only a shirt number and position."""
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    jersey_number: int = Field(..., ge=0, le=999)
    date_of_birth: Optional[str] = None
    position: PlayerPosition
    country: Optional[str] = Field(None, max_length=100)
    team_type: str = Field(..., min_length=1, max_length=50)


class MatchCreate(BaseSchema):
    """
    Body of ``POST /match``.

    **Example request:**
    ```json
    {
        "videoUrl": "https://videos.example.com/ajax-feyenoord.mp4",
        "level": "semi-pro",
        "clubs": [
            {"name": "Ajax", "country": "NL", "teamType": "yourTeam", "jerseyColor": "white"},
            {"name": "Feyenoord", "country": "NL", "teamType": "opponentTeam"}
        ],
        "players": [
            {"firstName": "Jan", "lastName": "de Vries", "jerseyNumber": 1,
             "dateOfBirth": "12-05-2001", "position": "Keeper", "country": "NL",
             "teamType": "yourTeam"},
            {"jerseyNumber": 9, "position": "Striker", "teamType": "opponentTeam"}
        ]
    }
    ```
    """
    video_url: HttpUrl
    line_up_image: Optional[HttpUrl] = None
    level: Optional[str] = Field(None, max_length=50)
    clubs: List[ClubDescriptor] = Field(..., min_length=2)
    players: List[PlayerDescriptor] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_team_types(self) -> "MatchCreate":
        team_types = [club.team_type for club in self.clubs]
        if len(set(team_types)) != len(team_types):
            raise ValueError("each club must have a distinct teamType")
        for index, player in enumerate(self.players):
            if player.team_type not in team_types:
                raise ValueError(
                    f"players[{index}].teamType '{player.team_type}' does not match any club"
                )
        return self


class MatchStatusUpdate(BaseSchema):
    status: MatchStatus


# =============================================================================
# MATCH RESPONSE SCHEMAS
# =============================================================================

class MatchCreatedResponse(BaseSchema):
    message: str
    match_id: UUID


class MatchSummary(BaseSchema):
    id: UUID
    status: MatchStatus
    created_at: datetime


class MatchListItem(MatchSummary):
    user_uid: str
    video_url: str
    level: Optional[str] = None


class MatchListResponse(BaseSchema):
    message: str
    data: List[MatchSummary]


class Pagination(BaseSchema):
    page: int
    limit: int


class MatchPageResponse(BaseSchema):
    message: str
    pagination: Pagination
    data: List[MatchListItem]


class MatchClubRead(BaseSchema):
    id: UUID
    club_id: UUID
    name: str
    country: str
    jersey_color: Optional[str] = None
    team_type: str
    is_your_team: bool


class MatchPlayerRead(BaseSchema):
    id: UUID
    match_club_id: UUID
    player_profile_id: Optional[UUID] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: date
    country: Optional[str] = None
    jersey_number: int
    position: str
    team_type: str
    is_your_team: bool


class MatchDetail(BaseSchema):
    id: UUID
    video_url: str
    line_up_image: Optional[str] = None
    level: Optional[str] = None
    status: MatchStatus
    created_at: datetime
    clubs: List[MatchClubRead] = []
    players: List[MatchPlayerRead] = []
    result: Optional[Any] = None


class MatchDetailResponse(BaseSchema):
    message: str
    data: MatchDetail
