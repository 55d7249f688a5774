"""
Matches Router
==============

Match analysis requests:
- Submit a match with its clubs and rosters
- List the caller's matches and all matches (paginated)
- Match detail with rosters and analysis result
- Status updates
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from scoutme.dependencies import get_current_user, get_db
from scoutme.exceptions import InvalidInputError
from scoutme.models import User
from scoutme.schemas import (
    MatchCreate, MatchCreatedResponse, MatchDetailResponse, MatchListItem,
    MatchListResponse, MatchPageResponse, MatchStatusUpdate, MatchSummary,
    MessageResponse, Pagination,
)
from scoutme.services import (
    create_match, get_match_detail, list_matches, list_user_matches, update_match_status,
)

router = APIRouter(prefix="/match", tags=["Matches"])


@router.post("", response_model=MatchCreatedResponse, status_code=status.HTTP_201_CREATED)
async def request_match_analysis(
    payload: MatchCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MatchCreatedResponse:
    """
    Submit a match for analysis.

    Clubs are matched to existing clubs by name and country (created on first
    use). Players tagged `yourTeam` are linked to player profiles; opponents
    are linked only when first name, last name, date of birth, position and
    country are all given. Every player's `teamType` must match one club.
    """
    match = await create_match(db, user.uid, payload)
    return MatchCreatedResponse(
        message="Match analysis request created successfully!",
        match_id=match.id,
    )


@router.get("", response_model=MatchListResponse)
async def list_my_matches(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MatchListResponse:
    """List the caller's matches, newest first."""
    rows = await list_user_matches(db, user.uid)
    return MatchListResponse(
        message="Match requests fetched successfully",
        data=[MatchSummary(id=row.id, status=row.status, created_at=row.created_at) for row in rows],
    )


@router.get("/all-match", response_model=MatchPageResponse)
async def list_all_matches(
    request: Request,
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    limit: int = Query(20, ge=1, description="Matches per page"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MatchPageResponse:
    """
    List every match, newest first.

    `limit` may not exceed the configured maximum page size (100 by default).
    Pages past the end return an empty list.
    """
    max_page_size = request.app.state.settings.max_page_size
    if limit > max_page_size:
        raise InvalidInputError(f"limit must be at most {max_page_size}", code="limit_too_large")

    matches = await list_matches(db, page, limit)
    return MatchPageResponse(
        message="Matches fetched successfully",
        pagination=Pagination(page=page, limit=limit),
        data=[MatchListItem.model_validate(m) for m in matches],
    )


@router.get("/{match_id}", response_model=MatchDetailResponse)
async def get_match(
    match_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MatchDetailResponse:
    """Get a match with its clubs, players and analysis result (null until analysed)."""
    detail = await get_match_detail(db, match_id)
    return MatchDetailResponse(
        message="Match information is successfully fetched!",
        data=detail,
    )


@router.post("/{match_id}", response_model=MessageResponse)
async def set_match_status(
    match_id: UUID,
    body: MatchStatusUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """
    Update a match's status.

    **Statuses:** `PENDING`, `PROCESSING`, `COMPLETED`, `FAILED`.
    Any other value is rejected and the match is left unchanged.
    """
    match = await update_match_status(db, match_id, body.status)
    return MessageResponse(message=f"Match status updated to {match.status.value}")
