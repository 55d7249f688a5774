"""
ScoutMe Business Logic Services
===============================

- Canonical entity resolution (clubs, player profiles)
- Match assembly, status lifecycle and match queries
"""

from scoutme.services.canonical import (
    format_date,
    insert_or_fetch,
    parse_date,
    profile_key,
    resolve_club,
    resolve_player_profile,
    should_resolve_profile,
)
from scoutme.services.matches import (
    create_match,
    get_match_detail,
    list_matches,
    list_user_matches,
    update_match_status,
)

__all__ = [
    "format_date",
    "insert_or_fetch",
    "parse_date",
    "profile_key",
    "resolve_club",
    "resolve_player_profile",
    "should_resolve_profile",
    "create_match",
    "get_match_detail",
    "list_matches",
    "list_user_matches",
    "update_match_status",
]
