"""Database package initialization."""

from gridiron_draft.database.connection import (
    SessionLocal,
    build_engine,
    engine,
    get_db,
    init_db,
)
from gridiron_draft.database.models import (
    Base,
    DraftOrderRow,
    GameEventRow,
    LeagueMemberRow,
    LeagueRow,
    NFLTeamRow,
    PickRow,
    PlayerEventPointsRow,
    PlayerEventStatsRow,
    PlayerRow,
    TeamEventPointsRow,
)

__all__ = [
    "Base",
    "DraftOrderRow",
    "GameEventRow",
    "LeagueMemberRow",
    "LeagueRow",
    "NFLTeamRow",
    "PickRow",
    "PlayerEventPointsRow",
    "PlayerEventStatsRow",
    "PlayerRow",
    "SessionLocal",
    "TeamEventPointsRow",
    "build_engine",
    "engine",
    "get_db",
    "init_db",
]
