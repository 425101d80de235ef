"""Pydantic models and schemas."""

from gridiron_draft.models.draft import DraftState, Pick, PickRequest
from gridiron_draft.models.league import (
    DraftOrderEntry,
    DraftOrderRequest,
    JoinLeagueRequest,
    League,
    LeagueCreate,
    LeagueMember,
    LeagueStatus,
)
from gridiron_draft.models.player import NFLTeam, Player, PlayoffTeamsRequest, Position, RosterPlayer
from gridiron_draft.models.scoring import (
    STAT_FIELDS,
    GameEvent,
    GameStatLine,
    LeagueRollupResult,
    PlayerEventPoints,
    ScoringRunReport,
    TeamEventPoints,
)
from gridiron_draft.models.standings import EventPoints, PlayerStatRow, Standing

__all__ = [
    # Draft
    "DraftState",
    "Pick",
    "PickRequest",
    # League
    "DraftOrderEntry",
    "DraftOrderRequest",
    "JoinLeagueRequest",
    "League",
    "LeagueCreate",
    "LeagueMember",
    "LeagueStatus",
    # Player
    "NFLTeam",
    "Player",
    "PlayoffTeamsRequest",
    "Position",
    "RosterPlayer",
    # Scoring
    "STAT_FIELDS",
    "GameEvent",
    "GameStatLine",
    "LeagueRollupResult",
    "PlayerEventPoints",
    "ScoringRunReport",
    "TeamEventPoints",
    # Standings
    "EventPoints",
    "PlayerStatRow",
    "Standing",
]
