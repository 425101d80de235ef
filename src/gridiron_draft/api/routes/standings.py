"""
Standings API Routes

Endpoints for league standings and season stat tables.
"""

from typing import Annotated

from fastapi import APIRouter, Query

from gridiron_draft.api.dependencies import LeagueIdPath, StandingsServiceDep
from gridiron_draft.models import EventPoints, PlayerStatRow, Position, Standing

router = APIRouter()


@router.get(
    "/{league_id}",
    response_model=list[Standing],
    summary="Get standings",
    description="Season totals per member, highest first.",
)
def get_standings(league_id: LeagueIdPath, service: StandingsServiceDep) -> list[Standing]:
    return service.league_standings(league_id)


@router.get(
    "/{league_id}/events",
    response_model=list[EventPoints],
    summary="Get points per game",
)
def get_event_breakdown(league_id: LeagueIdPath, service: StandingsServiceDep) -> list[EventPoints]:
    return service.event_breakdown(league_id)


@router.get(
    "/{league_id}/players",
    response_model=list[PlayerStatRow],
    summary="Get drafted player stats",
)
def get_player_stats(
    league_id: LeagueIdPath,
    service: StandingsServiceDep,
    position: Annotated[Position | None, Query(description="Filter by position")] = None,
    sort_by: Annotated[str, Query(description="Column to sort by")] = "fantasy_points",
    descending: Annotated[bool, Query(description="Sort high to low")] = True,
) -> list[PlayerStatRow]:
    return service.player_stat_table(league_id, position, sort_by, descending)
