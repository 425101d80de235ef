"""
Draft API Routes

Endpoints for running a league's snake draft.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from gridiron_draft.api.dependencies import (
    CurrentUserDep,
    DraftServiceDep,
    LeagueIdPath,
)
from gridiron_draft.models import DraftState, League, Pick, PickRequest, Player, Position
from gridiron_draft.services.turns import resolve_pick_owner

router = APIRouter()


@router.get(
    "/{league_id}",
    response_model=DraftState,
    summary="Get draft state",
    description="Order, picks, and the user on the clock.",
)
def get_draft_state(league_id: LeagueIdPath, service: DraftServiceDep) -> DraftState:
    return service.get_draft_state(league_id)


@router.get(
    "/{league_id}/turn",
    summary="Resolve pick owner",
    description="Owner of an overall pick number under the current draft order.",
)
def get_pick_owner(
    league_id: LeagueIdPath,
    service: DraftServiceDep,
    pick_number: Annotated[int, Query(description="Overall pick number", ge=1)],
) -> dict:
    league = service.get_league(league_id)
    order = service.get_draft_order(league_id)
    return {
        "pick_number": pick_number,
        "user_id": resolve_pick_owner(pick_number, league.num_teams, order),
    }


@router.post(
    "/{league_id}/start",
    response_model=League,
    summary="Start draft",
    description="Commissioner only. Requires a complete draft order.",
)
def start_draft(league_id: LeagueIdPath, user_id: CurrentUserDep, service: DraftServiceDep) -> League:
    return service.start_draft(league_id, user_id)


@router.get(
    "/{league_id}/picks",
    response_model=list[Pick],
    summary="Get picks",
)
def list_picks(league_id: LeagueIdPath, service: DraftServiceDep) -> list[Pick]:
    return service.list_picks(league_id)


@router.post(
    "/{league_id}/picks",
    response_model=Pick,
    status_code=status.HTTP_201_CREATED,
    summary="Make pick",
    description="Draft a player for the caller. Rejected unless the caller is on the clock.",
)
def make_pick(
    league_id: LeagueIdPath,
    body: PickRequest,
    user_id: CurrentUserDep,
    service: DraftServiceDep,
) -> Pick:
    return service.make_pick(league_id, user_id, body.player_id)


@router.post(
    "/{league_id}/reset",
    response_model=League,
    summary="Reset draft",
    description="Commissioner only. Deletes every pick and returns to pre-draft.",
)
def reset_draft(league_id: LeagueIdPath, user_id: CurrentUserDep, service: DraftServiceDep) -> League:
    return service.reset_draft(league_id, user_id)


@router.get(
    "/{league_id}/available",
    response_model=list[Player],
    summary="Get available players",
)
def available_players(
    league_id: LeagueIdPath,
    service: DraftServiceDep,
    position: Annotated[Position | None, Query(description="Filter by position")] = None,
    search: Annotated[str | None, Query(description="Name, team or position")] = None,
    include_eliminated: Annotated[bool, Query(description="Include eliminated teams")] = True,
) -> list[Player]:
    return service.available_players(league_id, position, search, include_eliminated)
