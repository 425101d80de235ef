"""
League API Routes

Endpoints for creating and joining leagues and setting the draft order.
"""

from fastapi import APIRouter, status

from gridiron_draft.api.dependencies import CurrentUserDep, DraftServiceDep, LeagueIdPath
from gridiron_draft.models import (
    DraftOrderEntry,
    DraftOrderRequest,
    JoinLeagueRequest,
    League,
    LeagueCreate,
    LeagueMember,
)

router = APIRouter()


@router.post(
    "",
    response_model=League,
    status_code=status.HTTP_201_CREATED,
    summary="Create league",
    description="Create a league. The caller becomes commissioner and first member.",
)
def create_league(
    body: LeagueCreate,
    user_id: CurrentUserDep,
    service: DraftServiceDep,
) -> League:
    return service.create_league(body.name, user_id, body.display_name)


@router.get(
    "/{league_id}",
    response_model=League,
    summary="Get league details",
)
def get_league(league_id: LeagueIdPath, service: DraftServiceDep) -> League:
    return service.get_league(league_id)


@router.get(
    "/{league_id}/members",
    response_model=list[LeagueMember],
    summary="Get league members",
    description="Members in the order they joined.",
)
def list_members(league_id: LeagueIdPath, service: DraftServiceDep) -> list[LeagueMember]:
    return service.list_members(league_id)


@router.post(
    "/{league_id}/join",
    response_model=LeagueMember,
    summary="Join league",
    description="Join before the draft starts. Joining again returns the existing membership.",
)
def join_league(
    league_id: LeagueIdPath,
    body: JoinLeagueRequest,
    user_id: CurrentUserDep,
    service: DraftServiceDep,
) -> LeagueMember:
    return service.join_league(league_id, user_id, body.display_name)


@router.get(
    "/{league_id}/draft-order",
    response_model=list[DraftOrderEntry],
    summary="Get draft order",
)
def get_draft_order(league_id: LeagueIdPath, service: DraftServiceDep) -> list[DraftOrderEntry]:
    return service.get_draft_order(league_id)


@router.put(
    "/{league_id}/draft-order",
    response_model=list[DraftOrderEntry],
    summary="Set draft order",
    description="Commissioner only. Lists every member exactly once, first pick first.",
)
def set_draft_order(
    league_id: LeagueIdPath,
    body: DraftOrderRequest,
    user_id: CurrentUserDep,
    service: DraftServiceDep,
) -> list[DraftOrderEntry]:
    return service.set_draft_order(league_id, user_id, body.user_ids)


@router.post(
    "/{league_id}/draft-order/from-join-order",
    response_model=list[DraftOrderEntry],
    summary="Set draft order from join order",
    description="Commissioner only. Slot 1 is the first member to join.",
)
def set_draft_order_from_join_order(
    league_id: LeagueIdPath,
    user_id: CurrentUserDep,
    service: DraftServiceDep,
) -> list[DraftOrderEntry]:
    return service.set_draft_order_from_join_order(league_id, user_id)
