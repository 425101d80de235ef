"""
Player Catalog API Routes

Endpoints for NFL teams and draftable players.
"""

from typing import Annotated

from fastapi import APIRouter, Path, Query

from gridiron_draft.api.dependencies import CatalogReaderDep, CatalogServiceDep, CurrentUserDep
from gridiron_draft.models import NFLTeam, Player, PlayoffTeamsRequest, Position

router = APIRouter()


@router.get(
    "",
    response_model=list[Player],
    summary="Get players",
)
def list_players(
    service: CatalogReaderDep,
    position: Annotated[Position | None, Query(description="Filter by position")] = None,
    team: Annotated[str | None, Query(description="NFL team abbreviation")] = None,
    include_eliminated: Annotated[bool, Query(description="Include eliminated teams")] = True,
) -> list[Player]:
    return service.list_players(position, team, include_eliminated)


@router.get(
    "/teams",
    response_model=list[NFLTeam],
    summary="Get NFL teams",
)
def list_teams(
    service: CatalogReaderDep,
    playoffs_only: Annotated[bool, Query(description="Only playoff teams")] = False,
) -> list[NFLTeam]:
    return service.list_teams(playoffs_only)


@router.post(
    "/teams/seed",
    response_model=list[NFLTeam],
    summary="Seed NFL teams from ESPN",
)
async def seed_teams(user_id: CurrentUserDep, service: CatalogServiceDep) -> list[NFLTeam]:
    return await service.seed_teams()


@router.put(
    "/teams/playoffs",
    response_model=list[NFLTeam],
    summary="Set playoff teams",
)
def set_playoff_teams(
    body: PlayoffTeamsRequest,
    user_id: CurrentUserDep,
    service: CatalogReaderDep,
) -> list[NFLTeam]:
    return service.mark_playoff_teams(body.abbreviations)


@router.post(
    "/teams/{abbreviation}/eliminate",
    summary="Eliminate NFL team",
    description="Flag a team and its players as out of the playoffs.",
)
def eliminate_team(
    abbreviation: Annotated[str, Path(description="NFL team abbreviation")],
    user_id: CurrentUserDep,
    service: CatalogReaderDep,
) -> dict:
    flagged = service.mark_team_eliminated(abbreviation)
    return {"team": abbreviation.upper(), "players_flagged": flagged}


@router.post(
    "/seed",
    summary="Seed players from ESPN rosters",
)
async def seed_players(
    user_id: CurrentUserDep,
    service: CatalogServiceDep,
    all_teams: Annotated[bool, Query(description="Seed every team, not just playoff teams")] = False,
) -> dict:
    seeded = await service.seed_players(playoffs_only=not all_teams)
    return {"players_seeded": seeded}
