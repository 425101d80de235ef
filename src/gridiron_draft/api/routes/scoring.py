"""
Scoring API Routes

Endpoint for scoring an NFL game into every league.
"""

from typing import Annotated

from fastapi import APIRouter, Path

from gridiron_draft.api.dependencies import CurrentUserDep, ScoringServiceDep
from gridiron_draft.models import ScoringRunReport

router = APIRouter()


@router.post(
    "/events/{event_id}",
    response_model=ScoringRunReport,
    summary="Score game",
    description=(
        "Fetch an ESPN box score, store half-PPR points per player and refresh "
        "every league's team totals for that game. Safe to re-run."
    ),
)
async def score_event(
    event_id: Annotated[str, Path(description="ESPN event ID", pattern=r"^\d+$")],
    user_id: CurrentUserDep,
    service: ScoringServiceDep,
) -> ScoringRunReport:
    return await service.score_event(event_id)
