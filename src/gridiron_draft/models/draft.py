"""
Draft Models

Picks and the live view of a league's draft.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from gridiron_draft.models.league import DraftOrderEntry, League


class Pick(BaseModel):
    """A single draft pick."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    league_id: str
    pick_number: int = Field(ge=1, description="Overall pick number")
    user_id: str
    player_id: str
    created_at: datetime | None = None


class PickRequest(BaseModel):
    player_id: str = Field(min_length=1)


class DraftState(BaseModel):
    """Everything a draft room needs to render the clock."""

    league: League
    order: list[DraftOrderEntry]
    picks: list[Pick]
    next_pick_number: int
    current_round: int | None = None
    on_the_clock: str | None = Field(
        default=None, description="User ID on the clock, null while waiting"
    )
    total_picks: int = Field(description="num_teams x roster size")
    progress_pct: int = Field(ge=0, le=100)
