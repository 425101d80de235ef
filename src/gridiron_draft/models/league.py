"""
League-related Pydantic models.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class LeagueStatus(str, Enum):
    """Draft lifecycle of a league."""

    PRE_DRAFT = "pre_draft"
    DRAFT = "draft"
    POST_DRAFT = "post_draft"


class League(BaseModel):
    """Fantasy league."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    commissioner_user_id: str
    num_teams: int | None = Field(default=None, description="Set when the draft order is set")
    status: LeagueStatus = LeagueStatus.PRE_DRAFT
    created_at: datetime | None = None


class LeagueMember(BaseModel):
    """A user who joined a league."""

    model_config = ConfigDict(from_attributes=True)

    league_id: str
    user_id: str
    display_name: str
    created_at: datetime | None = None


class DraftOrderEntry(BaseModel):
    """One slot of the draft order."""

    model_config = ConfigDict(from_attributes=True)

    slot: int = Field(ge=1)
    user_id: str


class LeagueCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    display_name: str = Field(min_length=1, max_length=50)


class JoinLeagueRequest(BaseModel):
    display_name: str = Field(min_length=1, max_length=50)


class DraftOrderRequest(BaseModel):
    """Explicit draft order, first user picks first."""

    user_ids: list[str] = Field(min_length=1)
