"""
Player-related Pydantic models.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Position(str, Enum):
    """Draftable skill positions."""

    QB = "QB"
    RB = "RB"
    WR = "WR"
    TE = "TE"


class NFLTeam(BaseModel):
    """NFL franchise as listed by ESPN."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="ESPN team ID")
    abbreviation: str
    display_name: str
    slug: str | None = None
    is_playoffs: bool = False
    is_eliminated: bool = False


class Player(BaseModel):
    """Draftable NFL player."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    position: Position
    nfl_team: str
    nfl_team_id: str | None = None
    espn_athlete_id: str | None = Field(
        default=None, description="ESPN athlete ID used to join box score stats"
    )
    is_eliminated: bool = False


class RosterPlayer(BaseModel):
    """Skill player parsed from an ESPN team roster."""

    espn_athlete_id: str
    name: str
    position: Position
    position_display: str | None = None


class PlayoffTeamsRequest(BaseModel):
    """Teams in this season's playoffs, by abbreviation."""

    abbreviations: list[str] = Field(min_length=1)
