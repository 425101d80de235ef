"""
Standings Models
"""

from pydantic import BaseModel, Field


class Standing(BaseModel):
    """League standing for one owner."""

    rank: int
    user_id: str
    display_name: str
    total_points: float
    events_scored: int = Field(description="Games with a team points row")


class EventPoints(BaseModel):
    event_id: str
    user_id: str
    display_name: str
    fantasy_points: float


class PlayerStatRow(BaseModel):
    """Season totals for a drafted player."""

    player_id: str
    player_name: str
    position: str
    nfl_team: str
    owner_id: str
    owner_name: str
    fantasy_points: float = 0.0
    passing_yards: int = 0
    passing_tds: int = 0
    interceptions: int = 0
    rushing_yards: int = 0
    rushing_tds: int = 0
    receiving_yards: int = 0
    receiving_tds: int = 0
    receptions: int = 0
    fumbles_lost: int = 0
