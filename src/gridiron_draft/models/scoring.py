"""
Scoring Models

Box score stat lines, fantasy points and the result of a scoring run.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class GameStatLine(BaseModel):
    """Counting stats for one athlete in one game."""

    model_config = ConfigDict(from_attributes=True)

    espn_athlete_id: str
    team_abbr: str | None = None
    passing_yards: int = 0
    passing_tds: int = 0
    interceptions: int = 0
    rushing_yards: int = 0
    rushing_tds: int = 0
    receiving_yards: int = 0
    receiving_tds: int = 0
    receptions: int = 0
    fumbles_lost: int = 0
    kick_return_tds: int = 0
    punt_return_tds: int = 0


STAT_FIELDS = (
    "passing_yards",
    "passing_tds",
    "interceptions",
    "rushing_yards",
    "rushing_tds",
    "receiving_yards",
    "receiving_tds",
    "receptions",
    "fumbles_lost",
    "kick_return_tds",
    "punt_return_tds",
)


class PlayerEventPoints(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event_id: str
    espn_athlete_id: str
    fantasy_points: float


class TeamEventPoints(BaseModel):
    """Fantasy points for one owner in one league for one game."""

    model_config = ConfigDict(from_attributes=True)

    event_id: str
    league_id: str
    user_id: str
    fantasy_points: float


class GameEvent(BaseModel):
    """NFL game header parsed from an ESPN summary."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    season_year: int = 0
    season_type: int = 0
    week: int | None = None
    name: str | None = None
    start_time: datetime | None = None
    home_team_id: str | None = None
    home_team_name: str | None = None
    home_team_abbr: str | None = None
    away_team_id: str | None = None
    away_team_name: str | None = None
    away_team_abbr: str | None = None
    home_score: int | None = None
    away_score: int | None = None
    status: str | None = None
    winner_id: str | None = Field(default=None, description="Null unless final and not tied")

    @property
    def label(self) -> str:
        """Scoreline for logs, e.g. 'KC 27 - 20 BUF'."""
        if not (self.home_team_abbr and self.away_team_abbr):
            return self.name or self.id
        if self.home_score is not None and self.away_score is not None:
            return f"{self.home_team_abbr} {self.home_score} - {self.away_score} {self.away_team_abbr}"
        return f"{self.home_team_abbr} vs {self.away_team_abbr}"


class LeagueRollupResult(BaseModel):
    league_id: str
    league_name: str
    teams_updated: int = 0
    skipped_reason: str | None = None
    players_missing_athlete_id: list[str] = Field(default_factory=list)


class ScoringRunReport(BaseModel):
    """Outcome of scoring one game."""

    event_id: str
    game: str
    status: str | None = None
    stat_lines: int
    top_scorers: list[PlayerEventPoints]
    leagues: list[LeagueRollupResult]

    @property
    def total_team_updates(self) -> int:
        return sum(result.teams_updated for result in self.leagues)
