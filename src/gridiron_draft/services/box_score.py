"""
ESPN Box Score Parsing

Turns an ESPN game summary into per-athlete stat lines and a game header.

ESPN groups player stats per team into categories (passing, rushing,
receiving, kickReturns, puntReturns, fumbles). Every category carries column
labels and athlete rows whose values are aligned to those labels. Columns are
matched by label name, never by position, so new or reordered columns are
harmless.
"""

import re
from datetime import datetime
from typing import Any

from gridiron_draft.models.scoring import GameEvent, GameStatLine

_LEADING_INT = re.compile(r"^-?\d+")
_NON_NUMERIC = re.compile(r"[^\d-]")

# category -> label -> stat field, compared lowercase
CATEGORY_LABELS: dict[str, dict[str, str]] = {
    "passing": {"yds": "passing_yards", "td": "passing_tds", "int": "interceptions"},
    "rushing": {"yds": "rushing_yards", "td": "rushing_tds"},
    "receiving": {"yds": "receiving_yards", "td": "receiving_tds", "rec": "receptions"},
    "kickreturns": {"td": "kick_return_tds"},
    "puntreturns": {"td": "punt_return_tds"},
}

FINAL_STATUS = "STATUS_FINAL"


def parse_stat_int(value: Any) -> int:
    """
    Parse a box score cell as an integer.

    Everything except digits and '-' is stripped first, so "1,024" is 1024 and
    "22/31" is 2231. Anything unparseable is 0.
    """
    if value is None:
        return 0
    match = _LEADING_INT.match(_NON_NUMERIC.sub("", str(value)))
    return int(match.group()) if match else 0


def _stat_field(category: str, label: str) -> str | None:
    if "fumble" in category:
        return "fumbles_lost" if "lost" in label else None
    return CATEGORY_LABELS.get(category, {}).get(label)


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _team_abbr(team_block: dict) -> str | None:
    team = _as_dict(team_block.get("team"))
    return team.get("abbreviation") or team.get("shortDisplayName") or None


def extract_stat_lines(summary: Any) -> list[GameStatLine]:
    """
    Accumulate one stat line per athlete from an ESPN summary.

    Args:
        summary: Raw ESPN summary JSON

    Returns:
        Stat lines in the order athletes were first seen
    """
    if not isinstance(summary, dict):
        return []
    box = summary.get("boxscore")
    team_blocks = box.get("players") if isinstance(box, dict) else None
    if not isinstance(team_blocks, list):
        return []

    lines: dict[str, GameStatLine] = {}

    for team_block in team_blocks:
        if not isinstance(team_block, dict):
            continue
        team_abbr = _team_abbr(team_block)
        groups = team_block.get("statistics")
        if not isinstance(groups, list):
            continue

        for group in groups:
            if not isinstance(group, dict):
                continue
            category = str(group.get("name") or "").lower()
            labels = [str(label or "").lower() for label in _as_list(group.get("labels"))]

            for row in _as_list(group.get("athletes")):
                if not isinstance(row, dict):
                    continue
                athlete_id = _as_dict(row.get("athlete")).get("id")
                if not athlete_id:
                    continue
                athlete_id = str(athlete_id)

                line = lines.get(athlete_id)
                if line is None:
                    line = lines[athlete_id] = GameStatLine(
                        espn_athlete_id=athlete_id, team_abbr=team_abbr
                    )
                elif not line.team_abbr and team_abbr:
                    line.team_abbr = team_abbr

                values = _as_list(row.get("stats"))
                for index, label in enumerate(labels):
                    field = _stat_field(category, label)
                    if field is None or index >= len(values):
                        continue
                    setattr(line, field, getattr(line, field) + parse_stat_int(values[index]))

    return list(lines.values())


def _parse_int(value: Any) -> int | None:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_start(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def parse_game_event(event_id: str, summary: Any) -> GameEvent:
    """
    Build the game header for an event.

    A winner is only recorded for a final game that is not tied.
    """
    summary = _as_dict(summary)
    competitions = _as_list(_as_dict(summary.get("header")).get("competitions"))
    competition = _as_dict(competitions[0]) if competitions else {}
    competitors = [c for c in _as_list(competition.get("competitors")) if isinstance(c, dict)]

    home = next((c for c in competitors if c.get("homeAway") == "home"), {})
    away = next((c for c in competitors if c.get("homeAway") == "away"), {})
    home_team = _as_dict(home.get("team"))
    away_team = _as_dict(away.get("team"))
    season = _as_dict(summary.get("season"))

    status = _as_dict(_as_dict(competition.get("status")).get("type")).get("name")
    home_score = _parse_int(home.get("score"))
    away_score = _parse_int(away.get("score"))

    winner_id = None
    if status == FINAL_STATUS and home_score is not None and away_score is not None:
        if home_score > away_score:
            winner_id = home_team.get("id")
        elif away_score > home_score:
            winner_id = away_team.get("id")

    return GameEvent(
        id=str(event_id),
        season_year=_parse_int(season.get("year")) or 0,
        season_type=_parse_int(season.get("type")) or 0,
        week=_parse_int(_as_dict(summary.get("week")).get("number")),
        name=competition.get("description"),
        start_time=_parse_start(competition.get("date")),
        home_team_id=_str_or_none(home_team.get("id")),
        home_team_name=home_team.get("displayName") or home_team.get("name"),
        home_team_abbr=home_team.get("abbreviation"),
        away_team_id=_str_or_none(away_team.get("id")),
        away_team_name=away_team.get("displayName") or away_team.get("name"),
        away_team_abbr=away_team.get("abbreviation"),
        home_score=home_score,
        away_score=away_score,
        status=status,
        winner_id=_str_or_none(winner_id),
    )


def _str_or_none(value: Any) -> str | None:
    return None if value is None else str(value)
