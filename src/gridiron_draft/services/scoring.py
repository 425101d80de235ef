"""
Fantasy Scoring Service

Scores one NFL game end to end:

    fetch summary -> extract stats -> compute points -> persist points
    -> roll up per league -> persist team totals

Scoring is half-point PPR:

    0.04/pass yd, 4/pass TD, -2/INT
    0.1/rush yd, 6/rush TD
    0.1/rec yd, 6/rec TD, 0.5/reception
    -2/fumble lost, 6/kick or punt return TD

Re-running a game is safe. Stat lines and player points are merged by
(event, athlete); team totals for an (event, league) pair are deleted and
reinserted. Nothing outside the scored game is ever touched.
"""

import asyncio
from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from gridiron_draft.clients.espn import ESPNClient
from gridiron_draft.database.models import (
    GameEventRow,
    LeagueRow,
    PickRow,
    PlayerEventPointsRow,
    PlayerEventStatsRow,
    PlayerRow,
    TeamEventPointsRow,
)
from gridiron_draft.logging import logger
from gridiron_draft.models.scoring import (
    GameEvent,
    GameStatLine,
    LeagueRollupResult,
    PlayerEventPoints,
    ScoringRunReport,
    TeamEventPoints,
)
from gridiron_draft.services.box_score import extract_stat_lines, parse_game_event

POINTS_PER_STAT: dict[str, Decimal] = {
    "passing_yards": Decimal("0.04"),
    "passing_tds": Decimal("4"),
    "interceptions": Decimal("-2"),
    "rushing_yards": Decimal("0.1"),
    "rushing_tds": Decimal("6"),
    "receiving_yards": Decimal("0.1"),
    "receiving_tds": Decimal("6"),
    "receptions": Decimal("0.5"),
    "fumbles_lost": Decimal("-2"),
    "kick_return_tds": Decimal("6"),
    "punt_return_tds": Decimal("6"),
}

_CENT = Decimal("0.01")
TOP_SCORERS = 20


def _round_points(value: Decimal) -> float:
    return float(value.quantize(_CENT, rounding=ROUND_HALF_UP))


def compute_points(stats: GameStatLine) -> float:
    """Fantasy points for a stat line, rounded half-up to 2 decimals."""
    total = sum(
        (coefficient * getattr(stats, field) for field, coefficient in POINTS_PER_STAT.items()),
        Decimal(0),
    )
    return _round_points(total)


class _OwnedPick(Protocol):
    user_id: str
    player_id: str


def rollup_team_points(
    event_id: str,
    league_id: str,
    picks: Iterable[_OwnedPick],
    athlete_ids: Mapping[str, str | None],
    points: Mapping[str, float],
) -> list[TeamEventPoints]:
    """
    Sum each owner's drafted players' points for one game.

    Args:
        event_id: ESPN event ID
        league_id: League the picks belong to
        picks: League picks (user_id, player_id)
        athlete_ids: player ID -> ESPN athlete ID (None when unknown)
        points: ESPN athlete ID -> fantasy points for this event

    Returns:
        One row per owner with at least one pick, in first-pick order.
        Unknown athletes and unscored players count as 0.
    """
    totals: dict[str, Decimal] = {}
    for pick in picks:
        total = totals.setdefault(pick.user_id, Decimal(0))
        athlete_id = athlete_ids.get(pick.player_id)
        if athlete_id:
            totals[pick.user_id] = total + Decimal(str(points.get(athlete_id, 0)))

    return [
        TeamEventPoints(
            event_id=event_id,
            league_id=league_id,
            user_id=user_id,
            fantasy_points=_round_points(total),
        )
        for user_id, total in totals.items()
    ]


class ScoringService:
    """
    Service for scoring NFL games into fantasy points.

    A failed fetch aborts before any write, so previously stored points for
    this and every other game stay intact.
    """

    def __init__(self, session: Session, client: ESPNClient):
        self.session = session
        self.client = client

    async def score_event(self, event_id: str) -> ScoringRunReport:
        """
        Fetch, score and persist one game, then refresh every league's totals.

        Args:
            event_id: ESPN event ID

        Returns:
            ScoringRunReport for the game

        Raises:
            ESPNAPIError: the summary could not be fetched; nothing was written
        """
        event_id = str(event_id)
        summary = await self.client.get_game_summary(event_id)

        event = parse_game_event(event_id, summary)
        stat_lines = extract_stat_lines(summary)
        player_points = [
            PlayerEventPoints(
                event_id=event_id,
                espn_athlete_id=line.espn_athlete_id,
                fantasy_points=compute_points(line),
            )
            for line in stat_lines
        ]
        log = logger.bind(event_id=event_id, game=event.label)
        log.info("scoring_event_parsed", status=event.status, stat_lines=len(stat_lines))

        # Session work is blocking; keep it off the event loop
        results = await asyncio.to_thread(self._persist_event, event, stat_lines, player_points)

        report = ScoringRunReport(
            event_id=event_id,
            game=event.label,
            status=event.status,
            stat_lines=len(stat_lines),
            top_scorers=sorted(player_points, key=lambda p: p.fantasy_points, reverse=True)[
                :TOP_SCORERS
            ],
            leagues=results,
        )
        log.info(
            "scoring_event_complete",
            players_scored=len(player_points),
            team_updates=report.total_team_updates,
        )
        return report

    def _persist_event(
        self,
        event: GameEvent,
        stat_lines: list[GameStatLine],
        player_points: list[PlayerEventPoints],
    ) -> list[LeagueRollupResult]:
        """Store one game and refresh every league's totals in a single transaction."""
        log = logger.bind(event_id=event.id, game=event.label)
        try:
            self.session.merge(GameEventRow(**event.model_dump()))
            for line in stat_lines:
                self.session.merge(PlayerEventStatsRow(event_id=event.id, **line.model_dump()))
            for row in player_points:
                self.session.merge(PlayerEventPointsRow(**row.model_dump()))
            self.session.flush()

            leagues = self.session.scalars(select(LeagueRow).order_by(LeagueRow.created_at)).all()
            if not leagues:
                log.warning("scoring_no_leagues")
            results = [self._rollup_league(league.id, league.name, event.id) for league in leagues]

            self.session.commit()
        except Exception:
            self.session.rollback()
            log.exception("scoring_persist_failed")
            raise
        return results

    def _rollup_league(self, league_id: str, league_name: str, event_id: str) -> LeagueRollupResult:
        """Replace one league's team totals for one game."""
        log = logger.bind(event_id=event_id, league_id=league_id, league=league_name)

        # Serializes concurrent runs for the same (event, league)
        self.session.execute(
            select(LeagueRow.id).where(LeagueRow.id == league_id).with_for_update()
        )

        picks = self.session.scalars(
            select(PickRow).where(PickRow.league_id == league_id).order_by(PickRow.pick_number)
        ).all()

        # Cleared even without picks so a reset draft leaves no stale totals
        self.session.execute(
            delete(TeamEventPointsRow).where(
                TeamEventPointsRow.event_id == event_id,
                TeamEventPointsRow.league_id == league_id,
            )
        )
        if not picks:
            log.warning("rollup_skipped_no_picks")
            return LeagueRollupResult(
                league_id=league_id, league_name=league_name, skipped_reason="no draft picks yet"
            )

        players = self.session.scalars(
            select(PlayerRow).where(PlayerRow.id.in_({pick.player_id for pick in picks}))
        ).all()
        athlete_ids = {player.id: player.espn_athlete_id for player in players}

        missing = sorted(player.name for player in players if not player.espn_athlete_id)
        if missing:
            log.warning("rollup_players_missing_athlete_id", players=missing)

        known_athletes = {athlete_id for athlete_id in athlete_ids.values() if athlete_id}
        points: dict[str, float] = {}
        if known_athletes:
            rows = self.session.scalars(
                select(PlayerEventPointsRow).where(
                    PlayerEventPointsRow.event_id == event_id,
                    PlayerEventPointsRow.espn_athlete_id.in_(known_athletes),
                )
            ).all()
            points = {row.espn_athlete_id: row.fantasy_points for row in rows}

        team_rows = rollup_team_points(event_id, league_id, picks, athlete_ids, points)
        self.session.add_all(TeamEventPointsRow(**row.model_dump()) for row in team_rows)
        self.session.flush()

        log.info(
            "rollup_league_updated",
            teams=len(team_rows),
            picks=len(picks),
            scored_players=len(points),
        )
        return LeagueRollupResult(
            league_id=league_id,
            league_name=league_name,
            teams_updated=len(team_rows),
            players_missing_athlete_id=missing,
        )
