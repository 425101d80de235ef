"""
Standings Service

League standings, per-game team points and drafted player stat totals,
all read from persisted scoring results.
"""

import pandas as pd
from sqlalchemy import select
from sqlalchemy.orm import Session

from gridiron_draft.database.models import (
    LeagueMemberRow,
    LeagueRow,
    PickRow,
    PlayerEventPointsRow,
    PlayerEventStatsRow,
    PlayerRow,
    TeamEventPointsRow,
)
from gridiron_draft.exceptions import InvalidInput, LeagueNotFound
from gridiron_draft.models.player import Position
from gridiron_draft.models.scoring import STAT_FIELDS
from gridiron_draft.models.standings import EventPoints, PlayerStatRow, Standing

_TABLE_STATS = [f for f in STAT_FIELDS if f not in ("kick_return_tds", "punt_return_tds")]
SORTABLE_COLUMNS = ("fantasy_points", "player_name", "position", "nfl_team", "owner_name", *_TABLE_STATS)


class StandingsService:
    """Read-only views over team and player points."""

    def __init__(self, session: Session):
        self.session = session

    def _require_league(self, league_id: str) -> None:
        if self.session.get(LeagueRow, league_id) is None:
            raise LeagueNotFound(league_id)

    def _display_names(self, league_id: str) -> dict[str, str]:
        rows = self.session.scalars(
            select(LeagueMemberRow)
            .where(LeagueMemberRow.league_id == league_id)
            .order_by(LeagueMemberRow.created_at, LeagueMemberRow.id)
        ).all()
        return {m.user_id: m.display_name for m in rows}

    def _team_points(self, league_id: str) -> list[TeamEventPointsRow]:
        return list(
            self.session.scalars(
                select(TeamEventPointsRow).where(TeamEventPointsRow.league_id == league_id)
            ).all()
        )

    def league_standings(self, league_id: str) -> list[Standing]:
        """
        Season totals per member, highest first.

        Members without any scored game are listed with 0 points. Ties are
        ordered by display name.
        """
        self._require_league(league_id)
        names = self._display_names(league_id)

        totals: dict[str, float] = {user_id: 0.0 for user_id in names}
        events: dict[str, int] = {user_id: 0 for user_id in names}
        for row in self._team_points(league_id):
            totals[row.user_id] = totals.get(row.user_id, 0.0) + row.fantasy_points
            events[row.user_id] = events.get(row.user_id, 0) + 1

        ordered = sorted(
            totals,
            key=lambda uid: (-round(totals[uid], 2), names.get(uid, uid).lower()),
        )
        return [
            Standing(
                rank=rank,
                user_id=user_id,
                display_name=names.get(user_id, user_id),
                total_points=round(totals[user_id], 2),
                events_scored=events[user_id],
            )
            for rank, user_id in enumerate(ordered, start=1)
        ]

    def event_breakdown(self, league_id: str) -> list[EventPoints]:
        """Team points per game, grouped by event then highest score."""
        self._require_league(league_id)
        names = self._display_names(league_id)
        rows = sorted(self._team_points(league_id), key=lambda r: (r.event_id, -r.fantasy_points))
        return [
            EventPoints(
                event_id=row.event_id,
                user_id=row.user_id,
                display_name=names.get(row.user_id, row.user_id),
                fantasy_points=row.fantasy_points,
            )
            for row in rows
        ]

    def player_stat_table(
        self,
        league_id: str,
        position: Position | None = None,
        sort_by: str = "fantasy_points",
        descending: bool = True,
    ) -> list[PlayerStatRow]:
        """
        Season stat totals for every drafted player with an ESPN athlete ID.

        Args:
            league_id: League ID
            position: Only this position
            sort_by: Column to sort by
            descending: Sort direction

        Returns:
            One row per drafted player; players without games have zeros
        """
        if sort_by not in SORTABLE_COLUMNS:
            raise InvalidInput(f"Cannot sort by '{sort_by}'.")
        self._require_league(league_id)
        names = self._display_names(league_id)

        query = (
            select(PickRow.user_id, PlayerRow)
            .join(PlayerRow, PlayerRow.id == PickRow.player_id)
            .where(PickRow.league_id == league_id, PlayerRow.espn_athlete_id.is_not(None))
        )
        if position is not None:
            query = query.where(PlayerRow.position == position.value)
        drafted = self.session.execute(query).all()
        if not drafted:
            return []

        roster = pd.DataFrame(
            [
                {
                    "player_id": player.id,
                    "player_name": player.name,
                    "position": player.position,
                    "nfl_team": player.nfl_team,
                    "espn_athlete_id": player.espn_athlete_id,
                    "owner_id": user_id,
                    "owner_name": names.get(user_id, user_id),
                }
                for user_id, player in drafted
            ]
        )
        athlete_ids = roster["espn_athlete_id"].tolist()

        stats = pd.DataFrame(
            [
                {"espn_athlete_id": s.espn_athlete_id, **{f: getattr(s, f) for f in _TABLE_STATS}}
                for s in self.session.scalars(
                    select(PlayerEventStatsRow).where(
                        PlayerEventStatsRow.espn_athlete_id.in_(athlete_ids)
                    )
                ).all()
            ],
            columns=["espn_athlete_id", *_TABLE_STATS],
        )
        points = pd.DataFrame(
            [
                {"espn_athlete_id": p.espn_athlete_id, "fantasy_points": p.fantasy_points}
                for p in self.session.scalars(
                    select(PlayerEventPointsRow).where(
                        PlayerEventPointsRow.espn_athlete_id.in_(athlete_ids)
                    )
                ).all()
            ],
            columns=["espn_athlete_id", "fantasy_points"],
        )

        stat_totals = stats.groupby("espn_athlete_id").sum().reset_index()
        point_totals = points.groupby("espn_athlete_id").sum().reset_index()

        table = roster.merge(stat_totals, on="espn_athlete_id", how="left").merge(
            point_totals, on="espn_athlete_id", how="left"
        )
        table[_TABLE_STATS] = table[_TABLE_STATS].fillna(0).astype(int)
        table["fantasy_points"] = table["fantasy_points"].fillna(0.0).astype(float).round(2)

        keys = [sort_by] if sort_by == "player_name" else [sort_by, "player_name"]
        table = table.sort_values(
            keys, ascending=[not descending, True][: len(keys)], kind="mergesort"
        )
        return [
            PlayerStatRow(**record)
            for record in table.drop(columns=["espn_athlete_id"]).to_dict(orient="records")
        ]
