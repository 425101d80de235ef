"""
Player Catalog Service

Seeds NFL teams and draftable skill players from ESPN and tracks playoff
elimination.
"""

import asyncio
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from gridiron_draft.clients.espn import ESPNClient
from gridiron_draft.config import Settings, get_settings
from gridiron_draft.database.models import NFLTeamRow, PlayerRow
from gridiron_draft.exceptions import InvalidInput
from gridiron_draft.logging import logger
from gridiron_draft.models.player import NFLTeam, Player, Position, RosterPlayer

SKILL_POSITIONS = {p.value for p in Position}


def parse_offense_skill_players(roster: Any) -> list[RosterPlayer]:
    """
    Pick the QB/RB/WR/TE athletes out of an ESPN roster.

    Only the "offense" group is read. Items without an ID or name are skipped.
    """
    if not isinstance(roster, dict):
        return []
    groups = roster.get("athletes") or []
    offense = next(
        (g for g in groups if isinstance(g, dict) and g.get("position") == "offense"), {}
    )

    players = []
    for item in offense.get("items") or []:
        if not isinstance(item, dict):
            continue
        position = item.get("position") or {}
        abbreviation = position.get("abbreviation")
        if abbreviation not in SKILL_POSITIONS:
            continue
        if item.get("id") is None or not item.get("displayName"):
            continue
        players.append(
            RosterPlayer(
                espn_athlete_id=str(item["id"]),
                name=item["displayName"],
                position=Position(abbreviation),
                position_display=position.get("displayName"),
            )
        )
    return players


class PlayerCatalogService:
    """
    Service for the NFL team and player catalog.

    Provides methods to:
    - Seed NFL teams from ESPN
    - Seed skill players from team rosters
    - Flag playoff teams and eliminated teams
    """

    def __init__(
        self,
        session: Session,
        client: ESPNClient | None = None,
        settings: Settings | None = None,
    ):
        self.session = session
        self.client = client
        self.settings = settings or get_settings()

    def _require_client(self) -> ESPNClient:
        if self.client is None:
            raise RuntimeError("ESPN client required for seeding")
        return self.client

    def _team_by_abbreviation(self, abbreviation: str) -> NFLTeamRow:
        team = self.session.scalars(
            select(NFLTeamRow).where(NFLTeamRow.abbreviation == abbreviation.upper())
        ).first()
        if team is None:
            raise InvalidInput(f"Unknown NFL team '{abbreviation}'.")
        return team

    async def seed_teams(self) -> list[NFLTeam]:
        """
        Upsert every NFL team by ESPN ID.

        Playoff and elimination flags of existing teams are kept.
        """
        raw_teams = await self._require_client().get_teams()
        return await asyncio.to_thread(self._upsert_teams, raw_teams)

    def _upsert_teams(self, raw_teams: list[dict[str, Any]]) -> list[NFLTeam]:
        teams: dict[str, NFLTeamRow] = {}
        for raw in raw_teams:
            if raw.get("id") is None or not raw.get("abbreviation"):
                continue
            team_id = str(raw["id"])
            row = teams.get(team_id) or self.session.get(NFLTeamRow, team_id)
            if row is None:
                row = NFLTeamRow(id=team_id)
                self.session.add(row)
            row.abbreviation = raw["abbreviation"]
            row.display_name = raw.get("displayName") or raw["abbreviation"]
            row.slug = raw.get("slug")
            teams[team_id] = row

        self.session.commit()
        logger.info("teams_seeded", teams=len(teams))
        return [NFLTeam.model_validate(t) for t in teams.values()]

    def list_teams(self, playoffs_only: bool = False) -> list[NFLTeam]:
        query = select(NFLTeamRow).order_by(NFLTeamRow.abbreviation)
        if playoffs_only:
            query = query.where(NFLTeamRow.is_playoffs.is_(True))
        return [NFLTeam.model_validate(t) for t in self.session.scalars(query).all()]

    def list_players(
        self,
        position: Position | None = None,
        nfl_team: str | None = None,
        include_eliminated: bool = True,
    ) -> list[Player]:
        query = select(PlayerRow).order_by(PlayerRow.position, PlayerRow.name)
        if position is not None:
            query = query.where(PlayerRow.position == position.value)
        if nfl_team:
            query = query.where(PlayerRow.nfl_team == nfl_team.upper())
        if not include_eliminated:
            query = query.where(PlayerRow.is_eliminated.is_(False))
        return [Player.model_validate(p) for p in self.session.scalars(query).all()]

    def mark_playoff_teams(self, abbreviations: list[str]) -> list[NFLTeam]:
        """Flag exactly these teams as playoff teams."""
        teams = [self._team_by_abbreviation(abbr) for abbr in abbreviations]
        self.session.execute(update(NFLTeamRow).values(is_playoffs=False))
        for team in teams:
            team.is_playoffs = True
        self.session.commit()
        logger.info("playoff_teams_set", teams=[t.abbreviation for t in teams])
        return [NFLTeam.model_validate(t) for t in teams]

    async def seed_players(self, playoffs_only: bool = True) -> int:
        """
        Upsert skill players from each team's roster, keyed by ESPN athlete ID.

        Args:
            playoffs_only: Only seed teams flagged as playoff teams

        Returns:
            Number of players upserted
        """
        client = self._require_client()
        teams = await asyncio.to_thread(self.list_teams, playoffs_only)
        if not teams:
            logger.warning("seed_players_no_teams", playoffs_only=playoffs_only)
            return 0

        total = 0
        for index, team in enumerate(teams):
            if index:
                await asyncio.sleep(self.settings.seed_delay)
            roster = await client.get_team_roster(team.id)
            players = parse_offense_skill_players(roster)
            total += await asyncio.to_thread(self._upsert_roster, team, players)

        logger.info("players_seeded", teams=len(teams), players=total)
        return total

    def _upsert_roster(self, team: NFLTeam, players: list[RosterPlayer]) -> int:
        """Upsert one team's players and commit, so earlier teams survive a later failure."""
        # A roster may list an athlete twice; the last entry wins
        unique = {player.espn_athlete_id: player for player in players}
        try:
            for player in unique.values():
                row = self.session.scalars(
                    select(PlayerRow).where(PlayerRow.espn_athlete_id == player.espn_athlete_id)
                ).first()
                if row is None:
                    row = PlayerRow(espn_athlete_id=player.espn_athlete_id)
                    self.session.add(row)
                row.name = player.name
                row.position = player.position.value
                row.nfl_team = team.abbreviation
                row.nfl_team_id = team.id
                row.is_eliminated = team.is_eliminated
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("team_roster_seeded", team=team.abbreviation, players=len(unique))
        return len(unique)

    def mark_team_eliminated(self, abbreviation: str) -> int:
        """
        Flag a team and all its players as eliminated.

        Returns:
            Number of players flagged
        """
        team = self._team_by_abbreviation(abbreviation)
        team.is_eliminated = True
        flagged = self.session.execute(
            update(PlayerRow).where(PlayerRow.nfl_team == team.abbreviation).values(is_eliminated=True)
        ).rowcount
        self.session.commit()
        logger.info("team_eliminated", team=team.abbreviation, players=flagged)
        return flagged
