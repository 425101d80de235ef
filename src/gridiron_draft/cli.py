"""
Gridiron Draft CLI

Command-line interface for scoring games, seeding the player catalog and
checking leagues without running the API server.
"""

import argparse
import asyncio
import sys
from typing import Any

from gridiron_draft.clients.espn import ESPNAPIError, ESPNClient
from gridiron_draft.database import SessionLocal, init_db
from gridiron_draft.exceptions import GridironError
from gridiron_draft.services.draft import DraftService
from gridiron_draft.services.players import PlayerCatalogService
from gridiron_draft.services.scoring import ScoringService
from gridiron_draft.services.standings import StandingsService


class GridironAdmin:
    """
    Admin tasks against the configured database.

    Can be used as a library or via CLI.

    Example:
        async with GridironAdmin() as admin:
            await admin.seed_teams()
            admin.set_playoff_teams(["KC", "BUF", "PHI"])
            await admin.seed_players()
            report = await admin.score_event("401671793")
    """

    def __init__(self):
        self.client: ESPNClient | None = None
        self.session = None

    async def __aenter__(self):
        self.session = SessionLocal()
        self.client = ESPNClient()
        await self.client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.__aexit__(exc_type, exc_val, exc_tb)
        if self.session is not None:
            self.session.close()

    def _require_session(self):
        if self.session is None or self.client is None:
            raise RuntimeError("Admin not initialized. Use 'async with' context.")

    async def score_event(self, event_id: str) -> dict[str, Any]:
        """Score one game into every league."""
        self._require_session()
        report = await ScoringService(self.session, self.client).score_event(event_id)
        return report.model_dump()

    async def seed_teams(self) -> list[dict[str, Any]]:
        self._require_session()
        teams = await PlayerCatalogService(self.session, self.client).seed_teams()
        return [t.model_dump() for t in teams]

    async def seed_players(self, playoffs_only: bool = True) -> int:
        self._require_session()
        return await PlayerCatalogService(self.session, self.client).seed_players(playoffs_only)

    def set_playoff_teams(self, abbreviations: list[str]) -> list[dict[str, Any]]:
        self._require_session()
        teams = PlayerCatalogService(self.session).mark_playoff_teams(abbreviations)
        return [t.model_dump() for t in teams]

    def eliminate_team(self, abbreviation: str) -> int:
        self._require_session()
        return PlayerCatalogService(self.session).mark_team_eliminated(abbreviation)

    def get_standings(self, league_id: str) -> list[dict[str, Any]]:
        self._require_session()
        return [s.model_dump() for s in StandingsService(self.session).league_standings(league_id)]

    def get_draft_state(self, league_id: str) -> dict[str, Any]:
        self._require_session()
        return DraftService(self.session).get_draft_state(league_id).model_dump(mode="json")


async def cli_main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Gridiron Draft admin CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create tables
  gridiron-cli init-db

  # Seed teams, flag the playoff field, then seed their skill players
  gridiron-cli seed-teams
  gridiron-cli playoffs KC BUF BAL HOU PIT DEN PHI WSH LAR TB MIN GB
  gridiron-cli seed-players

  # Score a game (safe to re-run)
  gridiron-cli score-event 401671793

  # Knock a team out
  gridiron-cli eliminate PIT

  # Show standings for a league
  gridiron-cli standings 6f1c2f9e-0b7e-4c49-9d0c-5c3b1e0a2d11
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init-db", help="Create database tables")

    score_parser = subparsers.add_parser("score-event", help="Score an NFL game")
    score_parser.add_argument("event_id", help="ESPN event ID")

    subparsers.add_parser("seed-teams", help="Seed NFL teams from ESPN")

    playoffs_parser = subparsers.add_parser("playoffs", help="Set the playoff teams")
    playoffs_parser.add_argument("teams", nargs="+", help="Team abbreviations")

    players_parser = subparsers.add_parser("seed-players", help="Seed skill players from rosters")
    players_parser.add_argument(
        "--all-teams", action="store_true", help="Seed every team, not just playoff teams"
    )

    eliminate_parser = subparsers.add_parser("eliminate", help="Mark a team eliminated")
    eliminate_parser.add_argument("team", help="Team abbreviation")

    standings_parser = subparsers.add_parser("standings", help="Show league standings")
    standings_parser.add_argument("league_id", help="League ID")

    state_parser = subparsers.add_parser("draft-state", help="Show a league's draft")
    state_parser.add_argument("league_id", help="League ID")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "init-db":
        init_db()
        print("✅ Database ready.")
        return

    try:
        async with GridironAdmin() as admin:
            if args.command == "score-event":
                print(f"🏈 Scoring event {args.event_id}...\n")
                report = await admin.score_event(args.event_id)

                print(f"{report['game']} ({report['status'] or 'unknown status'})")
                print(f"Stat lines: {report['stat_lines']}\n")

                print("Top scorers:")
                for p in report["top_scorers"][:10]:
                    print(f"  {p['espn_athlete_id']:<12} {p['fantasy_points']:>7.2f}")

                print("\nLeagues:")
                for league in report["leagues"]:
                    if league["skipped_reason"]:
                        print(f"  {league['league_name']}: skipped ({league['skipped_reason']})")
                    else:
                        print(f"  {league['league_name']}: {league['teams_updated']} teams updated")
                    for name in league["players_missing_athlete_id"]:
                        print(f"    ⚠️  {name} has no ESPN athlete ID, counted as 0")

            elif args.command == "seed-teams":
                teams = await admin.seed_teams()
                print(f"✅ Upserted {len(teams)} teams.")

            elif args.command == "playoffs":
                teams = admin.set_playoff_teams(args.teams)
                print(f"✅ {len(teams)} playoff teams: {', '.join(t['abbreviation'] for t in teams)}")

            elif args.command == "seed-players":
                seeded = await admin.seed_players(playoffs_only=not args.all_teams)
                print(f"✅ Upserted {seeded} player rows (QB/RB/WR/TE only).")

            elif args.command == "eliminate":
                flagged = admin.eliminate_team(args.team)
                print(f"✅ {args.team.upper()} eliminated, {flagged} players flagged.")

            elif args.command == "standings":
                standings = admin.get_standings(args.league_id)
                print("📊 Standings\n")

                print(f"{'Rank':<5} {'Team':<25} {'Points':<10} {'Games':<6}")
                print("-" * 48)
                for s in standings:
                    print(
                        f"{s['rank']:<5} {s['display_name']:<25} "
                        f"{s['total_points']:<10.2f} {s['events_scored']:<6}"
                    )

            elif args.command == "draft-state":
                state = admin.get_draft_state(args.league_id)
                league = state["league"]
                print(f"📋 {league['name']} - {league['status']}\n")
                print(
                    f"Pick {state['next_pick_number']} of {state['total_picks']} "
                    f"({state['progress_pct']}%)"
                )
                print(f"On the clock: {state['on_the_clock'] or '-'}\n")
                for pick in state["picks"]:
                    print(f"  {pick['pick_number']:>3}. {pick['user_id']:<20} {pick['player_id']}")

    except (GridironError, ESPNAPIError) as e:
        print(f"❌ {e.message}")
        sys.exit(1)


def run_cli():
    """Entry point for CLI."""
    asyncio.run(cli_main())


if __name__ == "__main__":
    run_cli()
