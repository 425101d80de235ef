"""Business logic services."""

from gridiron_draft.services.box_score import extract_stat_lines, parse_game_event, parse_stat_int
from gridiron_draft.services.draft import DraftService
from gridiron_draft.services.live import ChangeEvent, ChangeFeed, DraftRoom
from gridiron_draft.services.players import PlayerCatalogService, parse_offense_skill_players
from gridiron_draft.services.scoring import ScoringService, compute_points, rollup_team_points
from gridiron_draft.services.standings import StandingsService
from gridiron_draft.services.turns import resolve_pick_owner, round_for_pick, slot_for_pick

__all__ = [
    # Turns
    "resolve_pick_owner",
    "round_for_pick",
    "slot_for_pick",
    # Draft
    "DraftService",
    # Live
    "ChangeEvent",
    "ChangeFeed",
    "DraftRoom",
    # Scoring
    "ScoringService",
    "compute_points",
    "extract_stat_lines",
    "parse_game_event",
    "parse_stat_int",
    "rollup_team_points",
    # Standings
    "StandingsService",
    # Players
    "PlayerCatalogService",
    "parse_offense_skill_players",
]
