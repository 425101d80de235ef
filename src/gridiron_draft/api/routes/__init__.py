"""API route handlers."""

from gridiron_draft.api.routes import draft, leagues, players, scoring, standings

__all__ = [
    "leagues",
    "draft",
    "scoring",
    "standings",
    "players",
]
