"""
Domain exceptions.

Each exception carries the HTTP status the API layer maps it to.
"""

from enum import Enum


class GridironError(Exception):
    """Base exception for domain errors."""

    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidInput(GridironError):
    """Caller supplied a value the operation cannot accept."""

    status_code = 422


class LeagueNotFound(GridironError):
    status_code = 404

    def __init__(self, league_id: str):
        self.league_id = league_id
        super().__init__(f"League not found: {league_id}")


class NotCommissioner(GridironError):
    """Only the league commissioner may perform this action."""

    status_code = 403


class DraftStateError(GridironError):
    """The league's lifecycle state does not allow the action."""

    status_code = 409


class PickRejectedReason(str, Enum):
    """Why the draft refused a pick. Shown verbatim to the drafter."""

    DRAFT_NOT_ACTIVE = "draft_not_active"
    NOT_YOUR_TURN = "not_your_turn"
    PLAYER_NOT_FOUND = "player_not_found"
    PLAYER_ALREADY_DRAFTED = "player_already_drafted"
    ROSTER_FULL = "roster_full"
    PICK_CONFLICT = "pick_conflict"


_REASON_MESSAGES = {
    PickRejectedReason.DRAFT_NOT_ACTIVE: "Draft is not active",
    PickRejectedReason.NOT_YOUR_TURN: "Not your turn",
    PickRejectedReason.PLAYER_NOT_FOUND: "Player not found",
    PickRejectedReason.PLAYER_ALREADY_DRAFTED: "Player already drafted",
    PickRejectedReason.ROSTER_FULL: "Roster is full",
    PickRejectedReason.PICK_CONFLICT: "Another pick was recorded first, refresh and try again",
}


class PickRejected(GridironError):
    """A pick failed validation at commit time."""

    status_code = 409

    def __init__(self, reason: PickRejectedReason):
        self.reason = reason
        super().__init__(_REASON_MESSAGES[reason])
