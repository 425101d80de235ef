"""
Snake Draft Turn Resolution

Answers "who is on the clock for pick P?" for a league with N teams.
Rounds alternate direction: 1..N, then N..1, then 1..N again.

All functions are pure. ``None`` means "no owner yet": the order is not fully
configured, the team count is unset, or the pick number is out of range.
Callers treat it as waiting, not as an error.
"""

from collections.abc import Iterable, Mapping

from gridiron_draft.models.league import DraftOrderEntry

DraftOrder = Mapping[int, str] | Iterable[DraftOrderEntry]


def round_for_pick(pick_number: int, num_teams: int | None) -> int | None:
    """1-indexed round of an overall pick number."""
    if not num_teams or num_teams < 1 or pick_number < 1:
        return None
    return (pick_number - 1) // num_teams + 1


def slot_for_pick(pick_number: int, num_teams: int | None) -> int | None:
    """Draft slot that owns an overall pick number."""
    draft_round = round_for_pick(pick_number, num_teams)
    if draft_round is None:
        return None

    index = (pick_number - 1) % num_teams + 1
    if draft_round % 2 == 1:
        return index
    return num_teams - index + 1


def _as_mapping(order: DraftOrder) -> Mapping[int, str]:
    if isinstance(order, Mapping):
        return order
    return {entry.slot: entry.user_id for entry in order}


def resolve_pick_owner(
    pick_number: int, num_teams: int | None, order: DraftOrder
) -> str | None:
    """
    Owner on the clock for a pick.

    Args:
        pick_number: Overall pick number, 1 + picks made so far
        num_teams: League team count
        order: slot -> user ID mapping, or draft order entries

    Returns:
        User ID at the resolved slot, or None while unresolved
    """
    slot = slot_for_pick(pick_number, num_teams)
    if slot is None:
        return None
    return _as_mapping(order).get(slot)


def is_order_complete(num_teams: int | None, order: DraftOrder) -> bool:
    """True when slots are exactly 1..N with unique owners."""
    if not num_teams or num_teams < 1:
        return False
    mapping = _as_mapping(order)
    owners = list(mapping.values())
    return set(mapping) == set(range(1, num_teams + 1)) and len(set(owners)) == len(owners)
