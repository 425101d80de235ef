"""
Live Draft Change Merging

Committed draft writes are published as change events. Subscribers keep a
local, keyed view of a league's draft and merge each pushed record by primary
key. Pushes may arrive twice or out of order: a record whose key is already
present is ignored, and picks stay sorted by pick number.

The merged view is advisory. Turn legality is decided by the draft service at
commit time.
"""

from collections.abc import Callable, Hashable, Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from gridiron_draft.logging import logger
from gridiron_draft.models.draft import Pick
from gridiron_draft.models.league import DraftOrderEntry, League, LeagueMember
from gridiron_draft.services.turns import resolve_pick_owner

T = TypeVar("T")


class ChangeKind(str, Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class ChangeTable(str, Enum):
    LEAGUES = "leagues"
    MEMBERS = "league_members"
    DRAFT_ORDER = "draft_order"
    PICKS = "draft_picks"


@dataclass(frozen=True)
class ChangeEvent:
    """A committed change to one league's draft state.

    ``record`` is the new row for inserts/updates. Draft order changes carry
    the full order under ``record["entries"]``; a pick delete with no record
    means every pick of the league was removed.
    """

    table: ChangeTable
    kind: ChangeKind
    league_id: str
    record: dict[str, Any] = field(default_factory=dict)


class KeyedCollection(Generic[T]):
    """Ordered collection with insert-if-absent semantics by key."""

    def __init__(
        self,
        key: Callable[[T], Hashable],
        sort_key: Callable[[T], Any] | None = None,
    ):
        self._key = key
        self._sort_key = sort_key
        self._items: dict[Hashable, T] = {}

    def upsert_if_absent(self, item: T) -> bool:
        """Add ``item`` unless its key is present. Returns True when added."""
        item_key = self._key(item)
        if item_key in self._items:
            return False
        self._items[item_key] = item
        return True

    def replace_all(self, items: Iterable[T]) -> None:
        self._items = {self._key(item): item for item in items}

    def remove(self, item_key: Hashable) -> bool:
        return self._items.pop(item_key, None) is not None

    def clear(self) -> None:
        self._items.clear()

    def __contains__(self, item_key: Hashable) -> bool:
        return item_key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        values = list(self._items.values())
        if self._sort_key is not None:
            values.sort(key=self._sort_key)
        return iter(values)


class DraftRoom:
    """Client-side merged view of one league's draft."""

    def __init__(
        self,
        league: League,
        order: Iterable[DraftOrderEntry] = (),
        picks: Iterable[Pick] = (),
        members: Iterable[LeagueMember] = (),
    ):
        self.league = league
        self.order: KeyedCollection[DraftOrderEntry] = KeyedCollection(
            key=lambda e: e.slot, sort_key=lambda e: e.slot
        )
        self.picks: KeyedCollection[Pick] = KeyedCollection(
            key=lambda p: p.id, sort_key=lambda p: p.pick_number
        )
        self.members: KeyedCollection[LeagueMember] = KeyedCollection(key=lambda m: m.user_id)
        self.order.replace_all(order)
        self.picks.replace_all(picks)
        self.members.replace_all(members)

    @property
    def league_id(self) -> str:
        return self.league.id

    def apply(self, event: ChangeEvent) -> bool:
        """
        Merge a pushed change.

        Returns:
            True when the view changed
        """
        if event.league_id != self.league_id:
            return False

        if event.table is ChangeTable.LEAGUES:
            self.league = self.league.model_copy(update=event.record)
            return True

        if event.table is ChangeTable.DRAFT_ORDER:
            entries = [DraftOrderEntry.model_validate(e) for e in event.record.get("entries", [])]
            self.order.replace_all(entries)
            return True

        if event.table is ChangeTable.PICKS:
            if event.kind is ChangeKind.INSERT:
                return self.picks.upsert_if_absent(Pick.model_validate(event.record))
            if event.kind is ChangeKind.DELETE:
                if event.record.get("id"):
                    return self.picks.remove(event.record["id"])
                self.picks.clear()
                return True
            return False

        if event.table is ChangeTable.MEMBERS and event.kind is ChangeKind.INSERT:
            return self.members.upsert_if_absent(LeagueMember.model_validate(event.record))

        return False

    @property
    def next_pick_number(self) -> int:
        return len(self.picks) + 1

    @property
    def on_the_clock(self) -> str | None:
        """User ID on the clock, resolved fresh from the current order."""
        if self.league.status != "draft":
            return None
        return resolve_pick_owner(self.next_pick_number, self.league.num_teams, list(self.order))

    @property
    def drafted_player_ids(self) -> set[str]:
        return {pick.player_id for pick in self.picks}


Handler = Callable[[ChangeEvent], None]


class ChangeFeed:
    """In-process publish/subscribe of draft changes, scoped by league."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    def subscribe(self, league_id: str, handler: Handler) -> Callable[[], None]:
        """Register a handler. Returns a callable that unsubscribes it."""
        self._handlers.setdefault(league_id, []).append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(league_id, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def attach(self, room: DraftRoom) -> Callable[[], None]:
        """Keep a draft room merged with this feed."""
        return self.subscribe(room.league_id, room.apply)

    def publish(self, event: ChangeEvent) -> None:
        for handler in list(self._handlers.get(event.league_id, [])):
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "change_handler_failed",
                    league_id=event.league_id,
                    table=event.table.value,
                    kind=event.kind.value,
                )

    def subscriber_count(self, league_id: str) -> int:
        return len(self._handlers.get(league_id, []))
