"""
Draft Service

League lifecycle and the only write paths into draft state.

Every write locks the league row (SELECT ... FOR UPDATE) before validating,
so one writer at a time decides a league's draft. Unique constraints on
picks back the same rules at commit time. Clients may compute the turn for
display, but a pick is only accepted here.

Lifecycle: pre_draft -> draft -> post_draft, and reset back to pre_draft.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gridiron_draft.config import Settings, get_settings
from gridiron_draft.database.models import (
    DraftOrderRow,
    LeagueMemberRow,
    LeagueRow,
    PickRow,
    PlayerRow,
    TeamEventPointsRow,
)
from gridiron_draft.exceptions import (
    DraftStateError,
    GridironError,
    InvalidInput,
    LeagueNotFound,
    NotCommissioner,
    PickRejected,
    PickRejectedReason,
)
from gridiron_draft.logging import logger
from gridiron_draft.models.draft import DraftState, Pick
from gridiron_draft.models.league import DraftOrderEntry, League, LeagueMember, LeagueStatus
from gridiron_draft.models.player import Player, Position
from gridiron_draft.services.live import ChangeEvent, ChangeFeed, ChangeKind, ChangeTable
from gridiron_draft.services.turns import is_order_complete, resolve_pick_owner, round_for_pick


class DraftService:
    """
    Service for league management and drafting.

    Provides methods to:
    - Create and join leagues
    - Set the draft order and start the draft
    - Make picks and reset the draft
    - Read the current draft state and available players
    """

    def __init__(
        self,
        session: Session,
        feed: ChangeFeed | None = None,
        settings: Settings | None = None,
    ):
        self.session = session
        self.feed = feed
        self.settings = settings or get_settings()

    # ==================== Helpers ====================

    @contextmanager
    def _write(self, on_conflict: Callable[[], GridironError]) -> Iterator[None]:
        """Commit on success. Roll back on any error, mapping constraint races."""
        try:
            yield
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise on_conflict() from e
        except Exception:
            self.session.rollback()
            raise

    def _lock_league(self, league_id: str) -> LeagueRow:
        league = self.session.scalars(
            select(LeagueRow).where(LeagueRow.id == league_id).with_for_update()
        ).first()
        if league is None:
            raise LeagueNotFound(league_id)
        return league

    def _get_league_row(self, league_id: str) -> LeagueRow:
        league = self.session.get(LeagueRow, league_id)
        if league is None:
            raise LeagueNotFound(league_id)
        return league

    @staticmethod
    def _require_commissioner(league: LeagueRow, user_id: str, action: str) -> None:
        if league.commissioner_user_id != user_id:
            raise NotCommissioner(f"Only the commissioner can {action}.")

    def _member_rows(self, league_id: str) -> list[LeagueMemberRow]:
        return list(
            self.session.scalars(
                select(LeagueMemberRow)
                .where(LeagueMemberRow.league_id == league_id)
                .order_by(LeagueMemberRow.created_at, LeagueMemberRow.id)
            ).all()
        )

    def _order_rows(self, league_id: str) -> list[DraftOrderRow]:
        return list(
            self.session.scalars(
                select(DraftOrderRow)
                .where(DraftOrderRow.league_id == league_id)
                .order_by(DraftOrderRow.slot)
            ).all()
        )

    def _pick_count(self, league_id: str, user_id: str | None = None) -> int:
        query = select(func.count()).select_from(PickRow).where(PickRow.league_id == league_id)
        if user_id is not None:
            query = query.where(PickRow.user_id == user_id)
        return self.session.scalar(query) or 0

    def _total_picks(self, num_teams: int | None) -> int:
        return (num_teams or 0) * self.settings.roster_size

    def _publish(self, table: ChangeTable, kind: ChangeKind, league_id: str, record: dict) -> None:
        if self.feed is not None:
            self.feed.publish(ChangeEvent(table=table, kind=kind, league_id=league_id, record=record))

    # ==================== League ====================

    def create_league(self, name: str, user_id: str, display_name: str) -> League:
        """
        Create a league. The creator becomes commissioner and first member.

        Args:
            name: League name
            user_id: Creating user's ID
            display_name: Creator's display name in the league

        Returns:
            The new League
        """
        if not name.strip():
            raise InvalidInput("League name is required.")

        league = LeagueRow(
            name=name.strip(),
            commissioner_user_id=user_id,
            status=LeagueStatus.PRE_DRAFT.value,
        )
        league.members.append(LeagueMemberRow(user_id=user_id, display_name=display_name.strip()))

        with self._write(lambda: DraftStateError("League could not be created.")):
            self.session.add(league)

        logger.info("league_created", league_id=league.id, commissioner=user_id)
        return League.model_validate(league)

    def get_league(self, league_id: str) -> League:
        return League.model_validate(self._get_league_row(league_id))

    def list_members(self, league_id: str) -> list[LeagueMember]:
        """Members in join order."""
        self._get_league_row(league_id)
        return [LeagueMember.model_validate(m) for m in self._member_rows(league_id)]

    def join_league(self, league_id: str, user_id: str, display_name: str) -> LeagueMember:
        """
        Join a league before its draft starts.

        Joining twice returns the existing membership.
        """
        if not display_name.strip():
            raise InvalidInput("Display name is required.")

        with self._write(lambda: DraftStateError("Membership changed concurrently, try again.")):
            league = self._lock_league(league_id)
            members = self._member_rows(league_id)

            existing = next((m for m in members if m.user_id == user_id), None)
            if existing is not None:
                return LeagueMember.model_validate(existing)

            if league.status != LeagueStatus.PRE_DRAFT.value:
                raise DraftStateError("Cannot join after the draft has started.")
            if league.num_teams and len(members) >= league.num_teams:
                raise DraftStateError("League is full.")

            member = LeagueMemberRow(
                league_id=league_id, user_id=user_id, display_name=display_name.strip()
            )
            self.session.add(member)

        result = LeagueMember.model_validate(member)
        logger.info("league_joined", league_id=league_id, user_id=user_id)
        self._publish(ChangeTable.MEMBERS, ChangeKind.INSERT, league_id, result.model_dump())
        return result

    # ==================== Draft Order ====================

    def get_draft_order(self, league_id: str) -> list[DraftOrderEntry]:
        self._get_league_row(league_id)
        return [DraftOrderEntry.model_validate(r) for r in self._order_rows(league_id)]

    def set_draft_order_from_join_order(self, league_id: str, user_id: str) -> list[DraftOrderEntry]:
        """Commissioner sets the draft order to the order members joined."""
        members = [m.user_id for m in self.list_members(league_id)]
        return self.set_draft_order(league_id, user_id, members)

    def set_draft_order(
        self, league_id: str, user_id: str, user_ids: list[str]
    ) -> list[DraftOrderEntry]:
        """
        Replace the whole draft order and set the team count.

        Args:
            league_id: League ID
            user_id: Acting user, must be commissioner
            user_ids: Every member exactly once, first picks first

        Returns:
            The new draft order
        """
        with self._write(lambda: DraftStateError("Draft order changed concurrently, try again.")):
            league = self._lock_league(league_id)
            self._require_commissioner(league, user_id, "set the draft order")
            if league.status != LeagueStatus.PRE_DRAFT.value:
                raise DraftStateError("Draft order is locked once the draft starts.")

            n = len(user_ids)
            if n < self.settings.min_teams:
                raise InvalidInput(f"Need at least {self.settings.min_teams} members to set draft order.")
            if n > self.settings.max_teams:
                raise InvalidInput(f"Too many members. Keep it to {self.settings.max_teams} max.")

            member_ids = {m.user_id for m in self._member_rows(league_id)}
            if len(set(user_ids)) != n or set(user_ids) != member_ids:
                raise InvalidInput("Draft order must list every league member exactly once.")

            self.session.execute(delete(DraftOrderRow).where(DraftOrderRow.league_id == league_id))
            entries = [DraftOrderEntry(slot=i, user_id=uid) for i, uid in enumerate(user_ids, start=1)]
            self.session.add_all(
                DraftOrderRow(league_id=league_id, slot=e.slot, user_id=e.user_id) for e in entries
            )
            league.num_teams = n

        logger.info("draft_order_set", league_id=league_id, num_teams=n)
        self._publish(
            ChangeTable.DRAFT_ORDER,
            ChangeKind.UPDATE,
            league_id,
            {"entries": [e.model_dump() for e in entries]},
        )
        self._publish(ChangeTable.LEAGUES, ChangeKind.UPDATE, league_id, {"num_teams": n})
        return entries

    # ==================== Draft Lifecycle ====================

    def start_draft(self, league_id: str, user_id: str) -> League:
        """Move a fully ordered league into the draft."""
        with self._write(lambda: DraftStateError("League changed concurrently, try again.")):
            league = self._lock_league(league_id)
            self._require_commissioner(league, user_id, "start the draft")
            if league.status != LeagueStatus.PRE_DRAFT.value:
                raise DraftStateError("Draft has already started.")

            n = league.num_teams or 0
            if n < self.settings.min_teams:
                raise DraftStateError(f"Need at least {self.settings.min_teams} teams to start.")

            order = {r.slot: r.user_id for r in self._order_rows(league_id)}
            if not is_order_complete(n, order):
                raise DraftStateError(
                    f"Draft order not set. Expected {n} slots, found {len(order)}."
                )

            league.status = LeagueStatus.DRAFT.value

        logger.info("draft_started", league_id=league_id, num_teams=n)
        self._publish(ChangeTable.LEAGUES, ChangeKind.UPDATE, league_id, {"status": league.status})
        return League.model_validate(league)

    def make_pick(self, league_id: str, user_id: str, player_id: str) -> Pick:
        """
        Record a pick for the owner on the clock.

        Args:
            league_id: League ID
            user_id: Drafting user
            player_id: Player being drafted

        Returns:
            The recorded Pick

        Raises:
            PickRejected: with the reason the pick was refused
        """
        with self._write(lambda: PickRejected(PickRejectedReason.PICK_CONFLICT)):
            league = self._lock_league(league_id)
            if league.status != LeagueStatus.DRAFT.value:
                raise PickRejected(PickRejectedReason.DRAFT_NOT_ACTIVE)

            order = {r.slot: r.user_id for r in self._order_rows(league_id)}
            pick_number = self._pick_count(league_id) + 1
            owner = resolve_pick_owner(pick_number, league.num_teams, order)
            if owner is None or owner != user_id:
                raise PickRejected(PickRejectedReason.NOT_YOUR_TURN)

            if self._pick_count(league_id, user_id) >= self.settings.roster_size:
                raise PickRejected(PickRejectedReason.ROSTER_FULL)

            if self.session.get(PlayerRow, player_id) is None:
                raise PickRejected(PickRejectedReason.PLAYER_NOT_FOUND)

            already_drafted = self.session.scalar(
                select(PickRow.id).where(PickRow.league_id == league_id, PickRow.player_id == player_id)
            )
            if already_drafted is not None:
                raise PickRejected(PickRejectedReason.PLAYER_ALREADY_DRAFTED)

            row = PickRow(
                league_id=league_id, pick_number=pick_number, user_id=user_id, player_id=player_id
            )
            self.session.add(row)

            completed = pick_number >= self._total_picks(league.num_teams)
            if completed:
                league.status = LeagueStatus.POST_DRAFT.value

        pick = Pick.model_validate(row)
        logger.info(
            "pick_made",
            league_id=league_id,
            pick_number=pick_number,
            user_id=user_id,
            player_id=player_id,
        )
        self._publish(ChangeTable.PICKS, ChangeKind.INSERT, league_id, pick.model_dump())
        if completed:
            logger.info("draft_completed", league_id=league_id, picks=pick_number)
            self._publish(ChangeTable.LEAGUES, ChangeKind.UPDATE, league_id, {"status": league.status})
        return pick

    def reset_draft(self, league_id: str, user_id: str) -> League:
        """
        Delete every pick of the league and return it to pre_draft.

        Team totals scored from the discarded picks are deleted with them.
        """
        with self._write(lambda: DraftStateError("League changed concurrently, try again.")):
            league = self._lock_league(league_id)
            self._require_commissioner(league, user_id, "reset the draft")
            removed = self.session.execute(
                delete(PickRow).where(PickRow.league_id == league_id)
            ).rowcount
            self.session.execute(
                delete(TeamEventPointsRow).where(TeamEventPointsRow.league_id == league_id)
            )
            league.status = LeagueStatus.PRE_DRAFT.value

        logger.info("draft_reset", league_id=league_id, picks_removed=removed)
        self._publish(ChangeTable.PICKS, ChangeKind.DELETE, league_id, {})
        self._publish(ChangeTable.LEAGUES, ChangeKind.UPDATE, league_id, {"status": league.status})
        return League.model_validate(league)

    # ==================== Reads ====================

    def list_picks(self, league_id: str) -> list[Pick]:
        self._get_league_row(league_id)
        rows = self.session.scalars(
            select(PickRow).where(PickRow.league_id == league_id).order_by(PickRow.pick_number)
        ).all()
        return [Pick.model_validate(r) for r in rows]

    def get_draft_state(self, league_id: str) -> DraftState:
        """
        Current draft state with the owner on the clock.

        The owner is resolved fresh from the stored order on every call.
        """
        league = self.get_league(league_id)
        order = self.get_draft_order(league_id)
        picks = self.list_picks(league_id)

        next_pick = len(picks) + 1
        on_the_clock = None
        if league.status == LeagueStatus.DRAFT:
            on_the_clock = resolve_pick_owner(next_pick, league.num_teams, order)

        total = self._total_picks(league.num_teams)
        progress = min(100, round(len(picks) / total * 100)) if total > 0 else 0

        return DraftState(
            league=league,
            order=order,
            picks=picks,
            next_pick_number=next_pick,
            current_round=round_for_pick(next_pick, league.num_teams),
            on_the_clock=on_the_clock,
            total_picks=total,
            progress_pct=progress,
        )

    def available_players(
        self,
        league_id: str,
        position: Position | None = None,
        search: str | None = None,
        include_eliminated: bool = True,
    ) -> list[Player]:
        """
        Catalog players not yet drafted in this league.

        Args:
            league_id: League ID
            position: Only this position
            search: Case-insensitive match on name, NFL team or position
            include_eliminated: Include players whose team is out of the playoffs

        Returns:
            Players ordered by position then name
        """
        self._get_league_row(league_id)
        drafted = select(PickRow.player_id).where(PickRow.league_id == league_id)
        query = select(PlayerRow).where(PlayerRow.id.not_in(drafted))
        if position is not None:
            query = query.where(PlayerRow.position == position.value)
        if not include_eliminated:
            query = query.where(PlayerRow.is_eliminated.is_(False))

        players = [
            Player.model_validate(p)
            for p in self.session.scalars(query.order_by(PlayerRow.position, PlayerRow.name)).all()
        ]

        term = (search or "").strip().lower()
        if term:
            players = [
                p
                for p in players
                if term in p.name.lower()
                or term in p.nfl_team.lower()
                or term in p.position.value.lower()
            ]
        return players
