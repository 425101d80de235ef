"""Tests for league lifecycle and draft write paths."""

import pytest

from gridiron_draft.exceptions import (
    DraftStateError,
    InvalidInput,
    LeagueNotFound,
    NotCommissioner,
    PickRejected,
    PickRejectedReason,
)
from gridiron_draft.models.league import LeagueStatus
from gridiron_draft.models.player import Position
from gridiron_draft.services.live import ChangeKind, ChangeTable


class TestLeagueSetup:
    """Tests for creating, joining and ordering a league."""

    def test_creator_is_commissioner_and_member(self, draft_service) -> None:
        league = draft_service.create_league("  Playoff Pool ", "alice", "Alice")

        assert league.name == "Playoff Pool"
        assert league.commissioner_user_id == "alice"
        assert league.status == LeagueStatus.PRE_DRAFT
        assert league.created_at is not None
        assert [m.user_id for m in draft_service.list_members(league.id)] == ["alice"]

    def test_blank_name_rejected(self, draft_service) -> None:
        with pytest.raises(InvalidInput):
            draft_service.create_league("   ", "alice", "Alice")

    def test_join_is_idempotent(self, draft_service) -> None:
        league = draft_service.create_league("L", "alice", "Alice")
        first = draft_service.join_league(league.id, "bob", "Bob")
        again = draft_service.join_league(league.id, "bob", "Robert")

        assert again.display_name == first.display_name == "Bob"
        assert [m.user_id for m in draft_service.list_members(league.id)] == ["alice", "bob"]

    def test_unknown_league(self, draft_service) -> None:
        with pytest.raises(LeagueNotFound) as exc_info:
            draft_service.join_league("nope", "bob", "Bob")
        assert exc_info.value.status_code == 404

    def test_order_from_join_order(self, draft_service) -> None:
        league = draft_service.create_league("L", "alice", "Alice")
        draft_service.join_league(league.id, "bob", "Bob")
        draft_service.join_league(league.id, "carol", "Carol")

        order = draft_service.set_draft_order_from_join_order(league.id, "alice")

        assert [(e.slot, e.user_id) for e in order] == [(1, "alice"), (2, "bob"), (3, "carol")]
        assert draft_service.get_league(league.id).num_teams == 3

    def test_order_can_be_replaced(self, draft_service) -> None:
        league = draft_service.create_league("L", "alice", "Alice")
        draft_service.join_league(league.id, "bob", "Bob")
        draft_service.set_draft_order(league.id, "alice", ["alice", "bob"])
        draft_service.set_draft_order(league.id, "alice", ["bob", "alice"])

        assert [e.user_id for e in draft_service.get_draft_order(league.id)] == ["bob", "alice"]

    def test_order_requires_commissioner(self, draft_service) -> None:
        league = draft_service.create_league("L", "alice", "Alice")
        draft_service.join_league(league.id, "bob", "Bob")

        with pytest.raises(NotCommissioner) as exc_info:
            draft_service.set_draft_order(league.id, "bob", ["alice", "bob"])
        assert exc_info.value.status_code == 403

    @pytest.mark.parametrize(
        "user_ids",
        [["alice"], ["alice", "alice"], ["alice", "mallory"], ["alice", "bob", "bob"]],
    )
    def test_order_must_list_each_member_once(self, draft_service, user_ids) -> None:
        league = draft_service.create_league("L", "alice", "Alice")
        draft_service.join_league(league.id, "bob", "Bob")

        with pytest.raises(InvalidInput):
            draft_service.set_draft_order(league.id, "alice", user_ids)
        assert draft_service.get_draft_order(league.id) == []

    def test_start_requires_order(self, draft_service) -> None:
        league = draft_service.create_league("L", "alice", "Alice")
        draft_service.join_league(league.id, "bob", "Bob")

        with pytest.raises(DraftStateError):
            draft_service.start_draft(league.id, "alice")

    def test_no_joining_after_start(self, draft_service, drafting_league) -> None:
        with pytest.raises(DraftStateError):
            draft_service.join_league(drafting_league, "carol", "Carol")

    def test_order_locked_after_start(self, draft_service, drafting_league) -> None:
        with pytest.raises(DraftStateError):
            draft_service.set_draft_order(drafting_league, "alice", ["bob", "alice"])

    def test_start_twice_rejected(self, draft_service, drafting_league) -> None:
        with pytest.raises(DraftStateError):
            draft_service.start_draft(drafting_league, "alice")


class TestMakePick:
    """Tests for make_pick validation order and bookkeeping."""

    def _assert_rejected(self, reason: PickRejectedReason, call, *args) -> None:
        with pytest.raises(PickRejected) as exc_info:
            call(*args)
        assert exc_info.value.reason is reason
        assert exc_info.value.status_code == 409

    def test_pick_recorded_with_next_number(self, draft_service, drafting_league) -> None:
        pick = draft_service.make_pick(drafting_league, "alice", "p-mahomes")

        assert pick.pick_number == 1
        assert pick.user_id == "alice"
        assert pick.created_at is not None
        assert draft_service.get_draft_state(drafting_league).on_the_clock == "bob"

    def test_draft_not_active(self, draft_service, players) -> None:
        league = draft_service.create_league("L", "alice", "Alice")
        self._assert_rejected(
            PickRejectedReason.DRAFT_NOT_ACTIVE, draft_service.make_pick, league.id, "alice", "p-allen"
        )

    def test_not_your_turn(self, draft_service, drafting_league) -> None:
        self._assert_rejected(
            PickRejectedReason.NOT_YOUR_TURN, draft_service.make_pick, drafting_league, "bob", "p-allen"
        )

    def test_outsider_is_never_on_the_clock(self, draft_service, drafting_league) -> None:
        self._assert_rejected(
            PickRejectedReason.NOT_YOUR_TURN, draft_service.make_pick, drafting_league, "mallory", "p-allen"
        )

    def test_player_not_found(self, draft_service, drafting_league) -> None:
        self._assert_rejected(
            PickRejectedReason.PLAYER_NOT_FOUND, draft_service.make_pick, drafting_league, "alice", "p-ghost"
        )

    def test_player_already_drafted(self, draft_service, drafting_league) -> None:
        draft_service.make_pick(drafting_league, "alice", "p-mahomes")
        self._assert_rejected(
            PickRejectedReason.PLAYER_ALREADY_DRAFTED,
            draft_service.make_pick,
            drafting_league,
            "bob",
            "p-mahomes",
        )

    def test_roster_full(self, draft_service, drafting_league) -> None:
        draft_service.make_pick(drafting_league, "alice", "p-mahomes")
        draft_service.make_pick(drafting_league, "bob", "p-kelce")
        draft_service.make_pick(drafting_league, "bob", "p-cook")
        draft_service.settings.roster_size = 1
        self._assert_rejected(
            PickRejectedReason.ROSTER_FULL, draft_service.make_pick, drafting_league, "alice", "p-allen"
        )

    def test_stale_pick_number_is_conflict(self, draft_service, drafting_league, monkeypatch) -> None:
        """A second writer that computed the same pick number loses at commit."""
        draft_service.make_pick(drafting_league, "alice", "p-mahomes")
        monkeypatch.setattr(draft_service, "_pick_count", lambda league_id, user_id=None: 0)

        self._assert_rejected(
            PickRejectedReason.PICK_CONFLICT, draft_service.make_pick, drafting_league, "alice", "p-allen"
        )
        monkeypatch.undo()
        assert [p.player_id for p in draft_service.list_picks(drafting_league)] == ["p-mahomes"]

    def test_final_pick_completes_draft(self, draft_service, drafting_league) -> None:
        for user_id, player_id in [
            ("alice", "p-mahomes"),
            ("bob", "p-kelce"),
            ("bob", "p-cook"),
            ("alice", "p-allen"),
        ]:
            draft_service.make_pick(drafting_league, user_id, player_id)

        state = draft_service.get_draft_state(drafting_league)
        assert state.league.status == LeagueStatus.POST_DRAFT
        assert state.on_the_clock is None
        assert state.progress_pct == 100
        self._assert_rejected(
            PickRejectedReason.DRAFT_NOT_ACTIVE, draft_service.make_pick, drafting_league, "bob", "p-pacheco"
        )

    def test_publishes_committed_pick(self, draft_service, drafting_league, feed) -> None:
        events = []
        feed.subscribe(drafting_league, events.append)

        pick = draft_service.make_pick(drafting_league, "alice", "p-mahomes")

        assert [(e.table, e.kind) for e in events] == [(ChangeTable.PICKS, ChangeKind.INSERT)]
        assert events[0].record["id"] == pick.id

    def test_rejected_pick_publishes_nothing(self, draft_service, drafting_league, feed) -> None:
        events = []
        feed.subscribe(drafting_league, events.append)

        with pytest.raises(PickRejected):
            draft_service.make_pick(drafting_league, "bob", "p-mahomes")
        assert events == []


class TestResetDraft:
    def test_reset_clears_picks(self, draft_service, drafting_league) -> None:
        draft_service.make_pick(drafting_league, "alice", "p-mahomes")

        league = draft_service.reset_draft(drafting_league, "alice")

        assert league.status == LeagueStatus.PRE_DRAFT
        assert draft_service.list_picks(drafting_league) == []
        assert [e.user_id for e in draft_service.get_draft_order(drafting_league)] == ["alice", "bob"]

    def test_reset_requires_commissioner(self, draft_service, drafting_league) -> None:
        with pytest.raises(NotCommissioner):
            draft_service.reset_draft(drafting_league, "bob")

    def test_can_restart_after_reset(self, draft_service, drafting_league) -> None:
        draft_service.make_pick(drafting_league, "alice", "p-mahomes")
        draft_service.reset_draft(drafting_league, "alice")
        draft_service.start_draft(drafting_league, "alice")

        pick = draft_service.make_pick(drafting_league, "alice", "p-mahomes")
        assert pick.pick_number == 1


class TestDraftState:
    def test_state_before_first_pick(self, draft_service, drafting_league) -> None:
        state = draft_service.get_draft_state(drafting_league)

        assert state.next_pick_number == 1
        assert state.current_round == 1
        assert state.on_the_clock == "alice"
        assert state.total_picks == 4
        assert state.progress_pct == 0

    def test_nobody_on_the_clock_before_start(self, draft_service) -> None:
        league = draft_service.create_league("L", "alice", "Alice")
        state = draft_service.get_draft_state(league.id)

        assert state.on_the_clock is None
        assert state.current_round is None
        assert state.total_picks == 0

    def test_available_players(self, draft_service, drafting_league) -> None:
        draft_service.make_pick(drafting_league, "alice", "p-mahomes")

        available = {p.id for p in draft_service.available_players(drafting_league)}
        assert "p-mahomes" not in available
        assert len(available) == 5

        qbs = draft_service.available_players(drafting_league, position=Position.QB)
        assert [p.id for p in qbs] == ["p-allen"]

        searched = draft_service.available_players(drafting_league, search="buf")
        assert {p.id for p in searched} == {"p-cook", "p-allen", "p-rookie"}

    def test_available_players_hides_eliminated(self, session, draft_service, drafting_league, players) -> None:
        players[0].is_eliminated = True
        session.commit()

        ids = {p.id for p in draft_service.available_players(drafting_league, include_eliminated=False)}
        assert "p-mahomes" not in ids
