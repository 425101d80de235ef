"""SQLAlchemy ORM tables.

Uniqueness rules of the draft live here as constraints so that every write
path is checked by the database at commit time:

- one pick per (league, pick_number)
- one pick per (league, player)
- one draft slot per (league, slot) and per (league, user)
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class LeagueRow(Base):
    __tablename__ = "leagues"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    commissioner_user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    num_teams: Mapped[int | None] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pre_draft")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    members: Mapped[list[LeagueMemberRow]] = relationship(
        back_populates="league", cascade="all, delete-orphan"
    )
    draft_order: Mapped[list[DraftOrderRow]] = relationship(
        back_populates="league", cascade="all, delete-orphan", order_by="DraftOrderRow.slot"
    )
    picks: Mapped[list[PickRow]] = relationship(
        back_populates="league", cascade="all, delete-orphan", order_by="PickRow.pick_number"
    )


class LeagueMemberRow(Base):
    __tablename__ = "league_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    league_id: Mapped[str] = mapped_column(
        ForeignKey("leagues.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    display_name: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    league: Mapped[LeagueRow] = relationship(back_populates="members")

    __table_args__ = (UniqueConstraint("league_id", "user_id", name="uq_member_league_user"),)


class DraftOrderRow(Base):
    __tablename__ = "draft_order"

    league_id: Mapped[str] = mapped_column(
        ForeignKey("leagues.id", ondelete="CASCADE"), primary_key=True
    )
    slot: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)

    league: Mapped[LeagueRow] = relationship(back_populates="draft_order")

    __table_args__ = (UniqueConstraint("league_id", "user_id", name="uq_order_league_user"),)


class NFLTeamRow(Base):
    __tablename__ = "nfl_teams"

    id: Mapped[str] = mapped_column(String(10), primary_key=True)
    abbreviation: Mapped[str] = mapped_column(String(5), nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str | None] = mapped_column(String(100))
    is_playoffs: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_eliminated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class PlayerRow(Base):
    __tablename__ = "players"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    position: Mapped[str] = mapped_column(String(2), nullable=False)
    nfl_team: Mapped[str] = mapped_column(String(5), nullable=False)
    nfl_team_id: Mapped[str | None] = mapped_column(String(10))
    espn_athlete_id: Mapped[str | None] = mapped_column(String(20), unique=True)
    is_eliminated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("idx_players_nfl_team", "nfl_team"),
        Index("idx_players_is_eliminated", "is_eliminated"),
    )


class PickRow(Base):
    __tablename__ = "draft_picks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    league_id: Mapped[str] = mapped_column(
        ForeignKey("leagues.id", ondelete="CASCADE"), nullable=False, index=True
    )
    pick_number: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    player_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    league: Mapped[LeagueRow] = relationship(back_populates="picks")

    __table_args__ = (
        UniqueConstraint("league_id", "pick_number", name="uq_pick_league_number"),
        UniqueConstraint("league_id", "player_id", name="uq_pick_league_player"),
    )


class GameEventRow(Base):
    __tablename__ = "nfl_events"

    id: Mapped[str] = mapped_column(String(20), primary_key=True)
    season_year: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    season_type: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    week: Mapped[int | None] = mapped_column(Integer)
    name: Mapped[str | None] = mapped_column(String(200))
    start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    home_team_id: Mapped[str | None] = mapped_column(String(10), index=True)
    home_team_name: Mapped[str | None] = mapped_column(String(100))
    home_team_abbr: Mapped[str | None] = mapped_column(String(5))
    away_team_id: Mapped[str | None] = mapped_column(String(10), index=True)
    away_team_name: Mapped[str | None] = mapped_column(String(100))
    away_team_abbr: Mapped[str | None] = mapped_column(String(5))
    home_score: Mapped[int | None] = mapped_column(Integer)
    away_score: Mapped[int | None] = mapped_column(Integer)
    status: Mapped[str | None] = mapped_column(String(40), index=True)
    winner_id: Mapped[str | None] = mapped_column(String(10))


class PlayerEventStatsRow(Base):
    __tablename__ = "player_event_stats"

    event_id: Mapped[str] = mapped_column(String(20), primary_key=True)
    espn_athlete_id: Mapped[str] = mapped_column(String(20), primary_key=True)
    team_abbr: Mapped[str | None] = mapped_column(String(5))
    passing_yards: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    passing_tds: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    interceptions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    rushing_yards: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    rushing_tds: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    receiving_yards: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    receiving_tds: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    receptions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    fumbles_lost: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    kick_return_tds: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    punt_return_tds: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class PlayerEventPointsRow(Base):
    __tablename__ = "player_event_points"

    event_id: Mapped[str] = mapped_column(String(20), primary_key=True)
    espn_athlete_id: Mapped[str] = mapped_column(String(20), primary_key=True)
    fantasy_points: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)


class TeamEventPointsRow(Base):
    __tablename__ = "league_team_event_points"

    event_id: Mapped[str] = mapped_column(String(20), primary_key=True)
    league_id: Mapped[str] = mapped_column(
        ForeignKey("leagues.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    fantasy_points: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
