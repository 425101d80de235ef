"""pytest configuration and fixtures."""

import os

# Settings are read at import time; keep tests off the default on-disk database
os.environ.setdefault("GRIDIRON_ENVIRONMENT", "development")
os.environ.setdefault("GRIDIRON_LOG_LEVEL", "WARNING")
os.environ.setdefault("GRIDIRON_DATABASE_URL", "sqlite://")
os.environ.setdefault("GRIDIRON_ESPN_BACKOFF", "0")
os.environ.setdefault("GRIDIRON_SEED_DELAY", "0")

from collections.abc import Callable, Iterator  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from gridiron_draft.clients.espn import ESPNClient  # noqa: E402
from gridiron_draft.config import Settings  # noqa: E402
from gridiron_draft.database.models import Base, PlayerRow  # noqa: E402
from gridiron_draft.services.draft import DraftService  # noqa: E402
from gridiron_draft.services.live import ChangeFeed  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        espn_base_url="https://espn.test/nfl",
        espn_backoff=0,
        espn_max_retries=2,
        seed_delay=0,
        roster_size=2,
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def session(session_factory) -> Iterator[Session]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def feed() -> ChangeFeed:
    return ChangeFeed()


@pytest.fixture
def draft_service(session, feed, settings) -> DraftService:
    return DraftService(session, feed=feed, settings=settings)


@pytest.fixture
def players(session) -> list[PlayerRow]:
    """Six catalog players, one without an ESPN athlete ID."""
    rows = [
        PlayerRow(id="p-mahomes", name="Patrick Mahomes", position="QB", nfl_team="KC", espn_athlete_id="3139477"),
        PlayerRow(id="p-pacheco", name="Isiah Pacheco", position="RB", nfl_team="KC", espn_athlete_id="4361529"),
        PlayerRow(id="p-kelce", name="Travis Kelce", position="TE", nfl_team="KC", espn_athlete_id="15847"),
        PlayerRow(id="p-cook", name="James Cook", position="RB", nfl_team="BUF", espn_athlete_id="4379399"),
        PlayerRow(id="p-allen", name="Josh Allen", position="QB", nfl_team="BUF", espn_athlete_id="3918298"),
        PlayerRow(id="p-rookie", name="Practice Squad Guy", position="WR", nfl_team="BUF", espn_athlete_id=None),
    ]
    session.add_all(rows)
    session.commit()
    return rows


@pytest.fixture
def drafting_league(draft_service, players) -> str:
    """Two-team league in the draft: alice picks first, bob second."""
    league = draft_service.create_league("Playoff Pool", "alice", "Alice")
    draft_service.join_league(league.id, "bob", "Bob")
    draft_service.set_draft_order(league.id, "alice", ["alice", "bob"])
    draft_service.start_draft(league.id, "alice")
    return league.id


@pytest.fixture
def summary() -> dict:
    """ESPN game summary trimmed to the fields the parser reads."""
    return {
        "season": {"year": 2024, "type": 3},
        "week": {"number": 2},
        "header": {
            "competitions": [
                {
                    "description": "AFC Divisional Playoffs",
                    "date": "2025-01-26T23:30Z",
                    "status": {"type": {"name": "STATUS_FINAL"}},
                    "competitors": [
                        {
                            "homeAway": "home",
                            "score": "32",
                            "team": {"id": "12", "abbreviation": "KC", "displayName": "Kansas City Chiefs"},
                        },
                        {
                            "homeAway": "away",
                            "score": "29",
                            "team": {"id": "2", "abbreviation": "BUF", "displayName": "Buffalo Bills"},
                        },
                    ],
                }
            ]
        },
        "boxscore": {
            "players": [
                {
                    "team": {"id": "12", "abbreviation": "KC"},
                    "statistics": [
                        {
                            "name": "passing",
                            "labels": ["C/ATT", "YDS", "AVG", "TD", "INT", "SACKS", "QBR", "RTG"],
                            "athletes": [
                                {
                                    "athlete": {"id": "3139477", "displayName": "Patrick Mahomes"},
                                    "stats": ["18/26", "245", "9.4", "1", "0", "2-9", "84.3", "117.8"],
                                }
                            ],
                        },
                        {
                            "name": "rushing",
                            "labels": ["CAR", "YDS", "AVG", "TD", "LONG"],
                            "athletes": [
                                {
                                    "athlete": {"id": "3139477", "displayName": "Patrick Mahomes"},
                                    "stats": ["11", "43", "3.9", "2", "13"],
                                },
                                {
                                    "athlete": {"id": "4361529", "displayName": "Isiah Pacheco"},
                                    "stats": ["13", "64", "4.9", "0", "13"],
                                },
                            ],
                        },
                        {
                            "name": "receiving",
                            "labels": ["REC", "YDS", "AVG", "TD", "LONG", "TGTS"],
                            "athletes": [
                                {
                                    "athlete": {"id": "15847", "displayName": "Travis Kelce"},
                                    "stats": ["4", "40", "10.0", "0", "16", "5"],
                                },
                                {
                                    "athlete": {"id": "4361529", "displayName": "Isiah Pacheco"},
                                    "stats": ["1", "7", "7.0", "0", "7", "1"],
                                },
                            ],
                        },
                        {
                            "name": "fumbles",
                            "labels": ["FUM", "LOST", "REC"],
                            "athletes": [
                                {
                                    "athlete": {"id": "4361529", "displayName": "Isiah Pacheco"},
                                    "stats": ["1", "1", "0"],
                                }
                            ],
                        },
                    ],
                },
                {
                    "team": {"id": "2", "abbreviation": "BUF"},
                    "statistics": [
                        {
                            "name": "receiving",
                            "labels": ["REC", "YDS", "AVG", "TD", "LONG", "TGTS"],
                            "athletes": [
                                {
                                    "athlete": {"id": "4379399", "displayName": "James Cook"},
                                    "stats": ["3", "-4", "-1.3", "0", "2", "3"],
                                },
                                {
                                    "athlete": {"displayName": "Missing Id"},
                                    "stats": ["9", "99", "11.0", "9", "40", "9"],
                                },
                            ],
                        },
                        {
                            "name": "kickReturns",
                            "labels": ["NO", "YDS", "AVG", "LONG", "TD"],
                            "athletes": [
                                {
                                    "athlete": {"id": "4040000", "displayName": "Returner"},
                                    "stats": ["2", "130", "65.0", "100", "1"],
                                }
                            ],
                        },
                    ],
                },
            ]
        },
    }


@pytest.fixture
def summary_points() -> dict[str, float]:
    """Expected half-PPR points for the summary fixture."""
    return {
        "3139477": 30.1,  # 245 pass yd, 1 pass TD, 43 rush yd, 2 rush TD
        "4361529": 5.6,  # 64 rush yd, 1 rec, 7 rec yd, 1 fumble lost
        "15847": 6.0,  # 4 rec, 40 rec yd
        "4379399": 1.1,  # 3 rec, -4 rec yd
        "4040000": 6.0,  # kick return TD
    }


@pytest.fixture
def espn_transport(summary) -> Callable[..., httpx.MockTransport]:
    """Build a MockTransport serving the summary fixture, optionally failing first."""

    def build(fail_with: int | None = None, failures: int = 0, calls: list | None = None):
        remaining = {"failures": failures}

        def handler(request: httpx.Request) -> httpx.Response:
            if calls is not None:
                calls.append(request)
            if fail_with is not None and remaining["failures"] != 0:
                remaining["failures"] -= 1
                return httpx.Response(fail_with, json={"error": "upstream"})
            if request.url.path.endswith("/summary"):
                return httpx.Response(200, json=summary)
            return httpx.Response(404, json={"error": "not found"})

        return httpx.MockTransport(handler)

    return build


@pytest.fixture
def espn_client_factory(settings, espn_transport):
    def build(**kwargs) -> ESPNClient:
        return ESPNClient(settings=settings, transport=espn_transport(**kwargs))

    return build
