"""
API Dependencies

Shared dependencies for FastAPI route handlers: database sessions, the ESPN
client, the change feed, the acting user and the services built on them.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Path
from sqlalchemy.orm import Session

from gridiron_draft.clients.espn import ESPNClient
from gridiron_draft.database import get_db
from gridiron_draft.services.draft import DraftService
from gridiron_draft.services.live import ChangeFeed
from gridiron_draft.services.players import PlayerCatalogService
from gridiron_draft.services.scoring import ScoringService
from gridiron_draft.services.standings import StandingsService


class ClientManager:
    """
    Manages ESPNClient lifecycle for the application.

    Creates a single client instance that can be reused across requests.
    """

    _client: ESPNClient | None = None

    @classmethod
    async def get_client(cls) -> ESPNClient:
        """Get or create the ESPNClient instance."""
        if cls._client is None:
            cls._client = ESPNClient()
            await cls._client.__aenter__()
        return cls._client

    @classmethod
    async def close_client(cls) -> None:
        """Close the ESPNClient instance."""
        if cls._client is not None:
            await cls._client.__aexit__(None, None, None)
            cls._client = None


_feed = ChangeFeed()


def get_change_feed() -> ChangeFeed:
    """Process-wide feed of committed draft changes."""
    return _feed


async def get_espn_client() -> ESPNClient:
    """Dependency to get the ESPNClient."""
    return await ClientManager.get_client()


def get_current_user(
    x_user_id: Annotated[str | None, Header(description="Acting user ID")] = None,
) -> str:
    """
    Dependency for the acting user.

    Raises HTTPException 401 when the X-User-Id header is missing.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="X-User-Id header required")
    return x_user_id.strip()


# Type aliases for cleaner route signatures
DbSessionDep = Annotated[Session, Depends(get_db)]
ESPNClientDep = Annotated[ESPNClient, Depends(get_espn_client)]
ChangeFeedDep = Annotated[ChangeFeed, Depends(get_change_feed)]
CurrentUserDep = Annotated[str, Depends(get_current_user)]


def get_draft_service(session: DbSessionDep, feed: ChangeFeedDep) -> DraftService:
    return DraftService(session, feed=feed)


def get_standings_service(session: DbSessionDep) -> StandingsService:
    return StandingsService(session)


def get_scoring_service(session: DbSessionDep, client: ESPNClientDep) -> ScoringService:
    return ScoringService(session, client)


def get_catalog_service(session: DbSessionDep, client: ESPNClientDep) -> PlayerCatalogService:
    return PlayerCatalogService(session, client)


def get_catalog_reader(session: DbSessionDep) -> PlayerCatalogService:
    """Catalog service for reads and local flag updates, no ESPN access."""
    return PlayerCatalogService(session)


DraftServiceDep = Annotated[DraftService, Depends(get_draft_service)]
StandingsServiceDep = Annotated[StandingsService, Depends(get_standings_service)]
ScoringServiceDep = Annotated[ScoringService, Depends(get_scoring_service)]
CatalogServiceDep = Annotated[PlayerCatalogService, Depends(get_catalog_service)]
CatalogReaderDep = Annotated[PlayerCatalogService, Depends(get_catalog_reader)]


# Common path parameters
LeagueIdPath = Annotated[str, Path(description="League ID")]
