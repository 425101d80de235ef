"""API package - FastAPI routes and dependencies."""

from gridiron_draft.api.dependencies import (
    ChangeFeedDep,
    ClientManager,
    CurrentUserDep,
    DbSessionDep,
    DraftServiceDep,
    ESPNClientDep,
    get_change_feed,
    get_current_user,
    get_espn_client,
)

__all__ = [
    "ClientManager",
    "get_change_feed",
    "get_current_user",
    "get_espn_client",
    "ChangeFeedDep",
    "CurrentUserDep",
    "DbSessionDep",
    "DraftServiceDep",
    "ESPNClientDep",
]
