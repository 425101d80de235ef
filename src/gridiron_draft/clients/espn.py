"""
Async ESPN Site API Client

Read-only access to ESPN's public NFL endpoints: game summaries (box scores),
the team list and team rosters. Uses httpx for async HTTP requests with
connection pooling.
"""

import asyncio
from typing import Any

import httpx

from gridiron_draft.config import Settings, get_settings
from gridiron_draft.logging import logger


class ESPNAPIError(Exception):
    """Exception raised for ESPN API errors.

    ``transient`` marks failures worth retrying (network, timeout, 429, 5xx).
    """

    def __init__(self, message: str, status_code: int | None = None, transient: bool = False):
        self.message = message
        self.status_code = status_code
        self.transient = transient
        super().__init__(self.message)


def _is_transient_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


class ESPNClient:
    """
    Async client for the ESPN NFL site API.

    Usage:
        async with ESPNClient() as client:
            summary = await client.get_game_summary("401671793")
            teams = await client.get_teams()
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "ESPNClient":
        """Create HTTP client on context entry."""
        self._client = httpx.AsyncClient(
            base_url=self.settings.espn_base_url,
            timeout=httpx.Timeout(self.settings.espn_timeout),
            headers={"Accept": "application/json"},
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close HTTP client on context exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, raising if not initialized."""
        if self._client is None:
            raise RuntimeError(
                "ESPNClient must be used as async context manager: "
                "async with ESPNClient() as client: ..."
            )
        return self._client

    async def _get_once(self, endpoint: str, params: dict[str, Any] | None) -> Any:
        try:
            response = await self.client.get(endpoint, params=params)
        except httpx.TimeoutException as e:
            raise ESPNAPIError(f"Request timed out: {endpoint}", transient=True) from e
        except httpx.TransportError as e:
            raise ESPNAPIError(f"Network error: {endpoint}: {e}", transient=True) from e

        if response.status_code != 200:
            raise ESPNAPIError(
                f"API request failed: {endpoint}",
                status_code=response.status_code,
                transient=_is_transient_status(response.status_code),
            )

        try:
            return response.json()
        except ValueError as e:
            raise ESPNAPIError(
                f"Malformed JSON from {endpoint}", status_code=response.status_code
            ) from e

    async def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """GET with bounded retry and exponential backoff for transient failures."""
        attempt = 0
        while True:
            try:
                return await self._get_once(endpoint, params)
            except ESPNAPIError as e:
                if not e.transient or attempt >= self.settings.espn_max_retries:
                    logger.warning(
                        "espn_request_failed",
                        endpoint=endpoint,
                        status_code=e.status_code,
                        transient=e.transient,
                        attempts=attempt + 1,
                    )
                    raise
                delay = self.settings.espn_backoff * (2**attempt)
                attempt += 1
                logger.info("espn_request_retry", endpoint=endpoint, attempt=attempt, delay=delay)
                await asyncio.sleep(delay)

    # ==================== Game Endpoints ====================

    async def get_game_summary(self, event_id: str) -> dict[str, Any]:
        """
        Get the full game summary (header, box score) for an event.

        Args:
            event_id: ESPN event ID

        Returns:
            Raw summary dictionary
        """
        data = await self._get("/summary", params={"event": event_id})
        if not isinstance(data, dict):
            raise ESPNAPIError(f"Unexpected summary payload for event {event_id}")
        return data

    # ==================== Team Endpoints ====================

    async def get_teams(self) -> list[dict[str, Any]]:
        """
        Get all NFL teams.

        Returns:
            List of raw team dictionaries (id, abbreviation, displayName, slug)
        """
        data = await self._get("/teams")
        sports = (data or {}).get("sports") or [{}]
        leagues = (sports[0] or {}).get("leagues") or [{}]
        teams = (leagues[0] or {}).get("teams") or []
        return [entry["team"] for entry in teams if isinstance(entry, dict) and "team" in entry]

    async def get_team_roster(self, team_id: str) -> dict[str, Any]:
        """
        Get a team's roster grouped by offense/defense/special teams.

        Args:
            team_id: ESPN team ID

        Returns:
            Raw roster dictionary
        """
        data = await self._get(f"/teams/{team_id}/roster")
        return data if isinstance(data, dict) else {}
