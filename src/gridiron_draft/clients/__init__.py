"""External API clients."""

from gridiron_draft.clients.espn import ESPNAPIError, ESPNClient

__all__ = ["ESPNClient", "ESPNAPIError"]
