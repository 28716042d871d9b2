"""Market list endpoint (/api/kalshi/markets)."""

import logging
from dataclasses import dataclass, field
from typing import Any

from clients.http_client import ApiClient

logger = logging.getLogger(__name__)

MARKET_FILTERS = (
    "event_ticker",
    "series_ticker",
    "max_close_ts",
    "min_close_ts",
    "status",
    "tickers",
)


@dataclass
class MarketPage:
    """One page of markets plus the opaque cursor for the next page."""

    markets: list[dict[str, Any]] = field(default_factory=list)
    cursor: str | None = None


class MarketsClient:
    """Paginated market list. No bearer token required."""

    PATH = "/api/kalshi/markets"

    def __init__(self, client: ApiClient):
        self._client = client

    def list_markets(
        self,
        limit: int | None = None,
        cursor: str | None = None,
        **filters: str,
    ) -> MarketPage:
        """
        Fetch one page of markets.

        Raises:
            ValueError: Unknown filter name
            TransportError / ApiError: From the HTTP client
        """
        unknown = set(filters) - set(MARKET_FILTERS)
        if unknown:
            raise ValueError(f"Unknown market filters: {', '.join(sorted(unknown))}")

        params: dict[str, Any] = {}
        if limit:
            params["limit"] = limit
        if cursor:
            params["cursor"] = cursor
        params.update({name: value for name, value in filters.items() if value})

        response = self._client.get(self.PATH, params=params, auth=False)
        data = response.data
        markets = data.get("markets") or []
        next_cursor = data.get("cursor") or None

        logger.debug(f"Fetched {len(markets)} markets (next cursor: {next_cursor})")
        return MarketPage(markets=list(markets), cursor=next_cursor)
