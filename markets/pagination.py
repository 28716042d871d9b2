"""Cursor pagination over the market list.

The server only hands out "next" cursors. Going back is reconstructed from
a local stack of the cursors that produced each page already seen.
"""

import logging

from auth.result import NETWORK_ERROR_MESSAGE, FailureKind, Ok, Result, err
from clients.http_client import ApiError, TransportError
from clients.markets_client import MarketPage, MarketsClient

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to load markets"


class MarketPager:
    """
    Walks the market list page by page.

    Usage:
        pager = MarketPager(markets_client, limit=12)
        result = pager.first()
        result = pager.next()      # None when there is no next page
        result = pager.previous()  # re-requests the page before the current one

    Each fetch returns a Result; the stack only changes after a successful fetch.
    """

    def __init__(self, client: MarketsClient, limit: int = 12, **filters: str):
        self._client = client
        self.limit = limit
        self.filters = filters
        # cursor used to request each page seen so far; page 1 uses None
        self._stack: list[str | None] = []
        self._current: MarketPage | None = None

    @property
    def page_number(self) -> int:
        return len(self._stack)

    @property
    def current(self) -> MarketPage | None:
        return self._current

    @property
    def has_next(self) -> bool:
        return self._current is not None and bool(self._current.cursor)

    @property
    def has_previous(self) -> bool:
        return len(self._stack) > 1

    @property
    def cursors(self) -> list[str | None]:
        return list(self._stack)

    def _fetch(self, cursor: str | None) -> Result[MarketPage]:
        try:
            page = self._client.list_markets(limit=self.limit, cursor=cursor, **self.filters)
        except TransportError as e:
            logger.error(f"Failed to fetch markets page (cursor={cursor}): {e}")
            return err(FailureKind.NETWORK, NETWORK_ERROR_MESSAGE)
        except ApiError as e:
            logger.error(f"Failed to fetch markets page (cursor={cursor}): {e}")
            return err(FailureKind.REJECTED, e.message or FETCH_FAILED_MESSAGE)
        return Ok(page)

    def first(self) -> Result[MarketPage]:
        result = self._fetch(None)
        if result.ok:
            self._stack = [None]
            self._current = result.value
        return result

    def next(self) -> Result[MarketPage] | None:
        if not self.has_next:
            return None
        cursor = self._current.cursor
        result = self._fetch(cursor)
        if result.ok:
            self._stack.append(cursor)
            self._current = result.value
        return result

    def previous(self) -> Result[MarketPage] | None:
        if not self.has_previous:
            return None
        result = self._fetch(self._stack[-2])
        if result.ok:
            self._stack.pop()
            self._current = result.value
        return result
