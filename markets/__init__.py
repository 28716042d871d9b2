"""Market list pagination."""

from markets.pagination import MarketPager
