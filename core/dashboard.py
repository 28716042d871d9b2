"""Composition root: wires every dashboard component from one config."""

import logging
from dataclasses import dataclass

from auth.config import AuthConfig
from auth.guard import RouteGuard
from auth.profile import ProfileService
from auth.security_logger import SecurityLogger
from auth.session import SessionStore
from clients.auth_client import AuthApi
from clients.http_client import ApiClient
from clients.kalshi_client import KalshiConnectionApi
from clients.markets_client import MarketsClient
from clients.token_store import TokenStore, create_token_store
from linking.account import KalshiAccount
from linking.linker import CredentialLinker
from markets.pagination import MarketPager

logger = logging.getLogger(__name__)


@dataclass
class Dashboard:
    """Everything a view layer needs, sharing one HTTP client and one store."""

    config: AuthConfig
    api_client: ApiClient
    token_store: TokenStore
    security_logger: SecurityLogger
    session: SessionStore
    guard: RouteGuard
    profile: ProfileService
    kalshi_account: KalshiAccount
    markets: MarketsClient
    kalshi_api: KalshiConnectionApi

    def credential_linker(self) -> CredentialLinker:
        """New linker for a settings view. Call ``mount()`` when the view appears."""
        return CredentialLinker(self.kalshi_api, self.session, self.security_logger)

    def market_pager(self, **filters: str) -> MarketPager:
        return MarketPager(self.markets, limit=self.config.markets_page_size, **filters)

    def close(self) -> None:
        self.api_client.close()


def create_dashboard(
    config: AuthConfig | None = None,
    token_store: TokenStore | None = None,
) -> Dashboard:
    """Build the dashboard. Does not initialize the session."""
    config = config or AuthConfig.from_env()
    token_store = token_store or create_token_store(config.token_store_url, key=config.token_key)

    api_client = ApiClient(
        config.api_base_url,
        token_store,
        timeout_seconds=config.request_timeout_seconds,
    )
    security_logger = SecurityLogger()
    auth_api = AuthApi(api_client)
    kalshi_api = KalshiConnectionApi(api_client)
    session = SessionStore(auth_api, token_store, config, security_logger)

    logger.info(f"Dashboard client configured for {config.api_base_url}")

    return Dashboard(
        config=config,
        api_client=api_client,
        token_store=token_store,
        security_logger=security_logger,
        session=session,
        guard=RouteGuard(
            session,
            login_path=config.login_path,
            default_destination=config.default_destination,
        ),
        profile=ProfileService(auth_api, session, config, security_logger),
        kalshi_account=KalshiAccount(kalshi_api, session, security_logger),
        markets=MarketsClient(api_client),
        kalshi_api=kalshi_api,
    )
