# Infrastructure clients
from clients.token_store import (
    TokenStore,
    TokenStoreError,
    MemoryTokenStore,
    FileTokenStore,
    ValkeyTokenStore,
    create_token_store,
)
from clients.valkey_client import ValkeyClient
from clients.http_client import (
    ApiClient,
    ApiClientError,
    ApiError,
    ApiResponse,
    TransportError,
    message_from,
)
from clients.auth_client import AuthApi
from clients.kalshi_client import KalshiConnectionApi
from clients.markets_client import MarketsClient, MarketPage
