"""Client layer package: httpx interception transport and session-aware API client."""

from .api_client import VIRTUAL_BASE_URL, VirtualApiClient
from .token_store import REFRESH_TOKEN_KEY, TOKEN_KEY, USER_KEY, InMemoryTokenStore, TokenStorePort
from .transport import VirtualServiceTransport, transport_decode_body

__all__ = [
    "InMemoryTokenStore",
    "REFRESH_TOKEN_KEY",
    "TOKEN_KEY",
    "TokenStorePort",
    "USER_KEY",
    "VIRTUAL_BASE_URL",
    "VirtualApiClient",
    "VirtualServiceTransport",
    "transport_decode_body",
]
