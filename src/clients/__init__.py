"""PokeAPI client modules (curl_cffi transport + resilient JSON fetch).

공개 API는 이 파일에서만 export합니다.
"""

from .http_client import SharedHttpClient, get_shared_http_client, shutdown_shared_http_client
from .poke_api_client import HttpTransport, PokeApiClient

__all__ = [
    "SharedHttpClient",
    "get_shared_http_client",
    "shutdown_shared_http_client",
    "HttpTransport",
    "PokeApiClient",
]
