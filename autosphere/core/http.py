"""HTTP client registry for external API calls.

Outbound calls (currently only the Identity Toolkit REST API) share pooled
``httpx.AsyncClient`` instances keyed by service name. Clients are created
lazily and closed together during application shutdown.
"""

import httpx

# Default timeout configuration (seconds)
DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_READ_TIMEOUT = 10.0
DEFAULT_WRITE_TIMEOUT = 10.0
DEFAULT_POOL_TIMEOUT = 5.0

IDENTITY_TOOLKIT = "identity_toolkit"

_clients: dict[str, httpx.AsyncClient] = {}


def create_http_client(
    base_url: str = "",
    max_connections: int = 20,
    max_keepalive_connections: int = 10,
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    read_timeout: float = DEFAULT_READ_TIMEOUT,
    write_timeout: float = DEFAULT_WRITE_TIMEOUT,
    pool_timeout: float = DEFAULT_POOL_TIMEOUT,
) -> httpx.AsyncClient:
    """Async client with explicit timeouts and a bounded connection pool."""
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(
            connect=connect_timeout,
            read=read_timeout,
            write=write_timeout,
            pool=pool_timeout,
        ),
        limits=httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
        ),
    )


def get_client(name: str, base_url: str = "") -> httpx.AsyncClient:
    """Return the shared client registered under ``name``, creating it once."""
    client = _clients.get(name)
    if client is None:
        client = create_http_client(base_url=base_url)
        _clients[name] = client
    return client


def get_identity_toolkit_client() -> httpx.AsyncClient:
    """Client used for sign-in and password updates."""
    return get_client(IDENTITY_TOOLKIT, "https://identitytoolkit.googleapis.com")


async def close_http_clients() -> None:
    """Close every registered client. Called from the app lifespan."""
    while _clients:
        _, client = _clients.popitem()
        await client.aclose()
