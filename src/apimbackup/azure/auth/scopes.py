from typing import Final
from urllib.parse import urlparse

DEFAULT_AUTHORITY: Final[str] = "https://login.microsoftonline.com"
MANAGEMENT_ENDPOINT: Final[str] = "https://management.azure.com"


def authority_from_url(url: str) -> str:
    """Return the URL authority (scheme + host).

    Args:
        url: Absolute URL (e.g., "https://management.azure.com/subscriptions").

    Returns:
        The "<scheme>://<host>" portion of the URL.

    Raises:
        ValueError: If ``url`` is not absolute or lacks a host.
    """
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("url must be an absolute URL")
    return f"{parsed.scheme}://{parsed.netloc}"


def management_scope(endpoint: str = MANAGEMENT_ENDPOINT) -> str:
    return f"{authority_from_url(endpoint)}/.default"


def token_endpoint(tenant_id: str, authority: str = DEFAULT_AUTHORITY) -> str:
    """Return the OAuth2 v2.0 token endpoint for a tenant."""
    return f"{authority_from_url(authority)}/{tenant_id}/oauth2/v2.0/token"
