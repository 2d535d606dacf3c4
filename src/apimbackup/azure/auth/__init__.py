"""Authentication helpers for the Azure management plane.

Public API:
- acquire_token() → AccessToken
- get_credential() → TokenCredential
- AuthConfig (settings)
- Strategy (enum of auth strategies)
- management_scope(), token_endpoint(), authority_from_url() (scope helpers)
- redact_token() (display-safe token form)
"""

from .config import AuthConfig, Strategy
from .factory import get_credential
from .scopes import (
    DEFAULT_AUTHORITY,
    MANAGEMENT_ENDPOINT,
    authority_from_url,
    management_scope,
    token_endpoint,
)
from .token import acquire_token, redact_token

__all__ = [
    "AuthConfig",
    "Strategy",
    "acquire_token",
    "get_credential",
    "redact_token",
    "DEFAULT_AUTHORITY",
    "MANAGEMENT_ENDPOINT",
    "authority_from_url",
    "management_scope",
    "token_endpoint",
]
