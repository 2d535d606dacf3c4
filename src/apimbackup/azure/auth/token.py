"""Access token acquisition for the management plane."""

from __future__ import annotations

import logging
from time import time

import requests
from azure.core.credentials import AccessToken
from azure.core.exceptions import ClientAuthenticationError

from apimbackup.errors import AuthenticationError

from .config import AuthConfig, Strategy
from .factory import get_credential
from .scopes import token_endpoint

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: float = 30.0


def redact_token(token: str, keep: int = 6) -> str:
    """Return a display-safe form of a bearer token.

    Only ``keep`` characters from each end are shown, and only when the token
    is long enough that the hidden middle outweighs the visible ends.
    """
    if not token:
        return "<empty>"
    if len(token) <= keep * 4:
        return "***"
    return f"{token[:keep]}...{token[-keep:]}"


def _error_detail(response: requests.Response) -> str:
    """Pull the most useful error text out of a token endpoint response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or response.reason or "no response body"
    if isinstance(payload, dict):
        description = payload.get("error_description") or payload.get("error")
        if description:
            return str(description)
    return response.text.strip()


def _client_credentials_token(
    config: AuthConfig, scope: str, timeout: float
) -> AccessToken:
    url = token_endpoint(config.tenant_id, config.authority)
    data = {
        "client_id": config.client_id,
        "client_secret": config.client_secret.get_secret_value(),
        "scope": scope,
        "grant_type": "client_credentials",
    }
    logger.debug("Requesting token from %s for scope %s", url, scope)

    try:
        response = requests.post(url, data=data, timeout=timeout)
    except requests.RequestException as exc:
        raise AuthenticationError(f"Token request failed: {exc}") from exc

    if not response.ok:
        raise AuthenticationError(
            f"Token request failed with HTTP {response.status_code}: "
            f"{_error_detail(response)}"
        )

    try:
        payload = response.json()
    except ValueError as exc:
        raise AuthenticationError(
            "Token endpoint returned a response that is not valid JSON."
        ) from exc

    token = payload.get("access_token") if isinstance(payload, dict) else None
    if not token:
        raise AuthenticationError("Token endpoint response contains no access_token.")
    if not isinstance(token, str):
        raise AuthenticationError("Token endpoint returned a malformed access_token.")

    try:
        expires_in = int(payload.get("expires_in") or 0)
    except (TypeError, ValueError) as exc:
        raise AuthenticationError(
            f"Token endpoint returned a malformed expires_in: {payload.get('expires_in')!r}"
        ) from exc
    return AccessToken(token, int(time()) + expires_in)


def _credential_token(config: AuthConfig, scope: str) -> AccessToken:
    credential = get_credential(config)
    try:
        access_token = credential.get_token(scope)
    except ClientAuthenticationError as exc:
        raise AuthenticationError(
            f"{config.strategy.value} authentication failed: {exc.message}"
        ) from exc
    if not access_token.token:
        raise AuthenticationError("Credential returned an empty access token.")
    return access_token


def acquire_token(
    config: AuthConfig, scope: str, *, timeout: float = DEFAULT_TIMEOUT
) -> AccessToken:
    """Obtain a bearer token for ``scope``.

    The ``client_secret`` strategy performs the OAuth2 client-credentials
    grant against the v2.0 token endpoint with a form-encoded body. Other
    strategies delegate to the matching azure-identity credential.

    Args:
        config: Authentication configuration.
        scope: Resource scope, e.g. ``https://management.azure.com/.default``.
        timeout: Seconds to wait for the token endpoint.

    Returns:
        The access token and its expiry (epoch seconds).

    Raises:
        AuthenticationError: On transport failure, non-2xx response or a
            response without a usable token. Never retried.
    """
    if config.strategy is Strategy.CLIENT_SECRET:
        access_token = _client_credentials_token(config, scope, timeout)
    else:
        access_token = _credential_token(config, scope)

    logger.info(
        "Acquired access token %s (expires_on=%s)",
        redact_token(access_token.token),
        access_token.expires_on,
    )
    return access_token
