from __future__ import annotations

import json
import os
from typing import Any, Callable, Iterator

import pytest
import requests
from requests.structures import CaseInsensitiveDict

_SETTINGS_ENV = {
    "AUTH_STRATEGY",
    "STRATEGY",
    "TENANT_ID",
    "CLIENT_ID",
    "CLIENT_SECRET",
    "AUTHORITY",
    "AUTHORITY_HOST",
    "SUBSCRIPTION_ID",
    "RESOURCE_GROUP",
    "RESOURCE_GROUP_NAME",
    "APIM_RESOURCE_GROUP_NAME",
    "SERVICE_NAME",
    "APIM_SERVICE_NAME",
    "STORAGE_ACCOUNT",
    "STORAGE_ACCOUNT_NAME",
    "STORAGE_ACCOUNT_KEY",
    "STORAGE_RESOURCE_GROUP",
    "STORAGE_RESOURCE_GROUP_NAME",
    "MANAGED_IDENTITY_CLIENT_ID",
    "CONTAINER_NAME",
    "BACKUP_NAME",
    "ACCESS_METHOD",
    "BACKUP_ACCESS_METHOD",
    "API_VERSION",
    "APIM_API_VERSION",
    "MANAGEMENT_ENDPOINT",
    "TIMEOUT",
    "HTTP_TIMEOUT",
}


@pytest.fixture(autouse=True)
def clear_settings_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove settings-related env vars to prevent cross-test leakage.

    Yields:
        Iterator[None]: Context manager semantics for pytest.
    """
    for k in list(os.environ.keys()):
        upper = k.upper()
        if upper.startswith("AZURE_") or upper in _SETTINGS_ENV:
            monkeypatch.delenv(k, raising=False)
    yield


@pytest.fixture()
def make_response() -> Callable[..., requests.Response]:
    """Factory for real :class:`requests.Response` objects with canned content."""

    def _make(
        status_code: int,
        json_body: Any = None,
        *,
        text: str | None = None,
        headers: dict[str, str] | None = None,
        reason: str | None = None,
    ) -> requests.Response:
        response = requests.Response()
        response.status_code = status_code
        if text is None:
            text = json.dumps(json_body) if json_body is not None else ""
        response._content = text.encode("utf-8")
        response.encoding = "utf-8"
        response.headers = CaseInsensitiveDict(headers or {})
        response.reason = reason
        response.url = "https://example.invalid/"
        return response

    return _make


# Token long enough that redaction shows only prefix and suffix.
FAKE_TOKEN = "eyJ0eXAiOiJKV1QiLCJhbGciOiJSUzI1NiJ9.payload-section-0123456789.signature-abcdefghij"


@pytest.fixture()
def fake_token() -> str:
    return FAKE_TOKEN
