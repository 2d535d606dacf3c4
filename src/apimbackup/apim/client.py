from __future__ import annotations

import logging
from typing import Any

import requests

from apimbackup.azure.auth import MANAGEMENT_ENDPOINT, redact_token
from apimbackup.errors import (
    BackupRequestError,
    ConflictError,
    StorageKeyError,
)

from .models import BackupRequest, BackupResponse

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2024-05-01"
STORAGE_API_VERSION = "2023-01-01"


class ManagementClient:
    """Minimal Azure Resource Manager client for the backup call.

    Every method issues exactly one request; nothing is retried or polled.
    """

    def __init__(
        self,
        token: str,
        *,
        endpoint: str = MANAGEMENT_ENDPOINT,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the management client.

        Args:
            token: Bearer token for the management plane. Must be non-empty.
            endpoint: Management endpoint, without trailing slash.
            api_version: ``api-version`` of the APIM backup call.
            timeout: Seconds to wait for each request.
        """
        if not token:
            raise ValueError("A non-empty access token is required.")
        self._token = token
        self.endpoint = endpoint.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

    def backup_url(self, request: BackupRequest) -> str:
        return f"{self.endpoint}{request.service_id}/backup?api-version={self.api_version}"

    def describe_request(self, request: BackupRequest) -> dict[str, Any]:
        """Return a diagnostic echo of the backup call, safe to print or log.

        The bearer token is reduced to a short prefix and suffix, and an
        access key is masked entirely.
        """
        body = request.to_body()
        if "accessKey" in body:
            body["accessKey"] = "***"
        return {
            "method": "POST",
            "url": self.backup_url(request),
            "headers": {
                "Authorization": f"Bearer {redact_token(self._token)}",
                "Content-Type": "application/json",
            },
            "body": body,
        }

    def request_backup(self, request: BackupRequest) -> BackupResponse:
        """Start a backup of the APIM service described by ``request``.

        Args:
            request: Target service and destination blob.

        Returns:
            The initiation acknowledgement. The backup itself completes
            asynchronously in the management plane.

        Raises:
            ConflictError: On HTTP 409 (a backup is already running).
            BackupRequestError: On any other non-2xx response or on a
                transport failure.
        """
        url = self.backup_url(request)
        logger.debug("Backup request: %s", self.describe_request(request))

        try:
            response = requests.post(
                url,
                headers=self._headers,
                json=request.to_body(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise BackupRequestError(f"Backup request failed: {exc}") from exc

        body_text = response.text or None
        logger.debug("Backup response: HTTP %s %s", response.status_code, body_text)

        if response.status_code == 409:
            raise ConflictError(request.service_id, body=body_text)
        if not response.ok:
            raise BackupRequestError(
                f"Backup request failed with HTTP {response.status_code}",
                status_code=response.status_code,
                body=body_text,
            )
        return self._parse_backup_response(response)

    @staticmethod
    def _parse_backup_response(response: requests.Response) -> BackupResponse:
        payload: dict[str, Any] = {}
        if response.text:
            try:
                parsed = response.json()
            except ValueError:
                parsed = None
            if isinstance(parsed, dict):
                payload = parsed

        properties = payload.get("properties")
        if not isinstance(properties, dict):
            properties = {}
        status = (
            payload.get("status")
            or properties.get("provisioningState")
            or response.reason
            or response.status_code
        )
        operation_id = (
            payload.get("id")
            or response.headers.get("Azure-AsyncOperation")
            or response.headers.get("Location")
        )
        status = str(status)
        if operation_id is not None:
            operation_id = str(operation_id)
        return BackupResponse(
            status=status,
            operation_id=operation_id,
            status_code=response.status_code,
        )

    def get_storage_account_key(
        self, subscription_id: str, resource_group: str, account_name: str
    ) -> str:
        """Look up the first key of a storage account through ``listKeys``.

        Raises:
            StorageKeyError: If the call fails or returns no key.
        """
        url = (
            f"{self.endpoint}/subscriptions/{subscription_id}"
            f"/resourceGroups/{resource_group}"
            f"/providers/Microsoft.Storage/storageAccounts/{account_name}"
            f"/listKeys?api-version={STORAGE_API_VERSION}"
        )
        logger.debug("Listing keys of storage account %s", account_name)

        try:
            response = requests.post(url, headers=self._headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise StorageKeyError(f"Storage key lookup failed: {exc}") from exc

        if not response.ok:
            raise StorageKeyError(
                f"Storage key lookup for {account_name} failed with HTTP "
                f"{response.status_code}: {response.text.strip()}"
            )

        try:
            keys = response.json().get("keys") or []
        except (ValueError, AttributeError) as exc:
            raise StorageKeyError(
                f"Storage key lookup for {account_name} returned an unreadable response."
            ) from exc

        for entry in keys:
            value = entry.get("value")
            if value:
                return value
        raise StorageKeyError(f"Storage account {account_name} returned no keys.")
