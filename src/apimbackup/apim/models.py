from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

PROVIDER = "Microsoft.ApiManagement"


class AccessType(str, Enum):
    """Values of the ``accessType`` field understood by the backup API."""

    ACCESS_KEY = "AccessKey"
    SYSTEM_ASSIGNED = "SystemAssignedManagedIdentity"
    USER_ASSIGNED = "UserAssignedManagedIdentity"


@dataclass(frozen=True)
class AccessKey:
    """Storage access through the account key (older deployments)."""

    key: str = field(repr=False)


@dataclass(frozen=True)
class ManagedIdentity:
    """Storage access through the APIM service's managed identity.

    Without ``client_id`` the system-assigned identity is used. With one, the
    user-assigned identity with that client id is used instead.
    """

    client_id: str | None = None

    @property
    def access_type(self) -> AccessType:
        if self.client_id:
            return AccessType.USER_ASSIGNED
        return AccessType.SYSTEM_ASSIGNED


AccessMethod = Union[AccessKey, ManagedIdentity]


@dataclass(frozen=True)
class BackupRequest:
    """Target service and destination blob for one backup operation."""

    subscription_id: str
    resource_group: str
    service_name: str
    storage_account: str
    container_name: str
    backup_name: str
    access: AccessMethod = field(default_factory=ManagedIdentity)

    @property
    def service_id(self) -> str:
        """ARM resource id of the APIM service."""
        return (
            f"/subscriptions/{self.subscription_id}"
            f"/resourceGroups/{self.resource_group}"
            f"/providers/{PROVIDER}/service/{self.service_name}"
        )

    def to_body(self) -> dict[str, Any]:
        """Serialize to the JSON body of the backup call.

        The key variant carries ``accessKey``; the managed identity variant
        never does and sends ``accessType`` instead.
        """
        body: dict[str, Any] = {
            "storageAccount": self.storage_account,
            "containerName": self.container_name,
            "backupName": self.backup_name,
        }
        if isinstance(self.access, AccessKey):
            body["accessKey"] = self.access.key
        elif isinstance(self.access, ManagedIdentity):
            body["accessType"] = self.access.access_type.value
            if self.access.client_id:
                body["clientId"] = self.access.client_id
        else:
            raise TypeError(f"Unsupported access method: {self.access!r}")
        return body


@dataclass
class BackupResponse:
    """Acknowledgement that the backup operation was started.

    This never means the backup has completed; the management plane finishes
    it asynchronously.
    """

    status: str
    operation_id: str | None = None
    status_code: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "operationId": self.operation_id,
            "statusCode": self.status_code,
        }
