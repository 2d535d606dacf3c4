"""Backup requests against the API Management management plane."""

from .client import DEFAULT_API_VERSION, ManagementClient
from .config import AccessMethodName, BackupSettings
from .models import (
    AccessKey,
    AccessMethod,
    AccessType,
    BackupRequest,
    BackupResponse,
    ManagedIdentity,
)

__all__ = [
    "DEFAULT_API_VERSION",
    "ManagementClient",
    "AccessMethodName",
    "BackupSettings",
    "AccessKey",
    "AccessMethod",
    "AccessType",
    "BackupRequest",
    "BackupResponse",
    "ManagedIdentity",
]
