from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from apimbackup.azure.auth.scopes import MANAGEMENT_ENDPOINT, authority_from_url

from .client import DEFAULT_API_VERSION
from .models import AccessKey, AccessMethod, BackupRequest, ManagedIdentity


class AccessMethodName(str, Enum):
    """How the APIM service authenticates against the storage account."""

    MANAGED_IDENTITY = "managed-identity"
    KEY = "key"


class BackupSettings(BaseSettings):
    """Target service, destination blob and transport settings for a backup.

    Values are read from keyword arguments first, then from the environment.

    Environment variables (aliases supported where noted):
        - SUBSCRIPTION_ID (alias: AZURE_SUBSCRIPTION_ID)
        - APIM_RESOURCE_GROUP_NAME (alias: RESOURCE_GROUP_NAME)
        - APIM_SERVICE_NAME
        - STORAGE_ACCOUNT_NAME
        - STORAGE_RESOURCE_GROUP_NAME
        - STORAGE_ACCOUNT_KEY
        - MANAGED_IDENTITY_CLIENT_ID
        - CONTAINER_NAME
        - BACKUP_NAME
        - BACKUP_ACCESS_METHOD
        - APIM_API_VERSION
        - MANAGEMENT_ENDPOINT
        - HTTP_TIMEOUT
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    subscription_id: str = Field(
        validation_alias=AliasChoices(
            "subscription_id", "SUBSCRIPTION_ID", "AZURE_SUBSCRIPTION_ID"
        ),
    )
    resource_group: str = Field(
        validation_alias=AliasChoices(
            "resource_group", "APIM_RESOURCE_GROUP_NAME", "RESOURCE_GROUP_NAME"
        ),
    )
    service_name: str = Field(
        validation_alias=AliasChoices("service_name", "APIM_SERVICE_NAME"),
    )
    storage_account: str = Field(
        validation_alias=AliasChoices("storage_account", "STORAGE_ACCOUNT_NAME"),
    )
    container_name: str = Field(
        validation_alias=AliasChoices("container_name", "CONTAINER_NAME"),
    )
    backup_name: str = Field(
        validation_alias=AliasChoices("backup_name", "BACKUP_NAME"),
    )
    access_method: AccessMethodName = Field(
        default=AccessMethodName.MANAGED_IDENTITY,
        validation_alias=AliasChoices("access_method", "BACKUP_ACCESS_METHOD"),
    )
    storage_account_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("storage_account_key", "STORAGE_ACCOUNT_KEY"),
    )
    storage_resource_group: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "storage_resource_group", "STORAGE_RESOURCE_GROUP_NAME"
        ),
    )
    managed_identity_client_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "managed_identity_client_id", "MANAGED_IDENTITY_CLIENT_ID"
        ),
    )
    api_version: str = Field(
        default=DEFAULT_API_VERSION,
        validation_alias=AliasChoices("api_version", "APIM_API_VERSION"),
    )
    management_endpoint: str = Field(
        default=MANAGEMENT_ENDPOINT,
        validation_alias=AliasChoices("management_endpoint", "MANAGEMENT_ENDPOINT"),
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        validation_alias=AliasChoices("timeout", "HTTP_TIMEOUT"),
    )

    @field_validator(
        "subscription_id",
        "resource_group",
        "service_name",
        "storage_account",
        "container_name",
        "backup_name",
        "api_version",
    )
    @classmethod
    def _ensure_not_blank(cls, v: str) -> str:
        """Mandatory values must contain more than whitespace."""
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator(
        "storage_resource_group", "managed_identity_client_id", mode="before"
    )
    @classmethod
    def _blank_as_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("management_endpoint")
    @classmethod
    def _ensure_absolute_endpoint(cls, v: str) -> str:
        authority_from_url(v)
        return v.rstrip("/")

    @model_validator(mode="after")
    def _cross_field_validation(self) -> "BackupSettings":
        """Validate required fields for the selected access method."""
        if self.access_method is AccessMethodName.KEY:
            has_key = bool(
                self.storage_account_key
                and self.storage_account_key.get_secret_value().strip()
            )
            if not has_key and not self.storage_resource_group:
                raise ValueError(
                    "key access requires storage_account_key, or "
                    "storage_resource_group to look the key up."
                )
        return self

    def access(self, storage_key: str | None = None) -> AccessMethod:
        """Build the access method for the backup body.

        Args:
            storage_key: Key obtained by lookup, used when no key was configured.
        """
        if self.access_method is AccessMethodName.KEY:
            key = (
                self.storage_account_key.get_secret_value()
                if self.storage_account_key
                else storage_key
            )
            if not key:
                raise ValueError("No storage account key available for key access.")
            return AccessKey(key)
        return ManagedIdentity(client_id=self.managed_identity_client_id)

    @property
    def needs_key_lookup(self) -> bool:
        return self.access_method is AccessMethodName.KEY and not (
            self.storage_account_key
            and self.storage_account_key.get_secret_value().strip()
        )

    def to_request(self, storage_key: str | None = None) -> BackupRequest:
        return BackupRequest(
            subscription_id=self.subscription_id,
            resource_group=self.resource_group,
            service_name=self.service_name,
            storage_account=self.storage_account,
            container_name=self.container_name,
            backup_name=self.backup_name,
            access=self.access(storage_key),
        )
