from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .scopes import DEFAULT_AUTHORITY, authority_from_url


class Strategy(str, Enum):
    """Supported authentication strategies."""

    CLIENT_SECRET = "client_secret"
    MANAGED_IDENTITY = "managed_identity"
    CLI = "cli"
    DEFAULT = "default"


class AuthConfig(BaseSettings):
    """Configuration for obtaining a management-plane access token.

    This model reads environment variables automatically and performs
    cross-field validation based on the selected :class:`Strategy`.

    Environment variables (aliases supported where noted):
        - AZURE_AUTH_STRATEGY (alias: AUTH_STRATEGY)
        - AZURE_TENANT_ID (alias: TENANT_ID)
        - AZURE_CLIENT_ID (alias: CLIENT_ID)
        - AZURE_CLIENT_SECRET (alias: CLIENT_SECRET)
        - AZURE_AUTHORITY_HOST (alias: AUTHORITY_HOST)
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    # With validation_alias set, the field name is only accepted as input if it
    # is listed in the alias choices as well.

    strategy: Strategy = Field(
        default=Strategy.CLIENT_SECRET,
        validation_alias=AliasChoices(
            "strategy", "AZURE_AUTH_STRATEGY", "AUTH_STRATEGY"
        ),
    )
    tenant_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("tenant_id", "AZURE_TENANT_ID", "TENANT_ID"),
    )
    client_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("client_id", "AZURE_CLIENT_ID", "CLIENT_ID"),
    )
    client_secret: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "client_secret", "AZURE_CLIENT_SECRET", "CLIENT_SECRET"
        ),
    )
    authority: str = Field(
        default=DEFAULT_AUTHORITY,
        validation_alias=AliasChoices(
            "authority", "AZURE_AUTHORITY_HOST", "AUTHORITY_HOST"
        ),
    )

    @field_validator("authority")
    @classmethod
    def _normalize_authority(cls, v: str) -> str:
        """Accept bare hosts such as ``login.microsoftonline.com``."""
        if "://" not in v:
            v = f"https://{v}"
        return authority_from_url(v)

    @model_validator(mode="after")
    def _cross_field_validation(self) -> "AuthConfig":
        """Validate required fields for the selected strategy."""
        if self.strategy is Strategy.CLIENT_SECRET:
            missing = [
                name
                for name, value in (
                    ("tenant_id", self.tenant_id),
                    ("client_id", self.client_id),
                    (
                        "client_secret",
                        self.client_secret.get_secret_value()
                        if self.client_secret
                        else None,
                    ),
                )
                if not (value and value.strip())
            ]
            if missing:
                raise ValueError(
                    "client_secret requires tenant_id, client_id, and client_secret "
                    f"(missing or empty: {', '.join(missing)})."
                )
        # MANAGED_IDENTITY, CLI and DEFAULT are validated by azure-identity at runtime.
        return self
