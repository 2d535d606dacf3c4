from __future__ import annotations

from azure.core.credentials import TokenCredential
from azure.identity import (
    AzureCliCredential,
    ClientSecretCredential,
    DefaultAzureCredential,
    ManagedIdentityCredential,
)

from .config import AuthConfig, Strategy


def get_credential(config: AuthConfig | None = None) -> TokenCredential:
    """Construct a :class:`TokenCredential` based on :class:`AuthConfig`.

    The token acquirer only calls this for the SDK-backed strategies;
    ``client_secret`` tokens are requested from the token endpoint directly.

    Args:
        config: Auth configuration. If ``None``, settings are read from the
            environment.

    Returns:
        A concrete :class:`TokenCredential`.
    """
    cfg = config or AuthConfig()
    authority = cfg.authority

    match cfg.strategy:
        case Strategy.CLI:
            return AzureCliCredential(tenant_id=cfg.tenant_id)
        case Strategy.MANAGED_IDENTITY:
            return ManagedIdentityCredential(client_id=cfg.client_id)
        case Strategy.CLIENT_SECRET:
            return ClientSecretCredential(
                tenant_id=cfg.tenant_id,
                client_id=cfg.client_id,
                client_secret=cfg.client_secret.get_secret_value(),
                authority=authority,
            )
        case _:
            return DefaultAzureCredential(authority=authority)
