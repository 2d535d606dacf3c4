from __future__ import annotations

from typing import Any

from pydantic import SecretStr

from apimbackup.azure.auth.config import AuthConfig, Strategy
from apimbackup.azure.auth.factory import get_credential


def test_factory_default__uses_default_credential(
    stub_credentials: dict[str, Any],
) -> None:
    """DEFAULT strategy: returns DefaultAzureCredential with authority passthrough."""
    cfg = AuthConfig(strategy=Strategy.DEFAULT, authority="https://login.example")
    _ = get_credential(cfg)

    klass = stub_credentials["DefaultAzureCredential"]
    assert klass.call_count == 1
    assert klass.last_kwargs == {"authority": "https://login.example"}


def test_factory_cli__tenant_passthrough(stub_credentials: dict[str, Any]) -> None:
    cfg = AuthConfig(strategy=Strategy.CLI, tenant_id="t")
    _ = get_credential(cfg)

    klass = stub_credentials["AzureCliCredential"]
    assert klass.call_count == 1
    assert klass.last_kwargs == {"tenant_id": "t"}


def test_factory_managed_identity__client_id(stub_credentials: dict[str, Any]) -> None:
    cfg = AuthConfig(strategy=Strategy.MANAGED_IDENTITY, client_id="cid")
    _ = get_credential(cfg)

    klass = stub_credentials["ManagedIdentityCredential"]
    assert klass.call_count == 1
    assert klass.last_kwargs == {"client_id": "cid"}


def test_factory_client_secret__unwraps_secret(
    stub_credentials: dict[str, Any],
) -> None:
    cfg = AuthConfig(
        strategy=Strategy.CLIENT_SECRET,
        tenant_id="t",
        client_id="c",
        client_secret=SecretStr("sekrit"),
        authority="https://login.example",
    )
    _ = get_credential(cfg)

    klass = stub_credentials["ClientSecretCredential"]
    assert klass.call_count == 1
    assert klass.last_kwargs == {
        "tenant_id": "t",
        "client_id": "c",
        "client_secret": "sekrit",
        "authority": "https://login.example",
    }
