from __future__ import annotations

from typing import Any

import pytest

import apimbackup.azure.auth.factory as factory


class _Recorder:
    """Factory to create recorder classes that capture init kwargs."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.cls = self._make(name)

    @staticmethod
    def _make(name: str):
        class _C:
            last_args: tuple[Any, ...] | None = None
            last_kwargs: dict[str, Any] | None = None
            call_count: int = 0
            token_result: Any = None
            token_error: Exception | None = None
            requested_scopes: list[str] = []

            def __init__(self, *args: Any, **kwargs: Any) -> None:
                type(self).last_args = args
                type(self).last_kwargs = dict(kwargs)
                type(self).call_count += 1

            def get_token(self, *scopes: str, **kwargs: Any) -> Any:
                type(self).requested_scopes = list(scopes)
                if type(self).token_error is not None:
                    raise type(self).token_error
                return type(self).token_result

        _C.__name__ = name
        _C.__qualname__ = name
        return _C


@pytest.fixture()
def stub_credentials(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    """Replace the azure-identity credential classes bound in the factory.

    Returns:
        dict[str, Any]: Exposes recorder classes for assertion (e.g., call kwargs).
    """
    names = [
        "DefaultAzureCredential",
        "AzureCliCredential",
        "ManagedIdentityCredential",
        "ClientSecretCredential",
    ]
    recorders = {n: _Recorder(n).cls for n in names}
    for n, klass in recorders.items():
        monkeypatch.setattr(factory, n, klass)
    return recorders
