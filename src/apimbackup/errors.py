"""Exception hierarchy for the backup tool.

Every error is fatal: the CLI driver maps any :class:`ApimBackupError` to a
formatted message and exit code 1.
"""

from __future__ import annotations


class ApimBackupError(Exception):
    """Base class for all errors raised by apimbackup."""


class ConfigurationError(ApimBackupError):
    """Raised when mandatory parameters are missing or invalid."""


class AuthenticationError(ApimBackupError):
    """Raised when an access token cannot be obtained."""


class StorageKeyError(ApimBackupError):
    """Raised when the storage account key cannot be looked up."""


class BackupRequestError(ApimBackupError):
    """Raised when the backup request is rejected or cannot be sent.

    Attributes:
        status_code: HTTP status of the response, or ``None`` for
            transport-level failures.
        body: Raw response body text, if any.
    """

    def __init__(
        self, message: str, *, status_code: int | None = None, body: str | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ConflictError(BackupRequestError):
    """Raised on HTTP 409: a backup operation is already running for the service."""

    def __init__(self, service_id: str, *, body: str | None = None) -> None:
        message = (
            "HTTP 409 Conflict: an existing backup operation is already in progress "
            "for this resource. The management API runs one backup at a time per "
            "service; check the activity log of "
            f"{service_id} and re-run once the current operation has finished."
        )
        super().__init__(message, status_code=409, body=body)
        self.service_id = service_id
