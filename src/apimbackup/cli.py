"""Command line entry point that starts an API Management backup into blob storage."""

from __future__ import annotations

import logging
from typing import Annotated, Any, Optional

import typer
from pydantic import ValidationError

from apimbackup.apim import BackupSettings, ManagementClient
from apimbackup.azure.auth import AuthConfig, acquire_token, management_scope, redact_token
from apimbackup.errors import (
    ApimBackupError,
    BackupRequestError,
    ConfigurationError,
    ConflictError,
)
from apimbackup.output import print_json_document, print_status

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False)

# Field name -> CLI option, for readable validation messages.
_OPTION_NAMES = {
    "strategy": "--auth-strategy",
    "tenant_id": "--tenant-id",
    "client_id": "--client-id",
    "client_secret": "--client-secret",
    "authority": "--authority",
    "subscription_id": "--subscription-id",
    "resource_group": "--resource-group",
    "service_name": "--service-name",
    "storage_account": "--storage-account",
    "container_name": "--container",
    "backup_name": "--backup-name",
    "access_method": "--access-method",
    "storage_account_key": "--storage-account-key",
    "storage_resource_group": "--storage-resource-group",
    "managed_identity_client_id": "--managed-identity-client-id",
    "api_version": "--api-version",
    "management_endpoint": "--management-endpoint",
    "timeout": "--timeout",
}

DRY_RUN_KEY_PLACEHOLDER = "<looked up at run time>"


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("apimbackup").setLevel(level)


def _validation_message(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else ""
        option = _OPTION_NAMES.get(field, field)
        message = error["msg"].removeprefix("Value error, ")
        problems.append(f"{option}: {message}" if option else message)
    return "Invalid parameters: " + "; ".join(problems)


def _load_settings(
    auth_values: dict[str, Any], backup_values: dict[str, Any]
) -> tuple[AuthConfig, BackupSettings]:
    """Build both settings models; explicit options win over the environment."""
    try:
        auth = AuthConfig(**{k: v for k, v in auth_values.items() if v is not None})
        settings = BackupSettings(
            **{k: v for k, v in backup_values.items() if v is not None}
        )
    except ValidationError as exc:
        raise ConfigurationError(_validation_message(exc)) from exc
    return auth, settings


def _failure_document(exc: ApimBackupError) -> dict[str, Any]:
    document: dict[str, Any] = {
        "status": "Failed",
        "error": type(exc).__name__,
        "message": str(exc),
    }
    if isinstance(exc, BackupRequestError):
        document["statusCode"] = exc.status_code
        document["body"] = exc.body
    return document


def _report_failure(exc: ApimBackupError, json_output: bool) -> None:
    if isinstance(exc, ConfigurationError):
        print_status(str(exc), "error")
    elif isinstance(exc, ConflictError):
        print_status(f"Backup already in progress. {exc}", "error")
    elif isinstance(exc, BackupRequestError):
        print_status(f"Backup request failed. {exc}", "error")
    else:
        print_status(f"{type(exc).__name__}: {exc}", "error")

    if isinstance(exc, BackupRequestError) and exc.body:
        print_status(f"Response body: {exc.body}", "error")

    if json_output:
        print_json_document(_failure_document(exc))


def _run(
    auth: AuthConfig,
    settings: BackupSettings,
    *,
    dry_run: bool,
    json_output: bool,
) -> dict[str, Any]:
    stderr = json_output

    # Step 1: token
    print_status(f"Authenticating ({auth.strategy.value})...", stderr=stderr)
    access_token = acquire_token(
        auth, management_scope(settings.management_endpoint), timeout=settings.timeout
    )
    print_status(
        f"Access token acquired ({redact_token(access_token.token)})",
        "success",
        stderr=stderr,
    )

    client = ManagementClient(
        access_token.token,
        endpoint=settings.management_endpoint,
        api_version=settings.api_version,
        timeout=settings.timeout,
    )

    storage_key = None
    if settings.needs_key_lookup:
        if dry_run:
            storage_key = DRY_RUN_KEY_PLACEHOLDER
        else:
            print_status(
                f"Looking up key of storage account {settings.storage_account}...",
                stderr=stderr,
            )
            storage_key = client.get_storage_account_key(
                settings.subscription_id,
                settings.storage_resource_group,
                settings.storage_account,
            )
    request = settings.to_request(storage_key)

    if dry_run:
        description = client.describe_request(request)
        print_status("Dry run: the backup request was not sent.", "warning", stderr=stderr)
        print_status(f"{description['method']} {description['url']}", stderr=stderr)
        print_status(
            f"Authorization: {description['headers']['Authorization']}", stderr=stderr
        )
        print_status(f"Body: {description['body']}", stderr=stderr)
        return {"dryRun": True, "request": description}

    # Step 2: backup
    print_status(
        f"Requesting backup of {settings.service_name} to "
        f"{settings.storage_account}/{settings.container_name}/{settings.backup_name}...",
        stderr=stderr,
    )
    response = client.request_backup(request)
    print_status("Backup operation started.", "success", stderr=stderr)
    print_status(f"Status: {response.status}", stderr=stderr)
    print_status(f"Operation id: {response.operation_id or 'n/a'}", stderr=stderr)
    print_status(
        "The backup completes asynchronously; check the service's activity log "
        "for its outcome.",
        stderr=stderr,
    )
    return {
        **response.to_dict(),
        "service": request.service_id,
        "backupName": request.backup_name,
    }


@app.command()
def backup(
    tenant_id: Annotated[
        Optional[str], typer.Option("--tenant-id", help="Entra ID tenant id.")
    ] = None,
    client_id: Annotated[
        Optional[str],
        typer.Option("--client-id", help="Client id of the app registration."),
    ] = None,
    client_secret: Annotated[
        Optional[str],
        typer.Option("--client-secret", help="Client secret of the app registration."),
    ] = None,
    subscription_id: Annotated[
        Optional[str],
        typer.Option("--subscription-id", help="Subscription of the APIM service."),
    ] = None,
    resource_group: Annotated[
        Optional[str],
        typer.Option(
            "--resource-group",
            "--apim-resource-group",
            help="Resource group of the APIM service.",
        ),
    ] = None,
    service_name: Annotated[
        Optional[str],
        typer.Option(
            "--service-name", "--apim-service-name", help="Name of the APIM service."
        ),
    ] = None,
    storage_account: Annotated[
        Optional[str],
        typer.Option("--storage-account", help="Destination storage account name."),
    ] = None,
    container_name: Annotated[
        Optional[str],
        typer.Option("--container", help="Destination blob container."),
    ] = None,
    backup_name: Annotated[
        Optional[str],
        typer.Option("--backup-name", help="Name of the backup blob."),
    ] = None,
    access_method: Annotated[
        Optional[str],
        typer.Option(
            "--access-method",
            help="Storage access: 'managed-identity' (default) or 'key'.",
        ),
    ] = None,
    storage_account_key: Annotated[
        Optional[str],
        typer.Option("--storage-account-key", help="Storage key for key access."),
    ] = None,
    storage_resource_group: Annotated[
        Optional[str],
        typer.Option(
            "--storage-resource-group",
            help="Resource group of the storage account, to look its key up.",
        ),
    ] = None,
    managed_identity_client_id: Annotated[
        Optional[str],
        typer.Option(
            "--managed-identity-client-id",
            help="Client id of a user-assigned identity on the APIM service.",
        ),
    ] = None,
    auth_strategy: Annotated[
        Optional[str],
        typer.Option(
            "--auth-strategy",
            help="client_secret (default), managed_identity, cli or default.",
        ),
    ] = None,
    authority: Annotated[
        Optional[str], typer.Option("--authority", help="Identity provider host.")
    ] = None,
    api_version: Annotated[
        Optional[str],
        typer.Option("--api-version", help="api-version of the backup call."),
    ] = None,
    management_endpoint: Annotated[
        Optional[str],
        typer.Option("--management-endpoint", help="Resource Manager endpoint."),
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", help="Seconds to wait for each HTTP call."),
    ] = None,
    json_output: Annotated[
        bool, typer.Option("--json", help="Write a JSON result document to stdout.")
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Authenticate and show the request without sending it."),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging.")
    ] = False,
):
    """
    Start an asynchronous backup of an API Management service.

    Authenticates with the client-credentials flow, then asks Azure Resource
    Manager to back the service up into a blob container. The command returns
    once the operation has been accepted; it does not wait for completion.

    Every option falls back to its environment variable (e.g. AZURE_TENANT_ID,
    APIM_SERVICE_NAME, STORAGE_ACCOUNT_NAME).
    """
    _configure_logging(verbose)

    try:
        auth, settings = _load_settings(
            {
                "strategy": auth_strategy,
                "tenant_id": tenant_id,
                "client_id": client_id,
                "client_secret": client_secret,
                "authority": authority,
            },
            {
                "subscription_id": subscription_id,
                "resource_group": resource_group,
                "service_name": service_name,
                "storage_account": storage_account,
                "container_name": container_name,
                "backup_name": backup_name,
                "access_method": access_method,
                "storage_account_key": storage_account_key,
                "storage_resource_group": storage_resource_group,
                "managed_identity_client_id": managed_identity_client_id,
                "api_version": api_version,
                "management_endpoint": management_endpoint,
                "timeout": timeout,
            },
        )
        result = _run(auth, settings, dry_run=dry_run, json_output=json_output)
    except ApimBackupError as exc:
        logger.debug("Backup failed", exc_info=True)
        _report_failure(exc, json_output)
        raise typer.Exit(1)

    if json_output:
        print_json_document(result)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
