"""
Configuration for brickreader.

Credentials are held in explicit configuration objects that are passed to the
manager. The environment is only consulted by the ``from_env`` constructors,
which the command-line entry point calls once at startup.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional

from pydantic import Field, field_validator

from brickreader.exceptions import ConfigurationError
from brickreader.models.base import BaseCatalogModel

logger = logging.getLogger(__name__)

_TRUTHY = ("1", "true", "yes", "on")


def _get_env(*names: str) -> Optional[str]:
    """Return the first non-empty environment variable among ``names``."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def _require_env(*names: str) -> str:
    value = _get_env(*names)
    if value is None:
        raise ConfigurationError(f"{' or '.join(names)} not set")
    return value


class AzureStorageCredentials(BaseCatalogModel):
    """
    Service principal used to read table data from Azure Data Lake Storage Gen2.

    These credentials are independent of the workspace token: the metadata
    service authorizes the principal, the storage account serves the bytes.
    """
    account_name: str = Field(..., description="Storage account name")
    client_id: str = Field(..., description="Application (client) ID")
    client_secret: str = Field(..., repr=False, description="Client secret")
    tenant_id: str = Field(..., description="Directory (tenant) ID")

    def to_storage_options(self) -> Dict[str, str]:
        """Credentials as a flat option map, using the Delta storage option keys."""
        return {
            "azure_storage_account_name": self.account_name,
            "azure_client_id": self.client_id,
            "azure_client_secret": self.client_secret,
            "azure_tenant_id": self.tenant_id,
        }

    @classmethod
    def from_env(cls) -> "AzureStorageCredentials":
        """
        Build credentials from ``AZURE_STORAGE_ACCOUNT_NAME``, ``AZURE_CLIENT_ID``,
        ``AZURE_CLIENT_SECRET`` and ``AZURE_TENANT_ID``.

        Raises:
            ConfigurationError: If any of the variables is missing
        """
        return cls(
            account_name=_require_env("AZURE_STORAGE_ACCOUNT_NAME"),
            client_id=_require_env("AZURE_CLIENT_ID"),
            client_secret=_require_env("AZURE_CLIENT_SECRET"),
            tenant_id=_require_env("AZURE_TENANT_ID"),
        )


class ManagerConfig(BaseCatalogModel):
    """Everything DeltaLakeManager needs at construction time."""
    workspace_host: str = Field(..., description="Workspace host, e.g. adb-123.11.azuredatabricks.net")
    token: str = Field(..., repr=False, description="Service bearer token for the metadata service")
    principal: str = Field(..., description="User, group or service principal to authorize")
    storage_credentials: Optional[AzureStorageCredentials] = Field(
        None, description="Object store credentials (required for abfss:// locations)"
    )
    max_concurrent_fetches: Optional[int] = Field(
        None, ge=1, description="Upper bound on parallel file downloads (default: 4 x CPU, max 32)"
    )
    strict_authentication: bool = Field(
        True, description="Refuse to construct the manager when authentication fails"
    )
    request_timeout_seconds: float = Field(60.0, gt=0, description="Timeout for metadata requests")

    @field_validator("workspace_host")
    @classmethod
    def normalize_host(cls, v: str) -> str:
        """Strip whitespace, the scheme and any trailing slash."""
        host = v.strip()
        for scheme in ("https://", "http://"):
            if host.startswith(scheme):
                host = host[len(scheme):]
        host = host.rstrip("/")
        if not host:
            raise ValueError("workspace_host must not be empty")
        return host

    @classmethod
    def from_env(cls, require_storage: bool = False) -> "ManagerConfig":
        """
        Build a configuration from environment variables.

        Reads ``DATABRICKS_HOST`` (or ``WORKSPACE_NAME``), ``DATABRICKS_TOKEN``
        (or ``DB_TOKEN``), ``DATABRICKS_PRINCIPAL`` (or ``USER_NAME``),
        ``BRICKREADER_MAX_CONCURRENT_FETCHES`` and ``BRICKREADER_STRICT_AUTH``.
        Storage credentials are loaded when ``AZURE_STORAGE_ACCOUNT_NAME`` is
        set, or unconditionally with ``require_storage=True``.

        Raises:
            ConfigurationError: If a required variable is missing or invalid
        """
        storage_credentials = None
        if require_storage or _get_env("AZURE_STORAGE_ACCOUNT_NAME"):
            storage_credentials = AzureStorageCredentials.from_env()

        max_fetches = _get_env("BRICKREADER_MAX_CONCURRENT_FETCHES")
        strict = _get_env("BRICKREADER_STRICT_AUTH")

        try:
            return cls(
                workspace_host=_require_env("DATABRICKS_HOST", "WORKSPACE_NAME"),
                token=_require_env("DATABRICKS_TOKEN", "DB_TOKEN"),
                principal=_require_env("DATABRICKS_PRINCIPAL", "USER_NAME"),
                storage_credentials=storage_credentials,
                max_concurrent_fetches=int(max_fetches) if max_fetches else None,
                strict_authentication=strict.lower() in _TRUTHY if strict else True,
            )
        except ValueError as e:
            # int() failures and pydantic.ValidationError are both ValueErrors
            if isinstance(e, ConfigurationError):
                raise
            raise ConfigurationError(f"Invalid configuration: {e}") from e
