"""
DeltaLakeManager: authorize, then materialize.

The manager is the entry point most callers need. It authenticates its
configured principal once at construction, then for every read looks up the
table, checks the principal's privileges and only then touches storage.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Optional

import polars as pl
import pyarrow as pa

from brickreader.api import MetastoreClient, Transport
from brickreader.config import ManagerConfig
from brickreader.exceptions import (
    AccessDeniedError,
    AuthenticationFailedError,
    TableLocationNotFoundError,
    WriteNotSupportedError,
)
from brickreader.materializer import TableMaterializer, empty_table
from brickreader.models import TableInfo
from brickreader.permissions import PermissionResolver

logger = logging.getLogger(__name__)


class ReadStatus(str, Enum):
    OK = "OK"
    DENIED = "DENIED"


@dataclass
class ReadResult:
    """
    Outcome of ``read_table``.

    A denied read is not an error: ``status`` is ``DENIED`` and ``table`` is
    an empty table with no columns.
    """
    table_name: str
    status: ReadStatus
    table: pa.Table
    files: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == ReadStatus.OK

    @property
    def denied(self) -> bool:
        return self.status == ReadStatus.DENIED


class DeltaLakeManager:
    """
    Reads Unity Catalog Delta tables on behalf of one principal.

    Example:
        ```python
        manager = DeltaLakeManager(ManagerConfig.from_env())
        result = manager.read_table("main.sales.orders")
        if result.ok:
            print(result.table.num_rows)
        ```
    """

    def __init__(
        self,
        config: ManagerConfig,
        metastore: Optional[MetastoreClient] = None,
        transport: Optional[Transport] = None,
        materializer: Optional[TableMaterializer] = None,
        strict: Optional[bool] = None,
    ):
        """
        Build the collaborators and authenticate the configured principal.

        Args:
            config: Manager configuration
            metastore: Metadata client (built from ``transport`` if omitted)
            transport: HTTP transport (built from ``config`` if omitted)
            materializer: Table materializer (built from ``config`` if omitted)
            strict: Override ``config.strict_authentication``

        Raises:
            AuthenticationFailedError: Authentication failed in strict mode
        """
        self.config = config
        self.principal = config.principal
        self.transport = transport or Transport(
            config.workspace_host, config.token, timeout=config.request_timeout_seconds
        )
        self.metastore = metastore or MetastoreClient(self.transport)
        self.resolver = PermissionResolver(self.metastore)
        self.materializer = materializer or TableMaterializer(
            credentials=config.storage_credentials,
            max_workers=config.max_concurrent_fetches,
        )

        self.strict = config.strict_authentication if strict is None else strict
        self.authenticated = self.resolver.authenticate_principal(self.principal)
        if not self.authenticated:
            if self.strict:
                raise AuthenticationFailedError(
                    self.principal, "the service token does not resolve to this principal"
                )
            logger.warning(
                f"Principal {self.principal} could not be authenticated; continuing in non-strict mode"
            )

    def _storage_location(self, table_name: str) -> str:
        table = self.metastore.get_table(table_name)
        if not table.storage_location:
            raise TableLocationNotFoundError(table_name)
        return table.storage_location

    def read_table(self, table_name: str, parallel: bool = True) -> ReadResult:
        """
        Read a table into a pyarrow Table if the principal may read it.

        Args:
            table_name: ``catalog.schema.table``
            parallel: Fetch data files concurrently

        Returns:
            ReadResult; ``DENIED`` with an empty table when not authorized

        Raises:
            TableLocationNotFoundError: The table has no storage location
            DatabricksError: Metadata lookups failed (NotFound, ...)
        """
        location = self._storage_location(table_name)

        if not self.resolver.can_read(table_name, self.principal):
            logger.warning(f"Read of {table_name} denied for {self.principal}")
            return ReadResult(table_name=table_name, status=ReadStatus.DENIED, table=empty_table())

        materialized = self.materializer.read(location, parallel=parallel)
        return ReadResult(
            table_name=table_name,
            status=ReadStatus.OK,
            table=materialized.table,
            files=materialized.files,
            skipped_files=materialized.skipped_files,
        )

    def read_table_as_polars(self, table_name: str, parallel: bool = True) -> pl.DataFrame:
        """Same as ``read_table`` but returns a polars DataFrame (empty when denied)."""
        result = self.read_table(table_name, parallel=parallel)
        if result.denied:
            return pl.DataFrame()
        return pl.from_arrow(result.table)

    def write_table(self, table_name: str, data: Any) -> None:
        """
        Write ``data`` to a table.

        Authorization is checked first so callers learn about missing
        privileges, but the write itself is not implemented.

        Raises:
            TableLocationNotFoundError: The table has no storage location
            AccessDeniedError: The principal lacks MODIFY
            WriteNotSupportedError: Always, once authorized
        """
        self._storage_location(table_name)
        if not self.resolver.can_write(table_name, self.principal):
            raise AccessDeniedError(self.principal, table_name, "write")
        raise WriteNotSupportedError(table_name)

    def list_tables(self, catalog_name: str, schema_name: str) -> Iterator[TableInfo]:
        """Tables of a schema, across all result pages."""
        return self.metastore.iter_tables(catalog_name, schema_name)
