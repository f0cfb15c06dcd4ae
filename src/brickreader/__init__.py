"""
Brickreader - Permission-checked reads of Unity Catalog Delta tables.

This library authorizes a principal against the Unity Catalog metastore and,
once authorized, materializes a Delta table spread over many Parquet files
into a single in-memory pyarrow Table.

Key Features:
- Ownership and grant resolution across catalog, schema and table
- Delta file listing through deltalake (delta-rs), refusing deletion vectors
- Concurrent or serial file fetches from ADLS Gen2 or local storage
- Failures reported with databricks-sdk error classes
- Pydantic models for every metastore response

Quick Start:
    from brickreader import DeltaLakeManager, ManagerConfig

    manager = DeltaLakeManager(ManagerConfig.from_env())

    result = manager.read_table("main.sales.orders")
    if result.denied:
        print("no access")
    else:
        print(result.table.num_rows)

    # Authorization only
    manager.resolver.can_write("main.sales.orders", manager.principal)
"""

__version__ = "0.1.0"

# =============================================================================
# Facade
# =============================================================================

from brickreader.manager import (
    DeltaLakeManager,
    ReadResult,
    ReadStatus,
)

# =============================================================================
# Configuration
# =============================================================================

from brickreader.config import (
    AzureStorageCredentials,
    ManagerConfig,
)

# =============================================================================
# Authorization
# =============================================================================

from brickreader.api import MetastoreClient, Transport
from brickreader.permissions import PermissionResolver

# =============================================================================
# Materialization
# =============================================================================

from brickreader.delta_log import DeltaLog
from brickreader.materializer import (
    MaterializedTable,
    SchemaMismatchPolicy,
    TableMaterializer,
    merge_fragments,
)

# =============================================================================
# Models and errors
# =============================================================================

from brickreader.models import (
    READ_PRIVILEGES,
    WRITE_PRIVILEGES,
    PrivilegeSet,
    SecurableName,
    SecurableType,
    TableInfo,
)
from brickreader.exceptions import (
    AccessDeniedError,
    AuthenticationFailedError,
    BrickReaderError,
    ConfigurationError,
    DeltaLogNotFoundError,
    SchemaMismatchError,
    TableLocationNotFoundError,
    UnknownSecurableTypeError,
    UnsupportedStorageError,
    UnsupportedTableFeatureError,
    WriteNotSupportedError,
)

__all__ = [
    "__version__",
    # Facade
    "DeltaLakeManager",
    "ReadResult",
    "ReadStatus",
    # Configuration
    "ManagerConfig",
    "AzureStorageCredentials",
    # Authorization
    "Transport",
    "MetastoreClient",
    "PermissionResolver",
    # Materialization
    "DeltaLog",
    "TableMaterializer",
    "MaterializedTable",
    "SchemaMismatchPolicy",
    "merge_fragments",
    # Models
    "SecurableType",
    "SecurableName",
    "TableInfo",
    "PrivilegeSet",
    "READ_PRIVILEGES",
    "WRITE_PRIVILEGES",
    # Errors
    "BrickReaderError",
    "ConfigurationError",
    "UnknownSecurableTypeError",
    "AuthenticationFailedError",
    "AccessDeniedError",
    "TableLocationNotFoundError",
    "DeltaLogNotFoundError",
    "UnsupportedStorageError",
    "UnsupportedTableFeatureError",
    "SchemaMismatchError",
    "WriteNotSupportedError",
]
