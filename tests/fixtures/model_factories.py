"""
Factory functions for creating test models and test data.

These factories create brickreader models with sensible defaults for testing,
plus helpers that write small Delta tables to a local directory. All model
factories accept overrides for any field.
"""

import io
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import pyarrow as pa
import pyarrow.parquet as pq

from brickreader.models import (
    CurrentUser,
    OwnerRecord,
    PrivilegeAssignment,
    PrivilegeAssignmentList,
    TableInfo,
)
from brickreader.models.enums import TableType

MODIFICATION_TIME = 1700000000000


def make_owner(full_name: str = "main", owner: Optional[str] = "admins") -> OwnerRecord:
    """Create an OwnerRecord for testing."""
    return OwnerRecord(full_name=full_name, owner=owner)


def make_assignment(
    principal: str = "alice@example.com",
    privileges: Optional[List[str]] = None,
) -> PrivilegeAssignment:
    """Create a PrivilegeAssignment as returned by the service (untagged)."""
    return PrivilegeAssignment(principal=principal, privileges=privileges or [])


def make_permissions(*assignments: PrivilegeAssignment) -> PrivilegeAssignmentList:
    """Wrap assignments in a permissions response."""
    return PrivilegeAssignmentList(privilege_assignments=list(assignments))


def make_table_info(
    full_name: str = "main.sales.orders",
    storage_location: Optional[str] = "abfss://lake@acct.dfs.core.windows.net/sales/orders",
    owner: Optional[str] = "admins",
    **kwargs: Any,
) -> TableInfo:
    """
    Create a TableInfo for testing.

    Args:
        full_name: ``catalog.schema.table``
        storage_location: Table root (None for views)
        owner: Table owner
        **kwargs: Additional TableInfo fields

    Returns:
        TableInfo instance
    """
    catalog, schema, name = full_name.split(".")
    defaults: Dict[str, Any] = {
        "name": name,
        "catalog_name": catalog,
        "schema_name": schema,
        "full_name": full_name,
        "owner": owner,
        "table_type": TableType.EXTERNAL,
        "data_source_format": "DELTA",
        "storage_location": storage_location,
    }
    defaults.update(kwargs)
    return TableInfo(**defaults)


def make_current_user(user_name: str = "alice@example.com") -> CurrentUser:
    """Create a CurrentUser as decoded from the SCIM Me endpoint."""
    return CurrentUser.model_validate({"id": "1234", "userName": user_name, "active": True})


# =============================================================================
# Parquet / Delta helpers
# =============================================================================

def parquet_bytes(table: pa.Table) -> bytes:
    """Serialize a pyarrow Table to Parquet bytes."""
    sink = io.BytesIO()
    pq.write_table(table, sink)
    return sink.getvalue()


def make_fragment(start: int, count: int = 2) -> pa.Table:
    """A small ``id``/``name`` table with ids ``start .. start + count - 1``."""
    ids = list(range(start, start + count))
    return pa.table({"id": ids, "name": [f"row-{i}" for i in ids]})


DELTA_TYPES = {
    pa.int32(): "integer",
    pa.int64(): "long",
    pa.float64(): "double",
    pa.string(): "string",
    pa.bool_(): "boolean",
}


def delta_schema_string(schema: pa.Schema) -> str:
    """Delta ``schemaString`` for a flat pyarrow schema."""
    fields = [
        {"name": f.name, "type": DELTA_TYPES[f.type], "nullable": True, "metadata": {}}
        for f in schema
    ]
    return json.dumps({"type": "struct", "fields": fields})


def write_delta_table(
    root: Path,
    fragments: Sequence[pa.Table],
    removed: Sequence[int] = (),
    partition_dirs: Optional[Sequence[str]] = None,
    reader_features: Optional[Sequence[str]] = None,
    configuration: Optional[Dict[str, str]] = None,
) -> List[str]:
    """
    Write a minimal Delta table: one Parquet file per fragment and one commit
    adding each of them, then one commit removing the files at ``removed``.

    Args:
        root: Table root directory
        fragments: Tables to write, in order; the first one fixes the table schema
        removed: Indexes of fragments to remove in a final commit
        partition_dirs: Optional sub directory per fragment (e.g. ``day=1``)
        reader_features: Table features for a reader version 3 protocol
        configuration: Table properties (``delta.columnMapping.mode``, ...)

    Returns:
        Relative keys of the data files, in fragment order
    """
    log_dir = root / "_delta_log"
    log_dir.mkdir(parents=True, exist_ok=True)

    keys: List[str] = []
    sizes: List[int] = []
    for i, fragment in enumerate(fragments):
        sub = partition_dirs[i] if partition_dirs else ""
        key = f"{sub}/part-{i:05d}.parquet" if sub else f"part-{i:05d}.parquet"
        path = root / key
        path.parent.mkdir(parents=True, exist_ok=True)
        data = parquet_bytes(fragment)
        path.write_bytes(data)
        keys.append(key)
        sizes.append(len(data))

    if reader_features:
        protocol = {
            "minReaderVersion": 3,
            "minWriterVersion": 7,
            "readerFeatures": list(reader_features),
            "writerFeatures": list(reader_features),
        }
    else:
        protocol = {"minReaderVersion": 1, "minWriterVersion": 2}

    metadata = {
        "id": "00000000-0000-0000-0000-000000000000",
        "format": {"provider": "parquet", "options": {}},
        "schemaString": delta_schema_string(fragments[0].schema),
        "partitionColumns": [],
        "configuration": dict(configuration or {}),
        "createdTime": MODIFICATION_TIME,
    }

    version = 0
    commit: List[Dict[str, Any]] = [{"protocol": protocol}, {"metaData": metadata}]
    commit += [
        {
            "add": {
                "path": quote(key),
                "partitionValues": {},
                "size": size,
                "modificationTime": MODIFICATION_TIME,
                "dataChange": True,
            }
        }
        for key, size in zip(keys, sizes)
    ]
    _write_commit(log_dir, version, commit)

    if removed:
        version += 1
        _write_commit(
            log_dir,
            version,
            [
                {"remove": {"path": quote(keys[i]), "deletionTimestamp": MODIFICATION_TIME, "dataChange": True}}
                for i in removed
            ],
        )

    return keys


def _write_commit(log_dir: Path, version: int, actions: List[Dict[str, Any]]) -> None:
    lines = "\n".join(json.dumps(action) for action in actions)
    (log_dir / f"{version:020d}.json").write_text(lines + "\n")
