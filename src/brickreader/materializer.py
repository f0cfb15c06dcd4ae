"""
Table materializer.

Turns a Delta table location into a single in-memory ``pyarrow.Table``:
the transaction log gives the active data files, each file is fetched from the
object store (concurrently or one at a time), decoded from Parquet and the
fragments are concatenated in listing order.
"""

import io
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

import pyarrow as pa
import pyarrow.parquet as pq

from brickreader.config import AzureStorageCredentials
from brickreader.delta_log import DeltaLog
from brickreader.exceptions import SchemaMismatchError
from brickreader.storage import ObjectStore, object_key, open_object_store
from brickreader.storage.storage_factory import AZURE_SCHEMES

logger = logging.getLogger(__name__)

StoreFactory = Callable[[str, Optional[AzureStorageCredentials]], ObjectStore]


class SchemaMismatchPolicy(str, Enum):
    """What to do with a data file whose schema differs from the table so far."""
    SKIP = "SKIP"
    RAISE = "RAISE"


def default_max_workers() -> int:
    return min(32, (os.cpu_count() or 1) * 4)


@dataclass
class MaterializedTable:
    """Result of materializing one table location."""
    table: pa.Table
    files: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)

    @property
    def num_rows(self) -> int:
        return self.table.num_rows


def empty_table() -> pa.Table:
    return pa.table({})


def merge_fragments(
    fragments: Sequence[Tuple[str, pa.Table]],
    policy: SchemaMismatchPolicy = SchemaMismatchPolicy.SKIP,
) -> Tuple[pa.Table, List[str]]:
    """
    Concatenate decoded fragments in the given order.

    The first fragment fixes the schema. A later fragment with a different
    schema is dropped (``SKIP``) or aborts the merge (``RAISE``).

    Args:
        fragments: ``(file key, table)`` pairs in listing order
        policy: Schema mismatch policy

    Returns:
        The merged table and the keys of skipped fragments

    Raises:
        SchemaMismatchError: Only with ``SchemaMismatchPolicy.RAISE``
    """
    if not fragments:
        return empty_table(), []

    first_key, accumulated = fragments[0]
    tables = [accumulated]
    skipped: List[str] = []

    for key, fragment in fragments[1:]:
        if not fragment.schema.equals(accumulated.schema, check_metadata=False):
            if policy == SchemaMismatchPolicy.RAISE:
                raise SchemaMismatchError(key, accumulated.schema.names, fragment.schema.names)
            logger.error(
                f"Dropping {key}: schema {fragment.schema.names} does not match "
                f"{accumulated.schema.names} (from {first_key})"
            )
            skipped.append(key)
            continue
        tables.append(fragment)

    return pa.concat_tables(tables), skipped


class TableMaterializer:
    """
    Reads every active data file of a Delta table into one pyarrow Table.

    All-or-nothing: any failed fetch or decode fails the whole read. In
    parallel mode every in-flight fetch finishes before the first error is
    re-raised; fetches are not cancelled.
    """

    def __init__(
        self,
        credentials: Optional[AzureStorageCredentials] = None,
        store_factory: StoreFactory = open_object_store,
        max_workers: Optional[int] = None,
        on_schema_mismatch: SchemaMismatchPolicy = SchemaMismatchPolicy.SKIP,
    ):
        self.credentials = credentials
        self.store_factory = store_factory
        self.max_workers = max_workers or default_max_workers()
        self.on_schema_mismatch = on_schema_mismatch

    def storage_options(self, location: str) -> Optional[Dict[str, str]]:
        """delta-rs options for ``location``; local tables need none."""
        if self.credentials is None or urlparse(location).scheme.lower() not in AZURE_SCHEMES:
            return None
        return self.credentials.to_storage_options()

    def list_files(self, location: str, store: ObjectStore) -> List[str]:
        """Object keys of the table's active data files, sorted."""
        paths = DeltaLog(location, storage_options=self.storage_options(location)).active_files()
        return sorted(object_key(path, store.root_uri) for path in paths)

    def _fetch_serial(self, store: ObjectStore, keys: List[str]) -> List[bytes]:
        return [store.read_bytes(key) for key in keys]

    def _fetch_parallel(self, store: ObjectStore, keys: List[str]) -> List[bytes]:
        workers = max(1, min(self.max_workers, len(keys)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(store.read_bytes, key) for key in keys]
        # The pool has drained here; result() re-raises the first failure in listing order.
        return [future.result() for future in futures]

    def read(self, location: str, parallel: bool = True) -> MaterializedTable:
        """
        Materialize the table stored at ``location``.

        Args:
            location: Table storage location (``abfss://...``, ``file://...`` or a path)
            parallel: Fetch files concurrently

        Returns:
            MaterializedTable with the merged table, the files read and any skipped files

        Raises:
            DeltaLogNotFoundError: The location has no transaction log
            UnsupportedTableFeatureError: The table needs deletion vectors, column mapping, ...
            FileNotFoundError: A listed data file is missing
            SchemaMismatchError: With ``SchemaMismatchPolicy.RAISE``
        """
        store = self.store_factory(location, self.credentials)
        keys = self.list_files(location, store)
        logger.info(f"Reading {len(keys)} files from {location} ({'parallel' if parallel else 'serial'})")

        if not keys:
            return MaterializedTable(table=empty_table())

        payloads = self._fetch_parallel(store, keys) if parallel else self._fetch_serial(store, keys)
        fragments = [(key, pq.read_table(io.BytesIO(data))) for key, data in zip(keys, payloads)]
        table, skipped = merge_fragments(fragments, self.on_schema_mismatch)

        logger.info(f"Materialized {table.num_rows} rows from {len(keys) - len(skipped)} files of {location}")
        return MaterializedTable(table=table, files=keys, skipped_files=skipped)
