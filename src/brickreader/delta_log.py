"""
Delta transaction log access.

Opens a Delta table with ``deltalake`` (the delta-rs Python binding) and
reports the data files that make up its current version. Log replay,
checkpoints and ``_last_checkpoint`` handling are delta-rs's; this module
only rejects tables whose reader features would make a plain Parquet read
return wrong rows.
"""

import logging
from typing import Dict, FrozenSet, List, Optional
from urllib.parse import unquote, urlparse

from deltalake import DeltaTable
from deltalake.exceptions import DeltaProtocolError, TableNotFoundError

from brickreader.exceptions import DeltaLogNotFoundError, UnsupportedTableFeatureError

logger = logging.getLogger(__name__)

# Reader features that do not change which rows or columns a Parquet file yields.
SUPPORTED_READER_FEATURES: FrozenSet[str] = frozenset({"timestampNtz", "v2Checkpoint", "vacuumProtocolCheck"})
MAX_READER_VERSION = 3
COLUMN_MAPPING_MODE = "delta.columnMapping.mode"


def delta_table_uri(location: str) -> str:
    """Location in the form delta-rs expects (local paths without ``file://``)."""
    parsed = urlparse(location)
    if parsed.scheme == "file":
        return unquote(parsed.path)
    return location


class DeltaLog:
    """
    Transaction log of one Delta table.

    Example:
        ```python
        log = DeltaLog("abfss://lake@acct.dfs.core.windows.net/tables/orders",
                       storage_options=credentials.to_storage_options())
        for path in log.active_files():
            print(path)
        ```
    """

    def __init__(self, location: str, storage_options: Optional[Dict[str, str]] = None):
        self.location = location
        self.storage_options = storage_options
        self.version: Optional[int] = None

    def _open(self) -> DeltaTable:
        try:
            return DeltaTable(delta_table_uri(self.location), storage_options=self.storage_options)
        except TableNotFoundError as e:
            raise DeltaLogNotFoundError(self.location) from e
        except DeltaProtocolError as e:
            raise UnsupportedTableFeatureError(self.location, [str(e)]) from e

    def check_protocol(self, table: DeltaTable) -> None:
        """
        Reject tables a file-by-file Parquet read cannot reproduce.

        Raises:
            UnsupportedTableFeatureError: Deletion vectors, column mapping or
                any other reader feature outside SUPPORTED_READER_FEATURES
        """
        protocol = table.protocol()
        if protocol.min_reader_version > MAX_READER_VERSION:
            raise UnsupportedTableFeatureError(self.location, [f"minReaderVersion={protocol.min_reader_version}"])

        unsupported = sorted(set(protocol.reader_features or []) - SUPPORTED_READER_FEATURES)
        if unsupported:
            raise UnsupportedTableFeatureError(self.location, unsupported)

        mode = table.metadata().configuration.get(COLUMN_MAPPING_MODE, "none")
        if protocol.min_reader_version >= 2 and mode != "none":
            raise UnsupportedTableFeatureError(self.location, [f"columnMapping ({mode})"])

    def active_files(self) -> List[str]:
        """
        Open the table and return its current data files.

        Paths are URL-decoded and relative to the table root unless the log
        stores absolute URIs.

        Raises:
            DeltaLogNotFoundError: The location has no transaction log
            UnsupportedTableFeatureError: See ``check_protocol``
        """
        table = self._open()
        self.check_protocol(table)
        self.version = table.version()
        files = [unquote(path) for path in table.files()]
        logger.info(f"Delta log at {self.location} is at version {self.version}: {len(files)} active files")
        return files
