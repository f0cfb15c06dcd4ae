"""
Unit tests for DeltaLog against local Delta tables.
"""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from deltalake import DeltaTable, write_deltalake

from brickreader.delta_log import DeltaLog, delta_table_uri
from brickreader.exceptions import DeltaLogNotFoundError, UnsupportedTableFeatureError
from tests.fixtures import make_fragment, write_delta_table


def make_delta_table(min_reader_version: int, reader_features=None, configuration=None) -> MagicMock:
    table = MagicMock()
    table.protocol.return_value = SimpleNamespace(
        min_reader_version=min_reader_version,
        min_writer_version=7,
        reader_features=reader_features,
        writer_features=reader_features,
    )
    table.metadata.return_value = SimpleNamespace(configuration=configuration or {})
    return table


class TestActiveFiles:
    """Tests for the active file set."""

    def test_single_commit(self, tmp_path: Path) -> None:
        keys = write_delta_table(tmp_path, [make_fragment(0), make_fragment(2), make_fragment(4)])

        log = DeltaLog(str(tmp_path))
        assert sorted(log.active_files()) == keys
        assert log.version == 0

    def test_remove_drops_file(self, tmp_path: Path) -> None:
        keys = write_delta_table(tmp_path, [make_fragment(0), make_fragment(2), make_fragment(4)], removed=[1])

        log = DeltaLog(str(tmp_path))
        assert sorted(log.active_files()) == [keys[0], keys[2]]
        assert log.version == 1

    def test_file_uri_location(self, tmp_path: Path) -> None:
        keys = write_delta_table(tmp_path, [make_fragment(0)], partition_dirs=["day=1"])

        assert DeltaLog(tmp_path.as_uri()).active_files() == keys

    def test_missing_log(self, tmp_path: Path) -> None:
        with pytest.raises(DeltaLogNotFoundError):
            DeltaLog(str(tmp_path)).active_files()


class TestCheckpoints:
    """Tests for tables whose log has been checkpointed."""

    def test_checkpoint_then_newer_commits(self, tmp_path: Path) -> None:
        """Files added before and after a checkpoint are all active."""
        for i in range(3):
            write_deltalake(str(tmp_path), make_fragment(i * 2), mode="append")
            if i == 1:
                DeltaTable(str(tmp_path)).create_checkpoint()

        log = DeltaLog(str(tmp_path))
        files = log.active_files()

        assert len(files) == 3
        assert log.version == 2
        assert all(f.endswith(".parquet") for f in files)


class TestProtocol:
    """Tests for reader feature checks."""

    def test_deletion_vectors_rejected(self, tmp_path: Path) -> None:
        """A table with deletion vectors is refused instead of returning deleted rows."""
        write_delta_table(tmp_path, [make_fragment(0, count=4)], reader_features=["deletionVectors"])

        with pytest.raises(UnsupportedTableFeatureError) as exc_info:
            DeltaLog(str(tmp_path)).active_files()
        assert exc_info.value.features == ["deletionVectors"]

    def test_plain_protocol_accepted(self) -> None:
        DeltaLog("/t").check_protocol(make_delta_table(1))

    def test_harmless_features_accepted(self) -> None:
        DeltaLog("/t").check_protocol(make_delta_table(3, ["timestampNtz", "v2Checkpoint"]))

    def test_column_mapping_rejected(self) -> None:
        table = make_delta_table(2, configuration={"delta.columnMapping.mode": "name"})

        with pytest.raises(UnsupportedTableFeatureError):
            DeltaLog("/t").check_protocol(table)

    def test_reader_version_too_new(self) -> None:
        with pytest.raises(UnsupportedTableFeatureError):
            DeltaLog("/t").check_protocol(make_delta_table(4))


class TestDeltaTableUri:
    """Tests for location normalization."""

    def test_file_uri(self) -> None:
        assert delta_table_uri("file:///data/tables/orders") == "/data/tables/orders"

    def test_remote_unchanged(self) -> None:
        location = "abfss://lake@acct.dfs.core.windows.net/tables/orders"
        assert delta_table_uri(location) == location
