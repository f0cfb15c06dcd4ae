"""Test fixtures for brickreader."""

from .model_factories import (
    make_assignment,
    make_current_user,
    make_fragment,
    make_owner,
    make_permissions,
    make_table_info,
    parquet_bytes,
    write_delta_table,
)

__all__ = [
    "make_owner",
    "make_assignment",
    "make_permissions",
    "make_table_info",
    "make_current_user",
    "make_fragment",
    "parquet_bytes",
    "write_delta_table",
]
