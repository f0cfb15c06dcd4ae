"""
brickreader command line

Reads a Unity Catalog Delta table on behalf of the configured principal, or
reports whether the principal may read or write a securable.

Usage:
    # Read a table (parallel fetch) and print the first 20 rows
    brickreader read main.sales.orders --limit 20

    # Fetch files one at a time and print a polars DataFrame
    brickreader read main.sales.orders --serial --polars

    # Check write access on a table
    brickreader check main.sales.orders --write

Configuration is read from the environment (see ManagerConfig.from_env); a
.env file in the working directory is loaded first.
"""

import argparse
import logging
import sys
from typing import List, Optional

import polars as pl
import requests
from databricks.sdk.errors import (
    BadRequest,
    DatabricksError,
    NotFound,
    NotImplemented,
    PermissionDenied,
    TemporarilyUnavailable,
    TooManyRequests,
    Unauthenticated,
)
from deltalake.exceptions import DeltaError
from dotenv import load_dotenv

from brickreader.config import ManagerConfig
from brickreader.exceptions import (
    AccessDeniedError,
    AuthenticationFailedError,
    BrickReaderError,
    ConfigurationError,
    DeltaLogNotFoundError,
    SchemaMismatchError,
    TableLocationNotFoundError,
    UnsupportedStorageError,
    UnsupportedTableFeatureError,
    WriteNotSupportedError,
)
from brickreader.manager import DeltaLakeManager

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_DENIED = 2


def describe_error(error: Exception) -> str:
    """One-line description of a failure, naming its class of cause."""
    if isinstance(error, PermissionDenied):
        return f"Permission denied: {error}. Check that the service token can read Unity Catalog metadata."
    if isinstance(error, NotFound):
        return f"Resource not found: {error}"
    if isinstance(error, BadRequest):
        return f"Invalid parameter: {error}. Check the securable name."
    if isinstance(error, Unauthenticated):
        return f"Authentication failed: {error}. Check credentials and workspace URL."
    if isinstance(error, (TemporarilyUnavailable, TooManyRequests)):
        return f"Service temporarily unavailable: {error}. Try again later."
    if isinstance(error, NotImplemented):
        return f"Feature not implemented: {error}"
    if isinstance(error, DatabricksError):
        return f"Metadata service error: {error}"
    if isinstance(error, requests.RequestException):
        return f"Network error: {error}"
    if isinstance(error, AuthenticationFailedError):
        return f"{error}. Check DATABRICKS_PRINCIPAL and DATABRICKS_TOKEN."
    if isinstance(error, ConfigurationError):
        return f"Configuration error: {error}"
    if isinstance(error, TableLocationNotFoundError):
        return str(error)
    if isinstance(error, (DeltaLogNotFoundError, UnsupportedStorageError)):
        return f"Storage error: {error}"
    if isinstance(error, UnsupportedTableFeatureError):
        return f"Unsupported table: {error}"
    if isinstance(error, DeltaError):
        return f"Delta log error: {error}"
    if isinstance(error, FileNotFoundError):
        return f"Data file missing: {error}"
    if isinstance(error, SchemaMismatchError):
        return f"Schema mismatch: {error}"
    if isinstance(error, (AccessDeniedError, WriteNotSupportedError)):
        return str(error)
    if isinstance(error, ValueError):
        return f"Invalid response: {error}"
    return f"{type(error).__name__}: {error}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brickreader",
        description="Read Unity Catalog Delta tables with permission checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--env-file", help="Path to a .env file (default: search from the working directory)")
    common.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    common.add_argument(
        "--non-strict",
        action="store_true",
        help="Continue when the principal cannot be authenticated",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    read = subparsers.add_parser("read", parents=[common], help="Read a table")
    read.add_argument("table", help="catalog.schema.table")
    read.add_argument("--serial", action="store_true", help="Fetch data files one at a time")
    read.add_argument("--limit", "-n", type=int, default=10, help="Rows to print (default: 10)")
    read.add_argument("--polars", action="store_true", help="Print as a polars DataFrame")

    check = subparsers.add_parser("check", parents=[common], help="Check read (or write) access to a securable")
    check.add_argument("full_name", help="catalog[.schema[.table]]")
    check.add_argument("--write", action="store_true", help="Check MODIFY instead of SELECT")

    return parser


def _read(manager: DeltaLakeManager, args: argparse.Namespace) -> int:
    result = manager.read_table(args.table, parallel=not args.serial)
    if result.denied:
        print(f"Access denied: {manager.principal} may not read {args.table}")
        return EXIT_DENIED

    if args.polars:
        print(pl.from_arrow(result.table).head(args.limit))
    else:
        print(result.table.slice(0, args.limit))

    print(f"\n{result.table.num_rows} rows from {len(result.files)} files")
    if result.skipped_files:
        print(f"Skipped {len(result.skipped_files)} files with a different schema:")
        for name in result.skipped_files:
            print(f"  - {name}")
    return EXIT_OK


def _check(manager: DeltaLakeManager, args: argparse.Namespace) -> int:
    if args.write:
        allowed = manager.resolver.can_write(args.full_name, manager.principal)
    else:
        allowed = manager.resolver.can_read(args.full_name, manager.principal)
    operation = "write" if args.write else "read"
    verdict = "ALLOWED" if allowed else "DENIED"
    print(f"[{verdict}] {manager.principal} {operation} {args.full_name}")
    return EXIT_OK if allowed else EXIT_DENIED


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.env_file:
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    try:
        config = ManagerConfig.from_env()
        manager = DeltaLakeManager(config, strict=False if args.non_strict else None)
        if args.command == "read":
            return _read(manager, args)
        return _check(manager, args)
    except AccessDeniedError as e:
        print(describe_error(e), file=sys.stderr)
        return EXIT_DENIED
    except (
        BrickReaderError,
        DatabricksError,
        DeltaError,
        requests.RequestException,
        FileNotFoundError,
        ValueError,
    ) as e:
        logger.debug("Command failed", exc_info=True)
        print(describe_error(e), file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
