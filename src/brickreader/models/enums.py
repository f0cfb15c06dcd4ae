"""
Enum definitions for Unity Catalog access checks.

This module contains the enumeration types and privilege sets used by the
permission resolver and the metadata client.
"""

from enum import Enum
from typing import Dict, FrozenSet

from brickreader.exceptions import UnknownSecurableTypeError


class SecurableType(str, Enum):
    """Identifies the type of Unity Catalog object for privilege management."""
    CATALOG = "CATALOG"  # metastore ownership
    SCHEMA = "SCHEMA"  # catalog ownership
    TABLE = "TABLE"  # schema ownership
    STORAGE_CREDENTIAL = "STORAGE_CREDENTIAL"
    EXTERNAL_LOCATION = "EXTERNAL_LOCATION"
    FUNCTION = "FUNCTION"
    SHARE = "SHARE"  # Delta Sharing shares
    PROVIDER = "PROVIDER"  # Delta Sharing providers
    RECIPIENT = "RECIPIENT"  # Delta Sharing recipients
    METASTORE = "METASTORE"  # account ownership
    VOLUME = "VOLUME"
    CONNECTION = "CONNECTION"  # federation

    @property
    def token(self) -> str:
        """Lowercase token used for this type in REST paths."""
        return _TOKENS[self]

    @classmethod
    def from_token(cls, token: str) -> "SecurableType":
        """
        Convert a REST path token back to its SecurableType.

        Raises:
            UnknownSecurableTypeError: If the token does not name a securable type
        """
        try:
            return _TYPES_BY_TOKEN[token]
        except KeyError:
            raise UnknownSecurableTypeError(token) from None


_TOKENS: Dict[SecurableType, str] = {
    SecurableType.CATALOG: "catalog",
    SecurableType.SCHEMA: "schema",
    SecurableType.TABLE: "table",
    SecurableType.STORAGE_CREDENTIAL: "storage_credential",
    SecurableType.EXTERNAL_LOCATION: "external_location",
    SecurableType.FUNCTION: "function",
    SecurableType.SHARE: "share",
    SecurableType.PROVIDER: "provider",
    SecurableType.RECIPIENT: "recipient",
    SecurableType.METASTORE: "metastore",
    SecurableType.VOLUME: "volume",
    SecurableType.CONNECTION: "connection",
}

_TYPES_BY_TOKEN: Dict[str, SecurableType] = {token: kind for kind, token in _TOKENS.items()}


class PrivilegeType(str, Enum):
    """
    Unity Catalog privilege tokens.

    The permissions endpoint may return tokens not listed here; those are kept
    as plain strings by the grant models and never fail parsing.
    """
    # General privileges
    ALL_PRIVILEGES = "ALL_PRIVILEGES"  # Expands to all applicable privileges
    BROWSE = "BROWSE"  # Metadata discovery privilege
    MANAGE = "MANAGE"

    # Catalog / schema privileges
    USE_CATALOG = "USE_CATALOG"
    USE_SCHEMA = "USE_SCHEMA"
    CREATE_SCHEMA = "CREATE_SCHEMA"
    CREATE_TABLE = "CREATE_TABLE"

    # Table/View privileges
    SELECT = "SELECT"
    MODIFY = "MODIFY"
    REFRESH = "REFRESH"

    # Volume privileges
    READ_VOLUME = "READ_VOLUME"
    WRITE_VOLUME = "WRITE_VOLUME"

    # Function privileges
    EXECUTE = "EXECUTE"

    # Storage/External Location privileges
    READ_FILES = "READ_FILES"
    WRITE_FILES = "WRITE_FILES"


class TableType(str, Enum):
    """Types of tables in Unity Catalog."""
    MANAGED = "MANAGED"
    EXTERNAL = "EXTERNAL"
    VIEW = "VIEW"
    MATERIALIZED_VIEW = "MATERIALIZED_VIEW"
    STREAMING_TABLE = "STREAMING_TABLE"
    FOREIGN = "FOREIGN"


# Privileges that satisfy a read or a write check on a table. Holding any one
# of them at any level of the table's ancestry is sufficient.
READ_PRIVILEGES: FrozenSet[str] = frozenset({PrivilegeType.SELECT.value, PrivilegeType.ALL_PRIVILEGES.value})
WRITE_PRIVILEGES: FrozenSet[str] = frozenset({PrivilegeType.MODIFY.value, PrivilegeType.ALL_PRIVILEGES.value})
