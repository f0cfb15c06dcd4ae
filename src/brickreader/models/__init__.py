"""
Unity Catalog metadata models.

Module organization:
- enums: SecurableType, PrivilegeType, TableType and the read/write privilege sets
- base: BaseCatalogModel
- securables: SecurableName, OwnerRecord, catalog/schema/table records
- grants: PrivilegeAssignment, PrivilegeSet, CurrentUser
"""

from .base import BaseCatalogModel
from .enums import (
    READ_PRIVILEGES,
    WRITE_PRIVILEGES,
    PrivilegeType,
    SecurableType,
    TableType,
)
from .grants import (
    CurrentUser,
    PrivilegeAssignment,
    PrivilegeAssignmentList,
    PrivilegeSet,
)
from .securables import (
    CatalogInfo,
    CatalogList,
    ColumnInfo,
    OwnerRecord,
    SchemaInfo,
    SchemaList,
    SecurableName,
    TableInfo,
    TableList,
)

__all__ = [
    # Base
    "BaseCatalogModel",
    # Enums
    "SecurableType",
    "PrivilegeType",
    "TableType",
    "READ_PRIVILEGES",
    "WRITE_PRIVILEGES",
    # Securables
    "SecurableName",
    "OwnerRecord",
    "ColumnInfo",
    "CatalogInfo",
    "SchemaInfo",
    "TableInfo",
    "CatalogList",
    "SchemaList",
    "TableList",
    # Grants
    "PrivilegeAssignment",
    "PrivilegeAssignmentList",
    "PrivilegeSet",
    "CurrentUser",
]
