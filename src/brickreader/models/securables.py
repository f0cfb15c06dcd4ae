"""
Securable models for Unity Catalog.

This module contains:
- SecurableName: tolerant parser for one to three part object names
- OwnerRecord: ownership of a single securable
- CatalogInfo / SchemaInfo / TableInfo: metadata records returned by the service
- CatalogList / SchemaList / TableList: paged list responses

The record models only declare the fields this project reads; everything else
the service returns is ignored.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import (
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)
from typing_extensions import Self

from .base import BaseCatalogModel
from .enums import SecurableType, TableType

logger = logging.getLogger(__name__)


# =============================================================================
# SECURABLE NAME
# =============================================================================

class SecurableName(BaseCatalogModel):
    """
    A dot-delimited securable name: ``catalog``, ``catalog.schema`` or
    ``catalog.schema.object``.

    Parsing never fails. Missing segments simply mean fewer ancestry levels are
    checked; segment counts and characters are not validated.
    """
    model_config = ConfigDict(frozen=True)

    full_name: str = Field(..., description="Name exactly as supplied by the caller")
    level_1: str = Field(..., description="Catalog name")
    level_2: Optional[str] = Field(None, description="Schema name (if present)")
    level_3: Optional[str] = Field(None, description="Object name (if present)")

    @model_validator(mode="before")
    @classmethod
    def parse_full_name(cls, data: Any) -> Any:
        """Accept a bare string and split it into levels."""
        if isinstance(data, str):
            data = {"full_name": data}
        if isinstance(data, dict) and "level_1" not in data:
            parts = str(data.get("full_name", "")).split(".")
            data = {
                **data,
                "level_1": parts[0].strip('"'),  # always expect a catalog
                "level_2": parts[1] if len(parts) > 1 else None,
                "level_3": parts[2] if len(parts) > 2 else None,
            }
        return data

    @classmethod
    def parse(cls, full_name: str) -> "SecurableName":
        """Parse a full name into its levels."""
        return cls.model_validate(full_name)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def catalog_name(self) -> str:
        """The catalog segment."""
        return self.level_1

    @computed_field  # type: ignore[prop-decorator]
    @property
    def schema_full_name(self) -> Optional[str]:
        """
        ``catalog.schema`` when a schema segment is present.

        Built from the segments as supplied, so a quoted catalog stays quoted
        here even though ``catalog_name`` drops the quotes.
        """
        if self.level_2 is None:
            return None
        return ".".join(self.full_name.split(".")[:2])

    @computed_field  # type: ignore[prop-decorator]
    @property
    def object_full_name(self) -> Optional[str]:
        """The full name when an object segment is present."""
        if self.level_3 is None:
            return None
        return self.full_name

    def ownership_chain(self, object_type: SecurableType = SecurableType.TABLE) -> List[Tuple[SecurableType, str]]:
        """
        Levels to check for ownership, nearest first.

        Objects are owned more often than their catalogs, so the object is
        checked before the schema and the schema before the catalog.
        """
        chain: List[Tuple[SecurableType, str]] = []
        if self.object_full_name is not None:
            chain.append((object_type, self.object_full_name))
        if self.schema_full_name is not None:
            chain.append((SecurableType.SCHEMA, self.schema_full_name))
        chain.append((SecurableType.CATALOG, self.catalog_name))
        return chain

    def grant_chain(self, object_type: SecurableType = SecurableType.TABLE) -> List[Tuple[SecurableType, str]]:
        """Levels to collect privilege grants from, broadest first."""
        return list(reversed(self.ownership_chain(object_type)))

    def __str__(self) -> str:
        return self.full_name


# =============================================================================
# OWNERSHIP
# =============================================================================

class OwnerRecord(BaseCatalogModel):
    """Ownership information for a securable, decoded from its GET endpoint."""
    full_name: Optional[str] = Field(None, description="Fully qualified name")
    name: Optional[str] = Field(None, description="Short name")
    owner: Optional[str] = Field(None, description="Owning user, group or service principal")

    @model_validator(mode="after")
    def default_full_name(self) -> Self:
        """Catalog and metastore responses may only carry ``name``."""
        if self.full_name is None:
            self.full_name = self.name
        return self

    def is_owned_by(self, principal: str) -> bool:
        """Exact, case-sensitive comparison against the owner."""
        return self.owner is not None and self.owner == principal


# =============================================================================
# METADATA RECORDS
# =============================================================================

class ColumnInfo(BaseCatalogModel):
    """Column definition as returned by the tables endpoint."""
    name: str
    type_text: Optional[str] = None
    type_name: Optional[str] = None
    position: Optional[int] = None
    nullable: bool = True
    comment: Optional[str] = None


class CatalogInfo(BaseCatalogModel):
    """First-level container in Unity Catalog."""
    name: str
    full_name: Optional[str] = None
    owner: Optional[str] = None
    comment: Optional[str] = None
    catalog_type: Optional[str] = None
    storage_root: Optional[str] = None
    properties: Dict[str, str] = Field(default_factory=dict)


class SchemaInfo(BaseCatalogModel):
    """Second-level container in Unity Catalog."""
    name: str
    catalog_name: Optional[str] = None
    full_name: Optional[str] = None
    owner: Optional[str] = None
    comment: Optional[str] = None
    storage_root: Optional[str] = None
    properties: Dict[str, str] = Field(default_factory=dict)


class TableInfo(BaseCatalogModel):
    """
    Table metadata returned by ``GET /unity-catalog/tables/{full_name}``.

    ``storage_location`` is absent for views and for tables the caller cannot
    see the storage of; reading or writing such a table is an error.
    """
    name: str
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None
    full_name: Optional[str] = None
    owner: Optional[str] = None
    table_type: Optional[Union[TableType, str]] = Field(None, union_mode="left_to_right")
    data_source_format: Optional[str] = None
    storage_location: Optional[str] = None
    comment: Optional[str] = None
    columns: List[ColumnInfo] = Field(default_factory=list)
    properties: Dict[str, str] = Field(default_factory=dict)
    created_at: Optional[int] = None
    created_by: Optional[str] = None
    updated_at: Optional[int] = None

    @model_validator(mode="after")
    def default_full_name(self) -> Self:
        """Compose the full name when the service omits it."""
        if self.full_name is None and self.catalog_name and self.schema_name:
            self.full_name = f"{self.catalog_name}.{self.schema_name}.{self.name}"
        return self


# =============================================================================
# LIST RESPONSES
# =============================================================================

class CatalogList(BaseCatalogModel):
    """Response of the catalogs list endpoint."""
    catalogs: List[CatalogInfo] = Field(default_factory=list)
    next_page_token: Optional[str] = None


class SchemaList(BaseCatalogModel):
    """Response of the schemas list endpoint."""
    schemas: List[SchemaInfo] = Field(default_factory=list)
    next_page_token: Optional[str] = None


class TableList(BaseCatalogModel):
    """Response of the tables list endpoint."""
    tables: List[TableInfo] = Field(default_factory=list)
    next_page_token: Optional[str] = None
