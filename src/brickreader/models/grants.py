"""
Grant models for Unity Catalog access checks.

This module contains the privilege assignments returned by the permissions
endpoint, the PrivilegeSet aggregated over a securable's ancestry, and the
identity record returned by the SCIM ``Me`` endpoint.
"""

from __future__ import annotations

import logging
from typing import Any, AbstractSet, List, Optional, Tuple

from pydantic import (
    Field,
    field_validator,
)

from .base import BaseCatalogModel
from .enums import SecurableType

logger = logging.getLogger(__name__)


# =============================================================================
# PRIVILEGE ASSIGNMENTS
# =============================================================================

class PrivilegeAssignment(BaseCatalogModel):
    """
    Privileges held by one principal on one securable.

    The permissions endpoint only returns ``principal`` and ``privileges``;
    ``securable_name`` and ``securable_type`` are filled in by the client with
    the securable the request was made for.
    """
    principal: Optional[str] = Field(None, description="Principal the privileges are granted to")
    privileges: List[str] = Field(default_factory=list, description="Privilege tokens, e.g. SELECT")
    securable_name: str = Field(default="", description="Securable the assignment was fetched for")
    securable_type: Optional[SecurableType] = Field(None, description="Type of that securable")

    @field_validator("privileges", mode="before")
    @classmethod
    def null_privileges(cls, v: Any) -> Any:
        """The service sends ``null`` for principals without privileges."""
        return [] if v is None else v


class PrivilegeAssignmentList(BaseCatalogModel):
    """Response of ``GET /unity-catalog/permissions/{type}/{full_name}``."""
    privilege_assignments: Optional[List[PrivilegeAssignment]] = None

    @property
    def assignments(self) -> List[PrivilegeAssignment]:
        return self.privilege_assignments or []


class PrivilegeSet(BaseCatalogModel):
    """
    Privilege assignments aggregated across a securable's ancestry.

    Order is insertion order (catalog, then schema, then object) and duplicates
    are kept; the whole set is always scanned so the order only affects which
    assignment is reported as the match.
    """
    assignments: List[PrivilegeAssignment] = Field(default_factory=list)

    def add_assignments(
        self,
        response: PrivilegeAssignmentList,
        securable_name: str,
        securable_type: SecurableType,
    ) -> None:
        """Tag every assignment in ``response`` with its securable and append it."""
        for assignment in response.assignments:
            self.assignments.append(
                assignment.model_copy(
                    update={"securable_name": securable_name, "securable_type": securable_type}
                )
            )

    def first_match(self, required: AbstractSet[str]) -> Optional[Tuple[PrivilegeAssignment, str]]:
        """Return the first assignment holding any of ``required`` and the matching token."""
        for assignment in self.assignments:
            for token in assignment.privileges:
                if token in required:
                    return assignment, token
        return None


# =============================================================================
# IDENTITY
# =============================================================================

class CurrentUser(BaseCatalogModel):
    """Identity behind a token, from ``GET /preview/scim/v2/Me``."""
    id: str
    user_name: str = Field(..., alias="userName")
    display_name: Optional[str] = Field(None, alias="displayName")
    active: bool = True
