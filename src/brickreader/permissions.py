"""
Permission resolver for Unity Catalog securables.

Decides whether a principal may read or write an object by combining
ownership checks and explicit privilege grants across the object's ancestry
(catalog, schema, object).
"""

import logging
from typing import AbstractSet, Optional

from brickreader.api.metastore import MetastoreClient
from brickreader.models import (
    READ_PRIVILEGES,
    WRITE_PRIVILEGES,
    PrivilegeSet,
    SecurableName,
    SecurableType,
)

logger = logging.getLogger(__name__)


class PermissionResolver:
    """
    Resolves read/write authorization for a principal.

    The resolver is stateless: every call fetches ownership and grants fresh
    from the metadata service and keeps nothing between calls, so a single
    instance can be shared across threads.

    Errors raised by the metadata client (network failures, NotFound,
    undecodable bodies) are propagated rather than turned into a denial.
    Callers on security-sensitive paths must treat an exception as "not
    authorized".
    """

    def __init__(self, metastore: MetastoreClient):
        self.metastore = metastore

    def authorize(
        self,
        full_name: str,
        principal: str,
        required_privileges: AbstractSet[str],
        securable_type: SecurableType = SecurableType.TABLE,
    ) -> bool:
        """
        Check whether ``principal`` owns the securable or holds a required privilege.

        Args:
            full_name: One to three part securable name
            principal: User, group or service principal name (exact match)
            required_privileges: Any one of these privilege tokens is sufficient
            securable_type: Type of the object level (third segment)

        Returns:
            True if authorized, False otherwise (deny by default)
        """
        name = SecurableName.parse(full_name)

        # Ownership of the object or any parent grants full access.
        # Start with the object and go higher: objects are owned more often than catalogs.
        for level_type, level_name in name.ownership_chain(securable_type):
            owner = self.metastore.get_owner(level_type, level_name)
            if owner.is_owned_by(principal):
                logger.info(f"Principal {principal} is an owner of {level_name}.")
                return True

        logger.info(f"Principal {principal} not an owner of {full_name} or any parent object.")

        privileges = self.collect_privileges(name, principal, securable_type)
        match = privileges.first_match(required_privileges)
        if match is not None:
            assignment, token = match
            logger.info(
                f"Principal {assignment.principal or principal} has {token} "
                f"permissions on {assignment.securable_name}."
            )
            return True

        logger.info(
            f"Principal {principal} holds none of {sorted(required_privileges)} on {full_name}."
        )
        return False

    def collect_privileges(
        self,
        name: SecurableName,
        principal: str,
        securable_type: SecurableType = SecurableType.TABLE,
    ) -> PrivilegeSet:
        """
        Fetch the principal's grants on every level of ``name``, broadest first.

        Grants can be delegated at any level, so each level is queried
        separately and tagged with the securable it was fetched for.
        """
        privileges = PrivilegeSet()
        for level_type, level_name in name.grant_chain(securable_type):
            response = self.metastore.get_permissions(level_type, level_name, principal)
            privileges.add_assignments(response, level_name, level_type)
        return privileges

    def can_read(self, full_name: str, principal: str) -> bool:
        """True if the principal may read the table (SELECT or ALL_PRIVILEGES)."""
        name = SecurableName.parse(full_name)
        logger.info(
            f"Checking if {principal} can read the following objects: "
            f"{name.catalog_name} | {name.schema_full_name or ''} | {full_name}"
        )
        return self.authorize(full_name, principal, READ_PRIVILEGES, SecurableType.TABLE)

    def can_write(self, full_name: str, principal: str) -> bool:
        """True if the principal may modify the table (MODIFY or ALL_PRIVILEGES)."""
        name = SecurableName.parse(full_name)
        logger.info(
            f"Checking if {principal} can write the following objects: "
            f"{name.catalog_name} | {name.schema_full_name or ''} | {full_name}"
        )
        return self.authorize(full_name, principal, WRITE_PRIVILEGES, SecurableType.TABLE)

    def authenticate_principal(self, expected_principal: str, token: Optional[str] = None) -> bool:
        """
        Confirm that a token belongs to ``expected_principal``.

        Args:
            expected_principal: User name the token must resolve to
            token: Token to check (defaults to the transport's service token)

        Returns:
            True only if the identity endpoint answers successfully and its
            user name equals ``expected_principal`` exactly
        """
        ok, user = self.metastore.current_user(token=token)
        if not ok or user is None:
            logger.error(f"Failed to authenticate user: {expected_principal} (identity endpoint rejected the token)")
            return False

        if user.user_name != expected_principal:
            logger.error(
                f"Failed to authenticate user: {expected_principal} (token belongs to {user.user_name})"
            )
            return False

        logger.info(f"User {user.user_name} authentication was successful.")
        return True
