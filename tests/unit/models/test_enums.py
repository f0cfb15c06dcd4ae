"""
Unit tests for enum definitions.

Tests the SecurableType wire token mapping and the read/write privilege sets.
"""

import pytest

from brickreader.exceptions import UnknownSecurableTypeError
from brickreader.models.enums import (
    READ_PRIVILEGES,
    WRITE_PRIVILEGES,
    PrivilegeType,
    SecurableType,
)


class TestSecurableTypeTokens:
    """Tests for SecurableType <-> wire token conversion."""

    @pytest.mark.parametrize(
        "kind,token",
        [
            (SecurableType.CATALOG, "catalog"),
            (SecurableType.SCHEMA, "schema"),
            (SecurableType.TABLE, "table"),
            (SecurableType.STORAGE_CREDENTIAL, "storage_credential"),
            (SecurableType.EXTERNAL_LOCATION, "external_location"),
            (SecurableType.FUNCTION, "function"),
            (SecurableType.SHARE, "share"),
            (SecurableType.PROVIDER, "provider"),
            (SecurableType.RECIPIENT, "recipient"),
            (SecurableType.METASTORE, "metastore"),
            (SecurableType.VOLUME, "volume"),
            (SecurableType.CONNECTION, "connection"),
        ],
    )
    def test_token(self, kind: SecurableType, token: str) -> None:
        """Each kind has exactly one lowercase token and maps back to itself."""
        assert kind.token == token
        assert SecurableType.from_token(token) is kind

    def test_every_kind_has_a_token(self) -> None:
        """The mapping is total and tokens are unique."""
        tokens = [kind.token for kind in SecurableType]
        assert len(tokens) == 12
        assert len(set(tokens)) == 12

    def test_unknown_token_raises(self) -> None:
        """Unknown tokens are a decode error, not a silent default."""
        with pytest.raises(UnknownSecurableTypeError) as exc_info:
            SecurableType.from_token("warehouse")
        assert exc_info.value.token == "warehouse"

    def test_unknown_token_is_value_error(self) -> None:
        """UnknownSecurableTypeError can be caught as ValueError."""
        with pytest.raises(ValueError):
            SecurableType.from_token("TABLE")


class TestPrivilegeSets:
    """Tests for the privilege sets used by can_read/can_write."""

    def test_read_privileges(self) -> None:
        assert READ_PRIVILEGES == {"SELECT", "ALL_PRIVILEGES"}

    def test_write_privileges(self) -> None:
        assert WRITE_PRIVILEGES == {"MODIFY", "ALL_PRIVILEGES"}

    def test_privilege_type_values_are_wire_tokens(self) -> None:
        """PrivilegeType members compare equal to the service's strings."""
        assert PrivilegeType.SELECT == "SELECT"
        assert PrivilegeType.SELECT.value in READ_PRIVILEGES
        assert PrivilegeType.MODIFY.value in WRITE_PRIVILEGES
