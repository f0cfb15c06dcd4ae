"""
Metadata client for Unity Catalog.

Wraps Transport to list and describe catalogs, schemas and tables, and to look
up the ownership and privilege grants of any securable. Every method issues a
single GET and decodes the JSON body into a model from ``brickreader.models``;
``iter_tables`` lets the databricks-sdk ``tables.list`` iterator follow page
tokens.
"""

import logging
from typing import Any, Dict, Iterator, Optional, Tuple, Type, TypeVar
from urllib.parse import quote

from databricks.sdk.errors import DatabricksError

from brickreader.models import (
    CatalogInfo,
    CatalogList,
    CurrentUser,
    OwnerRecord,
    PrivilegeAssignmentList,
    SchemaInfo,
    SchemaList,
    SecurableType,
    TableInfo,
    TableList,
)
from brickreader.models.base import BaseCatalogModel

from .transport import Transport

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseCatalogModel)

UNITY_CATALOG_PATH = "/api/2.1/unity-catalog"
SCIM_ME_PATH = "/api/2.0/preview/scim/v2/Me"


def _page_params(max_results: Optional[int], page_token: Optional[str], **params: Any) -> Dict[str, Any]:
    if max_results is not None:
        params["max_results"] = max_results
    if page_token:
        params["page_token"] = page_token
    return params


class MetastoreClient:
    """
    Client for the Unity Catalog metadata endpoints.

    Example:
        ```python
        client = MetastoreClient(Transport("adb-123.11.azuredatabricks.net", token))
        table = client.get_table("main.sales.orders")
        print(table.storage_location)
        ```
    """

    def __init__(self, transport: Transport):
        self.transport = transport

    def _get(
        self,
        path: str,
        model: Type[M],
        params: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> M:
        """
        GET a path and decode the body into ``model``.

        Raises:
            DatabricksError: On a non-2xx status (NotFound, PermissionDenied, ...)
            ValueError: If the body does not fit ``model`` (pydantic ValidationError)
        """
        payload = self.transport.fetch(path, token=token, params=params)
        try:
            return model.model_validate(payload)
        except ValueError as e:
            logger.error(f"Error deserializing response from {path}: {e}")
            raise

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def list_catalogs(self, max_results: Optional[int] = None, page_token: Optional[str] = None) -> CatalogList:
        """List catalogs in the metastore (one page)."""
        return self._get(
            f"{UNITY_CATALOG_PATH}/catalogs",
            CatalogList,
            params=_page_params(max_results, page_token),
        )

    def list_schemas(
        self,
        catalog_name: str,
        max_results: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> SchemaList:
        """List schemas of a catalog (one page)."""
        return self._get(
            f"{UNITY_CATALOG_PATH}/schemas",
            SchemaList,
            params=_page_params(max_results, page_token, catalog_name=catalog_name),
        )

    def list_tables(
        self,
        catalog_name: str,
        schema_name: str,
        max_results: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> TableList:
        """List tables of a schema (one page)."""
        return self._get(
            f"{UNITY_CATALOG_PATH}/tables",
            TableList,
            params=_page_params(max_results, page_token, catalog_name=catalog_name, schema_name=schema_name),
        )

    def iter_tables(self, catalog_name: str, schema_name: str, max_results: Optional[int] = None) -> Iterator[TableInfo]:
        """Yield every table of a schema across all pages."""
        tables = self.transport.workspace_client().tables.list(
            catalog_name=catalog_name,
            schema_name=schema_name,
            max_results=max_results,
        )
        for table in tables:
            yield TableInfo.model_validate(table.as_dict())

    # -------------------------------------------------------------------------
    # Single securables
    # -------------------------------------------------------------------------

    def _securable_path(self, securable_type: SecurableType, full_name: str) -> str:
        return f"{UNITY_CATALOG_PATH}/{securable_type.token}s/{quote(full_name, safe='.')}"

    def get_catalog(self, name: str) -> CatalogInfo:
        """Get a catalog by name."""
        return self._get(self._securable_path(SecurableType.CATALOG, name), CatalogInfo)

    def get_schema(self, full_name: str) -> SchemaInfo:
        """Get a schema by ``catalog.schema`` name."""
        return self._get(self._securable_path(SecurableType.SCHEMA, full_name), SchemaInfo)

    def get_table(self, full_name: str) -> TableInfo:
        """Get a table by ``catalog.schema.table`` name."""
        return self._get(self._securable_path(SecurableType.TABLE, full_name), TableInfo)

    def get_owner(self, securable_type: SecurableType, full_name: str) -> OwnerRecord:
        """Look up the owner of any securable through its GET endpoint."""
        logger.info(f"Checking ownership on {securable_type.token}: {full_name}")
        return self._get(self._securable_path(securable_type, full_name), OwnerRecord)

    def get_permissions(
        self,
        securable_type: SecurableType,
        full_name: str,
        principal: str,
    ) -> PrivilegeAssignmentList:
        """
        Get the privileges granted directly to ``principal`` on a securable.

        Only grants on the securable itself are returned; inherited grants
        have to be fetched from each ancestor separately.
        """
        path = f"{UNITY_CATALOG_PATH}/permissions/{securable_type.token}/{quote(full_name, safe='.')}"
        logger.info(f"Getting {securable_type.token} permissions for {principal} on {full_name}")
        return self._get(path, PrivilegeAssignmentList, params={"principal": principal})

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    def current_user(self, token: Optional[str] = None) -> Tuple[bool, Optional[CurrentUser]]:
        """
        Identify the principal behind a token.

        Returns:
            ``(True, user)`` on success, ``(False, None)`` when the endpoint
            answers with a non-2xx status

        Raises:
            requests.RequestException: On network failures
            ValueError: If a successful response cannot be decoded
        """
        try:
            payload = self.transport.fetch(SCIM_ME_PATH, token=token)
        except DatabricksError as e:
            logger.warning(f"Identity lookup failed: {e}")
            return False, None
        return True, CurrentUser.model_validate(payload)
