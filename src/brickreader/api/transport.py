"""
Authenticated GET transport for the Databricks REST API.

Requests go through the databricks-sdk ``ApiClient`` of a ``WorkspaceClient``,
which decodes JSON bodies and raises the SDK's typed errors (NotFound,
PermissionDenied, ...) for non-2xx responses. One client is built per bearer
token so a request can act with a different identity than the service
credential.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

import requests
from databricks.sdk import WorkspaceClient
from databricks.sdk.core import ApiClient, Config
from databricks.sdk.errors import DatabricksError

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], WorkspaceClient]


class Transport:
    """
    Issues authenticated GET requests against a Databricks workspace.

    The default bearer token is the service credential; a per-request token can
    be passed to act with a different identity. Workspace clients are cached
    per token and the cache is guarded by a lock, so one instance can be
    shared between threads.
    """

    def __init__(
        self,
        workspace_host: str,
        token: str,
        timeout: float = 60.0,
        client_factory: Optional[ClientFactory] = None,
    ):
        """
        Initialize the transport.

        Args:
            workspace_host: Workspace host without scheme
            token: Default bearer token
            timeout: Per-request timeout in seconds
            client_factory: Builds the WorkspaceClient for a token (tests inject fakes)
        """
        self.workspace_host = workspace_host
        self._token = token
        self.timeout = timeout
        self._client_factory = client_factory or self._make_client
        self._clients: Dict[str, WorkspaceClient] = {}
        self._lock = threading.Lock()

    @property
    def host_url(self) -> str:
        return f"https://{self.workspace_host}"

    def _make_client(self, token: str) -> WorkspaceClient:
        config = Config(
            host=self.host_url,
            token=token,
            auth_type="pat",
            http_timeout_seconds=int(self.timeout),
        )
        return WorkspaceClient(config=config)

    def workspace_client(self, token: Optional[str] = None) -> WorkspaceClient:
        """WorkspaceClient authenticated with ``token`` (default: the service token)."""
        token = token or self._token
        with self._lock:
            client = self._clients.get(token)
            if client is None:
                client = self._client_factory(token)
                self._clients[token] = client
        return client

    def fetch(
        self,
        path: str,
        token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        GET an API path and return the decoded JSON body.

        A failed request triggers one diagnostic re-request whose outcome is
        logged. The diagnostic never raises and never replaces the original
        error.

        Args:
            path: API path such as ``/api/2.1/unity-catalog/catalogs``
            token: Bearer token overriding the default for this request
            params: Query string parameters

        Returns:
            The decoded response body

        Raises:
            DatabricksError: On a non-2xx status (NotFound, PermissionDenied, ...)
            requests.RequestException: On network failures
        """
        api_client = self.workspace_client(token).api_client
        logger.debug(f"GET {self.host_url}{path} params={params}")
        try:
            return api_client.do("GET", path, query=params)
        except DatabricksError as e:
            self._log_failure(api_client, path, params, e)
            raise

    def _log_failure(
        self,
        api_client: ApiClient,
        path: str,
        params: Optional[Dict[str, Any]],
        error: DatabricksError,
    ) -> None:
        try:
            detail = api_client.do("GET", path, query=params)
        except (DatabricksError, requests.RequestException) as e:
            detail = f"{type(e).__name__}: {e}"
        logger.error(f"Request to {self.host_url}{path} failed: {error} - diagnostic: {detail}")
