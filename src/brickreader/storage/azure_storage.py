import logging
from typing import List, Optional
from urllib.parse import urlparse

from azure.core.exceptions import ResourceNotFoundError
from azure.identity import ClientSecretCredential
from azure.storage.blob import ContainerClient

from brickreader.config import AzureStorageCredentials
from brickreader.storage.storage_interface import ObjectStore

logger = logging.getLogger(__name__)


class AzureBlobObjectStore(ObjectStore):
    """
    Azure Data Lake Storage Gen2 / Blob backend.

    Understands ``abfss://<container>@<account>.dfs.core.windows.net/<path>``
    (and ``abfs://``) as well as ``az://<container>/<path>``, where the account
    comes from the credentials.
    """

    def __init__(self, container_client: ContainerClient, prefix: str, root_uri: str):
        self.container_client = container_client
        self.prefix = prefix.strip("/")
        self.root_uri = root_uri

    @classmethod
    def from_location(cls, location: str, credentials: AzureStorageCredentials) -> "AzureBlobObjectStore":
        parsed = urlparse(location)
        host = parsed.hostname or ""

        if parsed.username:
            # abfss://container@account.dfs.core.windows.net/path
            container = parsed.username
            account_url = f"https://{host.replace('.dfs.', '.blob.')}"
        else:
            # az://container/path
            container = parsed.netloc
            account_url = f"https://{credentials.account_name}.blob.core.windows.net"

        credential = ClientSecretCredential(
            tenant_id=credentials.tenant_id,
            client_id=credentials.client_id,
            client_secret=credentials.client_secret,
        )
        client = ContainerClient(account_url=account_url, container_name=container, credential=credential)
        logger.debug(f"Opened container '{container}' at {account_url} for {location}")
        return cls(client, parsed.path, location)

    def _name(self, key: str) -> str:
        key = key.lstrip("/")
        return f"{self.prefix}/{key}" if self.prefix else key

    def read_bytes(self, key: str) -> bytes:
        name = self._name(key)
        try:
            return self.container_client.download_blob(name).readall()
        except ResourceNotFoundError as e:
            raise FileNotFoundError(f"File not found: {name}") from e

    def list_files(self, prefix: str = "") -> List[str]:
        start = self._name(prefix)
        strip = f"{self.prefix}/" if self.prefix else ""
        keys: List[str] = []
        for blob in self.container_client.list_blobs(name_starts_with=start):
            name: Optional[str] = blob.name
            if not name or name.endswith("/"):
                continue  # directory marker
            keys.append(name[len(strip):] if name.startswith(strip) else name)
        return sorted(keys)

    def exists(self, key: str) -> bool:
        return self.container_client.get_blob_client(self._name(key)).exists()
