import logging
from typing import Optional
from urllib.parse import unquote, urlparse

from brickreader.config import AzureStorageCredentials
from brickreader.exceptions import ConfigurationError, UnsupportedStorageError
from brickreader.storage.local_storage import LocalObjectStore
from brickreader.storage.storage_interface import ObjectStore

logger = logging.getLogger(__name__)

AZURE_SCHEMES = ("abfss", "abfs", "az")
LOCAL_SCHEMES = ("", "file")


def open_object_store(location: str, credentials: Optional[AzureStorageCredentials] = None) -> ObjectStore:
    """
    Open an object store rooted at a table's storage location.

    Args:
        location: Storage location as reported by the catalog
        credentials: Service principal credentials, required for Azure locations

    Raises:
        ConfigurationError: Azure location without credentials
        UnsupportedStorageError: Any other URI scheme
    """
    scheme = urlparse(location).scheme.lower()

    if scheme in AZURE_SCHEMES:
        if credentials is None:
            raise ConfigurationError(f"Storage credentials are required to read {location}")
        # Imported lazily so local reads do not pay for the Azure SDK import.
        from brickreader.storage.azure_storage import AzureBlobObjectStore

        return AzureBlobObjectStore.from_location(location, credentials)

    if scheme in LOCAL_SCHEMES:
        path = unquote(urlparse(location).path) if scheme == "file" else location
        logger.debug(f"Opening local object store at {path}")
        return LocalObjectStore(path)

    raise UnsupportedStorageError(location, scheme)


def object_key(path: str, root_uri: str) -> str:
    """
    Key of a data file relative to the table root.

    ``path`` is an already decoded Delta log path, either relative to the
    table root or absolute. Partition directories are kept as part of the key.
    """
    root = unquote(root_uri).rstrip("/") + "/"
    if path.startswith(root):
        return path[len(root):]
    if "://" in path:
        # Absolute URI that does not sit under this root; fall back to its path component.
        parsed = urlparse(path)
        root_path = urlparse(root).path
        if parsed.path.startswith(root_path):
            return parsed.path[len(root_path):]
        return parsed.path.lstrip("/")
    return path.lstrip("/")
