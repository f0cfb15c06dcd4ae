import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List


class ObjectStore(ABC):
    """
    Read-only view of an object store, rooted at a table location.

    Keys are '/'-separated and relative to the root. Every backend raises
    FileNotFoundError for missing objects so callers never depend on SDK
    specific exceptions.
    """

    root_uri: str

    @abstractmethod
    def read_bytes(self, key: str) -> bytes:
        """Return the full content of an object."""

    @abstractmethod
    def list_files(self, prefix: str = "") -> List[str]:
        """Return every key under ``prefix`` (recursive), sorted."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """True if the object exists."""

    def read_json(self, key: str) -> Dict[str, Any]:
        data = self.read_bytes(key)
        if len(data) == 0:
            raise ValueError(f"File is empty: {key}")
        try:
            return json.loads(data)
        except json.JSONDecodeError as je:
            raise ValueError(f"Invalid JSON in {key}") from je

    def read_text(self, key: str, encoding: str = "utf-8") -> str:
        return self.read_bytes(key).decode(encoding)

    def uri(self, key: str) -> str:
        """Absolute URI of a key."""
        return f"{self.root_uri.rstrip('/')}/{key.lstrip('/')}"
