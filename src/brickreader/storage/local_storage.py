from pathlib import Path
from typing import List, Union

from brickreader.storage.storage_interface import ObjectStore


class LocalObjectStore(ObjectStore):
    """
    Filesystem backend for ``file://`` locations and plain paths.

    Used for tables on mounted or local storage and for tests.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self.root_uri = self.root.resolve().as_uri()

    def _path(self, key: str) -> Path:
        return self.root / key.lstrip("/")

    def read_bytes(self, key: str) -> bytes:
        path = self._path(key)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return path.read_bytes()

    def list_files(self, prefix: str = "") -> List[str]:
        base = self._path(prefix) if prefix else self.root
        if not base.exists():
            return []
        if base.is_file():
            return [prefix]
        return sorted(p.relative_to(self.root).as_posix() for p in base.rglob("*") if p.is_file())

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()
