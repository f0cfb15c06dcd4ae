"""
Object storage backends used to read Delta tables.
"""

from .local_storage import LocalObjectStore
from .storage_factory import object_key, open_object_store
from .storage_interface import ObjectStore

__all__ = [
    "ObjectStore",
    "LocalObjectStore",
    "open_object_store",
    "object_key",
]
