"""
REST plumbing for the Databricks workspace API.
"""

from .metastore import MetastoreClient
from .transport import Transport

__all__ = [
    "Transport",
    "MetastoreClient",
]
