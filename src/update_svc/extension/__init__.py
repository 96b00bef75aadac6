"""Extension types and version ordering."""

from .types import CatalogEntry, RequestItem, UpdateServiceError
from .version import compare_versions, is_newer

__all__ = [
    "CatalogEntry",
    "RequestItem",
    "UpdateServiceError",
    "compare_versions",
    "is_newer",
]
