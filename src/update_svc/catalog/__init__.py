"""Catalog system - registry of extensions offered for update."""

from .registry import ExtensionCatalog, ExtensionNotFoundError
from .loader import CatalogLoader, load_catalog

__all__ = [
    "ExtensionCatalog",
    "ExtensionNotFoundError",
    "CatalogLoader",
    "load_catalog",
]
