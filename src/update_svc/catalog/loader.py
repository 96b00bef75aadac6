"""Catalog loader - loads extension catalogs from YAML/JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from ..extension.types import CatalogEntry
from .registry import ExtensionCatalog


logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_ROOT = "https://s3.amazonaws.com/brave-extensions/release"


class CatalogLoader:
    """
    Loads extension catalogs from YAML or JSON files.

    File format (keyed by extension id):
    ```yaml
    bfdgpgibhagkpdlnjonhkabjoijopoge:
      title: Brave Dark Theme
      version: "1.0.0"
      sha256: ae517d6273a4fc126961cb026e02946db4f9dbb58e3d9bc29f5e1270e3ce9834
      download_base: https://s3.amazonaws.com/brave-extensions/release/bfdgpgibhagkpdlnjonhkabjoijopoge
      blacklisted: false
    ```

    ``download_base`` defaults to ``<download_root>/<id>``. An optional
    ``codebase`` pins the advertised download URL for both response forms.
    """

    def __init__(self, download_root: str = DEFAULT_DOWNLOAD_ROOT):
        self.download_root = download_root.rstrip("/")

    def load_file(self, path: str | Path) -> ExtensionCatalog:
        """Load catalog from a YAML or JSON file."""
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Catalog file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        return self.load_dict(data or {})

    def load_dict(self, data: dict[str, Any]) -> ExtensionCatalog:
        """Load catalog from a dictionary."""
        return ExtensionCatalog.from_entries(self.parse_entries(data))

    def parse_entries(self, data: dict[str, Any]) -> list[CatalogEntry]:
        """Parse catalog entries without building a catalog (used for reload)."""
        if not isinstance(data, dict):
            raise ValueError("Catalog definition must be a mapping of extension id to entry")

        entries = []
        for identifier, entry_data in data.items():
            if entry_data is not None and not isinstance(entry_data, dict):
                raise ValueError(f"Catalog entry '{identifier}' must be a mapping")
            entries.append(self._parse_entry(str(identifier), entry_data or {}))
            logger.debug(f"Loaded catalog entry: {identifier}")

        logger.info(f"Loaded {len(entries)} extensions")
        return entries

    def _parse_entry(self, identifier: str, data: dict[str, Any]) -> CatalogEntry:
        """Parse a single catalog entry from dictionary."""
        if "version" not in data:
            raise ValueError(f"Catalog entry '{identifier}' has no version")
        if "sha256" not in data:
            raise ValueError(f"Catalog entry '{identifier}' has no sha256")

        version = data["version"]
        if not isinstance(version, str):
            # YAML turns 1.10 into the float 1.1; quote versions in catalog files
            logger.warning(f"Version for {identifier} is not a string ({version!r}), quote it in the catalog")
            version = str(version)

        return CatalogEntry(
            identifier=identifier,
            version=version,
            sha256=str(data["sha256"]),
            title=data.get("title", ""),
            download_base=data.get("download_base") or f"{self.download_root}/{identifier}",
            blacklisted=bool(data.get("blacklisted", False)),
            codebase=data.get("codebase"),
        )


def load_catalog(
    source: str | Path | dict,
    download_root: str = DEFAULT_DOWNLOAD_ROOT,
) -> ExtensionCatalog:
    """
    Convenience function to load a catalog.

    Args:
        source: File path or dictionary
        download_root: Storage prefix for entries without a download_base

    Returns:
        ExtensionCatalog with loaded entries
    """
    loader = CatalogLoader(download_root=download_root)

    if isinstance(source, dict):
        return loader.load_dict(source)
    return loader.load_file(source)
