"""Extension types - catalog entries and update check request items."""

from __future__ import annotations

from dataclasses import dataclass


# Package file naming used in manifest entries: extension_1_0_0.crx
PACKAGE_PREFIX = "extension_"
PACKAGE_SUFFIX = ".crx"


class UpdateServiceError(Exception):
    """Base class for update service errors."""
    pass


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """
    An extension offered by the update service.

    Entries are immutable and owned by an ExtensionCatalog. The same entry
    backs both response dialects (batch and webstore).
    """
    identifier: str
    version: str
    sha256: str
    title: str = ""
    download_base: str = ""
    blacklisted: bool = False

    # Optional explicit download location; overrides the derived codebases
    codebase: str | None = None

    @property
    def package_name(self) -> str:
        """Package file name derived from the version (1.0.0 -> extension_1_0_0.crx)."""
        return f"{PACKAGE_PREFIX}{self.version.replace('.', '_')}{PACKAGE_SUFFIX}"

    @property
    def batch_codebase(self) -> str:
        """Download location advertised in batch (``response``) documents."""
        if self.codebase:
            return self.codebase
        return f"{self.download_base}/{self.title}"

    @property
    def webstore_codebase(self) -> str:
        """Download location advertised in webstore (``gupdate``) documents."""
        if self.codebase:
            return self.codebase
        return f"{self.download_base}/"


@dataclass(frozen=True, slots=True)
class RequestItem:
    """One (identifier, installed version) pair reported by a client."""
    identifier: str
    requested_version: str = ""
