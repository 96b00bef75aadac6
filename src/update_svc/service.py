"""Core service layer - matches update checks against the catalog.

Flow:
1. The HTTP layer hands over a raw batch body or a webstore ``x`` parameter
2. The request is parsed into RequestItems
3. Each item is looked up and compared against the catalog version
4. The result is either a list of entries to offer (encoded as XML by
   the caller) or a redirect to an upstream update server
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from .catalog.registry import ExtensionCatalog, ExtensionNotFoundError
from .config import Config
from .extension.types import CatalogEntry, RequestItem
from .extension.version import is_newer
from .protocol.codec import encode_update_response, encode_webstore_response
from .protocol.parser import parse_update_request, parse_webstore_query


logger = logging.getLogger(__name__)


@dataclass
class UpdateCheckResult:
    """Outcome of a batch update check."""
    entries: list[CatalogEntry] = field(default_factory=list)

    # Set when the client should ask an upstream server instead
    redirect_url: str | None = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect_url is not None

    def to_xml(self) -> bytes:
        return encode_update_response(self.entries)


@dataclass
class WebStoreCheckResult:
    """Outcome of a webstore (single extension) update check."""
    # Only set when an update applies
    entry: CatalogEntry | None = None
    redirect_url: str | None = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect_url is not None

    def to_xml(self) -> bytes:
        return encode_webstore_response(self.entry)


def offers_update(entry: CatalogEntry, item: RequestItem) -> bool:
    """True if ``entry`` should be offered to a client reporting ``item``."""
    if entry.blacklisted:
        return False
    return is_newer(entry.version, item.requested_version)


def filter_for_updates(
    catalog: ExtensionCatalog,
    items: Sequence[RequestItem],
) -> list[CatalogEntry]:
    """
    Filter the catalog down to the extensions being checked that have updates.

    Unknown and blacklisted extensions are skipped. The result keeps the
    request order.
    """
    updates = []
    for item in items:
        entry = catalog.get(item.identifier)
        if entry is not None and offers_update(entry, item):
            updates.append(entry)
    return updates


@dataclass
class UpdateService:
    """
    Extension update service.

    Holds an injected catalog and config; every call works on the catalog
    as it is at that moment and keeps no other state, so calls can run
    concurrently.
    """
    catalog: ExtensionCatalog
    config: Config = field(default_factory=Config)

    def check_updates(self, items: Sequence[RequestItem]) -> UpdateCheckResult:
        """
        Decide which of the requested extensions have updates.

        A request for exactly one extension we don't know about is sent
        upstream (component updates share the protocol with extensions).
        """
        if len(items) == 1 and not self.catalog.contains(items[0].identifier):
            redirect_url = self.config.upstream.component_update_url
            logger.info(f"Unknown component {items[0].identifier}, redirecting to {redirect_url}")
            return UpdateCheckResult(redirect_url=redirect_url)

        updates = filter_for_updates(self.catalog, items)
        logger.debug(f"Update check for {len(items)} extensions, {len(updates)} updates")
        return UpdateCheckResult(entries=updates)

    def check_webstore_update(self, item: RequestItem, raw_query: str = "") -> WebStoreCheckResult:
        """
        Decide whether a single extension has an update.

        Unknown extensions are redirected to the upstream webstore with the
        client's original query. Blacklisted extensions get the empty
        response, same as in batch checks.
        """
        try:
            entry = self.catalog.lookup(item.identifier)
        except ExtensionNotFoundError:
            redirect_url = self.webstore_redirect_url(raw_query)
            logger.info(f"Unknown extension {item.identifier}, redirecting to webstore")
            return WebStoreCheckResult(redirect_url=redirect_url)

        if offers_update(entry, item):
            return WebStoreCheckResult(entry=entry)
        return WebStoreCheckResult()

    def webstore_redirect_url(self, raw_query: str) -> str:
        return f"{self.config.upstream.webstore_update_url}?{raw_query}&braveRedirect=true"

    def handle_update_request(self, body: bytes | str) -> UpdateCheckResult:
        """Parse a batch request body and check it."""
        return self.check_updates(parse_update_request(body))

    def handle_webstore_request(self, x: str, raw_query: str = "") -> WebStoreCheckResult:
        """Parse a webstore ``x`` parameter and check it."""
        return self.check_webstore_update(parse_webstore_query(x), raw_query)
