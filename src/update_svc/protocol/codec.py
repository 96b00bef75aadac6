"""Update check response documents.

Batch responses (``response`` root) nest the download URL and package
manifest under each app; webstore responses (``gupdate`` root) carry a
single app with a flat updatecheck element. Both documents always
announce protocol 3.1 from the "prod" server, whatever the request said.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Callable, Sequence
from urllib.parse import urlencode

from ..extension.types import CatalogEntry, RequestItem, UpdateServiceError
from .parser import APP_TAG, REQUEST_TAG, SUPPORTED_PROTOCOL, UpdateRequestParseError

RESPONSE_PROTOCOL = "3.1"
RESPONSE_SERVER = "prod"
STATUS_OK = "ok"

INDENT = "    "


class ResponseEncodeError(UpdateServiceError):
    """Raised when a response document cannot be built."""
    pass


def _root(tag: str) -> ET.Element:
    return ET.Element(tag, {"protocol": RESPONSE_PROTOCOL, "server": RESPONSE_SERVER})


def _serialize(build: Callable[[], ET.Element]) -> bytes:
    try:
        root = build()
        if len(root):
            ET.indent(root, space=INDENT)
        text = ET.tostring(root, encoding="unicode", short_empty_elements=False)
    except (AttributeError, TypeError, ValueError) as e:
        raise ResponseEncodeError(f"Error in marshal XML: {e}") from e
    return text.encode("utf-8")


def build_update_response(entries: Sequence[CatalogEntry]) -> ET.Element:
    """Build the batch response tree, one app per entry in the given order."""
    root = _root("response")
    for entry in entries:
        app = ET.SubElement(root, "app", {"appid": entry.identifier})
        updatecheck = ET.SubElement(app, "updatecheck", {"status": STATUS_OK})

        urls = ET.SubElement(updatecheck, "urls")
        ET.SubElement(urls, "url", {"codebase": entry.batch_codebase})

        manifest = ET.SubElement(updatecheck, "manifest", {"version": entry.version})
        packages = ET.SubElement(manifest, "packages")
        ET.SubElement(packages, "package", {
            "name": entry.package_name,
            "hash_sha256": entry.sha256,
            "required": "true",
        })
    return root


def build_webstore_response(entry: CatalogEntry | None) -> ET.Element:
    """Build the webstore response tree; no entry means no update (bare root)."""
    root = _root("gupdate")
    if entry is not None:
        app = ET.SubElement(root, "app", {"appid": entry.identifier, "status": STATUS_OK})
        ET.SubElement(app, "updatecheck", {
            "status": STATUS_OK,
            "codebase": entry.webstore_codebase,
            "version": entry.version,
            "hash_sha256": entry.sha256,
        })
    return root


def encode_update_response(entries: Sequence[CatalogEntry]) -> bytes:
    """
    Serialize a batch update response.

    An empty sequence gives the bare root:
    ``<response protocol="3.1" server="prod"></response>``

    Raises:
        ResponseEncodeError: If the document cannot be serialized
    """
    return _serialize(lambda: build_update_response(entries))


def encode_webstore_response(entry: CatalogEntry | None) -> bytes:
    """
    Serialize a webstore update response.

    Raises:
        ResponseEncodeError: If the document cannot be serialized
    """
    return _serialize(lambda: build_webstore_response(entry))


# Client side: building requests and reading responses (CLI, tests)

def encode_update_request(items: Sequence[RequestItem], protocol: str = SUPPORTED_PROTOCOL) -> bytes:
    """Build a batch update check request for the given extensions."""
    root = ET.Element(REQUEST_TAG, {"protocol": protocol})
    for item in items:
        app = ET.SubElement(root, APP_TAG, {
            "appid": item.identifier,
            "version": item.requested_version,
            "installsource": "ondemand",
        })
        ET.SubElement(app, "updatecheck")
    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def encode_webstore_query(item: RequestItem) -> str:
    """Build the value of the ``x`` parameter for a webstore update check."""
    return urlencode({"id": item.identifier, "v": item.requested_version}) + "&uc"


def decode_update_response(data: bytes | str) -> list[dict[str, str]]:
    """
    Read the offered updates out of a batch or webstore response.

    Returns one dict per app with ``appid``, ``version``, ``codebase`` and
    ``hash_sha256``.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise UpdateRequestParseError(f"Malformed update response XML: {e}") from e

    updates = []
    for app in root.findall("app"):
        updatecheck = app.find("updatecheck")
        if updatecheck is None:
            continue
        if root.tag == "gupdate":
            updates.append({
                "appid": app.get("appid", ""),
                "version": updatecheck.get("version", ""),
                "codebase": updatecheck.get("codebase", ""),
                "hash_sha256": updatecheck.get("hash_sha256", ""),
            })
            continue
        url = updatecheck.find("urls/url")
        manifest = updatecheck.find("manifest")
        package = updatecheck.find("manifest/packages/package")
        updates.append({
            "appid": app.get("appid", ""),
            "version": manifest.get("version", "") if manifest is not None else "",
            "codebase": url.get("codebase", "") if url is not None else "",
            "hash_sha256": package.get("hash_sha256", "") if package is not None else "",
        })
    return updates
