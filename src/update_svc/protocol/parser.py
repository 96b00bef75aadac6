"""Update check request parsing.

Two request shapes are accepted:

Batch form - an Omaha protocol 3.0 XML document POSTed by the updater:

    <request protocol="3.0" version="chrome-53.0.2785.116" ...>
      <hw physmemory="16"/>
      <os platform="Mac OS X" version="10.11.6" arch="x86_64"/>
      <app appid="aomjjhallfgjeglblehebfpbcfeobpgk" version="4.7.0.90" installsource="ondemand">
        <updatecheck />
      </app>
    </request>

Webstore form - a GET whose ``x`` query parameter carries the extension
fields as a second, percent-encoded query string:

    /extensions?os=mac&...&x=id%3Doemmndcbldboiebfnladdacbdfmadadm%26v%3D0.0.0.0%26uc
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from urllib.parse import parse_qsl, unquote_plus

from ..extension.types import RequestItem, UpdateServiceError

logger = logging.getLogger(__name__)

SUPPORTED_PROTOCOL = "3.0"

REQUEST_TAG = "request"
APP_TAG = "app"

# A '%' not followed by two hex digits
_BAD_ESCAPE_PATTERN = re.compile(r"%(?![0-9a-fA-F]{2})")


class UpdateRequestParseError(UpdateServiceError, ValueError):
    """Raised when an update request cannot be decoded."""
    pass


class UnsupportedProtocolError(UpdateRequestParseError):
    """Raised when a batch request declares a protocol other than 3.0."""

    def __init__(self, protocol: str | None):
        super().__init__(f"Unsupported update protocol: {protocol!r} (expected {SUPPORTED_PROTOCOL!r})")
        self.protocol = protocol


class MissingExtensionIdError(UpdateServiceError, ValueError):
    """Raised when a well-formed webstore request names no extension."""
    pass


def parse_update_request(data: bytes | str) -> list[RequestItem]:
    """
    Parse a batch update check request.

    Args:
        data: Raw XML request body

    Returns:
        RequestItems in document order (empty if the request lists no apps)

    Raises:
        UpdateRequestParseError: If the body is empty, not XML, not a
            request document, or declares an unsupported protocol
    """
    if not data or not data.strip():
        raise UpdateRequestParseError("Empty update request")

    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise UpdateRequestParseError(f"Malformed update request XML: {e}") from e

    if root.tag != REQUEST_TAG:
        raise UpdateRequestParseError(
            f"Unexpected root element <{root.tag}>, expected <{REQUEST_TAG}>"
        )

    protocol = root.get("protocol")
    if protocol != SUPPORTED_PROTOCOL:
        raise UnsupportedProtocolError(protocol)

    items = [
        RequestItem(
            identifier=app.get("appid", ""),
            requested_version=app.get("version", ""),
        )
        for app in root.findall(APP_TAG)
    ]
    logger.debug(f"Parsed update request with {len(items)} apps")
    return items


def _check_escapes(value: str, context: str) -> str:
    match = _BAD_ESCAPE_PATTERN.search(value)
    if match:
        bad = value[match.start():match.start() + 3]
        raise UpdateRequestParseError(f"Error {context}: invalid escape {bad!r}")
    return value


def parse_webstore_query(x: str) -> RequestItem:
    """
    Parse the ``x`` parameter of a webstore update check.

    The value is decoded once, then read as a query string holding ``id``
    and ``v``. Brackets around the id are stripped.

    Raises:
        UpdateRequestParseError: If either decoding step fails
        MissingExtensionIdError: If no extension id is present
    """
    unescaped = unquote_plus(_check_escapes(x or "", "unescaping query parameters"))

    values: dict[str, str] = {}
    for key, value in parse_qsl(
        _check_escapes(unescaped, "parsing query parameters"), keep_blank_values=True,
    ):
        # First occurrence wins
        values.setdefault(key, value)

    identifier = values.get("id", "").strip("[]")
    if not identifier:
        raise MissingExtensionIdError("No extension ID specified.")

    return RequestItem(identifier=identifier, requested_version=values.get("v", ""))
