"""Omaha update protocol - request parsing and response documents."""

from .parser import (
    SUPPORTED_PROTOCOL,
    MissingExtensionIdError,
    UnsupportedProtocolError,
    UpdateRequestParseError,
    parse_update_request,
    parse_webstore_query,
)
from .codec import (
    RESPONSE_PROTOCOL,
    RESPONSE_SERVER,
    ResponseEncodeError,
    decode_update_response,
    encode_update_request,
    encode_update_response,
    encode_webstore_query,
    encode_webstore_response,
)

__all__ = [
    "SUPPORTED_PROTOCOL",
    "MissingExtensionIdError",
    "UnsupportedProtocolError",
    "UpdateRequestParseError",
    "parse_update_request",
    "parse_webstore_query",
    "RESPONSE_PROTOCOL",
    "RESPONSE_SERVER",
    "ResponseEncodeError",
    "decode_update_response",
    "encode_update_request",
    "encode_update_response",
    "encode_webstore_query",
    "encode_webstore_response",
]
