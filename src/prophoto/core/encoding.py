"""Helpers for the textual (base64) image encoding used across ProPhoto.

An encoded image is either a bare base64 payload or a data URI of the form
``data:<media type>;base64,<payload>``. The header in front of the comma is
metadata only and must be stripped before the bytes go over the wire.
"""

import base64
import binascii
import logging

from .errors import InvalidInputError

logger = logging.getLogger(__name__)

DATA_URI_SCHEME = "data:"
BASE64_MARKER = ";base64"


def encode_image(data: bytes, mime_type: str) -> str:
    """Encode raw image bytes as a data URI.

    Args:
        data: Raw image bytes
        mime_type: Media type of the bytes (e.g. "image/png")

    Returns:
        Data URI string suitable for display or transport
    """
    payload = base64.b64encode(data).decode("ascii")
    return f"{DATA_URI_SCHEME}{mime_type}{BASE64_MARKER},{payload}"


def is_data_uri(value: str) -> bool:
    """Check whether a string carries a data URI metadata header."""
    return value.startswith(DATA_URI_SCHEME) and "," in value


def split_data_uri(encoded: str) -> tuple[str | None, str]:
    """Split an encoded image into its declared media type and payload.

    Args:
        encoded: Data URI or bare base64 payload

    Returns:
        Tuple of (media_type or None when absent, base64 payload)

    Raises:
        InvalidInputError: If a data URI header is present but not base64
    """
    if not is_data_uri(encoded):
        return None, encoded.strip()

    header, payload = encoded.split(",", 1)
    header = header[len(DATA_URI_SCHEME):]
    if not header.endswith(BASE64_MARKER):
        raise InvalidInputError("Encoded image is not base64 encoded")

    mime_type = header[: -len(BASE64_MARKER)] or None
    return mime_type, payload.strip()


def strip_metadata_prefix(encoded: str) -> str:
    """Return the base64 payload with any data URI header removed."""
    _, payload = split_data_uri(encoded)
    return payload


def decode_payload(encoded: str) -> bytes:
    """Decode an encoded image back to its exact binary payload.

    Args:
        encoded: Data URI or bare base64 payload

    Returns:
        The original image bytes

    Raises:
        InvalidInputError: If the payload is empty or not valid base64
    """
    payload = strip_metadata_prefix(encoded)
    if not payload:
        raise InvalidInputError("Encoded image has no payload")

    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Rejected malformed base64 payload ({len(payload)} chars)")
        raise InvalidInputError("Encoded image is not valid base64") from e
