"""Helpers for self-describing inline image payloads (data URIs).

Images travel through the application as ``data:<mime>;base64,<payload>``
strings.  The form embeds its own MIME type, so a gallery record can be
previewed, downloaded, or re-sent to the image service without any side
channel.  The image service itself wants the bare base64 payload, which is
why :func:`strip_data_uri_prefix` exists.
"""

from __future__ import annotations

import base64
import binascii
import io
import mimetypes

from PIL import Image

_DATA_PREFIX = "data:"
_BASE64_MARKER = ";base64"

_EXTENSION_OVERRIDES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def encode_data_uri(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a base64 data URI.

    Args:
        data: Raw image bytes.
        mime_type: Declared media type, e.g. ``"image/png"``.

    Returns:
        ``data:<mime_type>;base64,<payload>``
    """
    payload = base64.b64encode(data).decode("ascii")
    return f"{_DATA_PREFIX}{mime_type}{_BASE64_MARKER},{payload}"


def parse_data_uri(uri: str) -> tuple[str, str]:
    """Split a base64 data URI into its MIME type and payload.

    Args:
        uri: Data URI string.

    Returns:
        Tuple of ``(mime_type, base64_payload)``.

    Raises:
        ValueError: If ``uri`` is not a base64 data URI.
    """
    if not uri or not uri.startswith(_DATA_PREFIX) or "," not in uri:
        raise ValueError("Not a data URI")

    header, payload = uri.split(",", 1)
    meta = header[len(_DATA_PREFIX) :]
    if not meta.endswith(_BASE64_MARKER):
        raise ValueError("Only base64 data URIs are supported")

    mime_type = meta[: -len(_BASE64_MARKER)] or "application/octet-stream"
    return mime_type, payload


def strip_data_uri_prefix(uri: str) -> str:
    """Return only the base64 payload of a data URI (the part after the comma)."""
    return parse_data_uri(uri)[1]


def decode_data_uri(uri: str) -> tuple[bytes, str]:
    """Decode a data URI into raw bytes.

    Returns:
        Tuple of ``(data, mime_type)``.

    Raises:
        ValueError: If the URI is malformed or the payload is not valid base64.
    """
    mime_type, payload = parse_data_uri(uri)
    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return data, mime_type


def extension_for_mime(mime_type: str) -> str:
    """Pick a file extension (without dot) for an image MIME type."""
    if mime_type in _EXTENSION_OVERRIDES:
        return _EXTENSION_OVERRIDES[mime_type]
    guessed = mimetypes.guess_extension(mime_type or "")
    return guessed.lstrip(".") if guessed else "png"


def decode_to_image(uri: str) -> Image.Image:
    """Decode a data URI into a loaded PIL image for display."""
    data, _ = decode_data_uri(uri)
    image = Image.open(io.BytesIO(data))
    image.load()
    return image
