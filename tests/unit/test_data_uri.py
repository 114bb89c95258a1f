"""Tests for data URI helpers."""

import base64

import pytest
from PIL import Image

from nanoart.core.data_uri import (
    decode_data_uri,
    decode_to_image,
    encode_data_uri,
    extension_for_mime,
    parse_data_uri,
    strip_data_uri_prefix,
)


class TestEncodeAndParse:
    """Tests for building and splitting data URIs."""

    def test_encode_format(self):
        uri = encode_data_uri(b"\x89PNG", "image/png")
        assert uri == "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode()

    def test_parse_returns_mime_and_payload(self):
        mime, payload = parse_data_uri("data:image/jpeg;base64,QUJD")
        assert mime == "image/jpeg"
        assert payload == "QUJD"

    def test_strip_prefix_keeps_only_payload(self):
        assert strip_data_uri_prefix("data:image/webp;base64,QUJD") == "QUJD"

    @pytest.mark.parametrize(
        "value",
        ["", "QUJD", "http://example.com/a.png", "data:image/png,QUJD"],
    )
    def test_parse_rejects_non_base64_data_uris(self, value):
        with pytest.raises(ValueError):
            parse_data_uri(value)


class TestDecode:
    """Tests for decoding data URIs."""

    def test_decode_returns_bytes_and_mime(self, png_bytes, png_data_uri):
        data, mime = decode_data_uri(png_data_uri)
        assert data == png_bytes
        assert mime == "image/png"

    def test_decode_invalid_base64(self):
        with pytest.raises(ValueError, match="Invalid base64"):
            decode_data_uri("data:image/png;base64,not*base64")

    def test_decode_to_image(self, png_data_uri):
        image = decode_to_image(png_data_uri)
        assert isinstance(image, Image.Image)
        assert image.size == (4, 4)


class TestExtensionForMime:
    """Tests for download file extensions."""

    @pytest.mark.parametrize(
        "mime,ext",
        [("image/png", "png"), ("image/jpeg", "jpg"), ("image/webp", "webp"), ("image/gif", "gif")],
    )
    def test_known_types(self, mime, ext):
        assert extension_for_mime(mime) == ext

    def test_unknown_type_defaults_to_png(self):
        assert extension_for_mime("image/x-nanoart-unknown") == "png"
