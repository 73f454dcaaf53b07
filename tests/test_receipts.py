"""Tests for receipt image validation and encoding."""

import asyncio
import base64

import pytest

from src.config import AppSettings
from src.services.image import (
    ReceiptImageService,
    ReceiptTooLargeError,
    UnsupportedReceiptError,
)


@pytest.fixture
def service(app_settings):
    return ReceiptImageService(app_settings)


class TestSizeLimit:

    def test_default_limit_is_two_mib(self, service):
        assert service.max_size_bytes == 2 * 1024 * 1024

    def test_exactly_at_limit_is_accepted(self, service):
        service.check_size(2 * 1024 * 1024)

    def test_three_mib_is_rejected(self, service):
        """Size is checked before the bytes are even decoded."""
        with pytest.raises(ReceiptTooLargeError, match="Image too large"):
            service.encode_receipt(b"\x00" * (3 * 1024 * 1024))


class TestEncoding:

    def test_png_round_trip(self, service, png_bytes):
        data_url = service.encode_receipt(png_bytes)
        assert data_url.startswith("data:image/png;base64,")
        assert ReceiptImageService.decode_receipt(data_url) == png_bytes
        assert ReceiptImageService.mime_type_of(data_url) == "image/png"

    def test_jpeg_mime_type(self, service, make_image):
        data_url = service.encode_receipt(make_image("JPEG"))
        assert ReceiptImageService.mime_type_of(data_url) == "image/jpeg"

    def test_not_an_image(self, service):
        with pytest.raises(UnsupportedReceiptError):
            service.encode_receipt(b"%PDF-1.4 definitely not a photo")

    def test_format_not_allowed(self, service, make_image):
        with pytest.raises(UnsupportedReceiptError, match="Unsupported image format"):
            service.encode_receipt(make_image("TIFF"))

    def test_jpg_alias(self, make_image):
        settings = AppSettings(_env_file=None, supported_image_formats="jpg")
        service = ReceiptImageService(settings)
        assert service.supported_formats == {"jpeg"}
        service.encode_receipt(make_image("JPEG"))
        with pytest.raises(UnsupportedReceiptError):
            service.encode_receipt(make_image("PNG"))

    def test_load_receipt_async(self, service, png_bytes):
        data_url = asyncio.run(service.load_receipt(png_bytes))
        assert data_url == service.encode_receipt(png_bytes)


class TestDecoding:

    def test_rejects_plain_string(self):
        with pytest.raises(UnsupportedReceiptError):
            ReceiptImageService.decode_receipt("https://example.com/receipt.png")

    def test_rejects_bad_base64(self):
        with pytest.raises(UnsupportedReceiptError):
            ReceiptImageService.decode_receipt("data:image/png;base64,@@not-base64@@")

    def test_decodes(self):
        payload = base64.b64encode(b"abc").decode("ascii")
        assert ReceiptImageService.decode_receipt(f"data:image/png;base64,{payload}") == b"abc"
