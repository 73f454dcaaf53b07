"""
Receipt Image Service

Receipts are stored INLINE on the transaction as a data: URL, so there is
no upload target and no image hosting. This service handles:
1. The size limit (2 MiB by default)
2. Checking that the bytes really are an image, using PIL
3. Encoding to and decoding from the data: URL

CRITICAL: A rejected file never reaches the form. The caller gets an
exception and the pending receipt stays as it was.
"""

import asyncio
import base64
import binascii
from io import BytesIO
from typing import Optional

from PIL import Image

from src.config import AppSettings, get_settings


class ReceiptError(Exception):
    """Base exception for receipt image errors."""
    pass


class ReceiptTooLargeError(ReceiptError):
    """Image is above the configured size limit."""
    pass


class UnsupportedReceiptError(ReceiptError):
    """File is not an image, or not in an accepted format."""
    pass


_FORMAT_ALIASES = {"jpg": "jpeg"}


class ReceiptImageService:
    """
    Validates and encodes receipt photos.

    Flow:
    1. check_size() as soon as the file size is known
    2. load_receipt() verifies and encodes the bytes off the event loop
    3. The data: URL is written into the form by the session
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    @property
    def max_size_bytes(self) -> int:
        return self._settings.max_receipt_size_bytes

    @property
    def supported_formats(self) -> set[str]:
        return {
            _FORMAT_ALIASES.get(fmt, fmt)
            for fmt in self._settings.supported_formats_list
        }

    def check_size(self, size_bytes: int) -> None:
        """
        Reject files above the size limit.

        Raises:
            ReceiptTooLargeError: If the file is too big
        """
        if size_bytes > self.max_size_bytes:
            raise ReceiptTooLargeError(
                f"Image too large (>{self._settings.max_receipt_size_mb}MB)"
            )

    def _detect_format(self, image_bytes: bytes) -> str:
        """
        Identify the image format using PIL.

        verify() parses the file structure without decoding pixels,
        which is enough to tell a real image from anything else.
        """
        try:
            with Image.open(BytesIO(image_bytes)) as img:
                img.verify()
                fmt = (img.format or "").lower()
        except Exception as e:
            raise UnsupportedReceiptError("File is not a readable image") from e

        if fmt not in self.supported_formats:
            raise UnsupportedReceiptError(
                f"Unsupported image format: {fmt or 'unknown'}. "
                f"Allowed: {', '.join(sorted(self.supported_formats))}"
            )
        return fmt

    def encode_receipt(self, image_bytes: bytes) -> str:
        """
        Validate an image and return it as a data: URL.

        Raises:
            ReceiptTooLargeError: If the file is too big
            UnsupportedReceiptError: If the file is not an accepted image
        """
        self.check_size(len(image_bytes))
        fmt = self._detect_format(image_bytes)
        mime_type = Image.MIME.get(fmt.upper(), f"image/{fmt}")
        payload = base64.b64encode(image_bytes).decode("ascii")
        return f"data:{mime_type};base64,{payload}"

    async def load_receipt(self, image_bytes: bytes) -> str:
        """Same as encode_receipt, run in a worker thread."""
        return await asyncio.to_thread(self.encode_receipt, image_bytes)

    @staticmethod
    def decode_receipt(data_url: str) -> bytes:
        """
        Get the raw image bytes back out of a data: URL.

        Raises:
            UnsupportedReceiptError: If the payload is not a base64 data: URL
        """
        header, sep, payload = data_url.partition(",")
        if not sep or not header.startswith("data:") or not header.endswith(";base64"):
            raise UnsupportedReceiptError("Receipt payload is not a base64 data URL")
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise UnsupportedReceiptError("Receipt payload is not valid base64") from e

    @staticmethod
    def mime_type_of(data_url: str) -> str:
        """MIME type declared in a data: URL header."""
        header = data_url.partition(",")[0]
        return header.removeprefix("data:").split(";", 1)[0]
