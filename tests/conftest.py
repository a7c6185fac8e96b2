"""Shared fixtures: blank images from Pillow and real symbols drawn by zxing-cpp."""

from __future__ import annotations

from io import BytesIO

import pytest
import zxingcpp
from PIL import Image, ImageOps


@pytest.fixture
def png_data() -> bytes:
    """Bytes of a plain white 64x64 PNG."""
    buf = BytesIO()
    Image.new("L", (64, 64), 255).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def blank_png(tmp_path, png_data):
    """Path to a plain white PNG with no barcode on it."""
    path = tmp_path / "blank.png"
    path.write_bytes(png_data)
    return path


@pytest.fixture
def not_an_image(tmp_path):
    path = tmp_path / "notes.png"
    path.write_bytes(b"this is not an image")
    return path


def _draw(fmt, text: str, scale: int = 4) -> Image.Image:
    """Render a symbol with zxing-cpp's writer and scale it up with nearest-neighbour."""
    if hasattr(zxingcpp, "create_barcode"):
        drawn = zxingcpp.write_barcode_to_image(zxingcpp.create_barcode(text, fmt))
    else:
        drawn = zxingcpp.write_barcode(fmt, text)
    image = Image.fromarray(drawn).convert("L")
    width, height = image.size
    # Linear symbols can come out a few pixels tall
    symbol = image.resize((width * scale, max(height * scale, 80)), Image.Resampling.NEAREST)
    return ImageOps.expand(symbol, border=40, fill=255)


@pytest.fixture
def qr_png(tmp_path):
    """A single QR code reading "example"."""
    path = tmp_path / "example.png"
    _draw(zxingcpp.BarcodeFormat.QRCode, "example").save(path)
    return path


@pytest.fixture
def code128_png(tmp_path):
    """A Code 128 symbol reading "ABC-12345", which is not a QR code."""
    path = tmp_path / "code128.png"
    _draw(zxingcpp.BarcodeFormat.Code128, "ABC-12345").save(path)
    return path


@pytest.fixture
def multi_qr_png(tmp_path):
    """Two QR codes, "test123" and "test456", on opposite corners of a white canvas.

    Each symbol is separated from the other by at least its own width.
    """
    first = _draw(zxingcpp.BarcodeFormat.QRCode, "test123")
    second = _draw(zxingcpp.BarcodeFormat.QRCode, "test456")
    side = max(first.width, first.height, second.width, second.height)
    canvas = Image.new("L", (side * 3, side * 3), 255)
    canvas.paste(first, (0, 0))
    canvas.paste(second, (side * 2, side * 2))
    path = tmp_path / "multi_barcode_example.png"
    canvas.save(path)
    return path
