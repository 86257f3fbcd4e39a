"""Shared fixtures for room minifier tests."""

import io
import json
import struct
import zipfile
import zlib

import pytest
from PIL import Image

from room_minifier.manifest import MANIFEST_ENTRY, TOKEN_ENTRY


def png_chunk(tag: bytes, payload: bytes) -> bytes:
    """Build a single PNG chunk with a valid CRC."""
    crc = zlib.crc32(tag + payload) & 0xFFFFFFFF
    return struct.pack(">I", len(payload)) + tag + payload + struct.pack(">I", crc)


def make_png(size: tuple[int, int] = (16, 16), color=(200, 40, 40), mode: str = "RGB") -> bytes:
    """Encode a solid-color PNG in memory."""
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_gradient_png(size: tuple[int, int] = (24, 24)) -> bytes:
    """Encode a PNG with many distinct colors."""
    width, height = size
    image = Image.new("RGB", size)
    image.putdata(
        [(x * 255 // width, y * 255 // height, (x + y) * 127 // (width + height)) for y in range(height) for x in range(width)]
    )
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def make_jpeg(size: tuple[int, int] = (16, 16)) -> bytes:
    """Encode a solid-color JPEG in memory."""
    buffer = io.BytesIO()
    Image.new("RGB", size, (30, 120, 200)).save(buffer, format="JPEG")
    return buffer.getvalue()


def make_animated_png() -> bytes:
    """Insert an acTL chunk right after IHDR of a static PNG."""
    static = make_png()
    ihdr_end = 8 + 4 + 4 + 13 + 4
    actl = png_chunk(b"acTL", struct.pack(">II", 1, 0))
    return static[:ihdr_end] + actl + static[ihdr_end:]


def make_archive(entries: dict[str, bytes]) -> bytes:
    """Pack entries into an in-memory zip."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return buffer.getvalue()


def read_archive(data: bytes) -> dict[str, bytes]:
    """Unpack an in-memory zip into a name -> bytes dict."""
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        return {info.filename: archive.read(info) for info in archive.infolist()}


@pytest.fixture
def static_png() -> bytes:
    return make_png()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_jpeg()


@pytest.fixture
def animated_png() -> bytes:
    return make_animated_png()


@pytest.fixture
def room_entries(static_png: bytes) -> dict[str, bytes]:
    """Minimal room export: manifest, token and one static PNG."""
    manifest = {"resources": {"a.png": {"type": "image/png"}}}
    return {
        MANIFEST_ENTRY: json.dumps(manifest, separators=(",", ":")).encode("utf-8"),
        TOKEN_ENTRY: b"0.stale",
        "a.png": static_png,
    }
