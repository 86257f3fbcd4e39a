"""Format sniffing for archive entries.

This module decides which entries are candidates for recoding and detects
animated PNGs by walking the chunk structure. Pixel data is never touched,
so detection works on files the decoder itself cannot read.
"""

import enum
import struct
from pathlib import PurePosixPath

from .errors import FormatError

# Raster formats with a mature lossy re-encode path
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg"}

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# Animation control chunk; its presence marks an APNG
ANIMATION_CONTROL_TAG = b"acTL"

# 4-byte big-endian length followed by 4-byte type tag
_CHUNK_HEADER = struct.Struct(">I4s")

# Trailing CRC after each chunk's data
_CHUNK_CRC_SIZE = 4


class ScanState(enum.Enum):
    """States of the PNG chunk scanner."""

    READING_HEADER = "reading_header"
    READING_CHUNK = "reading_chunk"
    FOUND = "found"
    END_OF_STREAM = "end_of_stream"
    MALFORMED = "malformed"


def extension_of(name: str) -> str:
    """Return the lowercase extension of an entry name, including the dot."""
    return PurePosixPath(name).suffix.lower()


def is_eligible_image(name: str) -> bool:
    """Check whether an entry should be considered for recoding.

    The decision is based on the extension only.

    Args:
        name: Entry name inside the archive

    Returns:
        True if the extension is one of IMAGE_EXTENSIONS
    """
    return extension_of(name) in IMAGE_EXTENSIONS


def scan_png_chunks(data: bytes) -> ScanState:
    """Walk the chunk stream of a PNG and report the terminal scanner state.

    A stream that ends mid-header or mid-chunk is END_OF_STREAM, not an
    error: the scan simply stops there.

    Args:
        data: Raw PNG bytes

    Returns:
        FOUND, END_OF_STREAM or MALFORMED
    """
    state = ScanState.READING_HEADER
    offset = 0

    while True:
        if state is ScanState.READING_HEADER:
            if data[: len(PNG_SIGNATURE)] != PNG_SIGNATURE:
                return ScanState.MALFORMED
            offset = len(PNG_SIGNATURE)
            state = ScanState.READING_CHUNK

        elif state is ScanState.READING_CHUNK:
            if offset + _CHUNK_HEADER.size > len(data):
                return ScanState.END_OF_STREAM
            length, tag = _CHUNK_HEADER.unpack_from(data, offset)
            if tag == ANIMATION_CONTROL_TAG:
                return ScanState.FOUND
            offset += _CHUNK_HEADER.size + length + _CHUNK_CRC_SIZE

        else:
            return state


def is_animated(data: bytes, name: str) -> bool:
    """Detect whether an eligible image is animated.

    Only PNG can be animated among the eligible formats; JPEG is always
    static.

    Args:
        data: Raw entry bytes
        name: Entry name, used to pick the format

    Returns:
        True if an `acTL` chunk is present

    Raises:
        FormatError: If a .png entry lacks the PNG signature
    """
    if extension_of(name) != ".png":
        return False

    state = scan_png_chunks(data)
    if state is ScanState.MALFORMED:
        raise FormatError(f"invalid PNG image: {name}")
    return state is ScanState.FOUND
