"""Lossy image recoding.

This module decodes PNG/JPEG entries with Pillow and re-encodes them as
WebP. An optional palette reduction stage quantizes the pixel grid with
error-diffusion dithering before encoding.

All functions are pure and safe to call from several worker threads at
once on different inputs.
"""

import io
import logging

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import DecodeError, EncodeError
from .types import RecodeOptions

logger = logging.getLogger(__name__)

TARGET_FORMAT = "WEBP"
TARGET_MEDIA_TYPE = "image/webp"

# A single-channel palette image holds at most 256 colors
MAX_PALETTE_COLORS = 256

# 3x5 error-diffusion kernel; the current pixel sits at row 0, column 2
DIFFUSION_KERNEL = (
    np.array(
        [
            [0.0, 0.0, 0.0, 7.0, 5.0],
            [3.0, 5.0, 7.0, 5.0, 3.0],
            [1.0, 3.0, 5.0, 3.0, 1.0],
        ],
        dtype=np.float32,
    )
    / 48.0
)
_KERNEL_ORIGIN = 2


def humanize_size(size: float) -> str:
    """Format a byte count for log output.

    Example:
        >>> humanize_size(2048)
        '2KB'
    """
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{size:.0f}{unit}"
        size /= 1024
    return f"{size:.0f}GB"


def decode(data: bytes) -> Image.Image:
    """Decode raw bytes into a pixel grid.

    Args:
        data: Encoded image bytes in any format Pillow can read

    Returns:
        Loaded image in RGB or RGBA mode

    Raises:
        DecodeError: If the bytes are not a readable image
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            has_alpha = "A" in image.getbands() or "transparency" in image.info
            return image.convert("RGBA" if has_alpha else "RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise DecodeError(f"failed to decode image: {e}") from e


def quantize(image: Image.Image, palette_size: int) -> Image.Image:
    """Reduce an image to a bounded palette with error diffusion.

    The palette is chosen by median cut; pixels are then mapped to their
    nearest palette color in scanline order, pushing the residual onto
    unvisited neighbours through DIFFUSION_KERNEL. Alpha is kept as-is.

    Error pushed to the rows below is applied once per row as whole-row
    array updates. Within a row each pixel depends on the one before it,
    so the nearest-color search still walks pixels one at a time. Its cost
    grows with pixel count times palette size, and a large image can take
    several seconds.

    Args:
        image: RGB or RGBA image
        palette_size: Requested number of colors (capped at MAX_PALETTE_COLORS)

    Returns:
        Image in the same mode with at most `palette_size` distinct RGB values
    """
    colors = max(1, min(palette_size, MAX_PALETTE_COLORS))
    rgb = image.convert("RGB")

    palette_image = rgb.quantize(
        colors=colors,
        method=Image.Quantize.MEDIANCUT,
        dither=Image.Dither.NONE,
    )
    raw_palette = palette_image.getpalette() or []
    used = min(colors, len(raw_palette) // 3)
    palette = np.array(raw_palette[: used * 3], dtype=np.float32).reshape(-1, 3)
    # |p - c|^2 = |p|^2 - 2 p.c + |c|^2; the last term does not affect argmin
    palette_norms = (palette**2).sum(axis=1)
    palette_doubled = 2.0 * palette

    height, width = rgb.height, rgb.width
    kernel_rows, kernel_cols = DIFFUSION_KERNEL.shape
    same_row = [
        (col, float(DIFFUSION_KERNEL[0, col]))
        for col in range(_KERNEL_ORIGIN + 1, kernel_cols)
        if DIFFUSION_KERNEL[0, col]
    ]

    # Padding so the kernel never indexes outside the buffer
    work = np.zeros(
        (height + kernel_rows - 1, width + kernel_cols - 1, 3), dtype=np.float32
    )
    work[:height, _KERNEL_ORIGIN : _KERNEL_ORIGIN + width] = np.asarray(
        rgb, dtype=np.float32
    )
    out = np.empty((height, width, 3), dtype=np.uint8)
    errors = np.empty((width, 3), dtype=np.float32)

    for y in range(height):
        row = work[y]
        for x in range(width):
            old = np.clip(row[x + _KERNEL_ORIGIN], 0.0, 255.0)
            index = int(np.argmin(palette_norms - palette_doubled @ old))
            nearest = palette[index]
            out[y, x] = nearest
            error = old - nearest
            errors[x] = error
            for col, weight in same_row:
                row[x + col] += weight * error

        for r in range(1, kernel_rows):
            for col in range(kernel_cols):
                weight = DIFFUSION_KERNEL[r, col]
                if weight:
                    work[y + r, col : col + width] += weight * errors

    quantized = Image.fromarray(out)
    if image.mode == "RGBA":
        quantized.putalpha(image.getchannel("A"))
    return quantized


def encode(image: Image.Image, options: RecodeOptions) -> bytes:
    """Encode a pixel grid as lossy WebP.

    Raises:
        EncodeError: If the codec fails or WebP support is unavailable
    """
    buffer = io.BytesIO()
    try:
        image.save(
            buffer,
            format=TARGET_FORMAT,
            quality=options.quality,
            method=options.method,
        )
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(f"failed to encode {TARGET_FORMAT}: {e}") from e
    return buffer.getvalue()


def recode(data: bytes, options: RecodeOptions | None = None) -> bytes:
    """Decode, optionally quantize, and re-encode an image as WebP.

    The output is expected, not guaranteed, to be smaller than the input.

    Args:
        data: Encoded PNG/JPEG bytes
        options: Encoder parameters; defaults to RecodeOptions()

    Returns:
        WebP bytes

    Raises:
        DecodeError: If the input cannot be decoded
        EncodeError: If WebP encoding fails
    """
    options = options or RecodeOptions()

    image = decode(data)
    if options.quantize:
        image = quantize(image, options.palette_size)
    encoded = encode(image, options)

    logger.debug(
        "Recoded image %s -> %s (%.0f%%)",
        humanize_size(len(data)),
        humanize_size(len(encoded)),
        len(encoded) / len(data) * 100 if data else 0,
    )
    return encoded
