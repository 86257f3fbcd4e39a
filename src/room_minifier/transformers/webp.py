"""WebP transformer for raster image entries.

Static PNG and JPEG entries are recoded to lossy WebP and renamed to the
content address of the result. Animated PNGs are left untouched.
"""

import logging

from ..core.addresser import TARGET_EXTENSION, address_for
from ..core.recoder import recode
from ..core.sniffer import is_animated, is_eligible_image
from ..core.types import EntryResult, RecodeOptions
from .base import EntryTransformer

logger = logging.getLogger(__name__)


class WebPTransformer(EntryTransformer):
    """Transformer recoding eligible images as content-addressed WebP.

    Example:
        >>> transformer = WebPTransformer(RecodeOptions(quality=80))
        >>> result = transformer.transform('a.png', png_bytes)
        >>> result.new_name
        '3f9a...c2.webp'
    """

    def __init__(self, options: RecodeOptions | None = None):
        self.options = options or RecodeOptions()

    def is_candidate(self, name: str) -> bool:
        return is_eligible_image(name)

    def transform(self, name: str, data: bytes) -> EntryResult:
        if is_animated(data, name):
            logger.debug("Skipping animated image %s", name)
            return EntryResult(name=name, data=data, original_size=len(data))

        encoded = recode(data, self.options)
        new_name = address_for(encoded, TARGET_EXTENSION)
        logger.debug("Recoded %s -> %s", name, new_name)
        return EntryResult(
            name=name,
            data=encoded,
            new_name=new_name,
            original_size=len(data),
        )
