"""Embedding entry point for non-native hosts.

Hosts that cannot catch Python exceptions (a browser bridge, an FFI
shim) call `minify_bytes` with raw archive bytes and receive either the
output bytes or an error string. No filesystem access happens here.
"""

import logging

from .registry import ContainerRegistry

logger = logging.getLogger(__name__)


def minify_bytes(data: bytes, container: str = "zip") -> tuple[bytes | None, str | None]:
    """Minify an archive held in memory.

    Args:
        data: Raw input archive bytes
        container: Registered container format name

    Returns:
        Tuple of (output_bytes, error_message). Exactly one is None.
    """
    if not data:
        return None, "no input archive given"

    try:
        pipeline = ContainerRegistry.create_pipeline(container)
        result = pipeline.run(data)
    except Exception as e:
        logger.debug("Embedded minify failed: %s", e)
        return None, str(e)

    return result.archive, None
