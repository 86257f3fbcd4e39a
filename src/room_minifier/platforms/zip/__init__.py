"""Zip platform for the minify pipeline.

Room exports are plain zip files; this platform reads and writes them.
"""

import zipfile

from .container import ZipContainer

# Auto-register with the registry
from ...registry import ContainerRegistry


def _create_zip_container(compression: int = zipfile.ZIP_DEFLATED, **kwargs) -> ZipContainer:
    """Factory function for creating zip containers.

    Args:
        compression: Compression method for written entries
        **kwargs: Additional parameters (unused for zip)

    Returns:
        ZipContainer instance
    """
    return ZipContainer(compression=compression)


# Auto-register at module import
ContainerRegistry.register_factory('zip', _create_zip_container)

__all__ = ["ZipContainer"]
