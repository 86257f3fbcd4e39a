"""Zip container adapter.

This module reads room export zips into memory and assembles the output
zip once every entry has its final bytes.
"""

import io
import logging
import zipfile
import zlib

from ...containers.base import Container, WriteProgress
from ...core.errors import ArchiveIOError
from ...core.types import Entries

logger = logging.getLogger(__name__)


class ZipContainer(Container):
    """Container implementation backed by the standard zip format.

    Example:
        >>> container = ZipContainer()
        >>> entries = container.read_entries(Path('room.zip').read_bytes())
        >>> data = container.write_entries(entries)
    """

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED):
        """Initialize the zip container.

        Args:
            compression: Compression method for written entries
        """
        self.compression = compression

    def read_entries(self, data: bytes) -> Entries:
        """Read every file entry of a zip into memory.

        Directory entries are skipped.

        Raises:
            ArchiveIOError: If the zip or any entry is unreadable
        """
        entries: Entries = {}
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                for info in archive.infolist():
                    if info.is_dir():
                        continue
                    entries[info.filename] = archive.read(info)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error, EOFError, OSError, ValueError) as e:
            raise ArchiveIOError(f"failed to read archive: {e}") from e

        logger.debug("Read %d entries from archive", len(entries))
        return entries

    def write_entries(
        self,
        entries: Entries,
        progress: WriteProgress | None = None,
    ) -> bytes:
        """Write entries to a new in-memory zip.

        Raises:
            ArchiveIOError: If an entry cannot be written
        """
        buffer = io.BytesIO()
        total = len(entries)
        try:
            with zipfile.ZipFile(buffer, "w", compression=self.compression) as archive:
                for written, (name, data) in enumerate(entries.items(), start=1):
                    archive.writestr(name, data)
                    if progress:
                        progress(written, total)
        except (zipfile.LargeZipFile, OSError, ValueError) as e:
            raise ArchiveIOError(f"failed to write archive: {e}") from e

        logger.debug("Wrote %d entries to archive", total)
        return buffer.getvalue()
