"""Base abstractions for archive containers.

This module defines the interface the pipeline uses to read and write
archives. The pipeline only ever sees a flat collection of named byte
blobs; the container format is a collaborator behind this interface.
"""

from abc import ABC, abstractmethod
from typing import Callable

from ..core.types import Entries

# Called with (written, total) after each entry is stored
WriteProgress = Callable[[int, int], None]


class Container(ABC):
    """Abstract base class for archive container formats.

    Implementations read every entry of an archive into memory and write a
    full entry collection back out. Streaming is not supported.
    """

    @abstractmethod
    def read_entries(self, data: bytes) -> Entries:
        """Read all entries from an archive.

        Args:
            data: Raw archive bytes

        Returns:
            Mapping of entry name to entry bytes

        Raises:
            ArchiveIOError: If the archive or one of its entries cannot be read
        """
        pass

    @abstractmethod
    def write_entries(
        self,
        entries: Entries,
        progress: WriteProgress | None = None,
    ) -> bytes:
        """Pack a full entry collection into a new archive.

        Args:
            entries: Mapping of entry name to entry bytes, each stored once
            progress: Optional callback invoked after each entry is written

        Returns:
            Raw archive bytes

        Raises:
            ArchiveIOError: If writing fails
        """
        pass
