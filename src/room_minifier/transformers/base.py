"""Base transformer class for recoding archive entries.

This module defines the interface for transformers that turn one
candidate entry into either a renamed, recoded entry or a pass-through.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.types import EntryResult


class EntryTransformer(ABC):
    """Abstract base class for entry transformers.

    Implementations must be stateless per call: the pipeline invokes
    `transform` concurrently from several worker threads.
    """

    @abstractmethod
    def is_candidate(self, name: str) -> bool:
        """Decide from the entry name alone whether to schedule it."""
        pass

    @abstractmethod
    def transform(self, name: str, data: bytes) -> "EntryResult":
        """Transform a candidate entry.

        Args:
            name: Entry name inside the archive
            data: Entry bytes

        Returns:
            EntryResult; `new_name` is None if the entry passes through

        Raises:
            MinifierError: If the entry cannot be transformed
        """
        pass
