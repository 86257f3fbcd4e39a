"""Minify pipeline for room export archives.

This module provides the main interface for shrinking an archive. The
pipeline reads every entry through a Container, fans eligible images out
to a bounded pool of worker threads, merges the results into the output
collection and rename map, then rewrites the manifest and token and packs
the final archive.

Workers only compute. All mutation of the output collection and rename
map happens in the calling thread as results complete, so no lock is
needed around them.
"""

import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable

from .containers.base import Container
from .core.errors import PreconditionError
from .core.recoder import humanize_size
from .core.types import Entries, EntryResult, MinifyResult, RenameMap
from .manifest import MANIFEST_ENTRY, TOKEN_ENTRY, rewrite
from .transformers.base import EntryTransformer
from .transformers.webp import WebPTransformer

logger = logging.getLogger(__name__)

# Entries with a fixed role; never scheduled as candidates
RESERVED_ENTRIES = (MANIFEST_ENTRY, TOKEN_ENTRY)

# Progress callback: (stage, done, total). Stages are 'processing' and 'writing'.
ProgressCallback = Callable[[str, int, int], None]


def default_max_workers() -> int:
    """Half the available CPUs, at least one."""
    return max(1, (os.cpu_count() or 1) // 2)


def check_required_entries(entries: Entries) -> None:
    """Ensure the manifest and token entries are present.

    Raises:
        PreconditionError: If either entry is missing
    """
    for name in RESERVED_ENTRIES:
        if name not in entries:
            raise PreconditionError(f"{name} not found")


class MinifyPipeline:
    """Main interface for archive minification.

    This class is container-agnostic. It works with any Container
    implementation and delegates per-entry work to an EntryTransformer.

    Example:
        >>> # Via registry (recommended)
        >>> from room_minifier import ContainerRegistry
        >>> pipeline = ContainerRegistry.create_pipeline('zip')
        >>> result = pipeline.run(Path('room.zip').read_bytes())
        >>>
        >>> # Direct instantiation (advanced)
        >>> from room_minifier.platforms.zip import ZipContainer
        >>> pipeline = MinifyPipeline(ZipContainer(), max_workers=4)
    """

    def __init__(
        self,
        container: Container,
        transformer: EntryTransformer | None = None,
        max_workers: int | None = None,
        progress: ProgressCallback | None = None,
    ):
        """Initialize the pipeline.

        Args:
            container: Container used to read and write archives
            transformer: Per-entry transformer (defaults to WebPTransformer)
            max_workers: Worker thread budget (defaults to half the CPUs)
            progress: Optional callback receiving (stage, done, total)
        """
        self.container = container
        self.transformer = transformer or WebPTransformer()
        self.max_workers = max(1, max_workers or default_max_workers())
        self.progress = progress

    def _report(self, stage: str, done: int, total: int) -> None:
        if self.progress:
            self.progress(stage, done, total)

    def partition(self, entries: Entries) -> tuple[list[str], Entries]:
        """Split entries into candidate names and pass-through entries.

        Args:
            entries: Full input collection

        Returns:
            Tuple of (candidate names, pass-through entries)
        """
        candidates: list[str] = []
        passthrough: Entries = {}
        for name, data in entries.items():
            if name not in RESERVED_ENTRIES and self.transformer.is_candidate(name):
                candidates.append(name)
            else:
                passthrough[name] = data
        return candidates, passthrough

    def _transform_one(
        self, name: str, data: bytes, cancelled: threading.Event
    ) -> EntryResult | None:
        if cancelled.is_set():
            return None
        return self.transformer.transform(name, data)

    def transform_entries(self, entries: Entries) -> tuple[Entries, RenameMap]:
        """Recode every candidate entry with bounded parallelism.

        The first failure cancels all pending work and propagates; nothing
        produced before it is returned.

        Args:
            entries: Full input collection, including manifest and token

        Returns:
            Tuple of (output collection, rename map). The manifest and token
            entries are copied through unchanged.

        Raises:
            PreconditionError: If the manifest or token entry is missing
            MinifierError: On the first failing candidate
        """
        check_required_entries(entries)

        candidates, output = self.partition(entries)
        rename_map: RenameMap = {}
        total = len(candidates)

        logger.info(
            "Processing %d candidate images with %d workers (%d entries pass through)",
            total,
            self.max_workers,
            len(output),
        )
        if not candidates:
            return output, rename_map

        cancelled = threading.Event()
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="recode"
        ) as executor:
            futures: dict[Future[EntryResult | None], str] = {
                executor.submit(self._transform_one, name, entries[name], cancelled): name
                for name in candidates
            }
            try:
                for done, future in enumerate(as_completed(futures), start=1):
                    result = future.result()
                    if result is not None:
                        self._merge(result, output, rename_map)
                    self._report("processing", done, total)
            except BaseException:
                cancelled.set()
                for future in futures:
                    future.cancel()
                logger.debug("Cancelled pending recodes after failure")
                raise

        return output, rename_map

    @staticmethod
    def _merge(result: EntryResult, output: Entries, rename_map: RenameMap) -> None:
        if result.new_name is None:
            output[result.name] = result.data
            return

        rename_map[result.name] = result.new_name
        output[result.new_name] = result.data
        logger.debug(
            "%s -> %s (%s -> %s)",
            result.name,
            result.new_name,
            humanize_size(result.original_size),
            humanize_size(len(result.data)),
        )

    def finalize(self, entries: Entries, output: Entries, rename_map: RenameMap) -> Entries:
        """Replace the manifest and token in the output collection.

        Args:
            entries: Original input collection (source of the manifest)
            output: Collection produced by transform_entries, modified in place
            rename_map: Completed rename map

        Returns:
            The output collection
        """
        manifest, token = rewrite(entries[MANIFEST_ENTRY], rename_map)
        output[MANIFEST_ENTRY] = manifest
        output[TOKEN_ENTRY] = token
        return output

    def run(self, data: bytes) -> MinifyResult:
        """Minify an archive end to end.

        Args:
            data: Raw input archive bytes

        Returns:
            MinifyResult with the output archive and rename map

        Raises:
            MinifierError: On any failure; no partial output is produced
        """
        entries = self.container.read_entries(data)
        check_required_entries(entries)

        output, rename_map = self.transform_entries(entries)
        self.finalize(entries, output, rename_map)

        archive = self.container.write_entries(
            output,
            progress=lambda done, total: self._report("writing", done, total),
        )

        logger.info(
            "Minified archive %s -> %s (%d images recoded)",
            humanize_size(len(data)),
            humanize_size(len(archive)),
            len(rename_map),
        )
        return MinifyResult(
            archive=archive,
            rename_map=rename_map,
            input_size=len(data),
            output_size=len(archive),
        )
