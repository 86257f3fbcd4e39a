"""Type definitions for room archive minification.

This module defines the shapes that flow through the pipeline: the flat
entry collection read from an archive, the rename map built while recoding,
and the manifest resource descriptors that get patched afterwards.
"""

from dataclasses import dataclass, field
from typing import Any, TypedDict

# Entry name -> raw bytes. Names are unique within an archive.
Entries = dict[str, bytes]

# Original entry name -> content-addressed name.
RenameMap = dict[str, str]

# Parsed `__data.json` document. Only `resources` has a known shape.
ManifestDocument = dict[str, Any]


class ResourceDescriptor(TypedDict, total=False):
    """Descriptor of a single entry in the manifest's `resources` section.

    Only `type` is understood; other keys are preserved as-is.
    """

    type: str  # Declared media type (e.g., 'image/png', 'image/webp')


@dataclass(frozen=True)
class RecodeOptions:
    """Encoder parameters for the image recoder.

    Attributes:
        quality: Lossy quality, 0-100
        method: Compression effort, 0 (fast) to 6 (smallest)
        quantize: Reduce to a bounded palette with error diffusion before encoding.
            Much slower than plain recoding: the diffusion visits every pixel
            in turn, so cost grows with image area times palette size.
        palette_size: Target number of palette colors when quantizing
    """

    quality: int = 70
    method: int = 6
    quantize: bool = False
    palette_size: int = 2048


@dataclass
class EntryResult:
    """Outcome of transforming one candidate entry.

    `new_name` is None when the entry passes through unchanged.
    """

    name: str
    data: bytes
    new_name: str | None = None
    original_size: int = 0


@dataclass
class MinifyResult:
    """Container for the output of one conversion run.

    Attributes:
        archive: Output archive bytes
        rename_map: Original name -> content-addressed name
        input_size: Size of the input archive in bytes
        output_size: Size of the output archive in bytes
    """

    archive: bytes
    rename_map: RenameMap = field(default_factory=dict)
    input_size: int = 0
    output_size: int = 0
