"""Room Minifier.

This package shrinks tabletop room export archives: static PNG/JPEG
assets are recoded to content-addressed WebP, every reference in the
manifest is rewritten to match, and the integrity token is recomputed.
"""

__version__ = "0.1.0"

# Core library interface
from .pipeline import MinifyPipeline
from .registry import ContainerRegistry
from .containers.base import Container
from .transformers import EntryTransformer, WebPTransformer

# Core utilities
from .core import (
    ArchiveIOError,
    DecodeError,
    EncodeError,
    FormatError,
    ManifestParseError,
    MinifierError,
    MinifyResult,
    PreconditionError,
    RecodeOptions,
    address_for,
    is_animated,
    is_eligible_image,
    recode,
)
from .manifest import compute_token, rewrite

# Entry points
from .cli import main
from .embed import minify_bytes

# Auto-discover and register all platforms
ContainerRegistry.discover_platforms()

__all__ = [
    # Primary library interface
    "MinifyPipeline",
    "ContainerRegistry",
    "Container",
    "EntryTransformer",
    "WebPTransformer",
    "MinifyResult",
    "RecodeOptions",
    # Core utilities
    "address_for",
    "compute_token",
    "is_animated",
    "is_eligible_image",
    "recode",
    "rewrite",
    # Errors
    "MinifierError",
    "PreconditionError",
    "FormatError",
    "DecodeError",
    "EncodeError",
    "ManifestParseError",
    "ArchiveIOError",
    # Entry points
    "main",
    "minify_bytes",
]
