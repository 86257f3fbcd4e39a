"""Core utilities for room archive minification.

This package contains the data model, error taxonomy, format sniffing,
image recoding, content addressing and manifest schema validation used by
the pipeline.
"""

from .addresser import address_for
from .errors import (
    ArchiveIOError,
    DecodeError,
    EncodeError,
    FormatError,
    ManifestParseError,
    MinifierError,
    PreconditionError,
)
from .recoder import recode
from .sniffer import is_animated, is_eligible_image
from .types import Entries, EntryResult, MinifyResult, RecodeOptions, RenameMap
from .validator import validate_manifest

__all__ = [
    "ArchiveIOError",
    "DecodeError",
    "EncodeError",
    "Entries",
    "EntryResult",
    "FormatError",
    "ManifestParseError",
    "MinifierError",
    "MinifyResult",
    "PreconditionError",
    "RecodeOptions",
    "RenameMap",
    "address_for",
    "is_animated",
    "is_eligible_image",
    "recode",
    "validate_manifest",
]
