"""Exception hierarchy for room archive minification.

Every error is fatal to a conversion run; none of these are caught and
retried inside the package.
"""


class MinifierError(Exception):
    """Base class for all errors raised while minifying an archive."""


class PreconditionError(MinifierError):
    """A required entry (manifest or token) is missing from the input."""


class FormatError(MinifierError):
    """An entry's binary signature does not match its declared format."""


class DecodeError(MinifierError):
    """Pixel data could not be decoded from an image entry."""


class EncodeError(MinifierError):
    """The target codec failed to encode a pixel grid."""


class ManifestParseError(MinifierError):
    """The manifest is not a valid JSON object after name substitution."""


class ArchiveIOError(MinifierError, OSError):
    """Reading or writing archive entries failed."""
