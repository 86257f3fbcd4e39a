"""Content-addressed naming for recoded assets."""

import hashlib

TARGET_EXTENSION = ".webp"


def address_for(data: bytes, extension: str = TARGET_EXTENSION) -> str:
    """Derive the entry name for recoded bytes.

    Identical bytes always map to the same name, so two assets that
    recode to the same output collapse into one entry.

    Args:
        data: Encoded image bytes
        extension: Extension appended to the digest

    Returns:
        Lowercase SHA-256 hex digest followed by the extension
    """
    return f"{hashlib.sha256(data).hexdigest()}{extension}"
