"""Manifest rewriting and integrity token computation.

After every image has been recoded, `__data.json` still points at the old
names. The rewrite runs in two phases:

1. Raw text substitution of every old name with its new name, anywhere in
   the serialized document. This deliberately also catches references
   buried in free-form strings, and will equally rewrite unrelated text
   that happens to contain an old file name.
2. Parse and validate the result, then patch the declared media type of
   every renamed resource.

The token is always recomputed from the final bytes, never carried over.
"""

import hashlib
import json
import logging

from .core.errors import ManifestParseError
from .core.recoder import TARGET_MEDIA_TYPE
from .core.types import ManifestDocument, RenameMap, ResourceDescriptor
from .core.validator import validate_manifest

logger = logging.getLogger(__name__)

MANIFEST_ENTRY = "__data.json"
TOKEN_ENTRY = ".token"
TOKEN_PREFIX = "0."
RESOURCES_KEY = "resources"


def substitute_names(text: str, rename_map: RenameMap) -> str:
    """Replace every literal occurrence of each old name with its new name.

    Pairs are applied longest old name first (ties broken by name) so a
    name that contains another as a substring is replaced before the
    shorter one can match inside it. New names are content addresses and
    never contain an old name.

    Args:
        text: Serialized manifest
        rename_map: Old name -> new name

    Returns:
        Text with all substitutions applied
    """
    for old_name, new_name in sorted(
        rename_map.items(), key=lambda pair: (-len(pair[0]), pair[0])
    ):
        text = text.replace(old_name, new_name)
    return text


def _reject_constant(name: str) -> float:
    raise ManifestParseError(f"{MANIFEST_ENTRY} is not valid JSON: {name} is not a JSON value")


def parse_manifest(text: str) -> ManifestDocument:
    """Parse and validate a manifest document.

    Raises:
        ManifestParseError: If the text is not JSON or not a manifest object
    """
    try:
        document = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ManifestParseError(f"{MANIFEST_ENTRY} is not valid JSON: {e}") from e

    validate_manifest(document)
    return document  # type: ignore[no-any-return]


def patch_resources(document: ManifestDocument, rename_map: RenameMap) -> int:
    """Declare the recoded media type for every renamed resource.

    A renamed resource's descriptor is replaced by a minimal one holding
    only the new type; everything else is left alone. A missing or
    non-object `resources` section is skipped.

    Args:
        document: Parsed manifest, modified in place
        rename_map: Old name -> new name

    Returns:
        Number of descriptors replaced
    """
    resources = document.get(RESOURCES_KEY)
    if not isinstance(resources, dict):
        return 0

    new_names = set(rename_map.values())
    patched = 0
    for name in resources:
        if name in new_names:
            resources[name] = ResourceDescriptor(type=TARGET_MEDIA_TYPE)
            patched += 1
    return patched


def serialize_manifest(document: ManifestDocument) -> bytes:
    """Serialize a manifest compactly as UTF-8 JSON.

    Raises:
        ManifestParseError: If the document holds a non-finite number
            (e.g. an overflowing literal such as 1e400)
    """
    try:
        text = json.dumps(
            document, ensure_ascii=False, separators=(",", ":"), allow_nan=False
        )
    except ValueError as e:
        raise ManifestParseError(f"{MANIFEST_ENTRY} cannot be serialized as JSON: {e}") from e
    return text.encode("utf-8")


def compute_token(manifest_bytes: bytes) -> bytes:
    """Derive the integrity token for final manifest bytes.

    Example:
        >>> compute_token(b"{}")
        b'0.44136fa355b3678a1146ad16f7e8649e94fb4fc21fe77e8310c060f61caaff8a'
    """
    return f"{TOKEN_PREFIX}{hashlib.sha256(manifest_bytes).hexdigest()}".encode("ascii")


def rewrite(manifest_bytes: bytes, rename_map: RenameMap) -> tuple[bytes, bytes]:
    """Rewrite a manifest for a rename map and recompute its token.

    Args:
        manifest_bytes: Original `__data.json` content
        rename_map: Completed old name -> new name map

    Returns:
        Tuple of (new manifest bytes, new token bytes)

    Raises:
        ManifestParseError: If the manifest cannot be decoded, parsed or validated
    """
    try:
        text = manifest_bytes.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ManifestParseError(f"{MANIFEST_ENTRY} is not valid UTF-8: {e}") from e

    document = parse_manifest(substitute_names(text, rename_map))
    patched = patch_resources(document, rename_map)

    new_manifest = serialize_manifest(document)
    token = compute_token(new_manifest)

    logger.info(
        "Rewrote %s: %d renames, %d resource descriptors patched",
        MANIFEST_ENTRY,
        len(rename_map),
        patched,
    )
    return new_manifest, token
