"""JSON Schema validation for room manifests.

This module loads the bundled schema and checks the structural assumptions
the rewriter makes about `__data.json`.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema import ValidationError

from .errors import ManifestParseError

# room_minifier/core/validator.py -> room_minifier/schemas/
SCHEMA_PATH = Path(__file__).parent.parent / "schemas" / "manifest.schema.json"


@lru_cache(maxsize=1)
def load_schema() -> dict[str, Any]:
    """Load the JSON schema from disk.

    Returns:
        Dictionary containing the JSON Schema.

    Raises:
        FileNotFoundError: If schema file doesn't exist
        json.JSONDecodeError: If schema is invalid JSON
    """
    if not SCHEMA_PATH.exists():
        raise FileNotFoundError(f"Schema file not found: {SCHEMA_PATH}")

    with SCHEMA_PATH.open("r", encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


def validate_manifest(document: Any) -> None:
    """Validate a parsed manifest against the JSON Schema.

    Args:
        document: The parsed `__data.json` content

    Raises:
        ManifestParseError: If the document doesn't conform to the schema
    """
    try:
        jsonschema.validate(instance=document, schema=load_schema())
    except ValidationError as e:
        error_path = " -> ".join(str(p) for p in e.path) if e.path else "root"
        raise ManifestParseError(
            f"Manifest validation error at {error_path}: {e.message}"
        ) from e
