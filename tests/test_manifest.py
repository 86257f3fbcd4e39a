"""Tests for manifest rewriting and token computation."""

import hashlib
import json

import pytest

from room_minifier.core.errors import ManifestParseError
from room_minifier.manifest import (
    compute_token,
    patch_resources,
    rewrite,
    substitute_names,
)

NEW_A = "a" * 64 + ".webp"
NEW_B = "b" * 64 + ".webp"


class TestSubstituteNames:
    """Test the raw text substitution pass."""

    def test_replaces_every_occurrence(self) -> None:
        """Test that all occurrences are replaced, not just the first."""
        text = '{"x":"a.png","y":["a.png","url(a.png)"]}'
        result = substitute_names(text, {"a.png": NEW_A})
        assert "a.png" not in result
        assert result.count(NEW_A) == 3

    def test_longer_names_replaced_first(self) -> None:
        """Test that a name containing another name is not partially rewritten."""
        text = '["a.png","aa.png"]'
        result = substitute_names(text, {"a.png": NEW_A, "aa.png": NEW_B})
        assert json.loads(result) == [NEW_A, NEW_B]

    def test_order_independent(self) -> None:
        """Test that map insertion order does not change the result."""
        text = '["x/a.png","b.jpg"]'
        forward = substitute_names(text, {"x/a.png": NEW_A, "b.jpg": NEW_B})
        backward = substitute_names(text, {"b.jpg": NEW_B, "x/a.png": NEW_A})
        assert forward == backward

    def test_empty_map_is_identity(self) -> None:
        """Test that no renames leaves the text untouched."""
        assert substitute_names('{"k":"v"}', {}) == '{"k":"v"}'


class TestPatchResources:
    """Test media type patching."""

    def test_renamed_resources_get_minimal_descriptor(self) -> None:
        """Test that renamed descriptors are replaced wholesale."""
        document = {
            "resources": {
                NEW_A: {"type": "image/png", "size": 10},
                "music.mp3": {"type": "audio/mpeg"},
            }
        }
        patched = patch_resources(document, {"a.png": NEW_A})
        assert patched == 1
        assert document["resources"][NEW_A] == {"type": "image/webp"}
        assert document["resources"]["music.mp3"] == {"type": "audio/mpeg"}

    def test_old_names_are_not_patched(self) -> None:
        """Test that only new names (map values) are matched."""
        document = {"resources": {"a.png": {"type": "image/png"}}}
        assert patch_resources(document, {"a.png": NEW_A}) == 0
        assert document["resources"]["a.png"] == {"type": "image/png"}

    def test_missing_resources_is_skipped(self) -> None:
        """Test that a manifest without resources is not an error."""
        document = {"entities": []}
        assert patch_resources(document, {"a.png": NEW_A}) == 0
        assert document == {"entities": []}


class TestComputeToken:
    """Test integrity token derivation."""

    def test_prefix_and_digest(self) -> None:
        """Test the token format."""
        data = b'{"resources":{}}'
        assert compute_token(data) == b"0." + hashlib.sha256(data).hexdigest().encode()


class TestRewrite:
    """Test the full rewrite."""

    def test_scenario(self) -> None:
        """Test the single renamed PNG scenario."""
        manifest = b'{"resources":{"a.png":{"type":"image/png"}}}'
        new_manifest, token = rewrite(manifest, {"a.png": NEW_A})

        assert new_manifest == ('{"resources":{"%s":{"type":"image/webp"}}}' % NEW_A).encode()
        assert token == b"0." + hashlib.sha256(new_manifest).hexdigest().encode()

    def test_freeform_references_rewritten(self) -> None:
        """Test that references outside resources are substituted too."""
        manifest = json.dumps(
            {
                "resources": {"a.png": {"type": "image/png"}},
                "items": {"i1": {"imageUrl": "a.png", "memo": "background: a.png"}},
            }
        ).encode()
        new_manifest, _ = rewrite(manifest, {"a.png": NEW_A})
        text = new_manifest.decode()

        assert "a.png" not in text
        document = json.loads(text)
        assert document["items"]["i1"] == {"imageUrl": NEW_A, "memo": f"background: {NEW_A}"}

    def test_non_ascii_preserved(self) -> None:
        """Test that non-ASCII text is kept as UTF-8."""
        manifest = '{"name":"部屋","resources":{}}'.encode("utf-8")
        new_manifest, _ = rewrite(manifest, {})
        assert "部屋" in new_manifest.decode("utf-8")

    def test_utf8_bom_accepted(self) -> None:
        """Test that a leading BOM does not break parsing."""
        new_manifest, _ = rewrite(b'\xef\xbb\xbf{"resources":{}}', {})
        assert json.loads(new_manifest) == {"resources": {}}

    def test_invalid_json_raises(self) -> None:
        """Test that a broken manifest raises ManifestParseError."""
        with pytest.raises(ManifestParseError, match="not valid JSON"):
            rewrite(b'{"resources":', {})

    def test_non_object_document_raises(self) -> None:
        """Test that a top-level array is rejected."""
        with pytest.raises(ManifestParseError, match="validation error"):
            rewrite(b'["a.png"]', {})

    def test_opaque_descriptors_pass_through(self) -> None:
        """Test that descriptors of any shape survive the rewrite."""
        manifest = (
            b'{"resources":{"a.png":{"type":"image/png"},"note.txt":"plain",'
            b'"bgm.mp3":null,"x.mp3":{"type":null}}}'
        )
        new_manifest, _ = rewrite(manifest, {"a.png": NEW_A})
        assert json.loads(new_manifest)["resources"] == {
            NEW_A: {"type": "image/webp"},
            "note.txt": "plain",
            "bgm.mp3": None,
            "x.mp3": {"type": None},
        }

    def test_renamed_non_object_descriptor_is_replaced(self) -> None:
        """Test that a renamed entry with a null descriptor is still patched."""
        new_manifest, _ = rewrite(b'{"resources":{"a.png":null}}', {"a.png": NEW_A})
        assert json.loads(new_manifest) == {"resources": {NEW_A: {"type": "image/webp"}}}

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_json_constants_raise(self, literal: str) -> None:
        """Test that NaN and infinities are rejected as invalid JSON."""
        manifest = ('{"resources":{},"v":%s}' % literal).encode()
        with pytest.raises(ManifestParseError, match="not valid JSON"):
            rewrite(manifest, {})

    def test_overflowing_number_raises(self) -> None:
        """Test that a literal parsing to infinity is never written back out."""
        with pytest.raises(ManifestParseError, match="cannot be serialized"):
            rewrite(b'{"resources":{},"v":1e400}', {})

    def test_non_object_resources_passes_through(self) -> None:
        """Test that a resources value that is not a mapping is left alone."""
        new_manifest, _ = rewrite(b'{"resources":["a.png"]}', {"a.png": NEW_A})
        assert json.loads(new_manifest) == {"resources": [NEW_A]}

    def test_invalid_utf8_raises(self) -> None:
        """Test that undecodable bytes raise ManifestParseError."""
        with pytest.raises(ManifestParseError, match="UTF-8"):
            rewrite(b'{"x":"\xff"}', {})
