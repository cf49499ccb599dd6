"""Tests for ID generation system."""

from stylebridge.core.id import (
    ROOT_ID,
    Prefix,
    extract_prefix,
    is_document_id,
    is_element_id,
    is_valid,
    new_document_id,
    new_element_id,
)


class TestGeneration:
    """Test basic ID generation."""

    def test_unique_ids(self):
        """IDs should be unique."""
        ids = {new_element_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_prefix_with_underscores(self):
        """Only the last separator splits prefix from ULID."""
        id_str = new_element_id("hero_block")
        assert extract_prefix(id_str) == "hero_block"
        assert is_valid(id_str)
        assert len(id_str.rpartition("_")[2]) == 26


class TestTypedGeneration:
    """Test typed ID generation."""

    def test_element_id_format(self):
        """Element IDs should have correct prefix."""
        id_str = new_element_id()
        assert id_str.startswith("el_")
        assert extract_prefix(id_str) == Prefix.ELEMENT
        assert is_element_id(id_str)
        assert not is_document_id(id_str)

    def test_custom_prefix(self):
        """Element prefixes are configurable."""
        id_str = new_element_id("block")
        assert extract_prefix(id_str) == "block"
        assert is_valid(id_str)
        assert not is_element_id(id_str)

    def test_document_id_format(self):
        """Document IDs should have correct prefix."""
        id_str = new_document_id()
        assert id_str.startswith("doc_")
        assert is_document_id(id_str)


class TestValidation:
    """Test ID validation."""

    def test_invalid_ids(self):
        """Invalid IDs should fail validation."""
        assert not is_valid("")
        assert not is_valid("invalid")
        assert not is_valid("el_")
        assert not is_valid("el_INVALID")

    def test_root_is_not_generated(self):
        """The reserved root id is not a generated element id."""
        assert ROOT_ID == "root"
        assert not is_element_id(ROOT_ID)
        assert extract_prefix(ROOT_ID) is None
