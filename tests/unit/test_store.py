"""Content store and dependency container tests."""

import pytest
from returns.pipeline import is_successful

from stylebridge.codec import ValueCodec
from stylebridge.compiler import StyleCompiler
from stylebridge.core import Settings
from stylebridge.store import ContentStore, InMemoryContentStore

TREE = {"root": {"id": "root", "data": {"type": "root"}, "children": []}}


@pytest.mark.unit
class TestInMemoryStore:
    """Snapshot store."""

    def test_roundtrip(self, store):
        """Saved trees load back equal."""
        assert is_successful(store.save("doc_1", TREE))
        assert store.load("doc_1") == TREE
        assert "doc_1" in store
        assert len(store) == 1

    def test_snapshots_are_isolated(self, store):
        """Neither side shares a mutable tree."""
        tree = {"root": {"id": "root", "data": {"type": "root"}, "children": []}}
        store.save("doc_1", tree)
        tree["root"]["children"].append({"id": "x"})
        loaded = store.load("doc_1")
        loaded["root"]["id"] = "changed"
        assert store.load("doc_1") == TREE

    def test_missing(self, store):
        """Unknown documents load as None."""
        assert store.load("nope") is None
        assert store.stats.misses == 1

    @pytest.mark.parametrize("document_id,tree", [
        ("", TREE),
        ("doc_1", {"nodes": []}),
        ("doc_1", {"root": {"id": "root", "data": {"type": "root", "bad": {1, 2}}}}),
    ])
    def test_rejected_saves(self, store, document_id, tree):
        """Empty ids, rootless and unserializable trees fail."""
        assert not is_successful(store.save(document_id, tree))
        assert len(store) == 0

    def test_delete_and_stats(self, store):
        """Deletes update counts."""
        store.save("b", TREE)
        store.save("a", TREE)
        store.load("a")
        assert store.document_ids() == ["a", "b"]
        assert store.delete("a") is True
        assert store.delete("a") is False
        assert store.stats.to_dict() == {"documents": 1, "loads": 1, "saves": 2, "misses": 0}

    def test_protocol(self):
        """The in-memory store satisfies the store protocol."""
        store: ContentStore = InMemoryContentStore()
        assert store.load("x") is None


@pytest.mark.unit
class TestContainer:
    """Dependency injection wiring."""

    def test_provides_compiler(self, di_container, settings):
        """The compiler is built from the container's settings."""
        compiler = di_container.get(StyleCompiler)
        assert compiler.settings is settings
        assert di_container.get(StyleCompiler) is compiler

    def test_codec_uses_default_unit(self):
        """The codec follows default_length_unit."""
        from stylebridge.core import create_container

        container = create_container(Settings(default_length_unit="rem"))
        assert container.get(ValueCodec).default_length_unit == "rem"

    def test_store_singleton(self, di_container):
        """One store per container."""
        assert di_container.get(ContentStore) is di_container.get(ContentStore)
