"""Document builder, wire model and value placement tests."""

import json

import pytest
from returns.pipeline import is_successful

from stylebridge.core import ErrorKind
from stylebridge.core.id import is_element_id
from stylebridge.paths import parse_path
from stylebridge.tree import (
    MAX_TREE_DEPTH,
    DocumentBuilder,
    ElementTree,
    find_node,
    merge_properties,
    place_at,
    place_value,
    validate_tree,
)


def _node(element_id, element_type="EssentialElements\\Div", children=None, **properties):
    node = {"id": element_id, "data": {"type": element_type}}
    if properties:
        node["data"]["properties"] = properties
    if children is not None:
        node["children"] = children
    return node


def _five_node_section(builder):
    section = builder.open_container("EssentialElements\\Section")
    builder.add_leaf("EssentialElements\\Heading")
    builder.add_leaf("EssentialElements\\Text")
    builder.open_container("EssentialElements\\Div")
    builder.add_leaf("EssentialElements\\Button")
    builder.close_all()
    return section


# ============================================================================
# Scoped Construction
# ============================================================================

@pytest.mark.unit
class TestConstruction:
    """Scope stack and arena."""

    def test_empty_document(self, builder):
        """A new document is a childless root."""
        assert builder.build() == {"root": {"id": "root", "data": {"type": "root"}, "children": []}}
        assert builder.element_count() == 0

    def test_containers_open_scope(self, builder):
        """Leaves go into the innermost open container."""
        section = builder.open_container("EssentialElements\\Section")
        heading = builder.add_leaf("EssentialElements\\Heading", {"content": {"content": {"text": "Hi"}}})
        assert builder.depth == 1
        builder.close()
        footer = builder.add_leaf("EssentialElements\\Text")

        root = builder.build()["root"]
        assert [child["id"] for child in root["children"]] == [section, footer]
        assert root["children"][0]["children"][0]["id"] == heading
        assert "children" not in root["children"][0]["children"][0]

    def test_close_at_root_is_noop(self, builder):
        """Closing with no open container keeps the root as parent."""
        builder.close()
        assert builder.current_parent_id == "root"

    def test_generated_ids(self, builder):
        """Ids are prefixed ULIDs."""
        assert is_element_id(builder.add_leaf("EssentialElements\\Text"))

    def test_custom_prefix(self):
        """The id prefix is configurable."""
        doc = DocumentBuilder(id_prefix="node")
        assert doc.add_leaf("EssentialElements\\Text").startswith("node_")

    def test_first_node_creates_document(self):
        """A builder without create_document() starts a root on first use."""
        doc = DocumentBuilder()
        section = doc.open_container("EssentialElements\\Section")
        heading = doc.add_leaf("EssentialElements\\Heading")
        doc.close()
        text = doc.add_leaf("EssentialElements\\Text")

        root = doc.build()["root"]
        assert [child["id"] for child in root["children"]] == [section, text]
        assert root["children"][0]["children"][0]["id"] == heading
        assert doc.depth == 0

    def test_explicit_id_collision(self, builder):
        """Explicit ids must be unique."""
        builder.add_leaf("EssentialElements\\Text", element_id="hero")
        with pytest.raises(ValueError):
            builder.add_leaf("EssentialElements\\Text", element_id="hero")
        with pytest.raises(ValueError):
            builder.add_leaf("EssentialElements\\Text", element_id="root")

    def test_properties_are_copied(self, builder):
        """Caller dicts are not shared with the tree."""
        properties = {"design": {"effects": {"opacity": 1}}}
        element_id = builder.add_leaf("EssentialElements\\Text", properties)
        properties["design"]["effects"]["opacity"] = 0
        assert builder.get_element(element_id)["data"]["properties"]["design"]["effects"]["opacity"] == 1

    def test_set_properties_on_last(self, builder):
        """Patches deep merge into the last node."""
        element_id = builder.add_leaf("EssentialElements\\Text", {"content": {"content": {"text": "A"}}})
        builder.set_properties_on_last({"content": {"content": {"tags": "p"}}})
        assert builder.get_element(element_id)["data"]["properties"] == {
            "content": {"content": {"text": "A", "tags": "p"}}
        }

    def test_element_ids_depth_first(self, builder):
        """Ids list in document order."""
        section = builder.open_container("EssentialElements\\Section")
        first = builder.add_leaf("EssentialElements\\Text")
        builder.close()
        second = builder.add_leaf("EssentialElements\\Text")
        assert builder.element_ids() == ["root", section, first, second]

    def test_build_json(self, builder):
        """JSON output matches build()."""
        builder.add_leaf("EssentialElements\\Text", {"content": {"content": {"text": "A"}}})
        assert json.loads(builder.build_json()) == builder.build()
        assert "\n" in builder.build_json(indent=2)


# ============================================================================
# Insert
# ============================================================================

@pytest.mark.unit
class TestInsert:
    """Positional insertion of wire nodes."""

    @pytest.fixture
    def populated(self, builder):
        builder.add_leaf("EssentialElements\\Text", element_id="a")
        builder.add_leaf("EssentialElements\\Text", element_id="b")
        return builder

    @pytest.mark.parametrize("position,expected", [
        ("first", ["new", "a", "b"]),
        ("last", ["a", "b", "new"]),
        (1, ["a", "new", "b"]),
        (99, ["a", "b", "new"]),
        (-5, ["new", "a", "b"]),
    ])
    def test_positions(self, populated, position, expected):
        """Indexes are clamped to the child list."""
        result = populated.insert("root", _node("new"), position)
        assert result.unwrap() == "new"
        assert [child["id"] for child in populated.build()["root"]["children"]] == expected

    def test_invalid_position(self, populated):
        """Unknown position keywords are rejected."""
        result = populated.insert("root", _node("new"), "middle")
        assert not is_successful(result)
        assert result.failure().kind is ErrorKind.INVALID_REQUEST

    def test_missing_parent(self, populated):
        """Parents must exist."""
        result = populated.insert("ghost", _node("new"))
        assert result.failure().kind is ErrorKind.PARENT_NOT_FOUND
        assert result.failure().element_id == "ghost"

    def test_duplicate_id(self, populated):
        """Subtree ids must not collide with the tree."""
        result = populated.insert("root", _node("new", children=[_node("a")]))
        assert result.failure().kind is ErrorKind.DUPLICATE_ELEMENT_ID
        assert populated.get_element("new") is None

    def test_malformed_node(self, populated):
        """Nodes without data are rejected."""
        result = populated.insert("root", {"id": "new"})
        assert result.failure().kind is ErrorKind.INVALID_REQUEST

    def test_subtree_is_indexed(self, populated):
        """Inserted descendants become addressable."""
        populated.insert("root", _node("box", children=[_node("inner")]))
        assert populated.insert("inner", _node("deep")).unwrap() == "deep"
        assert populated.get_element("box")["children"][0]["children"][0]["id"] == "deep"


# ============================================================================
# Clone
# ============================================================================

@pytest.mark.unit
class TestClone:
    """Subtree copies with fresh ids."""

    def test_clones_get_unique_ids(self, builder):
        """Cloning a five-node subtree twice yields ten new ids."""
        section = _five_node_section(builder)
        original = set(builder.element_ids())

        first = builder.clone_subtree(section).unwrap()
        second = builder.clone_subtree(section).unwrap()

        added = [i for i in builder.element_ids() if i not in original]
        assert len(added) == 10
        assert len(set(added)) == 10
        assert first in added and second in added
        assert builder.element_count() == 15

    def test_clone_copies_data(self, builder):
        """Types and properties are carried over."""
        source = builder.add_leaf("EssentialElements\\Text", {"content": {"content": {"text": "A"}}})
        clone = builder.clone_subtree(source).unwrap()
        assert builder.get_element(clone)["data"] == builder.get_element(source)["data"]

    def test_shallow_clone(self, builder):
        """Shallow clones keep an empty child list."""
        section = _five_node_section(builder)
        clone = builder.clone_subtree(section, deep=False).unwrap()
        assert builder.get_element(clone)["children"] == []

    def test_shallow_clone_of_leaf(self, builder):
        """Leaves stay leaves."""
        leaf = builder.add_leaf("EssentialElements\\Text")
        clone = builder.clone_subtree(leaf, deep=False).unwrap()
        assert "children" not in builder.get_element(clone)

    def test_clone_wire_node(self, builder):
        """Wire nodes are renumbered on the way in."""
        clone = builder.clone_subtree(_node("template", children=[_node("child")])).unwrap()
        assert clone != "template"
        assert builder.get_element("template") is None
        assert len(builder.get_element(clone)["children"]) == 1

    def test_clone_missing(self, builder):
        """Unknown ids fail."""
        assert builder.clone_subtree("ghost").failure().kind is ErrorKind.ELEMENT_NOT_FOUND


# ============================================================================
# Import and Reindex
# ============================================================================

@pytest.mark.unit
class TestImport:
    """Existing trees."""

    @pytest.fixture
    def tree(self):
        return {
            "root": _node("page", "root", children=[
                _node("s1", "EssentialElements\\Section", children=[_node("h1", "EssentialElements\\Heading")]),
            ])
        }

    def test_import(self, builder, tree):
        """The imported root keeps its id and answers to root."""
        assert builder.import_tree(tree).unwrap() == 2
        assert builder.root_id == "page"
        builder.insert("root", _node("t1"))
        assert [c["id"] for c in builder.build()["root"]["children"]] == ["s1", "t1"]

    def test_import_preserves_extra_data(self, builder, tree):
        """Unknown data keys round trip."""
        tree["root"]["children"][0]["data"]["meta"] = {"locked": True}
        builder.import_tree(tree)
        assert builder.get_element("s1")["data"]["meta"] == {"locked": True}

    def test_import_accepts_model(self, builder, tree):
        """ElementTree instances are accepted."""
        assert builder.import_tree(ElementTree.model_validate(tree)).unwrap() == 2

    def test_import_duplicate(self, builder, tree):
        """Repeated ids leave the builder unchanged."""
        builder.add_leaf("EssentialElements\\Text", element_id="keep")
        tree["root"]["children"].append(_node("h1"))
        assert builder.import_tree(tree).failure().kind is ErrorKind.DUPLICATE_ELEMENT_ID
        assert builder.get_element("keep") is not None

    def test_import_malformed(self, builder):
        """Trees must have a root node."""
        assert builder.import_tree({"nodes": []}).failure().kind is ErrorKind.INVALID_REQUEST

    def test_reindex_keeps_reachable(self, builder, tree):
        """A consistent tree is unchanged."""
        builder.import_tree(tree)
        before = builder.build()
        assert builder.reindex() == 2
        assert builder.build() == before

    def test_reindex_drops_unreachable(self, builder, tree):
        """Detached slots are removed."""
        builder.import_tree(tree)
        builder._slots["page"].children.clear()
        assert builder.reindex() == 0
        assert builder.get_element("h1") is None


# ============================================================================
# Tree Validation
# ============================================================================

def _chain(depth):
    """Root with a single line of nested Divs ``depth`` levels deep."""
    node = _node(f"d{depth}")
    for level in range(depth - 1, 0, -1):
        node = _node(f"d{level}", children=[node])
    return {"root": _node("root", "root", children=[node])}


@pytest.mark.unit
class TestValidateTree:
    """validate_tree"""

    def test_stats(self):
        """Counts, depth and type histogram exclude the root."""
        tree = {
            "root": _node("root", "root", children=[
                _node("s1", "EssentialElements\\Section", children=[
                    _node("h1", "EssentialElements\\Heading"),
                    _node("t1", "EssentialElements\\Text"),
                ]),
                _node("t2", "EssentialElements\\Text"),
            ])
        }
        report = validate_tree(tree)
        assert report.is_valid
        assert report.warnings == ()
        assert report.element_count == 4
        assert report.max_depth == 2
        assert report.element_types == {
            "EssentialElements\\Section": 1,
            "EssentialElements\\Heading": 1,
            "EssentialElements\\Text": 2,
        }

    def test_empty_document(self):
        """A bare root is valid and empty."""
        report = validate_tree(DocumentBuilder().build())
        assert report.is_valid
        assert (report.element_count, report.max_depth) == (0, 0)

    def test_duplicate_ids_all_reported(self):
        """Every repeat is reported, not only the first."""
        tree = {"root": _node("root", "root", children=[_node("a"), _node("a"), _node("b", children=[_node("b")])])}
        report = validate_tree(tree)
        assert [d.code for d in report.errors] == ["duplicate_element_id", "duplicate_element_id"]
        assert [d.context["element_id"] for d in report.errors] == ["a", "b"]
        assert report.errors[0].kind is ErrorKind.DUPLICATE_ELEMENT_ID
        assert report.element_count == 4

    def test_reserved_id(self):
        """Only the root may be called root."""
        tree = {"root": _node("page", "root", children=[_node("root")])}
        assert [d.code for d in validate_tree(tree).errors] == ["reserved_element_id"]

    def test_depth_limit(self):
        """Depth up to the limit is fine; one more level is an error."""
        assert validate_tree(_chain(5), max_depth=5).max_depth == 5
        report = validate_tree(_chain(6), max_depth=5)
        assert [d.code for d in report.errors] == ["max_depth_exceeded"]
        assert report.errors[0].context["path"].count("children") == 6
        assert report.max_depth == 5

    def test_default_depth_limit(self):
        """The default limit is MAX_TREE_DEPTH."""
        assert validate_tree(_chain(MAX_TREE_DEPTH)).is_valid
        assert not validate_tree(_chain(MAX_TREE_DEPTH + 1)).is_valid

    def test_malformed_nodes(self):
        """Shape problems are collected together."""
        tree = {
            "root": _node("root", "root", children=[
                {"id": "", "data": {"type": "EssentialElements\\Div"}},
                {"id": "x", "data": {"type": ""}},
                {"id": "y", "data": {"type": "EssentialElements\\Div", "properties": []}},
                {"id": "z", "data": {"type": "EssentialElements\\Div"}, "children": {}},
                "text",
            ])
        }
        codes = [d.code for d in validate_tree(tree).errors]
        assert codes == [
            "invalid_element_id",
            "missing_element_type",
            "invalid_properties",
            "invalid_children",
            "invalid_node",
        ]

    def test_missing_root(self):
        """Trees need a root object."""
        assert [d.code for d in validate_tree({"nodes": []}).errors] == ["missing_root"]
        assert [d.code for d in validate_tree([]).errors] == ["missing_root"]

    def test_unexpected_keys_warn(self):
        """Unknown keys are warnings, not errors."""
        tree = {"root": {**_node("root", "root"), "locked": True}, "version": 2}
        report = validate_tree(tree)
        assert report.is_valid
        assert [d.code for d in report.warnings] == ["unexpected_tree_keys", "unexpected_node_keys"]

    def test_accepts_model(self):
        """ElementTree instances are accepted."""
        tree = ElementTree.model_validate({"root": _node("root", "root", children=[_node("a")])})
        assert validate_tree(tree).element_count == 1

    def test_report_dict(self):
        """The report serializes to plain data."""
        data = validate_tree({"root": _node("root", "root", children=[_node("a"), _node("a")])}).to_dict()
        assert data["valid"] is False
        assert data["errors"][0]["kind"] == "DuplicateElementId"
        assert data["stats"] == {
            "element_count": 2,
            "max_depth": 1,
            "element_types": {"EssentialElements\\Div": 2},
        }

    def test_import_rejects_deep_tree(self, builder):
        """import_tree applies the same checks and leaves the builder alone."""
        builder.add_leaf("EssentialElements\\Text", element_id="keep")
        result = builder.import_tree(_chain(MAX_TREE_DEPTH + 1))
        assert result.failure().kind is ErrorKind.INVALID_REQUEST
        assert builder.get_element("keep") is not None


# ============================================================================
# Wire Models
# ============================================================================

@pytest.mark.unit
class TestModels:
    """Pydantic wire shape."""

    def test_to_wire_roundtrip(self):
        """Leaves omit children; containers keep them."""
        wire = {"root": _node("root", "root", children=[_node("leaf", content={"content": {"text": "A"}})])}
        assert ElementTree.model_validate(wire).to_wire() == wire


# ============================================================================
# Placement
# ============================================================================

@pytest.mark.unit
class TestPlacement:
    """Writing values at resolved paths."""

    def test_creates_intermediates(self):
        """Missing objects are created."""
        properties = {}
        assert place_at(properties, parse_path("design.effects.opacity"), 0.5) is None
        assert properties == {"design": {"effects": {"opacity": 0.5}}}

    def test_breakpoint_maps_merge(self):
        """Breakpoint keys accumulate on the same leaf."""
        properties = {}
        path = parse_path("design.effects.opacity")
        place_at(properties, path, 1, "breakpoint_base")
        place_at(properties, path, 0.5, "breakpoint_phone_portrait")
        assert properties["design"]["effects"]["opacity"] == {
            "breakpoint_base": 1,
            "breakpoint_phone_portrait": 0.5,
        }

    def test_discriminated_item_is_shared(self):
        """Fields of one transform type land in one item."""
        properties = {}
        place_at(properties, parse_path("t.transforms[type=rotate].rotate_z"), 45, "breakpoint_base")
        place_at(properties, parse_path("t.transforms[type=rotate].rotate_x"), 10, "breakpoint_base")
        place_at(properties, parse_path("t.transforms[type=scale].scale"), 2, "breakpoint_base")
        assert properties["t"]["transforms"] == [
            {"type": "rotate", "rotate_z": {"breakpoint_base": 45}, "rotate_x": {"breakpoint_base": 10}},
            {"type": "scale", "scale": {"breakpoint_base": 2}},
        ]

    def test_last_item_until_occupied(self):
        """[] fills the last item and starts a new one when the field is taken."""
        properties = {}
        place_at(properties, parse_path("e.transition[].duration"), 300)
        place_at(properties, parse_path("e.transition[].timing"), "ease")
        place_at(properties, parse_path("e.transition[].duration"), 150)
        assert properties["e"]["transition"] == [{"duration": 300, "timing": "ease"}, {"duration": 150}]

    def test_item_value_merges(self):
        """Object values merge into the addressed item."""
        properties = {}
        path = parse_path("e.filter[type=blur]")
        place_at(properties, path, {"type": "blur", "blur_amount": 4}, "breakpoint_base")
        place_at(properties, path, {"type": "blur", "blur_amount": 2}, "breakpoint_phone_portrait")
        assert properties["e"]["filter"] == [
            {"type": "blur", "blur_amount": {"breakpoint_base": 4, "breakpoint_phone_portrait": 2}}
        ]

    def test_list_value_replaces_repeater(self):
        """Whole lists replace the repeater."""
        properties = {"b": {"layers": [{"type": "old"}]}}
        place_at(properties, parse_path("b.layers[]"), [{"type": "image"}])
        assert properties["b"]["layers"] == [{"type": "image"}]

    def test_conflicts(self):
        """Existing scalars block the path."""
        properties = {"design": "flat"}
        diagnostic = place_at(properties, parse_path("design.effects.opacity"), 1)
        assert diagnostic.kind is ErrorKind.PATH_CONFLICT
        assert diagnostic.context["path"] == "design.effects.opacity"

        properties = {"design": {"effects": {"opacity": 1}}}
        diagnostic = place_at(properties, parse_path("design.effects.opacity"), 0.5, "breakpoint_base")
        assert diagnostic.code == "path_conflict"

        properties = {"e": {"filter": {"type": "blur"}}}
        assert place_at(properties, parse_path("e.filter[type=blur].amount"), 1) is not None

    def test_place_value_ignores_breakpoint_for_plain_properties(self, resolver):
        """Non-responsive specs store plain values."""
        properties = {}
        place_value(properties, resolver.resolve("text", "Heading"), "Hi", "breakpoint_base")
        place_value(properties, resolver.resolve("opacity"), 0.5, "breakpoint_base")
        assert properties["content"]["content"]["text"] == "Hi"
        assert properties["design"]["effects"]["opacity"] == {"breakpoint_base": 0.5}

    def test_merge_properties(self):
        """Objects merge; lists and scalars replace."""
        target = {"a": {"b": 1, "c": [1, 2]}, "d": 1}
        patch = {"a": {"c": [3], "e": {"f": 1}}, "d": {"g": 2}}
        assert merge_properties(target, patch) == {"a": {"b": 1, "c": [3], "e": {"f": 1}}, "d": {"g": 2}}

    def test_find_node(self):
        """Wrapped and bare trees are searched."""
        tree = {"root": _node("root", "root", children=[_node("s", children=[_node("x")])])}
        assert find_node(tree, "x")["id"] == "x"
        assert find_node(tree["root"], "s")["id"] == "s"
        assert find_node(tree, "missing") is None
