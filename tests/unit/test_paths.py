"""Property path, breakpoint, resolver and element schema tests."""

import pytest

from stylebridge.core import ErrorKind, PathSyntaxError
from stylebridge.grammar import GrammarFamily
from stylebridge.paths import (
    Breakpoint,
    CONTAINER_TYPES,
    ELEMENT_TYPE_MAP,
    FieldSegment,
    PathResolver,
    PropertyEntry,
    RepeaterSegment,
    State,
    breakpoint_id,
    breakpoint_key,
    canonical_type,
    format_path,
    get_property_metadata,
    get_schema,
    parse_path,
    validate_definition,
)

TYPOGRAPHY = "design.typography.typography.custom.customTypography"


# ============================================================================
# Path Syntax
# ============================================================================

@pytest.mark.unit
class TestPathSyntax:
    """Dotted paths with repeater segments."""

    def test_fields_and_discriminated_repeater(self):
        """[key=value] selects a repeater item."""
        assert parse_path("design.effects.transform.transforms[type=rotate].rotate_x") == (
            FieldSegment("design"),
            FieldSegment("effects"),
            FieldSegment("transform"),
            RepeaterSegment("transforms", ("type", "rotate")),
            FieldSegment("rotate_x"),
        )

    def test_last_item_repeater(self):
        """[] addresses the last item."""
        assert parse_path("design.effects.transition[].duration")[-2] == RepeaterSegment("transition")

    def test_discriminator_values_may_contain_hyphens(self):
        """hue-rotate is a valid discriminator value."""
        segment = parse_path("design.effects.filter[type=hue-rotate]")[-1]
        assert segment == RepeaterSegment("filter", ("type", "hue-rotate"))

    @pytest.mark.parametrize("text", [
        "design.effects.transform.transforms[type=rotate].rotate_z",
        "design.effects.transition[].delay",
        "content.content.text",
    ])
    def test_format_roundtrip(self, text):
        """format_path inverts parse_path."""
        assert format_path(parse_path(text)) == text

    @pytest.mark.parametrize("text", ["", "   ", "a..b", "a.", "a[", "a]", "a[type=]", "1abc", "a[b=c]d"])
    def test_malformed_paths(self, text):
        """Empty segments, bad names and brackets are rejected."""
        with pytest.raises(PathSyntaxError):
            parse_path(text)

    def test_path_syntax_error_is_value_error(self):
        """Callers may catch ValueError."""
        with pytest.raises(ValueError):
            parse_path("a..b")


# ============================================================================
# Breakpoints
# ============================================================================

@pytest.mark.unit
class TestBreakpoints:
    """Breakpoint names, fallback and state keys."""

    @pytest.mark.parametrize("name,expected", [
        ("base", "breakpoint_base"),
        ("desktop", "breakpoint_base"),
        ("tablet", "breakpoint_tablet_portrait"),
        ("Tablet-Landscape", "breakpoint_tablet_landscape"),
        ("mobile", "breakpoint_phone_portrait"),
        ("phone_landscape", "breakpoint_phone_landscape"),
        ("breakpoint_phone_portrait", "breakpoint_phone_portrait"),
    ])
    def test_aliases(self, name, expected):
        """Human names map to canonical ids."""
        assert breakpoint_id(name) == expected

    def test_unknown_falls_back(self):
        """Unknown names fall back to the default."""
        assert breakpoint_id("watch") == "breakpoint_base"
        assert breakpoint_id("watch", default=Breakpoint.PHONE_PORTRAIT) == "breakpoint_phone_portrait"

    def test_unknown_strict(self):
        """Strict lookups report unknown names."""
        assert breakpoint_id("watch", strict=True) is None

    def test_keys(self):
        """Hover keys carry a _hover suffix."""
        assert breakpoint_key() == "breakpoint_base"
        assert breakpoint_key(Breakpoint.PHONE_PORTRAIT) == "breakpoint_phone_portrait"
        assert breakpoint_key("breakpoint_base", State.HOVER) == "breakpoint_base_hover"
        assert breakpoint_key("breakpoint_tablet_portrait", "hover") == "breakpoint_tablet_portrait_hover"

    def test_key_rejects_unknown_breakpoint(self):
        """Keys are only built from canonical ids."""
        with pytest.raises(ValueError):
            breakpoint_key("tablet")


# ============================================================================
# Resolver
# ============================================================================

@pytest.mark.unit
class TestResolver:
    """Name -> path spec."""

    def test_element_table_first(self, resolver):
        """Element tables shadow the global table."""
        assert resolver.resolve("background", "Button").path_text == "design.button.styles.background"
        assert resolver.resolve("background").path_text == "design.background.color"

    def test_heading_font_size(self, resolver):
        """Typography paths are responsive lengths."""
        spec = resolver.resolve("fontSize", "Heading")
        assert spec.path_text == f"{TYPOGRAPHY}.fontSize"
        assert spec.family is GrammarFamily.LENGTH
        assert spec.responsive
        assert spec.rules().non_negative

    def test_global_fallback_for_element(self, resolver):
        """Elements see global properties they do not override."""
        assert resolver.resolve("opacity", "Heading").path_text == "design.effects.opacity"

    def test_transform_component(self, resolver):
        """Transform components address a discriminated repeater item."""
        spec = resolver.resolve("rotate")
        assert spec.path_text == "design.effects.transform.transforms[type=rotate].rotate_z"
        assert spec.family is GrammarFamily.ANGLE
        assert spec.default_unit == "deg"

    def test_wrapped_filter(self, resolver):
        """filterBlur takes the argument of blur()."""
        spec = resolver.resolve("filterBlur")
        assert spec.wrap_function == "blur"
        assert spec.ends_in_repeater

    def test_hover_alias(self, resolver):
        """<name>Hover resolves to the hover path."""
        assert resolver.hover_alias("opacity").path_text == "design.effects.opacity_hover"
        assert resolver.hover_alias("background").path_text == "design.background_hover.color"
        assert resolver.hover_alias("rotate").path_text == (
            "design.effects.transform.transforms_hover[type=rotate].rotate_z"
        )
        assert resolver.hover_alias("backgroundLayers") is None

    def test_fixed_breakpoint(self, resolver):
        """customCssTablet always lands at the tablet breakpoint."""
        assert resolver.resolve("customCssTablet").fixed_breakpoint == "breakpoint_tablet_portrait"

    def test_unknown(self, resolver):
        """Unknown names resolve to None."""
        assert resolver.resolve("sparkle") is None

    def test_known_properties(self, resolver):
        """Element names are merged into the global list."""
        names = resolver.known_properties("Heading")
        assert "tag" in names and "opacity" in names
        assert "tag" not in resolver.known_properties()

    def test_malformed_table_path_fails_at_construction(self):
        """Table paths are parsed once, up front."""
        with pytest.raises(PathSyntaxError):
            PathResolver(global_table={"bad": PropertyEntry(path="design..x")}, element_tables={})


# ============================================================================
# Metadata
# ============================================================================

@pytest.mark.unit
class TestMetadata:
    """Property classification."""

    def test_number_with_range(self):
        """Ranges are reported."""
        assert get_property_metadata("opacity") == {
            "name": "opacity",
            "path": "design.effects.opacity",
            "responsive": True,
            "type": "number",
            "range": {"min": 0, "max": 1},
        }

    @pytest.mark.parametrize("name,kind", [
        ("filterBlur", "repeater_item"),
        ("transition", "repeater"),
        ("transitionDuration", "unit"),
        ("boxShadow", "shadow"),
        ("border", "border"),
        ("borderTop", "border_side"),
        ("overlay", "object"),
        ("mixBlendMode", "enum"),
        ("gradient", "gradient"),
        ("sparkle", "unknown"),
    ])
    def test_types(self, name, kind):
        """Each name is classified."""
        assert get_property_metadata(name)["type"] == kind

    def test_unit_default(self):
        """Unit properties report their default unit."""
        assert get_property_metadata("transitionDuration")["default_unit"] == "ms"

    def test_schema_facts(self):
        """Element schemas add required flags and defaults."""
        tag = get_property_metadata("tag", "Heading")
        assert tag["values"] == ["h1", "h2", "h3", "h4", "h5", "h6"]
        assert tag["required"] is False
        assert tag["default"] == "h2"
        assert get_property_metadata("text", "Heading")["required"] is True


# ============================================================================
# Element Schemas
# ============================================================================

@pytest.mark.unit
class TestSchemas:
    """Element types and definitions."""

    @pytest.mark.parametrize("simple,canonical", [
        ("Heading", "EssentialElements\\Heading"),
        ("Button", "EssentialElements\\ButtonV2"),
        ("Image", "EssentialElements\\Image2"),
        ("HtmlCode", "OxygenElements\\HtmlCode"),
        ("Carousel", "EssentialElements\\Div"),
        ("EssentialElements\\Custom", "EssentialElements\\Custom"),
    ])
    def test_canonical_type(self, simple, canonical):
        """Unknown simplified types compile as Div; namespaced types pass."""
        assert canonical_type(simple) == canonical

    def test_containers(self):
        """Layout types accept children."""
        assert {"Section", "Div", "Columns"} <= CONTAINER_TYPES
        assert get_schema("Section").container
        assert not get_schema("Heading").container
        assert set(CONTAINER_TYPES) <= set(ELEMENT_TYPE_MAP)

    def test_missing_required(self):
        """A heading needs text."""
        [diagnostic] = validate_definition({"type": "Heading"})
        assert diagnostic.kind is ErrorKind.MISSING_REQUIRED_PROPERTY
        assert diagnostic.context["property"] == "text"

    def test_alias_satisfies_required(self):
        """Image src may be given as imageUrl."""
        assert validate_definition({"type": "Image", "imageUrl": "https://cdn.example.com/a.png"}) == []

    def test_enum_choice(self):
        """Heading tags are h1-h6."""
        [diagnostic] = validate_definition({"type": "Heading", "text": "Hi", "tag": "h7"})
        assert diagnostic.code == "invalid_enum_value"

    def test_unknown_type_has_no_rules(self):
        """Types without a schema pass."""
        assert validate_definition({"type": "Carousel"}) == []
