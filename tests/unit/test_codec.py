"""Value codec tests: parsing, serialization and wire form."""

import pytest
from hypothesis import given, strategies as st
from returns.pipeline import is_successful

from stylebridge.codec import (
    Color,
    CssVariable,
    EnumValue,
    ListValue,
    Number,
    ObjectValue,
    Scalar,
    Unit,
    ValueCodec,
    gradient_angle,
    gradient_stop_colors,
    gradient_stop_positions,
    serialize,
    to_wire,
    unit_wire,
)
from stylebridge.core import EncodingFailure
from stylebridge.grammar import GrammarFamily, ValueRules


def parsed(codec, raw, family, rules=None):
    result = codec.parse(raw, family, rules)
    assert is_successful(result), result.failure()
    return result.unwrap()


# ============================================================================
# Scalars and Dimensions
# ============================================================================

@pytest.mark.unit
class TestDimensions:
    """Lengths, angles and times."""

    def test_length_with_unit(self, codec):
        """Unit text is kept as authored."""
        assert parsed(codec, "16px", GrammarFamily.LENGTH) == Unit(16.0, "px", "16px")

    def test_bare_number_takes_default_unit(self, codec):
        """Bare numbers become the codec's default length unit."""
        assert parsed(codec, 48, GrammarFamily.LENGTH).text == "48px"
        assert parsed(ValueCodec("rem"), "2", GrammarFamily.LENGTH).text == "2rem"

    def test_rule_unit_wins(self, codec):
        """A property default unit overrides the codec default."""
        value = parsed(codec, "50", GrammarFamily.LENGTH, ValueRules(default_unit="%"))
        assert value.text == "50%"

    def test_family_default_units(self, codec):
        """Angles default to deg, times to ms."""
        assert parsed(codec, "90", GrammarFamily.ANGLE).text == "90deg"
        assert parsed(codec, "300", GrammarFamily.TIME).text == "300ms"

    def test_whitespace_between_number_and_unit(self, codec):
        """'16 px' normalizes to '16px'."""
        assert serialize(parsed(codec, "16 px", GrammarFamily.LENGTH)) == "16px"

    def test_unit_object_input(self, codec):
        """Structured {number, unit} input."""
        assert parsed(codec, {"number": 1.5, "unit": "rem"}, GrammarFamily.LENGTH) == Unit(1.5, "rem", "1.5rem")

    def test_auto_and_keywords(self, codec):
        """Keywords stay scalars."""
        assert parsed(codec, "auto", GrammarFamily.LENGTH) == Scalar("auto")
        assert parsed(codec, "INHERIT", GrammarFamily.COLOR) == Scalar("inherit")

    def test_empty_value(self, codec):
        """Empty input parses to the empty scalar."""
        assert parsed(codec, "", GrammarFamily.LENGTH) == Scalar("")

    def test_invalid_value_is_failure(self, codec):
        """Bad input never raises."""
        result = codec.parse("12parsecs", GrammarFamily.LENGTH)
        assert not is_successful(result)
        assert result.failure()[0].code == "invalid_length"

    @given(
        st.integers(min_value=-5000, max_value=5000),
        st.sampled_from(["px", "rem", "em", "%", "vw", "vh"]),
    )
    def test_length_roundtrip(self, number, unit):
        """Property test: integer lengths serialize back to the same text."""
        text = f"{number}{unit}"
        assert serialize(parsed(ValueCodec(), text, GrammarFamily.LENGTH)) == text

    @given(st.integers(min_value=-100_000, max_value=100_000))
    def test_decimal_lengths_idempotent(self, hundredths):
        """Property test: serialize(parse(serialize(parse(x)))) == serialize(parse(x))."""
        codec = ValueCodec()
        once = serialize(parsed(codec, {"number": hundredths / 100, "unit": "px"}, GrammarFamily.LENGTH))
        twice = serialize(parsed(codec, once, GrammarFamily.LENGTH))
        assert once == twice


# ============================================================================
# Colors, Enums and References
# ============================================================================

@pytest.mark.unit
class TestSimpleValues:
    """Colors, enums and custom property references."""

    def test_color(self, codec):
        """Colors keep their text."""
        assert parsed(codec, "#FFF", GrammarFamily.COLOR) == Color("#FFF")

    def test_enum(self, codec):
        """Enums keep their value."""
        rules = ValueRules(choices=("h1", "h2"))
        assert parsed(codec, "h1", GrammarFamily.ENUM, rules) == EnumValue("h1")

    def test_number(self, codec):
        """Numbers parse as floats."""
        assert parsed(codec, "0.5", GrammarFamily.NUMBER) == Number(0.5)

    def test_reference_with_typed_fallback(self, codec):
        """Fallbacks of typed families are lowered."""
        value = parsed(codec, "var(--gap, 8)", GrammarFamily.LENGTH)
        assert value == CssVariable("--gap", Unit(8.0, "px", "8px"))
        assert serialize(value) == "var(--gap, 8px)"

    def test_nested_reference_chain(self, codec):
        """Fallback chains nest."""
        value = parsed(codec, "var(--a, var(--b, red))", GrammarFamily.COLOR)
        assert value == CssVariable("--a", CssVariable("--b", Color("red")))
        assert serialize(value) == "var(--a, var(--b, red))"

    def test_serialize_rejects_bad_variable_name(self):
        """Invalid names are defects."""
        with pytest.raises(EncodingFailure):
            serialize(CssVariable("brand"))

    def test_serialize_rejects_non_finite(self):
        """Infinite numbers cannot be rendered."""
        with pytest.raises(EncodingFailure):
            serialize(Number(float("inf")))

    def test_serialize_rejects_incomplete_shadow(self):
        """Shadows need both offsets."""
        with pytest.raises(EncodingFailure):
            serialize(ObjectValue(fields={"x": Unit(0.0, "px", "0px")}, kind="shadow"))


# ============================================================================
# Composite Families
# ============================================================================

@pytest.mark.unit
class TestComposites:
    """Shadows, filters, transforms, gradients, borders and radii."""

    def test_shadow_lowering(self, codec):
        """Color is extracted and lengths take px."""
        value = parsed(codec, "0 2px 4px rgba(0,0,0,0.1)", GrammarFamily.BOX_SHADOW)
        assert isinstance(value, ListValue)
        assert serialize(value) == "0px 2px 4px rgba(0,0,0,0.1)"

    def test_inset_shadow(self, codec):
        """inset leads the serialized clause."""
        value = parsed(codec, "inset 0 0 0 1px #000", GrammarFamily.BOX_SHADOW)
        assert serialize(value) == "inset 0px 0px 0px 1px #000"

    @pytest.mark.parametrize("text, expected", [
        ("0 0 10px var(--c, #fff)", "0px 0px 10px var(--c, #fff)"),
        ("0 0 10px var(--c, rgba(0,0,0,.5))", "0px 0px 10px var(--c, rgba(0,0,0,.5))"),
    ])
    def test_shadow_variable_color(self, codec, text, expected):
        """A var() color keeps its fallback intact."""
        value = parsed(codec, text, GrammarFamily.BOX_SHADOW)
        [shadow] = value.items
        assert isinstance(shadow.get("color"), CssVariable)
        assert serialize(value) == expected

    def test_drop_shadow_inset_rejected(self, codec):
        """inset is not silently dropped from drop-shadow."""
        result = codec.parse("drop-shadow(inset 1px 1px red)", GrammarFamily.FILTER)
        assert not is_successful(result)
        assert [d.code for d in result.failure()] == ["drop_shadow_inset"]

    def test_object_fields_read_only(self, codec):
        """Canonical objects cannot be changed after construction."""
        fields = {"x": Unit(0.0, "px", "0px")}
        value = ObjectValue(fields=fields, kind="shadow")
        fields["y"] = Unit(1.0, "px", "1px")
        assert "y" not in value.fields
        with pytest.raises(TypeError):
            value.fields["y"] = Unit(1.0, "px", "1px")

        [shadow] = parsed(codec, "0 2px red", GrammarFamily.BOX_SHADOW).items
        with pytest.raises(TypeError):
            shadow.fields["color"] = Color("blue")

    def test_shadow_list_joined_by_commas(self, codec):
        """Clauses join with ', '."""
        value = parsed(codec, "0 1px red, 0 2px blue", GrammarFamily.BOX_SHADOW)
        assert serialize(value) == "0px 1px red, 0px 2px blue"

    def test_filter_list_joined_by_spaces(self, codec):
        """Filter functions join with spaces."""
        value = parsed(codec, "blur(4px)   brightness(0.5)", GrammarFamily.FILTER)
        assert serialize(value) == "blur(4px) brightness(0.5)"

    def test_transform_names_canonicalized(self, codec):
        """Function names take their canonical casing."""
        value = parsed(codec, "ROTATEX(45deg) scale(1.2,0.8)", GrammarFamily.TRANSFORM)
        assert serialize(value) == "rotateX(45deg) scale(1.2, 0.8)"

    def test_gradient_accessors(self, codec):
        """Angle, stop colors and stop positions."""
        value = parsed(codec, "linear-gradient(45deg, red 0%, rgba(0, 0, 0, 0.5) 100%)", GrammarFamily.GRADIENT)
        assert gradient_angle(value) == Unit(45.0, "deg", "45deg")
        assert gradient_stop_colors(value) == ["red", "rgba(0, 0, 0, 0.5)"]
        assert gradient_stop_positions(value) == ["0%", "100%"]

    def test_structured_gradient(self, codec):
        """Gradient objects render as gradient text."""
        value = parsed(
            codec,
            {"type": "linear", "angle": 90, "colors": ["red", "blue"], "stops": [0, 100]},
            GrammarFamily.GRADIENT,
        )
        assert serialize(value) == "linear-gradient(90deg, red 0%, blue 100%)"

    def test_repeating_gradient(self, codec):
        """The repeating prefix survives."""
        text = "repeating-linear-gradient(red 0 10px, blue 10px 20px)"
        assert serialize(parsed(codec, text, GrammarFamily.GRADIENT)) == "repeating-linear-gradient(red 0 10px, blue 10px 20px)"

    def test_border_shorthand(self, codec):
        """Words are classified regardless of order."""
        value = parsed(codec, "solid #000 1px", GrammarFamily.BORDER)
        assert serialize(value) == "1px solid #000"

    def test_radius_shorthand_expansion(self, codec):
        """Two values alternate across corners."""
        value = parsed(codec, "4px 8px", GrammarFamily.RADIUS)
        assert serialize(value) == "4px 8px 4px 8px"

    @pytest.mark.parametrize("family,text", [
        (GrammarFamily.BOX_SHADOW, "-2px 2px 4px 1px rgba(0, 0, 0, 0.1), inset 1px 1px red"),
        (GrammarFamily.FILTER, "blur(2px) hue-rotate(90deg) drop-shadow(0 2px 4px #000)"),
        (GrammarFamily.TRANSFORM, "translate(10px, 20%) rotate(0.25turn) scale(2)"),
        (GrammarFamily.GRADIENT, "radial-gradient(circle at top left, #fff, #000 80%)"),
        (GrammarFamily.GRADIENT, "linear-gradient(to right, red, blue)"),
        (GrammarFamily.BORDER, "2px dashed var(--line)"),
        (GrammarFamily.RADIUS, "1px 2px 3px"),
        (GrammarFamily.LENGTH, "var(--a, var(--b, 1.5rem))"),
    ])
    def test_serialization_idempotent(self, codec, family, text):
        """Parsing serialized output gives the same text again."""
        once = serialize(parsed(codec, text, family))
        assert serialize(parsed(codec, once, family)) == once


# ============================================================================
# Wire Form
# ============================================================================

@pytest.mark.unit
class TestWire:
    """Canonical values -> builder property values."""

    def test_unit_wire(self, codec):
        """Units become {number, unit, style} with integral numbers as ints."""
        assert to_wire(parsed(codec, "48px", GrammarFamily.LENGTH)) == {"number": 48, "unit": "px", "style": "48px"}

    def test_number_unit_wire_takes_default(self):
        """Bare numbers in unit positions take the default unit."""
        assert unit_wire(Number(2.0), "em") == {"number": 2, "unit": "em", "style": "2em"}

    def test_keyword_in_unit_family(self, codec):
        """Keywords of dimension families keep only the style."""
        assert to_wire(parsed(codec, "auto", GrammarFamily.LENGTH), GrammarFamily.LENGTH) == {"style": "auto"}

    def test_color_and_enum_wire(self, codec):
        """Plain strings."""
        assert to_wire(Color("#fff")) == "#fff"
        assert to_wire(EnumValue("center")) == "center"

    def test_shadow_wire(self, codec):
        """Shadow list with per-shadow unit objects and default outset position."""
        value = parsed(codec, "0 2px 4px rgba(0,0,0,0.1)", GrammarFamily.BOX_SHADOW)
        wire = to_wire(value, GrammarFamily.BOX_SHADOW)
        assert wire["style"] == "0px 2px 4px rgba(0,0,0,0.1)"
        assert wire["shadows"] == [{
            "x": {"number": 0, "unit": "px", "style": "0px"},
            "y": {"number": 2, "unit": "px", "style": "2px"},
            "blur": {"number": 4, "unit": "px", "style": "4px"},
            "color": "rgba(0,0,0,0.1)",
            "position": "outset",
        }]

    def test_filter_wire(self, codec):
        """blur -> blur_amount, hue-rotate -> rotate, fractions -> percent."""
        value = parsed(codec, "blur(4px) brightness(0.5) contrast(120%) hue-rotate(90)", GrammarFamily.FILTER)
        assert to_wire(value, GrammarFamily.FILTER) == [
            {"type": "blur", "blur_amount": {"number": 4, "unit": "px", "style": "4px"}},
            {"type": "brightness", "amount": {"number": 50, "unit": "%", "style": "50%"}},
            {"type": "contrast", "amount": {"number": 120, "unit": "%", "style": "120%"}},
            {"type": "hue-rotate", "rotate": {"number": 90, "unit": "deg", "style": "90deg"}},
        ]

    def test_transform_wire(self, codec):
        """Per-function builder fields."""
        value = parsed(
            codec, "rotate(45deg) scale(1.2) scale(2, 3) translateX(10px) skewY(5deg)", GrammarFamily.TRANSFORM
        )
        assert to_wire(value, GrammarFamily.TRANSFORM) == [
            {"type": "rotate", "rotate_z": {"number": 45, "unit": "deg", "style": "45deg"}},
            {"type": "scale", "scale": 1.2},
            {"type": "scale3d", "scale_x": 2, "scale_y": 3},
            {"type": "translate", "translate_x": {"number": 10, "unit": "px", "style": "10px"}},
            {"type": "skew", "skew_y": {"number": 5, "unit": "deg", "style": "5deg"}},
        ]

    def test_matrix_wire_keeps_values(self, codec):
        """Functions without builder fields keep their arguments."""
        value = parsed(codec, "matrix(1, 0, 0, 1, 10, 20)", GrammarFamily.TRANSFORM)
        [item] = to_wire(value, GrammarFamily.TRANSFORM)
        assert item["type"] == "matrix"
        assert item["values"] == [1, 0, 0, 1, 10, 20]

    def test_linear_gradient_wire(self, codec):
        """Angle, colors and stops are split out."""
        value = parsed(codec, "linear-gradient(45deg, red 0%, blue 100%)", GrammarFamily.GRADIENT)
        assert to_wire(value) == {
            "style": "linear-gradient(45deg, red 0%, blue 100%)",
            "value": "linear-gradient(45deg, red 0%, blue 100%)",
            "type": "linear",
            "angle": {"number": 45, "unit": "deg", "style": "45deg"},
            "colors": ["red", "blue"],
            "stops": ["0%", "100%"],
        }

    def test_radial_gradient_wire(self, codec):
        """Shape and position come from the configuration segment."""
        value = parsed(codec, "radial-gradient(circle at center, red, blue)", GrammarFamily.GRADIENT)
        wire = to_wire(value)
        assert wire["type"] == "radial"
        assert wire["shape"] == "circle"
        assert wire["position"] == "center"
        assert wire["stops"] == [None, None]

    def test_direction_gradient_wire(self, codec):
        """Keyword directions are kept as text."""
        value = parsed(codec, "linear-gradient(to right, red, blue)", GrammarFamily.GRADIENT)
        assert to_wire(value)["direction"] == "to right"

    def test_border_wire(self, codec):
        """Width is a unit object; style and color are strings."""
        value = parsed(codec, "1px solid #000", GrammarFamily.BORDER)
        assert to_wire(value) == {
            "width": {"number": 1, "unit": "px", "style": "1px"},
            "style": "solid",
            "color": "#000",
        }

    def test_radius_wire(self, codec):
        """Every corner is a unit object."""
        wire = to_wire(parsed(codec, "4px 8px", GrammarFamily.RADIUS))
        assert wire["topLeft"] == {"number": 4, "unit": "px", "style": "4px"}
        assert wire["bottomLeft"] == {"number": 8, "unit": "px", "style": "8px"}
