"""Canonical values: parsing, serialization, wire form and family builders."""

from .values import (
    CanonicalValue,
    Scalar,
    Number,
    Unit,
    Color,
    EnumValue,
    ObjectValue,
    ListValue,
    CssVariable,
)
from .parse import ValueCodec, gradient_angle, gradient_stop_colors, gradient_stop_positions
from .serialize import serialize
from .wire import to_wire, unit_wire
from .builders import (
    build_border_side,
    build_border,
    build_border_radius,
    build_background_layer,
    build_overlay,
    build_transition_item,
    build_filter_item,
    build_transform_item,
    parse_border_shorthand,
    to_unit_object,
    parse_css_value,
)

__all__ = [
    # Values
    "CanonicalValue",
    "Scalar",
    "Number",
    "Unit",
    "Color",
    "EnumValue",
    "ObjectValue",
    "ListValue",
    "CssVariable",
    # Codec
    "ValueCodec",
    "serialize",
    "to_wire",
    "unit_wire",
    "gradient_angle",
    "gradient_stop_colors",
    "gradient_stop_positions",
    # Builders
    "build_border_side",
    "build_border",
    "build_border_radius",
    "build_background_layer",
    "build_overlay",
    "build_transition_item",
    "build_filter_item",
    "build_transform_item",
    "parse_border_shorthand",
    "to_unit_object",
    "parse_css_value",
]
