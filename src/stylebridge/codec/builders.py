"""
Family Builders
Assemble composite values (borders, radii, layers, overlays and repeater
items) from component fields, validating each component through the grammar.
"""

import re
from typing import Any, Mapping

from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from ..core.errors import Diagnostic, ErrorKind
from ..grammar.borders import BORDER_STYLES, RADIUS_CORNERS
from ..grammar.effects import FILTER_FUNCTIONS
from ..grammar.keywords import (
    BACKGROUND_ATTACHMENTS,
    BACKGROUND_REPEATS,
    BACKGROUND_SIZES,
    BLEND_MODES,
    LAYER_TYPES,
    TIMING_FUNCTIONS,
    TRANSITION_PROPERTIES,
)
from ..grammar.primitives import NUMBER_PATTERN, parse_css_variable, split_number_unit
from ..grammar.tokens import split_words
from ..grammar.transforms import TRANSFORM_FUNCTIONS, canonical_function
from ..grammar.types import NO_RULES, GrammarFamily, ValueRules, format_number
from . import values as cv
from .parse import ValueCodec
from .values import CanonicalValue, EnumValue, ObjectValue
from .wire import wire_number

BuildResult = Result[ObjectValue, tuple[Diagnostic, ...]]

_WIDTH_WORD = re.compile(rf"^{NUMBER_PATTERN}[a-z%]*$", re.IGNORECASE)

_NON_NEGATIVE = ValueRules(non_negative=True)
_OPACITY = ValueRules(minimum=0, maximum=1)

_codec = ValueCodec()


class _Components:
    """Collects parsed component fields and the diagnostics of rejected ones."""

    def __init__(self, kind: str, codec: ValueCodec) -> None:
        self.kind = kind
        self.codec = codec
        self.fields: dict[str, CanonicalValue] = {}
        self.errors: list[Diagnostic] = []

    def add(self, key: str, raw: Any, family: GrammarFamily, rules: ValueRules = NO_RULES) -> None:
        if raw is None or raw == "":
            return
        result = self.codec.parse(raw, family, rules)
        if not is_successful(result):
            self.errors.extend(_with_field(result.failure(), key))
            return
        self.fields[key] = result.unwrap()

    def add_choice(self, key: str, raw: Any, choices: tuple[str, ...]) -> None:
        if raw is None or raw == "":
            return
        self.add(key, str(raw), GrammarFamily.ENUM, ValueRules(choices=choices))

    def set(self, key: str, value: CanonicalValue | None) -> None:
        if value is not None:
            self.fields[key] = value

    def result(self) -> BuildResult:
        if self.errors:
            return Failure(tuple(self.errors))
        return Success(ObjectValue(fields=dict(self.fields), kind=self.kind))


def _with_field(diagnostics: tuple[Diagnostic, ...], key: str) -> list[Diagnostic]:
    return [
        Diagnostic(d.kind, d.code, d.message, {**dict(d.context), "field": key})
        for d in diagnostics
    ]


# ============================================================================
# Borders and radii
# ============================================================================


def build_border_side(
    width: Any = None, style: Any = None, color: Any = None, codec: ValueCodec = _codec
) -> BuildResult:
    """
    Build one border side ``{width, style, color}``.

    Width must be a non-negative length, style one of the border style
    keywords and color any color the grammar accepts.
    """
    side = _Components(cv.BORDER, codec)
    side.add("width", width, GrammarFamily.LENGTH, _NON_NEGATIVE)
    if style is not None and style != "":
        side.add_choice("style", str(style).lower(), BORDER_STYLES)
    side.add("color", color, GrammarFamily.COLOR)
    return side.result()


def build_border(values: Mapping[str, Any], codec: ValueCodec = _codec) -> BuildResult:
    """
    Build a border from ``all`` and per-side entries.

    Each entry is either a ``{width, style, color}`` mapping or a bare width.
    """
    border = _Components(cv.GENERIC, codec)
    for side in ("all", "top", "right", "bottom", "left"):
        entry = values.get(side)
        if entry is None:
            continue
        if isinstance(entry, Mapping):
            built = build_border_side(entry.get("width"), entry.get("style"), entry.get("color"), codec)
        else:
            built = build_border_side(width=entry, codec=codec)
        if is_successful(built):
            border.set(side, built.unwrap())
        else:
            border.errors.extend(_with_field(built.failure(), side))
    return border.result()


def build_border_radius(values: Any, codec: ValueCodec = _codec) -> BuildResult:
    """Single values apply to all corners; mappings name corners or ``all``."""
    if isinstance(values, Mapping):
        unknown = sorted(set(values) - {"all", *RADIUS_CORNERS})
        if unknown:
            return Failure((
                Diagnostic(
                    ErrorKind.INVALID_VALUE_FORMAT,
                    "invalid_radius_corner",
                    f"Unknown radius corner(s): {', '.join(unknown)}",
                    {"corners": unknown},
                ),
            ))
    result = codec.parse(values, GrammarFamily.RADIUS)
    if not is_successful(result):
        return Failure(result.failure())
    return Success(result.unwrap())


def parse_border_shorthand(css_value: str, codec: ValueCodec = _codec) -> BuildResult:
    """
    Parse ``"1px solid #000"`` into a border side.

    Missing parts default to width ``0px`` and style ``none``; words that are
    neither widths nor styles are taken as the color.
    """
    text = (css_value or "").strip()
    width: Any = "0px"
    style: Any = "none"
    color: Any = None
    if text and text.lower() != "none":
        for word in split_words(text):
            if word.lower() in BORDER_STYLES:
                style = word.lower()
            elif _WIDTH_WORD.match(word):
                width = word
            else:
                color = word
    return build_border_side(width, style, color, codec)


# ============================================================================
# Backgrounds
# ============================================================================


def build_background_layer(
    layer_type: str,
    image: Any = None,
    gradient: Any = None,
    overlay_color: Any = None,
    size: Any = None,
    position: Any = None,
    repeat: Any = None,
    attachment: Any = None,
    blend_mode: Any = None,
    codec: ValueCodec = _codec,
) -> BuildResult:
    """
    Build one background layer repeater item.

    Only the source matching ``layer_type`` is kept (``image`` for image
    layers, ``gradient`` for gradient layers, ``overlay_color`` for color
    overlays). Sizing, placement and blending apply to any layer type.
    """
    layer = _Components(cv.LAYER, codec)
    layer.add_choice("type", layer_type, LAYER_TYPES)
    if layer.errors:
        return layer.result()

    if layer_type == "image" and image:
        layer.add("image", image, GrammarFamily.TEXT)
    elif layer_type == "gradient" and gradient:
        layer.add("gradient", gradient, GrammarFamily.GRADIENT)
    elif layer_type == "overlay_color" and overlay_color:
        layer.add("overlay_color", overlay_color, GrammarFamily.COLOR)

    layer.add_choice("size", size, BACKGROUND_SIZES)
    layer.add("position", position, GrammarFamily.TEXT)
    layer.add_choice("repeat", repeat, BACKGROUND_REPEATS)
    layer.add_choice("attachment", attachment, BACKGROUND_ATTACHMENTS)
    layer.add_choice("blend_mode", blend_mode, BLEND_MODES)
    return layer.result()


def build_overlay(
    color: Any = None,
    image: Any = None,
    gradient: Any = None,
    opacity: Any = None,
    blend_mode: Any = None,
    codec: ValueCodec = _codec,
) -> BuildResult:
    """Overlay object; the blend mode is nested under ``effects``."""
    overlay = _Components(cv.OVERLAY, codec)
    overlay.add("color", color, GrammarFamily.COLOR)
    overlay.add("image", image, GrammarFamily.TEXT)
    overlay.add("gradient", gradient, GrammarFamily.GRADIENT)
    overlay.add("opacity", opacity, GrammarFamily.NUMBER, _OPACITY)

    effects = _Components(cv.GENERIC, codec)
    effects.add_choice("blend_mode", blend_mode, BLEND_MODES)
    overlay.errors.extend(_with_field(tuple(effects.errors), "effects"))
    if effects.fields:
        overlay.set("effects", ObjectValue(fields=effects.fields))
    return overlay.result()


# ============================================================================
# Repeater items
# ============================================================================


def build_transition_item(
    duration: Any = None,
    timing_function: Any = None,
    property: Any = None,
    custom_property: Any = None,
    delay: Any = None,
    codec: ValueCodec = _codec,
) -> BuildResult:
    item = _Components(cv.TRANSITION, codec)
    item.add("duration", duration, GrammarFamily.TIME, _NON_NEGATIVE)
    item.add_choice("timing_function", timing_function, TIMING_FUNCTIONS)
    item.add_choice("property", property, TRANSITION_PROPERTIES)
    item.add("custom_property", custom_property, GrammarFamily.TEXT)
    item.add("delay", delay, GrammarFamily.TIME)
    if custom_property and "property" not in item.fields and not item.errors:
        item.set("property", EnumValue("custom"))
    return item.result()


def build_filter_item(filter_type: str, amount: Any, codec: ValueCodec = _codec) -> BuildResult:
    """
    Build one filter item, e.g. ``("blur", "4px")`` or ``("brightness", 0.5)``.

    The amount is checked with the same rules as the ``filter()`` text form.
    """
    name = str(filter_type or "").strip().lower()
    if name not in FILTER_FUNCTIONS:
        return Failure((
            Diagnostic(
                ErrorKind.INVALID_VALUE_FORMAT,
                "invalid_filter_function",
                f"Unknown filter function '{filter_type}'",
                {"type": filter_type},
            ),
        ))
    if isinstance(amount, (int, float)) and not isinstance(amount, bool):
        amount = format_number(amount)
    result = codec.parse(f"{name}({amount})", GrammarFamily.FILTER)
    if not is_successful(result):
        return Failure(result.failure())
    return Success(result.unwrap().items[0])


def build_transform_item(function: str, *args: Any, codec: ValueCodec = _codec) -> BuildResult:
    """Build one transform item, e.g. ``("rotateX", "45deg")`` or ``("scale", 1.2)``."""
    name = canonical_function(str(function or "").strip())
    if name is None:
        return Failure((
            Diagnostic(
                ErrorKind.INVALID_VALUE_FORMAT,
                "invalid_transform_function",
                f"Unknown transform function '{function}'",
                {"type": function, "known": sorted(TRANSFORM_FUNCTIONS)},
            ),
        ))
    rendered = ", ".join(
        format_number(arg) if isinstance(arg, (int, float)) and not isinstance(arg, bool) else str(arg)
        for arg in args
    )
    result = codec.parse(f"{name}({rendered})", GrammarFamily.TRANSFORM)
    if not is_successful(result):
        return Failure(result.failure())
    return Success(result.unwrap().items[0])


# ============================================================================
# Unit objects
# ============================================================================


def to_unit_object(raw: Any, default_unit: str = "px") -> dict[str, Any]:
    """
    ``{number, unit, style}`` for a length-like value.

    Bare numbers take ``default_unit``; anything that is not a number is kept
    as ``{number: None, unit: "custom", style}``.
    """
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        raw = format_number(raw)
    text = str(raw).strip()
    parsed = split_number_unit(text)
    if parsed is None:
        return {"number": None, "unit": "custom", "style": text}
    number, unit = parsed
    unit = unit or default_unit
    return {"number": wire_number(number), "unit": unit, "style": f"{format_number(number)}{unit}"}


def parse_css_value(raw: Any) -> dict[str, Any]:
    """
    ``{number, unit, style}`` keeping the authored text as ``style``.

    References and keywords become ``unit: "custom"`` with a null number;
    bare numbers keep an empty unit.
    """
    text = str(raw).strip()
    if parse_css_variable(text) is not None:
        return {"number": None, "unit": "custom", "style": text}
    parsed = split_number_unit(text)
    if parsed is None:
        return {"number": None, "unit": "custom", "style": text}
    number, unit = parsed
    return {"number": wire_number(number), "unit": unit, "style": text}
