"""
Value Codec
Accepts raw values through the grammar validator, then lowers them into
canonical values.
"""

import re
from typing import Any

from returns.result import Failure, Result, Success

from ..core.errors import Diagnostic
from ..core.logging_config import get_logger
from ..grammar.borders import BORDER_STYLES, RADIUS_CORNERS, classify_border_word
from ..grammar.effects import analyze_shadow_clause, filter_amount_field, structured_number
from ..grammar.gradients import analyze_gradient
from ..grammar.primitives import (
    ANGLE_UNITS,
    LENGTH_UNITS,
    TIME_UNITS,
    is_angle,
    is_universal_keyword,
    parse_css_variable,
    parse_dimension,
    split_number_unit,
)
from ..grammar.tokens import split_function_calls, split_top_level, split_words
from ..grammar.transforms import canonical_function
from ..grammar.types import NO_RULES, GrammarFamily, RawValue, Structured, Text, ValueRules, coerce_input, format_number
from ..grammar.validator import StyleValidator, validate_value
from . import values as cv
from .serialize import serialize
from .values import CanonicalValue, Color, CssVariable, EnumValue, ListValue, Number, ObjectValue, Scalar, Unit

logger = get_logger(__name__)

FAMILY_DEFAULT_UNITS = {
    GrammarFamily.LENGTH: "px",
    GrammarFamily.ANGLE: "deg",
    GrammarFamily.TIME: "ms",
}

_UNITS = {
    GrammarFamily.LENGTH: LENGTH_UNITS,
    GrammarFamily.ANGLE: ANGLE_UNITS,
    GrammarFamily.TIME: TIME_UNITS,
}

# Families whose reference fallbacks are lowered instead of kept as text
_TYPED_FALLBACK_FAMILIES = frozenset({
    GrammarFamily.COLOR,
    GrammarFamily.LENGTH,
    GrammarFamily.ANGLE,
    GrammarFamily.TIME,
    GrammarFamily.NUMBER,
})

# Structured rotate/skew/translate fields and the function each one becomes
_COMPONENT_CALLS = {
    "rotate": (
        ("rotate", ("value", "angle", "rotate_z")),
        ("rotateX", ("x", "rotate_x")),
        ("rotateY", ("rotate_y",)),
    ),
    "skew": (
        ("skew", ("value",)),
        ("skewX", ("x", "skew_x")),
        ("skewY", ("y", "skew_y")),
    ),
    "translate": (
        ("translate", ("value",)),
        ("translateX", ("x", "translate_x")),
        ("translateY", ("y", "translate_y")),
        ("translateZ", ("z", "translate_z")),
    ),
}

_LINEAR_DIRECTION = re.compile(r"^to\s+\w+(\s+\w+)?$", re.IGNORECASE)


class ValueCodec:
    """
    Parse raw values into canonical values and serialize them back.

    parse() never raises for bad input; it returns Failure with the
    validator's diagnostics. serialize() raises EncodingFailure, which
    always indicates a defect.
    """

    def __init__(self, default_length_unit: str = "px") -> None:
        self.default_length_unit = default_length_unit

    def parse(
        self, raw: Any, family: GrammarFamily | str, rules: ValueRules | None = None
    ) -> Result[CanonicalValue, tuple[Diagnostic, ...]]:
        """
        Validate and lower a raw value.

        Args:
            raw: Text, number, mapping or list
            family: Grammar family the value must satisfy
            rules: Optional default unit, range and enum constraints

        Returns:
            Success(canonical value) or Failure(diagnostics)
        """
        family = GrammarFamily(family)
        rules = rules or NO_RULES
        validator = StyleValidator()
        value = coerce_input(raw)
        if not validator.validate(value, family, rules):
            logger.debug("value_parse_failed", family=family.value, errors=len(validator.errors))
            return Failure(tuple(validator.errors))
        return Success(self.lower(value, family, rules))

    def serialize(self, value: CanonicalValue) -> str:
        return serialize(value)

    # ------------------------------------------------------------------
    # Lowering
    # ------------------------------------------------------------------

    def lower(self, value: RawValue, family: GrammarFamily, rules: ValueRules = NO_RULES) -> CanonicalValue:
        """Lower an already validated value."""
        if isinstance(value, Structured) and family in _TYPED_FALLBACK_FAMILIES | {GrammarFamily.ENUM}:
            style = value.get("style")
            if value.get("number") is None and isinstance(style, str):
                return self.lower(Text(style.strip()), family, rules)
        if isinstance(value, Text):
            text = value.value
            if not text:
                return Scalar("")
            if is_universal_keyword(text):
                return Scalar(text.lower())
            if text.startswith("var(") and parse_css_variable(text) is not None:
                return self.lower_variable(text, family, rules)

        if family in _UNITS:
            return self._lower_dimension(value, family, rules)
        if family is GrammarFamily.COLOR:
            return Color(_style_text(value))
        if family is GrammarFamily.NUMBER:
            return Number(float(_style_text(value)))
        if family is GrammarFamily.ENUM:
            return EnumValue(_style_text(value))
        if family is GrammarFamily.BOX_SHADOW:
            return self._lower_shadows(value)
        if family is GrammarFamily.FILTER:
            return self._lower_filters(value)
        if family is GrammarFamily.TRANSFORM:
            return self._lower_transforms(value)
        if family is GrammarFamily.GRADIENT:
            return self._lower_gradient(value)
        if family is GrammarFamily.BORDER:
            return self._lower_border(value)
        if family is GrammarFamily.RADIUS:
            return self._lower_radius(value)
        if isinstance(value, Structured):
            return cv.from_plain(dict(value.fields))
        return Scalar(value.value)

    def lower_variable(self, text: str, family: GrammarFamily, rules: ValueRules = NO_RULES) -> CanonicalValue:
        parsed = parse_css_variable(text)
        if parsed is None:
            return Scalar(text)
        name, fallback = parsed
        if fallback is None:
            return CssVariable(name=name)
        if fallback.startswith("var("):
            return CssVariable(name=name, fallback=self.lower_variable(fallback, family, rules))
        if family in _TYPED_FALLBACK_FAMILIES and validate_value(fallback, family)[0]:
            return CssVariable(name=name, fallback=self.lower(Text(fallback), family, rules))
        return CssVariable(name=name, fallback=Scalar(fallback))

    def _default_unit(self, family: GrammarFamily, rules: ValueRules) -> str:
        if rules.default_unit:
            return rules.default_unit
        if family is GrammarFamily.LENGTH:
            return self.default_length_unit
        return FAMILY_DEFAULT_UNITS[family]

    def _lower_dimension(self, value: RawValue, family: GrammarFamily, rules: ValueRules) -> CanonicalValue:
        if isinstance(value, Structured):
            number = value.get("number")
            if number is None:
                return self.lower(Text(_style_text(value)), family, rules)
            unit = str(value.get("unit") or "").lower() or self._default_unit(family, rules)
            return cv.make_unit(float(number), unit)
        text = value.value
        if text.lower() == "auto":
            return Scalar("auto")
        parsed = parse_dimension(text, _UNITS[family])
        if parsed is None:
            return Scalar(text)
        number, unit = parsed
        return cv.make_unit(number, unit or self._default_unit(family, rules))

    # ------------------------------------------------------------------
    # Component lowering shared by composite families
    # ------------------------------------------------------------------

    def _length(self, raw: Any, default_unit: str = "px") -> CanonicalValue:
        """Shadow offsets, border widths and radii: bare numbers take ``default_unit``."""
        if isinstance(raw, str):
            raw = raw.strip()
            if raw.startswith("var("):
                return self.lower_variable(raw, GrammarFamily.LENGTH)
        parsed = structured_number(raw)
        if parsed is None:
            return Scalar(str(raw))
        return cv.make_unit(parsed[0], parsed[1] or default_unit)

    def _argument(self, raw: Any) -> CanonicalValue:
        """Function arguments keep bare numbers bare."""
        if isinstance(raw, str):
            raw = raw.strip()
            if raw.startswith("var("):
                return self.lower_variable(raw, GrammarFamily.TEXT)
        parsed = structured_number(raw)
        if parsed is None:
            return Scalar(str(raw))
        number, unit = parsed
        if not unit:
            return Number(number)
        return cv.make_unit(number, unit)

    def _color(self, raw: str) -> CanonicalValue:
        raw = raw.strip()
        if raw.startswith("var("):
            return self.lower_variable(raw, GrammarFamily.COLOR)
        return Color(raw)

    # ------------------------------------------------------------------
    # Box shadow
    # ------------------------------------------------------------------

    def _shadow_from_text(self, clause: str, allow_inset: bool = True) -> ObjectValue:
        parts = analyze_shadow_clause(clause)
        names = ("x", "y", "blur", "spread")
        fields: dict[str, CanonicalValue] = {
            name: self._length(word) for name, word in zip(names, parts.lengths)
        }
        if parts.color is not None:
            fields["color"] = self._color(parts.color)
        if allow_inset and parts.inset:
            fields["position"] = EnumValue("inset")
        return ObjectValue(fields=fields, kind=cv.SHADOW)

    def _shadow_from_object(self, item: dict[str, Any]) -> ObjectValue:
        fields: dict[str, CanonicalValue] = {}
        for key in ("x", "y", "blur", "spread"):
            if item.get(key) is not None:
                fields[key] = self._length(item[key])
        if "spread" in fields and "blur" not in fields:
            fields["blur"] = cv.make_unit(0, "px")
        color = item.get("color")
        if isinstance(color, str) and color:
            fields["color"] = self._color(color)
        if item.get("inset") in (True, 1, "true", "1") or item.get("position") == "inset":
            fields["position"] = EnumValue("inset")
        return ObjectValue(fields=fields, kind=cv.SHADOW)

    def _lower_shadows(self, value: RawValue) -> CanonicalValue:
        if isinstance(value, Text):
            if value.value.lower() == "none":
                return Scalar("none")
            return ListValue(tuple(self._shadow_from_text(clause) for clause in split_top_level(value.value)))
        style = value.get("style")
        if isinstance(style, str):
            return self._lower_shadows(Text(style.strip()))
        items = value.first("shadows", "items")
        if items is None:
            return ListValue((self._shadow_from_object(dict(value.fields)),))
        shadows: list[CanonicalValue] = []
        for item in items:
            if isinstance(item, str):
                shadows.extend(self._shadow_from_text(clause) for clause in split_top_level(item.strip()))
            else:
                shadows.append(self._shadow_from_object(item))
        return ListValue(tuple(shadows))

    # ------------------------------------------------------------------
    # Filter
    # ------------------------------------------------------------------

    def _filter_from_call(self, name: str, args: str) -> ObjectValue:
        name = name.lower()
        if name == "drop-shadow":
            shadow = self._shadow_from_text(args, allow_inset=False)
            return cv.make_object(cv.FILTER, type=EnumValue(name), shadow=shadow)
        return cv.make_object(cv.FILTER, type=EnumValue(name), amount=self._argument(args))

    def _filter_from_object(self, item: dict[str, Any]) -> ObjectValue:
        filter_type = str(item["type"]).lower()
        if filter_type == "drop-shadow":
            raw = item.get("value")
            if isinstance(raw, str):
                return self._filter_from_call(filter_type, raw.strip())
            shadow = self._shadow_from_object(item)
            shadow = ObjectValue(
                fields={key: field for key, field in shadow.fields.items() if key != "position"}, kind=cv.SHADOW
            )
            return cv.make_object(cv.FILTER, type=EnumValue(filter_type), shadow=shadow)
        return cv.make_object(
            cv.FILTER, type=EnumValue(filter_type), amount=self._argument(filter_amount_field(filter_type, item))
        )

    def _lower_filters(self, value: RawValue) -> CanonicalValue:
        if isinstance(value, Text):
            if value.value.lower() == "none":
                return Scalar("none")
            calls = split_function_calls(value.value) or []
            return ListValue(tuple(self._filter_from_call(name, args) for name, args in calls))
        style = value.get("style")
        if isinstance(style, str):
            return self._lower_filters(Text(style.strip()))
        items = value.get("items")
        if items is None:
            return ListValue((self._filter_from_object(dict(value.fields)),))
        lowered: list[CanonicalValue] = []
        for item in items:
            if isinstance(item, str):
                nested = self._lower_filters(Text(item.strip()))
                if isinstance(nested, ListValue):
                    lowered.extend(nested.items)
            else:
                lowered.append(self._filter_from_object(item))
        return ListValue(tuple(lowered))

    # ------------------------------------------------------------------
    # Transform
    # ------------------------------------------------------------------

    def _transform(self, function: str, *args: Any) -> ObjectValue:
        return cv.make_object(
            cv.TRANSFORM,
            type=EnumValue(function),
            args=ListValue(tuple(self._argument(arg) for arg in args)),
        )

    def _transform_from_call(self, name: str, args: str) -> ObjectValue:
        function = canonical_function(name) or name
        return self._transform(function, *(split_top_level(args) if args else []))

    def _transforms_from_object(self, item: dict[str, Any]) -> list[ObjectValue]:
        """One structured transform object can stand for several functions."""
        kind = item["type"]

        def pick(*keys: str) -> Any:
            for key in keys:
                if item.get(key) is not None:
                    return item[key]
            return None

        calls: list[ObjectValue] = []
        if kind == "rotate3d":
            return [self._transform("rotate3d", *(pick(key) or 0 for key in ("x", "y", "z", "angle")))]
        if kind == "scale3d":
            return [self._transform("scale3d", *(
                pick(axis, f"scale_{axis}") if pick(axis, f"scale_{axis}") is not None else 1
                for axis in ("x", "y", "z")
            ))]
        if kind == "perspective":
            return [self._transform("perspective", pick("value", "distance", "perspective"))]
        if kind == "scale":
            uniform = pick("value", "scale")
            if uniform is not None:
                return [self._transform("scale", uniform)]
            x, y = pick("x"), pick("y")
            if x is not None and y is not None:
                return [self._transform("scale", x, y)]
            return [self._transform("scaleX", x)] if x is not None else [self._transform("scaleY", y)]

        for function, keys in _COMPONENT_CALLS[kind]:
            component = pick(*keys)
            if component is not None:
                calls.append(self._transform(function, component))
        return calls

    def _lower_transforms(self, value: RawValue) -> CanonicalValue:
        if isinstance(value, Text):
            if value.value.lower() == "none":
                return Scalar("none")
            calls = split_function_calls(value.value) or []
            return ListValue(tuple(self._transform_from_call(name, args) for name, args in calls))
        style = value.get("style")
        if isinstance(style, str):
            return self._lower_transforms(Text(style.strip()))
        items = value.get("items")
        if items is None:
            return ListValue(tuple(self._transforms_from_object(dict(value.fields))))
        lowered: list[CanonicalValue] = []
        for item in items:
            if isinstance(item, str):
                nested = self._lower_transforms(Text(item.strip()))
                if isinstance(nested, ListValue):
                    lowered.extend(nested.items)
            else:
                lowered.extend(self._transforms_from_object(item))
        return ListValue(tuple(lowered))

    # ------------------------------------------------------------------
    # Gradient
    # ------------------------------------------------------------------

    def _stop(self, segment: str) -> ObjectValue:
        words = split_words(segment)
        color = self._color(words[0])
        positions = tuple(self._argument(word) for word in words[1:])
        return cv.make_object(cv.COLOR_STOP, color=color, positions=ListValue(positions) if positions else None)

    def _lower_gradient(self, value: RawValue) -> CanonicalValue:
        if isinstance(value, Structured):
            for key in ("style", "value"):
                text = value.get(key)
                if isinstance(text, str) and text.strip():
                    return self._lower_gradient(Text(text.strip()))
            return self._lower_gradient(Text(gradient_text_from_fields(value.fields)))

        parts = analyze_gradient(value.value)
        if parts is None:
            return Scalar(value.value)
        fields: dict[str, CanonicalValue] = {"type": EnumValue(parts.type)}
        if parts.repeating:
            fields["repeating"] = Scalar("true")
        if parts.config is not None:
            config = " ".join(parts.config.split())
            if parts.type == "linear" and is_angle(config):
                number, unit = split_number_unit(config) or (0.0, "")
                fields["angle"] = cv.make_unit(number, unit or "deg")
            elif parts.type == "linear" and _LINEAR_DIRECTION.match(config):
                fields["direction"] = Scalar(config.lower())
            else:
                fields["config"] = Scalar(config)
        fields["stops"] = ListValue(tuple(self._stop(stop) for stop in parts.stops))
        return ObjectValue(fields=fields, kind=cv.GRADIENT)

    # ------------------------------------------------------------------
    # Border and radius
    # ------------------------------------------------------------------

    def _lower_border(self, value: RawValue) -> CanonicalValue:
        if isinstance(value, Structured):
            style_text = value.get("style")
            if isinstance(style_text, str) and len(value.fields) == 1 and style_text.lower() not in BORDER_STYLES:
                return self._lower_border(Text(style_text.strip()))
            width = value.get("width")
            style = value.get("style")
            color = value.get("color")
            return cv.make_object(
                cv.BORDER,
                width=self._length(width) if width is not None else None,
                style=EnumValue(style) if style else None,
                color=self._color(color) if isinstance(color, str) and color else None,
            )
        if value.value.lower() == "none":
            return cv.make_object(cv.BORDER, style=EnumValue("none"))
        fields: dict[str, CanonicalValue] = {}
        for word in split_words(value.value):
            role = classify_border_word(word)
            if role == "width":
                fields["width"] = self._length(word)
            elif role == "style":
                fields["style"] = EnumValue(word.lower())
            elif role == "color":
                fields["color"] = self._color(word)
        ordered = {key: fields[key] for key in ("width", "style", "color") if key in fields}
        return ObjectValue(fields=ordered, kind=cv.BORDER)

    def _lower_radius(self, value: RawValue) -> CanonicalValue:
        if isinstance(value, Structured):
            if set(value.fields) == {"all"}:
                return cv.make_object(cv.RADIUS, all=self._length(value.get("all")))
            base = value.get("all")
            corners = {
                corner: self._length(value.get(corner) if value.get(corner) is not None else (base if base is not None else 0))
                for corner in RADIUS_CORNERS
            }
            return ObjectValue(fields=corners, kind=cv.RADIUS)

        words = split_words(value.value)
        lengths = [self._length(word) for word in words]
        if len(lengths) == 1:
            return cv.make_object(cv.RADIUS, all=lengths[0])
        # CSS shorthand expansion: top-left, top-right, bottom-right, bottom-left
        if len(lengths) == 2:
            expanded = [lengths[0], lengths[1], lengths[0], lengths[1]]
        elif len(lengths) == 3:
            expanded = [lengths[0], lengths[1], lengths[2], lengths[1]]
        else:
            expanded = lengths
        return ObjectValue(fields=dict(zip(RADIUS_CORNERS, expanded)), kind=cv.RADIUS)


def _style_text(value: RawValue) -> str:
    if isinstance(value, Text):
        return value.value
    style = value.get("style")
    return str(style).strip() if style is not None else ""


def gradient_text_from_fields(fields: Any) -> str:
    """Render a structured gradient ``{type, angle, position, shape, size, colors, stops}`` as CSS."""
    gradient_type = fields.get("type") or "linear"
    head = ""
    angle = fields.get("angle")
    if isinstance(angle, (int, float)) and not isinstance(angle, bool):
        angle = f"{format_number(angle)}deg"
    position = fields.get("position")
    if gradient_type == "linear" and angle is not None:
        head = str(angle)
    elif gradient_type == "radial":
        head = " ".join(str(part) for part in (fields.get("shape"), fields.get("size")) if part)
        if position:
            head = f"{head} at {position}".strip()
    elif gradient_type == "conic":
        head = f"from {angle}" if angle is not None else ""
        if position:
            head = f"{head} at {position}".strip()

    colors = list(fields.get("colors") or [])
    stops = list(fields.get("stops") or [])
    segments = [head] if head else []
    for index, color in enumerate(colors):
        stop = stops[index] if index < len(stops) else None
        if stop is None:
            segments.append(str(color))
        elif isinstance(stop, (int, float)) and not isinstance(stop, bool):
            segments.append(f"{color} {format_number(stop)}%")
        else:
            segments.append(f"{color} {stop}")
    return f"{gradient_type}-gradient({', '.join(segments)})"


# ============================================================================
# Gradient accessors
# ============================================================================


def gradient_angle(value: CanonicalValue) -> Unit | None:
    if isinstance(value, ObjectValue) and value.kind == cv.GRADIENT:
        angle = value.get("angle")
        return angle if isinstance(angle, Unit) else None
    return None


def gradient_stop_colors(value: CanonicalValue) -> list[str]:
    """Serialized stop colors in order."""
    if not (isinstance(value, ObjectValue) and value.kind == cv.GRADIENT):
        return []
    stops = value.get("stops")
    if not isinstance(stops, ListValue):
        return []
    return [serialize(stop.fields["color"]) for stop in stops.items if isinstance(stop, ObjectValue)]


def gradient_stop_positions(value: CanonicalValue) -> list[str]:
    """Serialized stop positions in order ('' where a stop has none)."""
    if not (isinstance(value, ObjectValue) and value.kind == cv.GRADIENT):
        return []
    stops = value.get("stops")
    if not isinstance(stops, ListValue):
        return []
    positions: list[str] = []
    for stop in stops.items:
        if not isinstance(stop, ObjectValue):
            continue
        stop_positions = stop.get("positions")
        if isinstance(stop_positions, ListValue):
            positions.append(" ".join(serialize(item) for item in stop_positions.items))
        else:
            positions.append("")
    return positions
