"""Canonical value -> CSS text."""

import re

from ..core.errors import EncodingFailure
from ..grammar.types import format_number
from . import values as cv
from .values import CanonicalValue, Color, CssVariable, EnumValue, ListValue, Number, ObjectValue, Scalar, Unit

_VARIABLE_NAME = re.compile(r"^--[\w-]+$")
_SHADOW_LENGTHS = ("x", "y", "blur", "spread")
_RADIUS_CORNERS = ("topLeft", "topRight", "bottomRight", "bottomLeft")


def _number(value: float, source: CanonicalValue) -> str:
    try:
        return format_number(value)
    except ValueError as e:
        raise EncodingFailure(str(e), source) from e


def _require(value: ObjectValue, *keys: str) -> None:
    missing = [key for key in keys if key not in value.fields]
    if missing:
        raise EncodingFailure(f"{value.kind or 'object'} value is missing {', '.join(missing)}", value)


def serialize(value: CanonicalValue) -> str:
    """
    Render a canonical value as CSS text.

    Raises:
        EncodingFailure: non-finite numbers, invalid variable names or
            composite values missing required fields
    """
    if isinstance(value, Scalar):
        return value.text
    if isinstance(value, Number):
        return _number(value.value, value)
    if isinstance(value, Unit):
        return f"{_number(value.number, value)}{value.unit}"
    if isinstance(value, Color):
        return value.text
    if isinstance(value, EnumValue):
        return value.value
    if isinstance(value, CssVariable):
        if not _VARIABLE_NAME.match(value.name):
            raise EncodingFailure(f"Invalid custom property name '{value.name}'", value)
        if value.fallback is None:
            return f"var({value.name})"
        return f"var({value.name}, {serialize(value.fallback)})"
    if isinstance(value, ListValue):
        return _serialize_list(value)
    if isinstance(value, ObjectValue):
        return _serialize_object(value)
    raise EncodingFailure(f"Unsupported canonical value {type(value).__name__}", value)


def _serialize_list(value: ListValue) -> str:
    kinds = {item.kind for item in value.items if isinstance(item, ObjectValue)}
    separator = " " if kinds and kinds <= {cv.FILTER, cv.TRANSFORM} else ", "
    return separator.join(serialize(item) for item in value.items)


def _serialize_object(value: ObjectValue) -> str:
    kind = value.kind
    if kind not in cv.OBJECT_KINDS:
        raise EncodingFailure(f"Unknown object kind '{kind}'", value)

    if kind == cv.SHADOW:
        _require(value, "x", "y")
        position = value.get("position")
        parts = ["inset"] if position is not None and serialize(position) == "inset" else []
        parts.extend(serialize(value.fields[key]) for key in _SHADOW_LENGTHS if key in value.fields)
        if "color" in value.fields:
            parts.append(serialize(value.fields["color"]))
        return " ".join(parts)

    if kind == cv.FILTER:
        _require(value, "type")
        name = serialize(value.fields["type"])
        if "shadow" in value.fields:
            return f"{name}({serialize(value.fields['shadow'])})"
        _require(value, "amount")
        return f"{name}({serialize(value.fields['amount'])})"

    if kind == cv.TRANSFORM:
        _require(value, "type", "args")
        args = value.fields["args"]
        rendered = ", ".join(serialize(arg) for arg in args.items) if isinstance(args, ListValue) else serialize(args)
        return f"{serialize(value.fields['type'])}({rendered})"

    if kind == cv.GRADIENT:
        return _serialize_gradient(value)

    if kind == cv.COLOR_STOP:
        _require(value, "color")
        parts = [serialize(value.fields["color"])]
        positions = value.get("positions")
        if isinstance(positions, ListValue):
            parts.extend(serialize(position) for position in positions.items)
        return " ".join(parts)

    if kind == cv.BORDER:
        if not value.fields:
            raise EncodingFailure("border value has no width, style or color", value)
        return " ".join(serialize(value.fields[key]) for key in ("width", "style", "color") if key in value.fields)

    if kind == cv.RADIUS:
        if set(value.fields) == {"all"}:
            return serialize(value.fields["all"])
        _require(value, *_RADIUS_CORNERS)
        return " ".join(serialize(value.fields[corner]) for corner in _RADIUS_CORNERS)

    # overlay, layer, transition and generic objects have no CSS shorthand
    return "; ".join(f"{key}: {serialize(field)}" for key, field in value.fields.items())


def _serialize_gradient(value: ObjectValue) -> str:
    _require(value, "type", "stops")
    gradient_type = serialize(value.fields["type"])
    prefix = "repeating-" if "repeating" in value.fields else ""
    segments: list[str] = []
    for key in ("angle", "direction", "config"):
        if key in value.fields:
            segments.append(serialize(value.fields[key]))
            break
    stops = value.fields["stops"]
    if not isinstance(stops, ListValue) or not stops.items:
        raise EncodingFailure("gradient value has no color stops", value)
    segments.extend(serialize(stop) for stop in stops.items)
    return f"{prefix}{gradient_type}-gradient({', '.join(segments)})"
