"""
Wire Form
Canonical values -> JSON-ready builder property-tree values.
"""

import re
from typing import Any

from ..core.errors import EncodingFailure
from ..grammar.gradients import RADIAL_SHAPES, RADIAL_SIZES
from ..grammar.types import GrammarFamily
from . import values as cv
from .serialize import serialize
from .values import CanonicalValue, Color, CssVariable, EnumValue, ListValue, Number, ObjectValue, Scalar, Unit

_UNIT_FAMILIES = frozenset({GrammarFamily.LENGTH, GrammarFamily.ANGLE, GrammarFamily.TIME})
_AT_POSITION = re.compile(r"\bat\s+(.+)$", re.IGNORECASE)
_CONIC_FROM = re.compile(r"\bfrom\s+(\S+)", re.IGNORECASE)

# Filter type -> builder field holding its amount
FILTER_FIELDS = {"blur": "blur_amount", "hue-rotate": "rotate"}
FILTER_DEFAULT_UNITS = {"blur": "px", "hue-rotate": "deg"}


def wire_number(number: float) -> int | float:
    """48.0 -> 48 so stored numbers read like authored ones."""
    return int(number) if float(number).is_integer() else number


def unit_wire(value: CanonicalValue, default_unit: str = "px") -> dict[str, Any]:
    """``{number, unit, style}`` for units; ``{style}`` for references and keywords."""
    if isinstance(value, Unit):
        return {"number": wire_number(value.number), "unit": value.unit, "style": serialize(value)}
    if isinstance(value, Number):
        unit = cv.make_unit(value.value, default_unit)
        return {"number": wire_number(unit.number), "unit": unit.unit, "style": unit.text}
    return {"style": serialize(value)}


def to_wire(value: CanonicalValue, family: GrammarFamily | str | None = None) -> Any:
    """
    Convert a canonical value to the builder's property-tree format.

    Args:
        value: Canonical value
        family: Grammar family the value was parsed under (selects list shapes)

    Returns:
        JSON-ready value
    """
    family = GrammarFamily(family) if family is not None else None

    if isinstance(value, Unit):
        return unit_wire(value)
    if isinstance(value, (Scalar, CssVariable)):
        if family in _UNIT_FAMILIES and not cv.is_empty(value):
            return {"style": serialize(value)}
        return serialize(value)
    if isinstance(value, Number):
        return wire_number(value.value)
    if isinstance(value, Color):
        return value.text
    if isinstance(value, EnumValue):
        return value.value
    if isinstance(value, ListValue):
        return _list_wire(value, family)
    if isinstance(value, ObjectValue):
        return _object_wire(value)
    raise EncodingFailure(f"Unsupported canonical value {type(value).__name__}", value)


def _list_wire(value: ListValue, family: GrammarFamily | None) -> Any:
    kinds = {item.kind for item in value.items if isinstance(item, ObjectValue)}
    if family is GrammarFamily.BOX_SHADOW or kinds == {cv.SHADOW}:
        return {"style": serialize(value), "shadows": [shadow_wire(item) for item in value.items]}
    if kinds == {cv.FILTER}:
        return [filter_item_wire(item) for item in value.items]
    if kinds == {cv.TRANSFORM}:
        return [transform_item_wire(item) for item in value.items]
    return [to_wire(item) for item in value.items]


def _object_wire(value: ObjectValue) -> Any:
    if value.kind == cv.SHADOW:
        return shadow_wire(value)
    if value.kind == cv.FILTER:
        return filter_item_wire(value)
    if value.kind == cv.TRANSFORM:
        return transform_item_wire(value)
    if value.kind == cv.GRADIENT:
        return gradient_wire(value)
    if value.kind == cv.BORDER:
        wire: dict[str, Any] = {}
        if "width" in value.fields:
            wire["width"] = unit_wire(value.fields["width"])
        if "style" in value.fields:
            wire["style"] = serialize(value.fields["style"])
        if "color" in value.fields:
            wire["color"] = serialize(value.fields["color"])
        return wire
    if value.kind == cv.RADIUS:
        return {corner: unit_wire(length) for corner, length in value.fields.items()}
    return {key: to_wire(field) for key, field in value.fields.items()}


# ============================================================================
# Repeater items
# ============================================================================


def shadow_wire(value: CanonicalValue) -> dict[str, Any]:
    if not isinstance(value, ObjectValue):
        raise EncodingFailure("shadow item must be an object", value)
    wire: dict[str, Any] = {
        key: unit_wire(value.fields[key]) for key in ("x", "y", "blur", "spread") if key in value.fields
    }
    if "color" in value.fields:
        wire["color"] = serialize(value.fields["color"])
    position = value.get("position")
    wire["position"] = serialize(position) if position is not None else "outset"
    return wire


def _percentage(value: CanonicalValue) -> dict[str, Any]:
    # brightness(0.5) == brightness(50%)
    if isinstance(value, Number):
        return unit_wire(cv.make_unit(value.value * 100, "%"))
    return unit_wire(value, "%")


def filter_item_wire(value: CanonicalValue) -> dict[str, Any]:
    """Builder filter item: blur -> blur_amount, hue-rotate -> rotate, others -> amount."""
    if not isinstance(value, ObjectValue) or value.kind != cv.FILTER:
        raise EncodingFailure("filter item must be a filter object", value)
    filter_type = serialize(value.fields["type"])
    if "shadow" in value.fields:
        return {"type": filter_type, "value": serialize(value.fields["shadow"])}
    amount = value.fields["amount"]
    if filter_type in FILTER_FIELDS:
        return {"type": filter_type, FILTER_FIELDS[filter_type]: unit_wire(amount, FILTER_DEFAULT_UNITS[filter_type])}
    return {"type": filter_type, "amount": _percentage(amount)}


def _args(value: ObjectValue) -> tuple[CanonicalValue, ...]:
    args = value.get("args")
    return args.items if isinstance(args, ListValue) else ()


def _plain_number(value: CanonicalValue) -> Any:
    if isinstance(value, Number):
        return wire_number(value.value)
    return serialize(value)


def transform_item_wire(value: CanonicalValue) -> dict[str, Any]:
    """
    Builder transform item.

    ``rotate()`` and ``rotateZ()`` become ``rotate_z``, per-axis functions
    fill ``<type>_<axis>``, uniform ``scale()`` fills ``scale``, and two-axis
    scaling is stored as a ``scale3d`` item.
    """
    if not isinstance(value, ObjectValue) or value.kind != cv.TRANSFORM:
        raise EncodingFailure("transform item must be a transform object", value)
    function = serialize(value.fields["type"])
    args = _args(value)

    def angle(index: int) -> dict[str, Any]:
        return unit_wire(args[index], "deg")

    def length(index: int) -> dict[str, Any]:
        return unit_wire(args[index], "px")

    if function in ("rotate", "rotateZ"):
        return {"type": "rotate", "rotate_z": angle(0)}
    if function in ("rotateX", "rotateY"):
        return {"type": "rotate", f"rotate_{function[-1].lower()}": angle(0)}
    if function == "rotate3d":
        return {
            "type": "rotate3d",
            "x": _plain_number(args[0]),
            "y": _plain_number(args[1]),
            "z": _plain_number(args[2]),
            "angle": angle(3),
        }
    if function == "scale" and len(args) == 1:
        return {"type": "scale", "scale": _plain_number(args[0])}
    if function in ("scale", "scale3d"):
        return {"type": "scale3d", **{f"scale_{axis}": _plain_number(arg) for axis, arg in zip("xyz", args)}}
    if function in ("scaleX", "scaleY", "scaleZ"):
        return {"type": "scale3d", f"scale_{function[-1].lower()}": _plain_number(args[0])}
    if function == "skew":
        return {"type": "skew", **{f"skew_{axis}": unit_wire(arg, "deg") for axis, arg in zip("xy", args)}}
    if function in ("skewX", "skewY"):
        return {"type": "skew", f"skew_{function[-1].lower()}": angle(0)}
    if function in ("translate", "translate3d"):
        return {"type": "translate", **{f"translate_{axis}": unit_wire(arg, "px") for axis, arg in zip("xyz", args)}}
    if function in ("translateX", "translateY", "translateZ"):
        return {"type": "translate", f"translate_{function[-1].lower()}": length(0)}
    if function == "perspective":
        return {"type": "perspective", "perspective": length(0)}
    # matrix() and matrix3d() have no builder fields of their own
    return {"type": function, "values": [_plain_number(arg) for arg in args], "style": serialize(value)}


def gradient_wire(value: ObjectValue) -> dict[str, Any]:
    """``{style, value, type, colors, stops, ...}`` for a gradient object."""
    text = serialize(value)
    wire: dict[str, Any] = {"style": text, "value": text, "type": serialize(value.fields["type"])}
    if "angle" in value.fields:
        wire["angle"] = unit_wire(value.fields["angle"], "deg")
    elif "direction" in value.fields:
        wire["direction"] = serialize(value.fields["direction"])
    elif "config" in value.fields:
        config = serialize(value.fields["config"])
        position = _AT_POSITION.search(config)
        if position:
            wire["position"] = position.group(1).strip()
        head = config[: position.start()] if position else config
        words = head.lower().split()
        for word in words:
            if word in RADIAL_SHAPES:
                wire["shape"] = word
            elif word in RADIAL_SIZES:
                wire["size"] = word
        conic = _CONIC_FROM.search(head)
        if conic:
            wire["angle"] = conic.group(1)

    colors: list[str] = []
    stops: list[str | None] = []
    stop_list = value.fields["stops"]
    for stop in stop_list.items if isinstance(stop_list, ListValue) else ():
        if not isinstance(stop, ObjectValue):
            continue
        colors.append(serialize(stop.fields["color"]))
        positions = stop.get("positions")
        stops.append(" ".join(serialize(p) for p in positions.items) if isinstance(positions, ListValue) else None)
    wire["colors"] = colors
    wire["stops"] = stops
    return wire
