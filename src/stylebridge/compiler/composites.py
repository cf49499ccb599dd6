"""
Composite Properties
Dispatch for properties whose value is assembled by a family builder
(borders, overlays, background layers, transitions) or written as a single
repeater item (``filterBlur: 4px`` -> ``blur(4px)``).
"""

from typing import Any, Callable, Mapping

from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from ..codec.builders import (
    build_background_layer,
    build_border,
    build_border_side,
    build_overlay,
    build_transition_item,
    parse_border_shorthand,
)
from ..codec.parse import ValueCodec
from ..codec.values import CanonicalValue, ListValue, ObjectValue
from ..codec.wire import to_wire
from ..core.errors import Diagnostic, ErrorKind
from ..grammar.types import format_number
from ..paths.resolver import PathSpec

WireResult = Result[Any, tuple[Diagnostic, ...]]


def _shape_error(spec: PathSpec, expected: str, raw: Any) -> WireResult:
    return Failure((
        Diagnostic(
            ErrorKind.INVALID_VALUE_FORMAT,
            "invalid_composite_value",
            f"'{spec.name}' expects {expected}, got {type(raw).__name__}",
            {"property": spec.name, "composite": spec.composite},
        ),
    ))


def _pick(values: Mapping[str, Any], *names: str) -> Any:
    """First present key among snake_case and camelCase spellings."""
    for name in names:
        if values.get(name) is not None:
            return values[name]
    return None


def _border(raw: Any, codec: ValueCodec) -> Result[CanonicalValue, tuple[Diagnostic, ...]]:
    if isinstance(raw, Mapping):
        return build_border(raw, codec)
    side = parse_border_shorthand(str(raw), codec)
    if not is_successful(side):
        return side
    return Success(ObjectValue(fields={"all": side.unwrap()}))


def _border_side(raw: Any, codec: ValueCodec) -> Result[CanonicalValue, tuple[Diagnostic, ...]]:
    if isinstance(raw, Mapping):
        return build_border_side(raw.get("width"), raw.get("style"), raw.get("color"), codec)
    return parse_border_shorthand(str(raw), codec)


def _overlay(raw: Mapping[str, Any], codec: ValueCodec) -> Result[CanonicalValue, tuple[Diagnostic, ...]]:
    return build_overlay(
        color=raw.get("color"),
        image=raw.get("image"),
        gradient=raw.get("gradient"),
        opacity=raw.get("opacity"),
        blend_mode=_pick(raw, "blend_mode", "blendMode"),
        codec=codec,
    )


def _layer(raw: Mapping[str, Any], codec: ValueCodec) -> Result[CanonicalValue, tuple[Diagnostic, ...]]:
    return build_background_layer(
        layer_type=str(raw.get("type") or ""),
        image=raw.get("image"),
        gradient=raw.get("gradient"),
        overlay_color=_pick(raw, "overlay_color", "overlayColor"),
        size=raw.get("size"),
        position=raw.get("position"),
        repeat=raw.get("repeat"),
        attachment=raw.get("attachment"),
        blend_mode=_pick(raw, "blend_mode", "blendMode"),
        codec=codec,
    )


def _transition(raw: Mapping[str, Any], codec: ValueCodec) -> Result[CanonicalValue, tuple[Diagnostic, ...]]:
    return build_transition_item(
        duration=raw.get("duration"),
        timing_function=_pick(raw, "timing_function", "timingFunction", "timing"),
        property=raw.get("property"),
        custom_property=_pick(raw, "custom_property", "customProperty"),
        delay=raw.get("delay"),
        codec=codec,
    )


def _items(
    spec: PathSpec,
    raw: Any,
    build: Callable[[Mapping[str, Any], ValueCodec], Result[CanonicalValue, tuple[Diagnostic, ...]]],
    codec: ValueCodec,
) -> WireResult:
    entries = [raw] if isinstance(raw, Mapping) else raw
    if not isinstance(entries, list) or not all(isinstance(entry, Mapping) for entry in entries):
        return _shape_error(spec, "a list of objects", raw)
    wires: list[Any] = []
    errors: list[Diagnostic] = []
    for index, entry in enumerate(entries):
        built = build(entry, codec)
        if is_successful(built):
            wires.append(to_wire(built.unwrap()))
        else:
            errors.extend(
                Diagnostic(d.kind, d.code, d.message, {**d.context, "index": index}) for d in built.failure()
            )
    if errors:
        return Failure(tuple(errors))
    return Success(wires)


def composite_wire(spec: PathSpec, raw: Any, codec: ValueCodec) -> WireResult:
    """Wire value of a composite property."""
    if spec.composite == "border":
        built = _border(raw, codec)
    elif spec.composite == "border_side":
        built = _border_side(raw, codec)
    elif spec.composite == "overlay":
        if not isinstance(raw, Mapping):
            return _shape_error(spec, "an object", raw)
        built = _overlay(raw, codec)
    elif spec.composite == "layers":
        return _items(spec, raw, _layer, codec)
    elif spec.composite == "transitions":
        return _items(spec, raw, _transition, codec)
    else:
        raise ValueError(f"Unknown composite '{spec.composite}' for '{spec.name}'")
    if not is_successful(built):
        return Failure(built.failure())
    return Success(to_wire(built.unwrap()))


def wrapped_item_wire(spec: PathSpec, raw: Any, codec: ValueCodec) -> WireResult:
    """
    Wire item of a single-function shorthand.

    The raw value is the argument list: ``filterBlur: "4px"`` parses as
    ``blur(4px)`` and yields the one filter item.
    """
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        raw = format_number(raw)
    parsed = codec.parse(f"{spec.wrap_function}({raw})", spec.family, spec.rules())
    if not is_successful(parsed):
        return Failure(parsed.failure())
    value = parsed.unwrap()
    if isinstance(value, ListValue) and len(value.items) == 1:
        value = value.items[0]
    return Success(to_wire(value, spec.family))
