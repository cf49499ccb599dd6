"""
Transform grammar
Function lists such as ``rotate(45deg) scale(1.2)`` and transform objects.
"""

from dataclasses import dataclass
from typing import Any

from ..core.errors import ErrorKind
from .effects import structured_number
from .primitives import ANGLE_UNITS, LENGTH_UNITS, is_css_variable, is_number, parse_dimension
from .tokens import is_balanced, split_function_calls, split_top_level
from .types import Diagnostics, RawValue, Structured, Text

LENGTH = "length"
ANGLE = "angle"
NUMBER = "number"


@dataclass(frozen=True)
class Signature:
    """Argument types accepted by a transform function."""

    args: tuple[str, ...]
    optional: int = 0
    non_negative: bool = False

    @property
    def min_args(self) -> int:
        return len(self.args) - self.optional


TRANSFORM_FUNCTIONS: dict[str, Signature] = {
    "translate": Signature((LENGTH, LENGTH), optional=1),
    "translateX": Signature((LENGTH,)),
    "translateY": Signature((LENGTH,)),
    "translateZ": Signature((LENGTH,)),
    "translate3d": Signature((LENGTH, LENGTH, LENGTH)),
    "rotate": Signature((ANGLE,)),
    "rotateX": Signature((ANGLE,)),
    "rotateY": Signature((ANGLE,)),
    "rotateZ": Signature((ANGLE,)),
    "rotate3d": Signature((NUMBER, NUMBER, NUMBER, ANGLE)),
    "scale": Signature((NUMBER, NUMBER), optional=1),
    "scaleX": Signature((NUMBER,)),
    "scaleY": Signature((NUMBER,)),
    "scaleZ": Signature((NUMBER,)),
    "scale3d": Signature((NUMBER, NUMBER, NUMBER)),
    "skew": Signature((ANGLE, ANGLE), optional=1),
    "skewX": Signature((ANGLE,)),
    "skewY": Signature((ANGLE,)),
    "perspective": Signature((LENGTH,), non_negative=True),
    "matrix": Signature((NUMBER,) * 6),
    "matrix3d": Signature((NUMBER,) * 16),
}

# CSS function names are case-insensitive
CANONICAL_NAMES = {name.lower(): name for name in TRANSFORM_FUNCTIONS}

# Structured transform objects: accepted keys per type and their argument kind
STRUCTURED_FIELDS: dict[str, dict[str, str]] = {
    "rotate": {"x": ANGLE, "angle": ANGLE, "value": ANGLE, "rotate_x": ANGLE, "rotate_y": ANGLE, "rotate_z": ANGLE},
    "rotate3d": {"x": NUMBER, "y": NUMBER, "z": NUMBER, "angle": ANGLE},
    "scale": {"x": NUMBER, "y": NUMBER, "value": NUMBER, "scale": NUMBER},
    "scale3d": {"x": NUMBER, "y": NUMBER, "z": NUMBER, "scale_x": NUMBER, "scale_y": NUMBER, "scale_z": NUMBER},
    "skew": {"x": ANGLE, "y": ANGLE, "value": ANGLE, "skew_x": ANGLE, "skew_y": ANGLE},
    "translate": {
        "x": LENGTH, "y": LENGTH, "z": LENGTH, "value": LENGTH,
        "translate_x": LENGTH, "translate_y": LENGTH, "translate_z": LENGTH,
    },
    "perspective": {"value": LENGTH, "distance": LENGTH, "perspective": LENGTH},
}


def canonical_function(name: str) -> str | None:
    return CANONICAL_NAMES.get(name.lower())


def check_argument(arg: str, kind: str) -> bool:
    """Type-check one transform argument (angles and lengths also accept bare numbers)."""
    if is_css_variable(arg):
        return True
    if kind == NUMBER:
        return is_number(arg)
    units = ANGLE_UNITS if kind == ANGLE else LENGTH_UNITS
    return parse_dimension(arg, units) is not None


def check_transform(value: RawValue, sink: Diagnostics) -> bool:
    """Validate a transform function list or transform object(s)."""
    if isinstance(value, Structured):
        return _check_transform_structured(value, sink)

    text = value.value
    if text.lower() == "none":
        return True
    if not is_balanced(text):
        return sink.add(ErrorKind.MALFORMED_GRAMMAR, "unbalanced_parentheses", "Unbalanced parentheses in transform")
    calls = split_function_calls(text)
    if not calls:
        return sink.add(ErrorKind.MALFORMED_GRAMMAR, "invalid_transform_syntax", f"Invalid transform syntax '{text}'")
    ok = True
    for name, args in calls:
        ok = check_transform_call(name, args, sink) and ok
    return ok


def check_transform_call(name: str, args: str, sink: Diagnostics) -> bool:
    function = canonical_function(name)
    if function is None:
        return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_transform_function", f"Unknown transform function '{name}'")
    signature = TRANSFORM_FUNCTIONS[function]
    context = {"function": function}

    parts = split_top_level(args) if args else []
    if not signature.min_args <= len(parts) <= len(signature.args):
        expected = (
            str(len(signature.args))
            if not signature.optional
            else f"{signature.min_args}-{len(signature.args)}"
        )
        return sink.add(
            ErrorKind.MALFORMED_GRAMMAR,
            "invalid_transform_arity",
            f"{function}() takes {expected} argument(s), got {len(parts)}",
            **context,
        )

    ok = True
    for index, (part, kind) in enumerate(zip(parts, signature.args)):
        if not part or not check_argument(part, kind):
            ok = sink.add(
                ErrorKind.INVALID_VALUE_FORMAT,
                f"invalid_transform_{kind}",
                f"{function}() argument {index + 1} must be a {kind}, got '{part}'",
                argument=index,
                **context,
            )
        elif signature.non_negative and part.startswith("-"):
            ok = sink.add(
                ErrorKind.NEGATIVE_VALUE_NOT_ALLOWED,
                "negative_perspective_value",
                "Perspective distance cannot be negative",
                **context,
            )
    return ok


def _check_transform_structured(value: Structured, sink: Diagnostics) -> bool:
    style = value.get("style")
    if isinstance(style, str):
        return check_transform(Text(style.strip()), sink)
    items = value.get("items")
    if items is not None:
        if not isinstance(items, list):
            return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_transform_list", "Transform list must be a list")
        ok = True
        for item in items:
            if isinstance(item, str):
                ok = check_transform(Text(item.strip()), sink) and ok
            elif isinstance(item, dict):
                ok = check_transform_object(item, sink) and ok
            else:
                ok = sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_transform_item", "Transform item must be text or object")
        return ok
    return check_transform_object(dict(value.fields), sink)


def check_transform_object(item: dict[str, Any], sink: Diagnostics) -> bool:
    transform_type = item.get("type")
    if not isinstance(transform_type, str) or transform_type not in STRUCTURED_FIELDS:
        return sink.add(
            ErrorKind.INVALID_VALUE_FORMAT,
            "invalid_transform_function",
            f"Unknown transform type '{transform_type}'",
        )
    fields = STRUCTURED_FIELDS[transform_type]
    present = [key for key in fields if item.get(key) is not None]
    if not present:
        return sink.add(
            ErrorKind.MALFORMED_GRAMMAR,
            "missing_transform_value",
            f"Transform '{transform_type}' has no values",
            type=transform_type,
        )
    ok = True
    for key in present:
        raw = item[key]
        kind = fields[key]
        if isinstance(raw, str):
            valid = check_argument(raw.strip(), kind)
            number = structured_number(raw) if valid and not is_css_variable(raw) else None
        else:
            number = structured_number(raw)
            valid = number is not None and (
                kind != NUMBER or not number[1]
            ) and (
                not number[1] or number[1] in (ANGLE_UNITS if kind == ANGLE else LENGTH_UNITS)
            )
        if not valid:
            ok = sink.add(
                ErrorKind.INVALID_VALUE_FORMAT,
                f"invalid_transform_{kind}",
                f"Transform '{transform_type}' field '{key}' must be a {kind}",
                field=key,
            )
        elif transform_type == "perspective" and number is not None and number[0] < 0:
            ok = sink.add(
                ErrorKind.NEGATIVE_VALUE_NOT_ALLOWED,
                "negative_perspective_value",
                "Perspective distance cannot be negative",
                field=key,
            )
    return ok
