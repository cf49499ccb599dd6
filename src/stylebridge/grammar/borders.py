"""Border side and border radius grammars."""

from typing import Any

from ..core.errors import ErrorKind
from .effects import structured_number
from .primitives import LENGTH_UNITS, is_css_variable, is_valid_color, parse_dimension
from .tokens import split_words
from .types import Diagnostics, RawValue, Structured, Text

BORDER_STYLES = ("none", "solid", "dashed", "dotted", "double", "groove", "ridge", "inset", "outset")
RADIUS_CORNERS = ("topLeft", "topRight", "bottomRight", "bottomLeft")


def classify_border_word(word: str) -> str | None:
    """'style', 'width', 'color' or None for a border shorthand word."""
    if word.lower() in BORDER_STYLES:
        return "style"
    if parse_dimension(word, LENGTH_UNITS) is not None:
        return "width"
    if is_valid_color(word):
        return "color"
    return None


def _check_width(raw: Any, sink: Diagnostics, field: str) -> bool:
    if isinstance(raw, str) and is_css_variable(raw):
        return True
    parsed = structured_number(raw)
    if parsed is None or (parsed[1] and parsed[1] not in LENGTH_UNITS):
        return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_border_width", f"Invalid border width '{raw}'", field=field)
    if parsed[0] < 0:
        return sink.add(ErrorKind.NEGATIVE_VALUE_NOT_ALLOWED, "negative_border_width", "Border width cannot be negative", field=field)
    return True


def check_border(value: RawValue, sink: Diagnostics) -> bool:
    """Validate ``1px solid #000`` (any order) or ``{width, style, color}``."""
    if isinstance(value, Structured):
        style_text = value.get("style")
        if isinstance(style_text, str) and len(value.fields) == 1 and style_text.lower() not in BORDER_STYLES:
            return check_border(Text(style_text.strip()), sink)
        ok = True
        if value.get("width") is not None:
            ok = _check_width(value.get("width"), sink, "width")
        border_style = value.get("style")
        if border_style is not None and border_style not in BORDER_STYLES:
            ok = sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_border_style", f"Invalid border style '{border_style}'")
        color = value.get("color")
        if color is not None and color != "" and not (isinstance(color, str) and is_valid_color(color)):
            ok = sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_border_color", f"Invalid border color '{color}'")
        return ok

    text = value.value
    if text.lower() == "none":
        return True
    seen: set[str] = set()
    for word in split_words(text):
        role = classify_border_word(word)
        if role is None:
            return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_border_value", f"Unrecognized border component '{word}'")
        if role in seen:
            return sink.add(ErrorKind.MALFORMED_GRAMMAR, "duplicate_border_component", f"Border {role} given more than once")
        seen.add(role)
        if role == "width" and not _check_width(word, sink, "width"):
            return False
    return True


def check_radius(value: RawValue, sink: Diagnostics) -> bool:
    """Validate 1-4 non-negative lengths or a per-corner object."""
    if isinstance(value, Structured):
        keys = [key for key in ("all",) + RADIUS_CORNERS if value.get(key) is not None]
        unknown = set(value.fields) - set(("all",) + RADIUS_CORNERS)
        if unknown:
            return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_radius_corner", f"Unknown radius corner(s) {sorted(unknown)}")
        if not keys:
            return sink.add(ErrorKind.MALFORMED_GRAMMAR, "missing_radius_value", "Radius object has no corners")
        ok = True
        for key in keys:
            ok = _check_width(value.get(key), sink, key) and ok
        return ok

    words = split_words(value.value)
    if not 1 <= len(words) <= 4:
        return sink.add(ErrorKind.MALFORMED_GRAMMAR, "invalid_radius_arity", "Border radius takes 1 to 4 lengths")
    ok = True
    for word in words:
        ok = _check_width(word, sink, "radius") and ok
    return ok
