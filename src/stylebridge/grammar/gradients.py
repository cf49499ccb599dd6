"""
Gradient grammar
``[repeating-]{linear|radial|conic}-gradient(...)`` text and gradient objects.
"""

from dataclasses import dataclass
import re
from typing import Any

from ..core.errors import ErrorKind
from .primitives import ANGLE_UNITS, LENGTH_UNITS, is_angle, is_css_variable, is_length, is_valid_color, parse_dimension
from .tokens import is_balanced, outer_call, split_top_level, split_words
from .types import Diagnostics, RawValue, Structured, Text

GRADIENT_TYPES = ("linear", "radial", "conic")
RADIAL_SHAPES = frozenset({"circle", "ellipse"})
RADIAL_SIZES = frozenset({"closest-side", "closest-corner", "farthest-side", "farthest-corner"})
POSITION_KEYWORDS = frozenset({"center", "top", "bottom", "left", "right"})
SIDES = frozenset({"top", "bottom", "left", "right"})

_PREFIX = re.compile(r"^(repeating-)?(linear|radial|conic)-gradient\s*\(", re.IGNORECASE)
_LINEAR_DIRECTION = re.compile(r"^to\s+(top|bottom|left|right)(\s+(top|bottom|left|right))?$", re.IGNORECASE)
_AT = re.compile(r"\bat\s+", re.IGNORECASE)
_NOT_A_COLOR = frozenset({"to", "at", "from"})


@dataclass(frozen=True)
class GradientParts:
    """Top-level pieces of a gradient function."""

    repeating: bool
    type: str
    config: str | None
    stops: tuple[str, ...]


def is_valid_position(text: str) -> bool:
    words = split_words(text)
    if not 1 <= len(words) <= 4:
        return False
    return all(word.lower() in POSITION_KEYWORDS or is_length(word) or is_css_variable(word) for word in words)


def split_stop(segment: str) -> tuple[str, tuple[str, ...]]:
    """Color followed by its position words."""
    words = split_words(segment)
    if not words:
        return "", ()
    return words[0], tuple(words[1:])


def _is_stop_position(word: str) -> bool:
    return is_css_variable(word) or parse_dimension(word, LENGTH_UNITS + ANGLE_UNITS) is not None


def is_configuration(gradient_type: str, segment: str) -> bool:
    """Whether the first comma segment configures the gradient instead of being a stop."""
    first_word = split_words(segment)[0] if segment else ""
    if gradient_type == "linear":
        return is_angle(segment) or bool(_LINEAR_DIRECTION.match(segment))
    if is_valid_color(first_word) and first_word.lower() not in _NOT_A_COLOR | RADIAL_SHAPES:
        return False
    if gradient_type == "radial":
        words = {word.lower() for word in split_words(segment)}
        return bool(
            words & RADIAL_SHAPES
            or words & RADIAL_SIZES
            or _AT.search(segment)
            or all(is_length(word) for word in split_words(segment))
        )
    return segment.lower().startswith("from ") or bool(_AT.search(segment))


def analyze_gradient(text: str) -> GradientParts | None:
    """Split gradient text into type, optional configuration and stops (no validation)."""
    match = _PREFIX.match(text)
    if match is None:
        return None
    normalized = re.sub(r"-gradient\s*\(", "-gradient(", text, count=1, flags=re.IGNORECASE)
    call = outer_call(normalized)
    if call is None:
        return None
    gradient_type = match.group(2).lower()
    segments = split_top_level(call[1])
    config = None
    if segments and segments[0] and is_configuration(gradient_type, segments[0]):
        config = segments[0]
        segments = segments[1:]
    return GradientParts(
        repeating=bool(match.group(1)),
        type=gradient_type,
        config=config,
        stops=tuple(segments),
    )


def check_gradient(value: RawValue, sink: Diagnostics) -> bool:
    """Validate gradient text or a gradient object."""
    if isinstance(value, Structured):
        return _check_gradient_structured(value, sink)

    text = value.value
    if not _PREFIX.match(text):
        return sink.add(
            ErrorKind.INVALID_VALUE_FORMAT,
            "invalid_gradient_type",
            "Gradient must start with linear-, radial- or conic-gradient(",
        )
    if not is_balanced(text):
        return sink.add(ErrorKind.MALFORMED_GRAMMAR, "unbalanced_parentheses", "Unbalanced parentheses in gradient")
    parts = analyze_gradient(text)
    if parts is None:
        return sink.add(ErrorKind.MALFORMED_GRAMMAR, "invalid_gradient_syntax", "Gradient must be a single function call")

    ok = True
    if parts.config is not None:
        ok = _check_configuration(parts.type, parts.config, sink)
    if len(parts.stops) < 2:
        ok = sink.add(
            ErrorKind.MALFORMED_GRAMMAR,
            "gradient_missing_color_stops",
            "Gradient requires at least two color stops",
            type=parts.type,
        )
    for index, stop in enumerate(parts.stops):
        ok = _check_stop(stop, index, sink) and ok
    return ok


def _check_configuration(gradient_type: str, config: str, sink: Diagnostics) -> bool:
    if gradient_type == "linear":
        return True
    if gradient_type == "radial":
        at = _AT.search(config)
        head = config[: at.start()] if at else config
        position = config[at.end():] if at else None
        for word in split_words(head):
            lowered = word.lower()
            if lowered not in RADIAL_SHAPES and lowered not in RADIAL_SIZES and not is_length(word):
                return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_gradient_shape", f"Invalid radial shape/size '{word}'")
    else:
        at = _AT.search(config)
        head = config[: at.start()].strip() if at else config
        position = config[at.end():] if at else None
        if head:
            angle = head[5:].strip() if head.lower().startswith("from ") else None
            if angle is None or not is_angle(angle):
                return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_gradient_angle", f"Invalid conic start '{head}'")
    if position is not None and not is_valid_position(position):
        return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_gradient_position", f"Invalid gradient position '{position}'")
    return True


def _check_stop(stop: str, index: int, sink: Diagnostics) -> bool:
    color, positions = split_stop(stop)
    if not color:
        return sink.add(ErrorKind.MALFORMED_GRAMMAR, "empty_gradient_stop", "Empty color stop", stop=index)
    if color.lower() in _NOT_A_COLOR or not is_valid_color(color):
        return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_gradient_color", f"Invalid stop color '{color}'", stop=index)
    if len(positions) > 2:
        return sink.add(ErrorKind.MALFORMED_GRAMMAR, "too_many_stop_positions", "A color stop takes at most two positions", stop=index)
    for position in positions:
        if not _is_stop_position(position):
            return sink.add(
                ErrorKind.INVALID_VALUE_FORMAT,
                "invalid_gradient_stop_position",
                f"Invalid stop position '{position}'",
                stop=index,
            )
    return True


def _check_gradient_structured(value: Structured, sink: Diagnostics) -> bool:
    for key in ("style", "value"):
        text = value.get(key)
        if isinstance(text, str) and text.strip():
            return check_gradient(Text(text.strip()), sink)

    ok = True
    gradient_type = value.get("type", "linear")
    if gradient_type not in GRADIENT_TYPES:
        ok = sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_gradient_type", f"Invalid gradient type '{gradient_type}'")
    angle = value.get("angle")
    if angle is not None and not is_angle(str(angle)):
        ok = sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_gradient_angle", f"Invalid gradient angle '{angle}'")
    position = value.get("position")
    if position is not None and not (isinstance(position, str) and is_valid_position(position)):
        ok = sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_gradient_position", f"Invalid gradient position '{position}'")
    shape = value.get("shape")
    if shape is not None and shape not in RADIAL_SHAPES:
        ok = sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_gradient_shape", f"Invalid gradient shape '{shape}'")
    size = value.get("size")
    if size is not None and size not in RADIAL_SIZES and not (isinstance(size, str) and all(is_length(w) for w in size.split())):
        ok = sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_gradient_size", f"Invalid gradient size '{size}'")

    colors: Any = value.get("colors")
    if not isinstance(colors, list) or len(colors) < 2:
        return sink.add(ErrorKind.MALFORMED_GRAMMAR, "gradient_missing_color_stops", "Gradient object requires at least two colors")
    for index, color in enumerate(colors):
        if not isinstance(color, str) or not is_valid_color(color):
            ok = sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_gradient_color", f"Invalid stop color '{color}'", stop=index)
    stops: Any = value.get("stops")
    if stops is not None:
        if not isinstance(stops, list) or len(stops) > len(colors):
            return sink.add(ErrorKind.MALFORMED_GRAMMAR, "invalid_gradient_stops", "'stops' must be a list no longer than 'colors'")
        for index, stop in enumerate(stops):
            if stop is None:
                continue
            text = f"{stop}%" if isinstance(stop, (int, float)) and not isinstance(stop, bool) else stop
            if not isinstance(text, str) or not all(_is_stop_position(word) for word in split_words(text)):
                ok = sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_gradient_stop_position", f"Invalid stop position '{stop}'", stop=index)
    return ok
