"""
Effect grammars
Box-shadow and filter validation (text and structured forms).
"""

from dataclasses import dataclass
import re
from typing import Any

from ..core.errors import ErrorKind
from .primitives import (
    ANGLE_UNITS,
    LENGTH_UNITS,
    NUMBER_PATTERN,
    extract_color,
    is_css_variable,
    is_universal_keyword,
    is_valid_color,
    parse_dimension,
    split_number_unit,
)
from .tokens import is_balanced, split_function_calls, split_top_level, split_words
from .types import Diagnostics, RawValue, Structured, Text

FILTER_FUNCTIONS = (
    "blur", "brightness", "contrast", "drop-shadow", "grayscale",
    "hue-rotate", "invert", "opacity", "saturate", "sepia",
)
PERCENTAGE_FILTERS = frozenset({"brightness", "contrast", "grayscale", "invert", "opacity", "saturate", "sepia"})

_HUE_ROTATE = re.compile(rf"^{NUMBER_PATTERN}\s*(deg|rad|grad|turn)?$", re.IGNORECASE)
_PERCENTAGE = re.compile(rf"^{NUMBER_PATTERN}%?$")


# ============================================================================
# Shared clause analysis
# ============================================================================


@dataclass(frozen=True)
class ShadowParts:
    """Positional pieces of one shadow clause."""

    inset: bool
    color: str | None
    lengths: tuple[str, ...]


def analyze_shadow_clause(clause: str) -> ShadowParts:
    """Strip ``inset``, extract the color, and keep remaining words as lengths."""
    words = split_words(clause)
    kept = [word for word in words if word.lower() != "inset"]
    color, remainder = extract_color(" ".join(kept))
    inset = len(kept) != len(words)
    return ShadowParts(inset=inset, color=color, lengths=tuple(split_words(remainder)))


def structured_number(value: Any) -> tuple[float, str] | None:
    """Number and unit from 4, '4px' or {'number': 4, 'unit': 'px'}."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value), ""
    if isinstance(value, str):
        return split_number_unit(value)
    if isinstance(value, dict) and isinstance(value.get("number"), (int, float)):
        unit = value.get("unit") or ""
        return float(value["number"]), str(unit).lower()
    return None


def _check_length_word(word: str, units: tuple[str, ...] = LENGTH_UNITS) -> float | None:
    if is_css_variable(word):
        return 0.0
    parsed = parse_dimension(word, units)
    return parsed[0] if parsed else None


def _check_offsets(
    parts: ShadowParts,
    sink: Diagnostics,
    prefix: str,
    max_lengths: int,
    context: dict[str, Any],
) -> bool:
    ok = True
    if parts.color is not None and not is_valid_color(parts.color):
        ok = sink.add(
            ErrorKind.INVALID_VALUE_FORMAT,
            f"invalid_{prefix}_color",
            f"Invalid color '{parts.color}' in {prefix.replace('_', '-')}",
            **context,
        )
    numbers: list[float] = []
    for word in parts.lengths:
        number = _check_length_word(word)
        if number is None:
            ok = sink.add(
                ErrorKind.INVALID_VALUE_FORMAT,
                f"invalid_{prefix}_length",
                f"Invalid length '{word}' in {prefix.replace('_', '-')}",
                **context,
            )
            continue
        numbers.append(number)
    if len(parts.lengths) < 2:
        return sink.add(
            ErrorKind.MALFORMED_GRAMMAR,
            f"{prefix}_missing_offsets",
            f"{prefix.replace('_', '-')} requires at least x and y offsets",
            **context,
        )
    if len(parts.lengths) > max_lengths:
        return sink.add(
            ErrorKind.MALFORMED_GRAMMAR,
            f"{prefix}_too_many_lengths",
            f"{prefix.replace('_', '-')} accepts at most {max_lengths} lengths",
            **context,
        )
    if len(numbers) == len(parts.lengths):
        if len(numbers) >= 3 and numbers[2] < 0:
            ok = sink.add(
                ErrorKind.NEGATIVE_VALUE_NOT_ALLOWED,
                f"negative_{prefix}_blur",
                "Blur radius cannot be negative",
                **context,
            )
        if len(numbers) >= 4 and numbers[3] < 0:
            ok = sink.add(
                ErrorKind.NEGATIVE_VALUE_NOT_ALLOWED,
                f"negative_{prefix}_spread",
                "Spread radius cannot be negative",
                **context,
            )
    return ok


# ============================================================================
# Box Shadow
# ============================================================================


def check_box_shadow(value: RawValue, sink: Diagnostics) -> bool:
    """Validate a box-shadow list (text) or shadow object(s)."""
    if isinstance(value, Structured):
        return _check_shadow_structured(value, sink)

    text = value.value
    if text.lower() == "none":
        return True
    if not is_balanced(text):
        return sink.add(
            ErrorKind.MALFORMED_GRAMMAR, "unbalanced_parentheses", "Unbalanced parentheses in box-shadow"
        )

    ok = True
    for index, clause in enumerate(split_top_level(text)):
        context = {"clause": index}
        if not clause:
            ok = sink.add(ErrorKind.MALFORMED_GRAMMAR, "empty_box_shadow_clause", "Empty box-shadow clause", **context)
            continue
        if is_universal_keyword(clause) or clause.lower() == "none":
            ok = sink.add(
                ErrorKind.INVALID_VALUE_FORMAT,
                "box_shadow_keyword_in_list",
                f"Keyword '{clause}' cannot appear in a shadow list",
                **context,
            )
            continue
        ok = _check_offsets(analyze_shadow_clause(clause), sink, "box_shadow", 4, context) and ok
    return ok


def _check_shadow_structured(value: Structured, sink: Diagnostics) -> bool:
    style = value.get("style")
    if isinstance(style, str):
        return check_box_shadow(Text(style.strip()), sink)

    items = value.first("shadows", "items")
    if items is not None:
        if not isinstance(items, list) or not items:
            return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_box_shadow_list", "Shadow list must be non-empty")
        ok = True
        for item in items:
            if isinstance(item, str):
                ok = check_box_shadow(Text(item.strip()), sink) and ok
            elif isinstance(item, dict):
                ok = _check_shadow_object(item, sink) and ok
            else:
                ok = sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_box_shadow_item", "Shadow item must be text or object")
        return ok
    return _check_shadow_object(dict(value.fields), sink)


def _check_shadow_object(shadow: dict[str, Any], sink: Diagnostics) -> bool:
    ok = True
    for axis in ("x", "y"):
        if axis not in shadow:
            ok = sink.add(
                ErrorKind.MALFORMED_GRAMMAR,
                "box_shadow_missing_offsets",
                f"Shadow object is missing '{axis}'",
                field=axis,
            )
    for key in ("x", "y", "blur", "spread"):
        if key not in shadow:
            continue
        raw = shadow[key]
        if isinstance(raw, str) and is_css_variable(raw):
            continue
        parsed = structured_number(raw)
        if parsed is None or (parsed[1] and parsed[1] not in LENGTH_UNITS):
            ok = sink.add(
                ErrorKind.INVALID_VALUE_FORMAT,
                "invalid_box_shadow_length",
                f"Invalid length for shadow '{key}'",
                field=key,
            )
        elif key in ("blur", "spread") and parsed[0] < 0:
            ok = sink.add(
                ErrorKind.NEGATIVE_VALUE_NOT_ALLOWED,
                f"negative_box_shadow_{key}",
                f"Shadow {key} cannot be negative",
                field=key,
            )
    color = shadow.get("color")
    if color is not None and not (isinstance(color, str) and is_valid_color(color)):
        ok = sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_box_shadow_color", "Invalid shadow color", field="color")
    inset = shadow.get("inset")
    if inset is not None and inset not in (True, False, 0, 1, "true", "false", "0", "1"):
        ok = sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_box_shadow_inset", "Shadow inset must be boolean", field="inset")
    position = shadow.get("position")
    if position is not None and position not in ("inset", "outset"):
        ok = sink.add(
            ErrorKind.INVALID_VALUE_FORMAT,
            "invalid_box_shadow_position",
            "Shadow position must be 'inset' or 'outset'",
            field="position",
        )
    return ok


# ============================================================================
# Filter
# ============================================================================


def check_filter(value: RawValue, sink: Diagnostics) -> bool:
    """Validate a space-separated filter function list or filter object(s)."""
    if isinstance(value, Structured):
        return _check_filter_structured(value, sink)

    text = value.value
    if text.lower() == "none":
        return True
    if not is_balanced(text):
        return sink.add(ErrorKind.MALFORMED_GRAMMAR, "unbalanced_parentheses", "Unbalanced parentheses in filter")
    calls = split_function_calls(text)
    if not calls:
        return sink.add(ErrorKind.MALFORMED_GRAMMAR, "invalid_filter_syntax", f"Invalid filter syntax '{text}'")

    ok = True
    for name, args in calls:
        ok = check_filter_call(name.lower(), args, sink) and ok
    return ok


def check_filter_call(name: str, args: str, sink: Diagnostics) -> bool:
    context = {"function": name}
    if name not in FILTER_FUNCTIONS:
        return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "unknown_filter_function", f"Unknown filter function '{name}'", **context)
    if not args:
        return sink.add(ErrorKind.MALFORMED_GRAMMAR, f"invalid_{name}_value", f"{name}() requires an argument", **context)
    if is_css_variable(args):
        return True

    if name == "blur":
        parsed = parse_dimension(args, LENGTH_UNITS)
        if parsed is None:
            return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_blur_value", f"Invalid blur length '{args}'", **context)
        if parsed[0] < 0:
            return sink.add(ErrorKind.NEGATIVE_VALUE_NOT_ALLOWED, "negative_blur_value", "Blur cannot be negative", **context)
        return True

    if name == "hue-rotate":
        if not _HUE_ROTATE.match(args):
            return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_hue-rotate_value", f"Invalid angle '{args}'", **context)
        return True

    if name == "drop-shadow":
        parts = analyze_shadow_clause(args)
        if parts.inset:
            return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "drop_shadow_inset", "drop-shadow does not accept inset", **context)
        return _check_offsets(parts, sink, "drop_shadow", 3, context)

    if not _PERCENTAGE.match(args):
        return sink.add(ErrorKind.INVALID_VALUE_FORMAT, f"invalid_{name}_value", f"Invalid {name} amount '{args}'", **context)
    if args.startswith("-"):
        return sink.add(ErrorKind.NEGATIVE_VALUE_NOT_ALLOWED, f"negative_{name}_value", f"{name} cannot be negative", **context)
    return True


def _check_filter_structured(value: Structured, sink: Diagnostics) -> bool:
    style = value.get("style")
    if isinstance(style, str):
        return check_filter(Text(style.strip()), sink)
    items = value.get("items")
    if items is not None:
        if not isinstance(items, list):
            return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_filter_list", "Filter list must be a list")
        ok = True
        for item in items:
            if isinstance(item, str):
                ok = check_filter(Text(item.strip()), sink) and ok
            elif isinstance(item, dict):
                ok = check_filter_object(item, sink) and ok
            else:
                ok = sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_filter_item", "Filter item must be text or object")
        return ok
    return check_filter_object(dict(value.fields), sink)


def filter_amount_field(filter_type: str, item: dict[str, Any]) -> Any:
    """Raw amount of a filter object, honouring the per-type field aliases."""
    if filter_type == "blur":
        keys = ("blur_amount", "amount", "value")
    elif filter_type == "hue-rotate":
        keys = ("rotate", "amount", "value")
    else:
        keys = ("amount", "value")
    for key in keys:
        if item.get(key) is not None:
            return item[key]
    return None


def check_filter_object(item: dict[str, Any], sink: Diagnostics) -> bool:
    filter_type = item.get("type")
    if not isinstance(filter_type, str) or not filter_type:
        return sink.add(ErrorKind.MALFORMED_GRAMMAR, "missing_filter_type", "Filter object requires 'type'")
    filter_type = filter_type.lower()
    if filter_type not in FILTER_FUNCTIONS:
        return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "unknown_filter_function", f"Unknown filter type '{filter_type}'")
    if filter_type == "drop-shadow":
        raw = item.get("value")
        if isinstance(raw, str):
            return check_filter_call(filter_type, raw.strip(), sink)
        if item.get("inset") in (True, 1, "true", "1") or item.get("position") == "inset":
            return sink.add(ErrorKind.INVALID_VALUE_FORMAT, "drop_shadow_inset", "drop-shadow does not accept inset")
        return _check_shadow_object(item, sink)

    raw = filter_amount_field(filter_type, item)
    if raw is None:
        return sink.add(ErrorKind.MALFORMED_GRAMMAR, f"missing_{filter_type}_value", f"Filter '{filter_type}' requires an amount")
    if isinstance(raw, str) and is_css_variable(raw):
        return True
    parsed = structured_number(raw)
    units = LENGTH_UNITS if filter_type == "blur" else ANGLE_UNITS if filter_type == "hue-rotate" else ("%",)
    if parsed is None or (parsed[1] and parsed[1] not in units):
        return sink.add(ErrorKind.INVALID_VALUE_FORMAT, f"invalid_{filter_type}_value", f"Invalid {filter_type} amount")
    if filter_type != "hue-rotate" and parsed[0] < 0:
        return sink.add(ErrorKind.NEGATIVE_VALUE_NOT_ALLOWED, f"negative_{filter_type}_value", f"{filter_type} cannot be negative")
    return True
