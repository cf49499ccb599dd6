"""
Layout and Spacing Composites
Flex/grid shorthands -> ``design.layout_v2``; padding/margin shorthands ->
per-side responsive unit objects.
"""

import re
from typing import Any, Mapping

from ..codec.builders import to_unit_object
from ..core.errors import Diagnostic
from ..grammar.keywords import ALIGN_ITEMS, DISPLAYS, FLEX_DIRECTIONS, JUSTIFY_CONTENT
from ..grammar.tokens import split_words
from ..grammar.types import GrammarFamily, ValueRules
from ..grammar.validator import validate_value
from ..paths.breakpoints import Breakpoint

LAYOUT_KEYS = ("display", "flexDirection", "justifyContent", "alignItems", "flexWrap", "gap", "gridColumns")
SPACING_KEYS = ("padding", "margin")

# Responsive values of one shorthand: breakpoint key -> raw value
Responsive = Mapping[str, Any]

_REPEAT = re.compile(r"repeat\s*\(\s*(\d+)", re.IGNORECASE)
_VERTICAL_DIRECTIONS = frozenset({"column", "column-reverse"})
_BASE = Breakpoint.BASE.value

_LAYOUT_CHOICES = {
    "display": DISPLAYS,
    "flexDirection": FLEX_DIRECTIONS,
    "alignItems": ALIGN_ITEMS,
    "justifyContent": JUSTIFY_CONTENT,
}


def validate_layout(layout: Mapping[str, Responsive]) -> tuple[dict[str, dict[str, Any]], list[Diagnostic]]:
    """
    Drop layout values outside their grammar.

    Returns:
        (accepted values, diagnostics for the dropped ones)
    """
    accepted: dict[str, dict[str, Any]] = {}
    diagnostics: list[Diagnostic] = []
    for key, values in layout.items():
        for breakpoint, raw in values.items():
            if key in _LAYOUT_CHOICES:
                ok, found = validate_value(raw, GrammarFamily.ENUM, ValueRules(choices=_LAYOUT_CHOICES[key]))
            elif key == "gap":
                ok, found = validate_value(raw, GrammarFamily.LENGTH, ValueRules(non_negative=True))
            else:
                ok, found = True, ()
            if ok:
                accepted.setdefault(key, {})[breakpoint] = raw
            else:
                diagnostics.extend(found)
    return accepted, diagnostics


def items_per_row(grid_columns: Any) -> int:
    """Column count of a grid template: ``repeat(N, ...)`` or the number of tracks."""
    text = str(grid_columns).strip()
    match = _REPEAT.search(text)
    if match:
        return int(match.group(1))
    return len(split_words(text))


def responsive_units(values: Responsive, default_unit: str = "px") -> dict[str, Any]:
    return {breakpoint: to_unit_object(raw, default_unit) for breakpoint, raw in values.items()}


def build_layout_v2(
    layout: Mapping[str, Responsive],
    gap_both_axes: bool = True,
    default_unit: str = "px",
) -> dict[str, Any]:
    """
    Map flex/grid shorthands onto the builder's ``layout_v2`` control.

    The layout kind comes from the base breakpoint: ``display: grid`` or any
    base ``gridColumns`` selects grid, a column ``flexDirection`` selects
    vertical, everything else is horizontal.
    """
    display = layout.get("display", {}).get(_BASE)
    direction = layout.get("flexDirection", {}).get(_BASE)
    grid_columns = layout.get("gridColumns", {})
    gap = layout.get("gap")
    layout_v2: dict[str, Any] = {}

    if display == "grid" or grid_columns.get(_BASE):
        layout_v2["layout"] = "grid"
        if grid_columns:
            layout_v2["g_items_per_row"] = {
                breakpoint: items_per_row(value) for breakpoint, value in grid_columns.items()
            }
        if gap:
            layout_v2["g_space_between_items"] = responsive_units(gap, default_unit)
        return layout_v2

    vertical = direction in _VERTICAL_DIRECTIONS
    align = dict(layout.get("alignItems", {}))
    justify = dict(layout.get("justifyContent", {}))
    if vertical:
        layout_v2["layout"] = "vertical"
        primary, secondary = ("v_align", align), ("v_vertical_align", justify)
    else:
        layout_v2["layout"] = "horizontal"
        primary, secondary = ("h_align", justify), ("h_vertical_align", align)
    for key, values in (primary, secondary):
        if values:
            layout_v2[key] = values

    if gap:
        active, other = ("v_gap", "h_gap") if vertical else ("h_gap", "v_gap")
        layout_v2[active] = responsive_units(gap, default_unit)
        if gap_both_axes:
            layout_v2[other] = responsive_units(gap, default_unit)
    return layout_v2


def expand_spacing(value: Any) -> dict[str, str]:
    """
    CSS box shorthand (1-4 values) -> ``{top, right, bottom, left}``.

    Raises:
        ValueError: empty value or more than four parts
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    parts = split_words(str(value).strip())
    if not 1 <= len(parts) <= 4:
        raise ValueError(f"Spacing shorthand takes 1-4 values, got {len(parts)}")
    top = parts[0]
    right = parts[1] if len(parts) >= 2 else top
    bottom = parts[2] if len(parts) >= 3 else top
    left = parts[3] if len(parts) == 4 else right
    return {"top": top, "right": right, "bottom": bottom, "left": left}


def spacing_sides(values: Responsive, default_unit: str = "px") -> tuple[dict[str, dict[str, Any]], list[Diagnostic]]:
    """
    Responsive shorthand -> ``{side: {breakpoint: unit object}}``.

    Sides failing the length grammar are dropped with their diagnostics.
    """
    sides: dict[str, dict[str, Any]] = {}
    diagnostics: list[Diagnostic] = []
    for breakpoint, raw in values.items():
        for side, part in expand_spacing(raw).items():
            ok, found = validate_value(part, GrammarFamily.LENGTH)
            if not ok:
                diagnostics.extend(found)
                continue
            sides.setdefault(side, {})[breakpoint] = to_unit_object(part, default_unit)
    return sides, diagnostics


def spacing_properties(
    prefix: str,
    kind: str,
    sides: Mapping[str, Mapping[str, Any]],
) -> list[tuple[str, dict[str, Any]]]:
    """
    Destination paths for expanded spacing.

    Padding lands at ``<prefix>.<side>``; margin only carries top and bottom
    as ``<prefix>.margin_top`` / ``<prefix>.margin_bottom``.
    """
    if kind == "margin":
        return [
            (f"{prefix}.margin_{side}", dict(sides[side])) for side in ("top", "bottom") if side in sides
        ]
    return [(f"{prefix}.{side}", dict(values)) for side, values in sides.items()]


def background_image_layer(url: str) -> dict[str, Any]:
    """The single cover layer a ``backgroundImage`` shorthand produces."""
    return {
        "type": "image",
        "image": {"type": "external_url", "url": url},
        "size": "cover",
        "position": "center center",
    }
