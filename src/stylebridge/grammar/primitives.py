"""
Primitive value grammars
Numbers, units, colors and CSS custom-property references.
"""

import re

from .tokens import is_balanced, outer_call, split_words

# ============================================================================
# Constants
# ============================================================================

UNIVERSAL_KEYWORDS = frozenset({"inherit", "initial", "unset", "revert"})

LENGTH_UNITS = (
    "px", "em", "rem", "%", "vw", "vh", "vmin", "vmax",
    "cm", "mm", "in", "pt", "pc", "ex", "ch",
)
ANGLE_UNITS = ("deg", "rad", "grad", "turn")
TIME_UNITS = ("ms", "s")

NAMED_SHADOW_COLORS = frozenset({
    "transparent", "currentcolor", "black", "white", "red", "green", "blue",
    "yellow", "orange", "purple", "pink", "gray", "grey", "silver", "gold",
    "aqua", "cyan", "magenta", "lime", "olive", "navy", "teal", "maroon",
})

NUMBER_PATTERN = r"-?(?:\d+(?:\.\d*)?|\.\d+)"
_NUMBER = re.compile(rf"^{NUMBER_PATTERN}$")
_NUMBER_UNIT = re.compile(rf"^({NUMBER_PATTERN})\s*([a-zA-Z%]*)$")

_COLOR_PATTERNS = (
    re.compile(r"^#[0-9a-fA-F]{3}$"),
    re.compile(r"^#[0-9a-fA-F]{6}$"),
    re.compile(r"^#[0-9a-fA-F]{8}$"),
    re.compile(r"^rgb\(\s*\d{1,3}\s*,\s*\d{1,3}\s*,\s*\d{1,3}\s*\)$", re.IGNORECASE),
    re.compile(r"^rgba\(\s*\d{1,3}\s*,\s*\d{1,3}\s*,\s*\d{1,3}\s*,\s*[\d.]+\s*\)$", re.IGNORECASE),
    re.compile(r"^hsl\(\s*\d{1,3}\s*,\s*\d{1,3}%\s*,\s*\d{1,3}%\s*\)$", re.IGNORECASE),
    re.compile(r"^hsla\(\s*\d{1,3}\s*,\s*\d{1,3}%\s*,\s*\d{1,3}%\s*,\s*[\d.]+\s*\)$", re.IGNORECASE),
    re.compile(r"^[a-zA-Z]+$"),
)

_VARIABLE_NAME = re.compile(r"^--[\w-]+$")
_VARIABLE_REFERENCE = re.compile(r"var\(\s*(--[\w-]+)")
_FUNCTION_COLOR = re.compile(r"^(?:rgba?|hsla?)\(.*\)$", re.IGNORECASE)
_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{3,8}$")

# ============================================================================
# Numbers and Units
# ============================================================================


def is_number(text: str) -> bool:
    return bool(_NUMBER.match(text.strip()))


def split_number_unit(text: str) -> tuple[float, str] | None:
    """'16px' -> (16.0, 'px'); '16' -> (16.0, ''); None when not numeric."""
    match = _NUMBER_UNIT.match(text.strip())
    if match is None:
        return None
    return float(match.group(1)), match.group(2).lower()


def parse_dimension(text: str, units: tuple[str, ...]) -> tuple[float, str] | None:
    """Number with an optional unit from the allow-list."""
    parsed = split_number_unit(text)
    if parsed is None:
        return None
    number, unit = parsed
    if unit and unit not in units:
        return None
    return number, unit


def is_length(text: str) -> bool:
    return parse_dimension(text, LENGTH_UNITS) is not None


def is_angle(text: str) -> bool:
    return parse_dimension(text, ANGLE_UNITS) is not None


def is_universal_keyword(text: str) -> bool:
    return text.strip().lower() in UNIVERSAL_KEYWORDS


# ============================================================================
# Colors
# ============================================================================


def is_valid_color(text: str) -> bool:
    """Check a color against the fixed pattern set (hex, rgb/hsl, names, var())."""
    value = text.strip()
    if not value:
        return False
    if value.startswith("var("):
        return is_css_variable(value)
    return any(pattern.match(value) for pattern in _COLOR_PATTERNS)


def extract_color(clause: str) -> tuple[str | None, str]:
    """
    Pull a color out of a shadow-like clause.

    Words are split at paren depth zero, so a ``var()`` with a color
    fallback is one word. Tries, in order: function-form color, hex color,
    custom-property reference (the last one, colors trail lengths), then
    named colors (only when the rest is a length list).

    Returns:
        (color or None, remainder with the color removed)
    """
    words = split_words(clause)

    def without(index: int) -> str:
        return " ".join(words[:index] + words[index + 1:])

    for pattern in (_FUNCTION_COLOR, _HEX_COLOR):
        for index, word in enumerate(words):
            if pattern.match(word):
                return word, without(index)

    for index in reversed(range(len(words))):
        if words[index].startswith("var(") and is_css_variable(words[index]):
            return words[index], without(index)

    for index, word in enumerate(words):
        if word.lower() in NAMED_SHADOW_COLORS:
            rest = words[:index] + words[index + 1:]
            if all(is_length(other) for other in rest):
                return word, " ".join(rest)
    return None, " ".join(words)


# ============================================================================
# CSS Custom Properties
# ============================================================================


def _split_first_comma(inner: str) -> tuple[str, str | None]:
    depth = 0
    for pos, char in enumerate(inner):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == "," and depth == 0:
            return inner[:pos].strip(), inner[pos + 1:].strip()
    return inner.strip(), None


def parse_css_variable(text: str) -> tuple[str, str | None] | None:
    """
    Split ``var(--name[, fallback])`` into name and raw fallback.

    Returns:
        (name, fallback text or None), or None when the reference is invalid
    """
    value = text.strip()
    if not value.startswith("var(") or not value.endswith(")"):
        return None
    if not is_balanced(value):
        return None
    call = outer_call(value)
    if call is None or call[0] != "var":
        return None
    name, fallback = _split_first_comma(call[1])
    if not _VARIABLE_NAME.match(name):
        return None
    if fallback is None:
        return name, None
    if not fallback:
        return None
    if fallback.startswith("var("):
        if parse_css_variable(fallback) is None:
            return None
    elif not is_balanced(fallback):
        return None
    return name, fallback


def is_css_variable(text: str) -> bool:
    return parse_css_variable(text) is not None


def contains_css_variable(text: str) -> bool:
    return "var(" in text


def extract_css_variable_names(text: str) -> list[str]:
    """All custom-property names referenced anywhere in text, fallbacks included."""
    return _VARIABLE_REFERENCE.findall(text)


def extract_css_variable_fallback(text: str) -> str | None:
    parsed = parse_css_variable(text)
    if parsed is None:
        return None
    return parsed[1]


def is_valid_css_variable_of_type(text: str, family: str) -> bool:
    """
    Check a reference whose fallback (when present) must satisfy a family.

    Args:
        text: ``var(...)`` reference
        family: 'color', 'length', 'angle' or 'number'; other families only check syntax

    Returns:
        True when syntactically valid and the innermost fallback fits the family
    """
    parsed = parse_css_variable(text)
    if parsed is None:
        return False
    fallback = parsed[1]
    if fallback is None:
        return True
    if fallback.startswith("var("):
        return is_valid_css_variable_of_type(fallback, family)
    checks = {
        "color": is_valid_color,
        "length": lambda v: is_length(v) or v.lower() == "auto",
        "angle": is_angle,
        "number": is_number,
    }
    check = checks.get(family)
    return check(fallback) if check else True
