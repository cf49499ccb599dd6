"""
Style Value Validator
Accumulating, non-throwing validation of raw style values per grammar family.
"""

from typing import Any, Callable

from ..core.errors import Diagnostic, ErrorKind
from ..core.logging_config import get_logger
from .borders import check_border, check_radius
from .effects import check_box_shadow, check_filter
from .gradients import check_gradient
from .primitives import (
    ANGLE_UNITS,
    LENGTH_UNITS,
    TIME_UNITS,
    is_css_variable,
    is_number,
    is_universal_keyword,
    is_valid_color,
    is_valid_css_variable_of_type,
    parse_dimension,
)
from .tokens import is_balanced
from .transforms import check_transform
from .types import NO_RULES, Diagnostics, GrammarFamily, RawValue, Structured, Text, ValueRules, coerce_input

logger = get_logger(__name__)

# Families whose text may legitimately contain references next to other tokens
_COMPOSITE_FAMILIES = frozenset({
    GrammarFamily.BOX_SHADOW,
    GrammarFamily.FILTER,
    GrammarFamily.TRANSFORM,
    GrammarFamily.BORDER,
    GrammarFamily.RADIUS,
    GrammarFamily.GRADIENT,
})

_DIMENSION_UNITS = {
    GrammarFamily.LENGTH: LENGTH_UNITS,
    GrammarFamily.ANGLE: ANGLE_UNITS,
    GrammarFamily.TIME: TIME_UNITS,
}


class StyleValidator:
    """
    Validates raw values against grammar families.

    Diagnostics accumulate across calls so a caller can check a whole
    element and report every failure at once. Nothing here raises for bad
    input; each method returns a bool.
    """

    def __init__(self) -> None:
        self._sink = Diagnostics()
        self._checks: dict[GrammarFamily, Callable[[RawValue, ValueRules], bool]] = {
            GrammarFamily.COLOR: self._check_color,
            GrammarFamily.LENGTH: lambda value, rules: self.check_dimension(value, GrammarFamily.LENGTH, rules),
            GrammarFamily.ANGLE: lambda value, rules: self.check_dimension(value, GrammarFamily.ANGLE, rules),
            GrammarFamily.TIME: lambda value, rules: self.check_dimension(value, GrammarFamily.TIME, rules),
            GrammarFamily.NUMBER: self._check_number,
            GrammarFamily.ENUM: self._check_enum,
            GrammarFamily.TEXT: self._check_text,
            GrammarFamily.CSS_VARIABLE: self._check_css_variable,
            GrammarFamily.BOX_SHADOW: lambda value, rules: check_box_shadow(value, self._sink),
            GrammarFamily.FILTER: lambda value, rules: check_filter(value, self._sink),
            GrammarFamily.TRANSFORM: lambda value, rules: check_transform(value, self._sink),
            GrammarFamily.GRADIENT: lambda value, rules: check_gradient(value, self._sink),
            GrammarFamily.BORDER: lambda value, rules: check_border(value, self._sink),
            GrammarFamily.RADIUS: lambda value, rules: check_radius(value, self._sink),
        }

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    @property
    def errors(self) -> list[Diagnostic]:
        """All diagnostics recorded since the last clear."""
        return list(self._sink.items)

    def has_errors(self) -> bool:
        return len(self._sink) > 0

    def clear_errors(self) -> None:
        self._sink.clear()

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def validate(self, raw: Any, family: GrammarFamily | str, rules: ValueRules | None = None) -> bool:
        """
        Validate a raw value.

        Args:
            raw: Text, number, mapping or list (resolved once into Text | Structured)
            family: Grammar family to validate against
            rules: Optional range/unit/choice constraints

        Returns:
            True when the value is acceptable; otherwise diagnostics are recorded
        """
        family = GrammarFamily(family)
        value = coerce_input(raw)
        rules = rules or NO_RULES
        mark = self._sink.mark()

        escaped = self._universal_escape(value, family)
        valid = escaped if escaped is not None else self._checks[family](value, rules)

        if not valid and not self._sink.since(mark):
            self._sink.add(ErrorKind.INVALID_VALUE_FORMAT, f"invalid_{family.value}", f"Invalid {family.value} value")
        if not valid:
            logger.debug("value_rejected", family=family.value, errors=len(self._sink) - mark)
        return valid

    def _universal_escape(self, value: RawValue, family: GrammarFamily) -> bool | None:
        """Empty values, references and global keywords; None means 'not escaped'."""
        if isinstance(value, Structured):
            return None
        text = value.value
        if not text:
            return True
        if is_universal_keyword(text):
            return True
        if text.startswith("var(") and (family not in _COMPOSITE_FAMILIES or is_css_variable(text)):
            return self._check_reference(text, family)
        return None

    def _check_reference(self, text: str, family: GrammarFamily) -> bool:
        if not is_balanced(text) or not text.endswith(")"):
            return self._sink.add(
                ErrorKind.MALFORMED_GRAMMAR, "invalid_css_variable", f"Unterminated custom property reference '{text}'"
            )
        if not is_css_variable(text):
            return self._sink.add(
                ErrorKind.INVALID_VALUE_FORMAT, "invalid_css_variable", f"Invalid custom property reference '{text}'"
            )
        if not is_valid_css_variable_of_type(text, family.value):
            return self._sink.add(
                ErrorKind.INVALID_VALUE_FORMAT,
                "invalid_css_variable_fallback",
                f"Fallback of '{text}' is not a valid {family.value}",
            )
        return True

    # ------------------------------------------------------------------
    # Family checks
    # ------------------------------------------------------------------

    def _style_text(self, value: RawValue) -> Text | None:
        if isinstance(value, Text):
            return value
        style = value.get("style")
        if isinstance(style, str):
            return Text(style.strip())
        return None

    def _check_range(self, number: float, rules: ValueRules) -> bool:
        if rules.non_negative and number < 0:
            return self._sink.add(ErrorKind.NEGATIVE_VALUE_NOT_ALLOWED, "negative_value", f"Value {number} cannot be negative")
        if rules.minimum is not None and number < rules.minimum:
            return self._sink.add(
                ErrorKind.OUT_OF_RANGE,
                "out_of_range",
                f"Value {number} is below minimum {rules.minimum}",
                minimum=rules.minimum,
                maximum=rules.maximum,
            )
        if rules.maximum is not None and number > rules.maximum:
            return self._sink.add(
                ErrorKind.OUT_OF_RANGE,
                "out_of_range",
                f"Value {number} is above maximum {rules.maximum}",
                minimum=rules.minimum,
                maximum=rules.maximum,
            )
        return True

    def _check_color(self, value: RawValue, rules: ValueRules) -> bool:
        text = self._style_text(value)
        if text is None:
            return self._sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_color", "Color must be text")
        if text.value.startswith("var("):
            return self._check_reference(text.value, GrammarFamily.COLOR)
        if not is_valid_color(text.value):
            return self._sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_color", f"Invalid color '{text.value}'")
        return True

    def check_dimension(self, value: RawValue, family: GrammarFamily, rules: ValueRules = NO_RULES) -> bool:
        """Length, angle or time: signed decimal plus optional unit from the family allow-list."""
        units = _DIMENSION_UNITS[family]
        code = f"invalid_{family.value}"

        if isinstance(value, Structured):
            number = value.get("number")
            if number is None:
                text = self._style_text(value)
                if text is None:
                    return self._sink.add(ErrorKind.INVALID_VALUE_FORMAT, code, f"Invalid {family.value} object")
                return self.validate(text.value, family, rules)
            unit = str(value.get("unit") or "")
            if isinstance(number, bool) or not isinstance(number, (int, float)):
                return self._sink.add(ErrorKind.INVALID_VALUE_FORMAT, code, f"{family.value} number must be numeric")
            if unit and unit not in units:
                return self._sink.add(ErrorKind.INVALID_VALUE_FORMAT, f"invalid_{family.value}_unit", f"Unknown unit '{unit}'")
            return self._check_range(float(number), rules)

        text = value.value
        if family is GrammarFamily.LENGTH and text.lower() == "auto":
            return True
        parsed = parse_dimension(text, units)
        if parsed is None:
            return self._sink.add(ErrorKind.INVALID_VALUE_FORMAT, code, f"Invalid {family.value} '{text}'")
        return self._check_range(parsed[0], rules)

    def _check_number(self, value: RawValue, rules: ValueRules) -> bool:
        text = self._style_text(value)
        if text is None or not is_number(text.value):
            shown = text.value if text else "object"
            return self._sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_number", f"Invalid number '{shown}'")
        return self._check_range(float(text.value), rules)

    def _check_enum(self, value: RawValue, rules: ValueRules) -> bool:
        if isinstance(value, Structured):
            return self._sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_enum_value", "Enumerated value must be text")
        if rules.choices and value.value not in rules.choices:
            return self._sink.add(
                ErrorKind.INVALID_VALUE_FORMAT,
                "invalid_enum_value",
                f"'{value.value}' is not one of {', '.join(rules.choices)}",
                choices=list(rules.choices),
            )
        return True

    def _check_text(self, value: RawValue, rules: ValueRules) -> bool:
        return True

    def _check_css_variable(self, value: RawValue, rules: ValueRules) -> bool:
        if isinstance(value, Structured):
            return self._sink.add(ErrorKind.INVALID_VALUE_FORMAT, "invalid_css_variable", "Reference must be text")
        return self._check_reference(value.value, GrammarFamily.CSS_VARIABLE)


def validate_value(
    raw: Any, family: GrammarFamily | str, rules: ValueRules | None = None
) -> tuple[bool, tuple[Diagnostic, ...]]:
    """Validate with a fresh validator and return (valid, diagnostics)."""
    validator = StyleValidator()
    valid = validator.validate(raw, family, rules)
    return valid, tuple(validator.errors)
