"""Value grammars: tokenization, family checks and the accumulating validator."""

from .types import GrammarFamily, Text, Structured, ValueRules, NO_RULES, coerce_input, format_number
from .tokens import split_top_level, split_function_calls, split_words, is_balanced
from .primitives import (
    contains_css_variable,
    extract_css_variable_names,
    extract_css_variable_fallback,
    is_valid_css_variable_of_type,
    is_valid_color,
)
from .validator import StyleValidator, validate_value

__all__ = [
    # Types
    "GrammarFamily",
    "Text",
    "Structured",
    "ValueRules",
    "NO_RULES",
    "coerce_input",
    "format_number",
    # Tokenization
    "split_top_level",
    "split_function_calls",
    "split_words",
    "is_balanced",
    # References
    "contains_css_variable",
    "extract_css_variable_names",
    "extract_css_variable_fallback",
    "is_valid_css_variable_of_type",
    "is_valid_color",
    # Validation
    "StyleValidator",
    "validate_value",
]
