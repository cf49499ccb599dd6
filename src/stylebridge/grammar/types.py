"""
Grammar Type Definitions
Input variants, grammar families and value rules shared by validator and codec.
"""

from dataclasses import dataclass
from enum import Enum
import math
from typing import Any, Mapping

from ..core.errors import Diagnostic, ErrorKind


class GrammarFamily(str, Enum):
    """Grammar a raw value is checked against."""

    COLOR = "color"
    LENGTH = "length"
    ANGLE = "angle"
    NUMBER = "number"
    TIME = "time"
    ENUM = "enum"
    TEXT = "text"
    CSS_VARIABLE = "css_variable"
    BOX_SHADOW = "box_shadow"
    FILTER = "filter"
    TRANSFORM = "transform"
    GRADIENT = "gradient"
    BORDER = "border"
    RADIUS = "radius"


@dataclass(frozen=True)
class Text:
    """Raw textual CSS-like value."""

    value: str


@dataclass(frozen=True)
class Structured:
    """Raw structured (object) value with named fields."""

    fields: Mapping[str, Any]

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)

    def first(self, *keys: str) -> Any:
        """Value of the first present key, or None."""
        for key in keys:
            if key in self.fields and self.fields[key] is not None:
                return self.fields[key]
        return None


RawValue = Text | Structured


@dataclass(frozen=True)
class ValueRules:
    """Extra constraints attached to a property (range, unit, choices)."""

    default_unit: str | None = None
    minimum: float | None = None
    maximum: float | None = None
    choices: tuple[str, ...] = ()
    non_negative: bool = False


NO_RULES = ValueRules()


def format_number(number: float) -> str:
    """Render a number the way it appears in CSS text (48.0 -> '48')."""
    if not math.isfinite(number):
        raise ValueError(f"Cannot format non-finite number {number!r}")
    if float(number).is_integer():
        return str(int(number))
    text = repr(float(number))
    if "e" in text or "E" in text:
        text = f"{number:.20f}".rstrip("0").rstrip(".")
    return text


def coerce_input(raw: Any) -> RawValue:
    """Resolve a loosely typed raw value into Text or Structured once."""
    if isinstance(raw, (Text, Structured)):
        return raw
    if raw is None:
        return Text("")
    if isinstance(raw, bool):
        return Text("true" if raw else "false")
    if isinstance(raw, (int, float)):
        if isinstance(raw, float) and not math.isfinite(raw):
            return Text(str(raw))
        return Text(format_number(raw))
    if isinstance(raw, str):
        return Text(raw.strip())
    if isinstance(raw, Mapping):
        return Structured(dict(raw))
    if isinstance(raw, (list, tuple)):
        return Structured({"items": list(raw)})
    return Text(str(raw))


class Diagnostics:
    """Accumulating diagnostic sink. Never raises."""

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def add(self, kind: ErrorKind, code: str, message: str, **context: Any) -> bool:
        """Record a diagnostic. Always returns False so checks can ``return sink.add(...)``."""
        self._items.append(Diagnostic(kind=kind, code=code, message=message, context=context))
        return False

    def extend(self, diagnostics: "list[Diagnostic] | tuple[Diagnostic, ...]") -> None:
        self._items.extend(diagnostics)

    @property
    def items(self) -> tuple[Diagnostic, ...]:
        return tuple(self._items)

    def mark(self) -> int:
        """Current position, for checking whether a nested check added anything."""
        return len(self._items)

    def since(self, mark: int) -> bool:
        return len(self._items) > mark

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)
