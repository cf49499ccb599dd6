"""
Canonical Value Types
Immutable tagged union produced by the codec and consumed by serialization.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Union

from ..grammar.types import format_number


@dataclass(frozen=True)
class Scalar:
    """Keyword or free text (``auto``, ``inherit``, ``""``)."""

    text: str


@dataclass(frozen=True)
class Number:
    """Bare number."""

    value: float


@dataclass(frozen=True)
class Unit:
    """Number with a unit; ``text`` is the CSS rendering."""

    number: float
    unit: str
    text: str


@dataclass(frozen=True)
class Color:
    text: str


@dataclass(frozen=True)
class EnumValue:
    value: str


@dataclass(frozen=True)
class ObjectValue:
    """Composite value; ``kind`` selects its serialization."""

    fields: Mapping[str, "CanonicalValue"] = field(default_factory=dict)
    kind: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def get(self, key: str) -> "CanonicalValue | None":
        return self.fields.get(key)

    def __hash__(self) -> int:
        return hash((self.kind, tuple(sorted(self.fields))))


@dataclass(frozen=True)
class ListValue:
    items: tuple["CanonicalValue", ...] = ()


@dataclass(frozen=True)
class CssVariable:
    """``var(--name[, fallback])``."""

    name: str
    fallback: "CanonicalValue | None" = None


CanonicalValue = Union[Scalar, Number, Unit, Color, EnumValue, ObjectValue, ListValue, CssVariable]

# Composite object kinds
SHADOW = "shadow"
FILTER = "filter"
TRANSFORM = "transform"
GRADIENT = "gradient"
COLOR_STOP = "color_stop"
BORDER = "border"
RADIUS = "radius"
OVERLAY = "overlay"
LAYER = "layer"
TRANSITION = "transition"
GENERIC = ""

OBJECT_KINDS = frozenset({
    SHADOW, FILTER, TRANSFORM, GRADIENT, COLOR_STOP, BORDER, RADIUS, OVERLAY, LAYER, TRANSITION, GENERIC,
})


def make_unit(number: float, unit: str) -> Unit:
    return Unit(number=float(number), unit=unit, text=f"{format_number(number)}{unit}")


def make_object(kind: str, **fields: "CanonicalValue | None") -> ObjectValue:
    """Build an object, dropping fields whose value is None."""
    return ObjectValue(fields={key: value for key, value in fields.items() if value is not None}, kind=kind)


def is_empty(value: CanonicalValue) -> bool:
    """True for the 'no value' result of an empty input."""
    return isinstance(value, Scalar) and value.text == ""


def from_plain(raw: Any) -> CanonicalValue:
    """Lower arbitrary decoded JSON into generic canonical values."""
    if isinstance(raw, bool):
        return Scalar("true" if raw else "false")
    if isinstance(raw, (int, float)):
        return Number(float(raw))
    if isinstance(raw, Mapping):
        return ObjectValue(fields={str(key): from_plain(value) for key, value in raw.items()})
    if isinstance(raw, (list, tuple)):
        return ListValue(items=tuple(from_plain(item) for item in raw))
    if raw is None:
        return Scalar("")
    return Scalar(str(raw))
