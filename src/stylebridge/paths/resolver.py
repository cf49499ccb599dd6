"""
Property Path Resolver
Simplified property names -> resolved path specs (segments, grammar, rules).
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping

from ..core.logging_config import get_logger
from ..grammar.types import GrammarFamily, ValueRules
from .elements import ELEMENT_PROPERTIES
from .schemas import get_schema
from .syntax import RepeaterSegment, Segment, format_path, parse_path
from .tables import GLOBAL_PROPERTIES, PropertyEntry

logger = get_logger(__name__)


@dataclass(frozen=True)
class PathSpec:
    """Everything needed to validate a value and place it in the property tree."""

    name: str
    path: tuple[Segment, ...]
    family: GrammarFamily
    responsive: bool = False
    default_unit: str | None = None
    minimum: float | None = None
    maximum: float | None = None
    choices: tuple[str, ...] = ()
    non_negative: bool = False
    wrap_function: str | None = None
    fixed_breakpoint: str | None = None
    composite: str | None = None
    implies: tuple[tuple[tuple[Segment, ...], Any], ...] = ()

    @property
    def path_text(self) -> str:
        return format_path(self.path)

    @property
    def ends_in_repeater(self) -> bool:
        return isinstance(self.path[-1], RepeaterSegment)

    def rules(self) -> ValueRules:
        return ValueRules(
            default_unit=self.default_unit,
            minimum=self.minimum,
            maximum=self.maximum,
            choices=self.choices,
            non_negative=self.non_negative,
        )


def _spec(name: str, entry: PropertyEntry) -> PathSpec:
    return PathSpec(
        name=name,
        path=parse_path(entry.path),
        family=entry.family,
        responsive=entry.responsive,
        default_unit=entry.default_unit,
        minimum=entry.minimum,
        maximum=entry.maximum,
        choices=entry.choices,
        non_negative=entry.non_negative,
        wrap_function=entry.wrap_function,
        fixed_breakpoint=entry.fixed_breakpoint,
        composite=entry.composite,
        implies=tuple((parse_path(path), value) for path, value in entry.implies),
    )


class PathResolver:
    """
    Resolve simplified property names.

    Element-specific tables are consulted before the global table. Every
    table path is parsed once, when the resolver is created; a malformed
    table path raises PathSyntaxError there.
    """

    def __init__(
        self,
        global_table: Mapping[str, PropertyEntry] = GLOBAL_PROPERTIES,
        element_tables: Mapping[str, Mapping[str, PropertyEntry]] = ELEMENT_PROPERTIES,
    ) -> None:
        self._global = {name: _spec(name, entry) for name, entry in global_table.items()}
        self._elements = {
            element_type: {name: _spec(name, entry) for name, entry in table.items()}
            for element_type, table in element_tables.items()
        }
        logger.debug(
            "resolver_ready",
            global_properties=len(self._global),
            element_tables=len(self._elements),
        )

    def resolve(self, name: str, element_type: str | None = None) -> PathSpec | None:
        """Resolved spec for ``name``, or None when no table knows it."""
        if element_type is not None:
            spec = self._elements.get(element_type, {}).get(name)
            if spec is not None:
                return spec
        return self._global.get(name)

    def hover_alias(self, name: str, element_type: str | None = None) -> PathSpec | None:
        """The ``<name>Hover`` spec, when one exists."""
        return self.resolve(f"{name}Hover", element_type)

    def known_properties(self, element_type: str | None = None) -> list[str]:
        names = set(self._global)
        if element_type is not None:
            names.update(self._elements.get(element_type, {}))
        return sorted(names)

    def get_property_metadata(self, name: str, element_type: str | None = None) -> dict[str, Any]:
        """
        Classification of a property for tooling and error messages.

        Returns:
            ``{name, path, responsive, type, ...}`` where ``type`` is
            ``unknown`` when the name does not resolve
        """
        spec = self.resolve(name, element_type)
        if spec is None:
            return {"name": name, "path": None, "responsive": False, "type": "unknown"}

        metadata: dict[str, Any] = {
            "name": name,
            "path": spec.path_text,
            "responsive": spec.responsive,
            "type": _metadata_type(spec),
        }
        if spec.default_unit:
            metadata["default_unit"] = spec.default_unit
        if spec.minimum is not None or spec.maximum is not None:
            metadata["range"] = {"min": spec.minimum, "max": spec.maximum}
        if spec.choices:
            metadata["values"] = list(spec.choices)
        if spec.wrap_function:
            metadata["function"] = spec.wrap_function
        if element_type is not None:
            schema = get_schema(element_type)
            prop = schema.properties.get(name) if schema else None
            if prop is not None:
                metadata["required"] = prop.required
                if prop.default is not None:
                    metadata["default"] = prop.default
        return metadata


_METADATA_TYPES = {
    GrammarFamily.LENGTH: "unit",
    GrammarFamily.ANGLE: "unit",
    GrammarFamily.TIME: "unit",
    GrammarFamily.NUMBER: "number",
    GrammarFamily.ENUM: "enum",
    GrammarFamily.COLOR: "color",
    GrammarFamily.BOX_SHADOW: "shadow",
    GrammarFamily.FILTER: "filter",
    GrammarFamily.TRANSFORM: "transform",
    GrammarFamily.GRADIENT: "gradient",
    GrammarFamily.BORDER: "border",
    GrammarFamily.RADIUS: "radius",
    GrammarFamily.TEXT: "text",
    GrammarFamily.CSS_VARIABLE: "css_variable",
}

_COMPOSITE_TYPES = {
    "border": "border",
    "border_side": "border_side",
    "overlay": "object",
    "layers": "repeater",
    "transitions": "repeater",
}


def _metadata_type(spec: PathSpec) -> str:
    if spec.composite:
        return _COMPOSITE_TYPES.get(spec.composite, "object")
    if spec.ends_in_repeater and spec.wrap_function is None:
        return "repeater"
    if spec.ends_in_repeater:
        return "repeater_item"
    return _METADATA_TYPES[spec.family]


@lru_cache
def default_resolver() -> PathResolver:
    """Shared resolver over the built-in tables."""
    return PathResolver()


def get_property_metadata(name: str, element_type: str | None = None) -> dict[str, Any]:
    return default_resolver().get_property_metadata(name, element_type)
