"""
Element Schemas
Required properties, types and choices per simplified element type, plus the
simplified -> canonical element type map.
"""

from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

from ..core.errors import Diagnostic, ErrorKind
from ..core.logging_config import get_logger
from ..grammar.keywords import (
    ALIGN_ITEMS,
    DISPLAYS,
    FLEX_DIRECTIONS,
    FONT_WEIGHTS,
    HEADING_TAGS,
    JUSTIFY_CONTENT,
    TEXT_ALIGNS,
    TEXT_FONT_WEIGHTS,
)

logger = get_logger(__name__)

ELEMENT_TYPE_MAP: Mapping[str, str] = MappingProxyType({
    "Section": "EssentialElements\\Section",
    "Div": "EssentialElements\\Div",
    "Heading": "EssentialElements\\Heading",
    "Text": "EssentialElements\\Text",
    "RichText": "EssentialElements\\RichText",
    "Button": "EssentialElements\\ButtonV2",
    "Image": "EssentialElements\\Image2",
    "Icon": "EssentialElements\\Icon",
    "Columns": "EssentialElements\\Columns",
    "Column": "EssentialElements\\Column",
    "Container": "EssentialElements\\Container",
    "Spacer": "EssentialElements\\Spacer",
    "Divider": "EssentialElements\\Divider",
    "Video": "EssentialElements\\Video",
    "HtmlCode": "OxygenElements\\HtmlCode",
    "CssCode": "OxygenElements\\CssCode",
    "PhpCode": "OxygenElements\\PhpCode",
})

CONTAINER_TYPES = frozenset({"Section", "Div", "Container", "Columns", "Column"})


class PropertySchema(BaseModel):
    """One property an element understands."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="color, unit, enum, string or spacing")
    required: bool = Field(default=False)
    choices: tuple[str, ...] = Field(default=())
    default: Any = Field(default=None)
    aliases: tuple[str, ...] = Field(default=())
    responsive: bool = Field(default=False)
    description: str = Field(default="")


class ElementSchema(BaseModel):
    """Properties, aliases and container flag of one element type."""

    model_config = ConfigDict(frozen=True)

    name: str
    container: bool = Field(default=False)
    properties: dict[str, PropertySchema] = Field(default_factory=dict)

    @property
    def canonical_type(self) -> str:
        return ELEMENT_TYPE_MAP.get(self.name, ELEMENT_TYPE_MAP["Div"])

    def required(self) -> list[str]:
        return [name for name, prop in self.properties.items() if prop.required]

    def lookup(self, definition: Mapping[str, Any], name: str) -> Any:
        """Value of ``name`` or of its first present alias."""
        prop = self.properties.get(name)
        for key in (name, *(prop.aliases if prop else ())):
            if definition.get(key) is not None:
                return definition[key]
        return None


def _layout_properties() -> dict[str, PropertySchema]:
    return {
        "background": PropertySchema(type="color", description="Background color"),
        "padding": PropertySchema(type="spacing", description="Padding (shorthand)"),
        "display": PropertySchema(type="enum", choices=DISPLAYS),
        "flexDirection": PropertySchema(type="enum", choices=FLEX_DIRECTIONS),
        "alignItems": PropertySchema(type="enum", choices=ALIGN_ITEMS),
        "justifyContent": PropertySchema(type="enum", choices=JUSTIFY_CONTENT),
        "gap": PropertySchema(type="unit", description="Gap between children"),
        "textAlign": PropertySchema(type="enum", choices=TEXT_ALIGNS),
    }


def _typography_properties(font_weights: tuple[str, ...]) -> dict[str, PropertySchema]:
    return {
        "text": PropertySchema(type="string", required=True, description="Text content"),
        "color": PropertySchema(type="color", description="Text color"),
        "fontSize": PropertySchema(type="unit", responsive=True, description="Font size"),
        "fontWeight": PropertySchema(type="enum", choices=font_weights),
        "lineHeight": PropertySchema(type="unit", description="Line height"),
        "textAlign": PropertySchema(type="enum", choices=TEXT_ALIGNS, responsive=True),
    }


def _code_properties(field: str, label: str) -> dict[str, PropertySchema]:
    return {
        field: PropertySchema(type="string", required=True, description=f"{label} code"),
        "label": PropertySchema(type="string", description="Builder label"),
    }


ELEMENT_SCHEMAS: Mapping[str, ElementSchema] = MappingProxyType({
    "Section": ElementSchema(name="Section", container=True, properties=_layout_properties()),
    "Div": ElementSchema(
        name="Div",
        container=True,
        properties={
            **_layout_properties(),
            "gridColumns": PropertySchema(type="string", description="Grid template columns"),
            "borderRadius": PropertySchema(type="unit", description="Border radius"),
        },
    ),
    "Heading": ElementSchema(
        name="Heading",
        properties={
            **_typography_properties(FONT_WEIGHTS),
            "tag": PropertySchema(type="enum", choices=HEADING_TAGS, default="h2"),
        },
    ),
    "Text": ElementSchema(name="Text", properties=_typography_properties(TEXT_FONT_WEIGHTS)),
    "Button": ElementSchema(
        name="Button",
        properties={
            "text": PropertySchema(type="string", required=True, description="Button text"),
            "url": PropertySchema(type="string", aliases=("link",), description="Link URL"),
            "background": PropertySchema(type="color"),
            "color": PropertySchema(type="color"),
            "fontSize": PropertySchema(type="unit"),
            "padding": PropertySchema(type="spacing"),
            "borderRadius": PropertySchema(type="unit"),
        },
    ),
    "Image": ElementSchema(
        name="Image",
        properties={
            "src": PropertySchema(type="string", required=True, aliases=("url", "imageUrl"), description="Image URL"),
            "alt": PropertySchema(type="string", aliases=("imageAlt",), description="Alt text"),
            "width": PropertySchema(type="unit"),
            "maxWidth": PropertySchema(type="unit"),
            "borderRadius": PropertySchema(type="unit"),
        },
    ),
    "HtmlCode": ElementSchema(name="HtmlCode", properties=_code_properties("html", "HTML")),
    "CssCode": ElementSchema(name="CssCode", properties=_code_properties("css", "CSS")),
    "PhpCode": ElementSchema(name="PhpCode", properties=_code_properties("php", "PHP")),
    **{
        name: ElementSchema(name=name, container=name in CONTAINER_TYPES)
        for name in ("Container", "Columns", "Column", "Spacer", "Divider", "Video", "Icon")
    },
})


def canonical_type(element_type: str) -> str:
    """
    Canonical builder type for a simplified element type.

    Types already containing a namespace separator pass through; unknown
    simplified types compile as Div.
    """
    if "\\" in element_type:
        return element_type
    canonical = ELEMENT_TYPE_MAP.get(element_type)
    if canonical is None:
        logger.info("unknown_element_type", element_type=element_type, fallback="Div")
        return ELEMENT_TYPE_MAP["Div"]
    return canonical


def get_schema(element_type: str) -> ElementSchema | None:
    return ELEMENT_SCHEMAS.get(element_type)


def validate_definition(definition: Mapping[str, Any]) -> list[Diagnostic]:
    """
    Pre-flight check of a simplified element definition.

    Reports required properties that are missing and enumerated values
    outside their choices. Value grammar is checked later, per property.
    """
    element_type = str(definition.get("type") or "")
    schema = ELEMENT_SCHEMAS.get(element_type)
    if schema is None:
        return []

    diagnostics: list[Diagnostic] = []
    for name, prop in schema.properties.items():
        value = schema.lookup(definition, name)
        if value is None or value == "":
            if prop.required:
                diagnostics.append(
                    Diagnostic(
                        ErrorKind.MISSING_REQUIRED_PROPERTY,
                        "missing_required_property",
                        f"{element_type} requires '{name}'",
                        {"property": name, "element_type": element_type},
                    )
                )
            continue
        if prop.type == "enum" and prop.choices and str(value) not in prop.choices:
            diagnostics.append(
                Diagnostic(
                    ErrorKind.INVALID_VALUE_FORMAT,
                    "invalid_enum_value",
                    f"'{value}' is not one of {', '.join(prop.choices)}",
                    {"property": name, "element_type": element_type, "choices": list(prop.choices)},
                )
            )
    return diagnostics
