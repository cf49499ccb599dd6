"""Element-specific property tables (typography, buttons, images, code blocks)."""

from types import MappingProxyType
from typing import Mapping

from ..grammar.keywords import FONT_WEIGHTS, HEADING_TAGS, TEXT_ALIGNS, TEXT_FONT_WEIGHTS, TEXT_TRANSFORMS
from ..grammar.types import GrammarFamily
from .tables import PropertyEntry

_CUSTOM_TYPOGRAPHY = "design.typography.typography.custom.customTypography"
_BUTTON_TYPOGRAPHY = "design.button.styles.text.typography.custom.customTypography"


def _text(path: str) -> PropertyEntry:
    return PropertyEntry(path=path)


def _length(path: str, responsive: bool = False, non_negative: bool = False) -> PropertyEntry:
    return PropertyEntry(
        path=path, family=GrammarFamily.LENGTH, responsive=responsive, default_unit="px", non_negative=non_negative
    )


def _choice(path: str, choices: tuple[str, ...], responsive: bool = False) -> PropertyEntry:
    return PropertyEntry(path=path, family=GrammarFamily.ENUM, responsive=responsive, choices=choices)


def _color(path: str, responsive: bool = False) -> PropertyEntry:
    return PropertyEntry(path=path, family=GrammarFamily.COLOR, responsive=responsive)


def _typography(font_weights: tuple[str, ...]) -> dict[str, PropertyEntry]:
    return {
        "text": _text("content.content.text"),
        "color": _color("design.typography.color", responsive=True),
        "fontSize": _length(f"{_CUSTOM_TYPOGRAPHY}.fontSize", responsive=True, non_negative=True),
        "fontWeight": _choice(f"{_CUSTOM_TYPOGRAPHY}.fontWeight", font_weights),
        "lineHeight": _length(f"{_CUSTOM_TYPOGRAPHY}.lineHeight", responsive=True, non_negative=True),
        "letterSpacing": _length(f"{_CUSTOM_TYPOGRAPHY}.letterSpacing"),
        "textAlign": _choice(f"{_CUSTOM_TYPOGRAPHY}.textAlign", TEXT_ALIGNS, responsive=True),
    }


HEADING_PROPERTIES = {
    **_typography(FONT_WEIGHTS),
    "tag": _choice("content.content.tags", HEADING_TAGS),
    "textTransform": _choice(f"{_CUSTOM_TYPOGRAPHY}.textTransform", TEXT_TRANSFORMS),
}

TEXT_PROPERTIES = _typography(TEXT_FONT_WEIGHTS)

_LINK = PropertyEntry(path="content.content.link.url", implies=(("content.content.link.type", "url"),))

BUTTON_PROPERTIES = {
    "text": _text("content.content.text"),
    "link": _LINK,
    "url": _LINK,
    "background": _color("design.button.styles.background"),
    "color": _color("design.button.styles.text.color", responsive=True),
    "fontSize": _length(f"{_BUTTON_TYPOGRAPHY}.fontSize", responsive=True, non_negative=True),
    "fontWeight": _choice(f"{_BUTTON_TYPOGRAPHY}.fontWeight", FONT_WEIGHTS),
    "borderRadius": _length("design.button.styles.corners.radius.all", responsive=True, non_negative=True),
}

_IMAGE_URL = PropertyEntry(path="content.image.url", implies=(("content.image.from", "url"),))

IMAGE_PROPERTIES = {
    "src": _IMAGE_URL,
    "url": _IMAGE_URL,
    "imageUrl": _IMAGE_URL,
    "alt": _text("content.image.alt"),
    "imageAlt": _text("content.image.alt"),
    "width": _length("design.image.width", responsive=True, non_negative=True),
    "height": _length("design.image.height", responsive=True, non_negative=True),
    "maxWidth": _length("design.image.max_width", responsive=True, non_negative=True),
    "borderRadius": _length("design.image.corners.radius.all", responsive=True, non_negative=True),
}

SPACER_PROPERTIES = {
    "height": _length("design.spacer.height", responsive=True, non_negative=True),
}

SECTION_PROPERTIES = {
    "maxWidth": PropertyEntry(
        path="design.size.container_width",
        family=GrammarFamily.LENGTH,
        default_unit="px",
        non_negative=True,
        implies=(("design.size.width", "custom"),),
    ),
    "minHeight": PropertyEntry(
        path="design.size.min_height",
        family=GrammarFamily.LENGTH,
        default_unit="px",
        non_negative=True,
        implies=(("design.size.height", "custom"),),
    ),
}

DIV_PROPERTIES = {
    "width": _length("design.container.width", non_negative=True),
    "maxWidth": _length("design.container.width", non_negative=True),
    "minHeight": _length("design.container.min_height", non_negative=True),
}

_LABEL = _text("content.content.builder_label")

ELEMENT_PROPERTIES: Mapping[str, Mapping[str, PropertyEntry]] = MappingProxyType({
    name: MappingProxyType(table)
    for name, table in {
        "Heading": HEADING_PROPERTIES,
        "Text": TEXT_PROPERTIES,
        "RichText": TEXT_PROPERTIES,
        "Button": BUTTON_PROPERTIES,
        "Image": IMAGE_PROPERTIES,
        "Spacer": SPACER_PROPERTIES,
        "Section": SECTION_PROPERTIES,
        "Div": DIV_PROPERTIES,
        "Container": DIV_PROPERTIES,
        "Columns": DIV_PROPERTIES,
        "Column": DIV_PROPERTIES,
        "HtmlCode": {"html": _text("content.content.html_code"), "label": _LABEL},
        "CssCode": {"css": _text("content.content.css_code"), "label": _LABEL},
        "PhpCode": {"php": _text("content.content.php_code"), "label": _LABEL},
    }.items()
})

# Destination of the padding/margin shorthands: side -> path prefix
SPACING_PATHS: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "Section": MappingProxyType({
        "padding": "design.spacing.padding",
        "margin": "design.spacing",
    }),
    "Div": MappingProxyType({
        "padding": "design.container.padding.padding",
        "margin": "design.spacing",
    }),
    "Button": MappingProxyType({
        "padding": "design.button.styles.size.padding",
    }),
})

# Element types laid out with layout_v2
LAYOUT_TYPES = frozenset({"Section", "Div", "Container", "Columns", "Column"})
