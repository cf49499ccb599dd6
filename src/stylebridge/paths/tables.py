"""
Property Tables
Simplified property names -> builder property paths, with the grammar,
range and unit metadata each name carries. Built once at import.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from ..grammar.borders import BORDER_STYLES
from ..grammar.keywords import (
    BACKGROUND_ATTACHMENTS,
    BACKGROUND_REPEATS,
    BACKGROUND_SIZES,
    BACKGROUND_TYPES,
    BLEND_MODES,
    GRADIENT_SHAPES,
    GRADIENT_SIZES,
    GRADIENT_TYPES,
    LAYER_TYPES,
    ORIGIN_POSITIONS,
    TIMING_FUNCTIONS,
    TRANSFORM_STYLES,
    TRANSITION_PROPERTIES,
)
from ..grammar.types import GrammarFamily
from .breakpoints import Breakpoint


@dataclass(frozen=True)
class PropertyEntry:
    """Table row for one simplified property name."""

    path: str
    family: GrammarFamily = GrammarFamily.TEXT
    responsive: bool = False
    default_unit: str | None = None
    minimum: float | None = None
    maximum: float | None = None
    choices: tuple[str, ...] = ()
    non_negative: bool = False
    wrap_function: str | None = None
    fixed_breakpoint: str | None = None
    composite: str | None = None
    implies: tuple[tuple[str, Any], ...] = ()


# ============================================================================
# Paths
# ============================================================================

_TRANSFORMS = "design.effects.transform.transforms"

EFFECTS_PATHS = {
    "opacity": "design.effects.opacity",
    "boxShadow": "design.effects.box_shadow",
    "mixBlendMode": "design.effects.mix_blend_mode",
    # Transition repeater: one request fills one item
    "transition": "design.effects.transition",
    "transitionDuration": "design.effects.transition[].duration",
    "transitionTiming": "design.effects.transition[].timing_function",
    "transitionProperty": "design.effects.transition[].property",
    "transitionCustomProperty": "design.effects.transition[].custom_property",
    "transitionDelay": "design.effects.transition[].delay",
    "transformOrigin": "design.effects.transform.origin",
    "transformOriginPosition": "design.effects.transform.origin_position",
    "transformPerspective": "design.effects.transform.perspective",
    "transformPerspectiveOrigin": "design.effects.transform.perspective_origin",
    "transformStyle": "design.effects.transform.transform_style",
    "transformOriginX": "design.effects.transform.origin_position.x",
    "transformOriginY": "design.effects.transform.origin_position.y",
    "perspectiveOriginX": "design.effects.transform.perspective_origin.x",
    "perspectiveOriginY": "design.effects.transform.perspective_origin.y",
    "filter": "design.effects.filter",
}

TRANSFORM_PATHS = {
    "transform": _TRANSFORMS,
    "rotate": f"{_TRANSFORMS}[type=rotate].rotate_z",
    "rotateX": f"{_TRANSFORMS}[type=rotate].rotate_x",
    "rotateY": f"{_TRANSFORMS}[type=rotate].rotate_y",
    "rotateZ": f"{_TRANSFORMS}[type=rotate].rotate_z",
    "rotate3d": f"{_TRANSFORMS}[type=rotate3d]",
    "rotate3dX": f"{_TRANSFORMS}[type=rotate3d].x",
    "rotate3dY": f"{_TRANSFORMS}[type=rotate3d].y",
    "rotate3dZ": f"{_TRANSFORMS}[type=rotate3d].z",
    "rotate3dAngle": f"{_TRANSFORMS}[type=rotate3d].angle",
    "scale": f"{_TRANSFORMS}[type=scale].scale",
    "scale3d": f"{_TRANSFORMS}[type=scale3d]",
    "scaleX": f"{_TRANSFORMS}[type=scale3d].scale_x",
    "scaleY": f"{_TRANSFORMS}[type=scale3d].scale_y",
    "scaleZ": f"{_TRANSFORMS}[type=scale3d].scale_z",
    "skew": f"{_TRANSFORMS}[type=skew]",
    "skewX": f"{_TRANSFORMS}[type=skew].skew_x",
    "skewY": f"{_TRANSFORMS}[type=skew].skew_y",
    "translate": f"{_TRANSFORMS}[type=translate]",
    "translateX": f"{_TRANSFORMS}[type=translate].translate_x",
    "translateY": f"{_TRANSFORMS}[type=translate].translate_y",
    "translateZ": f"{_TRANSFORMS}[type=translate].translate_z",
    "perspective": f"{_TRANSFORMS}[type=perspective]",
    "perspectiveValue": f"{_TRANSFORMS}[type=perspective].perspective",
}

FILTER_PATHS = {
    "filterBlur": "design.effects.filter[type=blur]",
    "filterBlurAmount": "design.effects.filter[type=blur].blur_amount",
    "filterBrightness": "design.effects.filter[type=brightness]",
    "filterBrightnessAmount": "design.effects.filter[type=brightness].amount",
    "filterContrast": "design.effects.filter[type=contrast]",
    "filterContrastAmount": "design.effects.filter[type=contrast].amount",
    "filterGrayscale": "design.effects.filter[type=grayscale]",
    "filterGrayscaleAmount": "design.effects.filter[type=grayscale].amount",
    "filterHueRotate": "design.effects.filter[type=hue-rotate]",
    "filterHueRotateAmount": "design.effects.filter[type=hue-rotate].rotate",
    "filterInvert": "design.effects.filter[type=invert]",
    "filterInvertAmount": "design.effects.filter[type=invert].amount",
    "filterSaturate": "design.effects.filter[type=saturate]",
    "filterSaturateAmount": "design.effects.filter[type=saturate].amount",
    "filterSepia": "design.effects.filter[type=sepia]",
    "filterSepiaAmount": "design.effects.filter[type=sepia].amount",
}

BACKGROUND_PATHS = {
    "background": "design.background.color",
    "backgroundType": "design.background.type",
    "backgroundColor": "design.background.color",
    "backgroundImage": "design.background.image",
    "backgroundPosition": "design.background.position",
    "backgroundSize": "design.background.size",
    "backgroundRepeat": "design.background.repeat",
    "backgroundAttachment": "design.background.attachment",
    "gradient": "design.background.gradient",
    "gradientStyle": "design.background.gradient.style",
    "gradientValue": "design.background.gradient.value",
    "gradientType": "design.background.gradient.type",
    "gradientAngle": "design.background.gradient.angle",
    "gradientColors": "design.background.gradient.colors",
    "gradientStops": "design.background.gradient.stops",
    "gradientRadialPosition": "design.background.gradient.position",
    "gradientRadialShape": "design.background.gradient.shape",
    "gradientRadialSize": "design.background.gradient.size",
    "backgroundBlendMode": "design.background.blend_mode",
    "blendMode": "design.background.blend_mode",
    "overlayColor": "design.background.overlay.color",
    "overlayImage": "design.background.overlay.image",
    "overlayGradient": "design.background.overlay.gradient",
    "overlayOpacity": "design.background.overlay.opacity",
    "overlayBlendMode": "design.background.overlay.effects.blend_mode",
    "overlayFilter": "design.background.overlay.effects.filter",
}

# No hover counterparts
BACKGROUND_ONLY_PATHS = {
    "gradientAnimation": "design.background.gradient.animation",
    "gradientAnimationDuration": "design.background.gradient.animation_duration",
    "overlay": "design.background.overlay",
    "backgroundLayers": "design.background.layers",
    "backgroundLayerType": "design.background.layers[].type",
    "backgroundLayerImage": "design.background.layers[].image",
    "backgroundLayerGradient": "design.background.layers[].gradient",
    "backgroundLayerOverlayColor": "design.background.layers[].overlay_color",
    "backgroundLayerBlendMode": "design.background.layers[].blend_mode",
    "backgroundLayerSize": "design.background.layers[].size",
    "backgroundLayerPosition": "design.background.layers[].position",
    "backgroundLayerRepeat": "design.background.layers[].repeat",
    "backgroundLayerAttachment": "design.background.layers[].attachment",
    "backgroundTransitionDuration": "design.background.transition_duration",
}

_SIDES = ("All", "Top", "Right", "Bottom", "Left")

BORDER_PATHS = {
    "borderRadius": "design.borders.radius",
    "borderRadiusAll": "design.borders.radius.all",
    "radiusTopLeft": "design.borders.radius.topLeft",
    "radiusTopRight": "design.borders.radius.topRight",
    "radiusBottomLeft": "design.borders.radius.bottomLeft",
    "radiusBottomRight": "design.borders.radius.bottomRight",
    "border": "design.borders.border",
    **{f"border{side}": f"design.borders.border.{side.lower()}" for side in _SIDES},
    **{
        f"border{side}{part}": f"design.borders.border.{side.lower()}.{part.lower()}"
        for side in _SIDES
        for part in ("Width", "Style", "Color")
    },
}

CUSTOM_CSS_PATHS = {
    "customCss": "design.custom_css.css",
    "customCssTablet": "design.custom_css.css",
    "customCssPhone": "design.custom_css.css",
}


def _hover_paths(paths: Mapping[str, str], old: str, new: str) -> dict[str, str]:
    """``<name>Hover`` entries whose paths swap the first ``old`` for ``new``."""
    return {f"{name}Hover": path.replace(old, new, 1) for name, path in paths.items()}


def _leaf_hover_paths(paths: Mapping[str, str]) -> dict[str, str]:
    """Hover entries stored beside the base value (``opacity`` -> ``opacity_hover``)."""
    hovered = {}
    for name, path in paths.items():
        head, _, tail = path.rpartition(".")
        hovered[f"{name}Hover"] = f"{head}.{tail}_hover"
    return hovered


_EFFECTS_WITH_HOVER = (
    "opacity", "boxShadow", "mixBlendMode", "filter", "transformOrigin",
    "transformOriginPosition", "transformPerspective", "transformPerspectiveOrigin", "transformStyle",
)
_ORIGIN_AXES = ("transformOriginX", "transformOriginY", "perspectiveOriginX", "perspectiveOriginY")


def _origin_axis_hover() -> dict[str, str]:
    # origin_position.x -> origin_position_hover.x
    hovered = {}
    for name in _ORIGIN_AXES:
        head, _, axis = EFFECTS_PATHS[name].rpartition(".")
        hovered[f"{name}Hover"] = f"{head}_hover.{axis}"
    return hovered


_RADIUS_PATHS = {name: path for name, path in BORDER_PATHS.items() if "borders.radius" in path}
_SIDE_PATHS = {name: path for name, path in BORDER_PATHS.items() if "borders.border" in path}


PROPERTY_PATHS: Mapping[str, str] = MappingProxyType({
    **EFFECTS_PATHS,
    **_leaf_hover_paths({name: EFFECTS_PATHS[name] for name in _EFFECTS_WITH_HOVER}),
    **_origin_axis_hover(),
    **TRANSFORM_PATHS,
    **_hover_paths(TRANSFORM_PATHS, ".transforms", ".transforms_hover"),
    **FILTER_PATHS,
    **BACKGROUND_PATHS,
    **_hover_paths(BACKGROUND_PATHS, "design.background", "design.background_hover"),
    **BACKGROUND_ONLY_PATHS,
    **BORDER_PATHS,
    **_hover_paths(_RADIUS_PATHS, "borders.radius", "borders.radius_hover"),
    **_hover_paths(_SIDE_PATHS, "borders.border", "borders.border_hover"),
    **CUSTOM_CSS_PATHS,
})


# ============================================================================
# Metadata
# ============================================================================

def _and_hover(table: Mapping[str, Any]) -> dict[str, Any]:
    """Copy each row to its ``<name>Hover`` alias when that alias has a path."""
    rows = dict(table)
    for name, value in table.items():
        if f"{name}Hover" in PROPERTY_PATHS:
            rows[f"{name}Hover"] = value
    return rows


_RESPONSIVE_BASE = frozenset({
    "opacity", "boxShadow", "mixBlendMode",
    "transformOrigin", "transformOriginPosition", "transformOriginX", "transformOriginY",
    "transformPerspective", "transformPerspectiveOrigin", "transformStyle",
    "perspectiveOriginX", "perspectiveOriginY",
    *TRANSFORM_PATHS,
    *FILTER_PATHS, "filter",
    "transitionDuration", "transitionTiming", "transitionProperty", "transitionDelay",
    "background", "backgroundColor", "backgroundPosition", "backgroundSize", "gradient",
    "backgroundBlendMode", "blendMode", "overlayOpacity", "overlayBlendMode",
    "borderRadius", "borderRadiusAll", "radiusTopLeft", "radiusTopRight", "radiusBottomLeft", "radiusBottomRight",
    "border", *(f"border{side}" for side in _SIDES),
    "customCss",
})

RESPONSIVE_PROPERTIES = frozenset(_and_hover({name: True for name in _RESPONSIVE_BASE}))

UNIT_PROPERTIES: Mapping[str, str] = MappingProxyType(_and_hover({
    "transitionDuration": "ms",
    "transitionDelay": "ms",
    "transformPerspective": "px",
    "rotate": "deg",
    "rotateX": "deg",
    "rotateY": "deg",
    "rotateZ": "deg",
    "rotate3dAngle": "deg",
    "skewX": "deg",
    "skewY": "deg",
    "translateX": "px",
    "translateY": "px",
    "translateZ": "px",
    "perspectiveValue": "px",
    "filterBlurAmount": "px",
    "filterBrightnessAmount": "%",
    "filterContrastAmount": "%",
    "filterGrayscaleAmount": "%",
    "filterHueRotateAmount": "deg",
    "filterInvertAmount": "%",
    "filterSaturateAmount": "%",
    "filterSepiaAmount": "%",
    "gradientAngle": "deg",
    "backgroundTransitionDuration": "ms",
    "gradientAnimationDuration": "s",
    "borderRadiusAll": "px",
    "radiusTopLeft": "px",
    "radiusTopRight": "px",
    "radiusBottomLeft": "px",
    "radiusBottomRight": "px",
    **{f"border{side}Width": "px" for side in _SIDES},
}))

# Units that must not be negative
NON_NEGATIVE_PROPERTIES = frozenset(_and_hover({
    name: True
    for name in (
        "transitionDuration", "transformPerspective", "perspectiveValue", "backgroundTransitionDuration",
        "gradientAnimationDuration", "borderRadiusAll", "radiusTopLeft", "radiusTopRight",
        "radiusBottomLeft", "radiusBottomRight",
        *(name for name in FILTER_PATHS if name.endswith("Amount") and name != "filterHueRotateAmount"),
        *(f"border{side}Width" for side in _SIDES),
    )
}))

NUMERIC_RANGES: Mapping[str, tuple[float, float]] = MappingProxyType(_and_hover({
    "opacity": (0, 1),
    "scale": (0, 4),
    "scaleX": (0, 4),
    "scaleY": (0, 4),
    "scaleZ": (0, 4),
    "rotate3dX": (0, 1),
    "rotate3dY": (0, 1),
    "rotate3dZ": (0, 1),
    "transformOriginX": (0, 100),
    "transformOriginY": (0, 100),
    "perspectiveOriginX": (0, 100),
    "perspectiveOriginY": (0, 100),
    "overlayOpacity": (0, 1),
}))

ENUM_PROPERTIES: Mapping[str, tuple[str, ...]] = MappingProxyType(_and_hover({
    "mixBlendMode": BLEND_MODES,
    "transitionTiming": TIMING_FUNCTIONS,
    "transitionProperty": TRANSITION_PROPERTIES,
    "transformOrigin": ORIGIN_POSITIONS,
    "transformStyle": TRANSFORM_STYLES,
    "backgroundBlendMode": BLEND_MODES,
    "blendMode": BLEND_MODES,
    "overlayBlendMode": BLEND_MODES,
    "gradientType": GRADIENT_TYPES,
    "gradientRadialShape": GRADIENT_SHAPES,
    "gradientRadialSize": GRADIENT_SIZES,
    "gradientRadialPosition": ORIGIN_POSITIONS,
    "backgroundType": BACKGROUND_TYPES,
    "backgroundLayerType": LAYER_TYPES,
    "backgroundSize": BACKGROUND_SIZES,
    "backgroundLayerSize": BACKGROUND_SIZES,
    "backgroundPosition": ORIGIN_POSITIONS,
    "backgroundLayerPosition": ORIGIN_POSITIONS,
    "backgroundRepeat": BACKGROUND_REPEATS,
    "backgroundLayerRepeat": BACKGROUND_REPEATS,
    "backgroundAttachment": BACKGROUND_ATTACHMENTS,
    "backgroundLayerAttachment": BACKGROUND_ATTACHMENTS,
    "backgroundLayerBlendMode": BLEND_MODES,
    **{f"border{side}Style": BORDER_STYLES for side in _SIDES},
}))

# Grammar families not implied by unit, range or enum metadata
FAMILY_PROPERTIES: Mapping[str, GrammarFamily] = MappingProxyType(_and_hover({
    "boxShadow": GrammarFamily.BOX_SHADOW,
    "filter": GrammarFamily.FILTER,
    "overlayFilter": GrammarFamily.FILTER,
    "transform": GrammarFamily.TRANSFORM,
    **{name: GrammarFamily.FILTER for name in FILTER_PATHS if not name.endswith("Amount")},
    "rotate3d": GrammarFamily.TRANSFORM,
    "scale3d": GrammarFamily.TRANSFORM,
    "skew": GrammarFamily.TRANSFORM,
    "translate": GrammarFamily.TRANSFORM,
    "perspective": GrammarFamily.TRANSFORM,
    "background": GrammarFamily.COLOR,
    "backgroundColor": GrammarFamily.COLOR,
    "overlayColor": GrammarFamily.COLOR,
    "backgroundLayerOverlayColor": GrammarFamily.COLOR,
    "gradient": GrammarFamily.GRADIENT,
    "gradientStyle": GrammarFamily.GRADIENT,
    "gradientValue": GrammarFamily.GRADIENT,
    "overlayGradient": GrammarFamily.GRADIENT,
    "backgroundLayerGradient": GrammarFamily.GRADIENT,
    "borderRadius": GrammarFamily.RADIUS,
    **{f"border{side}Color": GrammarFamily.COLOR for side in _SIDES},
}))

# Shorthand repeater entries: the raw value is the argument list of this function
WRAP_FUNCTIONS: Mapping[str, str] = MappingProxyType(_and_hover({
    "filterBlur": "blur",
    "filterBrightness": "brightness",
    "filterContrast": "contrast",
    "filterGrayscale": "grayscale",
    "filterHueRotate": "hue-rotate",
    "filterInvert": "invert",
    "filterSaturate": "saturate",
    "filterSepia": "sepia",
    "rotate3d": "rotate3d",
    "scale3d": "scale3d",
    "skew": "skew",
    "translate": "translate",
    "perspective": "perspective",
}))

# Names whose values are assembled by a family builder
COMPOSITE_PROPERTIES: Mapping[str, str] = MappingProxyType(_and_hover({
    "border": "border",
    **{f"border{side}": "border_side" for side in _SIDES},
    "overlay": "overlay",
    "backgroundLayers": "layers",
    "transition": "transitions",
}))

FIXED_BREAKPOINTS: Mapping[str, str] = MappingProxyType({
    "customCssTablet": Breakpoint.TABLET_PORTRAIT.value,
    "customCssPhone": Breakpoint.PHONE_PORTRAIT.value,
})

FILTER_TYPE_FIELDS: Mapping[str, str] = MappingProxyType({
    "blur": "blur_amount",
    "brightness": "amount",
    "contrast": "amount",
    "grayscale": "amount",
    "hue-rotate": "rotate",
    "invert": "amount",
    "saturate": "amount",
    "sepia": "amount",
})

TRANSFORM_TYPE_FIELDS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "perspective": ("perspective",),
    "rotate": ("rotate_x", "rotate_y", "rotate_z"),
    "rotate3d": ("x", "y", "z", "angle"),
    "scale": ("scale",),
    "scale3d": ("scale_x", "scale_y", "scale_z"),
    "skew": ("skew_x", "skew_y"),
    "translate": ("translate_x", "translate_y", "translate_z"),
})


# ============================================================================
# Entries
# ============================================================================

_UNIT_FAMILIES = {"ms": GrammarFamily.TIME, "s": GrammarFamily.TIME, "deg": GrammarFamily.ANGLE}


def property_family(name: str) -> GrammarFamily:
    """Grammar family of a global property name (TEXT when nothing narrower applies)."""
    if name in FAMILY_PROPERTIES:
        return FAMILY_PROPERTIES[name]
    if name in UNIT_PROPERTIES:
        return _UNIT_FAMILIES.get(UNIT_PROPERTIES[name], GrammarFamily.LENGTH)
    if name in NUMERIC_RANGES:
        return GrammarFamily.NUMBER
    if name in ENUM_PROPERTIES:
        return GrammarFamily.ENUM
    return GrammarFamily.TEXT


def _entry(name: str, path: str) -> PropertyEntry:
    minimum, maximum = NUMERIC_RANGES.get(name, (None, None))
    return PropertyEntry(
        path=path,
        family=property_family(name),
        responsive=name in RESPONSIVE_PROPERTIES or name in FIXED_BREAKPOINTS,
        default_unit=UNIT_PROPERTIES.get(name),
        minimum=minimum,
        maximum=maximum,
        choices=ENUM_PROPERTIES.get(name, ()),
        non_negative=name in NON_NEGATIVE_PROPERTIES,
        wrap_function=WRAP_FUNCTIONS.get(name),
        fixed_breakpoint=FIXED_BREAKPOINTS.get(name),
        composite=COMPOSITE_PROPERTIES.get(name),
    )


GLOBAL_PROPERTIES: Mapping[str, PropertyEntry] = MappingProxyType({
    name: _entry(name, path) for name, path in PROPERTY_PATHS.items()
})
