"""Enumerated keyword vocabularies shared by builders and property tables."""

BLEND_MODES = (
    "normal", "multiply", "screen", "overlay", "darken", "lighten",
    "color-dodge", "color-burn", "hard-light", "soft-light", "difference",
    "exclusion", "hue", "saturation", "color", "luminosity",
)

TIMING_FUNCTIONS = ("ease-in-out", "ease-in", "ease-out", "ease", "linear")
TRANSITION_PROPERTIES = ("all", "custom")

ORIGIN_POSITIONS = (
    "top left", "top center", "top right",
    "center left", "center", "center right",
    "bottom left", "bottom center", "bottom right",
    "custom",
)
TRANSFORM_STYLES = ("flat", "preserve-3d")

GRADIENT_TYPES = ("linear", "radial", "conic")
GRADIENT_SHAPES = ("ellipse", "circle")
GRADIENT_SIZES = ("closest-side", "closest-corner", "farthest-side", "farthest-corner")

BACKGROUND_TYPES = ("color", "image", "gradient", "none")
LAYER_TYPES = ("image", "gradient", "overlay_color", "none")
BACKGROUND_SIZES = ("auto", "cover", "contain", "custom")
BACKGROUND_REPEATS = ("repeat", "repeat-x", "repeat-y", "no-repeat", "space", "round")
BACKGROUND_ATTACHMENTS = ("scroll", "fixed", "local")

TEXT_ALIGNS = ("left", "center", "right")
TEXT_TRANSFORMS = ("none", "uppercase", "lowercase", "capitalize")
HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
FONT_WEIGHTS = ("100", "200", "300", "400", "500", "600", "700", "800", "900")
TEXT_FONT_WEIGHTS = ("400", "500", "600", "700")

DISPLAYS = ("flex", "grid", "block")
FLEX_DIRECTIONS = ("row", "column")
ALIGN_ITEMS = ("flex-start", "center", "flex-end", "stretch")
JUSTIFY_CONTENT = ("flex-start", "center", "flex-end", "space-between", "space-around")
