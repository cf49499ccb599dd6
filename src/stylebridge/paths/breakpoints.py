"""Breakpoints, interaction states and their storage keys."""

from enum import Enum
from types import MappingProxyType

from ..core.logging_config import get_logger

logger = get_logger(__name__)


class Breakpoint(str, Enum):
    """Viewport buckets, widest first."""

    BASE = "breakpoint_base"
    TABLET_LANDSCAPE = "breakpoint_tablet_landscape"
    TABLET_PORTRAIT = "breakpoint_tablet_portrait"
    PHONE_LANDSCAPE = "breakpoint_phone_landscape"
    PHONE_PORTRAIT = "breakpoint_phone_portrait"


class State(str, Enum):
    BASE = "base"
    HOVER = "hover"


BREAKPOINT_ALIASES = MappingProxyType({
    "base": Breakpoint.BASE,
    "desktop": Breakpoint.BASE,
    "default": Breakpoint.BASE,
    "all": Breakpoint.BASE,
    "tablet": Breakpoint.TABLET_PORTRAIT,
    "tablet_portrait": Breakpoint.TABLET_PORTRAIT,
    "tablet-portrait": Breakpoint.TABLET_PORTRAIT,
    "tablet_landscape": Breakpoint.TABLET_LANDSCAPE,
    "tablet-landscape": Breakpoint.TABLET_LANDSCAPE,
    "mobile": Breakpoint.PHONE_PORTRAIT,
    "phone": Breakpoint.PHONE_PORTRAIT,
    "phone_portrait": Breakpoint.PHONE_PORTRAIT,
    "phone-portrait": Breakpoint.PHONE_PORTRAIT,
    "mobile_portrait": Breakpoint.PHONE_PORTRAIT,
    "mobile-portrait": Breakpoint.PHONE_PORTRAIT,
    "phone_landscape": Breakpoint.PHONE_LANDSCAPE,
    "phone-landscape": Breakpoint.PHONE_LANDSCAPE,
    "mobile_landscape": Breakpoint.PHONE_LANDSCAPE,
    "mobile-landscape": Breakpoint.PHONE_LANDSCAPE,
})

_CANONICAL_IDS = frozenset(breakpoint.value for breakpoint in Breakpoint)


def breakpoint_id(
    name: str, default: Breakpoint | str = Breakpoint.BASE, strict: bool = False
) -> str | None:
    """
    Map a human breakpoint name to its canonical id.

    Canonical ids pass through. Unknown names fall back to ``default``
    unless ``strict`` is set, in which case None is returned.
    """
    key = str(name).strip().lower()
    if key in _CANONICAL_IDS:
        return key
    alias = BREAKPOINT_ALIASES.get(key)
    if alias is not None:
        return alias.value
    if strict:
        return None
    fallback = Breakpoint(default).value
    logger.debug("unknown_breakpoint", name=name, fallback=fallback)
    return fallback


def breakpoint_key(breakpoint: Breakpoint | str = Breakpoint.BASE, state: State | str = State.BASE) -> str:
    """``breakpoint_base``, ``breakpoint_phone_portrait_hover``, ..."""
    key = Breakpoint(breakpoint).value
    if State(state) is State.HOVER:
        return f"{key}_hover"
    return key
