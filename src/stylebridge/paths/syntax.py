"""
Property Path Syntax
``design.effects.transform.transforms[type=rotate].rotate_x`` -> segments.
"""

from dataclasses import dataclass
import re
from typing import Union

from ..core.errors import PathSyntaxError

_NAME = r"[A-Za-z_][\w-]*"
_SEGMENT = re.compile(rf"^({_NAME})(?:\[(?:({_NAME})=([^\[\]=]+))?\])?$")


@dataclass(frozen=True)
class FieldSegment:
    """Plain object key."""

    name: str


@dataclass(frozen=True)
class RepeaterSegment:
    """
    List-valued key.

    With a discriminator ``(key, value)`` the first item whose ``key`` equals
    ``value`` is addressed (created when missing); without one the last item
    is addressed.
    """

    name: str
    discriminator: tuple[str, str] | None = None


Segment = Union[FieldSegment, RepeaterSegment]


def _split(text: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth < 0:
                raise PathSyntaxError(f"Unbalanced ']' in path '{text}'")
        if char == "." and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    if depth != 0:
        raise PathSyntaxError(f"Unterminated '[' in path '{text}'")
    parts.append("".join(current))
    return parts


def parse_path(text: str) -> tuple[Segment, ...]:
    """
    Parse a dotted property path.

    Raises:
        PathSyntaxError: empty segments, bad names or malformed brackets
    """
    if not text or not text.strip():
        raise PathSyntaxError("Property path is empty")
    segments: list[Segment] = []
    for part in _split(text.strip()):
        match = _SEGMENT.match(part)
        if match is None:
            raise PathSyntaxError(f"Invalid path segment '{part}' in '{text}'")
        name, key, value = match.groups()
        if "[" not in part:
            segments.append(FieldSegment(name))
        elif key is None:
            segments.append(RepeaterSegment(name))
        else:
            segments.append(RepeaterSegment(name, (key, value.strip())))
    return tuple(segments)


def format_path(segments: tuple[Segment, ...]) -> str:
    parts = []
    for segment in segments:
        if isinstance(segment, FieldSegment):
            parts.append(segment.name)
        elif segment.discriminator is None:
            parts.append(f"{segment.name}[]")
        else:
            key, value = segment.discriminator
            parts.append(f"{segment.name}[{key}={value}]")
    return ".".join(parts)
