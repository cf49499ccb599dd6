"""
Request JSON Codec
Decodes element requests from loose text and encodes document trees.
"""

import json
import re
from typing import Any

import msgspec
import orjson
from json_repair import repair_json


class JSONParseError(Exception):
    """Request text could not be turned into a JSON object or array."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


_DECODER = msgspec.json.Decoder()
_FENCED = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)
_CLOSERS = {"{": "}", "[": "]"}
_ORJSON_OPTIONS = {0: 0, 2: orjson.OPT_INDENT_2}


def _payload(text: str) -> str | None:
    """Slice the outermost object or array out of ``text`` (fenced or inline)."""
    fenced = _FENCED.search(text)
    if fenced:
        text = fenced.group(1)

    starts = [pos for pos in (text.find("{"), text.find("[")) if pos != -1]
    if not starts:
        return None
    start = min(starts)
    end = text.rfind(_CLOSERS[text[start]])
    if end < start:
        return None
    return text[start : end + 1]


def _container(value: Any) -> dict[str, Any] | list[Any]:
    if not isinstance(value, (dict, list)):
        raise JSONParseError(f"Expected an element object or a list of elements, got {type(value).__name__}")
    return value


def extract_json(text: str, repair: bool = True) -> dict[str, Any] | list[Any]:
    """
    Decode an element request (or list of requests) embedded in text.

    Markdown fences and surrounding prose are ignored. When strict decoding
    fails and ``repair`` is set, json_repair gets one attempt at fixing
    trailing commas, unquoted keys and similar slips.

    Raises:
        JSONParseError: If no object or array can be recovered
    """
    payload = _payload(text.strip())
    if payload is None:
        raise JSONParseError("No JSON object found in text")

    try:
        return _container(_DECODER.decode(payload.encode("utf-8")))
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e) from e
        strict_error = e

    repaired = repair_json(payload, return_objects=True)
    if repaired in ("", None):
        raise JSONParseError(f"JSON repair failed: {strict_error}", strict_error)
    return _container(repaired)


def safe_json_dumps(obj: Any, indent: int = 0) -> str:
    """Encode a tree (or diagnostic payload) as JSON text."""
    option = _ORJSON_OPTIONS.get(indent)
    if option is not None:
        try:
            return orjson.dumps(obj, option=option).decode("utf-8")
        except orjson.JSONEncodeError:
            # Integers wider than 64 bits; stdlib encodes them or raises TypeError
            pass
    separators = (",", ":") if not indent else None
    return json.dumps(obj, indent=indent or None, separators=separators, ensure_ascii=False)


def validate_json_size(data: str, max_size: int, name: str = "JSON") -> None:
    """
    Reject request text larger than ``max_size`` UTF-8 bytes.

    Raises:
        JSONParseError: If size exceeds limit
    """
    size = len(data.encode("utf-8"))
    if size > max_size:
        raise JSONParseError(f"{name} size {size} bytes exceeds maximum {max_size} bytes")


def validate_json_depth(obj: Any, max_depth: int = 40, current_depth: int = 0) -> None:
    """
    Bound the nesting of decoded requests so tree compilation stays shallow.

    Raises:
        JSONParseError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise JSONParseError(f"JSON nesting depth {current_depth} exceeds maximum {max_depth}")

    children = obj.values() if isinstance(obj, dict) else obj if isinstance(obj, list) else ()
    for child in children:
        validate_json_depth(child, max_depth, current_depth + 1)
