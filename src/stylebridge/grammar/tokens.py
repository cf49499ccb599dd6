"""Paren-depth-aware tokenization helpers.

Functional CSS values nest commas and spaces inside sub-calls
(``rgba(0, 0, 0, .1)``), so every split here only happens at depth zero.
"""

import re

_IDENT = re.compile(r"[A-Za-z][A-Za-z0-9-]*")


def is_balanced(text: str) -> bool:
    """True when parentheses never close below depth zero and end at zero."""
    depth = 0
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """
    Split text at separator characters that sit outside any parentheses.

    Args:
        text: Value to split
        separator: Single separator character

    Returns:
        Stripped parts, empty parts included so callers can reject them
    """
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        if char == separator and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    parts.append("".join(current).strip())
    return parts


def split_words(text: str) -> list[str]:
    """Split on whitespace at depth zero, keeping ``rgb(0, 0, 0)`` as one word."""
    words: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        if char.isspace() and depth == 0:
            if current:
                words.append("".join(current))
                current = []
            continue
        current.append(char)
    if current:
        words.append("".join(current))
    return words


def split_function_calls(text: str) -> list[tuple[str, str]] | None:
    """
    Split ``name(args) name(args)`` sequences into (name, args) pairs.

    Returns:
        List of calls, or None when text outside a call or an unclosed call is found
    """
    calls: list[tuple[str, str]] = []
    pos = 0
    length = len(text)
    while pos < length:
        if text[pos].isspace():
            pos += 1
            continue
        match = _IDENT.match(text, pos)
        if match is None:
            return None
        name = match.group(0)
        pos = match.end()
        if pos >= length or text[pos] != "(":
            return None
        depth = 0
        start = pos + 1
        while pos < length:
            if text[pos] == "(":
                depth += 1
            elif text[pos] == ")":
                depth -= 1
                if depth == 0:
                    break
            pos += 1
        if pos >= length:
            return None
        calls.append((name, text[start:pos].strip()))
        pos += 1
    return calls


def outer_call(text: str) -> tuple[str, str] | None:
    """(name, inner) when the whole text is exactly one function call."""
    calls = split_function_calls(text.strip())
    if calls is None or len(calls) != 1:
        return None
    return calls[0]
