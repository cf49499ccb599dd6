"""ID Generation System.

Element and document identifiers are ``<prefix>_<ULID>`` strings. ULIDs draw
fresh randomness per call, so subtrees cloned by concurrent compilations
never collide and no counter has to be shared between builders.
"""

from typing import NewType
from ulid import ULID

# ============================================================================
# Type-Safe ID Wrappers
# ============================================================================

ElementID = NewType("ElementID", str)
DocumentID = NewType("DocumentID", str)

ROOT_ID = ElementID("root")
"""Reserved identifier of the document root; never generated."""


class Prefix:
    """ID prefix constants."""

    ELEMENT = "el"
    DOCUMENT = "doc"


_ULID_LENGTH = 26

# ============================================================================
# Generation
# ============================================================================


def new_element_id(prefix: str = Prefix.ELEMENT) -> ElementID:
    """Fresh element id (``el_...`` unless the builder was given a prefix)."""
    return ElementID(f"{prefix}_{ULID()}")


def new_document_id() -> DocumentID:
    return DocumentID(f"{Prefix.DOCUMENT}_{ULID()}")


# ============================================================================
# Validation and Parsing
# ============================================================================


def is_valid(id_str: str) -> bool:
    """True when ``id_str`` ends in a well-formed ULID, prefixed or not."""
    ulid_part = id_str.rsplit("_", 1)[-1]
    if len(ulid_part) != _ULID_LENGTH:
        return False
    try:
        ULID.from_str(ulid_part)
    except ValueError:
        return False
    return True


def extract_prefix(id_str: str) -> str | None:
    prefix, sep, _ = id_str.rpartition("_")
    return prefix if sep else None


def is_element_id(id_str: str) -> bool:
    """Generated element id with the default prefix."""
    return extract_prefix(id_str) == Prefix.ELEMENT and is_valid(id_str)


def is_document_id(id_str: str) -> bool:
    return extract_prefix(id_str) == Prefix.DOCUMENT and is_valid(id_str)
