"""Error kinds, diagnostics and compiler exceptions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping


class ErrorKind(str, Enum):
    """Classification shared by validator diagnostics and structural failures."""

    UNKNOWN_PROPERTY = "UnknownProperty"
    INVALID_VALUE_FORMAT = "InvalidValueFormat"
    OUT_OF_RANGE = "OutOfRange"
    NEGATIVE_VALUE_NOT_ALLOWED = "NegativeValueNotAllowed"
    MALFORMED_GRAMMAR = "MalformedGrammar"
    PARENT_NOT_FOUND = "ParentNotFound"
    ENCODING_FAILURE = "EncodingFailure"
    ELEMENT_NOT_FOUND = "ElementNotFound"
    DUPLICATE_ELEMENT_ID = "DuplicateElementId"
    PATH_CONFLICT = "PathConflict"
    MISSING_REQUIRED_PROPERTY = "MissingRequiredProperty"
    INVALID_REQUEST = "InvalidRequest"


@dataclass(frozen=True)
class Diagnostic:
    """A single validation finding (code, message and context)."""

    kind: ErrorKind
    code: str
    message: str
    context: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }


@dataclass(frozen=True)
class TreeError:
    """Failure value for structural tree operations (Result pattern)."""

    kind: ErrorKind
    message: str
    element_id: str | None = None


class PathSyntaxError(ValueError):
    """A property path in a lookup table could not be parsed."""

    pass


class EncodingFailure(Exception):
    """A canonical value could not be serialized. Always an internal defect."""

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(message)
        self.value = value


class CompilationError(Exception):
    """Element or document compilation failed."""

    def __init__(
        self,
        message: str,
        diagnostics: Iterable[Diagnostic] = (),
        element_type: str | None = None,
    ) -> None:
        super().__init__(message)
        self.diagnostics = tuple(diagnostics)
        self.element_type = element_type

    @property
    def kind(self) -> ErrorKind:
        """Kind of the first diagnostic, or InvalidRequest when none were recorded."""
        if self.diagnostics:
            return self.diagnostics[0].kind
        return ErrorKind.INVALID_REQUEST

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": str(self),
            "element_type": self.element_type,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
