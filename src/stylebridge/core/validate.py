"""Request validation with strong typing."""

from dataclasses import dataclass
from typing import Any
from returns.result import Result, Success, Failure

from pydantic import BaseModel, Field, field_validator, ConfigDict
from pydantic import ValidationError as PydanticValidationError


# Validation limits
MAX_TYPE_LENGTH = 200
MAX_CHILDREN = 1_000

# Keys of a simplified request that are not style properties
RESERVED_KEYS = frozenset({"type", "id", "responsive", "hover", "children"})


class ValidationError(Exception):
    """Validation failed."""

    pass


@dataclass(frozen=True)
class ValidationResult:
    """Validation error with details (for Result pattern)."""

    message: str
    field: str | None = None
    value: Any | None = None


class RequestValidator(BaseModel):
    """Base validator with strict configuration."""

    model_config = ConfigDict(
        strict=True, validate_assignment=True, extra="forbid", frozen=True  # Immutable by default
    )


class CompileRequest(RequestValidator):
    """Validated simplified element request.

    Every key that is not a declared field is a simplified property
    assignment and is kept in ``model_extra``.
    """

    model_config = ConfigDict(strict=True, extra="allow", frozen=True)

    type: str = Field(min_length=1, max_length=MAX_TYPE_LENGTH)
    id: str | None = Field(default=None, min_length=1)
    responsive: dict[str, dict[str, Any]] = Field(default_factory=dict)
    hover: dict[str, Any] = Field(default_factory=dict)
    children: list[dict[str, Any]] = Field(default_factory=list, max_length=MAX_CHILDREN)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Ensure element type is non-empty after stripping."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Element type cannot be empty")
        return stripped

    def properties(self) -> dict[str, Any]:
        """Simplified property assignments at the base breakpoint."""
        return dict(self.model_extra or {})


def validate_request(data: Any) -> Result[CompileRequest, ValidationResult]:
    """
    Validate a simplified element request (Result pattern version).

    Args:
        data: Decoded request object

    Returns:
        Result with the validated request or validation error
    """
    if not isinstance(data, dict):
        return Failure(ValidationResult("Element request must be an object", value=data))
    try:
        return Success(CompileRequest.model_validate(data))
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        return Failure(ValidationResult(first.get("msg", str(e)), field=location or None))
