"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .errors import (
    ErrorKind,
    Diagnostic,
    TreeError,
    PathSyntaxError,
    EncodingFailure,
    CompilationError,
)
from .validate import (
    ValidationError,
    ValidationResult,
    CompileRequest,
    validate_request,
)
from .logging_config import configure_logging, get_logger, LogContext
from .json import (
    extract_json,
    safe_json_dumps,
    JSONParseError,
    validate_json_size,
    validate_json_depth,
)
from .id import (
    ElementID,
    DocumentID,
    ROOT_ID,
    Prefix,
    new_element_id,
    new_document_id,
    is_valid,
    extract_prefix,
)


def create_container(settings: Settings | None = None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "ErrorKind",
    "Diagnostic",
    "TreeError",
    "PathSyntaxError",
    "EncodingFailure",
    "CompilationError",
    # Validation
    "ValidationError",
    "ValidationResult",
    "CompileRequest",
    "validate_request",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "extract_json",
    "safe_json_dumps",
    "JSONParseError",
    "validate_json_size",
    "validate_json_depth",
    # IDs
    "ElementID",
    "DocumentID",
    "ROOT_ID",
    "Prefix",
    "new_element_id",
    "new_document_id",
    "is_valid",
    "extract_prefix",
    # DI
    "create_container",
]
