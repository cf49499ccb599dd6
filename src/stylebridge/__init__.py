"""
stylebridge
Compiles simplified, flat style properties into breakpoint-aware builder
property trees and assembles them into element documents.
"""

from .compiler import CompiledDocument, CompiledElement, StyleCompiler
from .core import CompilationError, Diagnostic, ErrorKind, Settings, create_container, get_settings
from .paths import PathResolver, get_property_metadata
from .store import ContentStore, InMemoryContentStore
from .tree import DocumentBuilder

__version__ = "0.1.0"

__all__ = [
    "StyleCompiler",
    "CompiledElement",
    "CompiledDocument",
    "CompilationError",
    "Diagnostic",
    "ErrorKind",
    "Settings",
    "get_settings",
    "create_container",
    "PathResolver",
    "get_property_metadata",
    "ContentStore",
    "InMemoryContentStore",
    "DocumentBuilder",
]
