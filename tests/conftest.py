"""Pytest configuration and fixtures."""

import logging
import os

import pytest

from stylebridge.codec import ValueCodec
from stylebridge.compiler import StyleCompiler
from stylebridge.core import Settings, create_container
from stylebridge.paths import default_resolver
from stylebridge.store import InMemoryContentStore
from stylebridge.tree import DocumentBuilder


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ['STYLEBRIDGE_LOG_LEVEL'] = 'DEBUG'
    os.environ['STYLEBRIDGE_JSON_LOGS'] = 'false'


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handlers installed by configure_logging (they hold captured streams)."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Fresh settings (not the cached instance)."""
    return Settings()


@pytest.fixture
def di_container(settings):
    """Dependency injection container for testing."""
    return create_container(settings)


@pytest.fixture
def resolver():
    """Shared property path resolver."""
    return default_resolver()


@pytest.fixture
def codec():
    """Value codec with px as the default length unit."""
    return ValueCodec("px")


# ============================================================================
# Compiler Fixtures
# ============================================================================

@pytest.fixture
def compiler(resolver, codec, settings):
    """Style compiler with default policy."""
    return StyleCompiler(resolver=resolver, codec=codec, settings=settings)


@pytest.fixture
def strict_compiler(resolver, codec):
    """Style compiler that rejects unknown properties and breakpoints."""
    strict = Settings(strict_unknown_properties=True, fallback_unknown_breakpoints=False)
    return StyleCompiler(resolver=resolver, codec=codec, settings=strict)


# ============================================================================
# Tree Fixtures
# ============================================================================

@pytest.fixture
def builder():
    """Document builder with an open root."""
    doc = DocumentBuilder()
    doc.create_document()
    return doc


@pytest.fixture
def store():
    """Empty in-memory content store."""
    return InMemoryContentStore()


@pytest.fixture
def heading_request():
    """Simplified heading definition with responsive font size."""
    return {
        "type": "Heading",
        "text": "Welcome",
        "tag": "h1",
        "fontSize": "48px",
        "responsive": {"tablet": {"fontSize": "36px"}},
    }
