"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from ..codec.parse import ValueCodec
from ..compiler.pipeline import StyleCompiler
from ..paths.resolver import PathResolver, default_resolver
from ..store.base import ContentStore
from ..store.memory import InMemoryContentStore
from .config import Settings, get_settings


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        """Provide settings (explicit, or loaded from the environment)."""
        return self.settings or get_settings()

    @singleton
    @provider
    def provide_resolver(self) -> PathResolver:
        """Provide the resolver over the built-in property tables."""
        return default_resolver()

    @singleton
    @provider
    def provide_codec(self, settings: Settings) -> ValueCodec:
        return ValueCodec(settings.default_length_unit)

    @singleton
    @provider
    def provide_content_store(self) -> ContentStore:
        """Provide the in-memory content store."""
        return InMemoryContentStore()

    @singleton
    @provider
    def provide_compiler(self, resolver: PathResolver, codec: ValueCodec, settings: Settings) -> StyleCompiler:
        """Provide the compiler with all dependencies."""
        return StyleCompiler(resolver=resolver, codec=codec, settings=settings)


def create_container(settings: Settings | None = None) -> Injector:
    """Create configured injector."""
    return Injector([CoreModule(settings)])
