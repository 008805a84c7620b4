import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Container:
    _factories: dict[type, Callable[[], Any]] = field(default_factory=dict)
    _singletons: dict[type, Any] = field(default_factory=dict)
    _singleton_flags: set[type] = field(default_factory=set)

    def register(
        self, interface: type[T], factory: Callable[[], T], singleton: bool = False
    ) -> None:
        """Register factory for interface.

        Args:
            interface: Interface type.
            factory: Factory function.
            singleton: Whether to cache instance.
        """
        self._factories[interface] = factory
        if singleton:
            self._singleton_flags.add(interface)

    def resolve(self, interface: type[T]) -> T:
        if interface in self._singletons:
            return self._singletons[interface]

        if interface not in self._factories:
            raise KeyError(f"No factory registered for {interface}")

        instance = self._factories[interface]()

        if interface in self._singleton_flags:
            self._singletons[interface] = instance

        return instance

    def reset(self) -> None:
        """Reset singletons (for testing)."""
        self._singletons.clear()


container = Container()


def configure_container(settings: Settings) -> Container:
    """Configure container with all dependencies.

    Sessions are not cached: every resolve builds a new, independently
    owned session sharing the stateless engines and I/O adapters.

    Args:
        settings: Application settings.

    Returns:
        Configured container.
    """
    from .core.protocols.line_source import LineSourceProtocol
    from .core.protocols.preference_store import PreferenceStoreProtocol
    from .core.protocols.write_sink import WriteSinkProtocol
    from .core.services.quick_phrase_service import QuickPhraseService
    from .core.services.replace_engine import ReplaceEngine
    from .core.services.search_engine import SearchEngine
    from .core.services.session import Session
    from .infrastructure.line_sources.file_line_source import FileLineSource
    from .infrastructure.preferences.json_preference_store import JsonPreferenceStore
    from .infrastructure.write_sinks.file_write_sink import FileWriteSink

    container.register(
        LineSourceProtocol,
        lambda: FileLineSource(
            encoding=settings.file_encoding,
            batch_size=settings.read_batch_size,
        ),
        singleton=True,
    )

    container.register(
        WriteSinkProtocol,
        lambda: FileWriteSink(encoding=settings.file_encoding),
        singleton=True,
    )

    container.register(
        PreferenceStoreProtocol,
        lambda: JsonPreferenceStore(settings.preferences_path),
        singleton=True,
    )

    container.register(
        SearchEngine,
        lambda: SearchEngine(context_size=settings.context_size),
        singleton=True,
    )

    container.register(ReplaceEngine, ReplaceEngine, singleton=True)

    container.register(
        QuickPhraseService,
        lambda: QuickPhraseService(container.resolve(PreferenceStoreProtocol)),
        singleton=True,
    )

    container.register(
        Session,
        lambda: Session(
            line_source=container.resolve(LineSourceProtocol),
            write_sink=container.resolve(WriteSinkProtocol),
            search_engine=container.resolve(SearchEngine),
            replace_engine=container.resolve(ReplaceEngine),
            preference_store=container.resolve(PreferenceStoreProtocol),
        ),
    )

    logger.info("Container configured")
    return container
