"""Protocol interfaces for dependency injection."""
from .line_source import LineSourceProtocol
from .write_sink import WriteSinkProtocol
from .preference_store import PreferenceStoreProtocol

__all__ = [
    "LineSourceProtocol",
    "WriteSinkProtocol",
    "PreferenceStoreProtocol",
]
