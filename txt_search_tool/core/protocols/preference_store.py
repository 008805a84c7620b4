"""Preference store protocol for dependency injection."""
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class PreferenceStoreProtocol(Protocol):
    """Protocol for key/value preference storage."""

    def load_list(self) -> list[str]:
        """Load the stored phrase list in saved order."""
        ...

    def save_list(self, items: list[str]) -> None:
        """Replace the stored phrase list."""
        ...

    def clear(self) -> None:
        """Remove the stored phrase list."""
        ...

    def load_scalar(self, key: str) -> Optional[str]:
        """Load a single value, None if absent."""
        ...

    def save_scalar(self, key: str, value: str) -> None:
        """Store a single value under key."""
        ...
