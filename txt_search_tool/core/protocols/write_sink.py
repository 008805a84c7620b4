"""Write sink protocol for dependency injection."""
from typing import Protocol, runtime_checkable


@runtime_checkable
class WriteSinkProtocol(Protocol):
    """Protocol for persisting a whole document."""

    async def write(self, resource_id: str, content: str) -> None:
        """Replace the resource content.

        Args:
            resource_id: Target resource identifier.
            content: Full joined document.
        """
        ...
