"""Line source protocol for dependency injection."""
from typing import AsyncIterator, Protocol, runtime_checkable

from ..models.session import ResourceMetadata


@runtime_checkable
class LineSourceProtocol(Protocol):
    """Protocol for reading a line-oriented text resource."""

    def open_lines(self, resource_id: str) -> AsyncIterator[str]:
        """Lazily yield decoded lines.

        Each call starts a fresh pass over the resource.

        Args:
            resource_id: Resource identifier.

        Yields:
            Line texts without their line terminator.
        """
        ...

    async def count_lines(self, resource_id: str) -> int:
        """Count lines with an independent full pass.

        Args:
            resource_id: Resource identifier.

        Returns:
            Number of lines.
        """
        ...

    async def metadata(self, resource_id: str) -> ResourceMetadata:
        """Get resource name and size."""
        ...
