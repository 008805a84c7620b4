import asyncio
import logging

logger = logging.getLogger(__name__)


class FileWriteSink:

    def __init__(self, encoding: str = "utf-8"):
        self._encoding = encoding

    def _write(self, resource_id: str, content: str) -> None:
        # newline="" keeps "\n" as-is on every platform.
        with open(resource_id, "w", encoding=self._encoding, newline="") as f:
            f.write(content)

    async def write(self, resource_id: str, content: str) -> None:
        await asyncio.to_thread(self._write, resource_id, content)
        logger.info(f"Wrote {len(content)} chars to {resource_id}")
