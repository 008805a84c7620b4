import asyncio
import logging
from pathlib import Path
from typing import AsyncIterator, TextIO

from txt_search_tool.core.models.session import ResourceMetadata

logger = logging.getLogger(__name__)


class FileLineSource:
    """Line source over local text files.

    Blocking reads run in worker threads, one batch of lines at a time.
    Undecodable bytes are replaced rather than failing the whole read.
    """

    def __init__(self, encoding: str = "utf-8", batch_size: int = 1000):
        self._encoding = encoding
        self._batch_size = batch_size

    def _open(self, resource_id: str) -> TextIO:
        return open(resource_id, "r", encoding=self._encoding, errors="replace")

    def _read_batch(self, file: TextIO) -> list[str]:
        batch = []
        for _ in range(self._batch_size):
            line = file.readline()
            if not line:
                break
            batch.append(line[:-1] if line.endswith("\n") else line)
        return batch

    async def open_lines(self, resource_id: str) -> AsyncIterator[str]:
        file = await asyncio.to_thread(self._open, resource_id)
        try:
            while True:
                batch = await asyncio.to_thread(self._read_batch, file)
                if not batch:
                    break
                for line in batch:
                    yield line
        finally:
            file.close()

    def _count(self, resource_id: str) -> int:
        with self._open(resource_id) as file:
            return sum(1 for _ in file)

    async def count_lines(self, resource_id: str) -> int:
        count = await asyncio.to_thread(self._count, resource_id)
        logger.debug(f"Counted {count} lines in {resource_id}")
        return count

    async def metadata(self, resource_id: str) -> ResourceMetadata:
        path = Path(resource_id)
        stat = await asyncio.to_thread(path.stat)
        return ResourceMetadata(name=path.name, size_bytes=stat.st_size)
