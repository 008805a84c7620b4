import asyncio
import os
import sys
from typing import Optional

import pytest

# Ensure project root is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from txt_search_tool.core.models.session import ResourceMetadata
from txt_search_tool.core.services.replace_engine import ReplaceEngine
from txt_search_tool.core.services.search_engine import SearchEngine
from txt_search_tool.core.services.session import Session


def split_lines(text: str) -> list[str]:
    """Split like a line reader: no empty line after a final terminator."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


class MemoryLineSource:
    """In-memory line source that records how often it is read."""

    def __init__(self, files: dict[str, str], delay: float = 0.0):
        self.files = files
        self.delay = delay
        self.open_calls = 0
        self.count_calls = 0
        self.fail = False

    async def open_lines(self, resource_id: str):
        self.open_calls += 1
        if self.fail:
            raise OSError("device not ready")
        for line in split_lines(self.files[resource_id]):
            if self.delay:
                await asyncio.sleep(self.delay)
            yield line

    async def count_lines(self, resource_id: str) -> int:
        self.count_calls += 1
        if self.fail:
            raise OSError("device not ready")
        return len(split_lines(self.files[resource_id]))

    async def metadata(self, resource_id: str) -> ResourceMetadata:
        if resource_id not in self.files:
            raise FileNotFoundError(resource_id)
        return ResourceMetadata(
            name=resource_id, size_bytes=len(self.files[resource_id].encode("utf-8"))
        )


class MemoryWriteSink:
    def __init__(self):
        self.writes: dict[str, str] = {}
        self.fail = False

    async def write(self, resource_id: str, content: str) -> None:
        if self.fail:
            raise PermissionError("read-only file")
        self.writes[resource_id] = content


class MemoryPreferenceStore:
    def __init__(self):
        self.items: list[str] = []
        self.scalars: dict[str, str] = {}

    def load_list(self) -> list[str]:
        return list(self.items)

    def save_list(self, items: list[str]) -> None:
        self.items = list(items)

    def clear(self) -> None:
        self.items = []

    def load_scalar(self, key: str) -> Optional[str]:
        return self.scalars.get(key)

    def save_scalar(self, key: str, value: str) -> None:
        self.scalars[key] = value


DOC = "foo bar\nfoo baz\nqux\n"


@pytest.fixture
def source():
    return MemoryLineSource({"doc.txt": DOC})


@pytest.fixture
def sink():
    return MemoryWriteSink()


@pytest.fixture
def store():
    return MemoryPreferenceStore()


@pytest.fixture
def session(source, sink, store):
    return Session(
        line_source=source,
        write_sink=sink,
        search_engine=SearchEngine(context_size=2),
        replace_engine=ReplaceEngine(),
        preference_store=store,
    )
