"""Byte sources for uploads."""

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


class UploadSource(Protocol):
    """A readable byte stream of known total length."""

    size: int

    def chunks(self) -> AsyncIterator[bytes]:
        """Yield the content in order."""


@dataclass
class BytesSource(UploadSource):
    """In-memory upload source."""

    data: bytes
    chunk_size: int = 256 * 1024

    @property
    def size(self) -> int:
        return len(self.data)

    async def chunks(self) -> AsyncIterator[bytes]:
        for offset in range(0, len(self.data), self.chunk_size):
            yield self.data[offset : offset + self.chunk_size]


@dataclass
class FileSource(UploadSource):
    """Upload source reading a local file off the event loop."""

    path: Path
    size: int
    chunk_size: int = 256 * 1024

    @classmethod
    def open(cls, path: str | Path, chunk_size: int = 256 * 1024) -> "FileSource":
        """Create a source for ``path``, recording its current size."""
        resolved = Path(path)
        return cls(path=resolved, size=resolved.stat().st_size, chunk_size=chunk_size)

    @property
    def name(self) -> str:
        return self.path.name

    async def chunks(self) -> AsyncIterator[bytes]:
        handle = await asyncio.to_thread(self.path.open, "rb")
        try:
            while True:
                chunk = await asyncio.to_thread(handle.read, self.chunk_size)
                if not chunk:
                    return
                yield chunk
        finally:
            handle.close()
