"""File-backed tag source: serves a saved ``exiftool -listx`` dump (offline use and tests)."""
from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import BinaryIO

from tags_api.app.ports.tag_source import TagProcess, TagSource, TagSourceError


class FileTagProcess(TagProcess):
    def __init__(self, handle: BinaryIO) -> None:
        self._handle = handle

    async def read(self, size: int) -> bytes:
        return self._handle.read(size)

    async def terminate(self) -> None:
        self._handle.close()

    async def __aenter__(self) -> "FileTagProcess":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.terminate()


class FileTagSource(TagSource):
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    async def open(self) -> FileTagProcess:
        try:
            handle = self._path.open("rb")
        except OSError as exc:
            raise TagSourceError(f"failed to open {self._path}: {exc}") from exc
        return FileTagProcess(handle)

    def available(self) -> bool:
        return self._path.is_file()
