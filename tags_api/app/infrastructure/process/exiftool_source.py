"""Concrete tag source running the exiftool command line tool (injected where TagSource is needed)."""
from __future__ import annotations

import asyncio
import os
import shutil
from types import TracebackType
from typing import Sequence

from loguru import logger

from tags_api.app.ports.tag_source import TagProcess, TagSource, TagSourceError


class ExiftoolProcess(TagProcess):
    """Adapts an asyncio subprocess to the TagProcess protocol."""

    def __init__(self, process: asyncio.subprocess.Process) -> None:
        if process.stdout is None:
            raise TagSourceError("failed to create stdout pipe")
        self._process = process
        self._stdout = process.stdout

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def returncode(self) -> int | None:
        return self._process.returncode

    async def read(self, size: int) -> bytes:
        return await self._stdout.read(size)

    async def terminate(self) -> None:
        if self._process.returncode is None:
            try:
                self._process.kill()
            except ProcessLookupError:
                pass
        # kill has been sent; keep reaping even if the caller is cancelled meanwhile
        await asyncio.shield(self._process.wait())

    async def __aenter__(self) -> "ExiftoolProcess":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.terminate()


class ExiftoolTagSource(TagSource):
    """TagSource implementation that spawns ``exiftool -listx`` per request."""

    def __init__(self, command: Sequence[str]) -> None:
        if not command:
            raise ValueError("exiftool command must not be empty")
        self._command = list(command)

    @property
    def command(self) -> list[str]:
        return list(self._command)

    async def open(self) -> ExiftoolProcess:
        try:
            process = await asyncio.create_subprocess_exec(
                *self._command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as exc:
            raise TagSourceError(f"failed to start {self._command[0]}: {exc}") from exc
        logger.debug("started {} (pid {})", self._command, process.pid)
        return ExiftoolProcess(process)

    def available(self) -> bool:
        executable = self._command[0]
        if os.path.dirname(executable):
            return os.path.isfile(executable) and os.access(executable, os.X_OK)
        return shutil.which(executable) is not None
