from __future__ import annotations

from types import TracebackType

import pytest
from fastapi import FastAPI

from tags_api.app.config.settings import Settings
from tags_api.app.ports.tag_source import TagSourceError
from tags_api.app.routers.health import health_router
from tags_api.app.routers.tags import tags_router
from tests.test_data import MULTI_TABLE_XML


class FakeTagProcess:
    """Implements TagProcess over an in-memory document, served in fixed-size chunks."""

    def __init__(self, data: bytes, *, chunk_size: int | None = None) -> None:
        self._data = data
        self._offset = 0
        self._chunk_size = chunk_size
        self.reads = 0
        self.terminated = False
        self.terminate_calls = 0

    async def read(self, size: int) -> bytes:
        if self.terminated:
            return b""
        self.reads += 1
        if self._chunk_size is not None:
            size = min(size, self._chunk_size)
        chunk = self._data[self._offset:self._offset + size]
        self._offset += len(chunk)
        return chunk

    async def terminate(self) -> None:
        self.terminated = True
        self.terminate_calls += 1

    async def __aenter__(self) -> "FakeTagProcess":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.terminate()


class FakeTagSource:
    """Implements TagSource for tests; records every process it hands out."""

    def __init__(
        self,
        data: bytes = MULTI_TABLE_XML,
        *,
        chunk_size: int | None = None,
        raise_on_open: Exception | None = None,
        available: bool = True,
    ) -> None:
        self._data = data
        self._chunk_size = chunk_size
        self._raise_on_open = raise_on_open
        self._available = available
        self.processes: list[FakeTagProcess] = []

    async def open(self) -> FakeTagProcess:
        if self._raise_on_open is not None:
            raise self._raise_on_open
        process = FakeTagProcess(self._data, chunk_size=self._chunk_size)
        self.processes.append(process)
        return process

    def available(self) -> bool:
        return self._available


class Cancelled:
    """Cancellation check that reports a disconnect once it has been asked ``after`` times."""

    def __init__(self, after: int) -> None:
        self.after = after
        self.calls = 0

    async def __call__(self) -> bool:
        self.calls += 1
        return self.calls > self.after


def failing_source(message: str = "failed to start exiftool: not found") -> FakeTagSource:
    return FakeTagSource(raise_on_open=TagSourceError(message))


@pytest.fixture()
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture()
def test_app(settings: Settings) -> FastAPI:
    app = FastAPI()
    app.state.settings = settings
    app.state.tag_source = FakeTagSource()
    app.include_router(health_router)
    app.include_router(tags_router)
    return app
