"""
Streams the tag dictionary as JSON while it is still being produced.

Accepts an open TagProcess, the two optional filters and a cancellation
check; yields byte chunks of the ``{"tags": [...]}`` document. Router wraps
the stream in a StreamingResponse and maps failures to log events.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Iterable, Iterator

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from tags_api.app.constants import STREAM_CLOSE, STREAM_OPEN, STREAM_SEPARATOR
from tags_api.app.domain.models import Table, Tag
from tags_api.app.domain.tag_reader import TagDocumentError, TagTableReader
from tags_api.app.ports.tag_source import TagProcess
from tags_api.app.schemas.tags import TagResult

CancellationCheck = Callable[[], Awaitable[bool]]

DEFAULT_CHUNK_SIZE = 65536


class TagStreamError(Exception):
    """Base for failures after the response has started."""


class TagParseError(TagStreamError):
    """Malformed tag dictionary markup."""


class TagEncodeError(TagStreamError):
    """A result could not be serialised."""


class ClientDisconnectedError(TagStreamError):
    """The consumer went away; not a server error."""

    def __init__(self, message: str = "client closed connection") -> None:
        super().__init__(message)


async def _never_cancelled() -> bool:
    return False


@dataclass(frozen=True)
class TagFilter:
    """Exact-match filters; an empty value matches everything."""

    table: str = ""
    tag: str = ""

    def matches_table(self, name: str) -> bool:
        return not self.table or self.table == name

    def matches_tag(self, name: str) -> bool:
        return not self.tag or self.tag == name

    def select(self, tables: Iterable[Table]) -> Iterator[tuple[Table, Tag]]:
        for table in tables:
            if not self.matches_table(table.name):
                continue
            for tag in table.tags:
                if self.matches_tag(tag.name):
                    yield table, tag


def encode_result(table: Table, tag: Tag) -> bytes:
    """Compact JSON for one tag, e.g. ``{"writable":true,"path":"EXIF:Make",...}``."""
    try:
        return TagResult.from_tag(table, tag).model_dump_json().encode("utf-8")
    except (PydanticSerializationError, ValidationError) as exc:
        raise TagEncodeError(f"error encoding JSON: {exc}") from exc


class TagStream:
    """One request's worth of streaming. Iterate once with ``async for``.

    The process is terminated on every exit path, including when the caller
    stops iterating early. The closing marker is only yielded when the source
    reached end of stream cleanly.
    """

    def __init__(
        self,
        process: TagProcess,
        tag_filter: TagFilter | None = None,
        *,
        is_cancelled: CancellationCheck | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._process = process
        self._filter = tag_filter or TagFilter()
        self._is_cancelled = is_cancelled or _never_cancelled
        self._chunk_size = chunk_size
        self.emitted = 0
        self.completed = False

    async def _check_cancelled(self) -> None:
        if await self._is_cancelled():
            await self._process.terminate()
            raise ClientDisconnectedError()

    async def __aiter__(self) -> AsyncIterator[bytes]:
        reader = TagTableReader()
        async with self._process:
            yield STREAM_OPEN
            while True:
                await self._check_cancelled()
                data = await self._process.read(self._chunk_size)
                try:
                    tables = reader.feed(data) if data else reader.close()
                    for table, tag in self._filter.select(tables):
                        await self._check_cancelled()
                        encoded = encode_result(table, tag)
                        yield encoded if self.emitted == 0 else STREAM_SEPARATOR + encoded
                        self.emitted += 1
                except TagDocumentError as exc:
                    raise TagParseError(str(exc)) from exc
                if not data:
                    break
            yield STREAM_CLOSE
            self.completed = True


def stream_tags(
    process: TagProcess,
    tag_filter: TagFilter | None = None,
    *,
    is_cancelled: CancellationCheck | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> AsyncIterator[bytes]:
    """Shortcut for iterating a TagStream when the counters are not needed."""
    return TagStream(
        process, tag_filter, is_cancelled=is_cancelled, chunk_size=chunk_size
    ).__aiter__()


__all__ = [
    "CancellationCheck",
    "ClientDisconnectedError",
    "TagEncodeError",
    "TagFilter",
    "TagParseError",
    "TagStream",
    "TagStreamError",
    "encode_result",
    "stream_tags",
]
