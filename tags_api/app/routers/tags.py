from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse, StreamingResponse
from loguru import logger
from starlette.types import Receive, Scope, Send

from tags_api.app.ports.tag_source import TagProcess, TagSourceError
from tags_api.app.routers.utils import get_tag_source, log_fields, read_chunk_size, table_required
from tags_api.app.schemas.tags import TagsResponse
from tags_api.app.services.tag_stream import (
    ClientDisconnectedError,
    TagFilter,
    TagStream,
    TagStreamError,
)

tags_router = APIRouter(prefix="/tags", tags=["Tags"])


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(**log_fields(event, **kwargs)).info("")


def _log_error(event: str, **kwargs: Any) -> None:
    logger.bind(**log_fields(event, **kwargs)).error("")


async def _guarded(stream: TagStream, tag_filter: TagFilter) -> AsyncIterator[bytes]:
    """Relay the stream and turn mid-stream failures into log events.

    The status line is already on the wire at this point, so a failure can
    only end the body early; no closing marker is sent.
    """
    fields = {"table": tag_filter.table, "tag": tag_filter.tag}
    try:
        async for chunk in stream:
            yield chunk
    except ClientDisconnectedError:
        _log("tags_client_disconnected", emitted=stream.emitted, **fields)
    except asyncio.CancelledError:
        _log("tags_client_disconnected", emitted=stream.emitted, **fields)
        raise
    except TagStreamError as exc:
        _log_error("tags_stream_failed", error=str(exc), emitted=stream.emitted, **fields)
    else:
        _log("tags_stream_completed", emitted=stream.emitted, **fields)


class TagStreamingResponse(StreamingResponse):
    """StreamingResponse that owns the tag process.

    The process is terminated when the response finishes, however it
    finishes, including when the body iterator was never started.
    """

    media_type = "application/json"

    def __init__(self, content: AsyncIterator[bytes], *, process: TagProcess) -> None:
        super().__init__(content, media_type=self.media_type)
        self.process = process

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            await self.process.terminate()


@tags_router.get(
    "",
    summary="Stream the tag dictionary",
    description=(
        "Runs the tag source and streams every tag as JSON while it is produced. "
        "`table` and `tag` are optional exact-match filters; an empty value matches everything."
    ),
    response_model=TagsResponse,
    responses={
        200: {"description": "Tags streamed as `{\"tags\": [...]}`."},
        400: {"description": "Missing table name (only when REQUIRE_TABLE is enabled)."},
        500: {"description": "Tag source could not be started."},
    },
)
async def get_tags(request: Request, table: str = "", tag: str = "") -> Response:
    if not table and table_required(request):
        return PlainTextResponse("table name required", status_code=400)

    source = get_tag_source(request)
    if source is None:
        _log_error("tags_source_failed", error="tag source not configured")
        return PlainTextResponse("Tag source not available", status_code=500)

    try:
        process = await source.open()
    except TagSourceError as exc:
        _log_error("tags_source_failed", error=str(exc))
        return PlainTextResponse(str(exc), status_code=500)

    tag_filter = TagFilter(table=table, tag=tag)
    stream = TagStream(
        process,
        tag_filter,
        is_cancelled=request.is_disconnected,
        chunk_size=read_chunk_size(request),
    )
    _log("tags_stream_started", table=table, tag=tag)
    return TagStreamingResponse(_guarded(stream, tag_filter), process=process)
