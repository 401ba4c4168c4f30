from __future__ import annotations

from typing import Any

from fastapi import Request

from tags_api.app.config.settings import Settings
from tags_api.app.core import SERVICE_NAME
from tags_api.app.ports.tag_source import TagSource
from tags_api.app.services.tag_stream import DEFAULT_CHUNK_SIZE


def get_settings(request: Request) -> Settings | None:
    return getattr(request.app.state, "settings", None)


def get_tag_source(request: Request) -> TagSource | None:
    return getattr(request.app.state, "tag_source", None)


def read_chunk_size(request: Request) -> int:
    """Read the tag source chunk size from app.state.settings or default."""
    settings = get_settings(request)
    if settings is not None:
        return getattr(settings, "read_chunk_size", DEFAULT_CHUNK_SIZE)
    return DEFAULT_CHUNK_SIZE


def table_required(request: Request) -> bool:
    settings = get_settings(request)
    return bool(getattr(settings, "require_table", False))


def log_fields(event: str, **kwargs: Any) -> dict[str, Any]:
    return {"service_name": SERVICE_NAME, "event": event, **kwargs}


__all__ = [
    "get_settings",
    "get_tag_source",
    "read_chunk_size",
    "table_required",
    "log_fields",
]
