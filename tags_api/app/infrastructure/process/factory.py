"""Tag source factory: selects implementation from config."""
from __future__ import annotations

from tags_api.app.config.settings import Settings
from tags_api.app.constants import TagSourceBackend
from tags_api.app.infrastructure.process.exiftool_source import ExiftoolTagSource
from tags_api.app.infrastructure.process.file_source import FileTagSource
from tags_api.app.ports.tag_source import TagSource


def create_tag_source(settings: Settings) -> TagSource:
    backend = settings.tag_source_backend.strip().lower()

    if backend == TagSourceBackend.EXIFTOOL:
        return ExiftoolTagSource(settings.exiftool_command)

    if backend == TagSourceBackend.FILE:
        if not settings.tag_source_file:
            raise ValueError("TAG_SOURCE_FILE is required for the file tag source backend")
        return FileTagSource(settings.tag_source_file)

    raise ValueError(f"Unsupported tag source backend: {backend}")
