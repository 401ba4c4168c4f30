"""
Composition root: single place where concrete implementations are wired.

Builds settings and the tag source from config. Used by lifespan to populate
app.state. No DI container library, explicit wiring only.
"""

from tags_api.app.config.settings import Settings
from tags_api.app.infrastructure.process.factory import create_tag_source
from tags_api.app.ports.tag_source import TagSource


class AppDependencies:
    """Holds wired dependencies. Built only in composition root."""

    def __init__(self, *, settings: Settings, tag_source: TagSource) -> None:
        self._settings = settings
        self._tag_source = tag_source

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def tag_source(self) -> TagSource:
        return self._tag_source


def create_app_dependencies(settings: Settings | None = None) -> AppDependencies:
    """
    Build all app dependencies in one place. The tag source backend is
    selected from settings (tag_source_backend).
    """
    _settings = settings or Settings()
    return AppDependencies(
        settings=_settings,
        tag_source=create_tag_source(_settings),
    )
