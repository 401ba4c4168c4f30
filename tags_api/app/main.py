from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI
from loguru import logger

from tags_api.app.composition import AppDependencies, create_app_dependencies
from tags_api.app.config.settings import Settings
from tags_api.app.core import SERVICE_NAME, configure_logging
from tags_api.app.routers.health import health_router
from tags_api.app.routers.tags import tags_router


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def create_app(dependencies: AppDependencies | None = None) -> FastAPI:
    """Build the application with an explicit router table; nothing is registered globally."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        deps = dependencies or create_app_dependencies()
        configure_logging(deps.settings.log_level)
        _log("api_starting", tag_source=type(deps.tag_source).__name__)
        app.state.settings = deps.settings
        app.state.tag_source = deps.tag_source
        try:
            yield
        finally:
            _log("api_stopping")

    app = FastAPI(
        title="Tag Dictionary API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(health_router)
    app.include_router(tags_router)
    return app


app = create_app()


def main() -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    dependencies = create_app_dependencies(settings)
    _log("server_started", host=settings.host, port=settings.port)
    uvicorn.run(create_app(dependencies), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
