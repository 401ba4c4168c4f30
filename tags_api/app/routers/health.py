from typing import Any

from fastapi import APIRouter, Request, Response
from loguru import logger

from tags_api.app.routers.utils import get_tag_source, log_fields

health_router = APIRouter(tags=["Health"])


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(**log_fields(event, **kwargs)).info("")


@health_router.get(
    "/health/live",
    summary="Liveness probe",
    description="Returns 200 if the API process is running.",
    responses={200: {"description": "Service is alive."}},
)
async def live() -> dict:
    return {"status": "ok"}


@health_router.get(
    "/health/ready",
    summary="Readiness probe",
    description="Returns 200 only when the configured tag source (e.g. the exiftool executable) can be started.",
    responses={
        200: {"description": "Tag source is available."},
        503: {"description": "Tag source missing or not available."},
    },
)
async def ready(request: Request) -> Response:
    source = get_tag_source(request)
    if source is None:
        _log("components_not_initialized")
        return Response(status_code=503, content="Not ready")
    if not source.available():
        _log("tag_source_unavailable")
        return Response(status_code=503, content="Tag source not available")
    return Response(status_code=200, content="OK")
