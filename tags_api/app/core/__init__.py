from tags_api.app.core.logging import configure_logging

SERVICE_NAME = "tags-api"

__all__ = ["SERVICE_NAME", "configure_logging"]
