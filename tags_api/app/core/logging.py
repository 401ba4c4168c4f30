"""Loguru sink setup for the API process."""
from __future__ import annotations

import sys

from loguru import logger


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with one at the configured level.

    Structured fields bound with ``logger.bind(...)`` are rendered after the
    message so events logged with an empty message stay readable.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan> - {message} {extra}"
        ),
    )
