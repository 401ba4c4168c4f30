"""Tag source port: contract for obtaining the raw tag dictionary byte stream.

The streaming service depends on this port; infrastructure (e.g. an exiftool
subprocess) implements it.
"""
from __future__ import annotations

from types import TracebackType
from typing import Protocol, runtime_checkable


class TagSourceError(Exception):
    """Raised when the tag source cannot be started or its output cannot be obtained."""


@runtime_checkable
class TagProcess(Protocol):
    """A running producer of tag dictionary XML.

    Used as an async context manager; leaving the block terminates and reaps
    the producer whether or not its output was fully consumed.
    """

    async def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; ``b""`` at end of stream."""
        ...

    async def terminate(self) -> None:
        """Stop the producer if still running. Safe to call more than once."""
        ...

    async def __aenter__(self) -> "TagProcess": ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...


@runtime_checkable
class TagSource(Protocol):
    """Port: start a tag dictionary producer. Implementations live in infrastructure."""

    async def open(self) -> TagProcess:
        """Start the producer; raise TagSourceError if it cannot be started."""
        ...

    def available(self) -> bool:
        """True when the producer can be started (used by readiness)."""
        ...
