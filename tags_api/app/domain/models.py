"""Domain models."""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Desc:
    """One localized description of a tag."""

    lang: str
    value: str


@dataclass(frozen=True)
class Tag:
    """A metadata field definition within a table."""

    id: str
    name: str
    type: str
    writable: bool
    group: str
    descs: tuple[Desc, ...] = field(default_factory=tuple)

    def description_map(self) -> dict[str, str]:
        """Language code -> text. Later descriptions win over earlier ones with the same language."""
        return {desc.lang: desc.value for desc in self.descs}


@dataclass(frozen=True)
class Table:
    """A named group of tags, in document order."""

    name: str
    tags: tuple[Tag, ...] = field(default_factory=tuple)
