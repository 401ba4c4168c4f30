from pydantic import BaseModel

from tags_api.app.domain.models import Table, Tag


class TagResult(BaseModel):
    writable: bool
    path: str
    group: str
    description: dict[str, str]
    type: str

    @classmethod
    def from_tag(cls, table: Table, tag: Tag) -> "TagResult":
        return cls(
            writable=tag.writable,
            path=f"{table.name}:{tag.name}",
            group=table.name,
            description=tag.description_map(),
            type=tag.type,
        )


class TagsResponse(BaseModel):
    """Shape of the streamed body; used for the OpenAPI schema only."""

    tags: list[TagResult]
