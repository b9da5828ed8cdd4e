"""Tag registry models: tag identities and item↔tag membership rows."""

from pydantic import BaseModel, ConfigDict, Field


class Tag(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    global_post_count: int = Field(default=0, ge=0)


class TagLink(BaseModel):
    """One (item, tag) membership row."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    tag_id: str
