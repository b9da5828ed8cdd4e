"""Tag request/response models."""

from typing import List

from pydantic import BaseModel, Field

from relevance.models.scoring import TagSuggestion


class RelatedTagsRequest(BaseModel):
    tags: List[str] = Field(default_factory=list)
    limit: int = 5


class RelatedTagsResponse(BaseModel):
    tags: List[TagSuggestion]


class TagInfo(BaseModel):
    name: str
    global_post_count: int


class PopularTagsResponse(BaseModel):
    tags: List[TagInfo]
