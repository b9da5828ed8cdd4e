"""Tag suggestion endpoints."""

from typing import List

from fastapi import APIRouter, Query

from ..models import PopularTagsResponse, RelatedTagsRequest, RelatedTagsResponse, TagInfo
from ..state import get_service

router = APIRouter()


@router.post("/related", response_model=RelatedTagsResponse)
async def related_tags(request: RelatedTagsRequest):
    suggestions = await get_service().suggest_related_tags(request.tags, request.limit)
    return RelatedTagsResponse(tags=suggestions)


@router.get("/related", response_model=RelatedTagsResponse)
async def related_tags_query(tags: List[str] = Query(default=[]), limit: int = Query(5)):
    suggestions = await get_service().suggest_related_tags(tags, limit)
    return RelatedTagsResponse(tags=suggestions)


@router.get("/suggestions", response_model=PopularTagsResponse)
async def tag_suggestions(q: str = Query(""), limit: int = Query(10)):
    tags = await get_service().suggest_tags(q, limit)
    return PopularTagsResponse(
        tags=[TagInfo(name=t.name, global_post_count=t.global_post_count) for t in tags]
    )


@router.get("/popular", response_model=PopularTagsResponse)
async def popular_tags(limit: int = Query(20)):
    tags = await get_service().popular_tags(limit)
    return PopularTagsResponse(
        tags=[TagInfo(name=t.name, global_post_count=t.global_post_count) for t in tags]
    )
