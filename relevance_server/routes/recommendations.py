"""Personalized, collaborative, and related-content endpoints."""

from fastapi import APIRouter, Query

from ..models import (
    CollaborativeResponse,
    IntegratedItem,
    IntegratedResponse,
    PersonalizedItem,
    PersonalizedResponse,
)
from ..state import get_service

router = APIRouter()


@router.get("/personalized/{user_id}", response_model=PersonalizedResponse)
async def personalized(user_id: str, limit: int = Query(10)):
    scored = await get_service().recommend_personalized(user_id, limit)
    return PersonalizedResponse(
        user_id=user_id,
        items=[PersonalizedItem(item=s.item, score=s.score, breakdown=s.breakdown) for s in scored],
    )


@router.get("/collaborative/{user_id}", response_model=CollaborativeResponse)
async def collaborative(user_id: str, limit: int = Query(10)):
    items = await get_service().recommend_collaborative(user_id, limit)
    return CollaborativeResponse(user_id=user_id, items=items)


@router.get("/related/{item_id}", response_model=IntegratedResponse)
async def related(item_id: str, limit: int = Query(10)):
    """Category + tag related items for one item (the item itself is never returned)."""
    candidates = await get_service().recommend_by_id(item_id, limit)
    return IntegratedResponse(
        item_id=item_id,
        items=[
            IntegratedItem(
                item=c.item,
                final_score=c.final_score,
                relevance_score=c.relevance_score,
                category_match=c.category_match,
                tag_match=c.tag_match,
                matching_tags=c.matching_tags,
                recommendation_sources=c.recommendation_sources,
                reason=c.reason,
            )
            for c in candidates
        ],
    )
