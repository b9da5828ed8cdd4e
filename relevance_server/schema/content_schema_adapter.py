"""
Content schema adapter: convert store records → ContentItem.

Supports:
- rich post format (snake_case): trust_score, source_type, published_date,
  view_count, is_draft, categories: {name}, post_tags: [{tags: {name}}]
- legacy flat format (camelCase): trustScore, sourceType, collectedDate /
  publishedDate, viewCount, likeCount, bookmarkCount, isActive, tags: [...]

Output dict is valid for relevance.models.content.ContentItem.model_validate().
"""

from typing import Any, Dict, List

from relevance.models.content import ContentItem

_CAMEL_TO_SNAKE = {
    "trustScore": "trust_score",
    "sourceType": "source_type",
    "publishedDate": "published_date",
    "collectedDate": "published_date",
    "viewCount": "view_count",
    "likeCount": "like_count",
    "bookmarkCount": "bookmark_count",
    "isActive": "is_active",
    "isDraft": "is_draft",
}


def is_legacy_format(doc: Dict[str, Any]) -> bool:
    """Detect camelCase legacy records."""
    return any(key in doc for key in _CAMEL_TO_SNAKE)


def _extract_tags(doc: Dict[str, Any]) -> List[str]:
    post_tags = doc.get("post_tags")
    if isinstance(post_tags, list):
        names = []
        for pt in post_tags:
            tag = pt.get("tags") if isinstance(pt, dict) else None
            name = tag.get("name") if isinstance(tag, dict) else None
            if name:
                names.append(name)
        return names
    tags = doc.get("tags")
    if isinstance(tags, list):
        names = [t.get("name") if isinstance(t, dict) else t for t in tags]
        return [name for name in names if name]
    return tags or []


def _extract_published(doc: Dict[str, Any]) -> Any:
    # publishedDate wins over collectedDate; blank or null dates leave the item undated
    for key in ("published_date", "publishedDate", "collectedDate"):
        value = doc.get(key)
        if value not in (None, ""):
            return value
    return None


def _extract_category(doc: Dict[str, Any]) -> str:
    category = doc.get("category")
    if isinstance(category, str) and category:
        return category
    nested = doc.get("categories")
    if isinstance(nested, dict):
        return nested.get("name") or ""
    return doc.get("category_id") or ""


def to_content_dict(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize one stored record into ContentItem fields."""
    out: Dict[str, Any] = {}
    for key, value in doc.items():
        target = _CAMEL_TO_SNAKE.get(key, key)
        if target == "published_date":
            continue
        out[target] = value
    out["published_date"] = _extract_published(doc)
    out["id"] = str(doc.get("id", ""))
    out["category"] = _extract_category(doc)
    out["tags"] = _extract_tags(doc)
    for counter in ("view_count", "like_count", "bookmark_count"):
        if out.get(counter) is None:
            out[counter] = 0
    return out


def to_content_item(doc: Dict[str, Any]) -> ContentItem:
    return ContentItem.model_validate(to_content_dict(doc))


def content_item_to_document(item: ContentItem) -> Dict[str, Any]:
    return item.model_dump(mode="json")
