"""
Content Store abstraction.

Supplies content items by id, category, or id set, and bumps engagement
counters. Implementations: in-memory (tests/eval), JSON file, and a dual-source
store that unions a rich store with a legacy flat store.
"""

import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Tuple, Union

from pydantic import BaseModel, ConfigDict

from relevance.models.content import ContentItem
from relevance.stages.source_merge import merge_by_id

from ..schema.content_schema_adapter import content_item_to_document, to_content_item

logger = logging.getLogger(__name__)

COUNTER_FIELDS = ("view_count", "like_count", "bookmark_count")


class ContentQuery(BaseModel):
    """Filters for ContentStore.query. All filters are ANDed."""

    model_config = ConfigDict(frozen=True)

    ids: Optional[Tuple[str, ...]] = None
    category: Optional[str] = None
    min_trust_score: Optional[int] = None
    active_only: bool = True
    exclude_drafts: bool = True
    published_after: Optional[datetime] = None
    published_before: Optional[datetime] = None
    sort_by: str = "published_date"
    descending: bool = True
    limit: Optional[int] = None
    offset: int = 0

    def matches(self, item: ContentItem) -> bool:
        if self.ids is not None and item.id not in self.ids:
            return False
        if self.category is not None and item.category != self.category:
            return False
        if self.min_trust_score is not None and item.trust_score < self.min_trust_score:
            return False
        if self.active_only and not item.is_active:
            return False
        if self.exclude_drafts and item.is_draft:
            return False
        if self.published_after is not None and item.sort_date < self.published_after:
            return False
        if self.published_before is not None and item.sort_date >= self.published_before:
            return False
        return True

    def sort_key(self, item: ContentItem):
        if self.sort_by == "published_date":
            return item.sort_date
        return getattr(item, self.sort_by, item.sort_date)

    def apply(self, items: Iterable[ContentItem]) -> List[ContentItem]:
        """Filter, sort, and paginate."""
        matched = sorted(
            (i for i in items if self.matches(i)),
            key=self.sort_key,
            reverse=self.descending,
        )
        return self.paginate(matched)

    def paginate(self, items: List[ContentItem]) -> List[ContentItem]:
        if self.offset:
            items = items[self.offset:]
        if self.limit is not None:
            items = items[: self.limit]
        return items

    def cache_key(self) -> str:
        return self.model_dump_json()


class ContentStore(Protocol):
    """Protocol for content read access and counter updates."""

    def query(self, filters: ContentQuery) -> List[ContentItem]:
        """Items matching filters, sorted and paginated as requested."""
        ...

    def get_by_id(self, item_id: str) -> Optional[ContentItem]:
        """Item by id (active or not), or None."""
        ...

    def increment_counter(self, item_id: str, field: str) -> None:
        """Add one to view_count, like_count, or bookmark_count."""
        ...


class InMemoryContentStore:
    """
    Content store backed by a dict of items.
    Used for local testing, evaluation, and as the base of JsonContentStore.
    """

    def __init__(self, items: Iterable[Union[ContentItem, Dict]] = ()):
        self._lock = threading.Lock()
        self._items: Dict[str, ContentItem] = {}
        for item in items:
            typed = item if isinstance(item, ContentItem) else to_content_item(item)
            self._items[typed.id] = typed

    def all_items(self) -> List[ContentItem]:
        return list(self._items.values())

    def query(self, filters: ContentQuery) -> List[ContentItem]:
        return filters.apply(list(self._items.values()))

    def get_by_id(self, item_id: str) -> Optional[ContentItem]:
        return self._items.get(item_id)

    def has(self, item_id: str) -> bool:
        return item_id in self._items

    def increment_counter(self, item_id: str, field: str) -> None:
        if field not in COUNTER_FIELDS:
            raise ValueError(f"Unknown counter field: {field}")
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                raise KeyError(item_id)
            self._items[item_id] = item.model_copy(
                update={field: getattr(item, field) + 1}
            )
        self._on_change()

    def _on_change(self) -> None:
        pass


class JsonContentStore(InMemoryContentStore):
    """Content store backed by a JSON file (list of records or {"items": [...]})."""

    def __init__(self, path: Union[Path, str]):
        self._path = Path(path)
        if not self._path.exists():
            raise FileNotFoundError(f"Content JSON not found: {self._path}")
        with open(self._path) as f:
            data = json.load(f)
        records = data.get("items", []) if isinstance(data, dict) else data
        super().__init__(records)

    def _on_change(self) -> None:
        with self._lock:
            out = {"items": [content_item_to_document(i) for i in self._items.values()]}
            with open(self._path, "w") as f:
                json.dump(out, f, indent=2, ensure_ascii=False)


class DualSourceContentStore:
    """
    Rich primary store plus a legacy flat store, merged by id.

    A failing primary is logged and the legacy source still answers; reads
    prefer the richer record when both sources carry the same id.
    """

    def __init__(self, primary: ContentStore, legacy: ContentStore):
        self._primary = primary
        self._legacy = legacy

    def query(self, filters: ContentQuery) -> List[ContentItem]:
        unpaged = filters.model_copy(update={"limit": None, "offset": 0})
        try:
            primary = self._primary.query(unpaged)
        except Exception as e:
            logger.warning("[content] PRIMARY_QUERY_FAILED %s: %s", type(e).__name__, e)
            primary = []
        legacy = self._legacy.query(unpaged)
        merged = merge_by_id(primary, legacy, sort_key=filters.sort_key, descending=filters.descending)
        return filters.paginate(merged)

    def get_by_id(self, item_id: str) -> Optional[ContentItem]:
        try:
            item = self._primary.get_by_id(item_id)
        except Exception as e:
            logger.warning("[content] PRIMARY_GET_FAILED id=%s %s: %s", item_id, type(e).__name__, e)
            item = None
        legacy = self._legacy.get_by_id(item_id)
        if item is None or legacy is None:
            return item or legacy
        return merge_by_id([item], [legacy])[0]

    def increment_counter(self, item_id: str, field: str) -> None:
        if self._primary.get_by_id(item_id) is not None:
            self._primary.increment_counter(item_id, field)
            return
        self._legacy.increment_counter(item_id, field)


class FirestoreContentStore:
    """
    Content store backed by the Firestore 'posts' collection (doc id = item id).
    Filters beyond category are applied client-side with ContentQuery.
    """

    def __init__(
        self,
        project_id: Optional[str] = None,
        credentials_path: Optional[Union[Path, str]] = None,
        collection: str = "posts",
    ):
        from .firebase_app import firestore_client

        self._db = firestore_client(project_id, credentials_path)
        self._coll = self._db.collection(collection)

    def _doc_to_item(self, doc) -> ContentItem:
        return to_content_item({**doc.to_dict(), "id": doc.id})

    def query(self, filters: ContentQuery) -> List[ContentItem]:
        ref = self._coll
        if filters.category is not None:
            ref = ref.where("category", "==", filters.category)
        items = []
        for doc in ref.stream():
            try:
                items.append(self._doc_to_item(doc))
            except (ValueError, TypeError) as e:
                logger.warning("[content] SKIP_INVALID id=%s: %s", doc.id, e)
        return filters.apply(items)

    def get_by_id(self, item_id: str) -> Optional[ContentItem]:
        doc = self._coll.document(item_id).get()
        return self._doc_to_item(doc) if doc.exists else None

    def increment_counter(self, item_id: str, field: str) -> None:
        from firebase_admin import firestore

        if field not in COUNTER_FIELDS:
            raise ValueError(f"Unknown counter field: {field}")
        self._coll.document(item_id).update({field: firestore.Increment(1)})
