"""
Tag registry: tag identities, item↔tag membership, and global usage counts.

The in-memory registry is built from content items (tag id = tag name); the
global post count of a tag is the number of active, published items carrying it.
Built with from_source, it rebuilds itself from the content store once its
snapshot is older than max_age_seconds, so tags track posts added later.
"""

import logging
import threading
import time
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Sequence, Set

from relevance.models.content import ContentItem
from relevance.models.tag import Tag, TagLink

logger = logging.getLogger(__name__)


class TagRegistry(Protocol):
    """Protocol for tag lookups used by tag retrieval and co-occurrence."""

    def resolve(self, names: Sequence[str]) -> List[Tag]:
        """Tags for the given names; unknown names are dropped."""
        ...

    def items_for_tags(self, tag_ids: Sequence[str]) -> List[TagLink]:
        """Membership rows for items carrying any of tag_ids."""
        ...

    def tags_for_items(self, item_ids: Sequence[str]) -> List[TagLink]:
        """Membership rows for every tag on the given items."""
        ...

    def get_tags(self, tag_ids: Sequence[str]) -> List[Tag]:
        ...

    def list_tags(self) -> List[Tag]:
        """Every known tag (used for suggestions and popular tags)."""
        ...


class InMemoryTagRegistry:
    def __init__(
        self,
        tags: Iterable[Tag] = (),
        links: Iterable[TagLink] = (),
        source: Optional[Callable[[], Iterable[ContentItem]]] = None,
        max_age_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._lock = threading.Lock()
        self._refresh_lock = threading.Lock()
        self._source = source
        self._max_age = max_age_seconds
        self._clock = clock
        self._load(list(tags), list(links))

    @classmethod
    def from_items(cls, items: Iterable[ContentItem]) -> "InMemoryTagRegistry":
        registry = cls()
        registry.refresh(items)
        return registry

    @classmethod
    def from_source(
        cls,
        source: Callable[[], Iterable[ContentItem]],
        max_age_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> "InMemoryTagRegistry":
        registry = cls(source=source, max_age_seconds=max_age_seconds, clock=clock)
        registry.refresh(source())
        return registry

    def refresh(self, items: Iterable[ContentItem]) -> None:
        """Rebuild tags, links and counts from content items."""
        counts: Dict[str, int] = {}
        links: List[TagLink] = []
        for item in items:
            for name in item.tags:
                counts.setdefault(name, 0)
                links.append(TagLink(item_id=item.id, tag_id=name))
                if item.is_active and not item.is_draft:
                    counts[name] += 1
        tags = [Tag(id=name, name=name, global_post_count=n) for name, n in counts.items()]
        self._load(tags, links)

    def _load(self, tags: List[Tag], links: List[TagLink]) -> None:
        by_tag: Dict[str, List[TagLink]] = {}
        by_item: Dict[str, List[TagLink]] = {}
        for link in links:
            by_tag.setdefault(link.tag_id, []).append(link)
            by_item.setdefault(link.item_id, []).append(link)
        with self._lock:
            self._loaded_at = self._clock()
            self._tags = {t.id: t for t in tags}
            self._by_name = {t.name: t for t in tags}
            self._by_tag = by_tag
            self._by_item = by_item

    def _stale(self) -> bool:
        if self._source is None or self._max_age is None:
            return False
        return self._clock() - self._loaded_at >= self._max_age

    def _ensure_fresh(self) -> None:
        if not self._stale():
            return
        with self._refresh_lock:
            if not self._stale():
                return
            try:
                items = list(self._source())
            except Exception as e:
                logger.warning("[tags] REFRESH_FAILED keeping previous snapshot: %s", e)
                return
            self.refresh(items)
            logger.info("[tags] REFRESHED tags=%d", len(self._tags))

    def resolve(self, names: Sequence[str]) -> List[Tag]:
        self._ensure_fresh()
        out: List[Tag] = []
        seen: Set[str] = set()
        for name in names:
            tag = self._by_name.get(name)
            if tag is not None and tag.id not in seen:
                seen.add(tag.id)
                out.append(tag)
        return out

    def items_for_tags(self, tag_ids: Sequence[str]) -> List[TagLink]:
        self._ensure_fresh()
        return [link for tag_id in dict.fromkeys(tag_ids) for link in self._by_tag.get(tag_id, [])]

    def tags_for_items(self, item_ids: Sequence[str]) -> List[TagLink]:
        self._ensure_fresh()
        return [link for item_id in dict.fromkeys(item_ids) for link in self._by_item.get(item_id, [])]

    def get_tags(self, tag_ids: Sequence[str]) -> List[Tag]:
        self._ensure_fresh()
        return [self._tags[t] for t in dict.fromkeys(tag_ids) if t in self._tags]

    def list_tags(self) -> List[Tag]:
        self._ensure_fresh()
        return list(self._tags.values())
