"""Store-boundary schema adapters: stored records → canonical engine models."""

from .content_schema_adapter import content_item_to_document, is_legacy_format, to_content_item
from .profile_schema_adapter import is_canonical_profile, profile_to_document, to_canonical_profile

__all__ = [
    "content_item_to_document",
    "is_canonical_profile",
    "is_legacy_format",
    "profile_to_document",
    "to_canonical_profile",
    "to_content_item",
]
