"""
Profile schema adapter: convert stored preference/interaction records → UserProfile.

Supports:
- Canonical format: {user_id, preferences: {categories, keywords, source_types,
  min_trust_score, language}, interactions: {bookmarks, likes, views}}
- Legacy camelCase format: {userId, preferences: {sourceTypes, minTrustScore, ...}, ...}
- Legacy flat format: preference and interaction fields at the top level
- Singular interaction keys (bookmark/like/view) and comma-separated strings

Output is always a validated UserProfile; the engine never sees other shapes.
"""

from typing import Any, Dict, Optional

from relevance.models.profile import Interactions, Preferences, UserProfile

_PREFERENCE_KEYS = {
    "categories": "categories",
    "keywords": "keywords",
    "source_types": "source_types",
    "sourceTypes": "source_types",
    "min_trust_score": "min_trust_score",
    "minTrustScore": "min_trust_score",
    "language": "language",
}

_INTERACTION_KEYS = {
    "bookmarks": "bookmarks",
    "bookmark": "bookmarks",
    "likes": "likes",
    "like": "likes",
    "views": "views",
    "view": "views",
}


def is_canonical_profile(doc: Dict[str, Any]) -> bool:
    """True if the document already uses the canonical nested snake_case layout."""
    prefs = doc.get("preferences")
    inter = doc.get("interactions")
    if not isinstance(prefs, dict) or not isinstance(inter, dict):
        return False
    return "sourceTypes" not in prefs and "minTrustScore" not in prefs and all(
        k in ("bookmarks", "likes", "views") for k in inter
    )


def _pick(source: Dict[str, Any], mapping: Dict[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, target in mapping.items():
        if key in source and source[key] is not None and target not in out:
            out[target] = source[key]
    return out


def to_canonical_profile(doc: Optional[Dict[str, Any]], user_id: str) -> UserProfile:
    """
    Migrate any stored layout to UserProfile.

    Missing preference fields take the defaults of a new profile; the user_id
    argument wins over any id stored in the document.
    """
    if not doc:
        return UserProfile.default(user_id)
    if is_canonical_profile(doc):
        return UserProfile.model_validate({**doc, "user_id": user_id})

    prefs_src = doc.get("preferences") if isinstance(doc.get("preferences"), dict) else doc
    inter_src = doc.get("interactions") if isinstance(doc.get("interactions"), dict) else doc

    prefs = Preferences.model_validate(_pick(prefs_src, _PREFERENCE_KEYS))
    interactions = Interactions.model_validate(_pick(inter_src, _INTERACTION_KEYS))
    return UserProfile(user_id=user_id, preferences=prefs, interactions=interactions)


def profile_to_document(profile: UserProfile) -> Dict[str, Any]:
    """Canonical JSON-safe document for persistence."""
    return profile.model_dump(mode="json")
