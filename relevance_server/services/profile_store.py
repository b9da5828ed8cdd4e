"""
Profile store: persistence of per-user preferences and interaction lists.

Backends: in-memory (tests), JSON file, or Firestore depending on DATA_SOURCE.
Every backend returns canonical UserProfile objects; stored documents in older
layouts are migrated on read by the profile schema adapter.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Tuple, Union

from relevance.models.profile import UserProfile

from ..schema.profile_schema_adapter import profile_to_document, to_canonical_profile

logger = logging.getLogger(__name__)


class ProfileStore(Protocol):
    """Protocol for profile persistence. Implement for memory, JSON file or Firestore."""

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Stored profile, or None if the user has never been saved."""
        ...

    def save_profile(self, profile: UserProfile) -> None:
        """Insert or replace the profile document."""
        ...

    def list_profiles(self) -> List[UserProfile]:
        """Every stored profile (used for collaborative filtering)."""
        ...


def _valid_profiles(documents: Iterable[Tuple[str, Dict]]) -> List[UserProfile]:
    """Canonical profiles for (user_id, document) pairs; malformed documents are logged and skipped."""
    profiles = []
    for user_id, doc in documents:
        try:
            profiles.append(to_canonical_profile(doc, user_id))
        except (ValueError, TypeError) as e:
            logger.warning("[profiles] SKIP_INVALID user=%s: %s", user_id, e)
    return profiles


class InMemoryProfileStore:
    """Profile store backed by a dict of stored documents."""

    def __init__(self, documents: Optional[Dict[str, Dict]] = None):
        self._lock = threading.Lock()
        self._docs: Dict[str, Dict] = dict(documents or {})

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        doc = self._docs.get(user_id)
        if doc is None:
            return None
        return to_canonical_profile(doc, user_id)

    def save_profile(self, profile: UserProfile) -> None:
        with self._lock:
            self._docs[profile.user_id] = profile_to_document(profile)
        self._on_change()

    def list_profiles(self) -> List[UserProfile]:
        return _valid_profiles(list(self._docs.items()))

    def _on_change(self) -> None:
        pass


class JsonProfileStore(InMemoryProfileStore):
    """Profile store backed by a JSON file (e.g. data/profiles.json)."""

    def __init__(self, path: Union[Path, str]):
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(self._load())

    def _load(self) -> Dict[str, Dict]:
        if not self._path.exists():
            return {}
        with open(self._path) as f:
            data = json.load(f)
        profiles = data.get("profiles", data) if isinstance(data, dict) else data
        if isinstance(profiles, dict):
            return {uid: doc for uid, doc in profiles.items() if isinstance(doc, dict)}
        out: Dict[str, Dict] = {}
        for doc in profiles or []:
            uid = doc.get("user_id") or doc.get("userId") or doc.get("id")
            if uid:
                out[str(uid)] = doc
        return out

    def _on_change(self) -> None:
        with self._lock:
            out = {"profiles": dict(self._docs)}
            with open(self._path, "w") as f:
                json.dump(out, f, indent=2, ensure_ascii=False)


class FirestoreProfileStore:
    """Profile store backed by the Firestore 'user_preferences' collection (doc id = user_id)."""

    def __init__(
        self,
        project_id: Optional[str] = None,
        credentials_path: Optional[Union[Path, str]] = None,
        collection: str = "user_preferences",
    ):
        from .firebase_app import firestore_client

        self._db = firestore_client(project_id, credentials_path)
        self._coll = self._db.collection(collection)

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        doc = self._coll.document(user_id).get()
        if not doc.exists:
            return None
        return to_canonical_profile(doc.to_dict(), user_id)

    def save_profile(self, profile: UserProfile) -> None:
        self._coll.document(profile.user_id).set(profile_to_document(profile))

    def list_profiles(self) -> List[UserProfile]:
        return _valid_profiles((doc.id, doc.to_dict()) for doc in self._coll.stream())
