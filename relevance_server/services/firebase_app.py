"""
Shared Firebase app setup for the Firestore-backed stores.

All Firestore stores reuse one firebase_admin app (same credentials_path and
project_id), initialized on first use.
"""

from pathlib import Path
from typing import Optional, Union


def firestore_client(
    project_id: Optional[str] = None,
    credentials_path: Optional[Union[Path, str]] = None,
):
    try:
        import firebase_admin
        from firebase_admin import credentials, firestore
    except ImportError:
        raise ImportError(
            "firebase-admin is required for DATA_SOURCE=firebase. pip install firebase-admin"
        )
    if not firebase_admin._apps:
        opts = {"projectId": project_id} if project_id else None
        if credentials_path:
            cred = credentials.Certificate(str(Path(credentials_path).resolve()))
            firebase_admin.initialize_app(cred, opts)
        else:
            firebase_admin.initialize_app(options=opts)
    return firestore.client()
