"""Public interface for the Firestore REST adapter."""

from __future__ import annotations

from .client import FirestoreAPIError, FirestoreClient
from .codec import decode_fields, decode_value, encode_fields, encode_value
from .repositories import (
    CATEGORIES_COLLECTION,
    LEVELS_COLLECTION,
    PLATFORMS_COLLECTION,
    RUNS_COLLECTION,
    FirestoreReferenceDataRepository,
    FirestoreRunRepository,
)
from .schema import FirestoreDocument, ListDocumentsResponse, RunQueryItem

__all__ = [
    "CATEGORIES_COLLECTION",
    "LEVELS_COLLECTION",
    "PLATFORMS_COLLECTION",
    "RUNS_COLLECTION",
    "FirestoreAPIError",
    "FirestoreClient",
    "FirestoreDocument",
    "FirestoreReferenceDataRepository",
    "FirestoreRunRepository",
    "ListDocumentsResponse",
    "RunQueryItem",
    "decode_fields",
    "decode_value",
    "encode_fields",
    "encode_value",
]
