"""Data models for the user blueprint."""

from __future__ import annotations

from eventhub.core.types import FirestoreDocument


class User(FirestoreDocument, total=False):
    """A user document in Firestore, keyed naturally by email."""

    email: str
    name: str
    photo: str
