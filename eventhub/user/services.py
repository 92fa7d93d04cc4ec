"""Service layer for user records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from firebase_admin import firestore

from eventhub.constants import AVATAR_PLACEHOLDER, DEFAULT_USER_NAME, USERS_COLLECTION
from eventhub.errors import ValidationError
from eventhub.utils import utcnow

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


class UserService:
    """Service class for user-related operations."""

    @staticmethod
    def save_user(db: Client, body: dict[str, Any]) -> tuple[str, bool]:
        """Upsert a user by email; return ``(id, created)``.

        ``createdAt`` is written only on the first save so the dashboard
        counts each user once, on the day they first logged in.
        """
        email = body.get("email")
        if not email or not isinstance(email, str):
            raise ValidationError("Email is required")

        now = utcnow()
        user_data = {
            "email": email,
            "name": body.get("name") or DEFAULT_USER_NAME,
            "photo": body.get("photo") or AVATAR_PLACEHOLDER,
            "updatedAt": now,
        }

        users_ref = db.collection(USERS_COLLECTION)
        existing = [
            doc
            for doc in users_ref.where(
                filter=firestore.FieldFilter("email", "==", email)
            )
            .limit(1)
            .stream()
            if doc.exists
        ]
        if existing:
            users_ref.document(existing[0].id).update(user_data)
            return existing[0].id, False

        user_data["createdAt"] = now
        _, doc_ref = users_ref.add(user_data)
        return doc_ref.id, True

    @staticmethod
    def count_users(db: Client) -> int:
        """Return the number of stored users."""
        return db.collection(USERS_COLLECTION).count().get()[0][0].value
