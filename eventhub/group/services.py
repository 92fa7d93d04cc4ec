"""Service layer for groups and group membership."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from firebase_admin import firestore

from eventhub.constants import (
    DEFAULT_CATEGORY,
    GROUP_PLACEHOLDER_IMAGE,
    GROUPS_COLLECTION,
    JOINED_GROUPS_COLLECTION,
    OWNERSHIP_IDENTITY_FIELDS,
    PROTECTED_FIELDS,
    UNKNOWN_CREATOR_NAME,
)
from eventhub.core.lifecycle import (
    delete_owned,
    insert_owned,
    load_document,
    require_fields,
    strip_fields,
    update_owned,
)
from eventhub.errors import DuplicateResourceError, NotFoundError, ValidationError
from eventhub.utils import (
    delete_where,
    is_valid_document_id,
    require_document_id,
    to_public,
    utcnow_iso,
)

from .models import GROUP_DISPLAY_OWNERSHIP_FIELDS, REQUIRED_GROUP_FIELDS

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from eventhub.auth.identity import ResolvedIdentity


class GroupService:
    """Service class for group-related operations."""

    @staticmethod
    def create_group(
        db: Client, body: dict[str, Any], identity: ResolvedIdentity
    ) -> str:
        """Create a group owned by ``identity`` and return its id."""
        require_fields(body, REQUIRED_GROUP_FIELDS)

        group_data = strip_fields(
            body, (*OWNERSHIP_IDENTITY_FIELDS, *PROTECTED_FIELDS)
        )
        group_data["userEmail"] = identity.email
        group_data["userId"] = identity.subject_id
        if not group_data.get("creatorName"):
            group_data["creatorName"] = identity.display_name or UNKNOWN_CREATOR_NAME
        if not group_data.get("creatorImage"):
            group_data["creatorImage"] = GROUP_PLACEHOLDER_IMAGE
        if not group_data.get("category"):
            group_data["category"] = DEFAULT_CATEGORY

        return insert_owned(db, GROUPS_COLLECTION, group_data)

    @staticmethod
    def list_groups(db: Client, user_email: str | None = None) -> list[dict[str, Any]]:
        """Fetch all groups, or only those created by ``user_email``."""
        query = db.collection(GROUPS_COLLECTION)
        if user_email:
            query = query.where(
                filter=firestore.FieldFilter("userEmail", "==", user_email)
            )
        return [to_public(doc) for doc in query.stream() if doc.exists]

    @staticmethod
    def get_group(db: Client, group_id: str) -> dict[str, Any]:
        """Fetch one group."""
        require_document_id(group_id, "group ID")
        snapshot = db.collection(GROUPS_COLLECTION).document(group_id).get()
        if not snapshot.exists:
            raise NotFoundError("Group not found")
        return to_public(snapshot)

    @staticmethod
    def get_groups_by_ids(db: Client, ids: Any) -> list[dict[str, Any]]:
        """Batch fetch groups, preserving the requested order."""
        if not ids or not isinstance(ids, list):
            raise ValidationError("Invalid group IDs")

        invalid_ids = [i for i in ids if not is_valid_document_id(i)]
        if invalid_ids:
            raise ValidationError(
                "Invalid group ID format", {"invalidIds": invalid_ids}
            )

        collection = db.collection(GROUPS_COLLECTION)
        refs = [collection.document(i) for i in dict.fromkeys(ids)]
        found = {doc.id: to_public(doc) for doc in db.get_all(refs) if doc.exists}
        return [found[i] for i in dict.fromkeys(ids) if i in found]

    @staticmethod
    def update_group(
        db: Client, group_id: str, body: dict[str, Any], identity: ResolvedIdentity
    ) -> None:
        """Apply a partial update to a group the caller owns."""
        update_owned(
            db,
            GROUPS_COLLECTION,
            group_id,
            body,
            identity,
            "Group",
            immutable_fields=GROUP_DISPLAY_OWNERSHIP_FIELDS,
        )

    @staticmethod
    def delete_group(db: Client, group_id: str, identity: ResolvedIdentity) -> None:
        """Delete a group the caller owns along with its join records."""
        delete_owned(
            db,
            GROUPS_COLLECTION,
            group_id,
            identity,
            "Group",
            cascade=GroupService.delete_group_joins,
        )

    @staticmethod
    def delete_group_joins(db: Client, group_id: str) -> int:
        """Remove every join record pointing at ``group_id``."""
        return delete_where(db, JOINED_GROUPS_COLLECTION, "groupId", group_id)

    @staticmethod
    def _find_join_ids(db: Client, group_id: str, user_email: str) -> list[str]:
        query = (
            db.collection(JOINED_GROUPS_COLLECTION)
            .where(filter=firestore.FieldFilter("groupId", "==", group_id))
            .where(filter=firestore.FieldFilter("userEmail", "==", user_email))
        )
        return [doc.id for doc in query.stream() if doc.exists]

    @staticmethod
    def join_group(db: Client, group_id: Any, identity: ResolvedIdentity) -> str:
        """Record that ``identity`` joined a group; return the record id."""
        if not group_id:
            raise ValidationError("Group ID is required")
        require_document_id(group_id, "group ID")

        if GroupService._find_join_ids(db, group_id, identity.email):
            raise DuplicateResourceError("Already joined")

        load_document(db, GROUPS_COLLECTION, group_id, "Group")

        join_record = {
            "groupId": group_id,
            "userEmail": identity.email,
            "userId": identity.subject_id,
            "joinedAt": utcnow_iso(),
        }
        _, doc_ref = db.collection(JOINED_GROUPS_COLLECTION).add(join_record)
        return doc_ref.id

    @staticmethod
    def leave_group(db: Client, group_id: Any, identity: ResolvedIdentity) -> int:
        """Delete the caller's own join record(s) for a group."""
        if not group_id:
            raise ValidationError("Group ID is required")

        # Scoped by the caller's email so another member's record is never hit
        join_ids = GroupService._find_join_ids(db, group_id, identity.email)
        if not join_ids:
            raise NotFoundError("Join record not found")

        collection = db.collection(JOINED_GROUPS_COLLECTION)
        for join_id in join_ids:
            collection.document(join_id).delete()
        return len(join_ids)

    @staticmethod
    def get_joined_groups(db: Client, user_email: str | None) -> list[dict[str, Any]]:
        """Fetch the join records of one user."""
        if not user_email:
            raise ValidationError("User email is required")
        query = db.collection(JOINED_GROUPS_COLLECTION).where(
            filter=firestore.FieldFilter("userEmail", "==", user_email)
        )
        return [to_public(doc) for doc in query.stream() if doc.exists]
