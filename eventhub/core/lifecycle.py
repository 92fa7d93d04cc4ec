"""Create, update and delete steps shared by every owned resource kind."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterable

from flask import current_app

from eventhub.auth.ownership import is_owner
from eventhub.constants import (
    FIELD_PATH_CHARACTERS,
    OWNERSHIP_IDENTITY_FIELDS,
    PROTECTED_FIELDS,
)
from eventhub.errors import ForbiddenError, NotFoundError, ValidationError
from eventhub.utils import require_document_id, utcnow_iso

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from eventhub.auth.identity import ResolvedIdentity


def strip_fields(body: dict[str, Any], fields: Iterable[str]) -> dict[str, Any]:
    """Return a copy of ``body`` without ``fields``."""
    excluded = set(fields)
    return {k: v for k, v in body.items() if k not in excluded}


def reject_field_paths(body: dict[str, Any]) -> None:
    """Reject keys that ``update()`` would read as nested or quoted paths."""
    invalid = [
        key
        for key in body
        if not isinstance(key, str)
        or not key
        or FIELD_PATH_CHARACTERS.intersection(key)
    ]
    if invalid:
        raise ValidationError("Invalid field name", {"invalidFields": invalid})


def require_fields(body: dict[str, Any], fields: Iterable[str]) -> None:
    """Raise ``ValidationError`` naming the first missing required field."""
    for field in fields:
        value = body.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"{field} is required")


def load_document(
    db: Client, collection: str, doc_id: Any, label: str
) -> dict[str, Any]:
    """Fetch a document by id or raise 400/404."""
    require_document_id(doc_id, f"{label.lower()} ID")
    snapshot = db.collection(collection).document(doc_id).get()
    if not snapshot.exists:
        raise NotFoundError(f"{label} not found")
    data = snapshot.to_dict() or {}
    data["id"] = snapshot.id
    return data


def insert_owned(db: Client, collection: str, data: dict[str, Any]) -> str:
    """Stamp ``createdAt`` and insert; return the new id."""
    data["createdAt"] = utcnow_iso()
    _, doc_ref = db.collection(collection).add(data)
    return doc_ref.id


def update_owned(  # noqa: PLR0913
    db: Client,
    collection: str,
    doc_id: str,
    body: dict[str, Any],
    identity: ResolvedIdentity,
    label: str,
    immutable_fields: Iterable[str] = (),
) -> dict[str, Any]:
    """Apply a partial update to a document the caller owns."""
    existing = load_document(db, collection, doc_id, label)
    if not is_owner(existing, identity):
        raise ForbiddenError(
            f"Forbidden: You can only update your own {label.lower()}s"
        )

    reject_field_paths(body)
    changes = strip_fields(
        body, (*OWNERSHIP_IDENTITY_FIELDS, *PROTECTED_FIELDS, *immutable_fields)
    )
    changes["updatedAt"] = utcnow_iso()
    db.collection(collection).document(doc_id).update(changes)
    return changes


def delete_owned(  # noqa: PLR0913
    db: Client,
    collection: str,
    doc_id: str,
    identity: ResolvedIdentity,
    label: str,
    cascade: Callable[[Client, str], int] | None = None,
) -> None:
    """Delete a document the caller owns, then run its cascade best-effort."""
    existing = load_document(db, collection, doc_id, label)
    if not is_owner(existing, identity):
        raise ForbiddenError(
            f"Forbidden: You can only delete your own {label.lower()}s"
        )

    db.collection(collection).document(doc_id).delete()
    if cascade is None:
        return

    try:
        removed = cascade(db, doc_id)
    except Exception as e:
        current_app.logger.error(
            f"Cascade delete after removing {label.lower()} {doc_id} failed: {e}"
        )
        return
    current_app.logger.info(
        f"Removed {removed} dependent record(s) of {label.lower()} {doc_id}"
    )
