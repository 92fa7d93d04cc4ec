"""Utility functions for the application."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any

from firebase_admin import firestore
from flask import request

from .constants import FIRESTORE_BATCH_LIMIT, MAX_DOCUMENT_ID_BYTES
from .errors import ValidationError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


def utcnow() -> datetime.datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def utcnow_iso() -> str:
    """Return the current time as an ISO-8601 string with millisecond precision."""
    return utcnow().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_valid_document_id(value: Any) -> bool:
    """Return True if ``value`` can name a Firestore document."""
    if not isinstance(value, str) or not value:
        return False
    if "/" in value or value in (".", ".."):
        return False
    if value.startswith("__") and value.endswith("__"):
        return False
    return len(value.encode("utf-8")) <= MAX_DOCUMENT_ID_BYTES


def require_document_id(value: Any, label: str = "ID") -> str:
    """Validate an id taken from the path or body."""
    if not is_valid_document_id(value):
        raise ValidationError(f"Invalid {label} format")
    return value


def get_json_body() -> dict[str, Any]:
    """Return the request body as a dict, rejecting anything else."""
    body = request.get_json(silent=True)
    if body is None:
        if request.get_data(cache=True).strip():
            raise ValidationError("Request body must be valid JSON")
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def to_public(doc: DocumentSnapshot) -> dict[str, Any]:
    """Convert a snapshot to a JSON-serializable dict carrying its id."""
    data = doc.to_dict() or {}
    for key, value in data.items():
        if isinstance(value, datetime.datetime):
            data[key] = value.isoformat()
    data["id"] = doc.id
    data["_id"] = doc.id
    return data


def sort_newest_first(items: list[dict[str, Any]], *keys: str) -> None:
    """Sort dicts in place, descending by ``keys``; missing values sort last."""
    items.sort(
        key=lambda item: tuple(str(item.get(k) or "") for k in keys), reverse=True
    )


def delete_where(db: Client, collection: str, field: str, value: Any) -> int:
    """Delete every document in ``collection`` whose ``field`` equals ``value``."""
    collection_ref = db.collection(collection)
    query = collection_ref.where(filter=firestore.FieldFilter(field, "==", value))
    doc_ids = [doc.id for doc in query.stream() if doc.exists]

    for i in range(0, len(doc_ids), FIRESTORE_BATCH_LIMIT):
        batch = db.batch()
        for doc_id in doc_ids[i : i + FIRESTORE_BATCH_LIMIT]:
            batch.delete(collection_ref.document(doc_id))
        batch.commit()
    return len(doc_ids)
