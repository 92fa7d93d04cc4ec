"""Ownership checks shared by groups, articles and comments."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from eventhub.constants import ARTICLES_COLLECTION, OWNERSHIP_FIELD_PAIRS
from eventhub.utils import is_valid_document_id

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from .identity import ResolvedIdentity


def is_owner(resource: Mapping[str, Any], identity: ResolvedIdentity) -> bool:
    """Return True if ``identity`` created ``resource``.

    Resource kinds record their owner under different field names, so every
    convention is probed regardless of kind: emails first, then subject ids.
    Absent or empty fields never match.
    """
    for email_field, _ in OWNERSHIP_FIELD_PAIRS:
        value = resource.get(email_field)
        if value and value == identity.email:
            return True
    for _, id_field in OWNERSHIP_FIELD_PAIRS:
        value = resource.get(id_field)
        if value and value == identity.subject_id:
            return True
    return False


def can_delete_comment(
    db: Client, comment: Mapping[str, Any], identity: ResolvedIdentity
) -> bool:
    """Allow the comment's author, or the author of the article it is on."""
    if is_owner(comment, identity):
        return True

    article_id = comment.get("articleId")
    if not is_valid_document_id(article_id):
        return False
    article = db.collection(ARTICLES_COLLECTION).document(article_id).get()
    return bool(article.exists and is_owner(article.to_dict() or {}, identity))
