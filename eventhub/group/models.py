"""Data models for the group blueprint."""

from __future__ import annotations

from typing import Any, TypedDict

from eventhub.core.types import FirestoreDocument


class Group(FirestoreDocument, total=False):
    """A group (event) document in Firestore."""

    groupName: str
    description: str
    location: str
    maxMembers: int | str
    image: str
    formattedDate: str
    formatHour: str
    day: str
    category: str

    # Ownership, stamped once at creation
    userEmail: str
    userId: str
    creatorName: str
    creatorImage: str


class JoinRecord(TypedDict, total=False):
    """Membership of one user in one group."""

    id: str
    groupId: str
    userEmail: str
    userId: str
    joinedAt: Any


REQUIRED_GROUP_FIELDS = ("groupName", "description", "location", "maxMembers")
GROUP_DISPLAY_OWNERSHIP_FIELDS = ("creatorName", "creatorImage")
