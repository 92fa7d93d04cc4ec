"""Identity resolution and ownership authorization."""

from .decorators import auth_required
from .identity import IdentityResolver, ResolvedIdentity
from .ownership import can_delete_comment, is_owner

__all__ = [
    "IdentityResolver",
    "ResolvedIdentity",
    "auth_required",
    "can_delete_comment",
    "is_owner",
]
