"""Resolve request credentials into a trusted identity.

Two credential sources are accepted. A Firebase ID token in the
``Authorization: Bearer`` header is verified with the Firebase Admin SDK. A
pair of fallback headers (``X-User-Email`` and ``X-User-UID``) is trusted
without verification so the API keeps working when token verification is
unavailable. When both are sent the fallback headers win and the token is not
verified at all. This is a deliberate availability trade-off and weakens
authentication to whatever the caller claims; deployments exposed to
untrusted clients should strip those headers at the edge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping

from firebase_admin import auth
from flask import current_app

from eventhub.constants import FALLBACK_EMAIL_HEADERS, FALLBACK_UID_HEADERS
from eventhub.errors import InvalidTokenError, UnauthenticatedError

if TYPE_CHECKING:
    from werkzeug.datastructures import Headers

TokenVerifier = Callable[[str], Mapping[str, Any]]

VERIFICATION_ERRORS = (
    auth.InvalidIdTokenError,
    auth.CertificateFetchError,
    auth.UserDisabledError,
    ValueError,
)


@dataclass(frozen=True)
class ResolvedIdentity:
    """The caller of the current request."""

    subject_id: str
    email: str
    display_name: str


def email_local_part(email: str) -> str:
    """Return the part of ``email`` before the ``@``."""
    return email.split("@")[0]


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer`` header value."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[len("Bearer ") :].strip() or None


def _first_header(headers: Headers, names: tuple[str, ...]) -> str | None:
    for name in names:
        value = headers.get(name)
        if value:
            return value
    return None


class IdentityResolver:
    """Turn credentials into a ``ResolvedIdentity`` or raise a 401 error."""

    def __init__(self, verify_token: TokenVerifier | None = None) -> None:
        self._verify_token = verify_token

    @property
    def verification_available(self) -> bool:
        """Return True if bearer tokens can be verified."""
        return self._verify_token is not None

    def resolve_headers(self, headers: Headers) -> ResolvedIdentity:
        """Resolve the identity carried by request headers."""
        return self.resolve(
            bearer_token(headers.get("Authorization")),
            _first_header(headers, FALLBACK_EMAIL_HEADERS),
            _first_header(headers, FALLBACK_UID_HEADERS),
        )

    def resolve(
        self,
        token: str | None,
        claimed_email: str | None = None,
        claimed_uid: str | None = None,
    ) -> ResolvedIdentity:
        """Resolve an identity, trusting fallback claims before the token."""
        if claimed_email and claimed_uid:
            current_app.logger.info(f"Authenticated via headers: {claimed_email}")
            return ResolvedIdentity(
                subject_id=claimed_uid,
                email=claimed_email,
                display_name=email_local_part(claimed_email),
            )

        if token and self._verify_token is not None:
            identity = self._verify(token)
            if identity is not None:
                current_app.logger.info(
                    f"Authenticated via Firebase token: {identity.email}"
                )
                return identity

        if not token and not claimed_email:
            raise UnauthenticatedError(
                "Unauthorized: Please log in again. "
                "No authentication token or user info provided.",
                {
                    "hint": "Include Authorization header with Bearer token, "
                    "or X-User-Email and X-User-UID headers",
                },
            )
        if token and not claimed_email:
            raise InvalidTokenError(
                payload={
                    "hint": "Try including X-User-Email and X-User-UID headers "
                    "as fallback",
                },
            )
        raise UnauthenticatedError()

    def _verify(self, token: str) -> ResolvedIdentity | None:
        try:
            claims = self._verify_token(token)  # type: ignore[misc]
        except VERIFICATION_ERRORS as e:
            current_app.logger.warning(f"Firebase token verification failed: {e}")
            return None

        email = claims.get("email")
        if not email:
            current_app.logger.warning("Verified token carries no email claim")
            return None
        return ResolvedIdentity(
            subject_id=claims["uid"],
            email=email,
            display_name=claims.get("name") or email_local_part(email),
        )
