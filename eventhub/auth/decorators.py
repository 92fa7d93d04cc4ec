"""Decorators for authenticated routes."""

from functools import wraps

from flask import current_app, g, request


def auth_required(f):
    """Resolve the caller's identity into ``g.identity`` or respond 401.

    Usage:
    @auth_required
    def protected_view():
        ...
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        resolver = current_app.extensions["identity_resolver"]
        g.identity = resolver.resolve_headers(request.headers)
        return f(*args, **kwargs)

    return decorated_function
