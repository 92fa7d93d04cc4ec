"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400, payload=None):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}

    def to_dict(self):
        """Return the JSON error envelope for this error."""
        body = {"success": False, "error": self.message}
        body.update(self.payload)
        return body


class ValidationError(AppError):
    """Raised when user input or an id fails validation."""

    def __init__(self, message="Validation failed.", payload=None):
        """Initialize the error."""
        super().__init__(message, 400, payload)


class UnauthenticatedError(AppError):
    """Raised when a request carries no usable credentials."""

    def __init__(self, message="Unauthorized: Authentication failed", payload=None):
        """Initialize the error."""
        super().__init__(message, 401, payload)


class InvalidTokenError(UnauthenticatedError):
    """Raised when a bearer token was supplied but could not be verified."""

    def __init__(
        self,
        message="Unauthorized: Please log in again. Token verification failed.",
        payload=None,
    ):
        """Initialize the error."""
        super().__init__(message, payload)


class ForbiddenError(AppError):
    """Raised when the caller does not own the resource."""

    def __init__(self, message="Forbidden.", payload=None):
        """Initialize the error."""
        super().__init__(message, 403, payload)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found.", payload=None):
        """Initialize the error."""
        super().__init__(message, 404, payload)


class DuplicateResourceError(AppError):
    """Raised when trying to create a resource that already exists."""

    def __init__(self, message="Resource already exists.", payload=None):
        """Initialize the error."""
        super().__init__(message, 409, payload)


class ServiceUnavailableError(AppError):
    """Raised when the document store cannot be reached."""

    def __init__(self, message="Database connection not available", payload=None):
        """Initialize the error."""
        super().__init__(message, 503, payload)
