"""
Service Errors

Every service raises a subclass of ``ServiceError``. Routers translate them
into the response envelope: ``error`` carries the short title and
``message`` the detail shown to the caller.
"""


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(
        self,
        error: str,
        message: str | None = None,
        *,
        error_code: str = "BAD_REQUEST",
        status_code: int = 400,
    ):
        self.error = error
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message or error)


class ValidationFailedError(ServiceError):
    """Raised for malformed or missing input that the schema layer could not catch."""

    def __init__(self, error: str = "Validation failed", message: str | None = None):
        super().__init__(error, message, error_code="VALIDATION_FAILED", status_code=400)


class NotFoundError(ServiceError):
    """
    Raised when an entity does not exist or belongs to another tenant.

    Cross-tenant lookups use this error as well so that the existence of
    another school's data is never revealed.
    """

    def __init__(self, message: str = "Resource not found"):
        super().__init__("Not Found", message, error_code="NOT_FOUND", status_code=404)


class ConflictError(ServiceError):
    """Raised on uniqueness violations and blocked deletions."""

    def __init__(self, error: str, message: str | None = None):
        super().__init__(error, message, error_code="CONFLICT", status_code=409)


class InvalidStateError(ConflictError):
    """Raised when an entity is not in the state an operation requires."""

    def __init__(self, error: str, message: str | None = None):
        super().__init__(error, message)
        self.error_code = "INVALID_STATE"
