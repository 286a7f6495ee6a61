"""
Shared module - ORM base classes, service errors and helpers.
"""

from schoolbase.modules.shared.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ServiceError,
    ValidationFailedError,
)
from schoolbase.modules.shared.models import BaseModel, TimestampMixin

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "ServiceError",
    "ValidationFailedError",
    "NotFoundError",
    "ConflictError",
    "InvalidStateError",
]
