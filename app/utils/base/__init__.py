from app.utils.base.enums import BaseEnum, PostSort, UserRole
from app.utils.base.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

__all__ = [
    "BaseEnum",
    "PostSort",
    "UserRole",
    "ConflictError",
    "ForbiddenError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationError",
]
