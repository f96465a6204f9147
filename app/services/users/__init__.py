from __future__ import annotations

from pydantic import BaseModel, Field

from app.models.user import User
from app.services.auth import create_account, find_user
from app.utils.base import ForbiddenError, NotFoundError, UserRole
from app.utils.logger import logger


USER_NOT_FOUND = "User not found"


class ProfileChanges(BaseModel):
    name: str | None = Field(default=None, min_length=2)
    surname: str | None = Field(default=None, min_length=2)
    bio: str | None = Field(default=None, max_length=200)


class NewUserData(BaseModel):
    """Admin signup body. Field rules are applied by `create_account`."""
    name: str | None = None
    surname: str | None = None
    email: str | None = None
    username: str | None = None
    password: str | None = None
    birthdate: str | None = None
    bio: str = ""
    role: UserRole = UserRole.USER


def _get_user(user_id: str) -> User:
    user = find_user(user_id)
    if not user:
        raise NotFoundError(USER_NOT_FOUND)
    return user


def get_profile(user: User) -> dict:
    return user.to_output()


def update_profile(user: User, changes: ProfileChanges, profile_image: str | None = None) -> dict:
    for field, value in changes.model_dump(exclude_none=True).items():
        setattr(user, field, value)
    if profile_image:
        user.profile_image = profile_image
    user.save()
    return user.to_output()


def list_users(offset: int = 0, limit: int = 20) -> list[dict]:
    users = User.objects.order_by("-created_at", "-id").skip(offset).limit(limit)
    return [user.to_output() for user in users]


def create_user(data: NewUserData) -> dict:
    """Admin-side account creation; the role may be chosen."""
    fields = data.model_dump(exclude={"role"}, exclude_none=True)
    return create_account(fields, role=data.role).to_output()


def deactivate_user(user_id: str, requester: User) -> dict:
    user = _get_user(user_id)
    if user.id == requester.id:
        raise ForbiddenError("Administrators cannot deactivate their own account")
    user.active = False
    user.save()
    logger.info("User deactivated", extra={"user_id": user_id, "admin_id": str(requester.id)})
    return user.to_output()


def activate_user(user_id: str) -> dict:
    user = _get_user(user_id)
    user.active = True
    user.save()
    logger.info("User reactivated", extra={"user_id": user_id})
    return user.to_output()
