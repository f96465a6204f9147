from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from app.models.user import User
from app.services import users as users_service
from app.services.auth import get_current_user, require_admin
from app.services.media import PROFILE_FOLDER, upload_image
from app.services.users import NewUserData, ProfileChanges


router = APIRouter()


@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)) -> dict:
    """PROTECTED: Current user's profile."""
    return users_service.get_profile(current_user)


@router.patch("/me")
def update_me(
    name: str | None = Form(None, min_length=2),
    surname: str | None = Form(None, min_length=2),
    bio: str | None = Form(None, max_length=200),
    profile_image: UploadFile | None = File(None),
    current_user: User = Depends(get_current_user),
) -> dict:
    """PROTECTED: Edit profile fields and optionally replace the profile image."""
    changes = ProfileChanges(name=name, surname=surname, bio=bio)
    image_url = upload_image(profile_image, PROFILE_FOLDER)
    return users_service.update_profile(current_user, changes, profile_image=image_url)


@router.get("")
def list_users(
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    _: User = Depends(require_admin),
) -> list[dict]:
    """ADMIN: List all accounts, active or not."""
    return users_service.list_users(offset=offset, limit=limit)


@router.post("", status_code=201)
def create_user(body: NewUserData, _: User = Depends(require_admin)) -> dict:
    """ADMIN: Create an account with a chosen role."""
    return users_service.create_user(body)


@router.delete("/{user_id}")
def deactivate_user(user_id: str, admin: User = Depends(require_admin)) -> dict:
    """ADMIN: Deactivate an account. Users are never removed."""
    return users_service.deactivate_user(user_id, requester=admin)


@router.post("/{user_id}/activar")
def activate_user(user_id: str, _: User = Depends(require_admin)) -> dict:
    """ADMIN: Reactivate a deactivated account."""
    return users_service.activate_user(user_id)
