from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel

from app.models.user import User
from app.services import auth as auth_service
from app.services.auth import AccessToken, AuthResult, get_current_user
from app.services.media import PROFILE_FOLDER, upload_image


router = APIRouter()


@router.post("/registro", response_model=AuthResult, status_code=201)
def register(
    name: str | None = Form(None),
    surname: str | None = Form(None),
    email: str | None = Form(None),
    username: str | None = Form(None),
    password: str | None = Form(None),
    birthdate: str | None = Form(None),
    bio: str = Form(""),
    profile_image: UploadFile | None = File(None),
) -> AuthResult:
    """PUBLIC: Create an account and log it in.

    Fields are checked by the service, so a taken email or username wins
    over any other problem with the form. The image is uploaded only once
    the form has passed.
    """
    fields = {
        "name": name,
        "surname": surname,
        "email": email,
        "username": username,
        "password": password,
        "birthdate": birthdate,
        "bio": bio,
    }
    fields = {key: value for key, value in fields.items() if value is not None}
    auth_service.validate_account(fields)
    image_url = upload_image(profile_image, PROFILE_FOLDER)
    return auth_service.register(fields, profile_image=image_url)


class LoginBody(BaseModel):
    identifier: str
    password: str

@router.post("/login", response_model=AuthResult)
def login(body: LoginBody) -> AuthResult:
    """PUBLIC: Log in with email or username."""
    return auth_service.login(body.identifier, body.password)


@router.post("/autorizar")
def authorize(current_user: User = Depends(get_current_user)) -> dict:
    """PROTECTED: Return the live record of the token's owner."""
    return auth_service.authorize(str(current_user.id))


@router.post("/refrescar", response_model=AccessToken)
def refresh(current_user: User = Depends(get_current_user)) -> AccessToken:
    """PROTECTED: Issue a fresh token while the current one is still valid."""
    return auth_service.refresh_token(str(current_user.id))
