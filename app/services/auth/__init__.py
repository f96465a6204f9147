from datetime import date, datetime, timedelta, timezone

from bson import ObjectId
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext
from jose import jwt, JWTError
from mongoengine import Q
from pydantic import BaseModel, EmailStr, Field, ValidationError as PydanticValidationError

from app.models.user import User
from app.utils.base import ConflictError, ForbiddenError, UnauthorizedError, UserRole, ValidationError
from app.utils.config import settings
from app.utils.logger import logger


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

INVALID_CREDENTIALS = "Invalid credentials"
ACCOUNT_DEACTIVATED = "Your account has been deactivated. Contact an administrator."


class AccountData(BaseModel):
    """Profile fields needed to open an account."""
    name: str = Field(min_length=2)
    surname: str = Field(min_length=2)
    email: EmailStr
    username: str = Field(min_length=3)
    password: str
    birthdate: date
    bio: str = Field(default="", max_length=200)


class AuthResult(BaseModel):
    user: dict
    access_token: str


class AccessToken(BaseModel):
    access_token: str
    token_type: str = "bearer"


def verify_password(plain: str, hashed: str) -> bool:
    """Verify plaintext password against a bcrypt hash."""
    return pwd_context.verify(plain, hashed)


def hash_password(plain: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return pwd_context.hash(plain)


def password_policy_violations(password: str) -> list[str]:
    """Return one message per password rule that `password` breaks."""
    violations: list[str] = []
    if len(password) < settings.password_min_length:
        violations.append(f"Password must be at least {settings.password_min_length} characters long")
    if not any(c.isascii() and c.isupper() for c in password):
        violations.append("Password must contain at least one uppercase letter")
    if not any(c.isascii() and c.isdigit() for c in password):
        violations.append("Password must contain at least one digit")
    return violations


def compute_age(birthdate: date, today: date | None = None) -> int:
    """Whole years lived; the birthday itself counts as a completed year."""
    today = today or datetime.now(timezone.utc).date()
    age = today.year - birthdate.year
    if (today.month, today.day) < (birthdate.month, birthdate.day):
        age -= 1
    return age


def create_access_token(user: User) -> str:
    """Sign the session claims for a user."""
    now = datetime.now(timezone.utc)
    payload = {
        "correo": user.email,
        "sub": str(user.id),
        "perfil": user.role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=settings.access_token_expires_minutes)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Verify signature and expiry and return the claims."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise UnauthorizedError()
    if not payload.get("sub"):
        raise UnauthorizedError()
    return payload


def find_user(user_id: str) -> User | None:
    if not ObjectId.is_valid(user_id):
        return None
    return User.objects(id=user_id).first()


def get_current_user(token: str = Depends(oauth2_scheme)) -> User:
    """Auth dependency that validates an access token and returns the user."""
    payload = decode_access_token(token)
    user = find_user(payload["sub"])
    if not user:
        raise UnauthorizedError()
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise ForbiddenError("Administrator role required")
    return current_user


def can_act_on(requester: User, owner_id, allow_admin: bool = False) -> bool:
    """Ownership check shared by every mutation on user-owned content."""
    if str(requester.id) == str(owner_id):
        return True
    return allow_admin and requester.is_admin


def ensure_available(email: str | None, username: str | None) -> None:
    """Raise Conflict when the email or username already belongs to someone."""
    if email and User.objects(email=email).first():
        raise ConflictError("Email already registered")
    if username and User.objects(username=username).first():
        raise ConflictError("Username already registered")


def _field_messages(exc: PydanticValidationError) -> list[str]:
    return [f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()]


def validate_account(fields: dict) -> AccountData:
    """Check a signup payload.

    Uniqueness is checked first so a taken email or username is always
    reported as a conflict, whatever else is wrong with the input. Field
    rules, age and password policy follow.
    """
    ensure_available(fields.get("email"), fields.get("username"))

    try:
        data = AccountData.model_validate(fields)
    except PydanticValidationError as exc:
        raise ValidationError(_field_messages(exc))

    if compute_age(data.birthdate) < settings.minimum_age:
        raise ValidationError(f"You must be at least {settings.minimum_age} years old to register")

    violations = password_policy_violations(data.password)
    if violations:
        raise ValidationError(violations)
    return data


def create_account(fields: dict, profile_image: str | None = None, role: UserRole = UserRole.USER) -> User:
    """Validate and persist a new user."""
    data = validate_account(fields)
    user = User(
        name=data.name,
        surname=data.surname,
        email=data.email,
        username=data.username,
        password=hash_password(data.password),
        birthdate=data.birthdate,
        bio=data.bio,
        profile_image=profile_image,
        role=role.value,
    )
    user.save()
    logger.info("User account created", extra={"user_id": str(user.id), "role": user.role})
    return user


def register(fields: dict, profile_image: str | None = None) -> AuthResult:
    user = create_account(fields, profile_image=profile_image)
    return AuthResult(user=user.to_output(), access_token=create_access_token(user))


def login(identifier: str, password: str) -> AuthResult:
    # Same message for unknown user and wrong password so accounts can't be probed
    user = User.objects(Q(email=identifier) | Q(username=identifier)).first()
    if not user or not verify_password(password, user.password):
        logger.warning("Failed login attempt")
        raise UnauthorizedError(INVALID_CREDENTIALS)
    if not user.active:
        raise UnauthorizedError(ACCOUNT_DEACTIVATED)
    return AuthResult(user=user.to_output(), access_token=create_access_token(user))


def authorize(user_id: str) -> dict:
    """Re-read the session owner from storage."""
    user = find_user(user_id)
    if not user:
        raise UnauthorizedError("User not found")
    return user.to_output()


def refresh_token(user_id: str) -> AccessToken:
    user = find_user(user_id)
    if not user:
        raise UnauthorizedError("User not found")
    if not user.active:
        raise UnauthorizedError(ACCOUNT_DEACTIVATED)
    return AccessToken(access_token=create_access_token(user))
