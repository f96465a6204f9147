from mongoengine import BooleanField, DateField, EmailField, StringField

from app.models.base import BaseDocument
from app.utils.base import UserRole


class User(BaseDocument):
    """User document.

    Fields:
    - name/surname (str)
    - email (str, unique) and username (str, unique): either one logs in
    - password (str, hashed): bcrypt hash, never part of any output
    - birthdate (date)
    - bio (str): at most 200 characters
    - profile_image (str|None): CDN secure URL
    - role (str): user/admin
    - active (bool): cleared by an admin instead of deleting the user
    """
    name = StringField(required=True, null=False)
    surname = StringField(required=True, null=False)
    email = EmailField(required=True, null=False, unique=True)
    username = StringField(required=True, null=False, unique=True)
    password = StringField(required=True, null=False)
    birthdate = DateField(required=True, null=False)
    bio = StringField(required=True, null=False, default="", max_length=200)
    profile_image = StringField(required=False, null=True)
    role = StringField(required=True, null=False, default=UserRole.USER.value, choices=UserRole.choices())
    active = BooleanField(required=True, null=False, default=True)

    meta = {
        "collection": "users",
        "indexes": [
            {"fields": ["role"]},
        ],
    }

    PUBLIC_FIELDS = ("name", "surname", "email", "username", "profile_image")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def to_output(self, fields=None, exclude=None):
        exclude = list(exclude or []) + ["password"]
        return super().to_output(fields=fields, exclude=exclude)

    def to_public(self, fields=None):
        """Author projection embedded in posts and comments."""
        return self.to_output(fields=fields or self.PUBLIC_FIELDS)
