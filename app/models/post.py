from datetime import datetime, timezone

from bson import ObjectId
from mongoengine import (
    BooleanField,
    DateTimeField,
    EmbeddedDocumentField,
    IntField,
    ListField,
    ObjectIdField,
    ReferenceField,
    StringField,
)

from app.models.base import BaseDocument, BaseEmbeddedDocument
from app.models.user import User


COMMENT_AUTHOR_FIELDS = ("name", "surname", "username")


class Comment(BaseEmbeddedDocument):
    """Embedded: a comment on a post.

    Fields:
    - id (ObjectId): addresses the comment inside its post
    - text (str)
    - author (Ref[User])
    - created_at (datetime): server-assigned
    - modified (bool): set once the author edits the text
    """
    id = ObjectIdField(required=True, default=ObjectId)
    text = StringField(required=True, null=False)
    author = ReferenceField(document_type=User, required=True, null=False)
    created_at = DateTimeField(default=lambda: datetime.now(timezone.utc), null=False)
    modified = BooleanField(required=True, null=False, default=False)

    def to_output(self, fields=None, exclude=None):
        output = super().to_output(fields=fields, exclude=["author"] + list(exclude or []))
        output["author"] = self.author.to_public(COMMENT_AUTHOR_FIELDS) if self.author else None
        return output


class Post(BaseDocument):
    """Post document.

    Fields:
    - title/content (str)
    - image (str|None): CDN secure URL
    - author (Ref[User])
    - comments (list[Comment]): in insertion order
    - likes (list[ObjectId]): ids of liking users, a set
    - like_count (int): kept equal to len(likes) by the like/unlike updates
    - is_deleted (bool): soft-delete flag
    """
    title = StringField(required=True, null=False)
    content = StringField(required=True, null=False)
    image = StringField(required=False, null=True)
    author = ReferenceField(document_type=User, required=True, null=False)
    comments = ListField(EmbeddedDocumentField(Comment), null=False, default=list)
    likes = ListField(ObjectIdField(), null=False, default=list)
    like_count = IntField(required=True, null=False, default=0)
    is_deleted = BooleanField(required=True, null=False, default=False)

    meta = {
        "collection": "posts",
        "indexes": [
            {"fields": ["is_deleted", "-created_at"]},
            {"fields": ["is_deleted", "-like_count", "-created_at"]},
            {"fields": ["author"]},
        ],
    }

    def find_comment(self, comment_id: str) -> Comment | None:
        for comment in self.comments:
            if str(comment.id) == comment_id:
                return comment
        return None

    def to_output(self, fields=None, exclude=None):
        exclude = list(exclude or []) + ["is_deleted", "like_count"]
        output = super().to_output(fields=fields, exclude=exclude)
        output["like_count"] = len(self.likes or [])
        return output
