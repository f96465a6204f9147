from __future__ import annotations

from bson import ObjectId
from pydantic import BaseModel, Field

from app.models.post import Comment, Post
from app.models.user import User
from app.services.auth import can_act_on
from app.utils.base import ForbiddenError, NotFoundError, PostSort
from app.utils.logger import logger


POST_NOT_FOUND = "Post not found"
COMMENT_NOT_FOUND = "Comment not found"


class PostData(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)


class PostChanges(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    content: str | None = Field(default=None, min_length=1)


def _get_live_post(post_id: str) -> Post:
    """Fetch a post that has not been soft-deleted."""
    if not ObjectId.is_valid(post_id):
        raise NotFoundError(POST_NOT_FOUND)
    post: Post | None = Post.objects(id=post_id, is_deleted=False).first()
    if not post:
        raise NotFoundError(POST_NOT_FOUND)
    return post


def create_post(data: PostData, author: User, image: str | None = None) -> dict:
    post = Post(title=data.title, content=data.content, image=image, author=author)
    post.save()
    logger.info("Post created", extra={"post_id": str(post.id), "user_id": str(author.id)})
    return post.to_output()


def list_posts(
    sort_by: PostSort = PostSort.DATE,
    author_id: str | None = None,
    offset: int = 0,
    limit: int = 10,
) -> list[dict]:
    """Live posts, newest first or most liked first, one page at a time."""
    posts = Post.objects(is_deleted=False)
    if author_id:
        if not ObjectId.is_valid(author_id):
            return []
        posts = posts.filter(author=ObjectId(author_id))

    if sort_by == PostSort.LIKES:
        posts = posts.order_by("-like_count", "-created_at", "-id")
    else:
        posts = posts.order_by("-created_at", "-id")

    return [post.to_output() for post in posts.skip(offset).limit(limit)]


def list_posts_by_author(author_id: str) -> list[dict]:
    if not ObjectId.is_valid(author_id):
        return []
    posts = Post.objects(author=ObjectId(author_id), is_deleted=False).order_by("-created_at", "-id")
    return [post.to_output() for post in posts]


def get_post(post_id: str) -> dict:
    return _get_live_post(post_id).to_output()


def update_post(post_id: str, changes: PostChanges, requester: User) -> dict:
    post = _get_live_post(post_id)
    if not can_act_on(requester, post.author.id):
        raise ForbiddenError("You do not have permission to edit this post")

    for field, value in changes.model_dump(exclude_none=True).items():
        setattr(post, field, value)
    post.save()
    return post.to_output()


def delete_post(post_id: str, requester: User) -> None:
    """Hide a post. The document stays in storage."""
    post = _get_live_post(post_id)
    if not can_act_on(requester, post.author.id, allow_admin=True):
        raise ForbiddenError("You do not have permission to delete this post")

    post.is_deleted = True
    post.save()
    logger.info("Post deleted", extra={"post_id": post_id, "user_id": str(requester.id)})


def like_post(post_id: str, user: User) -> dict:
    post = _get_live_post(post_id)
    # Membership test and insert happen in one update, so concurrent likes can't double count
    updated = Post.objects(id=post.id, is_deleted=False, likes__ne=user.id).update_one(
        add_to_set__likes=user.id,
        inc__like_count=1,
    )
    if not updated:
        raise ForbiddenError("You already liked this post")
    post.reload()
    return post.to_output()


def unlike_post(post_id: str, user: User) -> dict:
    post = _get_live_post(post_id)
    updated = Post.objects(id=post.id, is_deleted=False, likes=user.id).update_one(
        pull__likes=user.id,
        dec__like_count=1,
    )
    if not updated:
        raise ForbiddenError("You have not liked this post")
    post.reload()
    return post.to_output()


def add_comment(post_id: str, text: str, author: User) -> dict:
    post = _get_live_post(post_id)
    post.comments.append(Comment(text=text, author=author))
    post.save()
    return post.to_output()


def list_comments(post_id: str, offset: int = 0, limit: int = 10) -> list[dict]:
    post = _get_live_post(post_id)
    # Reversed first so equal timestamps still come out latest-appended first
    ordered = sorted(reversed(post.comments), key=lambda c: c.created_at, reverse=True)
    return [comment.to_output() for comment in ordered[offset:offset + limit]]


def edit_comment(post_id: str, comment_id: str, text: str, requester: User) -> dict:
    post = _get_live_post(post_id)
    comment = post.find_comment(comment_id)
    if not comment:
        raise NotFoundError(COMMENT_NOT_FOUND)
    if not can_act_on(requester, comment.author.id):
        raise ForbiddenError("You can only edit your own comments")

    comment.text = text
    comment.modified = True
    post.save()
    return comment.to_output()
