from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from pydantic import BaseModel, Field

from app.models.user import User
from app.services import posts as posts_service
from app.services.auth import get_current_user
from app.services.media import POST_FOLDER, upload_image
from app.services.posts import PostChanges, PostData
from app.utils.base import PostSort


router = APIRouter()


@router.post("", status_code=201)
def create_post(
    title: str = Form(..., min_length=1),
    content: str = Form(..., min_length=1),
    image: UploadFile | None = File(None),
    current_user: User = Depends(get_current_user),
) -> dict:
    """PROTECTED: Publish a post, optionally with an image."""
    image_url = upload_image(image, POST_FOLDER)
    return posts_service.create_post(PostData(title=title, content=content), current_user, image=image_url)


@router.get("")
def list_posts(
    sort_by: PostSort = Query(PostSort.DATE, alias="ordenarPor"),
    author_id: str | None = Query(None, alias="usuarioId"),
    offset: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
) -> list[dict]:
    """PUBLIC: Page through posts by date or by likes."""
    return posts_service.list_posts(sort_by=sort_by, author_id=author_id, offset=offset, limit=limit)


@router.get("/usuario/{author_id}")
def list_posts_by_author(author_id: str) -> list[dict]:
    """PUBLIC: Every live post of one user, newest first."""
    return posts_service.list_posts_by_author(author_id)


@router.get("/{post_id}")
def get_post(post_id: str) -> dict:
    """PUBLIC: One post with its comments."""
    return posts_service.get_post(post_id)


@router.patch("/{post_id}")
def update_post(
    post_id: str,
    body: PostChanges,
    current_user: User = Depends(get_current_user),
) -> dict:
    """PROTECTED: Edit a post (author only)."""
    return posts_service.update_post(post_id, body, current_user)


@router.delete("/{post_id}")
def delete_post(post_id: str, current_user: User = Depends(get_current_user)) -> dict:
    """PROTECTED: Soft-delete a post (author or admin)."""
    posts_service.delete_post(post_id, current_user)
    return {"message": "Post deleted"}


@router.post("/{post_id}/like")
def like_post(post_id: str, current_user: User = Depends(get_current_user)) -> dict:
    return posts_service.like_post(post_id, current_user)


@router.delete("/{post_id}/like")
def unlike_post(post_id: str, current_user: User = Depends(get_current_user)) -> dict:
    return posts_service.unlike_post(post_id, current_user)


class CommentBody(BaseModel):
    text: str = Field(min_length=1)

@router.post("/{post_id}/comentarios", status_code=201)
def add_comment(
    post_id: str,
    body: CommentBody,
    current_user: User = Depends(get_current_user),
) -> dict:
    """PROTECTED: Comment on a post; returns the updated post."""
    return posts_service.add_comment(post_id, body.text, current_user)


@router.get("/{post_id}/comentarios")
def list_comments(
    post_id: str,
    offset: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
) -> list[dict]:
    """PUBLIC: Comments of a post, newest first."""
    return posts_service.list_comments(post_id, offset=offset, limit=limit)


@router.put("/{post_id}/comentarios/{comment_id}")
def edit_comment(
    post_id: str,
    comment_id: str,
    body: CommentBody,
    current_user: User = Depends(get_current_user),
) -> dict:
    """PROTECTED: Edit one's own comment."""
    return posts_service.edit_comment(post_id, comment_id, body.text, current_user)
