from fastapi import APIRouter, Depends

from app.services import statistics as statistics_service
from app.services.auth import require_admin


router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/publicaciones-por-usuario")
def posts_per_author() -> list[dict]:
    """ADMIN: Post count per user."""
    return statistics_service.posts_per_author()


@router.get("/comentarios-en-el-tiempo")
def comments_per_day() -> list[dict]:
    """ADMIN: Comment count per day."""
    return statistics_service.comments_per_day()


@router.get("/comentarios-por-publicacion")
def top_commented_posts() -> list[dict]:
    """ADMIN: The 20 most commented posts."""
    return statistics_service.top_commented_posts()
