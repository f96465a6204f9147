from __future__ import annotations

import random
from datetime import date, datetime, timedelta, timezone

from app.connections.mongo import init_mongo, close_mongo
from app.models.post import Comment, Post
from app.models.user import User
from app.services.auth import hash_password
from app.utils.base import UserRole
from app.utils.config import settings
from app.utils.logger import logger


def _ensure_admin() -> User:
    admin = User.objects(email=settings.admin_email).first()
    if not admin:
        admin = User(
            name="Admin",
            surname="Account",
            email=settings.admin_email,
            username=settings.admin_username,
            password=hash_password(settings.admin_password),
            birthdate=date(1990, 1, 1),
            bio="Platform administrator",
            role=UserRole.ADMIN.value,
        )
        admin.save()
    return admin


def _ensure_users() -> list[User]:
    users: list[User] = []
    fixtures = [
        ("Alice", "Example", "alice@example.com", "alice", date(1995, 3, 14)),
        ("Bob", "Example", "bob@example.com", "bob", date(1998, 7, 2)),
        ("Carol", "Example", "carol@example.com", "carol", date(2001, 11, 23)),
    ]
    for name, surname, email, username, birthdate in fixtures:
        user = User.objects(email=email).first()
        if not user:
            user = User(
                name=name,
                surname=surname,
                email=email,
                username=username,
                password=hash_password("Secret123"),
                birthdate=birthdate,
                bio=f"Hi, I'm {name}",
            )
            user.save()
        users.append(user)
    return users


def _ensure_posts(users: list[User]) -> list[Post]:
    posts: list[Post] = []
    now = datetime.now(timezone.utc)
    for i in range(1, 16):
        title = f"Sample post {i}"
        post = Post.objects(title=title).first()
        if not post:
            author = users[(i - 1) % len(users)]
            created = now - timedelta(days=15 - i)
            # a few comments spread over the days after publication
            comments = [
                Comment(
                    text=f"Comment {n + 1} on post {i}",
                    author=random.choice(users),
                    created_at=created + timedelta(hours=6 * (n + 1)),
                )
                for n in range(random.randint(0, 4))
            ]
            likers = random.sample(users, k=random.randint(0, len(users)))
            post = Post(
                title=title,
                content=f"Body of sample post number {i}. " * 3,
                author=author,
                comments=comments,
                likes=[u.id for u in likers],
                like_count=len(likers),
                created_at=created,
            )
            post.save()
        posts.append(post)
    return posts


def seed() -> None:
    init_mongo()
    try:
        admin = _ensure_admin()
        users = _ensure_users()
        _ensure_posts(users + [admin])
        logger.info("Seed completed")
    finally:
        close_mongo()


if __name__ == "__main__":
    seed()
