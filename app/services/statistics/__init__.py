from __future__ import annotations

from datetime import date

from app.models.post import Post
from app.models.user import User


EXCERPT_LENGTH = 50
TOP_POSTS_LIMIT = 20


def posts_per_author() -> list[dict]:
    """Number of posts written by each user, most prolific first."""
    coll = Post._get_collection()
    cursor = coll.aggregate([
        {"$group": {"_id": "$author", "total_posts": {"$sum": 1}}},
        {"$lookup": {
            "from": User._get_collection_name(),
            "localField": "_id",
            "foreignField": "_id",
            "as": "user",
        }},
        {"$unwind": "$user"},
        {"$project": {
            "_id": 0,
            "user_id": "$_id",
            "username": "$user.username",
            "name": "$user.name",
            "surname": "$user.surname",
            "total_posts": 1,
        }},
        {"$sort": {"total_posts": -1, "username": 1}},
    ])

    return [
        {
            "user_id": str(doc["user_id"]),
            "username": doc.get("username"),
            "name": f"{doc.get('name', '')} {doc.get('surname', '')}".strip(),
            "total_posts": int(doc.get("total_posts") or 0),
        }
        for doc in cursor
    ]


def comments_per_day() -> list[dict]:
    """Comment volume per calendar day (UTC), oldest day first."""
    coll = Post._get_collection()
    cursor = coll.aggregate([
        {"$unwind": "$comments"},
        {"$group": {
            "_id": {
                "year": {"$year": "$comments.created_at"},
                "month": {"$month": "$comments.created_at"},
                "day": {"$dayOfMonth": "$comments.created_at"},
            },
            "total_comments": {"$sum": 1},
        }},
        {"$sort": {"_id.year": 1, "_id.month": 1, "_id.day": 1}},
    ])

    return [
        {
            "date": date(doc["_id"]["year"], doc["_id"]["month"], doc["_id"]["day"]).isoformat(),
            "total_comments": int(doc.get("total_comments") or 0),
        }
        for doc in cursor
    ]


def top_commented_posts(limit: int = TOP_POSTS_LIMIT) -> list[dict]:
    """Posts with the most comments, with a short excerpt and the author's username."""
    coll = Post._get_collection()
    cursor = coll.aggregate([
        {"$project": {
            "content": 1,
            "author": 1,
            "total_comments": {"$size": {"$ifNull": ["$comments", []]}},
        }},
        {"$lookup": {
            "from": User._get_collection_name(),
            "localField": "author",
            "foreignField": "_id",
            "as": "author_info",
        }},
        {"$unwind": "$author_info"},
        {"$project": {
            "content": 1,
            "total_comments": 1,
            "username": "$author_info.username",
        }},
        {"$sort": {"total_comments": -1, "_id": -1}},
        {"$limit": limit},
    ])

    return [
        {
            "post_id": str(doc["_id"]),
            "excerpt": (doc.get("content") or "")[:EXCERPT_LENGTH],
            "username": doc.get("username"),
            "total_comments": int(doc.get("total_comments") or 0),
        }
        for doc in cursor
    ]
