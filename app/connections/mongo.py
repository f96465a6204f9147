from contextlib import asynccontextmanager
from typing import AsyncIterator

import certifi
from fastapi import FastAPI
from mongoengine import connect, disconnect

from app.utils.config import settings
from app.utils.logger import logger


def init_mongo() -> None:
    options = {"tlsCAFile": certifi.where()} if settings.mongo_srv else {}
    connect(host=settings.mongo_uri, alias="default", tz_aware=True, **options)
    logger.info("Connected to MongoDB", extra={"mongo_db": settings.mongo_db})


def close_mongo() -> None:
    disconnect(alias="default")


@asynccontextmanager
async def mongo_lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_mongo()
    try:
        yield
    finally:
        close_mongo()
