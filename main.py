from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mongoengine import NotUniqueError, ValidationError as DocumentValidationError

from app.connections import mongo_lifespan
from app.api.auth import router as auth_router
from app.api.user import router as user_router
from app.api.post import router as post_router
from app.api.statistics import router as statistics_router
from app.utils.config import settings
from app.utils.logger import logger


app = FastAPI(title="Social Network API (Mongo)", version="0.1.0", lifespan=mongo_lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=r"https://.*\.vercel\.app",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotUniqueError)
def handle_not_unique(request: Request, exc: NotUniqueError) -> JSONResponse:
    # Unique index caught a duplicate that slipped past the service checks
    return JSONResponse(status_code=409, content={"detail": "Email or username already registered"})


@app.exception_handler(RequestValidationError)
def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(DocumentValidationError)
def handle_document_validation(request: Request, exc: DocumentValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(Exception)
def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", extra={"path": request.url.path, "method": request.method})
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(user_router, prefix="/users", tags=["users"])
app.include_router(post_router, prefix="/publicaciones", tags=["posts"])
app.include_router(statistics_router, prefix="/estadisticas", tags=["statistics"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
