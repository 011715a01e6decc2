"""
FastAPI application entry point for the blog API.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blog_api.config import get_settings
from blog_api.db import PostValidationError, StoreError
from blog_api.routes import router

logger = logging.getLogger(__name__)


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.exception(
        "Store operation failed: %s %s", request.method, request.url.path,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Store operation failed"})


async def validation_error_handler(
    request: Request, exc: PostValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "fields": exc.fields},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Blog API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(PostValidationError, validation_error_handler)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("request_start %s %s", request.method, request.url.path)
        response = await call_next(request)
        logger.info(
            "request_end %s %s %d",
            request.method, request.url.path, response.status_code,
        )
        return response

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    app.include_router(router, prefix=settings.api_prefix, tags=["posts"])
    return app


app = create_app()
