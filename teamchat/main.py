"""
Team Chat API - Application
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from teamchat.core.config import settings
from teamchat.core.exceptions import TeamChatException
from teamchat.routes import api_router
from teamchat.schemas import ErrorResponse
from teamchat.store import get_store

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = get_store()
    await store.connect()
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} started with '{store.backend_name}' store")
    try:
        yield
    finally:
        await store.disconnect()


async def team_chat_exception_handler(request: Request, exc: TeamChatException) -> JSONResponse:
    body = ErrorResponse(
        error=exc.detail,
        error_code=exc.error_code,
        details=exc.extra or None,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TeamChatException, team_chat_exception_handler)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": settings.APP_VERSION}

    return app


app = create_app()
