from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings
from app.core.errors import GatewayError
from app.services.github.client import GitHubClient

from app.api.v1.health import router as health_router
from app.api.v1.repos import router as repos_router


def _envelope(
    status_code: int, message: str, headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    settings = app.state.settings
    logger.info(
        "{} ready, upstream={}, tree_strategy={}",
        settings.APP_NAME,
        app.state.github.base,
        settings.TREE_STRATEGY,
    )
    yield
    await app.state.github.aclose()
    logger.info("GitHub client closed")


def create_app(settings: Settings, github: Optional[GitHubClient] = None) -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, lifespan=_lifespan)

    app.state.settings = settings
    app.state.github = github or GitHubClient(
        token=settings.GITHUB_TOKEN,
        base_url=settings.GITHUB_API_URL,
        timeout=settings.GITHUB_TIMEOUT,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(GatewayError)
    async def _gateway_error(request: Request, exc: GatewayError):
        return _envelope(exc.status_code, exc.message, headers=exc.headers or None)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return _envelope(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        where = ".".join(str(p) for p in first.get("loc", ()))
        return _envelope(422, f"Invalid request: {where} {first.get('msg', '')}".strip())

    # ServerErrorMiddleware logs the traceback and re-raises after this runs
    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        return _envelope(500, "Internal server error")

    app.include_router(health_router)
    app.include_router(repos_router)

    return app
