from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from terabox_link.config import Settings, get_settings
from terabox_link.errors import ConfigurationError, ShareError, UnknownUpstreamError
from terabox_link.log import get_logger, setup_logger
from terabox_link.models import ShareRequest, ShareResponse
from terabox_link.pipeline import ShareResolver
from terabox_link.upstream import TeraboxClient
from terabox_link.validation import validate_and_extract

logger = get_logger("api")


def create_app(
    settings: Settings | None = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logger(level=settings.log_level)

    client: Optional[TeraboxClient] = None
    config_error_detail: Optional[str] = None
    try:
        client = TeraboxClient.from_settings(settings, transport=transport)
    except ConfigurationError as exc:
        config_error_detail = exc.detail or "configuration error"
        logger.error("Configuration error: %s", exc.detail)

    resolver = (
        ShareResolver(
            client,
            max_files=settings.max_files,
            link_delay=settings.link_delay_seconds,
        )
        if client
        else None
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        logger.info("Starting %s (env=%s, configured=%s)", settings.app_name, settings.app_env, client is not None)
        yield
        if client:
            client.close()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    def error_response(status_code: int, message: str, details: Optional[str] = None) -> JSONResponse:
        content = {"success": False, "error": message}
        if details and not settings.is_production:
            content["details"] = details
        return JSONResponse(status_code=status_code, content=content)

    @app.exception_handler(ShareError)
    async def share_error_handler(request: Request, exc: ShareError):
        logger.error(
            "%s %s failed: %s - %s (%s)",
            request.method,
            request.url.path,
            exc.code,
            exc.message,
            exc.detail,
        )
        return error_response(exc.status_code, exc.message, exc.detail)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "%s %s raised unhandled %s: %s",
            request.method,
            request.url.path,
            type(exc).__name__,
            exc,
        )
        return error_response(500, UnknownUpstreamError.message, f"{type(exc).__name__}: {exc}")

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.errors())
        url_errors = [
            error
            for error in exc.errors()
            if tuple(item for item in error["loc"] if item != "body") in ((), ("url",))
        ]
        if url_errors:
            return error_response(400, "URL is required and must be a string")
        return error_response(400, "invalid request parameters")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            return error_response(405, "Method not allowed. Use POST.")
        message = str(exc.detail) if exc.detail else "request failed"
        return error_response(exc.status_code, message)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "environment": settings.app_env, "configured": client is not None}

    @app.post("/api/terabox", response_model=ShareResponse)
    def resolve_share(payload: ShareRequest):
        if config_error_detail is not None:
            raise ConfigurationError(detail=config_error_detail)

        logger.info("Processing URL: %s", payload.url)
        share_id = validate_and_extract(payload.url, settings.allowed_domains)
        logger.info("Extracted share ID: %s", share_id)

        result = resolver.resolve(share_id, payload.password, share_url=payload.url)
        return ShareResponse(data=result)

    return app


app = create_app()
