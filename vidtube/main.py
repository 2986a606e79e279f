import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from vidtube.api.v1.router import api_router
from vidtube.core.exceptions import BusinessError
from vidtube.core.i18n import DEFAULT_LOCALE
from vidtube.core.middleware import LocaleMiddleware, LoggingMiddleware, RequestIDMiddleware
from vidtube.core.response import error
from vidtube.db import Database
from vidtube.i18n.codes import ErrorCode
from vidtube.services.media_service import MediaService

logger = logging.getLogger("vidtube.main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    owns_database = app.state.database is None
    if owns_database:
        app.state.database = Database()
    try:
        yield
    finally:
        if owns_database:
            await app.state.database.dispose()


def create_app(
    database: Optional[Database] = None,
    media_service: Optional[MediaService] = None,
) -> FastAPI:
    """Build the application; the store handle is created at startup unless injected."""
    app = FastAPI(title="VidTube API", version="0.1.0", lifespan=lifespan)
    app.state.database = database
    app.state.media_service = media_service
    app.include_router(api_router)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(LocaleMiddleware)
    app.add_middleware(LoggingMiddleware)

    def _render(request: Request, code: ErrorCode, **kwargs: str) -> JSONResponse:
        return error(code, getattr(request.state, "locale", DEFAULT_LOCALE), **kwargs)

    @app.exception_handler(BusinessError)
    async def business_error_handler(
        request: Request, exc: BusinessError
    ) -> JSONResponse:
        return _render(request, exc.code, **exc.kwargs)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        return _render(request, ErrorCode.INVALID_PARAMETER, detail=location or "request")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return _render(request, ErrorCode.SYSTEM_ERROR)

    return app


app = create_app()
