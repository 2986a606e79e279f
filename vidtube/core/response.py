"""Uniform JSON envelope: ``{"code", "message", "data", "traceId"}``.

``code`` is 0 on success and the business error code otherwise; the HTTP
status of an error response is derived from that code.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import Optional
from uuid import uuid4

from fastapi.responses import JSONResponse

from vidtube.core.i18n import DEFAULT_LOCALE, get_message
from vidtube.i18n.codes import ErrorCode

DataPayload = Optional[object]

_trace_id_ctx: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)


def set_request_id(trace_id: str) -> Token[Optional[str]]:
    return _trace_id_ctx.set(trace_id)


def reset_request_id(token: Token[Optional[str]]) -> None:
    _trace_id_ctx.reset(token)


def get_request_id() -> str:
    return _trace_id_ctx.get() or uuid4().hex


def envelope(code: int, message: str, data: DataPayload = None) -> dict[str, object]:
    return {"code": code, "message": message, "data": data, "traceId": get_request_id()}


def success(data: DataPayload = None, message: str = "OK", status_code: int = 200) -> JSONResponse:
    return JSONResponse(envelope(0, message, data), status_code=status_code)


def error(code: ErrorCode, locale: str = DEFAULT_LOCALE, **kwargs: str) -> JSONResponse:
    """Localized failure envelope for a business error code."""
    return JSONResponse(
        envelope(code.value, get_message(code, locale, **kwargs)),
        status_code=code.http_status,
    )
