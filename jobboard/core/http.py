"""
Response envelope and exception handlers.

Success: {"ok": true, "data": ..., "meta": ... | null}
Failure: {"ok": false, "error": {"code": ..., "message": ..., "details"?: ...}}
"""

from collections import defaultdict
from typing import Any, Dict, List, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, NoResultFound
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobboard.core.errors import ApiError, ConflictError, NotFoundError

logger = structlog.get_logger(__name__)

_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    409: "CONFLICT",
}

_LOCATION_PREFIXES = ("body", "query", "path", "header", "cookie")


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None


class ErrorEnvelope(BaseModel):
    ok: bool = False
    error: ErrorBody


def ok(data: Any = None, meta: Any = None) -> Dict[str, Any]:
    """Wrap a payload in the success envelope."""
    return {"ok": True, "data": data, "meta": meta}


def error_response(
    status_code: int, code: str, message: str, details: Any = None
) -> JSONResponse:
    body = ErrorEnvelope(error=ErrorBody(code=code, message=message, details=details))
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body, exclude_none=True),
    )


def flatten_validation_errors(errors: List[dict]) -> Dict[str, Any]:
    """Group validation errors into form-level and per-field messages."""
    form_errors: List[str] = []
    field_errors: Dict[str, List[str]] = defaultdict(list)

    for err in errors:
        loc = list(err.get("loc", ()))
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        msg = str(err.get("msg", "Invalid value"))
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        if loc:
            field_errors[str(loc[0])].append(msg)
        else:
            form_errors.append(msg)

    return {"formErrors": form_errors, "fieldErrors": dict(field_errors)}


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.status_code, exc.code, exc.message, exc.details)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return error_response(
        400,
        "BAD_REQUEST",
        "Invalid payload",
        flatten_validation_errors(exc.errors()),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.info("integrity_error", path=request.url.path, error=str(exc.orig))
    return error_response(ConflictError.status_code, ConflictError.code, ConflictError.default_message)


async def no_result_handler(request: Request, exc: NoResultFound) -> JSONResponse:
    return error_response(NotFoundError.status_code, NotFoundError.code, NotFoundError.default_message)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    code = _STATUS_CODES.get(exc.status_code)
    if code is None:
        code = "BAD_REQUEST" if exc.status_code < 500 else ApiError.code
    return error_response(exc.status_code, code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, method=request.method)
    return error_response(500, ApiError.code, ApiError.default_message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(NoResultFound, no_result_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
