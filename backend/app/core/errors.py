"""Translation of validation and engine errors into JSON responses.

Every failure uses the same envelope::

    {"success": false, "error": "<message>", "kind": "<kind>"}
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from engine.errors import RoiError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, kind: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, "kind": kind},
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Missing, non-numeric or non-finite fields: 400 naming the first field."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    fields = [str(part) for part in first.get("loc", ()) if part != "body"]
    if fields and first.get("type") != "json_invalid":
        message = f"Invalid or missing field: {fields[-1]}"
    else:
        message = "Invalid request body"
    return _error_response(400, message, "InvalidRequest")


async def roi_error_handler(request: Request, exc: RoiError) -> JSONResponse:
    extra = {
        "error_kind": exc.kind,
        "path": str(request.url.path),
        "rating_kva": getattr(exc, "rating_kva", None),
    }
    if exc.client_error:
        logger.info("Calculation rejected: %s", exc, extra=extra)
        return _error_response(422, str(exc), exc.kind)

    logger.exception("Calculation failed: %s", exc, extra=extra)
    return _error_response(500, str(exc), exc.kind)


_HTTP_KINDS = {
    404: "NotFound",
    405: "MethodNotAllowed",
    429: "RateLimited",
}


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Routing and rate-limit failures, in the same envelope as engine errors."""
    response = _error_response(
        exc.status_code, str(exc.detail), _HTTP_KINDS.get(exc.status_code, "HTTPError")
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def register_error_handlers(application: FastAPI) -> None:
    application.add_exception_handler(RequestValidationError, request_validation_handler)
    application.add_exception_handler(RoiError, roi_error_handler)
    application.add_exception_handler(StarletteHTTPException, http_error_handler)
