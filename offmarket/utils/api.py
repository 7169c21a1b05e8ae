"""Response envelope helpers and the API error type.

Every API response is ``{success, data?, error?: {code, message}}``.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from offmarket.schemas.common import ApiResponse, ErrorBody

logger = logging.getLogger(__name__)

SERVER_ERROR = "SERVER_ERROR"
NOT_FOUND = "NOT_FOUND"
FORBIDDEN = "FORBIDDEN"
UNAUTHORIZED = "UNAUTHORIZED"
VALIDATION_ERROR = "VALIDATION_ERROR"
USER_NOT_FOUND = "USER_NOT_FOUND"


class ApiError(Exception):
    """An error that maps directly onto an HTTP status and envelope code."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Optional[Dict[str, List[str]]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details


def api_ok(data: Any) -> ApiResponse:
    return ApiResponse(success=True, data=data)


def api_error(code: str, message: str, details: Optional[Dict[str, List[str]]] = None) -> dict:
    body = ErrorBody(code=code, message=message, details=details)
    return ApiResponse(success=False, error=body).model_dump(exclude_none=True)


@contextmanager
def server_errors(message: str) -> Iterator[None]:
    """Normalise unexpected failures to a generic 500 envelope.

    ``ApiError`` passes through untouched; anything else is logged with its
    traceback and replaced by ``SERVER_ERROR`` carrying ``message``.
    """
    try:
        yield
    except ApiError:
        raise
    except Exception:
        logger.exception(message)
        raise ApiError(500, SERVER_ERROR, message)


# ── Exception handlers (registered in main) ──

async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=api_error(exc.code, exc.message, exc.details),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details: Dict[str, List[str]] = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())[1:]) or "request"
        details.setdefault(field, []).append(err.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=400,
        content=api_error(VALIDATION_ERROR, "Invalid input", details),
    )
