"""
Central error handling for the staffdesk backend
"""
import logging
import traceback

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def _error_body(status_code: int, detail, request: Request) -> dict:
    return {
        "error": True,
        "status_code": status_code,
        "detail": detail,
        "path": str(request.url.path),
    }


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle HTTPException with consistent JSON response format

    Args:
        request: FastAPI request object
        exc: HTTPException instance

    Returns:
        JSONResponse with error details
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, exc.detail, request),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle RequestValidationError with consistent JSON response format

    Does not leak internal validation details in production.
    """
    from staffdesk.core.config import settings

    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(422, "Validation error: Invalid request data", request),
        )

    # ctx may carry exception objects (e.g. ValueError from validators), stringify them
    errors = []
    for e in exc.errors():
        err = dict(e)
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {
                k: (v if isinstance(v, (str, int, float, bool, type(None))) else str(v))
                for k, v in err["ctx"].items()
            }
        errors.append(err)
    content = _error_body(422, "Validation error", request)
    content["errors"] = errors
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=content)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions with consistent JSON response format

    Does not leak internal error details in production.
    """
    from staffdesk.core.config import settings

    logger.error("Unhandled exception: %s", exc, exc_info=True)

    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(500, "Internal server error", request),
        )

    content = _error_body(500, str(exc), request)
    content["traceback"] = traceback.format_exc() if settings.APP_ENV == "local" else None
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)
