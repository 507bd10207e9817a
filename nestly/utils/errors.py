import logging
from typing import Optional
from fastapi import status
from fastapi.responses import JSONResponse
from nestly.config import settings

logger = logging.getLogger(__name__)


def error_response(
    message: str,
    exc: Optional[Exception] = None,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
) -> JSONResponse:
    """{error} body; diagnostic details are only exposed outside production"""
    content = {"error": message}
    if exc is not None and not settings.is_production:
        content["details"] = str(exc)
    return JSONResponse(status_code=status_code, content=content)


def table_not_found_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": "Database table not found"},
    )
