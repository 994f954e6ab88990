"""
Error translation between the hosted Postgres driver and HTTP responses.

Every error body leaving the API has the shape
``{"error": str, "details"?: str, "hint"?: str, "code"?: str}``.
"""

from fastapi import HTTPException
from postgrest.exceptions import APIError
from typing import Any, Dict, NoReturn
import logging

logger = logging.getLogger(__name__)


def error_body(detail: Any) -> Dict[str, Any]:
    """Normalize an HTTPException detail into the API error shape."""
    if isinstance(detail, dict) and "error" in detail:
        return {k: v for k, v in detail.items() if v is not None}
    return {"error": detail if detail is not None else "Error"}


def raise_db_error(exc: Exception, message: str, status_code: int = 500) -> NoReturn:
    """Re-raise a hosted client failure as an HTTPException carrying the driver's fields."""
    if isinstance(exc, HTTPException):
        raise exc
    logger.error(f"{message}: {exc}")
    if isinstance(exc, APIError):
        raise HTTPException(
            status_code=status_code,
            detail={
                "error": message,
                "details": exc.message,
                "hint": exc.hint,
                "code": exc.code,
            },
        )
    raise HTTPException(status_code=status_code, detail={"error": message, "details": str(exc)})
