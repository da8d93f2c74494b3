"""
Ledger exceptions and their JSON handler.

Request validation failures are raised as HTTPException from the services;
the classes here cover conditions the ledger itself refuses to paper over.
"""

import logging
from typing import Any, Dict

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Base ledger exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class BalanceOverflowError(LedgerError):
    """Raised when a member's running balance leaves the signed 64-bit range."""

    def __init__(self, member_id: Any, value: int):
        super().__init__(
            message=f"Balance overflow for member {member_id}",
            error_code="ERR_LEDGER_OVERFLOW",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"member_id": member_id, "value": str(value)},
        )


async def ledger_exception_handler(request: Request, exc: LedgerError) -> JSONResponse:
    logger.error(
        "Ledger integrity failure on %s %s: %s",
        request.method,
        request.url.path,
        exc.message,
        extra={"error_code": exc.error_code, "details": exc.details},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
    )
