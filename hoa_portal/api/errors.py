"""Translate domain exceptions into HTTP errors"""

import logging
from fastapi import HTTPException

from hoa_portal.domain.exceptions import (
    ConcurrencyConflictError,
    DomainException,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)

STATUS_BY_EXCEPTION = {
    InvalidInputError: 422,
    NotFoundError: 404,
    PermissionDeniedError: 403,
    ConcurrencyConflictError: 409,
}


def to_http_error(e: DomainException, request_id: str) -> HTTPException:
    status_code = next(
        (status for exc_type, status in STATUS_BY_EXCEPTION.items() if isinstance(e, exc_type)),
        500,
    )
    if status_code >= 500:
        logging.error(f"Unexpected domain error: {e}", extra={"request_id": request_id})
        return HTTPException(status_code=status_code, detail="Internal server error")

    logging.warning(f"Request rejected: {e}", extra={"request_id": request_id, "status_code": status_code})
    return HTTPException(status_code=status_code, detail=str(e))
