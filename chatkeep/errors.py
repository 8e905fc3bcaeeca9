"""
API error taxonomy.

Services raise these directly; the handlers registered in ``chatkeep.main``
turn them into ``{"error": ..., "type": ...}`` JSON bodies.
"""
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status


class ApiError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type = "internal_error"

    def __init__(self, detail: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=self.status_code, detail=detail, headers=headers)


class BadRequest(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "bad_request"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found"


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT
    error_type = "conflict"


class Gone(ApiError):
    status_code = status.HTTP_410_GONE
    error_type = "gone"


class ValidationError(ApiError):
    status_code = 422
    error_type = "validation_error"


class InternalError(ApiError):
    pass


STATUS_TO_TYPE = {
    400: BadRequest.error_type,
    404: NotFound.error_type,
    405: "method_not_allowed",
    409: Conflict.error_type,
    410: Gone.error_type,
    422: ValidationError.error_type,
    500: InternalError.error_type,
}


def error_body(message: str, error_type: str, details: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    body = {"error": message, "type": error_type}
    if details is not None:
        body["details"] = details
    return body
