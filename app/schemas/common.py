"""
Error envelope shared by every router, for the OpenAPI docs.
"""
from typing import Any, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: Optional[dict[str, Any]] = None


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    404: {"model": ErrorResponse, "description": "NOT_FOUND: absent or owned by another user."},
    422: {"model": ErrorResponse, "description": "VALIDATION_ERROR or INVALID_ARGUMENT."},
    503: {"model": ErrorResponse, "description": "UPSTREAM_UNAVAILABLE: store or provider down."},
}
