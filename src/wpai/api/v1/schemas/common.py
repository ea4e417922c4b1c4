# Common API response schemas.
# Created: 2026-10-12

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class APIResponse(BaseModel):
    """Base response wrapper."""

    model_config = {"from_attributes": True}


class ErrorData(APIResponse):
    status: int


class ErrorResponse(APIResponse):
    """Structured failure envelope (validation, not found, upstream, auth)."""

    code: str
    message: str
    data: ErrorData


class OperationResponse(APIResponse):
    """Handler result; operation-specific fields (page_id, menu_id, ...) ride alongside."""

    model_config = {"extra": "allow"}

    success: bool
    message: str | None = None


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Missing or invalid field"},
    401: {"model": ErrorResponse, "description": "Missing or wrong x-wpai-token"},
}
