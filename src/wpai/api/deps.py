# Shared FastAPI dependencies and response helpers for the API layer.
# Created: 2026-10-12

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from wpai.blueprint import BlueprintRunner
from wpai.operations.handlers import SiteOperations
from wpai.operations.results import OperationError, Outcome


def get_operations(request: Request) -> SiteOperations:
    return request.app.state.operations


def get_blueprint_runner(request: Request) -> BlueprintRunner:
    return request.app.state.blueprint_runner


async def json_body(request: Request) -> dict[str, Any]:
    """Request body as a dict. Empty, invalid or non-object JSON yields ``{}``."""
    try:
        data = await request.json()
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def respond(outcome: Outcome) -> Any:
    """Render an operation outcome; errors carry their own HTTP status."""
    if isinstance(outcome, OperationError):
        return JSONResponse(status_code=outcome.status, content=outcome.to_dict())
    return outcome.to_dict()
