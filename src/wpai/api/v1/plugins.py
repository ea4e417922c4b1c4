# Plugins router: inventory and install-from-directory.
# Created: 2026-10-12

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Depends

from wpai.api.deps import get_operations, json_body, respond
from wpai.api.v1.schemas.common import ERROR_RESPONSES, OperationResponse
from wpai.api.v1.schemas.plugins import PluginEntry
from wpai.operations.handlers import SiteOperations
from wpai.operations.results import OperationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Plugins"], responses=ERROR_RESPONSES)


@router.get("/plugins", response_model=list[PluginEntry])
async def list_plugins(ops: SiteOperations = Depends(get_operations)):
    """Installed plugins with their activation state."""
    outcome = ops.list_extensions()
    if isinstance(outcome, OperationError):
        return respond(outcome)
    return outcome.data["plugins"]


@router.post("/install-plugin", responses={200: {"model": OperationResponse}})
async def install_plugin(
    body: dict[str, Any] = Depends(json_body),
    ops: SiteOperations = Depends(get_operations),
):
    """Install a plugin by directory slug, then try to activate it.

    Download and unpack run in a worker thread and block only this request.
    """
    outcome = await asyncio.to_thread(ops.install_extension, body)
    return respond(outcome)
