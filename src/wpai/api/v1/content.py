# Content router: categories, pages, navigation menus.
# Created: 2026-10-12

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends

from wpai.api.deps import get_operations, json_body, respond
from wpai.api.v1.schemas.common import ERROR_RESPONSES, OperationResponse
from wpai.operations.handlers import SiteOperations

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Content"], responses=ERROR_RESPONSES)


@router.post("/categories", responses={200: {"model": OperationResponse}})
async def create_categories(
    body: dict[str, Any] = Depends(json_body),
    ops: SiteOperations = Depends(get_operations),
):
    """Bulk create: ``{"categories": [{"name": "Wicca", "slug": "wicca"}, ...]}``."""
    return respond(ops.create_categories(body))


@router.post("/pages", responses={200: {"model": OperationResponse}})
async def create_or_update_page(
    body: dict[str, Any] = Depends(json_body),
    ops: SiteOperations = Depends(get_operations),
):
    """Create a page, or update the one that already has this slug."""
    return respond(ops.create_or_update_page(body))


@router.post("/menus", responses={200: {"model": OperationResponse}})
async def create_or_update_menu(
    body: dict[str, Any] = Depends(json_body),
    ops: SiteOperations = Depends(get_operations),
):
    """Create or rebuild a menu. The supplied items replace all existing ones."""
    return respond(ops.create_or_update_menu(body))
