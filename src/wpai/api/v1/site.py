# Site router: introspection, basic settings, options, homepage, SEO defaults.
# Created: 2026-10-12

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends

from wpai.api.deps import get_operations, json_body, respond
from wpai.api.v1.schemas.common import ERROR_RESPONSES, OperationResponse
from wpai.operations.handlers import SiteOperations
from wpai.operations.results import OperationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Site"], responses=ERROR_RESPONSES)


@router.get("/site-info")
async def site_info(ops: SiteOperations = Depends(get_operations)):
    """Site settings plus the installed extension inventory. Call this first."""
    outcome = ops.site_info()
    if isinstance(outcome, OperationError):
        return respond(outcome)
    return outcome.data


@router.post("/basic-setup", responses={200: {"model": OperationResponse}})
async def basic_setup(
    body: dict[str, Any] = Depends(json_body),
    ops: SiteOperations = Depends(get_operations),
):
    """Permalinks, timezone, site title and tagline."""
    return respond(ops.basic_setup(body))


@router.post("/set-option", responses={200: {"model": OperationResponse}})
async def set_option(
    body: dict[str, Any] = Depends(json_body),
    ops: SiteOperations = Depends(get_operations),
):
    """Set any option: ``{"option_name": ..., "option_value": ...}``."""
    return respond(ops.set_option(body))


@router.post("/set-homepage", responses={200: {"model": OperationResponse}})
async def set_homepage(
    body: dict[str, Any] = Depends(json_body),
    ops: SiteOperations = Depends(get_operations),
):
    """Use a page (by ``page_id`` or ``slug``) as the static front page."""
    return respond(ops.set_homepage(body))


@router.post("/rankmath-setup", responses={200: {"model": OperationResponse}})
async def rankmath_setup(ops: SiteOperations = Depends(get_operations)):
    """Rank Math defaults; ``success: false`` when the plugin is not active."""
    return respond(ops.seo_setup())
