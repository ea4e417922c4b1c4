# Blueprint router: run a full site setup in one request.
# Created: 2026-10-12

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends

from wpai.api.deps import get_blueprint_runner, json_body
from wpai.api.v1.schemas.blueprint import BlueprintReport
from wpai.api.v1.schemas.common import ERROR_RESPONSES
from wpai.blueprint import BlueprintRunner

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Blueprint"], responses=ERROR_RESPONSES)


@router.post("/run-blueprint", response_model=BlueprintReport)
async def run_blueprint(
    body: dict[str, Any] = Depends(json_body),
    runner: BlueprintRunner = Depends(get_blueprint_runner),
):
    """Run basic setup, categories, pages, menus, homepage and plugin configs.

    Sections are best-effort: a section with the wrong shape is skipped, and a
    failing page does not stop the remaining pages or later sections. The
    report lists each section that ran.
    """
    return runner.run(body)
