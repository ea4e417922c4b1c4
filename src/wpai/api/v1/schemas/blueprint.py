# Blueprint schemas.
# Created: 2026-10-12

from __future__ import annotations

from pydantic import BaseModel


class BlueprintReport(BaseModel):
    """One line per section that ran, in execution order."""

    success: bool = True
    report: list[str]
