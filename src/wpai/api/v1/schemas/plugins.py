# Plugin schemas.
# Created: 2026-10-12

from __future__ import annotations

from pydantic import BaseModel


class PluginEntry(BaseModel):
    path: str
    name: str
    active: bool
