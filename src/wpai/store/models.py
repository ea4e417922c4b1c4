"""Content store records.

Design notes:
- Dataclasses with to_dict/from_dict for JSON persistence
- Integer IDs from one shared counter, so a page and a menu item never share an ID
- Timestamps are ISO 8601 strings
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


def now_iso() -> str:
    """Get current UTC time as ISO 8601 string."""
    return datetime.now(UTC).isoformat()


@dataclass
class Term:
    """A taxonomy term. Navigation menus are terms in the ``nav_menu`` taxonomy."""

    id: int
    name: str
    slug: str
    taxonomy: str = "category"
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "taxonomy": self.taxonomy,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Term":
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            slug=data.get("slug", ""),
            taxonomy=data.get("taxonomy", "category"),
            description=data.get("description", ""),
        )


@dataclass
class Page:
    """A page, addressed by its slug."""

    id: int
    title: str
    slug: str
    status: str = "publish"
    content: str = ""
    created_at: str = field(default_factory=now_iso)
    modified_at: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "status": self.status,
            "content": self.content,
            "created_at": self.created_at,
            "modified_at": self.modified_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Page":
        return cls(
            id=int(data["id"]),
            title=data.get("title", ""),
            slug=data.get("slug", ""),
            status=data.get("status", "publish"),
            content=data.get("content", ""),
            created_at=data.get("created_at", now_iso()),
            modified_at=data.get("modified_at", now_iso()),
        )


@dataclass
class MenuItem:
    """One entry of a navigation menu; ``position`` orders items within the menu."""

    id: int
    menu_id: int
    title: str
    url: str
    position: int = 0
    status: str = "publish"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "menu_id": self.menu_id,
            "title": self.title,
            "url": self.url,
            "position": self.position,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MenuItem":
        return cls(
            id=int(data["id"]),
            menu_id=int(data["menu_id"]),
            title=data.get("title", ""),
            url=data.get("url", ""),
            position=int(data.get("position", 0)),
            status=data.get("status", "publish"),
        )


@dataclass
class Extension:
    """An installed extension. ``path`` is ``<slug>/<main file>``."""

    path: str
    name: str
    slug: str = ""
    version: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "name": self.name, "slug": self.slug, "version": self.version}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Extension":
        return cls(
            path=data["path"],
            name=data.get("name", ""),
            slug=data.get("slug", ""),
            version=data.get("version", ""),
        )


@dataclass
class ExtensionInfo:
    """Metadata resolved from the extension directory."""

    slug: str
    name: str
    version: str = ""
    download_link: str = ""
