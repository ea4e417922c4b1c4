"""Store protocols.

The bridge never owns persistence: operation handlers talk to a settings store
(key/value options) and a content store (terms, pages, menus, extensions)
through these interfaces. ``FileSettingsStore``/``FileContentStore`` are the
bundled JSON implementations; a deployment can plug in any object that matches.

Failures are reported by raising :class:`wpai.store.errors.StoreError`.
"""

from typing import Any, Protocol, runtime_checkable

from wpai.store.models import Extension, ExtensionInfo, MenuItem, Page, Term


@runtime_checkable
class SettingsStoreProtocol(Protocol):
    """Key/value configuration storage."""

    def get_option(self, name: str, default: Any = None) -> Any:
        """Return the stored value, or *default* if the option is absent."""
        ...

    def update_option(self, name: str, value: Any) -> None:
        """Create or replace an option."""
        ...


@runtime_checkable
class ContentStoreProtocol(Protocol):
    """Structured content storage."""

    # =========================================================================
    # Terms
    # =========================================================================

    def insert_term(self, name: str, taxonomy: str, slug: str) -> Term:
        """Create a term. Raises DuplicateError if the slug is taken in *taxonomy*."""
        ...

    def get_term_by_name(self, name: str, taxonomy: str) -> Term | None: ...

    # =========================================================================
    # Pages
    # =========================================================================

    def get_page_by_slug(self, slug: str) -> Page | None: ...

    def get_page(self, page_id: int) -> Page | None: ...

    def insert_page(self, title: str, slug: str, status: str, content: str) -> Page: ...

    def update_page(self, page_id: int, title: str, slug: str, status: str, content: str) -> Page:
        """Update in place, keeping the ID. Raises NotFoundError for unknown IDs."""
        ...

    # =========================================================================
    # Menus
    # =========================================================================

    def create_menu(self, name: str) -> Term:
        """Create a ``nav_menu`` term. Raises DuplicateError if the name exists."""
        ...

    def get_menu_items(self, menu_id: int) -> list[MenuItem]:
        """Items of a menu ordered by position."""
        ...

    def delete_menu_item(self, item_id: int) -> None: ...

    def add_menu_item(self, menu_id: int, title: str, url: str) -> MenuItem:
        """Append an item after the current last one."""
        ...

    def get_theme_mod(self, name: str, default: Any = None) -> Any: ...

    def set_theme_mod(self, name: str, value: Any) -> None: ...

    # =========================================================================
    # Extensions
    # =========================================================================

    def list_extensions(self) -> dict[str, Extension]:
        """Installed extensions keyed by path."""
        ...

    def resolve_extension(self, slug: str) -> ExtensionInfo:
        """Look up directory metadata. Raises StoreError when unresolvable."""
        ...

    def install_extension(self, info: ExtensionInfo) -> Extension: ...

    def activate_extension(self, path: str) -> None:
        """Mark an installed extension active. Raises NotFoundError if not installed."""
        ...

    def active_extensions(self) -> list[str]: ...
