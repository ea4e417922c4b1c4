"""Operation handlers: one method per capability.

Each handler validates its payload before touching a store, translates the
payload into store calls, and returns an OperationResult or OperationError.
Store failures are converted, never raised.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Mapping
from typing import Any

from wpai import __version__
from wpai.operations.results import Outcome, OperationError, OperationResult, missing_field
from wpai.operations.text import clean_url, sanitize_text, slugify
from wpai.store.errors import DuplicateError, StoreError
from wpai.store.protocol import ContentStoreProtocol, SettingsStoreProtocol

logger = logging.getLogger(__name__)

DEFAULT_PERMALINK = "/%category%/%postname%/"
DEFAULT_TIMEZONE = "America/New_York"
DEFAULT_PAGE_STATUS = "publish"
PAGE_STATUSES = frozenset({"publish", "draft", "pending", "private", "future"})

SEO_EXTENSION_PATH = "seo-by-rank-math/rank-math.php"
MENU_LOCATIONS_MOD = "nav_menu_locations"


def _params(payload: Any) -> dict[str, Any]:
    return dict(payload) if isinstance(payload, Mapping) else {}


def _guarded(func: Callable[..., Outcome]) -> Callable[..., Outcome]:
    """Convert store failures (and unexpected errors) into an OperationError."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Outcome:
        try:
            return func(*args, **kwargs)
        except StoreError as e:
            logger.warning("%s failed in store: %s", func.__name__, e)
            return OperationError("upstream_error", str(e), e.status)
        except Exception as e:
            logger.exception("%s failed", func.__name__)
            return OperationError("internal_error", str(e), 500)

    return wrapper


class SiteOperations:
    """Site configuration handlers over a settings store and a content store.

    Usage::

        ops = SiteOperations(settings_store, content_store)
        outcome = ops.create_or_update_page({"title": "Home"})
        payload = outcome.to_dict()
    """

    def __init__(self, settings: SettingsStoreProtocol, content: ContentStoreProtocol):
        self.settings = settings
        self.content = content

    # =========================================================================
    # Introspection
    # =========================================================================

    @_guarded
    def site_info(self, payload: Any = None) -> Outcome:
        """Snapshot of site settings plus the extension inventory."""
        site_url = self.settings.get_option("siteurl", "")
        extensions = self.content.list_extensions()
        return OperationResult(
            data={
                "wp_version": __version__,
                "site_url": site_url,
                "home_url": self.settings.get_option("home", site_url),
                "blogname": self.settings.get_option("blogname", ""),
                "blogdescription": self.settings.get_option("blogdescription", ""),
                "timezone": self.settings.get_option("timezone_string", ""),
                "permalink": self.settings.get_option("permalink_structure", ""),
                "active_theme": self.settings.get_option("template", "default"),
                "active_plugins": self.content.active_extensions(),
                "all_plugins": {
                    path: {"Name": ext.name, "Version": ext.version}
                    for path, ext in extensions.items()
                },
            }
        )

    # =========================================================================
    # Settings
    # =========================================================================

    @_guarded
    def basic_setup(self, payload: Any = None) -> Outcome:
        """Permalinks and timezone (with defaults), plus optional title/tagline."""
        params = _params(payload)

        self.settings.update_option(
            "permalink_structure", params.get("permalink") or DEFAULT_PERMALINK
        )
        self.settings.update_option("timezone_string", params.get("timezone") or DEFAULT_TIMEZONE)

        title = params.get("title") or params.get("blogname")
        if title:
            self.settings.update_option("blogname", sanitize_text(title))
        description = params.get("description") or params.get("blogdescription")
        if description:
            self.settings.update_option("blogdescription", sanitize_text(description))

        return OperationResult(message="Basic setup completed.")

    @_guarded
    def set_option(self, payload: Any = None) -> Outcome:
        params = _params(payload)
        name = sanitize_text(params.get("option_name"))
        if not name:
            return missing_field("option_name", "option_name required")
        value = params.get("option_value", "")
        if value is None:
            value = ""
        self.settings.update_option(name, value)
        return OperationResult(message=f"Updated option {name}")

    @_guarded
    def set_homepage(self, payload: Any = None) -> Outcome:
        """Point the static front page at a page given by ID or slug."""
        params = _params(payload)

        page = None
        try:
            page_id = int(params.get("page_id") or 0)
        except (TypeError, ValueError):
            page_id = 0
        if page_id > 0:
            page = self.content.get_page(page_id)
        if page is None and params.get("slug"):
            page = self.content.get_page_by_slug(slugify(params["slug"]))

        if page is None:
            return OperationError("not_found", "No valid page provided", 400)

        self.settings.update_option("show_on_front", "page")
        self.settings.update_option("page_on_front", page.id)
        return OperationResult(message="Homepage set", data={"page_id": page.id})

    @_guarded
    def seo_setup(self, payload: Any = None) -> Outcome:
        """Write Rank Math defaults derived from the site title and tagline."""
        if SEO_EXTENSION_PATH not in self.content.active_extensions():
            return OperationResult(success=False, message="Rank Math not active.")

        sitename = self.settings.get_option("blogname", "")
        tagline = self.settings.get_option("blogdescription", "")

        general = self.settings.get_option("rank-math-options-general", {})
        if not isinstance(general, dict):
            general = {}
        general.update({"breadcrumb": "on", "separator": "»", "sitename": sitename})
        self.settings.update_option("rank-math-options-general", general)

        titles = self.settings.get_option("rank-math-options-titles", {})
        if not isinstance(titles, dict):
            titles = {}
        titles.update(
            {
                "homepage_title": sitename + (f" | {tagline}" if tagline else ""),
                "homepage_desc": f"Latest content from {sitename}.",
                "post_title": f"%title% | {sitename}",
                "category_title": f"%term% | {sitename}",
            }
        )
        self.settings.update_option("rank-math-options-titles", titles)

        return OperationResult(message="Rank Math configured with defaults.")

    # =========================================================================
    # Content
    # =========================================================================

    @_guarded
    def create_categories(self, payload: Any = None) -> Outcome:
        """Bulk-create categories. Existing slugs and nameless entries are skipped."""
        params = _params(payload)
        created = []
        categories = params.get("categories")
        if isinstance(categories, list):
            for cat in categories:
                if not isinstance(cat, Mapping):
                    continue
                name = sanitize_text(cat.get("name"))
                slug = slugify(cat.get("slug") or name)
                if not name or not slug:
                    continue
                try:
                    term = self.content.insert_term(name, "category", slug)
                except DuplicateError:
                    logger.debug("Category slug '%s' already exists", slug)
                    continue
                created.append({"term_id": term.id, "name": term.name, "slug": term.slug})
        return OperationResult(data={"created": created})

    @_guarded
    def create_or_update_page(self, payload: Any = None) -> Outcome:
        """Upsert a page keyed by slug (derived from the title when absent)."""
        params = _params(payload)
        title = sanitize_text(params.get("title"))
        if not title:
            return missing_field("title")

        slug = slugify(params.get("slug") or title)
        if not slug:
            return OperationError(
                "validation_error", "title or slug must contain letters or digits", 400
            )
        status = params.get("status") or DEFAULT_PAGE_STATUS
        if status not in PAGE_STATUSES:
            return OperationError("validation_error", f"Invalid page status: {status}", 400)
        content = params.get("content") or ""
        if not isinstance(content, str):
            content = str(content)

        existing = self.content.get_page_by_slug(slug)
        if existing is not None:
            page = self.content.update_page(existing.id, title, slug, status, content)
        else:
            page = self.content.insert_page(title, slug, status, content)
        return OperationResult(data={"page_id": page.id})

    @_guarded
    def create_or_update_menu(self, payload: Any = None) -> Outcome:
        """Create a menu or reuse one by name, then replace all of its items."""
        params = _params(payload)
        name = sanitize_text(params.get("name"))
        if not name:
            return missing_field("name", "Menu name required")

        try:
            menu_id = self.content.create_menu(name).id
        except DuplicateError:
            menu = self.content.get_term_by_name(name, "nav_menu")
            if menu is None:
                raise
            menu_id = menu.id

        for item in self.content.get_menu_items(menu_id):
            self.content.delete_menu_item(item.id)

        items = params.get("items")
        if isinstance(items, list):
            for item in items:
                if not isinstance(item, Mapping):
                    continue
                title = sanitize_text(item.get("title"))
                url = clean_url(item.get("url"))
                if not title or not url:
                    continue
                self.content.add_menu_item(menu_id, title, url)

        location = params.get("location")
        if location:
            locations = self.content.get_theme_mod(MENU_LOCATIONS_MOD)
            if not isinstance(locations, dict):
                locations = {}
            locations[str(location)] = menu_id
            self.content.set_theme_mod(MENU_LOCATIONS_MOD, locations)

        return OperationResult(data={"menu_id": menu_id})

    # =========================================================================
    # Extensions
    # =========================================================================

    @_guarded
    def list_extensions(self, payload: Any = None) -> Outcome:
        active = set(self.content.active_extensions())
        plugins = [
            {"path": path, "name": ext.name, "active": path in active}
            for path, ext in self.content.list_extensions().items()
        ]
        return OperationResult(data={"plugins": plugins})

    @_guarded
    def install_extension(self, payload: Any = None) -> Outcome:
        """Resolve, install, then attempt activation (activation is best-effort)."""
        params = _params(payload)
        slug = sanitize_text(params.get("slug"))
        if not slug:
            return missing_field("slug", "slug required")

        info = self.content.resolve_extension(slug)
        ext = self.content.install_extension(info)

        try:
            self.content.activate_extension(f"{info.slug}/{info.slug}.php")
        except StoreError as e:
            logger.warning("Installed %s but activation failed: %s", ext.path, e)

        return OperationResult(
            message="Plugin installed and attempted activation.", data={"plugin": info.slug}
        )
