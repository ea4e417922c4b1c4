"""File-based settings and content stores.

Storage layout::

    <site_dir>/
        options.json        # key/value options (settings store)
        terms.json          # categories and nav menus
        pages.json
        menu_items.json
        theme_mods.json
        extensions.json     # installed extension inventory
        counters.json       # shared ID counter
        plugins/            # unpacked extension archives

Design notes:
- Single JSON file per entity type, loaded into memory at startup
- Atomic writes using temp file + replace
- One lock per store serialises each change and its save; the last writer wins
- Active extensions live in the ``active_plugins`` option, so the content
  store needs the settings store to activate anything
"""

import io
import json
import logging
import tempfile
import threading
import zipfile
from pathlib import Path, PurePosixPath
from typing import Any

from wpai.store.directory import ExtensionDirectory
from wpai.store.errors import DuplicateError, NotFoundError, StoreError
from wpai.store.models import Extension, ExtensionInfo, MenuItem, Page, Term, now_iso

logger = logging.getLogger(__name__)

ACTIVE_EXTENSIONS_OPTION = "active_plugins"


def _load_json(path: Path, default: Any) -> Any:
    """Load a JSON file, returning *default* if missing or unreadable."""
    if not path.exists():
        return default
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.error("Error loading %s: %s", path, e)
        return default


def _save_json(path: Path, data: Any) -> None:
    """Save data to a JSON file atomically. Raises StoreError on I/O failure.

    Each save writes its own temp file, so concurrent saves never share one.
    """
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.stem}-",
            suffix=".tmp",
            delete=False,
        ) as f:
            temp_path = Path(f.name)
            json.dump(data, f, indent=2, ensure_ascii=False)
        temp_path.replace(path)
    except OSError as e:
        logger.error("Error saving %s: %s", path, e)
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()
        raise StoreError(f"Could not write {path.name}: {e}") from e


class FileSettingsStore:
    """Options persisted in ``options.json``. Safe to share across threads."""

    def __init__(self, base_path: Path):
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._file = self.base_path / "options.json"
        self._lock = threading.RLock()
        self._options: dict[str, Any] = _load_json(self._file, {})

    def get_option(self, name: str, default: Any = None) -> Any:
        with self._lock:
            return self._options.get(name, default)

    def update_option(self, name: str, value: Any) -> None:
        with self._lock:
            self._options[name] = value
            _save_json(self._file, self._options)

    def delete_option(self, name: str) -> bool:
        with self._lock:
            if name not in self._options:
                return False
            del self._options[name]
            _save_json(self._file, self._options)
            return True


class FileContentStore:
    """Terms, pages, menus and extensions persisted as JSON files.

    Every public method holds the store lock, so a worker thread (extension
    install) and the event loop can use the same instance.
    """

    def __init__(
        self,
        base_path: Path,
        settings: FileSettingsStore,
        directory: ExtensionDirectory | None = None,
    ):
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.settings = settings
        self.directory = directory or ExtensionDirectory()
        self.plugins_dir = self.base_path / "plugins"

        self._terms_file = self.base_path / "terms.json"
        self._pages_file = self.base_path / "pages.json"
        self._menu_items_file = self.base_path / "menu_items.json"
        self._theme_mods_file = self.base_path / "theme_mods.json"
        self._extensions_file = self.base_path / "extensions.json"
        self._counters_file = self.base_path / "counters.json"

        self._lock = threading.RLock()
        self._terms: dict[int, Term] = {}
        self._pages: dict[int, Page] = {}
        self._menu_items: dict[int, MenuItem] = {}
        self._extensions: dict[str, Extension] = {}
        self._theme_mods: dict[str, Any] = {}
        self._next_id = 1

        self._load_all()

    def _load_all(self) -> None:
        for data in _load_json(self._terms_file, []):
            term = Term.from_dict(data)
            self._terms[term.id] = term
        for data in _load_json(self._pages_file, []):
            page = Page.from_dict(data)
            self._pages[page.id] = page
        for data in _load_json(self._menu_items_file, []):
            item = MenuItem.from_dict(data)
            self._menu_items[item.id] = item
        for data in _load_json(self._extensions_file, []):
            ext = Extension.from_dict(data)
            self._extensions[ext.path] = ext
        self._theme_mods = _load_json(self._theme_mods_file, {})
        self._next_id = int(_load_json(self._counters_file, {}).get("next_id", 1))

        logger.info(
            "Content store loaded: %d terms, %d pages, %d menu items, %d extensions",
            len(self._terms),
            len(self._pages),
            len(self._menu_items),
            len(self._extensions),
        )

    # The helpers below expect the caller to hold self._lock.

    def _allocate_id(self) -> int:
        new_id = self._next_id
        self._next_id += 1
        _save_json(self._counters_file, {"next_id": self._next_id})
        return new_id

    def _persist_terms(self) -> None:
        _save_json(self._terms_file, [t.to_dict() for t in self._terms.values()])

    def _persist_pages(self) -> None:
        _save_json(self._pages_file, [p.to_dict() for p in self._pages.values()])

    def _persist_menu_items(self) -> None:
        _save_json(self._menu_items_file, [i.to_dict() for i in self._menu_items.values()])

    def _persist_extensions(self) -> None:
        _save_json(self._extensions_file, [e.to_dict() for e in self._extensions.values()])

    # =========================================================================
    # Terms
    # =========================================================================

    def insert_term(self, name: str, taxonomy: str, slug: str) -> Term:
        with self._lock:
            for term in self._terms.values():
                if term.taxonomy == taxonomy and term.slug == slug:
                    raise DuplicateError(
                        "A term with the name provided already exists with this parent."
                    )
            term = Term(id=self._allocate_id(), name=name, slug=slug, taxonomy=taxonomy)
            self._terms[term.id] = term
            self._persist_terms()
            return term

    def get_term_by_name(self, name: str, taxonomy: str) -> Term | None:
        with self._lock:
            for term in self._terms.values():
                if term.taxonomy == taxonomy and term.name == name:
                    return term
            return None

    def list_terms(self, taxonomy: str = "category") -> list[Term]:
        with self._lock:
            return sorted(
                (t for t in self._terms.values() if t.taxonomy == taxonomy), key=lambda t: t.id
            )

    # =========================================================================
    # Pages
    # =========================================================================

    def get_page_by_slug(self, slug: str) -> Page | None:
        with self._lock:
            for page in self._pages.values():
                if page.slug == slug:
                    return page
            return None

    def get_page(self, page_id: int) -> Page | None:
        with self._lock:
            return self._pages.get(page_id)

    def list_pages(self) -> list[Page]:
        with self._lock:
            return sorted(self._pages.values(), key=lambda p: p.id)

    def insert_page(self, title: str, slug: str, status: str, content: str) -> Page:
        with self._lock:
            page = Page(
                id=self._allocate_id(), title=title, slug=slug, status=status, content=content
            )
            self._pages[page.id] = page
            self._persist_pages()
            return page

    def update_page(self, page_id: int, title: str, slug: str, status: str, content: str) -> Page:
        with self._lock:
            page = self._pages.get(page_id)
            if page is None:
                raise NotFoundError("Invalid post ID.")
            page.title = title
            page.slug = slug
            page.status = status
            page.content = content
            page.modified_at = now_iso()
            self._persist_pages()
            return page

    # =========================================================================
    # Menus
    # =========================================================================

    def create_menu(self, name: str) -> Term:
        with self._lock:
            if self.get_term_by_name(name, "nav_menu") is not None:
                raise DuplicateError(
                    f"The menu name {name} conflicts with another menu name. Please try another."
                )
            slug = name.strip().lower().replace(" ", "-")
            term = Term(id=self._allocate_id(), name=name, slug=slug, taxonomy="nav_menu")
            self._terms[term.id] = term
            self._persist_terms()
            return term

    def get_menu_items(self, menu_id: int) -> list[MenuItem]:
        with self._lock:
            items = [i for i in self._menu_items.values() if i.menu_id == menu_id]
        items.sort(key=lambda i: i.position)
        return items

    def delete_menu_item(self, item_id: int) -> None:
        with self._lock:
            if self._menu_items.pop(item_id, None) is not None:
                self._persist_menu_items()

    def add_menu_item(self, menu_id: int, title: str, url: str) -> MenuItem:
        with self._lock:
            menu = self._terms.get(menu_id)
            if menu is None or menu.taxonomy != "nav_menu":
                raise NotFoundError("Invalid menu ID.")
            existing = self.get_menu_items(menu_id)
            position = existing[-1].position + 1 if existing else 1
            item = MenuItem(
                id=self._allocate_id(), menu_id=menu_id, title=title, url=url, position=position
            )
            self._menu_items[item.id] = item
            self._persist_menu_items()
            return item

    def get_theme_mod(self, name: str, default: Any = None) -> Any:
        with self._lock:
            return self._theme_mods.get(name, default)

    def set_theme_mod(self, name: str, value: Any) -> None:
        with self._lock:
            self._theme_mods[name] = value
            _save_json(self._theme_mods_file, self._theme_mods)

    # =========================================================================
    # Extensions
    # =========================================================================

    def list_extensions(self) -> dict[str, Extension]:
        with self._lock:
            return dict(sorted(self._extensions.items()))

    def active_extensions(self) -> list[str]:
        active = self.settings.get_option(ACTIVE_EXTENSIONS_OPTION, [])
        return list(active) if isinstance(active, list) else []

    def resolve_extension(self, slug: str) -> ExtensionInfo:
        return self.directory.get_info(slug)

    def install_extension(self, info: ExtensionInfo) -> Extension:
        """Download and unpack an extension archive into ``plugins/``.

        The download happens outside the lock; unpacking and bookkeeping inside it.
        """
        if not info.download_link:
            raise StoreError("No download link for this plugin.", status=500)
        if (self.plugins_dir / info.slug).exists():
            raise DuplicateError("Destination folder already exists.")

        archive = self.directory.download(info.download_link)
        with self._lock:
            if (self.plugins_dir / info.slug).exists():
                raise DuplicateError("Destination folder already exists.")
            try:
                with zipfile.ZipFile(io.BytesIO(archive)) as zf:
                    for member in zf.namelist():
                        parts = PurePosixPath(member).parts
                        if member.startswith("/") or ".." in parts:
                            raise StoreError(f"Unsafe path in archive: {member}", status=500)
                    self.plugins_dir.mkdir(parents=True, exist_ok=True)
                    zf.extractall(self.plugins_dir)
            except zipfile.BadZipFile as e:
                raise StoreError(f"Incompatible Archive. {e}", status=500) from e

            ext = Extension(
                path=f"{info.slug}/{info.slug}.php",
                name=info.name or info.slug,
                slug=info.slug,
                version=info.version,
            )
            self._extensions[ext.path] = ext
            self._persist_extensions()
        logger.info("Installed extension %s %s", ext.path, ext.version)
        return ext

    def activate_extension(self, path: str) -> None:
        with self._lock:
            if path not in self._extensions:
                raise NotFoundError("Plugin file does not exist.")
            active = self.active_extensions()
            if path not in active:
                active.append(path)
                self.settings.update_option(ACTIVE_EXTENSIONS_OPTION, active)
