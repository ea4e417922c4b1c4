# Tests for the file-backed settings and content stores.
# Created: 2026-10-12

import io
import json
import threading
import zipfile
from pathlib import Path
from unittest.mock import patch

import pytest

from wpai.store import (
    DirectoryError,
    DuplicateError,
    FileContentStore,
    FileSettingsStore,
    NotFoundError,
    StoreError,
)
from wpai.store.models import ExtensionInfo

# ============================================================================
# Fixtures
# ============================================================================


def make_archive(files: dict[str, str]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, body in files.items():
            zf.writestr(name, body)
    return buf.getvalue()


class FakeDirectory:
    """Stands in for the remote extension directory."""

    def __init__(self, archive: bytes = b"", error: Exception | None = None):
        self.archive = archive
        self.error = error
        self.downloads: list[str] = []

    def get_info(self, slug):
        if self.error:
            raise self.error
        return ExtensionInfo(
            slug=slug,
            name=slug.title(),
            version="1.0.0",
            download_link=f"https://downloads.example.test/{slug}.zip",
        )

    def download(self, url):
        self.downloads.append(url)
        return self.archive

    def close(self):
        pass


@pytest.fixture
def site_dir(tmp_path) -> Path:
    return tmp_path / "site"


@pytest.fixture
def settings(site_dir):
    return FileSettingsStore(site_dir)


@pytest.fixture
def content(site_dir, settings):
    archive = make_archive({"seo-by-rank-math/rank-math.php": "<?php // main"})
    return FileContentStore(site_dir, settings, directory=FakeDirectory(archive))


# ============================================================================
# Settings store
# ============================================================================


class TestFileSettingsStore:
    """Tests for options persistence."""

    def test_default_for_missing_option(self, settings):
        assert settings.get_option("blogname") is None
        assert settings.get_option("blogname", "fallback") == "fallback"

    def test_update_persists_to_disk(self, settings, site_dir):
        settings.update_option("blogname", "Coven Notes")
        data = json.loads((site_dir / "options.json").read_text())
        assert data["blogname"] == "Coven Notes"
        assert FileSettingsStore(site_dir).get_option("blogname") == "Coven Notes"

    def test_structured_values(self, settings, site_dir):
        settings.update_option("nav", {"primary": 3})
        assert FileSettingsStore(site_dir).get_option("nav") == {"primary": 3}

    def test_delete_option(self, settings):
        settings.update_option("x", 1)
        assert settings.delete_option("x") is True
        assert settings.delete_option("x") is False
        assert settings.get_option("x") is None

    def test_corrupt_file_loads_empty(self, site_dir):
        site_dir.mkdir(parents=True)
        (site_dir / "options.json").write_text("{not json")
        assert FileSettingsStore(site_dir).get_option("anything") is None

    def test_write_failure_raises_store_error(self, settings, site_dir):
        with patch("wpai.store.file_store.json.dump", side_effect=OSError("disk full")):
            with pytest.raises(StoreError):
                settings.update_option("blogname", "x")
        assert list(site_dir.glob("*.tmp")) == []

    def test_temp_file_failure_raises_store_error(self, settings):
        with patch(
            "wpai.store.file_store.tempfile.NamedTemporaryFile", side_effect=OSError("read-only")
        ):
            with pytest.raises(StoreError):
                settings.update_option("blogname", "x")

    def test_concurrent_writers(self, settings, site_dir):
        errors = []

        def writer(prefix):
            for i in range(200):
                try:
                    settings.update_option(f"{prefix}-{i}", i)
                except Exception as e:
                    errors.append(e)

        threads = [threading.Thread(target=writer, args=(p,)) for p in ("a", "b", "c")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        data = json.loads((site_dir / "options.json").read_text())
        assert len(data) == 600
        assert list(site_dir.glob("*.tmp")) == []


# ============================================================================
# Content store
# ============================================================================


class TestTerms:
    def test_insert_and_lookup(self, content):
        term = content.insert_term("Wicca", "category", "wicca")
        assert term.id > 0
        assert content.get_term_by_name("Wicca", "category") == term
        assert content.list_terms() == [term]

    def test_duplicate_slug_rejected(self, content):
        content.insert_term("Wicca", "category", "wicca")
        with pytest.raises(DuplicateError):
            content.insert_term("Wicca Again", "category", "wicca")

    def test_same_slug_in_other_taxonomy_allowed(self, content):
        content.insert_term("Main", "category", "main")
        menu = content.create_menu("Main")
        assert menu.taxonomy == "nav_menu"


class TestPages:
    def test_insert_update_lookup(self, content):
        page = content.insert_page("About", "about", "publish", "Hi")
        assert content.get_page_by_slug("about").id == page.id
        updated = content.update_page(page.id, "About Us", "about", "draft", "Hello")
        assert updated.id == page.id
        assert content.get_page(page.id).title == "About Us"
        assert len(content.list_pages()) == 1

    def test_update_unknown_page(self, content):
        with pytest.raises(NotFoundError):
            content.update_page(999, "x", "x", "publish", "")

    def test_ids_shared_across_types(self, content):
        term = content.insert_term("A", "category", "a")
        page = content.insert_page("B", "b", "publish", "")
        assert page.id != term.id

    def test_concurrent_inserts_get_unique_ids(self, content, settings, site_dir):
        errors = []

        def inserter(prefix):
            for i in range(100):
                try:
                    content.insert_page(prefix, f"{prefix}-{i}", "publish", "")
                    settings.update_option(f"{prefix}-{i}", i)
                except Exception as e:
                    errors.append(e)

        threads = [threading.Thread(target=inserter, args=(p,)) for p in ("x", "y")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        ids = [p.id for p in content.list_pages()]
        assert len(ids) == len(set(ids)) == 200
        reloaded = FileContentStore(site_dir, settings, directory=FakeDirectory())
        assert len(reloaded.list_pages()) == 200

    def test_reload_restores_pages_and_counter(self, content, site_dir, settings):
        page = content.insert_page("About", "about", "publish", "")
        reloaded = FileContentStore(site_dir, settings, directory=FakeDirectory())
        assert reloaded.get_page(page.id).slug == "about"
        assert reloaded.insert_page("Next", "next", "publish", "").id > page.id


class TestMenus:
    def test_duplicate_menu_name(self, content):
        content.create_menu("Main")
        with pytest.raises(DuplicateError):
            content.create_menu("Main")

    def test_items_ordered_by_position(self, content):
        menu = content.create_menu("Main")
        a = content.add_menu_item(menu.id, "Home", "/")
        b = content.add_menu_item(menu.id, "About", "/about/")
        assert [i.id for i in content.get_menu_items(menu.id)] == [a.id, b.id]
        assert b.position == a.position + 1

    def test_delete_item(self, content):
        menu = content.create_menu("Main")
        item = content.add_menu_item(menu.id, "Home", "/")
        content.delete_menu_item(item.id)
        assert content.get_menu_items(menu.id) == []

    def test_add_item_to_unknown_menu(self, content):
        with pytest.raises(NotFoundError):
            content.add_menu_item(42, "Home", "/")

    def test_theme_mods(self, content):
        assert content.get_theme_mod("nav_menu_locations") is None
        content.set_theme_mod("nav_menu_locations", {"primary": 5})
        assert content.get_theme_mod("nav_menu_locations") == {"primary": 5}


class TestExtensions:
    def test_install_and_activate(self, content, site_dir):
        info = content.resolve_extension("seo-by-rank-math")
        ext = content.install_extension(info)
        assert ext.path == "seo-by-rank-math/seo-by-rank-math.php"
        assert (site_dir / "plugins" / "seo-by-rank-math" / "rank-math.php").exists()
        assert ext.path in content.list_extensions()

        content.activate_extension(ext.path)
        assert content.active_extensions() == [ext.path]
        # Activating twice keeps one entry
        content.activate_extension(ext.path)
        assert content.active_extensions() == [ext.path]

    def test_activate_unknown_path(self, content):
        with pytest.raises(NotFoundError):
            content.activate_extension("nope/nope.php")

    def test_install_twice_rejected(self, content):
        info = content.resolve_extension("seo-by-rank-math")
        content.install_extension(info)
        with pytest.raises(DuplicateError):
            content.install_extension(info)

    def test_unsafe_archive_rejected(self, site_dir, settings):
        archive = make_archive({"../escape.php": "<?php"})
        store = FileContentStore(site_dir, settings, directory=FakeDirectory(archive))
        with pytest.raises(StoreError):
            store.install_extension(store.resolve_extension("evil"))
        assert not (site_dir / "escape.php").exists()

    def test_bad_archive_rejected(self, site_dir, settings):
        store = FileContentStore(site_dir, settings, directory=FakeDirectory(b"not a zip"))
        with pytest.raises(StoreError):
            store.install_extension(store.resolve_extension("broken"))
        assert store.list_extensions() == {}

    def test_missing_download_link(self, content):
        with pytest.raises(StoreError):
            content.install_extension(ExtensionInfo(slug="x", name="X"))

    def test_resolve_error_propagates(self, site_dir, settings):
        directory = FakeDirectory(error=DirectoryError("Plugin not found.", status=404))
        store = FileContentStore(site_dir, settings, directory=directory)
        with pytest.raises(DirectoryError) as exc:
            store.resolve_extension("missing")
        assert exc.value.status == 404
