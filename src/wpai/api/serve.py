"""App factory and server runner for ``wpai serve``.

``create_app()`` wires the stores, the operation handlers, the blueprint
runner and the capability adapter onto ``app.state``, ensures the access
token exists, and probes for an external capability registry once.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi import FastAPI

    from wpai.config import Settings
    from wpai.hooks import HookBus
    from wpai.store.protocol import ContentStoreProtocol, SettingsStoreProtocol

logger = logging.getLogger(__name__)


def build_stores(
    settings: Settings, settings_store: SettingsStoreProtocol | None = None
) -> tuple[SettingsStoreProtocol, ContentStoreProtocol]:
    """File-backed stores rooted at the configured site directory."""
    from wpai.store import ExtensionDirectory, FileContentStore, FileSettingsStore

    site_dir = settings.resolved_site_dir()
    if settings_store is None:
        settings_store = FileSettingsStore(site_dir)
    directory = ExtensionDirectory(
        base_url=settings.extension_directory_url, timeout=settings.http_timeout
    )
    content_store = FileContentStore(site_dir, settings_store, directory=directory)
    return settings_store, content_store


def create_app(
    settings: Settings | None = None,
    settings_store: SettingsStoreProtocol | None = None,
    content_store: ContentStoreProtocol | None = None,
    hooks: HookBus | None = None,
    environ: Mapping[str, str] | None = None,
) -> FastAPI:
    """Build the FastAPI application. Stores default to the file-backed ones."""
    from fastapi import FastAPI
    from fastapi.middleware.cors import CORSMiddleware

    from wpai import __version__
    from wpai.api.auth import auth_middleware
    from wpai.api.v1 import API_PREFIX, mount_v1_routers
    from wpai.blueprint import BlueprintRunner
    from wpai.capabilities import CapabilityAdapter, build_capabilities
    from wpai.config import get_settings
    from wpai.operations import SiteOperations
    from wpai.security import ensure_access_token

    settings = settings or get_settings()
    if content_store is None:
        settings_store, content_store = build_stores(settings, settings_store)
    elif settings_store is None:
        from wpai.store import FileSettingsStore

        settings_store = FileSettingsStore(settings.resolved_site_dir())

    ensure_access_token(settings_store)
    if not settings_store.get_option("siteurl"):
        settings_store.update_option("siteurl", settings.site_url)
    if not settings_store.get_option("home"):
        settings_store.update_option("home", settings.home_url or settings.site_url)

    operations = SiteOperations(settings_store, content_store)
    runner = BlueprintRunner(operations)
    capabilities = build_capabilities(operations, runner)
    adapter = CapabilityAdapter(capabilities, hooks=hooks, environ=environ)
    adapter.bootstrap()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # The hook bus may be the process-wide one and outlive this app
        adapter.unsubscribe()
        directory =getattr(content_store, "directory", None)
        if directory is not None and hasattr(directory, "close"):
            directory.close()

    app = FastAPI(
        title="WPAI Bridge",
        description="Site configuration API for AI agents.",
        version=__version__,
        docs_url=f"{API_PREFIX}/docs",
        redoc_url=f"{API_PREFIX}/redoc",
        openapi_url=f"{API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.settings_store = settings_store
    app.state.content_store = content_store
    app.state.operations = operations
    app.state.blueprint_runner = runner
    app.state.capability_adapter = adapter

    # --- CORS -----------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "x-wpai-token"],
    )

    # --- Auth middleware -------------------------------------------------
    app.middleware("http")(auth_middleware)

    # --- Mount all /wpai/v1/ routers ------------------------------------
    mount_v1_routers(app)

    return app


def run_api_server(host: str = "127.0.0.1", port: int = 8899, dev: bool = False) -> None:
    """Start the bridge with uvicorn."""
    import uvicorn

    print("\n" + "=" * 50)
    print("WPAI BRIDGE")
    print("=" * 50)
    shown_host = "localhost" if host in ("127.0.0.1", "0.0.0.0") else host
    print(f"\nAPI docs: http://{shown_host}:{port}/wpai/v1/docs")
    if host == "0.0.0.0":
        print(f"   (listening on all interfaces, {host}:{port})")
    print()

    if dev:
        import pathlib

        src_dir = str(pathlib.Path(__file__).resolve().parent.parent)
        uvicorn.run(
            "wpai.api.serve:create_app",
            factory=True,
            host=host,
            port=port,
            reload=True,
            reload_dirs=[src_dir],
            reload_includes=["*.py"],
            log_level="debug",
        )
    else:
        app = create_app()
        uvicorn.run(app, host=host, port=port)
