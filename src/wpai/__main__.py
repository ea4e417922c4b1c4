"""WPAI Bridge entry point.

Commands:
  wpai serve     Start the HTTP API (default)
  wpai token     Print the access token, creating it on first use
"""

import argparse
import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

from wpai.config import get_settings
from wpai.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _version() -> str:
    try:
        return get_version("wpai-bridge")
    except PackageNotFoundError:
        from wpai import __version__

        return __version__


def show_token() -> None:
    """Print the stored access token so it can be handed to an agent."""
    from wpai.security import ensure_access_token
    from wpai.store import FileSettingsStore

    settings = get_settings()
    store = FileSettingsStore(settings.resolved_site_dir())
    print(ensure_access_token(store))


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="WPAI Bridge - site configuration API for AI agents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  wpai                       Start the API server (default)
  wpai serve --port 9000     Start on a different port
  wpai serve --dev           Start with auto-reload (dev mode)
  wpai token                 Print the x-wpai-token value
""",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="serve",
        choices=["serve", "token"],
        help="Subcommand (default: serve)",
    )
    parser.add_argument("--host", default=None, help="Host to bind (default: from config)")
    parser.add_argument(
        "--port", "-p", type=int, default=None, help="Port to listen on (default: from config)"
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Development mode with auto-reload on file changes",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"%(prog)s {_version()}",
    )

    args = parser.parse_args()

    settings = get_settings()
    setup_logging(level="DEBUG" if args.dev else settings.log_level)

    if args.command == "token":
        show_token()
        return

    host = args.host if args.host is not None else settings.host
    port = args.port if args.port is not None else settings.port

    from wpai.api.serve import run_api_server

    try:
        run_api_server(host=host, port=port, dev=args.dev)
    except KeyboardInterrupt:
        logger.info("WPAI Bridge stopped.")


if __name__ == "__main__":
    main()
