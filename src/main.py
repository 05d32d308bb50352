# src/main.py — v1
"""CLI entry point — serve, providers commands.

Usage:
    chatrelay serve [--host HOST] [--port PORT] [--reload] [-v]
    chatrelay providers
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING

from chatrelay.version import __version__

if TYPE_CHECKING:
    from chatrelay.config.settings import Settings

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="chatrelay",
        description=f"chatrelay v{__version__} — Streaming multi-provider chat relay",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- serve ---
    p_serve = subparsers.add_parser("serve", help="Run the HTTP relay")
    p_serve.add_argument(
        "--host", default=None,
        help="Bind address (default: HOST setting, 0.0.0.0)",
    )
    p_serve.add_argument(
        "--port", type=int, default=None,
        help="Listening port (default: PORT setting, 3000)",
    )
    p_serve.add_argument(
        "--reload", action="store_true",
        help="Reload on code changes (development)",
    )
    p_serve.set_defaults(func=_cmd_serve)

    # --- providers ---
    p_providers = subparsers.add_parser(
        "providers", help="List configured providers and rotation order",
    )
    p_providers.set_defaults(func=_cmd_providers)

    return parser


def _cmd_serve(args: argparse.Namespace) -> int:
    """Start uvicorn with the application factory."""
    import uvicorn

    from chatrelay.config.settings import load_settings

    settings = load_settings()
    _setup_logging(settings, args.verbose)

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("Starting chatrelay v%s on http://%s:%d", __version__, host, port)
    uvicorn.run(
        "chatrelay.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=args.reload,
        log_level="debug" if args.verbose else settings.log_level.lower(),
    )
    return 0


def _cmd_providers(args: argparse.Namespace) -> int:
    """Print the provider roster as the registry would build it."""
    from chatrelay.config.settings import load_settings
    from chatrelay.llm.config import build_descriptors

    settings = load_settings()
    descriptors = build_descriptors(settings)
    rotation = [d.key for d in descriptors if d.in_rotation]

    print(f"\nProviders ({len(descriptors)}):")
    for d in descriptors:
        flags = []
        if d.accepts_images:
            flags.append("images")
        if d.in_rotation:
            flags.append(f"rotation #{rotation.index(d.key) + 1}")
        if not d.api_key:
            flags.append("no api key")
        print(f"  {d.key:<10} {d.name:<18} {d.model:<45} [{', '.join(flags)}]")
    print(f"\nAuto rotation: {' → '.join(rotation)}")
    return 0


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging from settings, forcing DEBUG when verbose."""
    from chatrelay.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
