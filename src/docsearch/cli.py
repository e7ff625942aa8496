"""CLI entry point for the docsearch server."""

from __future__ import annotations

import argparse
import socket
import sys
from pathlib import Path


def main() -> None:
    """Main CLI entry point for the docsearch server."""
    parser = argparse.ArgumentParser(
        prog="docsearch",
        description="docsearch — Filtered, ranked document search API",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument("--host", type=str, default=None, help="Server bind address (overrides config)")
    parser.add_argument("--port", "-p", type=int, default=None, help="Server port (overrides config)")
    parser.add_argument("--workers", "-w", type=int, default=None, help="Number of worker processes")
    parser.add_argument(
        "--corpus",
        type=str,
        default=None,
        help="JSON/YAML fallback corpus used when OpenSearch is unreachable (overrides config)",
    )
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"docsearch {_get_version()}",
    )

    args = parser.parse_args()

    log_level = (args.log_level or "info").upper()

    from docsearch.config.settings import Settings

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    # Apply CLI overrides
    if args.host:
        settings.server.host = args.host
    if args.port:
        settings.server.port = args.port
    if args.workers:
        settings.server.workers = args.workers
    if args.corpus:
        settings.fallback.corpus_path = args.corpus
    if args.log_level:
        settings.observability.log_level = args.log_level

    _check_port(settings.server.host, settings.server.port)

    import uvicorn

    from docsearch.api.app import create_app

    if args.reload or settings.server.workers > 1:
        # Reload and multi-worker modes re-import the app in child processes,
        # which read settings from the environment / docsearch-config.yaml.
        uvicorn.run(
            "docsearch.api.app:create_app",
            factory=True,
            host=settings.server.host,
            port=settings.server.port,
            workers=settings.server.workers if not args.reload else 1,
            reload=args.reload,
            log_level=log_level.lower(),
        )
    else:
        uvicorn.run(
            create_app(settings),
            host=settings.server.host,
            port=settings.server.port,
            log_level=log_level.lower(),
        )


def _check_port(host: str, port: int) -> None:
    """Exit with a readable message if the port is already taken."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.bind((host if host != "0.0.0.0" else "127.0.0.1", port))
    except OSError:
        print(f"Error: Port {port} is already in use. Run 'lsof -i :{port}' to find the process.", file=sys.stderr)
        sys.exit(1)
    finally:
        sock.close()


def _get_version() -> str:
    """Get the package version."""
    try:
        from docsearch import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    main()
