# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
stoa-asgi CLI entry point.

Usage:
    stoa-asgi serve ./public                 # Serve a directory
    stoa-asgi serve ./public --port 9000     # Override port
    stoa-asgi serve --root ./site            # Use ./site/config.yaml and ./site/public
"""

from __future__ import annotations

import argparse
import logging
import sys


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stoa-asgi", description="Serve a public directory")
    parser.add_argument("--version", "-v", action="store_true", help="Show version")
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the server")
    serve.add_argument("public", nargs="?", help="Directory to serve")
    serve.add_argument("--root", help="Project directory (config.yaml, default public/)")
    serve.add_argument("--host", help="Server host (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, help="Server port (default: 8000)")
    serve.add_argument("--no-static", action="store_true", help="Disable static file serving")
    serve.add_argument("--access-log", action="store_true", help="Enable the access log middleware")
    serve.add_argument("--debug", action="store_true", help="Show tracebacks in 500 responses")
    return parser


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the ASGI server."""
    from .application import Application

    settings: dict[str, object] = {}
    if args.public:
        settings["public"] = args.public
    if args.host:
        settings["host"] = args.host
    if args.port:
        settings["port"] = args.port
    if args.no_static:
        settings["static"] = False
    if args.access_log:
        settings["middleware"] = {"logging": True}
    if args.debug:
        settings["debug"] = True

    app = Application(args.root, **settings)
    static = app.static_config
    if args.public and static.root is not None and not static.root.is_dir():
        print(f"Error: '{static.root}' is not a directory.", file=sys.stderr)
        return 1

    print("stoa-asgi starting...", flush=True)
    print(f"Public dir: {static.root if static.enabled else '(static serving off)'}", flush=True)
    print(f"Server: http://{app.config['host']}:{app.config['port']}", flush=True)
    print(flush=True)

    try:
        app.run()
    except KeyboardInterrupt:
        print("\nShutdown.")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        from . import __version__

        print(f"stoa-asgi {__version__}")
        return 0

    if args.command != "serve":
        parser.print_help()
        return 0 if args.command is None else 1

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)
    return cmd_serve(args)


if __name__ == "__main__":
    sys.exit(main())
