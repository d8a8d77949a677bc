
"""CLI entrypoint for tablegames."""

from __future__ import annotations

import argparse
import asyncio
import json
from typing import Optional

from tablegames.config import load_settings
from tablegames.logging_setup import configure_logging
from tablegames.registry import load_modes
from tablegames.runtime.auth import TokenAuthenticator
from tablegames.runtime.dispatcher import Dispatcher
from tablegames.runtime.serialization import pretty_json_dumps


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="tablegames")
    parser.add_argument("--config", help="Path to a TOML config file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-modes")
    dispatch_parser = subparsers.add_parser("dispatch")
    dispatch_parser.add_argument("--request", required=True, help="JSON request string")
    dispatch_parser.add_argument("--token", help="Bearer token of the caller")
    serve_parser = subparsers.add_parser("serve")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    settings = load_settings(args.config)
    configure_logging(settings.log_level)

    if args.command == "serve":
        import uvicorn

        from tablegames.api.app import create_app

        uvicorn.run(create_app(settings), host=args.host, port=args.port)
        return 0

    registry = load_modes(settings.modes)
    registry.freeze()
    try:
        if args.command == "list-modes":
            print(pretty_json_dumps(list(registry.list_modes())))
            return 0

        dispatcher = Dispatcher(registry, TokenAuthenticator(settings.build_principals()))
        request = json.loads(args.request)
        result = asyncio.run(dispatcher.dispatch(request, args.token))
        print(pretty_json_dumps({"status": result.status_code, "body": result.body}))
        return 0 if result.ok else 1
    finally:
        registry.teardown()


if __name__ == "__main__":
    raise SystemExit(main())
