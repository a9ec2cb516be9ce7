"""CLI entrypoint for serving an application's interactions endpoint."""

import argparse
import importlib
import os

import uvicorn
from fastapi import FastAPI

from slashkit.application import Application
from slashkit.config import load_settings
from slashkit.server import create_app


def load_target(target: str):
    """Resolve ``module:attribute`` to an Application or FastAPI app.

    The attribute may also be a zero-argument callable returning either.
    """
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise SystemExit(f"Target must look like 'module:attribute', got {target!r}")
    obj = getattr(importlib.import_module(module_name), attr)
    if callable(obj) and not isinstance(obj, (Application, FastAPI)):
        obj = obj()
    if not isinstance(obj, (Application, FastAPI)):
        raise SystemExit(f"{target} is not an Application or FastAPI app")
    return obj


def main():
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Serve an interactions endpoint")
    parser.add_argument("target", help="Application to serve, as module:attribute")
    parser.add_argument("--host", default=settings.server.host, help="Bind address")
    parser.add_argument("--port", type=int, default=settings.server.port, help="Bind port")
    parser.add_argument(
        "--log-format",
        choices=("json", "text"),
        default=settings.server.log_format,
        help="Log output format",
    )
    parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip signature verification (local testing only)",
    )
    args = parser.parse_args()

    os.environ["SLASHKIT_SERVER_LOG_FORMAT"] = args.log_format
    if args.no_verify:
        os.environ["SLASHKIT_SERVER_VERIFY_SIGNATURES"] = "false"

    target = load_target(args.target)
    app = target if isinstance(target, FastAPI) else create_app(target, load_settings())
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
