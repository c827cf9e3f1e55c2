#!/usr/bin/env python
"""
Start the Taskflow HTTP server under uvicorn.

uvicorn builds the app itself through the api.create_app factory, so each
worker (and each reload) gets its own service container. Command-line
flags override the HOST, PORT, RELOAD and LOG_LEVEL settings.

    python run_api.py --reload --port 5001
"""

import argparse

import uvicorn

from shared.config import get_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the Taskflow API")
    parser.add_argument("--host", help="Interface to bind (default: settings.host)")
    parser.add_argument("--port", type=int, help="Port to listen on (default: settings.port)")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--log-level", help="uvicorn log level (default: settings.log_level)")
    return parser


def main() -> None:
    args = build_parser().parse_args()
    settings = get_settings()

    uvicorn.run(
        "api:create_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload or settings.reload,
        log_level=(args.log_level or settings.log_level).lower(),
    )


if __name__ == "__main__":
    main()
