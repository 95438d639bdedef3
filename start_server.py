#!/usr/bin/env python3
"""
Start the Item Text Parser Web Server

Usage:
    python start_server.py [--port PORT] [--host HOST] [--log-level LEVEL]

Example:
    python start_server.py --port 8080 --log-level DEBUG
"""

import argparse
import logging

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO"):
    """Configure root logging for the server process."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Item Text Parser Web Server')
    parser.add_argument('--port', type=int, default=8000, help='Port to run the server on')
    parser.add_argument('--host', type=str, default='127.0.0.1', help='Host to bind to')
    parser.add_argument('--reload', action='store_true', help='Enable auto-reload for development')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level)

    print("=" * 60)
    print("Item Text Parser")
    print("=" * 60)
    print()
    print(f"Starting server at http://{args.host}:{args.port}")
    print(f"API Documentation at http://{args.host}:{args.port}/docs")
    print()
    print("Press Ctrl+C to stop the server.")
    print("=" * 60)

    import uvicorn
    uvicorn.run(
        "api:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
