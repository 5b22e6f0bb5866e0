#!/usr/bin/env python3
"""Run the CodeHunt backend.

Usage:
    python run.py [--host HOST] [--port PORT] [--reload] [--workers N]

Examples:
    python run.py                      # Run with defaults (CODEHUNT_HOST:CODEHUNT_PORT)
    python run.py --port 8080          # Run on port 8080
    python run.py --reload             # Run with auto-reload for development

Storage, logging and admin settings come from CODEHUNT_* environment
variables (see codehunt/config.py).
"""

import argparse
import sys


def main():
    from codehunt.config import get_settings

    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Run the CodeHunt backend",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py                      Run with defaults (CODEHUNT_HOST:CODEHUNT_PORT)
  python run.py --host 0.0.0.0       Listen on all interfaces
  python run.py --reload             Enable auto-reload (development)
  python run.py --workers 4          Run with 4 worker processes (sql backend only)
        """,
    )

    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Host to bind to (default: {settings.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Port to bind to (default: {settings.port})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload on code changes (development mode)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes (default: 1)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        default=settings.log_level.lower(),
        help="Uvicorn log level (default: CODEHUNT_LOG_LEVEL)",
    )

    args = parser.parse_args()

    if args.workers > 1 and settings.storage_backend == "memory":
        # each worker would hold its own copy of every team
        print("Error: --workers > 1 requires CODEHUNT_STORAGE_BACKEND=sql")
        sys.exit(1)

    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn is not installed.")
        print("Install it with: pip install uvicorn[standard]")
        sys.exit(1)

    print(f"""
CodeHunt backend starting at http://{args.host}:{args.port}
  API Docs: http://{args.host}:{args.port}/docs
    """)

    uvicorn.run(
        "codehunt.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers if not args.reload else 1,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
