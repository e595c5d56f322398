#!/usr/bin/env python3
"""
Startup script for the Datumprikker Collector API server.

Usage:
    python start_api.py              # Development mode
    python start_api.py --prod       # Production mode
    python start_api.py --port 8080  # Custom port
"""

import argparse
import uvicorn


def main():
    """Start the FastAPI server with configurable options."""
    parser = argparse.ArgumentParser(description="Start Datumprikker Collector API")
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8001,
        help="Port to bind to (default: 8001)"
    )
    parser.add_argument(
        "--prod",
        action="store_true",
        help="Run in production mode (no auto-reload)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes (default: 1)"
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload"
    )

    args = parser.parse_args()

    if args.prod:
        print(f"🚀 Starting Datumprikker Collector API on http://{args.host}:{args.port}")
        uvicorn.run(
            "api.main:app",
            host=args.host,
            port=args.port,
            workers=args.workers,
            log_level="info",
        )
        return

    reload_enabled = not args.no_reload
    print(f"🔧 Starting Datumprikker Collector API in DEVELOPMENT mode")
    print(f"   📍 http://{args.host}:{args.port}")
    print(f"   📚 API docs: http://{args.host}:{args.port}/docs")

    uvicorn_config = {
        "app": "api.main:app",
        "host": args.host,
        "port": args.port,
        "log_level": "debug",
    }
    if reload_enabled:
        uvicorn_config.update({
            "reload": True,
            "reload_dirs": ["api", "ingest", "scrapers"],
        })

    uvicorn.run(**uvicorn_config)


if __name__ == "__main__":
    main()
