#!/usr/bin/env python3
"""
Dashboard Server Entry Point

Simple uvicorn launcher for the review dashboard.

Usage:
    # Development mode with auto-reload
    python -m dashboard.server

    # Custom host/port
    python -m dashboard.server --host 0.0.0.0 --port 3000

    # Production mode (no reload)
    python -m dashboard.server --no-reload

    # Or use uvicorn directly
    uvicorn dashboard.app:create_app --factory --reload
"""

import argparse

from utils.config_loader import load_config


def main():
    """Launch the dashboard server."""
    parser = argparse.ArgumentParser(
        description="Review Dashboard Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Development mode (auto-reload enabled)
  python -m dashboard.server

  # Point at a different backend
  REVIEWS_API_URL=https://reviews.example.com/api python -m dashboard.server --no-reload
        """
    )

    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=3000,
        help="Port to serve the dashboard on (default: 3000)"
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload (use for production)"
    )

    args = parser.parse_args()

    # Fail fast on bad configuration before uvicorn starts
    config = load_config()

    print("=" * 80)
    print("Review Dashboard")
    print("=" * 80)
    print(f"Dashboard:   http://{args.host}:{args.port}")
    print(f"JSON state:  http://{args.host}:{args.port}/api/dashboard")
    print(f"Backend API: {config.api_base_url}")
    print(f"Refresh:     every {config.refresh_interval_seconds:g}s")
    if config.demo_fallback:
        print("Demo fallback data is ON (shown when the backend is unreachable)")
    print("")
    print("Press Ctrl+C to stop the server")
    print("=" * 80)
    print("")

    import uvicorn
    uvicorn.run(
        "dashboard.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
        log_level=config.log_level.lower()
    )


if __name__ == "__main__":
    main()
