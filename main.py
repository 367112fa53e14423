#!/usr/bin/env python3
"""
Auth bridge - backend-for-frontend for the upstream auth API.
"""

import argparse
import json
import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", stream=sys.stderr
)


def print_config() -> None:
    """Print the effective (non-secret) configuration as JSON."""
    from authbridge.auth.config import load_bridge_config

    cfg = load_bridge_config()
    print(
        json.dumps(
            {
                "api_base": cfg.api_base,
                "app_env": cfg.app_env,
                "cookie_secure": cfg.cookie_secure,
                "session_secret_configured": bool(cfg.session_secret),
                "session_ttl_seconds": cfg.session_ttl_seconds,
                "upstream_timeout_seconds": cfg.upstream_timeout_seconds,
            },
            indent=2,
            sort_keys=False,
        )
    )


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Auth bridge between the client app and the upstream auth API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the HTTP server
  AUTH_API_BASE=http://auth:8000/api/v1 AUTH_SESSION_SECRET=... python main.py --serve

  # Show the effective configuration
  python main.py --check-config
        """,
    )
    parser.add_argument("--serve", action="store_true", help="Run the auth bridge HTTP server")
    parser.add_argument("--check-config", action="store_true", help="Print the effective configuration and exit")
    parser.add_argument("--host", default="0.0.0.0", help="Server bind host (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8080, help="Server listen port (default: 8080)")

    args = parser.parse_args()

    if args.check_config:
        print_config()
        return

    if args.serve:
        from authbridge.api.app import run

        run(host=args.host, port=args.port)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
