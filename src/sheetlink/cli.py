"""Command-line interface for sheetlink."""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime, timezone

import uvicorn

from .config import settings


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="sheetlink - Google Sheets grid sync over a service account"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Fetch command
    fetch_parser = subparsers.add_parser("fetch", help="Print the configured range as JSON")
    fetch_parser.add_argument(
        "--values", action="store_true", help="Fetch plain values without validation"
    )

    # Set command
    set_parser = subparsers.add_parser("set", help="Write a single cell")
    set_parser.add_argument("range", help="Cell in A1 notation, e.g. B3")
    set_parser.add_argument("value", help="Value to write (RAW)")

    # Token command
    subparsers.add_parser("token", help="Verify the service account by fetching a token")

    args = parser.parse_args()
    configure_logging(args.debug)

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "fetch":
        asyncio.run(run_fetch(args.values))
    elif args.command == "set":
        sys.exit(0 if asyncio.run(run_set(args.range, args.value)) else 1)
    elif args.command == "token":
        sys.exit(0 if asyncio.run(run_token()) else 1)
    else:
        parser.print_help()
        sys.exit(1)


def configure_logging(debug: bool = False):
    level = logging.DEBUG if debug or settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "sheetlink.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


async def run_fetch(values_only: bool):
    """Fetch the configured range and print it."""
    from .sync import SheetSync

    async with SheetSync() as sync:
        if values_only:
            output = {"rows": await sync.fetch_values()}
        else:
            output = (await sync.fetch_grid_with_validation()).model_dump()
    print(json.dumps(output, indent=2, ensure_ascii=False))


async def run_set(range_a1: str, value: str) -> bool:
    """Write one cell and report the outcome."""
    from .sync import SheetSync

    async with SheetSync() as sync:
        success = await sync.update_cell(range_a1, value)
    print(f"{range_a1}: {'updated' if success else 'FAILED'}")
    return success


async def run_token() -> bool:
    """Fetch an access token to check the service account setup."""
    from .errors import AuthError
    from .sync import SheetSync

    print("Authenticating with service account...")
    async with SheetSync() as sync:
        try:
            await sync.access_token()
        except AuthError as e:
            print(f"Authentication failed: {e}")
            return False
        expires = datetime.fromtimestamp(sync.tokens.cached.expires_at, tz=timezone.utc)
    print(f"Authentication successful! Token expires at {expires.isoformat()}")
    return True


if __name__ == "__main__":
    main()
