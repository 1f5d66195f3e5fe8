#!/usr/bin/env python
"""
Run the RelayDrive API server.

Usage:
    python run_api.py
    python run_api.py --reload            # Development mode
    python run_api.py --check             # Validate the environment and exit

Settings are validated before uvicorn starts, so a missing DATABASE_URL or
a short JWT_SECRET stops the process with a readable list of problems.
"""

import argparse
import sys

import uvicorn
from rich.console import Console

from shared.config import get_settings
from shared.exceptions import ConfigurationError

console = Console()


def main():
    parser = argparse.ArgumentParser(description="Run RelayDrive API server")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--host", type=str, help="Host to bind to")
    parser.add_argument("--port", type=int, help="Port to bind to")
    parser.add_argument("--check", action="store_true", help="Validate configuration and exit")
    args = parser.parse_args()

    try:
        settings = get_settings()
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        sys.exit(1)

    if not settings.relay_configured:
        console.print("[yellow]Warning:[/yellow] RELAY_BOT_TOKEN or RELAY_CHAT_ID is not set")

    if args.check:
        console.print(f"[green]✓[/green] Configuration OK ({settings.node_env})")
        return

    uvicorn.run(
        "api:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload or settings.reload,
        log_config=None,  # the app's lifespan configures logging
    )


if __name__ == "__main__":
    main()
