#!/usr/bin/env python3
"""
Check that the relay bot token works and the destination chat is reachable.

Usage:
    python check_relay.py
"""

import asyncio
import sys

from rich.console import Console
from rich.table import Table

from modules.storage.service import RelayStorageGateway
from shared.config import get_settings
from shared.exceptions import ConfigurationError

console = Console()


def _mark(ok: bool) -> str:
    return "[green]✓ ok[/green]" if ok else "[red]✗ failed[/red]"


async def run_checks() -> bool:
    try:
        settings = get_settings()
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        return False

    if not settings.relay_configured:
        console.print("[red]Error:[/red] RELAY_BOT_TOKEN and RELAY_CHAT_ID must both be set")
        return False

    gateway = RelayStorageGateway.from_settings(settings)
    try:
        health = await gateway.health()
    finally:
        await gateway.aclose()

    table = Table(title="Relay Status")
    table.add_column("Check", style="cyan")
    table.add_column("Result")
    table.add_row("Bot credentials (getMe)", _mark(health.credentials_valid))
    table.add_row(f"Destination chat {settings.relay_chat_id} (getChat)", _mark(health.destination_accessible))
    console.print(table)
    return health.healthy


def main():
    sys.exit(0 if asyncio.run(run_checks()) else 1)


if __name__ == "__main__":
    main()
