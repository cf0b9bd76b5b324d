#!/usr/bin/env python3
"""CLI tool for trellocord operations."""

import asyncio
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from .common import compute_trello_digest
from .config import RelayConfig
from .relay.store import CrossReferenceStore

console = Console()


def _mask(value: str) -> str:
    return '*' * len(value) if value else 'Not set'


@click.group()
def cli():
    """Trellocord CLI: relay Trello webhooks to Discord."""
    pass


@cli.command()
@click.option("--host", default=None, help="Host to bind to (overrides TRELLOCORD_HOST)")
@click.option("--port", default=None, type=int, help="Port to bind to (overrides TRELLOCORD_PORT)")
@click.option("--reload", is_flag=True, help="Enable auto-reload")
def serve(host, port, reload):
    """Start the webhook relay server."""
    try:
        config = RelayConfig.from_env()
        host = host or config.host
        port = port or config.port

        console.print("🚀 Starting Trello relay server...")
        console.print(f"📡 Host: {host}")
        console.print(f"🔌 Port: {port}")
        console.print(f"🔄 Reload: {reload}")

        import uvicorn
        uvicorn.run(
            "trellocord.relay.server:create_app",
            factory=True,
            host=host,
            port=port,
            reload=reload,
            log_level="info"
        )

    except KeyboardInterrupt:
        console.print("⏹️  Server stopped by user")
    except Exception as e:
        console.print(f"❌ Server failed: {e}", style="red")
        sys.exit(1)


@cli.command()
def config():
    """Show current configuration."""
    try:
        config = RelayConfig.from_env()

        console.print("📋 Trellocord Configuration:")
        console.print(f"  API Key: {_mask(config.trello.key)}")
        console.print(f"  API Token: {_mask(config.trello.token)}")
        console.print(f"  Webhook Secret: {_mask(config.trello.secret)}")
        console.print(f"  Callback URL: {config.trello.callback_url or 'Not set'}")
        console.print(f"  Public Base URL: {config.public_base_url}")
        console.print(f"  Asset Directory: {config.asset_dir}")
        console.print(f"  Redis URL: {config.redis_url}")
        console.print(f"  Known Users: {len(config.users)}")

        table = Table(title="Destinations")
        table.add_column("Name", style="cyan")
        table.add_column("Board ID", style="green")
        table.add_column("Allowed Actions", style="yellow")
        table.add_column("Tracked", style="magenta")

        for destination in config.destinations:
            policy = config.policy_for(destination.board_id)
            actions = ", ".join(sorted(a.value for a in policy.allowed_actions))
            table.add_row(
                destination.name,
                destination.board_id,
                actions,
                "✅" if policy.track_messages else "❌",
            )

        console.print(table)

    except Exception as e:
        console.print(f"❌ Failed to load configuration: {e}", style="red")
        sys.exit(1)


@cli.command()
@click.argument("card_id")
def xrefs(card_id):
    """List Discord messages recorded for a Trello card."""
    async def _list():
        store = CrossReferenceStore(RelayConfig.from_env().redis_url)
        try:
            return await store.list_by(card_id)
        finally:
            await store.close()

    try:
        message_ids = asyncio.run(_list())

        if not message_ids:
            console.print(f"❌ No messages recorded for card {card_id}")
            return

        table = Table(title=f"Discord messages for card {card_id}")
        table.add_column("Message ID", style="cyan")
        for message_id in message_ids:
            table.add_row(message_id)
        console.print(table)

    except Exception as e:
        console.print(f"❌ Error reading cross-references: {e}", style="red")
        sys.exit(1)


@cli.command()
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def sign(payload_file):
    """Print the x-trello-webhook header value for a payload file."""
    config = RelayConfig.from_env()
    if not config.trello.secret:
        console.print("❌ API_SECRET is not set", style="red")
        sys.exit(1)

    body = payload_file.read_bytes()
    click.echo(compute_trello_digest(body, config.trello.callback_url, config.trello.secret))


if __name__ == "__main__":
    cli()
