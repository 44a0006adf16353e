"""CLI for the church media sync backend."""

import asyncio
import json

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from media_sync.channel.schemas import SyncResult
from media_sync.core.config import get_settings_with_yaml
from media_sync.core.exceptions import ConfigurationError
from media_sync.core.logging_config import setup_logging

app = typer.Typer(help="Church Media Sync - cache church channel videos")
console = Console()


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Override LOG_LEVEL"),
):
    """Configure logging before any command runs."""
    settings = get_settings_with_yaml()
    setup_logging(level=log_level or settings.log_level, log_file=settings.log_file)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
    no_scheduler: bool = typer.Option(False, "--no-scheduler", help="Do not run background sync"),
):
    """Run the API server with the background sync scheduler."""
    import uvicorn

    from media_sync.api.app import create_app

    try:
        api = create_app(enable_scheduler=False if no_scheduler else None)
        uvicorn.run(api, host=host, port=port, log_level="info")
    except ConfigurationError as e:
        rprint(f"[red]✗ Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e


@app.command()
def sync(
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Run one sync pass across all tracked channels."""
    from media_sync.channel.sync import create_orchestrator
    from media_sync.database import MongoDBManager

    settings = get_settings_with_yaml()

    try:
        settings.require_youtube_api_key()
    except ConfigurationError as e:
        rprint(f"[red]✗ Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    async def _run() -> SyncResult:
        async with MongoDBManager(settings) as db:
            await db.init_indexes()
            orchestrator = create_orchestrator(db, settings)
            return await orchestrator.sync_all()

    result = asyncio.run(_run())

    if as_json:
        console.print_json(json.dumps(result.model_dump(mode="json")))
        return

    _display_sync_result(result)


def _display_sync_result(result: SyncResult) -> None:
    """Display per-channel outcome of a pass."""
    rprint("\n[bold blue]📺 YouTube Sync[/bold blue]\n")

    table = Table()
    table.add_column("Channel", style="cyan", width=28)
    table.add_column("Channel ID", style="dim", width=26)
    table.add_column("Status", width=14)
    table.add_column("Fetched", justify="right")
    table.add_column("Merged", style="green", justify="right")
    table.add_column("Failed", style="red", justify="right")

    status_style = {
        "synced": "[green]synced[/green]",
        "unresolved": "[yellow]unresolved[/yellow]",
        "fetch_failed": "[red]fetch failed[/red]",
        "error": "[red]error[/red]",
    }

    for outcome in result.channels:
        table.add_row(
            outcome.channel_name,
            outcome.channel_id or "-",
            status_style.get(outcome.status, outcome.status),
            str(outcome.videos_fetched),
            str(outcome.videos_merged),
            str(outcome.videos_failed),
        )

    console.print(table)
    rprint(f"\n[green]✓ Total new/updated videos: {result.total_merged}[/green]")
    if result.channels_failed:
        rprint(f"[yellow]⚠ {result.channels_failed} channel(s) skipped[/yellow]")
    rprint("")


@app.command()
def worker():
    """Run the sync scheduler without the API (Ctrl+C to stop)."""
    from media_sync.channel.scheduler import SyncScheduler
    from media_sync.channel.sync import create_orchestrator
    from media_sync.database import MongoDBManager

    settings = get_settings_with_yaml()

    try:
        settings.require_youtube_api_key()
    except ConfigurationError as e:
        rprint(f"[red]✗ Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    async def _run() -> None:
        async with MongoDBManager(settings) as db:
            await db.init_indexes()
            orchestrator = create_orchestrator(db, settings)
            scheduler = SyncScheduler(
                orchestrator.run_pass,
                interval_seconds=settings.sync_interval_seconds,
                run_on_start=settings.sync_on_startup,
                single_flight=settings.sync_single_flight,
            )
            await scheduler.start()
            try:
                await asyncio.Event().wait()
            finally:
                await scheduler.stop()

    rprint(
        f"\n[bold blue]📅 Syncing every {settings.sync_interval_minutes:g} minutes[/bold blue] "
        "[dim](Ctrl+C to stop)[/dim]\n"
    )
    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        rprint("\n[yellow]Stopped[/yellow]\n")


@app.command()
def channels():
    """List the tracked channels."""
    from media_sync.channel.registry import load_channel_registry
    from media_sync.channel.resolver import is_channel_id

    try:
        registry = load_channel_registry()
    except ConfigurationError as e:
        rprint(f"[red]✗ Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    rprint("\n[bold blue]📺 Tracked Channels[/bold blue]\n")

    table = Table()
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="white", width=30)
    table.add_column("Handle", style="cyan", width=28)
    table.add_column("Channel ID", style="green", width=26)

    for index, channel in enumerate(registry, 1):
        channel_id = channel.id or "-"
        if channel.id and not is_channel_id(channel.id):
            channel_id = f"{channel.id} [yellow](unresolved)[/yellow]"
        table.add_row(str(index), channel.name, channel.handle or "-", channel_id)

    console.print(table)
    rprint(f"\n[green]Total: {len(registry)} channel(s)[/green]\n")


@app.command()
def resolve(
    handle: str = typer.Argument(..., help="Channel handle (e.g., @Machdan_media)"),
):
    """Resolve a channel handle to its channel ID."""
    from media_sync.channel.resolver import HandleResolver
    from media_sync.channel.schemas import Channel

    settings = get_settings_with_yaml()
    try:
        settings.require_youtube_api_key()
    except ConfigurationError as e:
        rprint(f"[red]✗ Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    resolver = HandleResolver()
    channel_id = asyncio.run(resolver.resolve(Channel(handle=handle, name=handle)))

    if not channel_id:
        rprint(f"[red]✗ Could not resolve channel handle: {escape(handle)}[/red]")
        raise typer.Exit(1)

    rprint(f"[green]✓ {escape(handle)} → {channel_id}[/green]")


@app.command()
def videos(
    limit: int = typer.Option(20, "-l", "--limit", help="Maximum videos to show"),
    channel_id: str | None = typer.Option(None, "-c", "--channel-id", help="Filter by channel ID"),
):
    """List cached videos, newest first."""
    from media_sync.database import MongoDBManager

    settings = get_settings_with_yaml()

    async def _fetch() -> list[dict]:
        async with MongoDBManager(settings) as db:
            return await db.list_videos(limit=limit, channel_id=channel_id)

    try:
        cached = asyncio.run(_fetch())
    except Exception as e:
        rprint(f"[red]✗ Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    if not cached:
        rprint("\n[yellow]No videos available yet.[/yellow]\n")
        return

    rprint("\n[bold blue]📹 Cached Videos[/bold blue]\n")

    table = Table()
    table.add_column("Published", style="dim", width=12)
    table.add_column("Video ID", style="cyan", width=13)
    table.add_column("Title", style="white", width=60)
    table.add_column("Channel ID", style="green", width=26)

    for vid in cached:
        title = vid.get("title", "Unknown")
        if len(title) > 58:
            title = title[:55] + "..."
        published = (vid.get("published_at") or "N/A")[:10]
        table.add_row(published, vid.get("video_id", "?"), title, vid.get("channel_id", "?"))

    console.print(table)
    rprint(f"\n[green]Showing {len(cached)} video(s)[/green]\n")


@app.command("clear-videos")
def clear_videos(
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip the confirmation prompt"),
):
    """Permanently delete every cached video."""
    from media_sync.database import MongoDBManager

    rprint("This will permanently delete all records from the videos collection.")
    if not yes and not typer.confirm("Are you sure you want to continue?", default=False):
        rprint("[yellow]Operation cancelled.[/yellow]")
        return

    settings = get_settings_with_yaml()

    async def _clear() -> int:
        async with MongoDBManager(settings) as db:
            return await db.delete_all_videos()

    try:
        deleted = asyncio.run(_clear())
    except Exception as e:
        rprint(f"[red]✗ Error clearing videos: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    rprint(f"[green]✓ Successfully cleared the videos collection ({deleted} removed).[/green]")


if __name__ == "__main__":
    app()
