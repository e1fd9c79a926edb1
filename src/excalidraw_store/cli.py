"""Main CLI for excalidraw-store."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import StoreConfig, load_config
from .errors import StoreError
from .output import format_response, render_cli
from .services import (
    Store,
    open_store,
    list_drawings as svc_list_drawings,
    load_drawing as svc_load_drawing,
    delete_drawing as svc_delete_drawing,
    list_snapshots as svc_list_snapshots,
    load_snapshot as svc_load_snapshot,
    delete_snapshot as svc_delete_snapshot,
    update_snapshot_metadata as svc_update_snapshot_metadata,
    get_room_settings as svc_get_room_settings,
    update_room_settings as svc_update_room_settings,
    load_latest_snapshot as svc_load_latest_snapshot,
    count_snapshots as svc_count_snapshots,
    store_info as svc_store_info,
)

app = typer.Typer(
    name="excalidraw-store",
    help="Inspect and manage the local drawings and snapshots database",
)
console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    db: Optional[Path] = typer.Option(None, "--db", help="Database file (default: ~/.excalidraw/drawings.db)"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, WARNING)"),
):
    """Local storage for drawings, room snapshots and room settings."""
    try:
        config = load_config(db_path=db, log_level=log_level)
    except StoreError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _configure_logging(config.log_level)
    ctx.obj = config


def _run(ctx: typer.Context, operation, *args, **kwargs) -> dict:
    """Open the store, run one service call, close, and exit on failure."""
    config: StoreConfig = ctx.obj
    try:
        store: Store = open_store(config)
    except StoreError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    try:
        result = operation(store, *args, **kwargs)
    finally:
        store.close()

    if "error" in result:
        console.print(f"[red]Error:[/red] {result['message']}")
        raise typer.Exit(1)
    return result


def _ts(epoch: Optional[int]) -> str:
    if not epoch:
        return "-"
    return datetime.fromtimestamp(epoch).strftime("%Y-%m-%d %H:%M:%S")


def _emit(
    payload: dict,
    output_format: str = "json",
    text_renderer: Optional[Callable[[dict], str]] = None,
) -> None:
    """Print a payload as JSON or through a plain-text renderer."""
    console.print(
        render_cli(format_response(payload, output_format, text_renderer)),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _render_drawing(drawing: dict) -> str:
    return "\n".join([
        f"{drawing['name']} ({drawing['id']})",
        f"Created: {_ts(drawing['created_at'])}  Updated: {_ts(drawing['updated_at'])}",
        f"Payload: {len(drawing['data'])} chars",
    ])


def _render_snapshot(snapshot: dict) -> str:
    kind = "autosave" if snapshot["is_autosave"] else (snapshot["created_by"] or "-")
    return "\n".join([
        f"{snapshot['name'] or '(unnamed)'} ({snapshot['id']})",
        f"Room: {snapshot['room_id']}  By: {kind}  Created: {_ts(snapshot['created_at'])}",
        f"Description: {snapshot['description'] or '-'}",
        f"Payload: {len(snapshot['data'])} chars",
    ])


def _render_settings(settings: dict) -> str:
    return "\n".join([
        settings["room_id"],
        f"  Max snapshots: {settings['max_snapshots']}",
        f"  Autosave interval: {settings['auto_save_interval']}s",
    ])


def _render_count(result: dict) -> str:
    return (
        f"{result['room_id']}: {result['count']} snapshot(s), "
        f"{result['history_count']}/{result['max_snapshots']} in history"
    )


def _render_info(info: dict) -> str:
    return "\n".join([
        f"Database: {info['db_path']}",
        f"Tables: {', '.join(info['tables'])}",
        f"Drawings: {info['drawing_count']}",
    ])


@app.command("path")
def show_path(ctx: typer.Context):
    """Show the resolved database path and where it came from."""
    config: StoreConfig = ctx.obj
    console.print(f"{config.db_path} [dim]({config.config_source})[/dim]")


@app.command("info")
def show_info(
    ctx: typer.Context,
    output_format: str = typer.Option("text", "--format", "-f", help="Output format (json|text)"),
):
    """Show the database file, its tables and the number of drawings."""
    result = _run(ctx, svc_store_info)
    result.pop("success")
    _emit(result, output_format, _render_info)


# ============================================================================
# Drawing Commands
# ============================================================================

drawings_app = typer.Typer(help="Standalone drawings")
app.add_typer(drawings_app, name="drawings")


@drawings_app.command("list")
def drawings_list(
    ctx: typer.Context,
    output_format: str = typer.Option("text", "--format", "-f", help="Output format (json|text)"),
):
    """List drawings, most recently updated first."""
    result = _run(ctx, svc_list_drawings)
    drawings = [
        {k: v for k, v in d.items() if k != "data"}
        for d in result["drawings"]
    ]

    if output_format == "json":
        _emit({"drawings": drawings})
        return

    table = Table(title=f"Drawings ({len(drawings)})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Created")
    table.add_column("Updated")
    for d in drawings:
        table.add_row(d["id"], d["name"], _ts(d["created_at"]), _ts(d["updated_at"]))
    console.print(table)


@drawings_app.command("show")
def drawings_show(
    ctx: typer.Context,
    drawing_id: str = typer.Argument(..., help="Drawing ID"),
    output_format: str = typer.Option("json", "--format", "-f", help="Output format (json|text)"),
):
    """Show a drawing including its payload."""
    result = _run(ctx, svc_load_drawing, drawing_id)
    drawing = result["drawing"]

    _emit(drawing, output_format, _render_drawing)


@drawings_app.command("delete")
def drawings_delete(
    ctx: typer.Context,
    drawing_id: str = typer.Argument(..., help="Drawing ID"),
):
    """Delete a drawing."""
    _run(ctx, svc_delete_drawing, drawing_id)
    console.print(f"[green]✓[/green] Deleted drawing {drawing_id}")


# ============================================================================
# Snapshot Commands
# ============================================================================

snapshots_app = typer.Typer(help="Room snapshots")
app.add_typer(snapshots_app, name="snapshots")


@snapshots_app.command("list")
def snapshots_list(
    ctx: typer.Context,
    room_id: str = typer.Argument(..., help="Room ID"),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format (json|text)"),
):
    """List a room's snapshots, newest first."""
    result = _run(ctx, svc_list_snapshots, room_id)
    snapshots = result["snapshots"]

    if output_format == "json":
        _emit({"room_id": room_id, "snapshots": snapshots})
        return

    table = Table(title=f"Snapshots for {room_id} ({len(snapshots)})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Description")
    table.add_column("By")
    table.add_column("Created")
    for s in snapshots:
        table.add_row(
            s["id"],
            s["name"] or "",
            s["description"] or "",
            "autosave" if s["is_autosave"] else (s["created_by"] or ""),
            _ts(s["created_at"]),
        )
    console.print(table)


@snapshots_app.command("show")
def snapshots_show(
    ctx: typer.Context,
    snapshot_id: str = typer.Argument(..., help="Snapshot ID"),
    output_format: str = typer.Option("json", "--format", "-f", help="Output format (json|text)"),
):
    """Show a snapshot including its payload."""
    result = _run(ctx, svc_load_snapshot, snapshot_id)
    _emit(result["snapshot"], output_format, _render_snapshot)


@snapshots_app.command("latest")
def snapshots_latest(
    ctx: typer.Context,
    room_id: str = typer.Argument(..., help="Room ID"),
    output_format: str = typer.Option("json", "--format", "-f", help="Output format (json|text)"),
):
    """Show the state a room reopens with: the autosave slot, else the newest snapshot."""
    result = _run(ctx, svc_load_latest_snapshot, room_id)
    _emit(result["snapshot"], output_format, _render_snapshot)


@snapshots_app.command("count")
def snapshots_count(
    ctx: typer.Context,
    room_id: str = typer.Argument(..., help="Room ID"),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format (json|text)"),
):
    """Count a room's snapshots against its retention limit."""
    result = _run(ctx, svc_count_snapshots, room_id)
    result.pop("success")
    _emit(result, output_format, _render_count)


@snapshots_app.command("delete")
def snapshots_delete(
    ctx: typer.Context,
    snapshot_id: str = typer.Argument(..., help="Snapshot ID"),
):
    """Delete a snapshot."""
    _run(ctx, svc_delete_snapshot, snapshot_id)
    console.print(f"[green]✓[/green] Deleted snapshot {snapshot_id}")


@snapshots_app.command("rename")
def snapshots_rename(
    ctx: typer.Context,
    snapshot_id: str = typer.Argument(..., help="Snapshot ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
):
    """Replace a snapshot's name and description."""
    _run(ctx, svc_update_snapshot_metadata, snapshot_id, name, description)
    console.print(f"[green]✓[/green] Updated snapshot {snapshot_id}")


# ============================================================================
# Room Settings Commands
# ============================================================================

settings_app = typer.Typer(help="Per-room settings")
app.add_typer(settings_app, name="settings")


@settings_app.command("get")
def settings_get(
    ctx: typer.Context,
    room_id: str = typer.Argument(..., help="Room ID"),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format (json|text)"),
):
    """Show a room's settings (defaults if never configured)."""
    settings = _run(ctx, svc_get_room_settings, room_id)["settings"]

    _emit(settings, output_format, _render_settings)


@settings_app.command("set")
def settings_set(
    ctx: typer.Context,
    room_id: str = typer.Argument(..., help="Room ID"),
    max_snapshots: int = typer.Option(..., "--max-snapshots", "-m", help="Snapshots kept before the oldest is evicted"),
    interval: int = typer.Option(..., "--interval", "-i", help="Autosave interval in seconds"),
):
    """Configure a room's retention limit and autosave interval."""
    _run(ctx, svc_update_room_settings, room_id, max_snapshots, interval)
    console.print(f"[green]✓[/green] Saved settings for {room_id}")


if __name__ == "__main__":
    app()
