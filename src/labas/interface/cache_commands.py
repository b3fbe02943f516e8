"""Maintenance commands for the local durable audio store."""

import json
from typing import Annotated

import typer

from labas.application.factory import get_audio_store
from labas.interface._common import _resolve_with_overrides

cache_app = typer.Typer(help="Manage the local audio cache directory.", no_args_is_help=True)


@cache_app.command("stats")
def cache_stats(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show how many audio files are stored and their total size."""
    store = get_audio_store(_resolve_with_overrides())
    stats = store.stats()
    if json_output:
        typer.echo(json.dumps(stats, indent=2))
        return
    typer.echo(f"Cache directory: {store.cache_dir}")
    typer.echo(f"Stored files: {stats['total_files']} ({stats['total_items']} indexed)")
    typer.echo(f"Total size: {stats['total_size'] / 1024 / 1024:.2f} MB")


@cache_app.command("clear")
def cache_clear(
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """Delete every stored audio file."""
    store = get_audio_store(_resolve_with_overrides())
    if not force and not typer.confirm(f"Delete all audio in {store.cache_dir}?"):
        raise typer.Abort()
    removed = store.clear()
    typer.secho(f"Removed {removed} files.", fg="green")


@cache_app.command("rebuild")
def cache_rebuild():
    """Rebuild the cache index from the files on disk, renaming misnamed files."""
    store = get_audio_store(_resolve_with_overrides())
    count = store.rebuild_index()
    typer.secho(f"Indexed {count} files.", fg="green")
