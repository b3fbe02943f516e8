"""Pronunciation audio commands."""

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer

from labas.application.factory import get_pronunciation_service, get_resolver
from labas.domain.audio.keys import derive_key
from labas.domain.audio.ports import AudioPlayer
from labas.domain.errors import AudioError
from labas.interface._common import _resolve_with_overrides

audio_app = typer.Typer(help="Resolve and play pronunciation audio.", no_args_is_help=True)


class EchoAudioPlayer(AudioPlayer):
    """Prints the URL instead of playing it."""

    async def play(self, url: str) -> None:
        typer.echo(url)


@audio_app.command("key")
def audio_key(text: Annotated[str, typer.Argument(help="Word or phrase.")]):
    """Print the cache key used to name the audio file for TEXT."""
    typer.echo(derive_key(text))


@audio_app.command("say")
def audio_say(
    text: Annotated[str, typer.Argument(help="Word or phrase to pronounce.")],
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Regenerate even if audio is cached.")
    ] = False,
    allow_local_voice: Annotated[
        bool,
        typer.Option(
            "--allow-local-voice",
            help="Use the local voice command if no cached or generated audio is available.",
        ),
    ] = False,
):
    """Resolve TEXT to audio and play it (or print its URL if no player is configured)."""
    config = _resolve_with_overrides()
    service = get_pronunciation_service(config, EchoAudioPlayer())

    async def run():
        try:
            return await service.pronounce(text, force, allow_local_voice)
        finally:
            await service.close()

    try:
        entry = asyncio.run(run())
    except AudioError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(1) from e
    typer.secho(f"[{entry.location.value}] {entry.key}", fg="green", err=True)


@audio_app.command("batch")
def audio_batch(
    texts: Annotated[list[str] | None, typer.Argument(help="Words or phrases.")] = None,
    file: Annotated[
        Path | None, typer.Option("--file", help="Read one text per line from this file.")
    ] = None,
):
    """Make sure audio exists for many texts, generating only what is missing."""
    items = list(texts or [])
    if file:
        items.extend(
            line.strip() for line in file.read_text(encoding="utf-8").splitlines() if line.strip()
        )
    if not items:
        typer.secho("Nothing to do.", fg="yellow")
        raise typer.Exit()

    config = _resolve_with_overrides()
    resolver = get_resolver(config)

    async def run():
        try:
            return await resolver.resolve_batch(items)
        finally:
            await resolver.close()

    try:
        result = asyncio.run(run())
    except AudioError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(1) from e

    typer.echo(f"Total: {result.total}  Cached: {result.cached}  Generated: {result.generated}")
    for text, url in result.urls.items():
        typer.echo(f"  {text} -> {url}")


@audio_app.command("check")
def audio_check(text: Annotated[str, typer.Argument(help="Word or phrase.")]):
    """Look for stored audio for TEXT on both endpoints without generating it."""
    config = _resolve_with_overrides()
    resolver = get_resolver(config)

    async def run():
        try:
            return await resolver.check_cache(text)
        finally:
            await resolver.close()

    entry = asyncio.run(run())
    if entry.url:
        typer.secho(f"[{entry.location.value}] {entry.url}", fg="green")
    else:
        typer.secho(f"No stored audio for '{entry.key}'", fg="yellow")
        raise typer.Exit(1)


@audio_app.command("status")
def audio_status(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Report which audio endpoints are reachable."""
    config = _resolve_with_overrides()
    resolver = get_resolver(config)

    async def run():
        try:
            return await resolver.availability(), await resolver.cache_stats()
        finally:
            await resolver.close()

    availability, stats = asyncio.run(run())
    if json_output:
        typer.echo(json.dumps({"endpoints": availability, "stats": stats}, indent=2))
    else:
        for name, ok in availability.items():
            typer.secho(f"{name}: {'up' if ok else 'down'}", fg="green" if ok else "red")
        if stats:
            typer.echo(f"Stored files: {stats.get('total_files', 0)}")

    if not any(availability.values()):
        raise typer.Exit(1)
