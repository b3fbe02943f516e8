"""Labas CLI — root commands and subgroup registration."""

import json
import logging
import sys
import time
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer

from labas.application.config import resolve_config
from labas.application.factory import get_study_service
from labas.application.srs.scheduler import utcnow
from labas.domain.errors import LabasError
from labas.domain.srs.models import ReviewableItem, SessionResult
from labas.infrastructure.vocabulary_store import JsonVocabularyStore
from labas.interface._common import _resolve_with_overrides, configure_logging

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="labas: Lithuanian vocabulary trainer with spaced repetition and cached pronunciation.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Register subgroups
# ---------------------------------------------------------------------------

from labas.interface.audio_commands import audio_app  # noqa: E402
from labas.interface.cache_commands import cache_app  # noqa: E402

app.add_typer(audio_app, name="audio")
app.add_typer(cache_app, name="cache")

config_app = typer.Typer(help="Manage labas configuration.")
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for labas."""
    configure_logging(verbose)


def _fmt_date(ts: datetime) -> str:
    return ts.astimezone().strftime("%Y-%m-%d")


def _describe(item: ReviewableItem) -> str:
    gloss = f" ({item.translation})" if item.translation else ""
    return f"{item.id}  L{item.level:<2}  due {_fmt_date(item.next_review_at)}  {item.text}{gloss}"


# ---------------------------------------------------------------------------
# Vocabulary commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    text: Annotated[str, typer.Argument(help="Lithuanian word or phrase.")],
    translation: Annotated[
        str | None, typer.Option("--translation", "-t", help="Translation.")
    ] = None,
    vocabulary: Annotated[Path | None, typer.Option(help="Vocabulary file.")] = None,
):
    """Add a word; it is due for review immediately."""
    config = _resolve_with_overrides(vocabulary_path=vocabulary)
    item = JsonVocabularyStore(config.vocabulary_path).add(text, translation)
    typer.secho(f"Added {item.id}", fg="green")


@app.command()
def remove(
    item_id: Annotated[str, typer.Argument(help="Item ID.")],
    vocabulary: Annotated[Path | None, typer.Option(help="Vocabulary file.")] = None,
):
    """Delete a word and its review history."""
    config = _resolve_with_overrides(vocabulary_path=vocabulary)
    try:
        JsonVocabularyStore(config.vocabulary_path).remove(item_id)
    except LabasError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(1) from e
    typer.secho(f"Removed {item_id}", fg="green")


@app.command()
def due(
    limit: Annotated[int | None, typer.Option(help="Maximum words to list.")] = None,
    vocabulary: Annotated[Path | None, typer.Option(help="Vocabulary file.")] = None,
):
    """List the words to review next, weakest and most overdue first."""
    config = _resolve_with_overrides(vocabulary_path=vocabulary)
    suggestion = get_study_service(config).suggest_session(limit or config.session_size)
    typer.echo(suggestion.message)
    for item in suggestion.recommended:
        typer.echo(f"  {_describe(item)}")


@app.command()
def review(
    item_id: Annotated[str, typer.Argument(help="Item ID.")],
    correct: Annotated[
        bool, typer.Option("--correct/--incorrect", help="Whether the answer was right.")
    ],
    rating: Annotated[
        int | None,
        typer.Option("--rating", "-r", help="Difficulty: 1=difficult, 2=medium, 3=easy."),
    ] = None,
    vocabulary: Annotated[Path | None, typer.Option(help="Vocabulary file.")] = None,
):
    """Record one answer and reschedule the word."""
    config = _resolve_with_overrides(vocabulary_path=vocabulary)
    try:
        outcome = get_study_service(config).review(item_id, correct, rating)
    except LabasError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(1) from e
    typer.echo(
        f"Level {outcome.new_level}, next review in {outcome.interval_days} days "
        f"({_fmt_date(outcome.next_review_at)})"
    )


@app.command()
def study(
    limit: Annotated[int | None, typer.Option(help="Maximum words in this session.")] = None,
    vocabulary: Annotated[Path | None, typer.Option(help="Vocabulary file.")] = None,
):
    """Run an interactive review session over the due words."""
    config = _resolve_with_overrides(vocabulary_path=vocabulary)
    service = get_study_service(config)
    batch = service.due_batch(limit or config.session_size)
    if not batch:
        typer.secho("No words due for review! Great job staying on track.", fg="green")
        return

    results: list[SessionResult] = []
    for item in batch:
        started = time.monotonic()
        typer.secho(f"\n{item.text}", bold=True)
        if item.translation:
            typer.prompt("Press Enter to reveal", default="", show_default=False)
            typer.echo(item.translation)
        correct = typer.confirm("Did you know it?")
        rating = typer.prompt("Difficulty (1=difficult, 2=medium, 3=easy)", default=2, type=int)

        outcome = service.review(item.id, correct, rating)
        results.append(
            SessionResult(
                item_id=item.id,
                correct=correct,
                user_rating=rating,
                timestamp=utcnow(),
                response_time=time.monotonic() - started,
            )
        )
        typer.echo(f"-> level {outcome.new_level}, next in {outcome.interval_days} days")

    summary = service.finish_session(results)
    typer.secho(
        f"\nSession done: {summary.correct_answers}/{len(results)} correct.", fg="green"
    )


@app.command()
def stats(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
    vocabulary: Annotated[Path | None, typer.Option(help="Vocabulary file.")] = None,
):
    """Show learning statistics."""
    config = _resolve_with_overrides(vocabulary_path=vocabulary)
    s = get_study_service(config).stats()
    if json_output:
        typer.echo(json.dumps(asdict(s), indent=2))
        return

    d = s.distribution
    typer.echo(f"Words: {s.total_words}  Average level: {s.average_level}")
    typer.echo(
        f"Beginner: {d.beginner}  Intermediate: {d.intermediate}  "
        f"Advanced: {d.advanced}  Mastered: {d.mastered}"
    )
    typer.echo(f"Retention: {s.retention_rate}%  Streak: {s.streak_days} days")
    typer.echo(f"Reviewed today: {s.reviews_today}")


@app.command()
def recommend(
    vocabulary: Annotated[Path | None, typer.Option(help="Vocabulary file.")] = None,
):
    """Suggest what to study next."""
    config = _resolve_with_overrides(vocabulary_path=vocabulary)
    recommendations = get_study_service(config).recommendations()
    if not recommendations:
        typer.echo("Nothing to recommend right now.")
        return
    colors = {"high": "red", "medium": "yellow", "low": "green"}
    for rec in recommendations:
        typer.secho(f"[{rec.priority}] {rec.message} -> {rec.action}", fg=colors[rec.priority])


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def server(
    host: Annotated[str | None, typer.Option(help="Bind address.")] = None,
    port: Annotated[int | None, typer.Option(help="Port.")] = None,
    reload: Annotated[bool, typer.Option("--reload", help="Auto-reload on code changes.")] = False,
):
    """Run the TTS audio store server."""
    import uvicorn

    config = _resolve_with_overrides(host=host, port=port)
    uvicorn.run("labas.server:app", host=config.host, port=config.port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
