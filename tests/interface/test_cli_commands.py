"""Tests for CLI commands: help, vocabulary and study commands, audio, cache, server and config."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from labas.application.srs.scheduler import utcnow
from labas.domain.audio.models import AudioCacheEntry, AudioLocation, BatchResult, ResolutionTier
from labas.domain.errors import AudioUnavailable
from labas.infrastructure.vocabulary_store import JsonVocabularyStore
from labas.interface.cli import app

runner = CliRunner()


@pytest.fixture
def vocabulary(mock_home):
    return mock_home / "vocabulary.json"


def _add(vocabulary, text, *args):
    result = runner.invoke(app, ["add", text, "--vocabulary", str(vocabulary), *args])
    assert result.exit_code == 0, result.output
    return result.output.strip().split()[-1]


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Lithuanian vocabulary trainer" in result.stdout
    for command in ("add", "review", "study", "audio", "cache", "server"):
        assert command in result.stdout


# --- Vocabulary ---


def test_add_and_due(vocabulary):
    item_id = _add(vocabulary, "labas", "--translation", "hello")
    assert item_id.startswith("word_")

    result = runner.invoke(app, ["due", "--vocabulary", str(vocabulary)])
    assert result.exit_code == 0
    assert "1 words ready for review." in result.stdout
    assert "labas (hello)" in result.stdout


def test_remove_word(vocabulary):
    keep = _add(vocabulary, "labas")
    drop = _add(vocabulary, "sudie")

    result = runner.invoke(app, ["remove", drop, "--vocabulary", str(vocabulary)])
    assert result.exit_code == 0, result.output
    assert [item.id for item in JsonVocabularyStore(vocabulary).list_items()] == [keep]

    result = runner.invoke(app, ["remove", drop, "--vocabulary", str(vocabulary)])
    assert result.exit_code == 1


def test_due_empty(vocabulary):
    result = runner.invoke(app, ["due", "--vocabulary", str(vocabulary)])
    assert result.exit_code == 0
    assert "No words due for review" in result.stdout


def test_review_promotes_word(vocabulary):
    item_id = _add(vocabulary, "ačiū")

    result = runner.invoke(
        app, ["review", item_id, "--correct", "--rating", "2", "--vocabulary", str(vocabulary)]
    )
    assert result.exit_code == 0, result.output
    assert "Level 2, next review in 2 days" in result.stdout

    item = JsonVocabularyStore(vocabulary).get(item_id)
    assert item.level == 2
    assert item.total_reviews == 1
    assert item.correct_answers == 1


def test_review_unknown_item(vocabulary):
    result = runner.invoke(
        app, ["review", "word_missing", "--incorrect", "--vocabulary", str(vocabulary)]
    )
    assert result.exit_code == 1


def test_study_session(vocabulary, mock_home):
    _add(vocabulary, "labas", "-t", "hello")
    _add(vocabulary, "sudie")

    # reveal, knew it, rating / knew it, rating
    result = runner.invoke(
        app, ["study", "--vocabulary", str(vocabulary)], input="\ny\n3\nn\n1\n"
    )
    assert result.exit_code == 0, result.output
    assert "Session done: 1/2 correct." in result.stdout

    levels = sorted(item.level for item in JsonVocabularyStore(vocabulary).list_items())
    assert levels == [1, 2]

    log = json.loads((mock_home / ".local/share/labas/sessions.json").read_text())
    assert log[-1]["words_reviewed"] == 2


def test_malformed_session_log_does_not_break_commands(vocabulary, mock_home):
    log = mock_home / ".local/share/labas/sessions.json"
    log.parent.mkdir(parents=True)
    log.write_text(json.dumps({"sessions": []}))
    _add(vocabulary, "labas")

    result = runner.invoke(app, ["stats", "--vocabulary", str(vocabulary)])
    assert result.exit_code == 0, result.output
    assert "Words: 1" in result.stdout


def test_stats_json(vocabulary):
    _add(vocabulary, "labas")
    result = runner.invoke(app, ["stats", "--json", "--vocabulary", str(vocabulary)])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["total_words"] == 1
    assert data["distribution"]["beginner"] == 1
    assert data["retention_rate"] == 0


def test_recommend_overdue(vocabulary):
    _add(vocabulary, "labas")
    result = runner.invoke(app, ["recommend", "--vocabulary", str(vocabulary)])
    assert result.exit_code == 0
    assert "[high]" in result.stdout


# --- Audio ---


def test_audio_key():
    result = runner.invoke(app, ["audio", "key", "Labas rytas!"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "labasrytas"


@patch("labas.interface.audio_commands.get_pronunciation_service")
def test_audio_say(mock_get_service, mock_home):
    service = MagicMock()
    service.pronounce = AsyncMock(
        return_value=AudioCacheEntry(
            key="labas",
            source_text="Labas",
            location=AudioLocation.SERVER_A,
            fetched_at=utcnow(),
            url="http://localhost:3001/audio_cache/labas.mp3",
            tier=ResolutionTier.PRIMARY_CACHE,
        )
    )
    service.close = AsyncMock()
    mock_get_service.return_value = service

    result = runner.invoke(app, ["audio", "say", "Labas", "--force"])
    assert result.exit_code == 0, result.output
    service.pronounce.assert_awaited_once_with("Labas", True, False)
    service.close.assert_awaited_once()


@patch("labas.interface.audio_commands.get_pronunciation_service")
def test_audio_say_unavailable(mock_get_service, mock_home):
    service = MagicMock()
    service.pronounce = AsyncMock(side_effect=AudioUnavailable("Labas"))
    service.close = AsyncMock()
    mock_get_service.return_value = service

    result = runner.invoke(app, ["audio", "say", "Labas"])
    assert result.exit_code == 1
    service.close.assert_awaited_once()


@patch("labas.interface.audio_commands.get_resolver")
def test_audio_batch(mock_get_resolver, mock_home, tmp_path):
    words = tmp_path / "words.txt"
    words.write_text("Ačiū\n\nSudie\n", encoding="utf-8")

    resolver = MagicMock()
    resolver.resolve_batch = AsyncMock(
        return_value=BatchResult(
            total=3,
            cached=1,
            generated=2,
            urls={"Labas": "http://a/labas.mp3", "Ačiū": "http://a/aciu.mp3", "Sudie": "http://a/sudie.mp3"},
        )
    )
    resolver.close = AsyncMock()
    mock_get_resolver.return_value = resolver

    result = runner.invoke(app, ["audio", "batch", "Labas", "--file", str(words)])
    assert result.exit_code == 0, result.output
    resolver.resolve_batch.assert_awaited_once_with(["Labas", "Ačiū", "Sudie"])
    assert "Total: 3  Cached: 1  Generated: 2" in result.stdout


def test_audio_batch_nothing_to_do(mock_home):
    result = runner.invoke(app, ["audio", "batch"])
    assert result.exit_code == 0
    assert "Nothing to do." in result.stdout


@patch("labas.interface.audio_commands.get_resolver")
def test_audio_status_all_down(mock_get_resolver, mock_home):
    resolver = MagicMock()
    resolver.availability = AsyncMock(return_value={"primary": False, "fallback": False})
    resolver.cache_stats = AsyncMock(return_value=None)
    resolver.close = AsyncMock()
    mock_get_resolver.return_value = resolver

    result = runner.invoke(app, ["audio", "status", "--json"])
    assert result.exit_code == 1
    assert json.loads(result.stdout)["endpoints"] == {"primary": False, "fallback": False}


# --- Cache ---


def test_cache_commands(mock_home, monkeypatch, tmp_path):
    cache_dir = tmp_path / "audio"
    cache_dir.mkdir()
    (cache_dir / "Ačiū.mp3").write_bytes(b"thanks")
    monkeypatch.setenv("LABAS_CACHE_DIR", str(cache_dir))

    result = runner.invoke(app, ["cache", "rebuild"])
    assert result.exit_code == 0
    assert "Indexed 1 files." in result.stdout
    assert (cache_dir / "aciu.mp3").exists()

    result = runner.invoke(app, ["cache", "stats", "--json"])
    assert json.loads(result.stdout)["total_files"] == 1

    result = runner.invoke(app, ["cache", "clear", "--force"])
    assert result.exit_code == 0
    assert not (cache_dir / "aciu.mp3").exists()


# --- Server ---


@patch("uvicorn.run")
def test_server_command(mock_run, mock_home):
    result = runner.invoke(app, ["server", "--port", "9999"])
    assert result.exit_code == 0, result.output
    mock_run.assert_called_once_with("labas.server:app", host="127.0.0.1", port=9999, reload=False)


# --- Config ---


@patch("labas.interface.cli.resolve_config")
def test_config_show_command(mock_resolve_config):
    mock_config = MagicMock()
    mock_config.model_dump.return_value = {"primary_url": "http://localhost:3001", "port": 3001}
    mock_resolve_config.return_value = mock_config

    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["primary_url"] == "http://localhost:3001"


def test_invalid_config_exits(mock_home, monkeypatch):
    monkeypatch.setenv("LABAS_PROBE_TIMEOUT", "-1")
    result = runner.invoke(app, ["audio", "check", "labas"])
    assert result.exit_code == 1
