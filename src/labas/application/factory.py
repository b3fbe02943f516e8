"""
Service Factory
Centralizes wiring of adapters and services from the resolved configuration.
"""

from datetime import timedelta

from labas.application.audio.memo import AudioMemo
from labas.application.audio.resolver import AudioResolver
from labas.application.audio.service import PronunciationService
from labas.application.config import AppConfig
from labas.application.srs.service import StudyService
from labas.application.srs.session_log import SessionLog
from labas.domain.audio.ports import AudioPlayer, Synthesizer
from labas.infrastructure.adapters.http_endpoint import HttpAudioEndpoint
from labas.infrastructure.audio_store import FileAudioStore
from labas.infrastructure.commands import (
    CommandAudioPlayer,
    CommandLocalVoice,
    CommandSynthesizer,
    UnconfiguredSynthesizer,
)
from labas.infrastructure.vocabulary_store import JsonVocabularyStore


def get_resolver(config: AppConfig) -> AudioResolver:
    """Returns a resolver over the configured primary and fallback endpoints."""
    common = {
        "extension": config.audio_extension,
        "probe_timeout": config.probe_timeout,
        "request_timeout": config.request_timeout,
    }
    primary = HttpAudioEndpoint(
        "primary", config.primary_url, cache_path=config.primary_cache_path, **common
    )
    fallback = HttpAudioEndpoint(
        "fallback", config.fallback_url, cache_path=config.fallback_cache_path, **common
    )
    memo = AudioMemo(ttl=timedelta(hours=config.memo_ttl_hours))
    return AudioResolver(primary, fallback, memo)


def get_synthesizer(config: AppConfig) -> Synthesizer:
    if config.synth_command:
        return CommandSynthesizer(config.synth_command, extension=config.audio_extension)
    return UnconfiguredSynthesizer()


def get_audio_store(config: AppConfig) -> FileAudioStore:
    return FileAudioStore(config.cache_dir, get_synthesizer(config), config.audio_extension)


def get_pronunciation_service(
    config: AppConfig, default_player: AudioPlayer
) -> PronunciationService:
    """``default_player`` is used when no player command is configured."""
    player = (
        CommandAudioPlayer(config.player_command) if config.player_command else default_player
    )
    local_voice = (
        CommandLocalVoice(config.local_voice_command) if config.local_voice_command else None
    )
    return PronunciationService(get_resolver(config), player, local_voice)


def get_study_service(config: AppConfig) -> StudyService:
    return StudyService(
        JsonVocabularyStore(config.vocabulary_path),
        session_log=SessionLog(config.session_log_path, limit=config.session_limit),
    )
