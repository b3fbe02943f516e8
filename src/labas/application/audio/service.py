"""Resolves pronunciation audio and plays it."""

import logging

from labas.domain.audio.keys import derive_key
from labas.domain.audio.models import AudioCacheEntry, AudioLocation
from labas.domain.audio.ports import AudioPlayer, LocalVoice
from labas.domain.errors import AudioUnavailable

from ..srs.scheduler import utcnow
from .resolver import AudioResolver

logger = logging.getLogger(__name__)


class PronunciationService:
    """
    Plays the pronunciation of a word.

    The local voice sounds different from the cached recordings, so it is
    used only when the caller passes ``allow_local_voice=True``.
    """

    def __init__(
        self,
        resolver: AudioResolver,
        player: AudioPlayer,
        local_voice: LocalVoice | None = None,
    ):
        self._resolver = resolver
        self._player = player
        self._local_voice = local_voice

    async def pronounce(
        self,
        text: str,
        force_regenerate: bool = False,
        allow_local_voice: bool = False,
    ) -> AudioCacheEntry:
        """
        Resolve and play ``text``.

        Returns:
            The resolved entry; location MISS if the local voice spoke instead.

        Raises:
            AudioUnavailable: If no audio was found and the local voice was
                not allowed (or not configured).
        """
        use_local = allow_local_voice and self._local_voice is not None

        if use_local and not await self._resolver.is_available():
            logger.info("No audio endpoint available, using local voice")
            return await self._speak_locally(text)

        try:
            entry = await self._resolver.resolve(text, force_regenerate)
        except AudioUnavailable:
            if not use_local:
                raise
            logger.warning(f"Falling back to local voice for {text!r}")
            return await self._speak_locally(text)

        await self._player.play(entry.url)
        return entry

    async def _speak_locally(self, text: str) -> AudioCacheEntry:
        await self._local_voice.speak(text)
        return AudioCacheEntry(
            key=derive_key(text),
            source_text=text,
            location=AudioLocation.MISS,
            fetched_at=utcnow(),
            cached=False,
        )

    async def close(self) -> None:
        await self._resolver.close()
