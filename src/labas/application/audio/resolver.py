"""
Finds playable pronunciation audio at the lowest network cost.

Tiers are tried strictly in order, stopping at the first success:

1. in-process memo (skipped when forcing regeneration)
2. existence probe on the primary endpoint
3. existence probe on the fallback endpoint
4. synthesis on the primary endpoint
5. synthesis on the fallback endpoint

Each endpoint gets a single attempt per tier. Two concurrent resolutions of
the same uncached key may both synthesize; synthesis overwrites the same
file, so this only costs an extra request.
"""

import logging

from labas.domain.audio.keys import derive_key
from labas.domain.audio.models import (
    AudioCacheEntry,
    AudioLocation,
    BatchResult,
    BatchSynthesis,
    ResolutionTier,
)
from labas.domain.audio.ports import AudioEndpoint
from labas.domain.errors import AudioUnavailable, EndpointUnreachable

from ..srs.scheduler import utcnow
from .memo import AudioMemo

logger = logging.getLogger(__name__)


class AudioResolver:
    """
    Resolves text to an audio URL using a memo and two endpoints with identical contracts.

    The resolver owns its memo; there is no shared global state.
    """

    def __init__(
        self,
        primary: AudioEndpoint,
        fallback: AudioEndpoint,
        memo: AudioMemo | None = None,
    ):
        self.primary = primary
        self.fallback = fallback
        self.memo = memo if memo is not None else AudioMemo()
        self._locations = {
            id(primary): AudioLocation.SERVER_A,
            id(fallback): AudioLocation.SERVER_B,
        }

    async def resolve(self, text: str, force_regenerate: bool = False) -> AudioCacheEntry:
        """
        Resolve ``text`` to playable audio.

        Args:
            text: Word or phrase to pronounce.
            force_regenerate: Skip the memo and cache probes and ask the
                endpoints to synthesize again.

        Raises:
            AudioUnavailable: If every tier failed.
        """
        key = derive_key(text)
        if not key:
            logger.warning(f"No audio key can be derived from {text!r}")
            raise AudioUnavailable(text)

        if not force_regenerate:
            url = self.memo.get(key)
            if url:
                logger.debug(f"[memo] hit for '{key}'")
                return self._entry(key, text, AudioLocation.LOCAL_CACHE, url, ResolutionTier.MEMO)

            entry = await self._probe_tiers(key, text)
            if entry:
                self.memo.put(key, entry.url)
                return entry

        for endpoint, tier in (
            (self.primary, ResolutionTier.PRIMARY_SYNTH),
            (self.fallback, ResolutionTier.FALLBACK_SYNTH),
        ):
            try:
                result = await endpoint.synthesize(text, force=force_regenerate)
            except EndpointUnreachable as e:
                logger.warning(f"[{tier.value}] {endpoint.name} failed: {e.reason}")
                continue

            logger.info(
                f"[{tier.value}] {endpoint.name}: "
                f"{'cached' if result.cached else 'generated'} -> {result.url}"
            )
            self.memo.put(key, result.url)
            return self._entry(
                key, text, self._locations[id(endpoint)], result.url, tier, cached=result.cached
            )

        logger.error(f"All audio tiers exhausted for '{key}'")
        raise AudioUnavailable(text)

    async def check_cache(self, text: str) -> AudioCacheEntry:
        """Probe both endpoints for existing audio without synthesizing."""
        key = derive_key(text)
        entry = await self._probe_tiers(key, text) if key else None
        if entry is None:
            return self._entry(key, text, AudioLocation.MISS, None, None, cached=False)
        return entry

    async def resolve_batch(self, texts: list[str]) -> BatchResult:
        """
        Resolve many texts, generating only the ones not stored yet.

        Each text goes through the same memo and existence probes as
        ``resolve``. The rest are sent in a single batch request (primary
        first, then fallback). Calling twice with the same texts generates
        nothing the second time.

        Raises:
            AudioUnavailable: If missing audio could not be generated on
                either endpoint.
        """
        result = BatchResult(total=len(texts))
        missing: dict[str, str] = {}  # key -> first text with that key
        seen: set[str] = set()

        for text in texts:
            key = derive_key(text)
            if not key:
                logger.warning(f"Skipping {text!r}: no audio key")
                continue
            if key in seen:
                continue
            seen.add(key)

            url = self.memo.get(key)
            if url is None:
                entry = await self._probe_tiers(key, text)
                if entry:
                    url = entry.url
                    self.memo.put(key, url)

            if url is None:
                missing[key] = text
            else:
                result.cached += 1
                result.urls[text] = url

        if missing:
            batch = await self._batch_synthesize(list(missing.values()))
            # the endpoint re-checks its store, so its own counts are authoritative
            result.cached += batch.cached
            result.generated += batch.generated
            for key in missing:
                url = batch.urls.get(key)
                if url is None:
                    logger.warning(f"[batch] no audio returned for '{key}'")
                    continue
                self.memo.put(key, url)

        # duplicates of the same key share the URL
        for text in texts:
            key = derive_key(text)
            url = self.memo.get(key) if key else None
            if url and text not in result.urls:
                result.urls[text] = url

        logger.info(
            f"Batch: {result.total} texts, {result.cached} cached, {result.generated} generated"
        )
        return result

    async def is_available(self) -> bool:
        """True if either endpoint answers its health probe."""
        for endpoint in (self.primary, self.fallback):
            if await endpoint.health():
                return True
        logger.error("No audio endpoint is available")
        return False

    async def availability(self) -> dict[str, bool]:
        return {
            self.primary.name: await self.primary.health(),
            self.fallback.name: await self.fallback.health(),
        }

    async def cache_stats(self) -> dict | None:
        try:
            return await self.primary.cache_stats()
        except EndpointUnreachable as e:
            logger.warning(f"Cache stats unavailable: {e}")
            return None

    async def close(self) -> None:
        await self.primary.close()
        await self.fallback.close()

    async def _probe_tiers(self, key: str, text: str) -> AudioCacheEntry | None:
        for endpoint, tier in (
            (self.primary, ResolutionTier.PRIMARY_CACHE),
            (self.fallback, ResolutionTier.FALLBACK_CACHE),
        ):
            try:
                hit = await endpoint.exists(key)
            except EndpointUnreachable as e:
                logger.warning(f"[{tier.value}] {endpoint.name} unreachable: {e.reason}")
                continue
            if hit:
                url = endpoint.audio_url(key)
                logger.debug(f"[{tier.value}] hit for '{key}' at {url}")
                return self._entry(key, text, self._locations[id(endpoint)], url, tier)
            logger.debug(f"[{tier.value}] miss for '{key}'")
        return None

    async def _batch_synthesize(self, texts: list[str]) -> BatchSynthesis:
        for endpoint in (self.primary, self.fallback):
            try:
                return await endpoint.batch_synthesize(texts)
            except EndpointUnreachable as e:
                logger.warning(f"[batch] {endpoint.name} failed: {e.reason}")
        raise AudioUnavailable(
            ", ".join(texts), "Audio could not be generated for this batch. Please try again later."
        )

    @staticmethod
    def _entry(
        key: str,
        text: str,
        location: AudioLocation,
        url: str | None,
        tier: ResolutionTier | None,
        cached: bool = True,
    ) -> AudioCacheEntry:
        return AudioCacheEntry(
            key=key,
            source_text=text,
            location=location,
            fetched_at=utcnow(),
            url=url,
            tier=tier,
            cached=cached,
        )
