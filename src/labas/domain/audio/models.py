"""
Domain models for pronunciation audio resolution.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class AudioLocation(str, Enum):
    """Where a resolved URL came from."""

    LOCAL_CACHE = "local-cache"
    SERVER_A = "server-A"
    SERVER_B = "server-B"
    MISS = "miss"


class ResolutionTier(str, Enum):
    """The ordered stages tried by the resolver."""

    MEMO = "memo"
    PRIMARY_CACHE = "primary-cache"
    FALLBACK_CACHE = "fallback-cache"
    PRIMARY_SYNTH = "primary-synth"
    FALLBACK_SYNTH = "fallback-synth"


@dataclass(frozen=True)
class AudioCacheEntry:
    """
    Outcome of resolving one text.

    Attributes:
        key: derive_key(source_text).
        source_text: The text as requested.
        location: Which store answered, or MISS.
        fetched_at: When the URL was obtained.
        url: Playable audio URL (None on MISS).
        tier: The resolution tier that produced the URL.
        cached: True unless fresh synthesis was performed.
    """

    key: str
    source_text: str
    location: AudioLocation
    fetched_at: datetime
    url: str | None = None
    tier: ResolutionTier | None = None
    cached: bool = True


@dataclass(frozen=True)
class SynthesisResult:
    """Response of an endpoint's synthesize call."""

    key: str
    url: str
    cached: bool


@dataclass(frozen=True)
class BatchSynthesis:
    """
    Response of an endpoint's batch synthesize call.

    Attributes:
        urls: key -> URL for every text the endpoint has audio for.
        cached: Texts the endpoint already had stored.
        generated: Texts the endpoint synthesized for this request.
    """

    urls: dict[str, str]
    cached: int = 0
    generated: int = 0


@dataclass
class BatchResult:
    """Outcome of resolving a batch of texts."""

    total: int = 0
    cached: int = 0
    generated: int = 0
    urls: dict[str, str] = field(default_factory=dict)  # source text -> URL


@dataclass(frozen=True)
class StoredAudio:
    """Server-side record of one synthesized file."""

    key: str
    filename: str
    cached: bool


@dataclass
class BatchSynthesisReport:
    total: int = 0
    cached: int = 0
    generated: int = 0
    failed: int = 0
