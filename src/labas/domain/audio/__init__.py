# Domain Audio Package
from .keys import audio_filename, derive_key, is_valid_key
from .models import (
    AudioCacheEntry,
    AudioLocation,
    BatchResult,
    BatchSynthesis,
    BatchSynthesisReport,
    ResolutionTier,
    StoredAudio,
    SynthesisResult,
)
from .ports import AudioEndpoint, AudioPlayer, LocalVoice, Synthesizer

__all__ = [
    "derive_key",
    "is_valid_key",
    "audio_filename",
    "AudioCacheEntry",
    "AudioLocation",
    "ResolutionTier",
    "BatchResult",
    "BatchSynthesis",
    "BatchSynthesisReport",
    "StoredAudio",
    "SynthesisResult",
    "AudioEndpoint",
    "Synthesizer",
    "AudioPlayer",
    "LocalVoice",
]
