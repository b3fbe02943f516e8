# Application Audio Package
from .memo import AudioMemo
from .resolver import AudioResolver
from .service import PronunciationService

__all__ = ["AudioMemo", "AudioResolver", "PronunciationService"]
