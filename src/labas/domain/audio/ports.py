"""
Ports (interfaces) for audio endpoints, synthesis and playback.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import BatchSynthesis, SynthesisResult


class AudioEndpoint(ABC):
    """
    Port for one durable audio store reachable over the network.

    Primary and fallback endpoints share this contract.

    Implementations:
        - HttpAudioEndpoint: Talks to the labas server (or a compatible one).
    """

    name: str

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """
        Check whether an artifact for ``key`` is already stored.

        Returns:
            True on hit, False on a definite miss.

        Raises:
            EndpointUnreachable: If the endpoint could not answer.
        """

    @abstractmethod
    def audio_url(self, key: str) -> str:
        """URL at which the artifact for ``key`` is (or would be) served."""

    @abstractmethod
    async def synthesize(self, text: str, force: bool = False) -> SynthesisResult:
        """
        Ask the endpoint for audio, synthesizing only if its own cache misses.

        Raises:
            EndpointUnreachable: On network error or non-success status.
            MalformedResponse: On an unusable success body.
        """

    @abstractmethod
    async def batch_synthesize(self, texts: list[str]) -> BatchSynthesis:
        """Synthesize several texts in one request; missing ones only are generated."""

    @abstractmethod
    async def health(self) -> bool:
        """Text-independent availability probe. Never raises."""

    async def cache_stats(self) -> dict | None:
        return None

    async def close(self) -> None:
        pass


class Synthesizer(ABC):
    """Port for the backend that turns text into audio bytes."""

    @abstractmethod
    async def synthesize(self, text: str) -> bytes:
        """
        Raises:
            SynthesisError: If no audio could be produced.
        """


class AudioPlayer(ABC):
    @abstractmethod
    async def play(self, url: str) -> None:
        """Play the audio at ``url`` until it ends."""


class LocalVoice(ABC):
    """
    Port for a voice that speaks without any endpoint (e.g. a platform voice).

    It sounds different from the cached audio, so callers opt in explicitly.
    """

    @abstractmethod
    async def speak(self, text: str) -> None:
        pass
