"""Error taxonomy shared by every layer."""


class LabasError(Exception):
    """Base class for all labas errors."""


class InvalidLevel(LabasError, ValueError):
    """An SRS level outside the supported range reached the scheduler."""

    def __init__(self, level: object):
        self.level = level
        super().__init__(f"SRS level must be an integer in [1, 10], got {level!r}")


class ItemNotFound(LabasError, KeyError):
    """No vocabulary item with the requested id."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(item_id)

    def __str__(self) -> str:
        return f"No vocabulary item with id '{self.item_id}'"


class AudioError(LabasError):
    """Base class for pronunciation audio failures."""


class EndpointUnreachable(AudioError):
    """A single probe or request against one endpoint failed."""

    def __init__(self, endpoint: str, reason: str):
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"{endpoint}: {reason}")


class MalformedResponse(EndpointUnreachable):
    """The endpoint answered with a success status but an unusable body."""


class AudioUnavailable(AudioError):
    """Every resolution tier is exhausted."""

    MESSAGE = "Audio is not available right now. Please try again later."

    def __init__(self, text: str, message: str | None = None):
        self.text = text
        super().__init__(message or self.MESSAGE)


class SynthesisError(AudioError):
    """The synthesis backend could not produce audio."""
