"""In-process key -> URL memo with expiry."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from labas.application.srs.scheduler import utcnow
from labas.domain.constants import MEMO_TTL_HOURS


@dataclass(frozen=True)
class MemoEntry:
    url: str
    stored_at: datetime


class AudioMemo:
    """
    Remembers resolved URLs for ``ttl``; older entries count as misses and are dropped.

    Only the client-side memo expires. Files in the durable store are permanent.
    """

    def __init__(
        self,
        ttl: timedelta = timedelta(hours=MEMO_TTL_HOURS),
        clock: Callable[[], datetime] = utcnow,
    ):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, MemoEntry] = {}

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at > self.ttl:
            del self._entries[key]
            return None
        return entry.url

    def put(self, key: str, url: str) -> None:
        self._entries[key] = MemoEntry(url=url, stored_at=self._clock())

    def discard(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)
