from datetime import timedelta

from labas.application.audio.memo import AudioMemo


class FakeClock:
    def __init__(self, start):
        self.current = start

    def __call__(self):
        return self.current


def test_hit_within_ttl(now):
    clock = FakeClock(now)
    memo = AudioMemo(clock=clock)
    memo.put("labas", "http://a/labas.mp3")

    clock.current = now + timedelta(hours=23)
    assert memo.get("labas") == "http://a/labas.mp3"
    assert "labas" in memo


def test_stale_entry_is_removed(now):
    clock = FakeClock(now)
    memo = AudioMemo(ttl=timedelta(hours=24), clock=clock)
    memo.put("labas", "http://a/labas.mp3")

    clock.current = now + timedelta(hours=24, seconds=1)
    assert memo.get("labas") is None
    assert len(memo) == 0


def test_put_refreshes_timestamp(now):
    clock = FakeClock(now)
    memo = AudioMemo(ttl=timedelta(hours=1), clock=clock)
    memo.put("k", "u1")
    clock.current = now + timedelta(minutes=50)
    memo.put("k", "u2")
    clock.current = now + timedelta(minutes=100)
    assert memo.get("k") == "u2"


def test_discard_and_clear(now):
    memo = AudioMemo(clock=lambda: now)
    memo.put("a", "1")
    memo.put("b", "2")
    memo.discard("a")
    memo.discard("missing")
    assert memo.get("a") is None
    memo.clear()
    assert len(memo) == 0
