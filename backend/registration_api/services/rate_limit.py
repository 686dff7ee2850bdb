import threading
import time
from collections import deque
from collections.abc import Callable

from registration_api.core.errors import RateLimitError


class SlidingWindowRateLimiter:
    """At most `limit` hits per key within any trailing `window_seconds`.

    Keys whose hits have all left the window are dropped, so memory tracks
    the addresses active in the last window only.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def _sweep(self, now: float, horizon: float) -> None:
        # Newest hit is last; a key is expired when even that one is out of the window.
        expired = [key for key, hits in self._hits.items() if not hits or hits[-1] <= horizon]
        for key in expired:
            del self._hits[key]
        self._last_sweep = now

    def hit(self, key: str) -> None:
        now = self._clock()
        horizon = now - self.window_seconds

        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now, horizon)

            hits = self._hits.get(key)
            if hits is not None:
                while hits and hits[0] <= horizon:
                    hits.popleft()
                if not hits:
                    del self._hits[key]
                    hits = None

            if hits is not None and len(hits) >= self.limit:
                raise RateLimitError(retry_after=hits[0] + self.window_seconds - now)

            if hits is None:
                hits = self._hits[key] = deque()
            hits.append(now)

    def remaining(self, key: str) -> int:
        horizon = self._clock() - self.window_seconds
        with self._lock:
            hits = self._hits.get(key, ())
            return max(0, self.limit - sum(1 for t in hits if t > horizon))

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
