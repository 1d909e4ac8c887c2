"""Per-thread mining statistics: shares, hashrate and difficulty."""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

_MAX_DOTS = 5
_ACCEPTED_DOT = "●"
_REJECTED_DOT = "○"


class ThreadStats:
    """Thread-safe counters describing one mining thread's performance."""

    def __init__(
        self,
        thread_id: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.thread_id = thread_id
        self._clock = clock
        self._lock = threading.Lock()
        self.start_time = clock()
        self.hashes_computed = 0
        self.shares_found = 0
        self.shares_rejected = 0
        self.last_share_time: Optional[float] = None
        self.hashrate = 0.0
        self.peak_hashrate = 0
        self.best_difficulty = 0
        self.current_difficulty_target = 0

    def record_share(self, difficulty: int, accepted: bool) -> None:
        """Count a share as accepted or rejected and track the best difficulty."""
        with self._lock:
            if accepted:
                self.shares_found += 1
            else:
                self.shares_rejected += 1
            self.last_share_time = self._clock()
            if difficulty > self.best_difficulty:
                self.best_difficulty = difficulty

    def update_hashrate(self, hashes: int) -> None:
        """Add computed hashes and recompute the average and peak hashrate."""
        with self._lock:
            self.hashes_computed += hashes
            elapsed = self._clock() - self.start_time
            if elapsed <= 0.0:
                return
            rate = self.hashes_computed / elapsed
            self.hashrate = rate
            whole_rate = int(rate)
            if whole_rate > self.peak_hashrate:
                self.peak_hashrate = whole_rate

    def reset_peak_hashrate(self) -> None:
        """Forget the peak hashrate, e.g. before a benchmark run."""
        with self._lock:
            self.peak_hashrate = 0

    def share_dots(self) -> str:
        """Up to five filled dots for accepted and five hollow for rejected shares."""
        with self._lock:
            accepted = min(self.shares_found, _MAX_DOTS)
            rejected = min(self.shares_rejected, _MAX_DOTS)
        return _ACCEPTED_DOT * accepted + _REJECTED_DOT * rejected