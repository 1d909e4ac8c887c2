"""Miner-wide statistics: shares, hashrate, jobs, activity and dashboards."""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import deque
from dataclasses import asdict, dataclass
from typing import Callable, Optional

from graxil.formatting import format_duration, format_hashrate, format_number
from graxil.gpu_info import GpuMonitor
from graxil.system import SystemInfo, collect_system_info
from graxil.thread_stats import ThreadStats

logger = logging.getLogger(__name__)

_MAX_RECENT_SHARES = 100
_MAX_ACTIVITY = 50
_MAX_RECENT_JOBS = 5
_HISTORY_WINDOW_SECS = 300.0
_WEBSOCKET_SHARES = 20
_TOP_SHARES = 5


def _ratio(numerator: float, denominator: float) -> float:
    if denominator:
        return numerator / denominator
    if numerator:
        return math.inf
    return math.nan


@dataclass
class JobInfo:
    """A mining job as shown on the dashboard."""

    job_id: str
    block_height: int
    difficulty: int
    timestamp: int  # seconds since miner start

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PoolInfo:
    """Pool connection status."""

    pool_address: str = "Not configured"
    is_connected: bool = False
    latency_ms: Optional[int] = None
    connection_attempts: int = 0
    uptime_seconds: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ShareRecord:
    """A share found by a mining thread."""

    time: float
    thread_id: int
    difficulty: int
    target: int
    accepted: bool

    @property
    def luck(self) -> float:
        """Share difficulty relative to its target."""
        return _ratio(self.difficulty, self.target)


@dataclass
class WebSocketShare:
    """A recent share as sent to the web dashboard."""

    thread_id: int
    difficulty: int
    target: int
    timestamp: int  # seconds since the share was found
    luck_factor: float

    def to_dict(self) -> dict:
        return asdict(self)


class MinerStats:
    """Thread-safe statistics for the whole miner."""

    def __init__(
        self,
        num_threads: int,
        *,
        algorithm: str = "Sha3x",
        clock: Callable[[], float] = time.monotonic,
        gpu_monitor: Optional[GpuMonitor] = None,
        system_info_provider: Callable[[], SystemInfo] = collect_system_info,
        pool_info_provider: Optional[Callable[[], PoolInfo]] = None,
    ) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self.start_time = clock()
        self.algorithm = algorithm
        self.shares_submitted = 0
        self.shares_accepted = 0
        self.shares_rejected = 0
        self.hashes_computed = 0
        self.total_work_submitted = 0
        self.thread_stats = [ThreadStats(i, clock=clock) for i in range(num_threads)]
        self.recent_shares: deque[ShareRecord] = deque(maxlen=_MAX_RECENT_SHARES)
        self.recent_activity: deque[tuple[float, str]] = deque(maxlen=_MAX_ACTIVITY)
        self.hashrate_history: deque[tuple[float, int]] = deque()
        self.current_job = JobInfo("none", 0, 0, 0)
        self.recent_jobs: deque[JobInfo] = deque(maxlen=_MAX_RECENT_JOBS)
        self.gpu_monitor = gpu_monitor if gpu_monitor is not None else GpuMonitor(clock=clock)
        self.system_info_provider = system_info_provider
        self.pool_info_provider = pool_info_provider

    def _elapsed(self) -> float:
        return self._clock() - self.start_time

    def update_job(self, job_id: str, block_height: int, difficulty: int) -> None:
        """Make this the current job and add it to the recent jobs."""
        job = JobInfo(job_id, block_height, difficulty, int(self._elapsed()))
        with self._lock:
            self.current_job = job
            self.recent_jobs.append(JobInfo(**asdict(job)))
        logger.debug("Updated job: %s", job)

    def add_activity(self, message: str) -> None:
        """Append a line to the activity log, keeping the last 50."""
        with self._lock:
            self.recent_activity.append((self._clock(), message))

    def record_share_found(
        self, thread_id: int, difficulty: int, target: int, accepted: bool
    ) -> None:
        """Record a share found by a thread and add its difficulty to total work."""
        if 0 <= thread_id < len(self.thread_stats):
            self.thread_stats[thread_id].record_share(difficulty, accepted)
        with self._lock:
            self.total_work_submitted += difficulty
            self.recent_shares.append(
                ShareRecord(self._clock(), thread_id, difficulty, target, accepted)
            )

    def update_hashrate_history(self, total_hashes: int) -> None:
        """Add a hash count sample and drop samples older than five minutes."""
        now = self._clock()
        cutoff = now - _HISTORY_WINDOW_SECS
        with self._lock:
            self.hashrate_history.append((now, total_hashes))
            while self.hashrate_history and self.hashrate_history[0][0] < cutoff:
                self.hashrate_history.popleft()

    def total_hashrate(self) -> float:
        """Average hashes per second since start."""
        elapsed = self._elapsed()
        return self.hashes_computed / elapsed if elapsed > 0.0 else 0.0

    def active_thread_count(self) -> int:
        """Number of threads with a positive hashrate."""
        return sum(1 for stats in self.thread_stats if stats.hashrate > 0.0)

    def avg_hashrate_per_thread(self) -> float:
        active = self.active_thread_count()
        return self.total_hashrate() / active if active else 0.0

    def share_rate_per_minute(self) -> float:
        minutes = self._elapsed() / 60.0
        return self.shares_submitted / minutes if minutes > 0.0 else 0.0

    def current_difficulty(self) -> int:
        """Highest difficulty target across all threads."""
        return max(
            (stats.current_difficulty_target for stats in self.thread_stats), default=0
        )

    def _work_efficiency(self) -> float:
        difficulty = self.current_difficulty()
        expected = max(self.hashes_computed / difficulty, 1.0) if difficulty > 0 else 1.0
        return self.shares_accepted / expected * 100.0

    def _acceptance_rate(self) -> float:
        if self.shares_submitted > 0:
            return self.shares_accepted / self.shares_submitted * 100.0
        return 0.0

    @staticmethod
    def _average_luck(shares: list[ShareRecord]) -> float:
        if not shares:
            return 0.0
        return sum(share.luck for share in shares) / len(shares)

    @staticmethod
    def _top_shares(shares: list[ShareRecord]) -> list[int]:
        return sorted((share.difficulty for share in shares), reverse=True)[:_TOP_SHARES]

    def _pool_info(self) -> PoolInfo:
        if self.pool_info_provider is None:
            return PoolInfo()
        return self.pool_info_provider()

    def to_websocket_data(self) -> dict:
        """Everything the web dashboard shows, as a JSON-ready dictionary."""
        gpu_info = self.gpu_monitor.info()
        now = self._clock()
        session = now - self.start_time
        with self._lock:
            shares = list(self.recent_shares)
            current_job = JobInfo(**asdict(self.current_job))
            recent_jobs = [JobInfo(**asdict(job)) for job in self.recent_jobs]

        recent = [
            WebSocketShare(
                thread_id=share.thread_id,
                difficulty=share.difficulty,
                target=share.target,
                timestamp=int(now - share.time),
                luck_factor=share.luck,
            )
            for share in reversed(shares[-_WEBSOCKET_SHARES:])
        ]
        time_since_last = int(now - shares[-1].time) if shares else 0
        submitted = self.shares_submitted
        avg_share_time = session / submitted if submitted > 0 else 0.0
        thread_hashrates = [int(stats.hashrate) for stats in self.thread_stats]
        hashrate = int(self.total_hashrate())

        return {
            "current_hashrate": hashrate,
            "session_average": hashrate,
            "accepted_shares": self.shares_accepted,
            "submitted_shares": submitted,
            "rejected_shares": self.shares_rejected,
            "work_efficiency": self._work_efficiency(),
            "average_luck": self._average_luck(shares),
            "uptime": int(session),
            "thread_hashrates": thread_hashrates,
            "algorithm": self.algorithm,
            "active_threads": self.active_thread_count(),
            "share_rate": self.share_rate_per_minute(),
            "total_work": self.total_work_submitted,
            "current_difficulty": self.current_difficulty(),
            "current_job": current_job.to_dict(),
            "recent_jobs": [job.to_dict() for job in recent_jobs],
            "session_time": int(session),
            "time_since_last_share": time_since_last,
            "avg_share_time": avg_share_time,
            "acceptance_rate": self._acceptance_rate(),
            "recent_shares": [share.to_dict() for share in recent],
            "top_shares": self._top_shares(shares),
            "system_info": self.system_info_provider().to_dict(),
            "pool_info": self._pool_info().to_dict(),
            "gpu_info": gpu_info.to_dict(),
        }

    def dashboard_lines(self, dashboard_id: str) -> list[str]:
        """Text lines of the console dashboard."""
        now = self._clock()
        session = now - self.start_time
        with self._lock:
            shares = list(self.recent_shares)
        top = self._top_shares(shares)
        top_text = " | ".join(format_number(d) for d in top) if top else "None"
        since_last = now - shares[-1].time if shares else 0.0
        submitted = self.shares_submitted
        avg_share_time = session / submitted if submitted > 0 else 0.0
        hashrate = self.total_hashrate()

        gpu = self.gpu_monitor.info()
        gpu_status = (
            f"{gpu.name} ({gpu.format_utilization()})"
            if gpu.is_available()
            else "No GPU detected"
        )

        return [
            f"📊 MINER DASHBOARD - {dashboard_id}",
            f"├─ Algorithm: {self.algorithm}",
            f"├─ Current Hashrate: {format_hashrate(hashrate)}",
            f"├─ Session Avg: {format_hashrate(hashrate)}",
            f"├─ Total Work: {format_number(self.total_work_submitted)}",
            f"├─ Top 5 Shares: {top_text}",
            f"├─ Shares: {self.shares_accepted}/{submitted} "
            f"({self._acceptance_rate():.1f}% accepted)",
            f"├─ Rejected Shares: {self.shares_rejected}",
            f"├─ Work Efficiency: {self._work_efficiency():.1f}%",
            f"├─ Average Luck: {self._average_luck(shares):.2f}x",
            f"├─ Share Rate: {self.share_rate_per_minute():.2f} shares/min",
            f"├─ Time Since Last Share: {format_duration(since_last)}",
            f"├─ Average Share Time: {format_duration(avg_share_time)}",
            f"├─ Session Time: {format_duration(session)}",
            f"├─ Active Threads: {self.active_thread_count()}/{len(self.thread_stats)}",
            f"├─ Current Difficulty: {format_number(self.current_difficulty())}",
            f"└─ GPU Status: {gpu_status}",
        ]

    def display_dashboard(self, dashboard_id: str) -> None:
        """Log the console dashboard."""
        for line in self.dashboard_lines(dashboard_id):
            logger.info("%s", line)