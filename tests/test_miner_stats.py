import logging

import pytest

from graxil.gpu_info import GpuInfo, GpuMonitor, GpuVendor
from graxil.miner_stats import JobInfo, MinerStats, PoolInfo, ShareRecord
from graxil.system import SystemInfo


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


SYSTEM = SystemInfo(
    cpu_usage=10.0,
    cpu_cores=2,
    cpu_name="Test CPU",
    memory_total=100,
    memory_used=50,
    memory_usage=50.0,
)


def make_stats(threads=2, gpu=None, pool=None):
    clock = FakeClock()
    info = gpu if gpu is not None else GpuInfo()
    monitor = GpuMonitor(detector=lambda: info, clock=clock)
    stats = MinerStats(
        threads,
        clock=clock,
        gpu_monitor=monitor,
        system_info_provider=lambda: SYSTEM,
        pool_info_provider=pool,
    )
    return stats, clock


def test_initial_websocket_data():
    stats, _ = make_stats()
    data = stats.to_websocket_data()
    assert data["current_job"]["job_id"] == "none"
    assert data["accepted_shares"] == 0
    assert data["thread_hashrates"] == [0, 0]
    assert data["algorithm"] == "Sha3x"
    assert data["pool_info"]["pool_address"] == "Not configured"
    assert data["top_shares"] == []
    assert data["system_info"]["cpu_name"] == "Test CPU"
    assert data["gpu_info"]["name"] == "Not detected"


def test_update_job_keeps_last_five():
    stats, clock = make_stats()
    for height in range(8):
        clock.now += 1
        stats.update_job(f"job{height}", height, 100 + height)
    assert [job.block_height for job in stats.recent_jobs] == [3, 4, 5, 6, 7]
    assert stats.current_job == JobInfo("job7", 7, 107, 8)


def test_record_share_found_updates_totals():
    stats, _ = make_stats()
    stats.record_share_found(0, 500, 100, True)
    stats.record_share_found(1, 300, 100, False)
    stats.record_share_found(9, 200, 100, True)
    assert stats.total_work_submitted == 500 + 300 + 200
    assert stats.thread_stats[0].shares_found == 1
    assert stats.thread_stats[1].shares_rejected == 1
    assert stats.thread_stats[0].best_difficulty == 500
    assert len(stats.recent_shares) == 3


def test_recent_shares_capped_and_top_shares_sorted():
    stats, _ = make_stats()
    for difficulty in range(1, 151):
        stats.record_share_found(0, difficulty, 1, True)
    assert len(stats.recent_shares) == 100
    data = stats.to_websocket_data()
    assert len(data["recent_shares"]) == 20
    assert data["recent_shares"][0]["difficulty"] == 150
    assert data["top_shares"] == [150, 149, 148, 147, 146]


def test_average_luck():
    stats, _ = make_stats()
    stats.record_share_found(0, 200, 100, True)
    stats.record_share_found(0, 100, 100, True)
    assert stats.to_websocket_data()["average_luck"] == pytest.approx(1.5)


def test_share_record_luck_zero_target():
    assert ShareRecord(0.0, 0, 10, 0, True).luck == float("inf")


def test_total_hashrate_and_share_rate():
    stats, clock = make_stats()
    stats.hashes_computed = 1000
    stats.shares_submitted = 30
    clock.now += 60
    assert stats.total_hashrate() * 60 == pytest.approx(1000)
    assert stats.share_rate_per_minute() == pytest.approx(30)


def test_hashrate_zero_without_elapsed_time():
    stats, _ = make_stats()
    stats.hashes_computed = 1000
    assert stats.total_hashrate() == 0.0
    assert stats.avg_hashrate_per_thread() == 0.0


def test_active_threads_and_difficulty():
    stats, clock = make_stats(threads=3)
    clock.now += 10
    stats.thread_stats[1].update_hashrate(5000)
    stats.thread_stats[0].current_difficulty_target = 40
    stats.thread_stats[2].current_difficulty_target = 90
    assert stats.active_thread_count() == 1
    assert stats.current_difficulty() == 90
    data = stats.to_websocket_data()
    assert data["active_threads"] == 1
    assert data["current_difficulty"] == 90


def test_acceptance_rate_and_avg_share_time():
    stats, clock = make_stats()
    stats.shares_submitted = 4
    stats.shares_accepted = 4
    clock.now += 40
    data = stats.to_websocket_data()
    assert data["acceptance_rate"] == pytest.approx(100.0)
    assert data["avg_share_time"] * 4 == pytest.approx(40)


def test_time_since_last_share():
    stats, clock = make_stats()
    stats.record_share_found(0, 10, 10, True)
    clock.now += 25
    assert stats.to_websocket_data()["time_since_last_share"] == 25


def test_hashrate_history_prunes_old_samples():
    stats, clock = make_stats()
    stats.update_hashrate_history(10)
    clock.now += 301
    stats.update_hashrate_history(20)
    assert list(stats.hashrate_history) == [(clock.now, 20)]


def test_activity_capped():
    stats, _ = make_stats()
    for index in range(60):
        stats.add_activity(f"event {index}")
    assert len(stats.recent_activity) == 50
    assert stats.recent_activity[-1][1] == "event 59"
    assert stats.recent_activity[0][1] == "event 10"


def test_pool_info_provider():
    pool = PoolInfo("pool.example.com:4000", True, 25, 1, 60)
    stats, _ = make_stats(pool=lambda: pool)
    assert stats.to_websocket_data()["pool_info"] == pool.to_dict()


def test_dashboard_lines_without_gpu():
    stats, _ = make_stats()
    lines = stats.dashboard_lines("abc123")
    assert lines[0] == "📊 MINER DASHBOARD - abc123"
    assert "├─ Top 5 Shares: None" in lines
    assert lines[-1] == "└─ GPU Status: No GPU detected"


def test_dashboard_lines_with_gpu():
    gpu = GpuInfo(
        detected=True,
        name="Test GPU",
        utilization=87.3,
        count=1,
        vendor=GpuVendor.NVIDIA,
    )
    stats, _ = make_stats(gpu=gpu)
    stats.record_share_found(0, 2000, 1000, True)
    lines = stats.dashboard_lines("id")
    assert lines[-1] == "└─ GPU Status: Test GPU (87%)"
    assert "├─ Top 5 Shares: 2.0K" in lines


def test_display_dashboard_logs(caplog):
    stats, _ = make_stats()
    with caplog.at_level(logging.INFO, logger="graxil.miner_stats"):
        stats.display_dashboard("dash")
    messages = [record.getMessage() for record in caplog.records]
    assert messages == stats.dashboard_lines("dash")