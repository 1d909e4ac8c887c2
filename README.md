# graxil

Bookkeeping for a SHA3x GPU miner: GPU and host monitoring, per-thread and miner-wide
statistics, dashboard output and nonce encoding.

## Modules

- **`graxil.gpu_info`**: GPU detection and readings.
  - `detect_gpu()` runs `nvidia-smi`, parses the first GPU's line and returns a `GpuInfo`.
    If `nvidia-smi` is missing, fails, prints nothing or prints something unparsable, it
    returns an undetected `GpuInfo()` instead.
  - `parse_nvidia_smi_line(line)` turns one CSV line into
    `(name, driver, temperature, power, memory_used, memory_total, utilization)`.
    `N/A`, `[Not Supported]`, `[Unknown Error]` and empty fields become `None`. It raises
    `GpuInfoParseError`, a `ValueError`, for fewer than seven fields or bad numbers.
  - `GpuInfo` is a dataclass with display helpers: `format_memory()`,
    `format_memory_usage()`, `format_temperature()`, `format_power()`,
    `format_utilization()`, `status_string()`, `memory_pressure()`, `thermal_status()`,
    `is_available()`, `is_under_load()` (above 80%), `is_temperature_safe()` (below 85°C)
    and `to_dict()`.
  - `GpuVendor` is an enum: `NVIDIA`, `AMD`, `INTEL`, `UNKNOWN`.
  - `GpuMonitor(update_interval=5.0, detector=detect_gpu, clock=time.monotonic)` caches a
    detection. `info()` returns a copy and refreshes first when the interval has passed.
    `force_update()` refreshes at once.
- **`graxil.thread_stats`**: `ThreadStats(thread_id)` keeps a thread-safe count of one
  thread's shares. `record_share(difficulty, accepted)` counts a share and keeps the best
  difficulty. `update_hashrate(hashes)` updates `hashrate` and `peak_hashrate`.
  `reset_peak_hashrate()` sets the peak back to zero. `share_dots()` returns up to five
  `●` and five `○`.
- **`graxil.miner_stats`**: `MinerStats(num_threads, *, algorithm="Sha3x", clock=...,
  gpu_monitor=None, system_info_provider=collect_system_info, pool_info_provider=None)`.
  - It keeps one `ThreadStats` per thread, plus share counters, the last 100 shares as
    `ShareRecord`s, the last 50 activity messages, the last 5 jobs as `JobInfo`s and five
    minutes of hashrate history.
  - Methods: `update_job()`, `add_activity()`, `record_share_found()`,
    `update_hashrate_history()`, `total_hashrate()`, `active_thread_count()`,
    `avg_hashrate_per_thread()`, `share_rate_per_minute()` and `current_difficulty()`.
  - `to_websocket_data()` returns a JSON-ready dictionary for a web dashboard. It holds
    `WebSocketShare`, `JobInfo`, `SystemInfo`, `PoolInfo` and `GpuInfo` data as nested
    dictionaries.
  - `dashboard_lines(dashboard_id)` returns the console dashboard as text lines.
    `display_dashboard(dashboard_id)` logs those lines at INFO level.
  - Without a `gpu_monitor`, it creates a `GpuMonitor`, which runs `nvidia-smi` straight
    away.
- **`graxil.system`**: `collect_system_info()` returns a `SystemInfo` through psutil. It
  holds CPU usage, core count, CPU name, memory, OS name, kernel version, hostname and
  temperatures. `pick_temperatures(readings)` takes `(label, temperature)` pairs. It
  returns the first temperature whose label mentions cpu, core, package or processor,
  together with the highest positive reading.
- **`graxil.formatting`**: `format_hashrate`, `format_duration` (takes seconds) and
  `format_number`.
- **`graxil.nonce`**:
  - `nonce_space_start(thread_id)` returns `thread_id * 1_000_000_000`.
  - `compose_nonce(nonce, extranonce=None)` returns the hex of the 8-byte little-endian
    nonce. When a pool extra nonce (XN) is given, its two bytes come first, followed by
    the low six bytes of the nonce. An extra nonce that is not valid hex becomes two zero
    bytes.

## Examples

```python
from graxil.formatting import format_hashrate, format_number
from graxil.nonce import compose_nonce

format_hashrate(385_000_000.0)   # '385.00 MH/s'
format_number(1500)              # '1.5K'
compose_nonce(1, "ad49")         # 'ad49010000000000'
```

```python
from graxil.gpu_info import parse_nvidia_smi_line

parse_nvidia_smi_line("NVIDIA GeForce RTX 4090, 535.104.05, 65, 350.2, 8192, 24576, 85")
# ('NVIDIA GeForce RTX 4090', '535.104.05', 65.0, 350.2, 8192, 24576, 85.0)
```

## What it does not do

graxil does no mining. It has:

- no hashing kernel and no GPU compute engine;
- no device enumeration and no autotuning;
- no mining loop;
- no pool connection or stratum protocol;
- no web server and no command-line program.

It keeps the statistics and formats the output that such a miner would use.

## Requirements

Python 3.10 or later and psutil. GPU readings need `nvidia-smi` on the `PATH`. Without
it, detection reports that no GPU is present.