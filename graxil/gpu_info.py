"""GPU detection through ``nvidia-smi`` and formatting helpers for dashboards."""

from __future__ import annotations

import enum
import logging
import re
import subprocess
import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, Optional

logger = logging.getLogger(__name__)

_NVIDIA_QUERY = (
    "--query-gpu=name,driver_version,temperature.gpu,power.draw,"
    "memory.used,memory.total,utilization.gpu"
)
_NVIDIA_FORMAT = "--format=csv,noheader,nounits"
_MISSING_VALUES = frozenset({"N/A", "[Not Supported]", "", "[Unknown Error]"})
_UNSIGNED_RE = re.compile(r"\+?[0-9]+")


class GpuVendor(enum.Enum):
    """Vendor of a detected GPU."""

    NVIDIA = "NVIDIA"
    AMD = "AMD"
    INTEL = "Intel"
    UNKNOWN = "Unknown"


class GpuInfoParseError(ValueError):
    """Raised when a line of ``nvidia-smi`` output cannot be parsed."""


NvidiaSmiFields = tuple[
    str,
    str,
    Optional[float],
    Optional[float],
    Optional[int],
    Optional[int],
    Optional[float],
]


def _parse_optional_float(value: str, field_name: str) -> Optional[float]:
    if value in _MISSING_VALUES:
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise GpuInfoParseError(
            f"Failed to parse {field_name} '{value}': {exc}"
        ) from exc


def _parse_optional_u64(value: str, field_name: str) -> Optional[int]:
    if value in _MISSING_VALUES:
        return None
    if not _UNSIGNED_RE.fullmatch(value):
        raise GpuInfoParseError(
            f"Failed to parse {field_name} '{value}': invalid digit found in string"
        )
    number = int(value)
    if number >= 2**64:
        raise GpuInfoParseError(
            f"Failed to parse {field_name} '{value}': number too large"
        )
    return number


def parse_nvidia_smi_line(line: str) -> NvidiaSmiFields:
    """Parse one CSV line of ``nvidia-smi`` output.

    Returns ``(name, driver, temperature, power, memory_used, memory_total,
    utilization)``; unsupported readings come back as ``None``.
    """
    parts = [part.strip() for part in line.split(",")]
    if len(parts) < 7:
        raise GpuInfoParseError(
            "Invalid nvidia-smi output format, expected 7 fields "
            f"but got {len(parts)}: {line}"
        )
    return (
        parts[0],
        parts[1],
        _parse_optional_float(parts[2], "temperature"),
        _parse_optional_float(parts[3], "power"),
        _parse_optional_u64(parts[4], "memory_used"),
        _parse_optional_u64(parts[5], "memory_total"),
        _parse_optional_float(parts[6], "utilization"),
    )


def _saturate(value: float, upper: int) -> int:
    if value != value:  # NaN
        return 0
    return max(0, min(upper, int(value)))


@dataclass
class GpuInfo:
    """Snapshot of the primary GPU's identity and current readings."""

    detected: bool = False
    name: str = "Not detected"
    driver_version: Optional[str] = None
    temperature: Optional[float] = None
    power_usage: Optional[float] = None
    memory_used: Optional[int] = None
    memory_total: Optional[int] = None
    utilization: Optional[float] = None
    count: int = 0
    vendor: GpuVendor = GpuVendor.UNKNOWN
    error_message: Optional[str] = None

    def format_memory(self) -> str:
        """Memory as ``"used / total GB"``."""
        if self.memory_used is None or self.memory_total is None:
            return "-- / -- GB"
        return f"{self.memory_used / 1024.0:.1f} / {self.memory_total / 1024.0:.1f} GB"

    def format_memory_usage(self) -> str:
        """Memory usage as a percentage."""
        if self.memory_used is None or not self.memory_total:
            return "-- %"
        return f"{self.memory_used / self.memory_total * 100.0:.1f}%"

    def format_temperature(self) -> str:
        if self.temperature is None:
            return "--°C"
        return f"{self.temperature:.0f}°C"

    def format_power(self) -> str:
        if self.power_usage is None:
            return "-- W"
        return f"{self.power_usage:.0f} W"

    def format_utilization(self) -> str:
        if self.utilization is None:
            return "--"
        return f"{self.utilization:.0f}%"

    def is_available(self) -> bool:
        """True when a GPU was detected with a known vendor."""
        return (
            self.detected
            and self.name != "Not detected"
            and self.vendor is not GpuVendor.UNKNOWN
        )

    def is_under_load(self) -> bool:
        """True when utilization is above 80%."""
        return self.utilization is not None and self.utilization > 80.0

    def status_string(self) -> str:
        """One-line human readable status."""
        if not self.is_available():
            return "No GPU detected"
        parts = [self.name]
        if self.utilization is not None:
            parts.append(f"{_saturate(self.utilization, 255)}% load")
        if self.temperature is not None:
            parts.append(f"{_saturate(self.temperature, 255)}°C")
        if self.power_usage is not None:
            parts.append(f"{_saturate(self.power_usage, 65535)}W")
        return " | ".join(parts)

    def memory_pressure(self) -> str:
        """Memory pressure indicator."""
        if self.memory_used is None or not self.memory_total:
            return "❓ Unknown"
        percent = self.memory_used / self.memory_total * 100.0
        if percent >= 90.0:
            return "🔴 High"
        if percent >= 70.0:
            return "🟡 Medium"
        return "🟢 Low"

    def is_temperature_safe(self) -> bool:
        """True below 85°C; unknown temperature counts as safe."""
        return self.temperature is None or self.temperature < 85.0

    def thermal_status(self) -> str:
        """Thermal status indicator."""
        if self.temperature is None:
            return "❓ Unknown"
        if self.temperature >= 90.0:
            return "🔥 Hot"
        if self.temperature >= 80.0:
            return "🟡 Warm"
        return "❄️ Cool"

    def to_dict(self) -> dict:
        """Plain dictionary suitable for JSON serialisation."""
        return {
            "detected": self.detected,
            "name": self.name,
            "driver_version": self.driver_version,
            "temperature": self.temperature,
            "power_usage": self.power_usage,
            "memory_used": self.memory_used,
            "memory_total": self.memory_total,
            "utilization": self.utilization,
            "count": self.count,
            "vendor": self.vendor.value,
            "error_message": self.error_message,
        }


def _detect_nvidia() -> Optional[GpuInfo]:
    try:
        result = subprocess.run(
            ["nvidia-smi", _NVIDIA_QUERY, _NVIDIA_FORMAT],
            capture_output=True,
            check=False,
        )
    except OSError as exc:
        logger.debug("nvidia-smi not available: %s", exc)
        return None

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace")
        logger.debug("nvidia-smi failed: %s", stderr)
        return None

    stdout = result.stdout.decode("utf-8", errors="replace")
    lines = [line for line in stdout.strip().split("\n") if line.strip()]
    if not lines:
        logger.debug("No NVIDIA GPU detected")
        return None

    try:
        name, driver, temp, power, used, total, util = parse_nvidia_smi_line(lines[0])
    except GpuInfoParseError as exc:
        logger.warning("Failed to parse nvidia-smi output: %s", exc)
        return None

    return GpuInfo(
        detected=True,
        name=name,
        driver_version=driver,
        temperature=temp,
        power_usage=power,
        memory_used=used,
        memory_total=total,
        utilization=util,
        count=len(lines),
        vendor=GpuVendor.NVIDIA,
    )


def detect_gpu() -> GpuInfo:
    """Detect the primary GPU, falling back to an undetected ``GpuInfo``."""
    logger.debug("Starting GPU detection")
    info = _detect_nvidia()
    if info is not None:
        logger.info("NVIDIA GPU detected: %s", info.name)
        return info
    logger.debug("No compatible GPU detected")
    return GpuInfo()


class GpuMonitor:
    """Caches GPU information and refreshes it at most once per interval."""

    def __init__(
        self,
        update_interval: float = 5.0,
        detector: Callable[[], GpuInfo] = detect_gpu,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._detector = detector
        self._clock = clock
        self.update_interval = update_interval
        self._lock = threading.Lock()
        self._info = detector()
        self._last_update = clock()

    def info(self) -> GpuInfo:
        """Current GPU info, refreshed first if the interval has passed."""
        with self._lock:
            stale = self._clock() - self._last_update >= self.update_interval
        if stale:
            self.force_update()
        with self._lock:
            return replace(self._info)

    def force_update(self) -> None:
        """Refresh GPU information immediately."""
        fresh = self._detector()
        with self._lock:
            self._info = fresh
            self._last_update = self._clock()
        if fresh.is_available():
            logger.debug("GPU monitor updated: %s", fresh.status_string())